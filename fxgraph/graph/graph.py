"""
Effect Graph

Owns all nodes and all slots of an effect graph in two flat lists, and
arbitrates slot creation, linking and unlinking.
"""

from typing import Iterator, List, Optional, Tuple
import logging

from .exceptions import GraphContractError
from .node import Node, NodeId, Slot, SlotId

logger = logging.getLogger(__name__)


class Graph:
    """
    Effect graph of nodes connected through their slots.

    Nodes and slots are only ever appended: ids stay valid for the lifetime of
    the graph. Slots refer to their node and to linked slots by id.

    Link rules:
    - An output slot may feed any number of input slots; linking the same
      pair twice keeps a single entry.
    - An input slot reads from at most one output slot; a new link replaces
      the previous one.
    - Cycles are not rejected here. Consumers evaluating the graph in
      dependency order must detect them.

    Example usage:
        graph = Graph()
        time = graph.add_node(TimeNode())
        mul = graph.add_node(MulNode())

        graph.link(graph.output_slots(time)[1], graph.input_slots(mul)[0])
    """

    def __init__(self):
        self._nodes: List[Node] = []
        self._slots: List[Slot] = []

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self._nodes)}, slots={self._slots!r})"

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def slot_count(self) -> int:
        return len(self._slots)

    def add_node(self, node: Node) -> NodeId:
        """
        Add a node to the graph.

        One slot is created per slot declared by the node, in declaration order.

        Args:
            node: Node to add; the graph takes ownership of it

        Returns:
            Identifier of the new node
        """
        node_id = NodeId(len(self._nodes) + 1)

        for slot_def in node.slots():
            slot_id = SlotId(len(self._slots) + 1)
            self._slots.append(Slot(node_id, slot_id, slot_def))

        self._nodes.append(node)

        logger.debug(f"Added node {node_id.id}: {node!r} with {len(node.slots())} slots")
        return node_id

    def link(self, output: SlotId, input: SlotId) -> None:
        """
        Link an output slot of a node to an input slot of another node.

        Any previous link of the input slot is replaced.

        Raises:
            GraphContractError: If an id is invalid or a slot has the wrong direction
        """
        out_slot = self.get_slot(output)
        in_slot = self.get_slot(input)
        if not out_slot.is_output() or not in_slot.is_input():
            raise GraphContractError(
                f"Cannot link slot {output.id} ({out_slot.dir.value}) "
                f"to slot {input.id} ({in_slot.dir.value}): "
                f"links go from an output slot to an input slot"
            )

        previous = in_slot.linked_slots
        if previous and previous[0] != output:
            self.get_slot(previous[0])._unlink_from(input)
            logger.debug(f"Replaced link {previous[0].id} -> {input.id}")

        out_slot._link_to(input)
        in_slot._link_input(output)
        logger.debug(f"Linked slot {output.id} -> {input.id}")

    def unlink(self, output: SlotId, input: SlotId) -> bool:
        """
        Unlink an output slot from an input slot.

        Returns:
            True if the two slots were linked, False if nothing changed

        Raises:
            GraphContractError: If an id is invalid or a slot has the wrong direction
        """
        out_slot = self.get_slot(output)
        in_slot = self.get_slot(input)
        if not in_slot.is_input():
            raise GraphContractError(f"Slot {input.id} ('{in_slot.name}') is not an input slot")
        if not out_slot._unlink_from(input):
            return False
        in_slot._unlink_input()
        logger.debug(f"Unlinked slot {output.id} -> {input.id}")
        return True

    def unlink_all(self, slot_id: SlotId) -> None:
        """
        Unlink all remote slots from a given slot.

        Works for both directions: the remote ends are updated as well.
        """
        slot = self.get_slot(slot_id)
        for remote_id in slot._take_links():
            remote = self.get_slot(remote_id)
            if remote.is_input():
                remote._unlink_input()
            else:
                remote._unlink_from(slot_id)
        logger.debug(f"Unlinked all links of slot {slot_id.id}")

    def slots(self, node_id: NodeId) -> List[SlotId]:
        """Get all slots of a node, in declaration order"""
        self.get_node(node_id)
        return [s.id for s in self._slots if s.node_id == node_id]

    def input_slots(self, node_id: NodeId) -> List[SlotId]:
        """Get all input slots of a node, in declaration order"""
        self.get_node(node_id)
        return [s.id for s in self._slots if s.node_id == node_id and s.is_input()]

    def output_slots(self, node_id: NodeId) -> List[SlotId]:
        """Get all output slots of a node, in declaration order"""
        self.get_node(node_id)
        return [s.id for s in self._slots if s.node_id == node_id and s.is_output()]

    def get_slot_id(self, name: str) -> Optional[SlotId]:
        """
        Find a slot by name across the whole graph.

        Names are not unique; the first slot added with this name wins.
        """
        for slot in self._slots:
            if slot.name == name:
                return slot.id
        return None

    def find_slot(self, node_id: NodeId, name: str) -> Optional[SlotId]:
        """Find a slot of a given node by name"""
        self.get_node(node_id)
        for slot in self._slots:
            if slot.node_id == node_id and slot.name == name:
                return slot.id
        return None

    def linked_slots(self, slot_id: SlotId) -> Tuple[SlotId, ...]:
        return self.get_slot(slot_id).linked_slots

    def source_slot(self, input: SlotId) -> Optional[SlotId]:
        """Get the output slot an input slot reads from, if linked"""
        slot = self.get_slot(input)
        if not slot.is_input():
            raise GraphContractError(f"Slot {input.id} ('{slot.name}') is not an input slot")
        linked = slot.linked_slots
        return linked[0] if linked else None

    def node_ids(self) -> Iterator[NodeId]:
        return (NodeId(i + 1) for i in range(len(self._nodes)))

    def get_node(self, node_id: NodeId) -> Node:
        if not isinstance(node_id, NodeId) or node_id.index >= len(self._nodes):
            raise GraphContractError(f"Invalid node id: {node_id!r}")
        return self._nodes[node_id.index]

    def get_slot(self, slot_id: SlotId) -> Slot:
        if not isinstance(slot_id, SlotId) or slot_id.index >= len(self._slots):
            raise GraphContractError(f"Invalid slot id: {slot_id!r}")
        return self._slots[slot_id.index]
