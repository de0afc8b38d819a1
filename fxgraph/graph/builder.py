"""
Graph Builder

Builds an effect Graph from declarative node and link definitions.
"""

from typing import Dict, List, Optional, Tuple
import logging

from .graph import Graph
from .node import LinkDef, NodeDef, NodeId, SlotId
from .registry import NodeRegistry, default_registry

logger = logging.getLogger(__name__)


class GraphBuilder:
    """
    Builds a Graph from node definitions and links between their slots.

    The builder:
    1. Creates one node per NodeDef through the registry
    2. Resolves "<node_id>.<slot_name>" link references to slot ids
    3. Links the resolved slots

    Errors in the definitions are user data errors and raise ValueError,
    unlike misuse of the Graph API itself.

    Example usage:
        node_defs = [
            NodeDef(id="time", type="Time"),
            NodeDef(id="vel", type="Attribute", params={"attribute": "velocity"}),
            NodeDef(id="step", type="Mul"),
        ]
        link_defs = [
            LinkDef("vel.velocity", "step.lhs"),
            LinkDef("time.delta_time", "step.rhs"),
        ]

        builder = GraphBuilder(node_defs, link_defs)
        graph = builder.build()
        step_id = builder.node_ids["step"]
    """

    def __init__(
        self,
        node_defs: List[NodeDef],
        link_defs: Optional[List[LinkDef]] = None,
        registry: Optional[NodeRegistry] = None,
    ):
        """
        Initialize builder with definitions.

        Args:
            node_defs: Node definitions, added to the graph in list order
            link_defs: Links between node slots
            registry: Registry used to create nodes (default: all built-in node types)
        """
        self.node_defs = node_defs
        self.link_defs = link_defs or []
        self.registry = registry if registry is not None else default_registry()
        self.graph = Graph()
        self.node_ids: Dict[str, NodeId] = {}

        logger.info(
            f"Initialized GraphBuilder with {len(node_defs)} nodes "
            f"and {len(self.link_defs)} links"
        )

    def build(self) -> Graph:
        """
        Build the graph.

        Returns:
            The built graph; node ids are available in self.node_ids

        Raises:
            ValueError: On duplicate node ids, unknown node types, or links
                referencing unknown nodes or slots
        """
        for node_def in self.node_defs:
            if node_def.id in self.node_ids:
                raise ValueError(f"Duplicate node id: {node_def.id}")
            node = self.registry.create(node_def)
            self.node_ids[node_def.id] = self.graph.add_node(node)

        for link_def in self.link_defs:
            output, input = self._resolve_link(link_def)
            self.graph.link(output, input)

        logger.info(
            f"Graph built successfully: {self.graph.node_count} nodes, "
            f"{self.graph.slot_count} slots, {len(self.link_defs)} links"
        )
        return self.graph

    def resolve_slot(self, ref: str) -> SlotId:
        """
        Resolve a "<node_id>.<slot_name>" reference to a slot id.

        Raises:
            ValueError: If the node or the slot does not exist
        """
        node_key, slot_name = LinkDef.split_ref(ref)
        if node_key not in self.node_ids:
            raise ValueError(f"Slot reference '{ref}' names unknown node: '{node_key}'")

        slot_id = self.graph.find_slot(self.node_ids[node_key], slot_name)
        if slot_id is None:
            raise ValueError(f"Node '{node_key}' has no slot named '{slot_name}'")
        return slot_id

    def _resolve_link(self, link_def: LinkDef) -> Tuple[SlotId, SlotId]:
        output = self.resolve_slot(link_def.source)
        input = self.resolve_slot(link_def.target)

        if not self.graph.get_slot(output).is_output():
            raise ValueError(f"Link source '{link_def.source}' is not an output slot")
        if not self.graph.get_slot(input).is_input():
            raise ValueError(f"Link target '{link_def.target}' is not an input slot")

        return output, input
