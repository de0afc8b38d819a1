"""
Graph Node Model

Defines the identifiers, slot declarations and protocols for effect graph nodes.
Each node exposes a fixed list of typed slots and evaluates input expressions
into output expressions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from schemas.value_types import ValueType

from ..expr.module import ExprHandle, Module
from .exceptions import GraphContractError


@dataclass(frozen=True)
class NodeId:
    """One-based identifier of a node in a graph"""
    id: int

    def __post_init__(self):
        if self.id < 1:
            raise ValueError(f"Node id must be one-based, got {self.id}")

    @property
    def index(self) -> int:
        """Zero-based index of the node in the graph node list"""
        return self.id - 1


@dataclass(frozen=True)
class SlotId:
    """One-based identifier of a slot in a graph"""
    id: int

    def __post_init__(self):
        if self.id < 1:
            raise ValueError(f"Slot id must be one-based, got {self.id}")

    @property
    def index(self) -> int:
        """Zero-based index of the slot in the graph slot list"""
        return self.id - 1


class SlotDir(Enum):
    """Direction of a slot"""
    INPUT = "input"  # Receives data from outside the node
    OUTPUT = "output"  # Provides data generated by the node


@dataclass(frozen=True)
class SlotDef:
    """
    Declaration of a node slot.

    Attributes:
        name: Slot name, unique by convention within a node only
        dir: Slot direction
        value_type: Type of values accepted by the slot. None for variant slots,
            whose type depends on the node inputs during evaluation.
    """
    name: str
    dir: SlotDir
    value_type: Optional[ValueType] = None

    @classmethod
    def input(cls, name: str, value_type: Optional[ValueType] = None) -> "SlotDef":
        return cls(name, SlotDir.INPUT, value_type)

    @classmethod
    def output(cls, name: str, value_type: Optional[ValueType] = None) -> "SlotDef":
        return cls(name, SlotDir.OUTPUT, value_type)


class Slot:
    """
    Single slot of a node inside a graph.

    An output slot keeps the list of input slots it feeds (fan-out). An input
    slot keeps at most one output slot it reads from. The link mutators are
    private to the graph, which keeps both ends of a link consistent.
    """

    def __init__(self, node_id: NodeId, slot_id: SlotId, slot_def: SlotDef):
        self.node_id = node_id
        self.id = slot_id
        self.slot_def = slot_def
        self._linked_slots: List[SlotId] = []

    def __repr__(self) -> str:
        return (
            f"Slot(node_id={self.node_id.id}, id={self.id.id}, "
            f"name={self.slot_def.name!r}, dir={self.dir.value}, "
            f"linked={[s.id for s in self._linked_slots]})"
        )

    @property
    def name(self) -> str:
        return self.slot_def.name

    @property
    def dir(self) -> SlotDir:
        return self.slot_def.dir

    @property
    def value_type(self) -> Optional[ValueType]:
        return self.slot_def.value_type

    @property
    def linked_slots(self) -> Tuple[SlotId, ...]:
        return tuple(self._linked_slots)

    def is_input(self) -> bool:
        return self.dir == SlotDir.INPUT

    def is_output(self) -> bool:
        return self.dir == SlotDir.OUTPUT

    def _expect_dir(self, dir: SlotDir) -> None:
        if self.dir != dir:
            raise GraphContractError(
                f"Slot {self.id.id} ('{self.name}') is an {self.dir.value} slot, "
                f"expected an {dir.value} slot"
            )

    def _link_to(self, input: SlotId) -> None:
        self._expect_dir(SlotDir.OUTPUT)
        if input not in self._linked_slots:
            self._linked_slots.append(input)

    def _unlink_from(self, input: SlotId) -> bool:
        self._expect_dir(SlotDir.OUTPUT)
        if input in self._linked_slots:
            self._linked_slots.remove(input)
            return True
        return False

    def _link_input(self, output: SlotId) -> None:
        self._expect_dir(SlotDir.INPUT)
        self._linked_slots[:] = [output]

    def _unlink_input(self) -> None:
        self._expect_dir(SlotDir.INPUT)
        self._linked_slots.clear()

    def _take_links(self) -> List[SlotId]:
        links, self._linked_slots = self._linked_slots, []
        return links


class Node(Protocol):
    """
    Protocol for effect graph nodes.

    Nodes are pure structural constructors: eval() wraps its input
    expressions into new expressions and never reduces them ("3 + 2" stays
    "(3) + (2)"; it is not folded to "5").

    Example implementation:
        class NegateNode:
            def __init__(self):
                self._slots = [SlotDef.input("in"), SlotDef.output("out")]

            def slots(self) -> Sequence[SlotDef]:
                return self._slots

            def eval(self, module: Module, inputs: List[ExprHandle]) -> List[ExprHandle]:
                check_input_count(self, inputs, 1)
                return [module.sub(module.lit(0.), inputs[0])]
    """

    def slots(self) -> Sequence[SlotDef]:
        """
        Get the slot declarations of this node.

        The order defines the positional meaning of inputs and outputs in eval().
        """
        ...

    def eval(self, module: Module, inputs: List[ExprHandle]) -> List[ExprHandle]:
        """
        Evaluate the node into output expressions.

        Args:
            module: Arena the input handles belong to, and where new expressions are added
            inputs: One handle per declared input slot, in declaration order

        Returns:
            One handle per declared output slot, in declaration order

        Raises:
            GraphEvalError: If the number of inputs does not match the input slots
        """
        ...


@dataclass
class NodeDef:
    """
    Declarative definition of a graph node.

    This is the node entry loaded from YAML configs; the NodeRegistry turns
    it into a Node instance.

    Attributes:
        id: Unique identifier of the node in its graph config (e.g., "velocity")
        type: Node type identifier (e.g., "Add", "Attribute", "Time")
        params: Node-specific parameters (e.g., {"attribute": "position"})
    """
    id: str
    type: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LinkDef:
    """
    Declarative link from an output slot to an input slot.

    Both ends are "<node_id>.<slot_name>" references, e.g. "time.delta_time".
    """
    source: str
    target: str

    @staticmethod
    def split_ref(ref: str) -> Tuple[str, str]:
        """
        Split a "<node_id>.<slot_name>" reference.

        Raises:
            ValueError: If the reference has no slot part
        """
        node_id, sep, slot_name = ref.rpartition(".")
        if not sep or not node_id or not slot_name:
            raise ValueError(f"Invalid slot reference '{ref}', expected '<node>.<slot>'")
        return node_id, slot_name
