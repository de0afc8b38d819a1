"""
Graph Nodes

Concrete node types: binary arithmetic, attribute read, time and normalize.
Each one only builds new expressions around its inputs.
"""

from typing import List, Sequence

from schemas.attributes import Attribute

from ..expr.errors import GraphEvalError
from ..expr.module import ExprHandle, Module
from ..expr.operators import BinaryOperator, BuiltInOperator, UnaryOperator
from .node import Node, SlotDef


def check_input_count(node: Node, inputs: Sequence[ExprHandle], expected: int) -> None:
    """
    Check the number of inputs given to a node evaluation.

    Raises:
        GraphEvalError: If the count differs from the expected one
    """
    if len(inputs) != expected:
        raise GraphEvalError(
            f"Unexpected input count to {type(node).__name__}.eval(): "
            f"expected {expected}, got {len(inputs)}"
        )


class BinaryOpNode:
    """Base for nodes combining two values with a binary operator"""

    op: BinaryOperator

    def __init__(self):
        self._slots = (
            SlotDef.input("lhs"),
            SlotDef.input("rhs"),
            SlotDef.output("result"),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def slots(self) -> Sequence[SlotDef]:
        return self._slots

    def eval(self, module: Module, inputs: List[ExprHandle]) -> List[ExprHandle]:
        check_input_count(self, inputs, 2)
        lhs, rhs = inputs
        return [module.binary(self.op, lhs, rhs)]


class AddNode(BinaryOpNode):
    """Graph node to add two values"""
    op = BinaryOperator.ADD


class SubNode(BinaryOpNode):
    """Graph node to subtract two values"""
    op = BinaryOperator.SUB


class MulNode(BinaryOpNode):
    """Graph node to multiply two values"""
    op = BinaryOperator.MUL


class DivNode(BinaryOpNode):
    """Graph node to divide two values"""
    op = BinaryOperator.DIV


class AttributeNode:
    """
    Graph node to get a single particle attribute.

    The node has no input and one output slot named and typed after the attribute.
    """

    def __init__(self, attr: Attribute):
        self.attr = attr

    def __repr__(self) -> str:
        return f"AttributeNode({self._attr.name!r})"

    @property
    def attr(self) -> Attribute:
        """The attribute this node reads"""
        return self._attr

    @attr.setter
    def attr(self, attr: Attribute) -> None:
        self._attr = attr
        self._slots = (SlotDef.output(attr.name, attr.value_type),)

    def slots(self) -> Sequence[SlotDef]:
        return self._slots

    def eval(self, module: Module, inputs: List[ExprHandle]) -> List[ExprHandle]:
        check_input_count(self, inputs, 0)
        return [module.attr(self._attr)]


class TimeNode:
    """
    Graph node to get the time values of the effect simulation.

    Outputs, in order: elapsed time, delta time since the previous frame.
    """

    OPERATORS = (BuiltInOperator.TIME, BuiltInOperator.DELTA_TIME)

    def __init__(self):
        self._slots = tuple(
            SlotDef.output(op.op_name, op.value_type) for op in self.OPERATORS
        )

    def __repr__(self) -> str:
        return "TimeNode()"

    def slots(self) -> Sequence[SlotDef]:
        return self._slots

    def eval(self, module: Module, inputs: List[ExprHandle]) -> List[ExprHandle]:
        check_input_count(self, inputs, 0)
        return [module.builtin(op) for op in self.OPERATORS]


class NormalizeNode:
    """Graph node to normalize a vector value"""

    def __init__(self):
        self._slots = (SlotDef.input("in"), SlotDef.output("out"))

    def __repr__(self) -> str:
        return "NormalizeNode()"

    def slots(self) -> Sequence[SlotDef]:
        return self._slots

    def eval(self, module: Module, inputs: List[ExprHandle]) -> List[ExprHandle]:
        check_input_count(self, inputs, 1)
        return [module.unary(UnaryOperator.NORMALIZE, inputs[0])]
