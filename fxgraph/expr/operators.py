"""
Expression Operators

Operator tags for built-in quantities and for unary/binary expressions,
with their WGSL spelling.
"""

from enum import Enum
from typing import Optional

from schemas.value_types import ScalarType, ValueType


class BuiltInOperator(Enum):
    """System quantity provided by the simulation, not by a particle"""
    TIME = ("time", "sim_params.time")
    DELTA_TIME = ("delta_time", "sim_params.delta_time")

    def __init__(self, op_name: str, wgsl: str):
        self.op_name = op_name
        self.wgsl = wgsl

    @property
    def value_type(self) -> ValueType:
        return ScalarType.FLOAT

    def to_wgsl_string(self) -> str:
        return self.wgsl

    @classmethod
    def from_name(cls, name: str) -> "BuiltInOperator":
        for op in cls:
            if op.op_name == name:
                return op
        raise ValueError(f"Unknown built-in operator: {name}")


class BinaryOperator(Enum):
    """
    Binary operator.

    Infix operators render as "(lhs) op (rhs)"; the others render as a
    function call "name(lhs, rhs)".
    """
    ADD = ("+", True)
    SUB = ("-", True)
    MUL = ("*", True)
    DIV = ("/", True)
    MIN = ("min", False)
    MAX = ("max", False)
    DOT = ("dot", False)
    CROSS = ("cross", False)
    DISTANCE = ("distance", False)

    def __init__(self, symbol: str, infix: bool):
        self.symbol = symbol
        self.infix = infix

    def render(self, lhs: str, rhs: str) -> str:
        if self.infix:
            return f"({lhs}) {self.symbol} ({rhs})"
        return f"{self.symbol}({lhs}, {rhs})"

    def result_type(self, lhs_type: Optional[ValueType]) -> Optional[ValueType]:
        if self in (BinaryOperator.DOT, BinaryOperator.DISTANCE):
            return ScalarType.FLOAT
        return lhs_type


class UnaryOperator(Enum):
    """Unary operator, rendered as a WGSL built-in function call"""
    NORMALIZE = "normalize"
    ABS = "abs"
    LENGTH = "length"
    SIN = "sin"
    COS = "cos"
    ANY = "any"
    ALL = "all"

    def render(self, operand: str) -> str:
        return f"{self.value}({operand})"

    def result_type(self, operand_type: Optional[ValueType]) -> Optional[ValueType]:
        if self == UnaryOperator.LENGTH:
            return ScalarType.FLOAT
        if self in (UnaryOperator.ANY, UnaryOperator.ALL):
            return ScalarType.BOOL
        return operand_type
