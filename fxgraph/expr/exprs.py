"""
Expressions

Immutable expression variants stored in a Module arena. Composite expressions
reference their operands by handle, so the same operand may be shared by any
number of parents.

Each variant knows:
- its child handles (empty for leaves),
- its value type, when it can be determined from slot-declared types,
- how to render itself to WGSL given the already-rendered text of its children.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence, Tuple, Union

from schemas.attributes import Attribute
from schemas.value_types import Value, ValueType

from .operators import BinaryOperator, BuiltInOperator, UnaryOperator

if TYPE_CHECKING:
    from .module import ExprHandle, Module, PropertyHandle


@dataclass(frozen=True)
class LiteralExpr:
    """Constant value embedded in the generated code"""
    value: Value

    def children(self) -> Tuple["ExprHandle", ...]:
        return ()

    def value_type(self, module: "Module") -> Optional[ValueType]:
        return self.value.value_type

    def render(self, module: "Module", children_text: Sequence[str]) -> str:
        return self.value.to_wgsl_string()


@dataclass(frozen=True)
class AttributeExpr:
    """Read of a particle attribute"""
    attr: Attribute

    def children(self) -> Tuple["ExprHandle", ...]:
        return ()

    def value_type(self, module: "Module") -> Optional[ValueType]:
        return self.attr.value_type

    def render(self, module: "Module", children_text: Sequence[str]) -> str:
        return self.attr.to_wgsl_string()


@dataclass(frozen=True)
class BuiltInExpr:
    """Built-in simulation quantity such as the elapsed time"""
    op: BuiltInOperator

    def children(self) -> Tuple["ExprHandle", ...]:
        return ()

    def value_type(self, module: "Module") -> Optional[ValueType]:
        return self.op.value_type

    def render(self, module: "Module", children_text: Sequence[str]) -> str:
        return self.op.to_wgsl_string()


@dataclass(frozen=True)
class PropertyExpr:
    """
    Reference to an effect property.

    Only the property handle is stored; the property name is resolved
    through the module when the expression is rendered.
    """
    property: "PropertyHandle"

    def children(self) -> Tuple["ExprHandle", ...]:
        return ()

    def value_type(self, module: "Module") -> Optional[ValueType]:
        return module.get_property(self.property).value_type

    def render(self, module: "Module", children_text: Sequence[str]) -> str:
        return f"properties.{module.get_property(self.property).name}"


@dataclass(frozen=True)
class BinaryOperatorExpr:
    """Binary operation over two operand expressions"""
    op: BinaryOperator
    left: "ExprHandle"
    right: "ExprHandle"

    def children(self) -> Tuple["ExprHandle", ...]:
        return (self.left, self.right)

    def value_type(self, module: "Module") -> Optional[ValueType]:
        return self.op.result_type(module.get(self.left).value_type(module))

    def render(self, module: "Module", children_text: Sequence[str]) -> str:
        lhs, rhs = children_text
        return self.op.render(lhs, rhs)


@dataclass(frozen=True)
class UnaryOperatorExpr:
    """Unary operation over a single operand expression"""
    op: UnaryOperator
    expr: "ExprHandle"

    def children(self) -> Tuple["ExprHandle", ...]:
        return (self.expr,)

    def value_type(self, module: "Module") -> Optional[ValueType]:
        return self.op.result_type(module.get(self.expr).value_type(module))

    def render(self, module: "Module", children_text: Sequence[str]) -> str:
        (operand,) = children_text
        return self.op.render(operand)


Expr = Union[
    LiteralExpr,
    AttributeExpr,
    BuiltInExpr,
    PropertyExpr,
    BinaryOperatorExpr,
    UnaryOperatorExpr,
]
