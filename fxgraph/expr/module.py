"""
Expression Module

Append-only arena owning every expression and property of an effect.
Expressions are referenced by lightweight handles; the module never mutates
or removes an entry, so a handle stays valid for the module's lifetime.
"""

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional
import logging

from schemas.attributes import Attribute
from schemas.value_types import Value, ValueType

from .errors import InvalidExprHandleError
from .exprs import (
    AttributeExpr,
    BinaryOperatorExpr,
    BuiltInExpr,
    Expr,
    LiteralExpr,
    PropertyExpr,
    UnaryOperatorExpr,
)
from .operators import BinaryOperator, BuiltInOperator, UnaryOperator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExprHandle:
    """One-based handle of an expression in a Module"""
    id: int

    def __post_init__(self):
        if self.id < 1:
            raise ValueError(f"Expression handle id must be one-based, got {self.id}")

    @property
    def index(self) -> int:
        """Zero-based index of the expression in the module arena"""
        return self.id - 1


@dataclass(frozen=True)
class PropertyHandle:
    """One-based handle of a property in a Module"""
    id: int

    def __post_init__(self):
        if self.id < 1:
            raise ValueError(f"Property handle id must be one-based, got {self.id}")

    @property
    def index(self) -> int:
        return self.id - 1


@dataclass(frozen=True)
class Property:
    """Named effect property with a default value"""
    name: str
    default_value: Value

    @property
    def value_type(self) -> ValueType:
        return self.default_value.value_type


class Module:
    """
    Arena of expressions and properties.

    Every builder call appends a new entry and returns its handle; nothing is
    interned, so building "3" twice yields two distinct handles. Sharing a
    sub-expression means reusing its handle.

    Example usage:
        module = Module()
        pos = module.attr(Attribute.POSITION)
        dt = module.builtin(BuiltInOperator.DELTA_TIME)
        moved = module.add(pos, module.mul(module.attr(Attribute.VELOCITY), dt))
    """

    def __init__(self):
        self._exprs: List[Expr] = []
        self._properties: List[Property] = []

    def __len__(self) -> int:
        return len(self._exprs)

    def __iter__(self) -> Iterator[ExprHandle]:
        return (ExprHandle(i + 1) for i in range(len(self._exprs)))

    def push(self, expr: Expr) -> ExprHandle:
        """
        Append an expression to the arena.

        Args:
            expr: Expression whose child handles already belong to this module

        Returns:
            Handle of the new expression

        Raises:
            InvalidExprHandleError: If a child handle is not from this module
        """
        for child in expr.children():
            self._check_handle(child)
        self._exprs.append(expr)
        handle = ExprHandle(len(self._exprs))
        logger.debug(f"Added expression {handle.id}: {expr}")
        return handle

    def get(self, handle: ExprHandle) -> Expr:
        """Get the expression referenced by a handle"""
        self._check_handle(handle)
        return self._exprs[handle.index]

    def _check_handle(self, handle: ExprHandle) -> None:
        if not isinstance(handle, ExprHandle) or handle.index >= len(self._exprs):
            raise InvalidExprHandleError(
                f"Invalid expression handle {handle!r} for module with {len(self._exprs)} expressions"
            )

    def value_type(self, handle: ExprHandle) -> Optional[ValueType]:
        """Get the value type of an expression, if it can be determined"""
        # Operator result types depend on the leftmost operand only; walk
        # down to it without recursing.
        ops = []
        expr = self.get(handle)
        while isinstance(expr, (BinaryOperatorExpr, UnaryOperatorExpr)):
            ops.append(expr.op)
            expr = self.get(expr.left if isinstance(expr, BinaryOperatorExpr) else expr.expr)

        value_type = expr.value_type(self)
        for op in reversed(ops):
            value_type = op.result_type(value_type)
        return value_type

    # Leaves

    def lit(self, value: Any) -> ExprHandle:
        """Build a literal expression; plain Python values are converted with Value.of()"""
        return self.push(LiteralExpr(Value.of(value)))

    def attr(self, attr: Attribute) -> ExprHandle:
        return self.push(AttributeExpr(attr))

    def builtin(self, op: BuiltInOperator) -> ExprHandle:
        return self.push(BuiltInExpr(op))

    def prop(self, property_handle: PropertyHandle) -> ExprHandle:
        self.get_property(property_handle)
        return self.push(PropertyExpr(property_handle))

    # Binary operators

    def binary(self, op: BinaryOperator, left: ExprHandle, right: ExprHandle) -> ExprHandle:
        return self.push(BinaryOperatorExpr(op, left, right))

    def add(self, left: ExprHandle, right: ExprHandle) -> ExprHandle:
        return self.binary(BinaryOperator.ADD, left, right)

    def sub(self, left: ExprHandle, right: ExprHandle) -> ExprHandle:
        return self.binary(BinaryOperator.SUB, left, right)

    def mul(self, left: ExprHandle, right: ExprHandle) -> ExprHandle:
        return self.binary(BinaryOperator.MUL, left, right)

    def div(self, left: ExprHandle, right: ExprHandle) -> ExprHandle:
        return self.binary(BinaryOperator.DIV, left, right)

    def min(self, left: ExprHandle, right: ExprHandle) -> ExprHandle:
        return self.binary(BinaryOperator.MIN, left, right)

    def max(self, left: ExprHandle, right: ExprHandle) -> ExprHandle:
        return self.binary(BinaryOperator.MAX, left, right)

    def dot(self, left: ExprHandle, right: ExprHandle) -> ExprHandle:
        return self.binary(BinaryOperator.DOT, left, right)

    def cross(self, left: ExprHandle, right: ExprHandle) -> ExprHandle:
        return self.binary(BinaryOperator.CROSS, left, right)

    def distance(self, left: ExprHandle, right: ExprHandle) -> ExprHandle:
        return self.binary(BinaryOperator.DISTANCE, left, right)

    # Unary operators

    def unary(self, op: UnaryOperator, expr: ExprHandle) -> ExprHandle:
        return self.push(UnaryOperatorExpr(op, expr))

    def normalize(self, expr: ExprHandle) -> ExprHandle:
        return self.unary(UnaryOperator.NORMALIZE, expr)

    def abs(self, expr: ExprHandle) -> ExprHandle:
        return self.unary(UnaryOperator.ABS, expr)

    def length(self, expr: ExprHandle) -> ExprHandle:
        return self.unary(UnaryOperator.LENGTH, expr)

    def sin(self, expr: ExprHandle) -> ExprHandle:
        return self.unary(UnaryOperator.SIN, expr)

    def cos(self, expr: ExprHandle) -> ExprHandle:
        return self.unary(UnaryOperator.COS, expr)

    def any(self, expr: ExprHandle) -> ExprHandle:
        return self.unary(UnaryOperator.ANY, expr)

    def all(self, expr: ExprHandle) -> ExprHandle:
        return self.unary(UnaryOperator.ALL, expr)

    # Properties

    @property
    def properties(self) -> List[Property]:
        return list(self._properties)

    def add_property(self, name: str, default_value: Any) -> PropertyHandle:
        """
        Declare a new effect property.

        Args:
            name: Property name, unique within the module
            default_value: Default value, also defining the property type

        Returns:
            Handle of the new property

        Raises:
            ValueError: If a property with this name already exists
        """
        if self.get_property_by_name(name) is not None:
            raise ValueError(f"Duplicate property name: {name}")
        self._properties.append(Property(name, Value.of(default_value)))
        handle = PropertyHandle(len(self._properties))
        logger.debug(f"Added property '{name}' as handle {handle.id}")
        return handle

    def get_property(self, handle: PropertyHandle) -> Property:
        if not isinstance(handle, PropertyHandle) or handle.index >= len(self._properties):
            raise InvalidExprHandleError(f"Invalid property handle {handle!r}")
        return self._properties[handle.index]

    def get_property_by_name(self, name: str) -> Optional[PropertyHandle]:
        for index, prop in enumerate(self._properties):
            if prop.name == name:
                return PropertyHandle(index + 1)
        return None
