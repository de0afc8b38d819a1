"""
Expression Module

Expression arena, handles, expression variants and operators.
"""

from .errors import ExprError, GraphEvalError, InvalidExprHandleError
from .exprs import (
    Expr,
    LiteralExpr,
    AttributeExpr,
    BuiltInExpr,
    PropertyExpr,
    BinaryOperatorExpr,
    UnaryOperatorExpr,
)
from .module import Module, ExprHandle, PropertyHandle, Property
from .operators import BuiltInOperator, BinaryOperator, UnaryOperator

__all__ = [
    "ExprError",
    "GraphEvalError",
    "InvalidExprHandleError",
    "Expr",
    "LiteralExpr",
    "AttributeExpr",
    "BuiltInExpr",
    "PropertyExpr",
    "BinaryOperatorExpr",
    "UnaryOperatorExpr",
    "Module",
    "ExprHandle",
    "PropertyHandle",
    "Property",
    "BuiltInOperator",
    "BinaryOperator",
    "UnaryOperator",
]
