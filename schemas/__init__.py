"""
Schemas

Typed values shared by the graph, expression and codegen layers.
"""

from .value_types import (
    ScalarType,
    VectorType,
    ValueType,
    Value,
    VEC2F,
    VEC3F,
    VEC4F,
    VEC2I,
    VEC3I,
    VEC3B,
    value_type_from_str,
)
from .attributes import Attribute, all_attributes

__all__ = [
    "ScalarType",
    "VectorType",
    "ValueType",
    "Value",
    "VEC2F",
    "VEC3F",
    "VEC4F",
    "VEC2I",
    "VEC3I",
    "VEC3B",
    "value_type_from_str",
    "Attribute",
    "all_attributes",
]
