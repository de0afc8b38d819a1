"""
Value Types

Scalar and vector value types carried by slots and expressions, and the
literal values embedded into generated shader code.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple, Union
import json


class ScalarType(Enum):
    """Scalar type of a value, named after its WGSL spelling"""
    BOOL = "bool"
    FLOAT = "f32"
    INT = "i32"
    UINT = "u32"

    def to_wgsl_string(self) -> str:
        return self.value


@dataclass(frozen=True)
class VectorType:
    """Vector of 2 to 4 scalar components"""
    elem_type: ScalarType
    count: int

    def __post_init__(self):
        if not 2 <= self.count <= 4:
            raise ValueError(f"Invalid vector component count: {self.count}")

    def to_wgsl_string(self) -> str:
        return f"vec{self.count}<{self.elem_type.value}>"


ValueType = Union[ScalarType, VectorType]

VEC2F = VectorType(ScalarType.FLOAT, 2)
VEC3F = VectorType(ScalarType.FLOAT, 3)
VEC4F = VectorType(ScalarType.FLOAT, 4)
VEC2I = VectorType(ScalarType.INT, 2)
VEC3I = VectorType(ScalarType.INT, 3)
VEC3B = VectorType(ScalarType.BOOL, 3)


def value_type_from_str(name: str) -> ValueType:
    """
    Parse a WGSL type name such as "f32" or "vec3<f32>".

    Args:
        name: WGSL spelling of the type

    Returns:
        The matching scalar or vector type

    Raises:
        ValueError: If the name is not a supported type
    """
    name = name.strip()
    for scalar in ScalarType:
        if scalar.value == name:
            return scalar

    if name.startswith("vec") and name.endswith(">") and "<" in name:
        count_str, elem_str = name[3:-1].split("<", 1)
        try:
            return VectorType(ScalarType(elem_str), int(count_str))
        except ValueError as e:
            raise ValueError(f"Invalid vector type '{name}': {e}") from e

    raise ValueError(f"Unknown value type: '{name}'")


def _format_scalar(value: Any, scalar_type: ScalarType) -> str:
    if scalar_type == ScalarType.BOOL:
        return "true" if value else "false"
    if scalar_type == ScalarType.FLOAT:
        # 1.0 -> "1.", 0.25 -> "0.25"
        return f"{float(value):.6f}".rstrip("0")
    if scalar_type == ScalarType.UINT:
        return f"{int(value)}u"
    return str(int(value))


def _infer_scalar_type(value: Any) -> ScalarType:
    # bool is a subclass of int, test it first
    if isinstance(value, bool):
        return ScalarType.BOOL
    if isinstance(value, int):
        return ScalarType.INT
    if isinstance(value, float):
        return ScalarType.FLOAT
    raise TypeError(f"Unsupported literal value type: {type(value).__name__}")


def _coerce_scalar(raw: Any, scalar_type: ScalarType) -> Any:
    """Check a config value against an explicitly declared scalar type"""
    if scalar_type == ScalarType.BOOL:
        if not isinstance(raw, bool):
            raise ValueError(f"Expected true or false for bool, got {raw!r}")
        return raw

    # bool is an int subclass, reject it for numeric types
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueError(f"Expected a number for {scalar_type.value}, got {raw!r}")
    if scalar_type == ScalarType.FLOAT:
        return float(raw)

    if not float(raw).is_integer():
        raise ValueError(f"Expected an integer for {scalar_type.value}, got {raw!r}")
    if scalar_type == ScalarType.UINT and raw < 0:
        raise ValueError(f"Unsigned literal cannot be negative: {raw}")
    return int(raw)


@dataclass(frozen=True)
class Value:
    """
    Literal value with its type.

    Scalars hold a single Python value; vectors hold a tuple of components.

    Examples:
        - Value.of(3)            -> i32 literal "3"
        - Value.of(0.5)          -> f32 literal "0.5"
        - Value.vec3(1, 1, 1)    -> vec3<f32> literal "vec3(1.,1.,1.)"
    """
    data: Union[bool, int, float, Tuple[Any, ...]]
    value_type: ValueType

    @classmethod
    def of(cls, value: Any) -> "Value":
        """Create a value, inferring its type from the Python value"""
        if isinstance(value, Value):
            return value
        if isinstance(value, (tuple, list)):
            components = tuple(value)
            if not 2 <= len(components) <= 4:
                raise ValueError(
                    f"Vector literal must have 2 to 4 components, got {len(components)}"
                )
            elem_types = {_infer_scalar_type(c) for c in components}
            if len(elem_types) == 1:
                elem_type = elem_types.pop()
            elif ScalarType.BOOL in elem_types:
                raise TypeError("Cannot mix bool and numeric vector components")
            else:
                elem_type = ScalarType.FLOAT
            return cls(components, VectorType(elem_type, len(components)))
        return cls(value, _infer_scalar_type(value))

    @classmethod
    def f32(cls, value: float) -> "Value":
        return cls(float(value), ScalarType.FLOAT)

    @classmethod
    def u32(cls, value: int) -> "Value":
        if value < 0:
            raise ValueError(f"Unsigned literal cannot be negative: {value}")
        return cls(int(value), ScalarType.UINT)

    @classmethod
    def vec2(cls, x: float, y: float) -> "Value":
        return cls((float(x), float(y)), VEC2F)

    @classmethod
    def vec3(cls, x: float, y: float, z: float) -> "Value":
        return cls((float(x), float(y), float(z)), VEC3F)

    @classmethod
    def vec4(cls, x: float, y: float, z: float, w: float) -> "Value":
        return cls((float(x), float(y), float(z), float(w)), VEC4F)

    def to_wgsl_string(self) -> str:
        """Render the literal as WGSL source text"""
        if isinstance(self.value_type, VectorType):
            elem_type = self.value_type.elem_type
            components = ",".join(_format_scalar(c, elem_type) for c in self.data)
            return f"vec{self.value_type.count}({components})"
        return _format_scalar(self.data, self.value_type)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON/YAML serialization"""
        data = list(self.data) if isinstance(self.data, tuple) else self.data
        return {
            "type": self.value_type.to_wgsl_string(),
            "value": data,
        }

    def to_json(self) -> str:
        """Serialize to JSON string"""
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict) -> "Value":
        """
        Create a value from a dictionary.

        The "type" key is optional; without it the type is inferred from "value".
        """
        raw = data["value"]
        if "type" not in data:
            return cls.of(raw)

        value_type = value_type_from_str(data["type"])
        if isinstance(value_type, VectorType):
            if not isinstance(raw, (list, tuple)) or len(raw) != value_type.count:
                raise ValueError(
                    f"Expected {value_type.count} components for {data['type']}, got {raw!r}"
                )
            elem_type = value_type.elem_type
            return cls(tuple(_coerce_scalar(c, elem_type) for c in raw), value_type)

        return cls(_coerce_scalar(raw, value_type), value_type)

    @classmethod
    def from_json(cls, json_str: str) -> "Value":
        """Deserialize from JSON string"""
        return cls.from_dict(json.loads(json_str))
