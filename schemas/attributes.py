"""
Particle Attributes

Registry of the per-particle attributes an effect graph can read.
Each attribute has a name (the field name in the particle struct) and a value type.
"""

from dataclasses import dataclass
from typing import ClassVar, Dict, List
import json

from .value_types import ScalarType, ValueType, VEC2F, VEC3F, VEC4F, value_type_from_str


@dataclass(frozen=True)
class Attribute:
    """
    Single particle attribute.

    Attributes:
        name: Field name in the particle struct (e.g., "position")
        value_type: Type of the attribute value (e.g., vec3<f32>)
    """
    name: str
    value_type: ValueType

    _registry: ClassVar[Dict[str, "Attribute"]] = {}

    POSITION: ClassVar["Attribute"]
    VELOCITY: ClassVar["Attribute"]
    AGE: ClassVar["Attribute"]
    LIFETIME: ClassVar["Attribute"]
    COLOR: ClassVar["Attribute"]
    HDR_COLOR: ClassVar["Attribute"]
    ALPHA: ClassVar["Attribute"]
    SIZE: ClassVar["Attribute"]
    SIZE2: ClassVar["Attribute"]
    AXIS_X: ClassVar["Attribute"]
    AXIS_Y: ClassVar["Attribute"]
    AXIS_Z: ClassVar["Attribute"]
    F32_0: ClassVar["Attribute"]
    F32_1: ClassVar["Attribute"]
    F32_2: ClassVar["Attribute"]
    F32_3: ClassVar["Attribute"]
    F32X3_0: ClassVar["Attribute"]

    @classmethod
    def from_name(cls, name: str) -> "Attribute":
        """
        Look up a registered attribute by name.

        Raises:
            ValueError: If no attribute with this name is registered
        """
        try:
            return cls._registry[name]
        except KeyError:
            available = ", ".join(cls._registry)
            raise ValueError(
                f"Unknown attribute: {name}. Available attributes: {available}"
            ) from None

    def to_wgsl_string(self) -> str:
        return f"particle.{self.name}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {"name": self.name, "type": self.value_type.to_wgsl_string()}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict) -> "Attribute":
        """Create from dictionary, checking the declared type against the registry"""
        attr = cls.from_name(data["name"])
        if "type" in data and value_type_from_str(data["type"]) != attr.value_type:
            raise ValueError(
                f"Type mismatch for attribute {attr.name}: "
                f"expected {attr.value_type.to_wgsl_string()}, got {data['type']}"
            )
        return attr


def _register(const_name: str, name: str, value_type: ValueType) -> None:
    attr = Attribute(name, value_type)
    Attribute._registry[name] = attr
    setattr(Attribute, const_name, attr)


_register("POSITION", "position", VEC3F)
_register("VELOCITY", "velocity", VEC3F)
_register("AGE", "age", ScalarType.FLOAT)
_register("LIFETIME", "lifetime", ScalarType.FLOAT)
_register("COLOR", "color", ScalarType.UINT)
_register("HDR_COLOR", "hdr_color", VEC4F)
_register("ALPHA", "alpha", ScalarType.FLOAT)
_register("SIZE", "size", ScalarType.FLOAT)
_register("SIZE2", "size2", VEC2F)
_register("AXIS_X", "axis_x", VEC3F)
_register("AXIS_Y", "axis_y", VEC3F)
_register("AXIS_Z", "axis_z", VEC3F)
_register("F32_0", "f32_0", ScalarType.FLOAT)
_register("F32_1", "f32_1", ScalarType.FLOAT)
_register("F32_2", "f32_2", ScalarType.FLOAT)
_register("F32_3", "f32_3", ScalarType.FLOAT)
_register("F32X3_0", "f32x3_0", VEC3F)


def all_attributes() -> List[Attribute]:
    """List all registered attributes in registration order"""
    return list(Attribute._registry.values())
