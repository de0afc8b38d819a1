"""
Floating Origin Modifier

Applies a secondary translation to all particles, typically to follow a
floating origin: when the world is re-centered near the camera to keep float
precision, already spawned particles are moved by the same offset.

The offset is an expression, usually a property updated by the application.
Each particle stores the offset it was last moved by in Attribute.F32X3_0;
when the current offset differs, the particle is shifted by the difference
and the stored offset updated.

This touches every particle each frame. Spawning from separate emitters per
floating origin cell is cheaper but harder to set up.
"""

from typing import Sequence
import logging

from fxgraph.codegen.context import ShaderWriter
from fxgraph.expr.module import ExprHandle, Module, PropertyHandle
from schemas.attributes import Attribute
from schemas.value_types import Value

from .base import ModifierContext, ModifierDef

logger = logging.getLogger(__name__)


class FloatingOriginModifier:
    """
    Modifier applying a translation offset to all particles.

    Attributes:
        translation_offset: Expression of the offset (vec3<f32>)

    Example usage:
        module = Module()
        offset = module.add_property("origin_offset", Value.vec3(0, 0, 0))
        modifier = FloatingOriginModifier.via_property(module, offset)

        writer = ShaderWriter()
        modifier.apply(module, writer)
    """

    ATTRIBUTES = (Attribute.POSITION, Attribute.F32X3_0)

    def __init__(self, translation_offset: ExprHandle):
        self.translation_offset = translation_offset

    def __repr__(self) -> str:
        return f"FloatingOriginModifier(translation_offset={self.translation_offset.id})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FloatingOriginModifier):
            return NotImplemented
        return self.translation_offset == other.translation_offset

    def __hash__(self) -> int:
        return hash(self.translation_offset)

    @classmethod
    def via_property(cls, module: Module, property: PropertyHandle) -> "FloatingOriginModifier":
        """Create a modifier whose offset is read from a property"""
        return cls(module.prop(property))

    @classmethod
    def constant(cls, module: Module, offset: Value) -> "FloatingOriginModifier":
        """Create a modifier with a constant offset"""
        return cls(module.lit(offset))

    def context(self) -> ModifierContext:
        return ModifierContext.UPDATE

    def attributes(self) -> Sequence[Attribute]:
        return self.ATTRIBUTES

    def apply(self, module: Module, writer: ShaderWriter) -> None:
        stored = writer.eval(module, module.attr(Attribute.F32X3_0))
        offset = writer.eval(module, self.translation_offset)
        position = Attribute.POSITION.to_wgsl_string()

        changed = ", ".join(f"{stored}.{c} != {offset}.{c}" for c in "xyz")
        writer.push_stmt(f"if (any(vec3<bool>({changed}))) {{")
        writer.push_stmt("    // Offset changed: shift the particle, then store the new offset")
        writer.push_stmt(f"    {position} += {offset} - {stored};")
        writer.push_stmt(f"    {stored} = {offset};")
        writer.push_stmt("}")

        logger.debug(f"Applied floating origin modifier with offset {offset}")


def create_floating_origin_modifier(module: Module, modifier_def: ModifierDef) -> FloatingOriginModifier:
    """
    Factory for FloatingOriginModifier instances.

    Params (exactly one):
        property: Name of a module property holding the offset
        offset: Constant offset [x, y, z]

    Raises:
        ValueError: If the params are missing, ambiguous, or name an unknown property
    """
    params = modifier_def.params
    if ("property" in params) == ("offset" in params):
        raise ValueError("FloatingOrigin modifier needs exactly one of 'property' or 'offset'")

    if "property" in params:
        handle = module.get_property_by_name(params["property"])
        if handle is None:
            raise ValueError(f"Unknown property for FloatingOrigin modifier: {params['property']}")
        return FloatingOriginModifier.via_property(module, handle)

    x, y, z = params["offset"]
    return FloatingOriginModifier.constant(module, Value.vec3(x, y, z))
