"""
Modifiers

Particle modifiers built on top of the expression and codegen layers.
"""

from .base import Modifier, ModifierContext, ModifierDef
from .floating_origin import FloatingOriginModifier, create_floating_origin_modifier
from .registry import MODIFIER_FACTORIES, create_modifier

__all__ = [
    "Modifier",
    "ModifierContext",
    "ModifierDef",
    "FloatingOriginModifier",
    "create_floating_origin_modifier",
    "MODIFIER_FACTORIES",
    "create_modifier",
]
