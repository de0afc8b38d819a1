"""
Modifier Registry

Maps modifier type names to factories creating modifiers from ModifierDef
entries.
"""

from typing import Callable, Dict
import logging

from fxgraph.expr.module import Module

from .base import Modifier, ModifierDef
from .floating_origin import create_floating_origin_modifier

logger = logging.getLogger(__name__)

ModifierFactory = Callable[[Module, ModifierDef], Modifier]

MODIFIER_FACTORIES: Dict[str, ModifierFactory] = {
    "FloatingOrigin": create_floating_origin_modifier,
}


def create_modifier(module: Module, modifier_def: ModifierDef) -> Modifier:
    """
    Create a modifier from its definition.

    Args:
        module: Module the modifier expressions are added to
        modifier_def: Modifier definition

    Raises:
        ValueError: If the modifier type is unknown or its params are invalid
    """
    factory = MODIFIER_FACTORIES.get(modifier_def.type)
    if factory is None:
        available = ", ".join(MODIFIER_FACTORIES)
        raise ValueError(
            f"Unknown modifier type: {modifier_def.type}. Available types: {available}"
        )

    modifier = factory(module, modifier_def)
    logger.debug(f"Created modifier: type={modifier_def.type}, params={modifier_def.params}")
    return modifier
