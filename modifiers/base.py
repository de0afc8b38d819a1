"""
Modifier Protocol

Modifiers compose expressions into particle simulation code. They consume
the expression arena and the codegen context, and append statements to the
shader being generated.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Protocol, Sequence

from fxgraph.codegen.context import ShaderWriter
from fxgraph.expr.module import Module
from schemas.attributes import Attribute


class ModifierContext(Enum):
    """Simulation pass a modifier runs in"""
    INIT = "init"  # When particles are spawned
    UPDATE = "update"  # Every frame, for all alive particles


class Modifier(Protocol):
    """
    Protocol for particle modifiers.

    Example implementation:
        class DragModifier:
            def __init__(self, drag: ExprHandle):
                self.drag = drag

            def context(self) -> ModifierContext:
                return ModifierContext.UPDATE

            def attributes(self) -> Sequence[Attribute]:
                return [Attribute.VELOCITY]

            def apply(self, module: Module, writer: ShaderWriter) -> None:
                drag = writer.eval(module, self.drag)
                writer.push_stmt(f"particle.velocity *= max(0., 1. - {drag} * sim_params.delta_time);")
    """

    def context(self) -> ModifierContext:
        """Get the pass this modifier runs in"""
        ...

    def attributes(self) -> Sequence[Attribute]:
        """Get the particle attributes this modifier reads or writes"""
        ...

    def apply(self, module: Module, writer: ShaderWriter) -> None:
        """
        Append the modifier code to the shader being generated.

        Raises:
            ExprError: If an expression of the modifier cannot be rendered
        """
        ...


@dataclass
class ModifierDef:
    """
    Declarative definition of a modifier.

    Attributes:
        type: Modifier type identifier (e.g., "FloatingOrigin")
        params: Modifier-specific parameters (e.g., {"property": "origin_offset"})
    """
    type: str
    params: Dict[str, Any] = field(default_factory=dict)
