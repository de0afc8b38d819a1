"""
Effect Compiler

Compiles a graph definition into WGSL code:
properties -> graph -> output expressions -> modifiers -> shader statements.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

from modifiers.base import ModifierContext
from modifiers.registry import create_modifier
from schemas.attributes import Attribute

from ..codegen.context import ShaderWriter
from ..codegen.evaluator import GraphEvaluator
from ..config.loader import GraphDefinition
from ..expr.exprs import AttributeExpr
from ..expr.module import ExprHandle, Module
from ..graph.builder import GraphBuilder
from ..graph.graph import Graph
from ..graph.registry import NodeRegistry, default_registry

logger = logging.getLogger(__name__)


@dataclass
class CompiledEffect:
    """
    Result of compiling a graph definition.

    Attributes:
        name: Graph name
        module: Arena holding every expression built during compilation
        graph: The built graph
        outputs: Output name -> expression
        attributes: Particle attributes read by the generated code
        code: Generated WGSL statements
    """
    name: str
    module: Module
    graph: Graph
    outputs: Dict[str, ExprHandle] = field(default_factory=dict)
    attributes: List[Attribute] = field(default_factory=list)
    code: str = ""


class EffectCompiler:
    """
    Compiles graph definitions into shader code.

    The compiler:
    1. Declares the graph properties in a new Module
    2. Builds the graph and evaluates the nodes the outputs depend on
    3. Hoists sub-expressions shared by several parents into local variables
    4. Binds each output to a local variable named after it
    5. Applies the modifiers

    A single ShaderWriter is used for the whole compilation, so an expression
    shared between outputs and modifiers is rendered only once.

    Example usage:
        loader = ConfigLoader(Path("config"))
        compiler = EffectCompiler()

        effect = compiler.compile(loader.load_graph("fountain"))
        print(effect.code)
    """

    def __init__(self, registry: Optional[NodeRegistry] = None, hoist_shared: bool = True):
        """
        Initialize compiler.

        Args:
            registry: Node registry used to build graphs (default: all built-in node types)
            hoist_shared: Store expressions used more than once in local variables
        """
        self.registry = registry if registry is not None else default_registry()
        self.hoist_shared = hoist_shared

    def compile(self, definition: GraphDefinition) -> CompiledEffect:
        """
        Compile a graph definition.

        Raises:
            ValueError: If the definition is invalid (unknown nodes, slots, modifiers)
            GraphEvalError: If the graph cannot be evaluated
        """
        logger.info(f"Compiling graph {definition.name}...")

        module = Module()
        for name, value in definition.properties.items():
            module.add_property(name, value)

        builder = GraphBuilder(definition.nodes, definition.links, self.registry)
        graph = builder.build()

        targets = {}
        for name, ref in definition.outputs.items():
            slot_id = builder.resolve_slot(ref)
            if not graph.get_slot(slot_id).is_output():
                raise ValueError(f"Graph output '{name}' references input slot '{ref}'")
            targets[name] = slot_id

        values = GraphEvaluator(graph).evaluate(module, targets.values())
        outputs = {name: values[slot_id] for name, slot_id in targets.items()}

        writer = ShaderWriter()
        for name in outputs:
            writer.reserve_name(name)

        if self.hoist_shared:
            for handle in self._shared_handles(module, list(outputs.values())):
                writer.eval_to_var(module, handle)

        for name, handle in outputs.items():
            var = writer.eval_to_var(module, handle, name)
            if var != name:
                # Same expression as a previous output
                writer.push_stmt(f"let {name} = {var};")

        modifier_attributes: List[Attribute] = []
        for modifier_def in definition.modifiers:
            modifier = create_modifier(module, modifier_def)
            if modifier.context() != ModifierContext.UPDATE:
                raise ValueError(
                    f"Modifier {modifier_def.type} runs in the {modifier.context().value} "
                    f"pass, only update modifiers are supported"
                )
            modifier.apply(module, writer)
            modifier_attributes.extend(modifier.attributes())

        effect = CompiledEffect(
            name=definition.name,
            module=module,
            graph=graph,
            outputs=outputs,
            attributes=self._collect_attributes(module, modifier_attributes),
            code=writer.main_code,
        )

        logger.info(
            f"Compiled graph {definition.name}: {len(outputs)} outputs, "
            f"{len(module)} expressions, {writer.rendered_count} rendered"
        )
        return effect

    def _shared_handles(self, module: Module, roots: List[ExprHandle]) -> List[ExprHandle]:
        """
        Find composite expressions referenced more than once.

        Returns:
            Shared handles in dependency order (operands before their users)
        """
        uses: Dict[ExprHandle, int] = {}
        order: List[ExprHandle] = []

        for root in roots:
            # (handle, children already visited)
            stack = [(root, False)]
            while stack:
                handle, expanded = stack.pop()
                if expanded:
                    order.append(handle)
                    continue

                uses[handle] = uses.get(handle, 0) + 1
                if uses[handle] > 1:
                    continue

                stack.append((handle, True))
                for child in reversed(module.get(handle).children()):
                    stack.append((child, False))

        return [h for h in order if uses[h] > 1 and module.get(h).children()]

    def _collect_attributes(
        self, module: Module, extra: List[Attribute]
    ) -> List[Attribute]:
        attributes: List[Attribute] = []
        for handle in module:
            expr = module.get(handle)
            if isinstance(expr, AttributeExpr) and expr.attr not in attributes:
                attributes.append(expr.attr)
        for attr in extra:
            if attr not in attributes:
                attributes.append(attr)
        return attributes
