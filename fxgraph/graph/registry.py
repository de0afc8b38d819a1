"""
Node Registry

Maps effect graph node type names ("Add", "Time", ...) to factories building
node instances from NodeDef entries of a graph config.
"""

from typing import Callable, Dict, List
import logging

from schemas.attributes import Attribute

from .node import Node, NodeDef
from .nodes import AddNode, AttributeNode, DivNode, MulNode, NormalizeNode, SubNode, TimeNode

logger = logging.getLogger(__name__)

NodeFactory = Callable[[NodeDef], Node]


class NodeRegistry:
    """
    Effect node types known to the graph builder.

    Each type name (e.g., "Add", "Attribute") maps to a factory receiving the
    NodeDef, so per-node params such as the attribute name reach the node.

    Example usage:
        registry = NodeRegistry()
        registry.register("Attribute", create_attribute_node)

        node_def = NodeDef(id="pos", type="Attribute", params={"attribute": "position"})
        node = registry.create(node_def)
    """

    def __init__(self):
        self._factories: Dict[str, NodeFactory] = {}

    def __repr__(self) -> str:
        return f"NodeRegistry({self.list_types()})"

    def register(self, node_type: str, factory: NodeFactory) -> None:
        """
        Make a node type available to graph configs.

        A second registration under the same name wins; graph configs built
        afterwards get the new factory.
        """
        previous = self._factories.get(node_type)
        self._factories[node_type] = factory
        if previous is not None:
            logger.warning(f"Node type {node_type} re-registered, replacing {previous!r}")
        else:
            logger.debug(f"Registered node type: {node_type}")

    def create(self, node_def: NodeDef) -> Node:
        """
        Build the effect node of a config entry.

        Raises:
            ValueError: If the type is unknown, or its factory rejects the
                params (the message then names the config node id)
        """
        factory = self._factories.get(node_def.type)
        if factory is None:
            known = ", ".join(self._factories) or "none"
            raise ValueError(f"Unknown node type: {node_def.type}. Available types: {known}")

        try:
            node = factory(node_def)
        except ValueError as e:
            raise ValueError(f"Cannot create node '{node_def.id}' ({node_def.type}): {e}") from e

        logger.debug(f"Created {node!r} for config node '{node_def.id}'")
        return node

    def list_types(self) -> List[str]:
        """Registered type names, in registration order"""
        return list(self._factories)

    def is_registered(self, node_type: str) -> bool:
        return node_type in self._factories


def create_attribute_node(node_def: NodeDef) -> AttributeNode:
    """
    Factory for AttributeNode instances.

    Params:
        attribute: Name of the particle attribute to read (e.g., "position")
    """
    name = node_def.params.get("attribute")
    if not name:
        raise ValueError(f"Attribute node '{node_def.id}' is missing the 'attribute' param")
    return AttributeNode(Attribute.from_name(name))


def default_registry() -> NodeRegistry:
    """
    Create a registry with all built-in node types registered.

    Returns:
        NodeRegistry knowing Add, Sub, Mul, Div, Attribute, Time and Normalize
    """
    registry = NodeRegistry()
    registry.register("Add", lambda node_def: AddNode())
    registry.register("Sub", lambda node_def: SubNode())
    registry.register("Mul", lambda node_def: MulNode())
    registry.register("Div", lambda node_def: DivNode())
    registry.register("Attribute", create_attribute_node)
    registry.register("Time", lambda node_def: TimeNode())
    registry.register("Normalize", lambda node_def: NormalizeNode())

    logger.info(f"Registered {len(registry.list_types())} node types: {registry.list_types()}")
    return registry
