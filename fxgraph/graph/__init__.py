"""
Graph Module

Effect graph construction: nodes, typed slots, links and declarative building.
"""

from .exceptions import GraphContractError
from .node import Node, NodeDef, LinkDef, NodeId, SlotId, SlotDir, SlotDef, Slot
from .nodes import (
    AddNode,
    SubNode,
    MulNode,
    DivNode,
    AttributeNode,
    TimeNode,
    NormalizeNode,
    check_input_count,
)
from .graph import Graph
from .registry import NodeRegistry, default_registry
from .builder import GraphBuilder

__all__ = [
    "GraphContractError",
    "Node",
    "NodeDef",
    "LinkDef",
    "NodeId",
    "SlotId",
    "SlotDir",
    "SlotDef",
    "Slot",
    "AddNode",
    "SubNode",
    "MulNode",
    "DivNode",
    "AttributeNode",
    "TimeNode",
    "NormalizeNode",
    "check_input_count",
    "Graph",
    "NodeRegistry",
    "default_registry",
    "GraphBuilder",
]
