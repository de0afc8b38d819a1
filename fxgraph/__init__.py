"""
Particle effect graph compiler.

Turns a graph of typed operation nodes into expressions, then into WGSL code.
"""

from .expr import ExprError, ExprHandle, GraphEvalError, Module
from .graph import Graph, GraphContractError, NodeId, SlotDef, SlotDir, SlotId
from .codegen import GraphEvaluator, ShaderWriter, to_wgsl_string

__all__ = [
    "ExprError",
    "ExprHandle",
    "GraphEvalError",
    "Module",
    "Graph",
    "GraphContractError",
    "NodeId",
    "SlotDef",
    "SlotDir",
    "SlotId",
    "GraphEvaluator",
    "ShaderWriter",
    "to_wgsl_string",
]
