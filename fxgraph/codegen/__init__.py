"""
Codegen Module

Graph evaluation and WGSL code generation.
"""

from .context import EvalContext, ShaderWriter, to_wgsl_string
from .evaluator import GraphEvaluator

__all__ = [
    "EvalContext",
    "ShaderWriter",
    "to_wgsl_string",
    "GraphEvaluator",
]
