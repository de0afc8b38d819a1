"""
Runtime Module

Compile pipeline from graph configs to shader code.
"""

from .compiler import CompiledEffect, EffectCompiler

__all__ = [
    "CompiledEffect",
    "EffectCompiler",
]
