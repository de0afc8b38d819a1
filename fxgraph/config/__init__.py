"""
Config Module

YAML graph configuration loading and validation.
"""

from .loader import (
    ConfigLoader,
    GraphConfig,
    GraphDefinition,
    LinkConfig,
    ModifierConfig,
    NodeConfig,
    OutputConfig,
    PropertyConfig,
    load_graph_file,
)

__all__ = [
    "ConfigLoader",
    "GraphConfig",
    "GraphDefinition",
    "LinkConfig",
    "ModifierConfig",
    "NodeConfig",
    "OutputConfig",
    "PropertyConfig",
    "load_graph_file",
]
