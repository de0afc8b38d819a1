"""
Config Loader

Loads and merges effect graph configurations from YAML files.
Converts YAML entries to NodeDef/LinkDef objects for graph construction.
"""

import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError
import logging

from modifiers.base import ModifierDef
from schemas.value_types import Value

from ..graph.node import LinkDef, NodeDef

logger = logging.getLogger(__name__)


class NodeConfig(BaseModel):
    """Configuration for a graph node"""
    id: str
    type: str
    params: Dict[str, Any] = Field(default_factory=dict)


class LinkConfig(BaseModel):
    """Configuration for a link, written as {from: "node.slot", to: "node.slot"}"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    source: str = Field(alias="from")
    target: str = Field(alias="to")


class PropertyConfig(BaseModel):
    """Configuration for an effect property and its default value"""
    name: str
    value: Any
    type: Optional[str] = None


class OutputConfig(BaseModel):
    """Named graph output bound to an output slot ("node.slot")"""
    name: str
    slot: str


class ModifierConfig(BaseModel):
    """Configuration for a modifier appended after the graph outputs"""
    type: str
    params: Dict[str, Any] = Field(default_factory=dict)


class GraphConfig(BaseModel):
    """Complete (or partial, when split across files) effect graph configuration"""
    name: str
    nodes: List[NodeConfig] = Field(default_factory=list)
    links: List[LinkConfig] = Field(default_factory=list)
    properties: List[PropertyConfig] = Field(default_factory=list)
    outputs: List[OutputConfig] = Field(default_factory=list)
    modifiers: List[ModifierConfig] = Field(default_factory=list)


@dataclass
class GraphDefinition:
    """
    Merged graph definition ready for building.

    Attributes:
        name: Graph name
        nodes: Node definitions in declaration order
        links: Link definitions in declaration order
        properties: Property name -> default value, in declaration order
        outputs: Output name -> "node.slot" reference, in declaration order
        modifiers: Modifier definitions, in application order
    """
    name: str
    nodes: List[NodeDef] = field(default_factory=list)
    links: List[LinkDef] = field(default_factory=list)
    properties: Dict[str, Value] = field(default_factory=dict)
    outputs: Dict[str, str] = field(default_factory=dict)
    modifiers: List[ModifierDef] = field(default_factory=list)


def load_graph_file(path: Path) -> GraphConfig:
    """
    Load and validate a single YAML graph file.

    Raises:
        ValueError: If the file cannot be read or fails validation
    """
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
        if not isinstance(raw, dict):
            raise ValueError("top-level YAML value must be a mapping")
        bad_keys = [key for key in raw if not isinstance(key, str)]
        if bad_keys:
            raise ValueError(f"top-level keys must be strings, got {bad_keys}")
        return GraphConfig.model_validate(raw)
    except (OSError, yaml.YAMLError, ValidationError, ValueError) as e:
        logger.error(f"Failed to load {path}: {e}")
        raise ValueError(f"Failed to load {path}: {e}") from e


class ConfigLoader:
    """
    Loads and merges graph configs from YAML.

    The loader:
    1. Finds all YAML files in a graph's directory
    2. Loads and validates each file
    3. Merges nodes, links, properties and outputs (validating uniqueness)
    4. Converts to NodeDef/LinkDef objects

    Example usage:
        loader = ConfigLoader(Path("config"))
        definition = loader.load_graph("fountain")

        # definition.nodes and definition.links are ready for GraphBuilder
    """

    def __init__(self, config_dir: Path):
        """
        Initialize loader with config directory.

        Args:
            config_dir: Root config directory (contains graphs/ subdirectory)
        """
        self.config_dir = Path(config_dir)
        logger.info(f"Initialized ConfigLoader with config_dir: {self.config_dir}")

    def load_graph(self, name: str) -> GraphDefinition:
        """
        Load all YAML files for a graph and merge them.

        Args:
            name: Graph name, also the directory name under graphs/

        Returns:
            Merged graph definition

        Raises:
            ValueError: If no config found, conflicts exist, or validation fails
        """
        graph_dir = self.config_dir / "graphs" / name

        if not graph_dir.is_dir():
            raise ValueError(
                f"No config directory for graph: {name}. "
                f"Expected: {graph_dir}"
            )

        yaml_files = sorted(graph_dir.glob("*.yaml"))
        if not yaml_files:
            raise ValueError(f"No YAML files found in {graph_dir}")

        logger.info(f"Loading {len(yaml_files)} YAML files for graph {name}")

        configs = []
        for yaml_file in yaml_files:
            config = load_graph_file(yaml_file)
            if config.name != name:
                logger.warning(
                    f"Graph name mismatch in {yaml_file.name}: "
                    f"expected {name}, got {config.name}"
                )
            configs.append(config)
            logger.debug(
                f"Loaded {yaml_file.name}: {len(config.nodes)} nodes, "
                f"{len(config.links)} links"
            )

        definition = self.merge_configs(name, configs)

        logger.info(
            f"Loaded graph {name}: {len(definition.nodes)} nodes, "
            f"{len(definition.links)} links, {len(definition.outputs)} outputs"
        )
        return definition

    def merge_configs(self, name: str, configs: List[GraphConfig]) -> GraphDefinition:
        """
        Merge multiple configs, validating uniqueness.

        Identical node definitions and links found in several files are kept
        once; conflicting node definitions, properties or outputs are errors.

        Raises:
            ValueError: If conflicts exist
        """
        all_nodes: Dict[str, NodeConfig] = {}
        all_links: Dict[LinkConfig, None] = {}
        definition = GraphDefinition(name=name)

        for config in configs:
            for node in config.nodes:
                existing = all_nodes.get(node.id)
                if existing is None:
                    all_nodes[node.id] = node
                elif existing != node:
                    raise ValueError(
                        f"Conflicting definitions for node: {node.id}\n"
                        f"First: {existing}\n"
                        f"Second: {node}"
                    )
                else:
                    logger.debug(f"Node {node.id} already defined (identical), skipping")

            for link in config.links:
                all_links.setdefault(link, None)

            for prop in config.properties:
                if prop.name in definition.properties:
                    raise ValueError(f"Duplicate property name: {prop.name}")
                definition.properties[prop.name] = self._to_value(prop)

            for output in config.outputs:
                if output.name in definition.outputs:
                    raise ValueError(f"Duplicate output name: {output.name}")
                LinkDef.split_ref(output.slot)
                definition.outputs[output.name] = output.slot

            for modifier in config.modifiers:
                definition.modifiers.append(
                    ModifierDef(type=modifier.type, params=dict(modifier.params))
                )

        definition.nodes = [
            NodeDef(id=node.id, type=node.type, params=dict(node.params))
            for node in all_nodes.values()
        ]
        definition.links = [LinkDef(link.source, link.target) for link in all_links]

        return definition

    def _to_value(self, prop: PropertyConfig) -> Value:
        data = {"value": prop.value}
        if prop.type is not None:
            data["type"] = prop.type
        try:
            return Value.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid value for property {prop.name}: {e}") from e
