"""
Effect Compiler - Main Entry Point

Loads a YAML graph config, compiles it and prints the generated WGSL code.
"""

import logging
import os
import sys
from pathlib import Path

from fxgraph.config.loader import ConfigLoader
from fxgraph.expr.errors import ExprError
from fxgraph.runtime.compiler import EffectCompiler

logger = logging.getLogger(__name__)


def main() -> int:
    """
    Main entry point for the effect compiler.

    Environment Variables:
        CONFIG_DIR: Config directory path (default: "config")
        GRAPH: Name of the graph to compile (default: "default")
        LOG_LEVEL: Logging level (default: "INFO")

    Returns:
        Process exit code
    """
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config_dir = Path(os.getenv("CONFIG_DIR", "config"))
    graph_name = os.getenv("GRAPH", "default")

    logger.info(f"Graph: {graph_name}")
    logger.info(f"Config Directory: {config_dir}")

    try:
        definition = ConfigLoader(config_dir).load_graph(graph_name)
        effect = EffectCompiler().compile(definition)
    except (ValueError, ExprError) as e:
        logger.error(f"Failed to compile graph {graph_name}: {e}")
        return 1

    logger.info(f"Attributes: {[attr.name for attr in effect.attributes]}")
    sys.stdout.write(effect.code)
    return 0


if __name__ == "__main__":
    sys.exit(main())
