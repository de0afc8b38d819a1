from pathlib import Path

import pytest

from fxgraph.codegen.context import ShaderWriter
from fxgraph.expr.module import Module
from fxgraph.graph.graph import Graph

REPO_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def module():
    return Module()


@pytest.fixture
def graph():
    return Graph()


@pytest.fixture
def writer():
    """A fresh codegen context; never share one between tests."""
    return ShaderWriter()


@pytest.fixture
def config_dir():
    """The example configs shipped with the repository."""
    return REPO_ROOT / "config"
