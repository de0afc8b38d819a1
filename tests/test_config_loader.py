import logging

import pytest

from fxgraph.config.loader import ConfigLoader, load_graph_file
from fxgraph.graph.node import LinkDef, NodeDef
from modifiers.base import ModifierDef
from schemas.value_types import Value

GRAPH_YAML = """
name: fx
nodes:
  - id: time
    type: Time
  - id: vel
    type: Attribute
    params:
      attribute: velocity
  - id: step
    type: Mul
links:
  - from: vel.velocity
    to: step.lhs
  - from: time.delta_time
    to: step.rhs
outputs:
  - name: step
    slot: step.result
"""

EXTRA_YAML = """
name: fx
nodes:
  - id: time
    type: Time
links:
  - from: time.delta_time
    to: step.rhs
properties:
  - name: offset
    type: vec3<f32>
    value: [0, 0, 0]
  - name: speed
    value: 2.5
modifiers:
  - type: FloatingOrigin
    params:
      property: offset
"""


def write_graph(config_dir, name, files):
    graph_dir = config_dir / "graphs" / name
    graph_dir.mkdir(parents=True)
    for file_name, content in files.items():
        (graph_dir / file_name).write_text(content)
    return graph_dir


def test_load_single_file(tmp_path):
    write_graph(tmp_path, "fx", {"graph.yaml": GRAPH_YAML})

    definition = ConfigLoader(tmp_path).load_graph("fx")

    assert definition.name == "fx"
    assert definition.nodes == [
        NodeDef(id="time", type="Time"),
        NodeDef(id="vel", type="Attribute", params={"attribute": "velocity"}),
        NodeDef(id="step", type="Mul"),
    ]
    assert definition.links == [
        LinkDef("vel.velocity", "step.lhs"),
        LinkDef("time.delta_time", "step.rhs"),
    ]
    assert definition.outputs == {"step": "step.result"}
    assert definition.properties == {}
    assert definition.modifiers == []


def test_merge_files(tmp_path):
    write_graph(tmp_path, "fx", {"a.yaml": GRAPH_YAML, "b.yaml": EXTRA_YAML})

    definition = ConfigLoader(tmp_path).load_graph("fx")

    # Identical node and link declared in both files are kept once
    assert [n.id for n in definition.nodes] == ["time", "vel", "step"]
    assert len(definition.links) == 2
    assert definition.properties == {
        "offset": Value.vec3(0, 0, 0),
        "speed": Value.of(2.5),
    }
    assert definition.modifiers == [
        ModifierDef(type="FloatingOrigin", params={"property": "offset"})
    ]


def test_conflicting_nodes(tmp_path):
    conflict = "name: fx\nnodes:\n  - id: time\n    type: Mul\n"
    write_graph(tmp_path, "fx", {"a.yaml": GRAPH_YAML, "b.yaml": conflict})

    with pytest.raises(ValueError, match="Conflicting definitions for node: time"):
        ConfigLoader(tmp_path).load_graph("fx")


def test_duplicate_outputs(tmp_path):
    duplicate = "name: fx\noutputs:\n  - name: step\n    slot: vel.velocity\n"
    write_graph(tmp_path, "fx", {"a.yaml": GRAPH_YAML, "b.yaml": duplicate})

    with pytest.raises(ValueError, match="Duplicate output name: step"):
        ConfigLoader(tmp_path).load_graph("fx")


def test_duplicate_properties(tmp_path):
    write_graph(tmp_path, "fx", {"a.yaml": EXTRA_YAML, "b.yaml": EXTRA_YAML})

    with pytest.raises(ValueError, match="Duplicate property name: offset"):
        ConfigLoader(tmp_path).load_graph("fx")


def test_invalid_output_ref(tmp_path):
    write_graph(tmp_path, "fx", {"a.yaml": "name: fx\noutputs:\n  - name: o\n    slot: step\n"})

    with pytest.raises(ValueError, match="Invalid slot reference"):
        ConfigLoader(tmp_path).load_graph("fx")


def test_invalid_property_value(tmp_path):
    bad = "name: fx\nproperties:\n  - name: offset\n    type: vec3<f32>\n    value: [0, 0]\n"
    write_graph(tmp_path, "fx", {"a.yaml": bad})

    with pytest.raises(ValueError, match="Invalid value for property offset"):
        ConfigLoader(tmp_path).load_graph("fx")


def test_missing_graph_dir(tmp_path):
    with pytest.raises(ValueError, match="No config directory for graph: fx"):
        ConfigLoader(tmp_path).load_graph("fx")


def test_empty_graph_dir(tmp_path):
    write_graph(tmp_path, "fx", {"notes.txt": "not a graph"})

    with pytest.raises(ValueError, match="No YAML files found"):
        ConfigLoader(tmp_path).load_graph("fx")


def test_schema_validation(tmp_path):
    graph_dir = write_graph(tmp_path, "fx", {"a.yaml": "name: fx\nnodes:\n  - id: time\n"})

    with pytest.raises(ValueError, match="Failed to load"):
        load_graph_file(graph_dir / "a.yaml")


def test_non_mapping_yaml(tmp_path):
    graph_dir = write_graph(tmp_path, "fx", {"a.yaml": "- just\n- a list\n"})

    with pytest.raises(ValueError, match="must be a mapping"):
        load_graph_file(graph_dir / "a.yaml")


def test_name_mismatch_warns(tmp_path, caplog):
    write_graph(tmp_path, "fx", {"a.yaml": GRAPH_YAML.replace("name: fx", "name: other")})

    with caplog.at_level(logging.WARNING):
        definition = ConfigLoader(tmp_path).load_graph("fx")

    assert definition.name == "fx"
    assert "Graph name mismatch" in caplog.text


def test_shipped_default_config(config_dir):
    definition = ConfigLoader(config_dir).load_graph("default")

    assert [n.id for n in definition.nodes] == [
        "position", "velocity", "time", "step", "moved", "direction",
    ]
    assert definition.outputs == {"new_position": "moved.result", "direction": "direction.out"}
    assert definition.properties == {"origin_offset": Value.vec3(0, 0, 0)}
    assert [m.type for m in definition.modifiers] == ["FloatingOrigin"]


def test_non_string_keys(tmp_path):
    write_graph(tmp_path, "g", {"a.yaml": "name: g\n1: oops\n"})

    with pytest.raises(ValueError, match="keys must be strings"):
        ConfigLoader(tmp_path).load_graph("g")


def test_bool_property_needs_a_boolean(tmp_path):
    bad = "name: fx\nproperties:\n  - name: enabled\n    type: bool\n    value: \"false\"\n"
    write_graph(tmp_path, "fx", {"a.yaml": bad})

    with pytest.raises(ValueError, match="Invalid value for property enabled"):
        ConfigLoader(tmp_path).load_graph("fx")
