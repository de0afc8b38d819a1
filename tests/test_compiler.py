import pytest

from fxgraph.config.loader import ConfigLoader, GraphDefinition
from fxgraph.expr.errors import GraphEvalError
from fxgraph.graph.node import LinkDef, NodeDef
from fxgraph.runtime.compiler import EffectCompiler
from modifiers.base import ModifierDef
from schemas.attributes import Attribute


def normalize_sum(outputs):
    return GraphDefinition(
        name="test",
        nodes=[
            NodeDef(id="vel", type="Attribute", params={"attribute": "velocity"}),
            NodeDef(id="dir", type="Normalize"),
            NodeDef(id="sum", type="Add"),
        ],
        links=[
            LinkDef("vel.velocity", "dir.in"),
            LinkDef("dir.out", "sum.lhs"),
            LinkDef("dir.out", "sum.rhs"),
        ],
        outputs=outputs,
    )


def test_compile_default_graph(config_dir):
    definition = ConfigLoader(config_dir).load_graph("default")
    effect = EffectCompiler().compile(definition)

    lines = effect.code.splitlines()
    assert lines[0] == (
        "let new_position = (particle.position) + "
        "((particle.velocity) * (sim_params.delta_time));"
    )
    assert lines[1] == "let direction = normalize(particle.velocity);"
    assert lines[2].startswith("if (any(vec3<bool>(particle.f32x3_0.x != properties.origin_offset.x")
    assert "    particle.position += properties.origin_offset - particle.f32x3_0;" in lines

    assert list(effect.outputs) == ["new_position", "direction"]
    assert [attr.name for attr in effect.attributes] == ["position", "velocity", "f32x3_0"]
    assert effect.graph.node_count == 6


def test_shared_expressions_are_hoisted():
    effect = EffectCompiler().compile(normalize_sum({"total": "sum.result"}))

    assert effect.code == (
        "let var0 = normalize(particle.velocity);\n"
        "let total = (var0) + (var0);\n"
    )


def test_hoisting_disabled():
    effect = EffectCompiler(hoist_shared=False).compile(normalize_sum({"total": "sum.result"}))

    assert effect.code == (
        "let total = (normalize(particle.velocity)) + (normalize(particle.velocity));\n"
    )


def test_outputs_sharing_a_slot():
    effect = EffectCompiler().compile(normalize_sum({"a": "dir.out", "b": "dir.out"}))

    assert effect.code == (
        "let var0 = normalize(particle.velocity);\n"
        "let a = var0;\n"
        "let b = var0;\n"
    )
    assert effect.outputs["a"] == effect.outputs["b"]


def test_unused_nodes_are_not_evaluated():
    definition = normalize_sum({"direction": "dir.out"})
    definition.nodes.append(NodeDef(id="dangling", type="Mul"))

    effect = EffectCompiler().compile(definition)

    assert effect.code == "let direction = normalize(particle.velocity);\n"
    assert effect.attributes == [Attribute.VELOCITY]


def test_output_must_be_an_output_slot():
    with pytest.raises(ValueError, match="references input slot 'sum.lhs'"):
        EffectCompiler().compile(normalize_sum({"bad": "sum.lhs"}))


def test_unknown_output_node():
    with pytest.raises(ValueError, match="unknown node"):
        EffectCompiler().compile(normalize_sum({"bad": "nope.out"}))


def test_unlinked_input():
    definition = normalize_sum({"total": "sum.result"})
    definition.links.pop()

    with pytest.raises(GraphEvalError, match="expected 2, got 1"):
        EffectCompiler().compile(definition)


def test_unknown_modifier():
    definition = normalize_sum({"total": "sum.result"})
    definition.modifiers.append(ModifierDef(type="Drag"))

    with pytest.raises(ValueError, match="Unknown modifier type"):
        EffectCompiler().compile(definition)


def test_output_named_like_a_generated_local():
    effect = EffectCompiler().compile(normalize_sum({"var0": "sum.result"}))

    assert effect.code == (
        "let var1 = normalize(particle.velocity);\n"
        "let var0 = (var1) + (var1);\n"
    )


def test_long_node_chain():
    depth = 1200
    nodes = [NodeDef(id="time", type="Time")]
    links = []
    previous = "time.time"
    for i in range(depth):
        nodes.append(NodeDef(id=f"add{i}", type="Add"))
        links.append(LinkDef(previous, f"add{i}.lhs"))
        links.append(LinkDef("time.delta_time", f"add{i}.rhs"))
        previous = f"add{i}.result"

    definition = GraphDefinition(
        name="chain", nodes=nodes, links=links, outputs={"total": previous}
    )
    effect = EffectCompiler().compile(definition)

    assert effect.code.startswith("let total = ")
    assert effect.code.count("sim_params.delta_time") == depth
    assert effect.code.count("sim_params.time") == 1
