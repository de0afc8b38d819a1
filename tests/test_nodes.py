import pytest

from fxgraph.codegen.context import to_wgsl_string
from fxgraph.expr.errors import GraphEvalError
from fxgraph.expr.operators import BuiltInOperator
from fxgraph.graph.node import SlotDir
from fxgraph.graph.nodes import (
    AddNode,
    AttributeNode,
    DivNode,
    MulNode,
    NormalizeNode,
    SubNode,
    TimeNode,
)
from schemas.attributes import Attribute
from schemas.value_types import ScalarType, Value, VEC3F


@pytest.mark.parametrize(
    "node_cls, symbol",
    [(AddNode, "+"), (SubNode, "-"), (MulNode, "*"), (DivNode, "/")],
)
def test_binary_nodes(module, node_cls, symbol):
    node = node_cls()
    three = module.lit(3)
    two = module.lit(2)
    before = len(module)

    with pytest.raises(GraphEvalError, match="expected 2, got 0"):
        node.eval(module, [])
    with pytest.raises(GraphEvalError, match="expected 2, got 1"):
        node.eval(module, [three])
    with pytest.raises(GraphEvalError, match="expected 2, got 3"):
        node.eval(module, [three, two, three])
    assert len(module) == before

    outputs = node.eval(module, [three, two])
    assert len(outputs) == 1
    # Structural only, never folded to a constant
    assert to_wgsl_string(module, outputs[0]) == f"(3) {symbol} (2)"


def test_binary_node_slots():
    slots = AddNode().slots()
    assert [s.name for s in slots] == ["lhs", "rhs", "result"]
    assert [s.dir for s in slots] == [SlotDir.INPUT, SlotDir.INPUT, SlotDir.OUTPUT]
    assert all(s.value_type is None for s in slots)


def test_attribute_node(module):
    node = AttributeNode(Attribute.POSITION)

    with pytest.raises(GraphEvalError, match="expected 0, got 1"):
        node.eval(module, [module.lit(1)])

    outputs = node.eval(module, [])
    assert len(outputs) == 1
    assert to_wgsl_string(module, outputs[0]) == "particle.position"

    (slot,) = node.slots()
    assert slot.name == "position"
    assert slot.dir == SlotDir.OUTPUT
    assert slot.value_type == VEC3F


def test_attribute_node_setter_updates_slot():
    node = AttributeNode(Attribute.POSITION)
    node.attr = Attribute.AGE

    (slot,) = node.slots()
    assert slot.name == "age"
    assert slot.value_type == ScalarType.FLOAT


def test_time_node(module):
    node = TimeNode()

    with pytest.raises(GraphEvalError, match="expected 0, got 1"):
        node.eval(module, [module.lit(1.0)])

    outputs = node.eval(module, [])
    assert [to_wgsl_string(module, h) for h in outputs] == [
        BuiltInOperator.TIME.to_wgsl_string(),
        BuiltInOperator.DELTA_TIME.to_wgsl_string(),
    ]
    assert [to_wgsl_string(module, h) for h in outputs] == [
        "sim_params.time",
        "sim_params.delta_time",
    ]

    slots = node.slots()
    assert [s.name for s in slots] == ["time", "delta_time"]
    assert all(s.dir == SlotDir.OUTPUT for s in slots)
    assert all(s.value_type == ScalarType.FLOAT for s in slots)


def test_normalize_node(module):
    node = NormalizeNode()
    ones = module.lit(Value.vec3(1, 1, 1))

    with pytest.raises(GraphEvalError, match="expected 1, got 0"):
        node.eval(module, [])
    with pytest.raises(GraphEvalError, match="expected 1, got 2"):
        node.eval(module, [ones, ones])

    outputs = node.eval(module, [ones])
    assert len(outputs) == 1
    assert to_wgsl_string(module, outputs[0]) == "normalize(vec3(1.,1.,1.))"

    slots = node.slots()
    assert [(s.name, s.dir) for s in slots] == [("in", SlotDir.INPUT), ("out", SlotDir.OUTPUT)]
