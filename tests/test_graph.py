import pytest

from fxgraph.graph.exceptions import GraphContractError
from fxgraph.graph.graph import Graph
from fxgraph.graph.node import NodeId, SlotId
from fxgraph.graph.nodes import AddNode, AttributeNode, TimeNode
from schemas.attributes import Attribute


@pytest.fixture
def time_and_add(graph):
    time = graph.add_node(TimeNode())
    add = graph.add_node(AddNode())
    return time, add


def test_add_node_allocates_slots(graph):
    add = graph.add_node(AddNode())
    time = graph.add_node(TimeNode())

    assert add == NodeId(1)
    assert time == NodeId(2)
    assert graph.node_count == 2
    assert graph.slot_count == 5

    assert graph.slots(add) == [SlotId(1), SlotId(2), SlotId(3)]
    assert graph.input_slots(add) == [SlotId(1), SlotId(2)]
    assert graph.output_slots(add) == [SlotId(3)]
    assert graph.input_slots(time) == []
    assert graph.output_slots(time) == [SlotId(4), SlotId(5)]


def test_slots_round_trip_declarations(graph):
    node = TimeNode()
    node_id = graph.add_node(node)

    slot_defs = [graph.get_slot(s).slot_def for s in graph.slots(node_id)]
    assert slot_defs == list(node.slots())
    assert all(graph.get_slot(s).node_id == node_id for s in graph.slots(node_id))


def test_link(graph, time_and_add):
    time, add = time_and_add
    out = graph.output_slots(time)[0]
    lhs = graph.input_slots(add)[0]

    graph.link(out, lhs)

    assert graph.linked_slots(out) == (lhs,)
    assert graph.linked_slots(lhs) == (out,)
    assert graph.source_slot(lhs) == out


def test_link_is_idempotent(graph, time_and_add):
    time, add = time_and_add
    out = graph.output_slots(time)[0]
    lhs = graph.input_slots(add)[0]

    graph.link(out, lhs)
    graph.link(out, lhs)

    assert graph.linked_slots(out) == (lhs,)
    assert graph.linked_slots(lhs) == (out,)


def test_output_fans_out(graph, time_and_add):
    time, add = time_and_add
    out = graph.output_slots(time)[1]
    lhs, rhs = graph.input_slots(add)

    graph.link(out, lhs)
    graph.link(out, rhs)

    assert graph.linked_slots(out) == (lhs, rhs)
    assert graph.source_slot(lhs) == out
    assert graph.source_slot(rhs) == out


def test_input_link_is_replaced(graph, time_and_add):
    time, add = time_and_add
    elapsed, delta = graph.output_slots(time)
    lhs = graph.input_slots(add)[0]

    graph.link(elapsed, lhs)
    graph.link(delta, lhs)

    assert graph.source_slot(lhs) == delta
    assert graph.linked_slots(delta) == (lhs,)
    # The previous source no longer lists the input
    assert graph.linked_slots(elapsed) == ()


def test_link_direction_errors(graph, time_and_add):
    time, add = time_and_add
    elapsed, delta = graph.output_slots(time)
    lhs, rhs = graph.input_slots(add)

    with pytest.raises(GraphContractError):
        graph.link(lhs, elapsed)
    with pytest.raises(GraphContractError):
        graph.link(elapsed, delta)
    with pytest.raises(GraphContractError):
        graph.link(lhs, rhs)

    for slot_id in (elapsed, delta, lhs, rhs):
        assert graph.linked_slots(slot_id) == ()


def test_invalid_ids(graph, time_and_add):
    time, add = time_and_add
    lhs = graph.input_slots(add)[0]

    with pytest.raises(GraphContractError, match="Invalid slot id"):
        graph.link(SlotId(99), lhs)
    with pytest.raises(GraphContractError, match="Invalid node id"):
        graph.slots(NodeId(9))
    with pytest.raises(GraphContractError, match="Invalid node id"):
        graph.get_node(NodeId(3))


def test_unlink(graph, time_and_add):
    time, add = time_and_add
    out = graph.output_slots(time)[0]
    lhs, rhs = graph.input_slots(add)

    assert graph.unlink(out, lhs) is False

    graph.link(out, lhs)
    graph.link(out, rhs)
    assert graph.unlink(out, lhs) is True

    assert graph.linked_slots(out) == (rhs,)
    assert graph.source_slot(lhs) is None
    assert graph.source_slot(rhs) == out


def test_unlink_direction_error(graph, time_and_add):
    time, _ = time_and_add
    elapsed, delta = graph.output_slots(time)

    with pytest.raises(GraphContractError):
        graph.unlink(elapsed, delta)


def test_unlink_all_from_output(graph, time_and_add):
    time, add = time_and_add
    out = graph.output_slots(time)[0]
    lhs, rhs = graph.input_slots(add)
    graph.link(out, lhs)
    graph.link(out, rhs)

    graph.unlink_all(out)

    assert graph.linked_slots(out) == ()
    assert graph.source_slot(lhs) is None
    assert graph.source_slot(rhs) is None


def test_unlink_all_from_input(graph, time_and_add):
    time, add = time_and_add
    out = graph.output_slots(time)[0]
    lhs, rhs = graph.input_slots(add)
    graph.link(out, lhs)
    graph.link(out, rhs)

    graph.unlink_all(lhs)

    assert graph.source_slot(lhs) is None
    assert graph.linked_slots(out) == (rhs,)


def test_slot_lookup_by_name(graph):
    first = graph.add_node(AddNode())
    second = graph.add_node(AddNode())

    assert graph.get_slot_id("result") == graph.output_slots(first)[0]
    assert graph.get_slot_id("missing") is None
    assert graph.find_slot(second, "result") == graph.output_slots(second)[0]
    assert graph.find_slot(second, "missing") is None


def test_source_slot_of_output_is_an_error(graph):
    node = graph.add_node(AttributeNode(Attribute.POSITION))
    (out,) = graph.output_slots(node)

    with pytest.raises(GraphContractError, match="not an input slot"):
        graph.source_slot(out)


def test_cycles_are_accepted():
    graph = Graph()
    first = graph.add_node(AddNode())
    second = graph.add_node(AddNode())

    graph.link(graph.output_slots(first)[0], graph.input_slots(second)[0])
    graph.link(graph.output_slots(second)[0], graph.input_slots(first)[0])

    assert graph.source_slot(graph.input_slots(first)[0]) == graph.output_slots(second)[0]
