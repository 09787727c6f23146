"""Tests for graph composition."""

import pytest
from llmr.workflow.builder import add_step, attach_condition, connect, merge_after, new_graph
from llmr.workflow.condition import make_condition
from llmr.workflow.errors import InvalidComposition
from llmr.workflow.models import FUNCTION, ConditionNode, Edge, Graph, Step
from llmr.workflow.step import make_step


def fetch(x):
    return x


def parse(x):
    return x


def store(x):
    return x


def test_new_graph_is_empty():
    """Test that a new graph has no nodes, edges or entry point."""
    g = new_graph("demo")
    assert g.name == "demo"
    assert g.nodes == {}
    assert g.edges == []
    assert g.entry_point is None
    assert g.current_exits == ()
    assert g.is_empty


def test_step_to_step_builds_two_node_graph():
    """Test that connecting two steps gives a linked two-node graph."""
    g = make_step(fetch) >> make_step(parse)
    assert isinstance(g, Graph)
    assert list(g.nodes) == ["fetch_1", "parse_2"]
    assert g.edges == [Edge("fetch_1", "parse_2")]
    assert g.entry_point == "fetch_1"
    assert g.current_exits == ("parse_2",)


def test_node_ids_are_sanitized_and_unique():
    """Test that ids come from the step name, cleaned up, with a counter suffix."""
    g = make_step(fetch, name="fetch data!") >> make_step(fetch, name="fetch data!")
    assert list(g.nodes) == ["fetch_data__1", "fetch_data__2"]


def test_empty_name_falls_back_to_node():
    """Test that a name with no usable characters still yields an id."""
    g = add_step(new_graph(), Step(FUNCTION, fetch, ""))
    assert g.entry_point == "node_1"


def test_graph_to_step_appends():
    """Test that appending a step wires it from the previous exit."""
    g = make_step(fetch) >> make_step(parse) >> make_step(store)
    assert g.edges == [Edge("fetch_1", "parse_2"), Edge("parse_2", "store_3")]
    assert g.current_exits == ("store_3",)


def test_first_step_becomes_entry_point():
    """Test that adding to an empty graph sets the entry point."""
    g = connect(new_graph(), make_step(fetch))
    assert g.entry_point == "fetch_1"
    assert g.edges == []


def test_condition_node_is_the_only_exit():
    """Test that after a condition the condition node itself is the exit."""
    cond = make_condition(lambda x: "a", a=make_step(parse), b=make_step(store))
    g = make_step(fetch) >> cond
    cond_id = g.current_exits[0]

    assert len(g.current_exits) == 1
    assert isinstance(g.nodes[cond_id], ConditionNode)
    assert g.nodes[cond_id].branch_names == ("a", "b")
    assert Edge("fetch_1", cond_id) in g.edges
    assert [(e.dest, e.branch) for e in g.branch_edges_from(cond_id)] == [("parse_3", "a"), ("store_4", "b")]


def test_condition_as_first_element_is_entry_point():
    """Test that a condition followed by a step starts at the condition."""
    cond = make_condition(lambda x: "a", a=make_step(parse))
    g = cond >> make_step(store)
    assert isinstance(g.nodes[g.entry_point], ConditionNode)
    assert g.plain_edges_from(g.entry_point) == [Edge(g.entry_point, g.current_exits[0])]


def test_graph_branch_is_merged_with_prefix():
    """Test that a graph body is copied in with branch-prefixed ids."""
    body = make_step(parse) >> make_step(store)
    g = make_step(fetch) >> make_condition(lambda x: "slow", slow=body)
    cond_id = g.current_exits[0]

    assert "slow_parse_1" in g.nodes
    assert "slow_store_2" in g.nodes
    assert Edge("slow_parse_1", "slow_store_2") in g.edges
    assert g.branch_edges_from(cond_id) == [Edge(cond_id, "slow_parse_1", branch="slow")]
    assert g.nodes[cond_id].branch_exits == {"slow": ("slow_store_2",)}


def test_merged_ids_never_collide():
    """Test that merging the same graph twice yields distinct ids."""
    tail = make_step(parse) >> make_step(store)
    g = make_condition(lambda x: "a", a=make_step(fetch)) >> tail
    twice = merge_after(g, tail)

    assert len(twice.nodes) == 6
    added = [node_id for node_id in twice.nodes if node_id not in g.nodes]
    assert len(added) == 2
    assert all(node_id.startswith("next_") for node_id in added)
    assert Edge("next_store_2", added[0]) in twice.edges
    assert twice.current_exits == (added[1],)


def test_nested_branch_labels_survive_merge():
    """Test that branch labels inside a merged body are kept."""
    inner = make_condition(lambda x: "deep", deep=make_step(store))
    body = make_step(parse) >> inner
    g = attach_condition(new_graph(), make_condition(lambda x: "outer", outer=body))
    labels = sorted(e.branch for e in g.edges if e.branch is not None)
    assert labels == ["deep", "outer"]


def test_condition_then_graph_merges_with_next_prefix():
    """Test that a condition followed by a graph prefixes the merged ids."""
    tail = make_step(parse) >> make_step(store)
    g = make_condition(lambda x: "a", a=make_step(fetch)) >> tail
    assert "next_parse_1" in g.nodes
    assert g.current_exits == ("next_store_2",)
    assert Edge(g.entry_point, "next_parse_1") in g.edges


def test_merge_after_empty_graph_is_noop():
    """Test that merging an empty graph changes nothing."""
    g = make_step(fetch) >> make_step(parse)
    merged = merge_after(g, new_graph())
    assert merged.nodes == g.nodes
    assert merged.edges == g.edges
    assert merged.current_exits == g.current_exits


def test_builder_functions_do_not_mutate_inputs():
    """Test that extending a graph leaves the original untouched."""
    base = make_step(fetch) >> make_step(parse)
    nodes, edges, exits = dict(base.nodes), list(base.edges), base.current_exits

    first = base >> make_step(store)
    second = connect(base, make_condition(lambda x: "a", a=make_step(store)))

    assert base.nodes == nodes
    assert base.edges == edges
    assert base.current_exits == exits
    assert first.nodes is not second.nodes
    assert len(first.nodes) == 3
    assert len(second.nodes) == 4


@pytest.mark.parametrize("left, right, message", [
    ("graph", "graph", "cannot connect graph to graph"),
    ("step", "graph", "cannot connect step to graph"),
    ("cond", "cond", "cannot connect condition to condition"),
    ("step", "int", "cannot connect step to int"),
])
def test_invalid_compositions(left, right, message):
    """Test that unsupported operand pairs raise InvalidComposition."""
    values = {
        "graph": make_step(fetch) >> make_step(parse),
        "step": make_step(store),
        "cond": make_condition(lambda x: "a", a=make_step(fetch)),
        "int": 3,
    }
    with pytest.raises(InvalidComposition, match=message):
        connect(values[left], values[right])


def test_invalid_composition_is_a_type_error():
    """Test that InvalidComposition can be caught as TypeError."""
    with pytest.raises(TypeError):
        connect("a", "b")


def test_merged_ids_use_sanitized_branch_prefix():
    """Test that branch names with spaces produce identifier-safe ids."""
    body = make_step(parse) >> make_step(store)
    g = make_step(fetch) >> make_condition(lambda x: "high value", {"high value": body})
    cond_id = g.current_exits[0]
    assert "high_value_parse_1" in g.nodes
    assert "high_value_store_2" in g.nodes
    assert g.branch_edges_from(cond_id) == [Edge(cond_id, "high_value_parse_1", branch="high value")]
    assert g.nodes[cond_id].branch_exits == {"high value": ("high_value_store_2",)}


def test_condition_node_records_only_graph_branch_exits():
    """Test the single condition node added by attach_condition with mixed bodies."""
    spec = make_condition(lambda x: "a", a=make_step(parse), b=make_step(parse) >> make_step(store))
    g = attach_condition(new_graph(), spec)
    conditions = [node_id for node_id, node in g.nodes.items() if isinstance(node, ConditionNode)]
    assert conditions == [g.entry_point]
    assert g.nodes[g.entry_point].branch_exits == {"b": ("b_store_2",)}
