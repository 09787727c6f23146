"""
Build workflow graphs by composition.

Every function here returns a new Graph and leaves its arguments untouched,
so a graph can be extended in several directions without the results
sharing state.

    graph = make_step(add_ten) >> make_step(double) >> when(classify, hi=..., lo=...)
"""

import re
from typing import Any, Dict, Optional, Tuple

from .errors import InvalidComposition
from .models import ConditionNode, ConditionSpec, Edge, Graph, Node, Step


def new_graph(name: Optional[str] = None) -> Graph:
    """ An empty graph: no nodes, no entry point, empty exit frontier. """
    return Graph(name=name)


def connect(left: Any, right: Any) -> Graph:
    """
    Compose two workflow elements into a graph.

    Supported operands:
      - step -> step, step -> condition
      - graph -> step, graph -> condition
      - condition -> step, condition -> graph (the condition becomes the entry point)

    After a condition is attached the condition node itself is the only exit,
    so whatever comes next receives the dict of branch results once.
    """
    if isinstance(left, Step) and isinstance(right, Step):
        return add_step(add_step(new_graph(), left), right)
    if isinstance(left, Step) and isinstance(right, ConditionSpec):
        return attach_condition(add_step(new_graph(), left), right)
    if isinstance(left, Graph) and isinstance(right, Step):
        return add_step(left, right)
    if isinstance(left, Graph) and isinstance(right, ConditionSpec):
        return attach_condition(left, right)
    if isinstance(left, ConditionSpec) and isinstance(right, Step):
        return add_step(attach_condition(new_graph(), left), right)
    if isinstance(left, ConditionSpec) and isinstance(right, Graph):
        return merge_after(attach_condition(new_graph(), left), right)

    raise InvalidComposition(_kind(left), _kind(right))


def add_step(graph: Graph, step: Step) -> Graph:
    """ Append `step`, wired from every current exit; it becomes the only exit. """
    g = _copy(graph)
    step_id = _next_id(g, step.name)
    _add_node(g, step_id, step)
    for exit_id in graph.current_exits:
        g.edges.append(Edge(exit_id, step_id))
    g.current_exits = (step_id,)
    return g


def attach_condition(graph: Graph, spec: ConditionSpec) -> Graph:
    """
    Add a condition node after the current exits, plus its branch bodies.

    Step bodies become single nodes reached by a branch-labelled edge. Graph
    bodies are merged with their ids prefixed by the branch name; their exits
    are recorded on the condition node but left unwired.
    """
    g = _copy(graph)
    condition_id = _next_id(g, spec.name)
    # branch_exits is filled in below, as graph bodies are merged
    branch_exits: Dict[str, Tuple[str, ...]] = {}
    _add_node(g, condition_id, ConditionNode(spec.selector, spec.branch_names, spec.name, branch_exits))
    for exit_id in graph.current_exits:
        g.edges.append(Edge(exit_id, condition_id))

    for branch_name, body in spec.branches:
        if isinstance(body, Step):
            step_id = _next_id(g, body.name)
            _add_node(g, step_id, body)
            g.edges.append(Edge(condition_id, step_id, branch=branch_name))
        else:
            mapping = _merge_nodes(g, body, prefix=branch_name)
            if body.entry_point is not None:
                g.edges.append(Edge(condition_id, mapping[body.entry_point], branch=branch_name))
            branch_exits[branch_name] = tuple(mapping[x] for x in body.current_exits)

    g.current_exits = (condition_id,)
    return g


def merge_after(graph: Graph, other: Graph) -> Graph:
    """ Merge `other` into `graph`, wiring the current exits to its entry point. """
    g = _copy(graph)
    if other.entry_point is None:
        return g

    mapping = _merge_nodes(g, other, prefix="next")
    for exit_id in graph.current_exits:
        g.edges.append(Edge(exit_id, mapping[other.entry_point]))
    g.current_exits = tuple(mapping[x] for x in other.current_exits)
    if g.name is None:
        g.name = other.name
    return g


# -------------------------
# HELPERS
# -------------------------

def _kind(obj: Any) -> str:
    if isinstance(obj, Step):
        return "step"
    if isinstance(obj, Graph):
        return "graph"
    if isinstance(obj, ConditionSpec):
        return "condition"
    return type(obj).__name__


def _copy(graph: Graph) -> Graph:
    return Graph(
        name=graph.name,
        nodes=dict(graph.nodes),
        edges=list(graph.edges),
        entry_point=graph.entry_point,
        current_exits=tuple(graph.current_exits),
        counter=graph.counter,
    )


def _sanitize(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_]", "_", name or "") or "node"


def _next_id(g: Graph, base_name: str) -> str:
    g.counter += 1
    return _unique_id(g, f"{_sanitize(base_name)}_{g.counter}")


def _unique_id(g: Graph, candidate: str) -> str:
    node_id = candidate
    while node_id in g.nodes:
        g.counter += 1
        node_id = f"{candidate}_{g.counter}"
    return node_id


def _add_node(g: Graph, node_id: str, node: Node) -> None:
    g.nodes[node_id] = node
    if g.entry_point is None:
        g.entry_point = node_id


def _merge_nodes(g: Graph, other: Graph, prefix: str) -> Dict[str, str]:
    """ Copy `other`'s nodes and edges into `g` under prefixed ids; returns old id -> new id. """
    mapping: Dict[str, str] = {}
    for node_id, node in other.nodes.items():
        new_id = _unique_id(g, f"{_sanitize(prefix)}_{node_id}")
        mapping[node_id] = new_id
        g.nodes[new_id] = node

    # nested condition nodes refer to their branch exits by id
    for node_id, new_id in mapping.items():
        node = other.nodes[node_id]
        if isinstance(node, ConditionNode) and node.branch_exits:
            rekeyed = {b: tuple(mapping[x] for x in exits) for b, exits in node.branch_exits.items()}
            g.nodes[new_id] = ConditionNode(node.selector, node.branch_names, node.name, rekeyed)

    for edge in other.edges:
        g.edges.append(Edge(mapping[edge.src], mapping[edge.dest], branch=edge.branch))
    return mapping
