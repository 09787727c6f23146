""" Text rendering of workflow graphs for inspection. """

from typing import List

from .models import CAPABILITY, ConditionNode, Graph, Node


def render(graph: Graph) -> str:
    """
    Render `graph` as a tree, following the same path the executor takes.
    Condition nodes list their branches underneath.

        Workflow: pipeline
        Nodes: 4 | Edges: 3

        ┌─ [fn] preprocess
        │
        ├─ [when] classify(large, small)
        │   ├─ large: [fn] scale_down
        │   └─ small: [fn] boost
        │
        └─ [fn] format
    """
    header = f"Workflow: {graph.name or '<unnamed>'}\nNodes: {len(graph.nodes)} | Edges: {len(graph.edges)}\n\n"
    return header + diagram(graph)


def diagram(graph: Graph) -> str:
    if not graph.nodes:
        return "(empty workflow)"
    order = main_path(graph)
    if not order:
        return "(no executable path found)"

    lines: List[str] = []
    last = 0
    for i, node_id in enumerate(order):
        node = graph.nodes[node_id]
        if i == 0:
            lines.append(f"┌─ {describe(node, node_id)}")
        else:
            lines.append("│")
            lines.append(f"├─ {describe(node, node_id)}")
        last = len(lines) - 1
        if isinstance(node, ConditionNode):
            lines.extend(_branch_lines(graph, node_id))

    if lines[last].startswith("├─"):
        lines[last] = "└─" + lines[last][2:]
    return "\n".join(lines)


def main_path(graph: Graph) -> List[str]:
    """ Node ids reachable from the entry point along plain (non-branch) edges. """
    if graph.entry_point is None:
        return []
    visited: List[str] = []
    stack = [graph.entry_point]
    while stack:
        node_id = stack.pop()
        if node_id in visited:
            continue
        visited.append(node_id)
        stack.extend(reversed([e.dest for e in graph.plain_edges_from(node_id)]))
    return visited


def describe(node: Node, node_id: str) -> str:
    if isinstance(node, ConditionNode):
        return f"[when] {node.name}({', '.join(node.branch_names)})"
    tag = "agent" if node.kind == CAPABILITY else "fn"
    return f"[{tag}] {node.name}"


def _branch_lines(graph: Graph, condition_id: str) -> List[str]:
    edges = graph.branch_edges_from(condition_id)
    lines = []
    for i, edge in enumerate(edges):
        connector = "└─" if i == len(edges) - 1 else "├─"
        chain = " -> ".join(describe(graph.nodes[n], n) for n in _chain(graph, edge.dest))
        lines.append(f"│   {connector} {edge.branch}: {chain}")
    return lines


def _chain(graph: Graph, start: str) -> List[str]:
    """ The linear run of nodes starting at `start` (stops at a fork or a revisit). """
    chain = [start]
    current = start
    while True:
        nxt = graph.plain_edges_from(current)
        if len(nxt) != 1 or nxt[0].dest in chain:
            return chain
        current = nxt[0].dest
        chain.append(current)
