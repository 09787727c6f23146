"""
Execute workflow graphs.

Traversal starts at the entry point and threads a single value through the
graph. A step node transforms the value and hands it to its one successor.
A condition node runs every selected branch on the same input, collects the
results into a dict keyed by branch name, and hands that dict on to its
successor (or returns it when nothing follows). Any failure aborts the run.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from .builder import add_step, attach_condition, new_graph
from .condition import selected_names
from .context import ExecutionTrace
from .errors import EmptyGraphError, MultipleOutgoingEdgesError, StepExecutionError
from .models import ConditionNode, ConditionSpec, Edge, Graph, Step
from .step import execute_step

logger = logging.getLogger(__name__)


def execute(target: Any, value: Any, *, trace: Optional[ExecutionTrace] = None,
            parallel: bool = False, max_workers: Optional[int] = None) -> Any:
    """
    Run `target` (a Graph, a ConditionSpec or a single Step) on `value`.

    With `parallel=True` the selected branches of each condition node run on a
    thread pool. The result is the same as a sequential run, and when branches
    fail the one that comes first in traversal order is raised.
    """
    graph = as_graph(target)
    if graph.entry_point is None:
        raise EmptyGraphError(graph.name)

    run = _Run(graph, trace, parallel, max_workers)
    return run.from_node(graph.entry_point, value)


def as_graph(target: Any) -> Graph:
    if isinstance(target, Graph):
        return target
    if isinstance(target, ConditionSpec):
        return attach_condition(new_graph(), target)
    if isinstance(target, Step):
        return add_step(new_graph(), target)
    raise TypeError(f"Cannot execute {type(target).__name__}: expected a graph, condition or step")


class _Run:
    """ State for a single `execute` call. The graph itself is only read. """

    def __init__(self, graph: Graph, trace: Optional[ExecutionTrace], parallel: bool, max_workers: Optional[int]):
        self.graph = graph
        self.trace = trace
        self.parallel = parallel
        self.max_workers = max_workers

    def from_node(self, node_id: str, value: Any) -> Any:
        current: Optional[str] = node_id
        while current is not None:
            node = self.graph.nodes[current]
            if isinstance(node, ConditionNode):
                value = self._run_condition(current, node, value)
            else:
                value = self._run_step(current, node, value)
            current = self._successor(current)
        return value

    def _run_step(self, node_id: str, step: Step, value: Any) -> Any:
        logger.debug("Executing node: %s (%s)", step.name, node_id)
        self._record(node_id, step.kind, step.name)
        return execute_step(step, value, node_id=node_id)

    def _run_condition(self, node_id: str, node: ConditionNode, value: Any) -> Dict[str, Any]:
        try:
            selected = selected_names(node.selector(value))
        except Exception as e:
            raise StepExecutionError(node.name, e, node_id=node_id, kind="condition") from e

        logger.debug("Condition node '%s' selected branches: %s", node.name, ", ".join(selected) or "<none>")
        self._record(node_id, "condition", node.name, selected=list(selected))

        # declaration order, restricted to selected names that have an edge
        edges = [e for e in self.graph.branch_edges_from(node_id) if e.branch in selected]
        if not edges:
            logger.debug("No branches selected for condition node '%s'", node.name)
            return {}

        if self.parallel and len(edges) > 1:
            return self._run_branches_concurrently(edges, value)

        results: Dict[str, Any] = {}
        for edge in edges:
            logger.debug("Executing branch '%s' -> node '%s'", edge.branch, edge.dest)
            results[edge.branch] = self.from_node(edge.dest, value)
        return results

    def _run_branches_concurrently(self, edges: List[Edge], value: Any) -> Dict[str, Any]:
        with ThreadPoolExecutor(max_workers=self.max_workers or len(edges)) as pool:
            futures = [(edge.branch, pool.submit(self.from_node, edge.dest, value)) for edge in edges]
            results: Dict[str, Any] = {}
            try:
                for branch, future in futures:
                    results[branch] = future.result()
            except BaseException:
                for _, future in futures:
                    future.cancel()
                raise
        return results

    def _successor(self, node_id: str) -> Optional[str]:
        edges = self.graph.plain_edges_from(node_id)
        if not edges:
            return None
        if len(edges) > 1:
            raise MultipleOutgoingEdgesError(node_id, len(edges))
        return edges[0].dest

    def _record(self, node_id: str, kind: str, name: str, **details: Any) -> None:
        if self.trace is not None:
            self.trace.record(node_id, kind, name, **details)
