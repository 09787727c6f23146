""" Exceptions raised while building or executing workflow graphs. """

from typing import Optional


class WorkflowError(Exception):
    """ Base class for all workflow errors. """


class InvalidComposition(WorkflowError, TypeError):
    """ Raised by `connect` when the two operands cannot be composed. """

    def __init__(self, left_kind: str, right_kind: str):
        self.left_kind = left_kind
        self.right_kind = right_kind
        super().__init__(
            f"Invalid workflow composition: cannot connect {left_kind} to {right_kind}"
        )


class InvalidCondition(WorkflowError, ValueError):
    """ Raised by `make_condition` for malformed selectors or branches. """


class DuplicateBranchError(InvalidCondition):
    def __init__(self, branch_name: str):
        self.branch_name = branch_name
        super().__init__(f"Duplicate branch name: {branch_name!r}")


class EmptyGraphError(WorkflowError):
    """ Raised when executing a graph that has no entry point. """

    def __init__(self, graph_name: Optional[str] = None):
        self.graph_name = graph_name
        label = f" '{graph_name}'" if graph_name else ""
        super().__init__(f"Workflow{label} has no entry point")


class StepExecutionError(WorkflowError):
    """
    Wraps any failure raised by a step handler, a capability or a selector.
    The original exception is kept on `cause` and chained as `__cause__`.
    """

    def __init__(self, step_name: str, cause: BaseException, node_id: Optional[str] = None, kind: str = "step"):
        self.step_name = step_name
        self.node_id = node_id
        self.cause = cause
        self.kind = kind
        where = f" (node {node_id})" if node_id and node_id != step_name else ""
        super().__init__(f"Error in {kind} '{step_name}'{where}: {cause}")


class MultipleOutgoingEdgesError(WorkflowError):
    """ A node that may only have one successor has several. """

    def __init__(self, node_id: str, count: int):
        self.node_id = node_id
        self.count = count
        super().__init__(f"Node {node_id} has {count} outgoing edges, expected at most one")
