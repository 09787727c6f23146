""" Data models for workflow graphs """

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

FUNCTION = "function"
CAPABILITY = "capability"


class _Composable:
    """ Adds the `>>` composition operator (see builder.connect). """

    def __rshift__(self, other):
        # builder imports this module, so resolve it lazily
        from .builder import connect
        return connect(self, other)


@dataclass(frozen=True, eq=False)
class Step(_Composable):
    kind: str  # FUNCTION or CAPABILITY
    handler: Any
    name: str

    def __repr__(self) -> str:
        return f"Step({self.kind}: {self.name})"


@dataclass(frozen=True, eq=False)
class ConditionSpec(_Composable):
    """ A not-yet-attached branch point: a selector plus its named branch bodies. """
    selector: Callable[[Any], Any]
    branches: Tuple[Tuple[str, Any], ...]
    name: str = "condition"

    @property
    def branch_names(self) -> Tuple[str, ...]:
        return tuple(branch_name for branch_name, _ in self.branches)

    def __repr__(self) -> str:
        return f"ConditionSpec({', '.join(self.branch_names)})"


@dataclass(frozen=True, eq=False)
class ConditionNode:
    selector: Callable[[Any], Any]
    branch_names: Tuple[str, ...]
    name: str = "condition"
    # branch name -> re-keyed exit ids of a merged sub-graph body
    branch_exits: Dict[str, Tuple[str, ...]] = field(default_factory=dict)


Node = Union[Step, ConditionNode]


@dataclass(frozen=True)
class Edge:
    src: str
    dest: str
    branch: Optional[str] = None  # set only on edges leaving a condition node for a named branch


@dataclass(eq=False)
class Graph(_Composable):
    name: Optional[str] = None
    nodes: Dict[str, Node] = field(default_factory=dict)
    edges: List[Edge] = field(default_factory=list)
    entry_point: Optional[str] = None
    current_exits: Tuple[str, ...] = ()
    counter: int = 0

    @property
    def is_empty(self) -> bool:
        return self.entry_point is None

    def plain_edges_from(self, node_id: str) -> List[Edge]:
        return [e for e in self.edges if e.src == node_id and e.branch is None]

    def branch_edges_from(self, node_id: str) -> List[Edge]:
        return [e for e in self.edges if e.src == node_id and e.branch is not None]

    def __repr__(self) -> str:
        return f"Graph({self.name or '<unnamed>'}: {len(self.nodes)} nodes, {len(self.edges)} edges)"
