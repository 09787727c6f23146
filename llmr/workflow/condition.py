""" Conditional branching: selectors choose zero or more named branches. """

from collections.abc import Iterable, Mapping
from typing import Any, Callable, List, Tuple

from .errors import DuplicateBranchError, InvalidCondition
from .models import ConditionSpec, Graph, Step


def make_condition(selector: Callable[[Any], Any], branches: Any = None, *, name: str = "condition", **named_branches: Any) -> ConditionSpec:
    """
    Create a branch point.

    `selector(value)` returns the names of the branches to run: a single name,
    a sequence of names (all of them run), or nothing. Branch bodies are steps
    or graphs, given as a mapping, as (name, body) pairs, as keyword
    arguments, or any mix of these. A branch name may only appear once.
    `name` is the condition's display name, so a branch called "name" has
    to be given in the mapping or pairs form.

        make_condition(classify, large=make_step(scale_down), small=make_step(boost))
    """
    if not callable(selector):
        raise InvalidCondition("Condition selector must be callable")
    if not isinstance(name, str) or not name:
        raise InvalidCondition(
            f"Condition name must be a non-empty string, got {type(name).__name__}; "
            "pass a branch called 'name' in the branches mapping"
        )

    pairs: List[Tuple[Any, Any]] = []
    if branches is not None:
        if isinstance(branches, Mapping):
            pairs.extend(branches.items())
        elif isinstance(branches, Iterable) and not isinstance(branches, (str, bytes)):
            for item in branches:
                if not isinstance(item, tuple) or len(item) != 2:
                    raise InvalidCondition(f"Branch entries must be (name, body) pairs, got {item!r}")
                pairs.append(item)
        else:
            raise InvalidCondition("Branches must be a mapping or a sequence of (name, body) pairs")
    pairs.extend(named_branches.items())

    if not pairs:
        raise InvalidCondition("A condition requires at least one branch")

    seen = set()
    for branch_name, body in pairs:
        if not isinstance(branch_name, str) or not branch_name:
            raise InvalidCondition("All branches must be named with non-empty strings")
        if branch_name in seen:
            raise DuplicateBranchError(branch_name)
        seen.add(branch_name)
        if not isinstance(body, (Step, Graph)):
            raise InvalidCondition(
                f"Branch {branch_name!r} must be a step or a graph, got {type(body).__name__}"
            )

    return ConditionSpec(selector=selector, branches=tuple(pairs), name=name)


# Mirrors the `when(...)` spelling used in workflow definitions.
when = make_condition


def selected_names(selection: Any) -> List[str]:
    """ Normalise a selector's return value to an ordered list of names. """
    if selection is None:
        return []
    if isinstance(selection, str):
        return [selection]
    if isinstance(selection, Iterable):
        return [s for s in selection if isinstance(s, str)]
    raise TypeError(f"Selector must return branch names, got {type(selection).__name__}")

