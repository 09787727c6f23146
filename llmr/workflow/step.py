""" Wrap functions and agents into workflow steps. """

import functools
import json
from typing import Any, Optional

from ..agents.base import BaseAgent
from .errors import StepExecutionError
from .models import CAPABILITY, FUNCTION, Step


def make_step(source: Any, name: Optional[str] = None) -> Step:
    """
    Create a step from a plain callable or a capability (an agent).

    `name` is only used for display and error messages; when omitted it is
    derived from the function name, or "agent" for capabilities.
    """
    if isinstance(source, Step):
        return source if name is None else Step(source.kind, source.handler, name)

    if is_capability(source):
        return Step(CAPABILITY, source, name or "agent")

    if callable(source):
        return Step(FUNCTION, source, name or _derive_name(source))

    raise TypeError(f"Cannot make a step from {type(source).__name__}: expected a callable or an agent")


def is_capability(obj: Any) -> bool:
    if isinstance(obj, BaseAgent):
        return True
    return callable(getattr(obj, "request", None)) and callable(getattr(obj, "last_message", None))


def execute_step(step: Step, value: Any, node_id: Optional[str] = None) -> Any:
    """ Run a single step on `value`, wrapping any failure in StepExecutionError. """
    if step.kind == CAPABILITY:
        try:
            return _invoke_capability(step.handler, value)
        except Exception as e:
            raise StepExecutionError(step.name, e, node_id=node_id, kind="agent step") from e

    try:
        return step.handler(value)
    except Exception as e:
        raise StepExecutionError(step.name, e, node_id=node_id, kind="function step") from e


def _invoke_capability(agent: Any, value: Any) -> Any:
    agent.request(to_prompt_text(value))
    last = agent.last_message()
    if last is None:
        return None
    return getattr(last, "content", last)


def to_prompt_text(value: Any) -> str:
    """
    Render an input value as message text. Strings pass through unchanged;
    anything else is serialised to stable (key-sorted) JSON, or repr() when
    it cannot be encoded.
    """
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, sort_keys=True, default=_json_default)
    except (TypeError, ValueError):
        return repr(value)


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=repr)
    if isinstance(obj, tuple):
        return list(obj)
    return repr(obj)


def _derive_name(fn: Any) -> str:
    if isinstance(fn, functools.partial):
        return _derive_name(fn.func)
    name = getattr(fn, "__name__", None)
    if name == "<lambda>":
        return "lambda"
    if name:
        return name
    return type(fn).__name__
