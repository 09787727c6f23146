""" Factory for creating steps from workflow element specs. """
from typing import Any, Mapping, Optional

from ..tools.registry import get_tool
from .models import Step
from .schema import ElementSpec
from .step import make_step


def make_element_step(element: ElementSpec, agents: Optional[Mapping[str, Any]] = None) -> Step:
    """
    Resolve a `tool:` or `agent:` element to a Step.
    Tools come from the tool registry, agents from the `agents` mapping.
    """
    if element.tool is not None:
        tool = get_tool(element.tool)
        return make_step(_call_with_value(tool.handler), name=element.name or element.tool)

    if element.agent is not None:
        agents = agents or {}
        if element.agent not in agents:
            raise ValueError(f"Agent not found: {element.agent}")
        return make_step(agents[element.agent], name=element.name or element.agent)

    raise ValueError("Only tool and agent elements can be made into steps")


def _call_with_value(handler):
    # registered tools take keyword arguments; a mapping input is spread into them
    def run(value):
        if isinstance(value, Mapping):
            return handler(**value)
        return handler(value)

    run.__name__ = getattr(handler, "__name__", "tool")
    return run
