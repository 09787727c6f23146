""" Registry of named tools, used by agents and by `tool:` steps in workflow YAML. """
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional


@dataclass(frozen=True)
class Tool:
    name: str
    handler: Callable[..., Any]
    description: str = ""
    parameters: Dict[str, Any] = field(default_factory=dict)  # JSON schema of the arguments

    def to_spec(self) -> Dict[str, Any]:
        """ Tool description in the shape chat-completion providers expect. """
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.parameters or {"type": "object", "properties": {}},
        }


_TOOLS: Dict[str, Tool] = {}


def register_tool(name: str, description: str = "", parameters: Optional[Dict[str, Any]] = None):
    def _wrap(fn):
        _TOOLS[name] = Tool(name, fn, description or (fn.__doc__ or "").strip(), parameters or {})
        return fn
    return _wrap


def get_tool(name: str) -> Tool:
    if name not in _TOOLS:
        raise ValueError(f"Tool not found: {name}")
    return _TOOLS[name]


def list_tools() -> List[str]:
    return sorted(_TOOLS)


def unregister_tool(name: str) -> None:
    _TOOLS.pop(name, None)
