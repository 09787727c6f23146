""" Chat messages exchanged between agents and LLM clients. """

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

ROLES = ("system", "user", "assistant", "tool")


@dataclass
class ToolCall:
    """ A request from the model to run a tool. """
    id: str
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Message:
    role: str
    content: Any
    tool_calls: List[ToolCall] = field(default_factory=list)
    tool_call_id: Optional[str] = None  # set on "tool" messages answering a ToolCall

    def __str__(self) -> str:
        return f"{self.role}: {self.content}"


def new_message(content: Any, role: str = "user") -> Message:
    if role not in ROLES:
        raise ValueError(f"Unknown message role: {role}")
    return Message(role=role, content=content)
