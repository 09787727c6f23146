from abc import ABC, abstractmethod
from typing import List, Optional, Union

from ..messages import Message


class BaseAgent(ABC):
    """ Abstract base class for all agents. An agent owns one conversation. """

    def __init__(self, name: str):
        if not isinstance(name, str) or not name:
            raise ValueError("Agent name must be a non-empty string")
        self.name = name
        self.messages: List[Message] = []

    def append_message(self, message: Message) -> "BaseAgent":
        if not isinstance(message, Message):
            raise TypeError("message must be a Message")
        self.messages.append(message)
        return self

    def get_messages(self) -> List[Message]:
        return list(self.messages)

    def last_message(self) -> Optional[Message]:
        return self.messages[-1] if self.messages else None

    def clear_messages(self) -> "BaseAgent":
        self.messages = []
        return self

    @abstractmethod
    def request(self, message: Union[str, Message, None] = None) -> "BaseAgent":
        """
        Add `message` (if any) to the conversation and obtain the next reply.
        With no message, the existing history is sent as is.
        Must be implemented by subclasses.
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {len(self.messages)} messages)"
