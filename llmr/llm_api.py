"""
llm_api.py — chat-completion clients used by agents.

An LLMClient turns a conversation (list of Messages) plus optional tool
specs into the assistant's next Message. Concrete HTTP transports subclass
LLMClient and implement `_complete`; retries happen here so every transport
gets the same policy.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Sequence

from .config import ProviderConfig
from .messages import Message

logger = logging.getLogger(__name__)


# -------------------------
# ERRORS
# -------------------------

class ProviderError(Exception):
    """ A failed request to an LLM provider. """

    def __init__(self, message: str, retryable: bool = False, status_code: Optional[int] = None):
        super().__init__(message)
        self.retryable = retryable
        self.status_code = status_code


# --------------------------
# CLIENTS
# --------------------------

class LLMClient:
    """
    Base class for chat-completion clients.
    Subclasses implement `_complete()` for a real provider (OpenAI/Anthropic/self-hosted).
    """

    def __init__(self, config: Optional[ProviderConfig] = None):
        self.config = config or ProviderConfig(provider="local", url="http://localhost", model="stub")

    @property
    def model_name(self) -> str:
        return self.config.model

    @property
    def temperature(self) -> Optional[float]:
        return self.config.temperature

    def generate(self, messages: Sequence[Message], tools: Optional[List[Dict[str, Any]]] = None) -> Message:
        """
        Send the conversation and return the assistant's reply.
        Retryable ProviderErrors are retried up to `config.max_tries` attempts.
        """
        attempts = self.config.max_tries
        for attempt in range(1, attempts + 1):
            try:
                return self._complete(list(messages), tools or [])
            except ProviderError as e:
                if not e.retryable or attempt == attempts:
                    raise
                delay = self.config.retry_backoff * (2 ** (attempt - 1))
                logger.warning(
                    "%s request failed (%s), retrying in %.1fs (attempt %d/%d)",
                    self.config.provider, e, delay, attempt, attempts,
                )
                if delay:
                    time.sleep(delay)
        raise ProviderError("No attempts made")  # unreachable: max_tries >= 1

    def _complete(self, messages: List[Message], tools: List[Dict[str, Any]]) -> Message:
        raise NotImplementedError(f"{type(self).__name__} does not implement _complete()")


class ScriptedClient(LLMClient):
    """
    Deterministic client that plays back prepared replies in order.
    This is NOT a real LLM call; it backs demos and tests.

    A reply is a string, a Message, an exception instance (raised) or a
    callable receiving the message list.
    """

    def __init__(self, replies: Sequence[Any], config: Optional[ProviderConfig] = None):
        super().__init__(config)
        self.replies = list(replies)
        self.calls: List[Dict[str, Any]] = []

    def _complete(self, messages: List[Message], tools: List[Dict[str, Any]]) -> Message:
        self.calls.append({"messages": list(messages), "tools": list(tools)})
        if not self.replies:
            raise ProviderError("No scripted reply left")

        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        if callable(reply):
            reply = reply(messages)
        if isinstance(reply, Message):
            return reply
        return Message(role="assistant", content=reply)
