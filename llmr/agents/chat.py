import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from ..llm_api import LLMClient
from ..messages import Message, ToolCall, new_message
from ..tools.registry import Tool, get_tool
from .approval import ApprovalCallback
from .base import BaseAgent

logger = logging.getLogger(__name__)


class ToolCallLimitError(RuntimeError):
    pass


class ChatAgent(BaseAgent):
    """
    Conversational agent backed by an LLMClient.

    Each `request` sends the system prompt, the full history and the agent's
    tool specs. When the reply asks for tools, they are run (subject to the
    approval callback), their results are appended as "tool" messages, and
    the model is asked again, up to `max_tool_calls` rounds.

    `tool_calls` counts the tool rounds run over the agent's lifetime; it is
    not reset by `clear_messages`.

    The conversation is agent state: do not share one agent between
    branches that run concurrently.
    """

    def __init__(self, name: str, client: LLMClient, system_prompt: Optional[str] = None,
                 tools: Optional[Iterable[Union[str, Tool]]] = None,
                 approval_callback: Optional[ApprovalCallback] = None):
        super().__init__(name)
        self.client = client
        self.system_prompt = system_prompt
        self.approval_callback = approval_callback
        self.tools: Dict[str, Tool] = {}
        self.tool_calls = 0
        for tool in tools or []:
            self.add_tool(tool)

    def add_tool(self, tool: Union[str, Tool]) -> "ChatAgent":
        if isinstance(tool, str):
            tool = get_tool(tool)
        if not isinstance(tool, Tool):
            raise TypeError("tool must be a Tool or a registered tool name")
        self.tools[tool.name] = tool
        return self

    def set_system_prompt(self, prompt: str) -> "ChatAgent":
        if not isinstance(prompt, str):
            raise TypeError("System prompt must be a string")
        self.system_prompt = prompt
        return self

    def request(self, message: Union[str, Message, None] = None) -> "ChatAgent":
        """
        Send `message` and run the reply loop. If anything fails, the
        messages added by this call are dropped and the error is re-raised.
        """
        if isinstance(message, str):
            message = new_message(message, role="user")
        start = len(self.messages)
        if message is not None:
            self.append_message(message)

        try:
            return self._reply_loop()
        except Exception:
            del self.messages[start:]
            raise

    def _reply_loop(self) -> "ChatAgent":
        rounds = 0
        while True:
            reply = self.client.generate(self._outgoing(), tools=[t.to_spec() for t in self.tools.values()])
            self.append_message(reply)
            if not reply.tool_calls:
                return self

            if rounds >= self.client.config.max_tool_calls:
                raise ToolCallLimitError(
                    f"Agent {self.name} exceeded {self.client.config.max_tool_calls} tool call rounds"
                )
            rounds += 1
            self.tool_calls += 1
            for call in reply.tool_calls:
                self.append_message(Message(role="tool", content=self._run_tool(call), tool_call_id=call.id))

    def _outgoing(self) -> List[Message]:
        if self.system_prompt:
            return [new_message(self.system_prompt, role="system")] + self.messages
        return list(self.messages)

    def _run_tool(self, call: ToolCall) -> str:
        tool = self.tools.get(call.name)
        if tool is None:
            logger.warning("Tool '%s' not found", call.name)
            return f"Error: Tool '{call.name}' not found"

        if self.approval_callback is not None:
            decision = self.approval_callback(call)
            if isinstance(decision, str):
                return decision
            if not decision:
                return f"Tool call {call.name} was denied by the user"

        logger.info("Calling tool: %s", call.name)
        try:
            result = tool.handler(**call.arguments)
        except Exception as e:
            logger.warning("Error calling tool %s: %s", call.name, e)
            return f"Error calling tool: {e}"
        return _as_text(result)


def _as_text(result: Any) -> str:
    if isinstance(result, str):
        return result
    try:
        return json.dumps(result, sort_keys=True, default=str)
    except (TypeError, ValueError):
        return repr(result)
