"""
Human approval for tool calls.

An approval callback receives the ToolCall and returns True (run it), False
(deny it) or a string (deny it, and tell the model why). Remembered
preferences live in a ToolApprovals object owned by the caller.
"""

from typing import Callable, Dict, Optional, Union

from ..messages import ToolCall

Decision = Union[bool, str]
ApprovalCallback = Callable[[ToolCall], Decision]


class ToolApprovals:
    """ Per-tool approve/block preferences. """

    def __init__(self):
        self._prefs: Dict[str, bool] = {}

    def store(self, tool_name: str, approved: bool) -> None:
        self._prefs[tool_name] = approved

    def check(self, tool_name: str) -> Optional[bool]:
        """ True/False when a preference is stored, otherwise None. """
        return self._prefs.get(tool_name)

    def clear(self) -> None:
        self._prefs.clear()

    def items(self):
        return sorted(self._prefs.items())


def blocked_reason(tool_name: str) -> str:
    return f"Tool {tool_name} is blocked by user preference"


def show_tool_details(call: ToolCall, say: Callable[..., None] = print) -> None:
    say("=== Tool Call Details ===")
    say("Tool Name:", call.name)
    say("Call ID:", call.id)
    say("Arguments (detailed):")
    if not call.arguments:
        say("  (no arguments)")
    for key, value in call.arguments.items():
        say(f"  {key}: {value!r}")


def prompt_human_approval(call: ToolCall, ask: Callable[[str], str] = input,
                          say: Callable[..., None] = print) -> bool:
    """ Ask whether to run `call`: y/n, or `details` to print the full arguments first. """
    say(f"Agent wants to use tool: {call.name}")
    say("[ARGS] Arguments:")
    if not call.arguments:
        say("  (no arguments)")
    for key, value in call.arguments.items():
        say(f"  {key}: {value}")

    while True:
        answer = ask("[?] Approve this tool call? (y/n/details): ").strip().lower()
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
        if answer in ("d", "details"):
            show_tool_details(call, say)
            continue
        say("Please respond with y/n/details")


def smart_approval(approvals: ToolApprovals, ask: Callable[[str], str] = input,
                   say: Callable[..., None] = print) -> ApprovalCallback:
    """
    Callback that honours stored preferences and otherwise prompts with
    yes / no / details / always approve this tool / block this tool.
    """

    def callback(call: ToolCall) -> Decision:
        stored = approvals.check(call.name)
        if stored is True:
            say(f"Auto-approving tool: {call.name}")
            return True
        if stored is False:
            say(f"Auto-blocking tool: {call.name}")
            return blocked_reason(call.name)

        say(f"Tool Call Request: {call.name}")
        if call.arguments:
            say("Args:", ", ".join(call.arguments))
        while True:
            answer = ask(
                "Action? (y)es/(n)o/(d)etails/(a)lways approve this tool/(b)lock this tool: "
            ).strip().lower()
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            if answer in ("d", "details"):
                show_tool_details(call, say)
            elif answer in ("a", "always"):
                approvals.store(call.name, True)
                say(f"Tool {call.name} will be auto-approved in future")
                return True
            elif answer in ("b", "block"):
                approvals.store(call.name, False)
                say(f"Tool {call.name} will be auto-blocked in future")
                return blocked_reason(call.name)
            else:
                say("Please respond with y/n/d/a/b")

    return callback
