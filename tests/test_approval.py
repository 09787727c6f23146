"""Tests for human approval of tool calls."""

from llmr.agents.approval import (ToolApprovals, blocked_reason, prompt_human_approval, show_tool_details,
                                  smart_approval)
from llmr.messages import ToolCall

CALL = ToolCall("c1", "files.delete", {"path": "/tmp/x"})


class Console:
    """Scripted stand-in for input()/print()."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []
        self.output = []

    def ask(self, prompt):
        self.prompts.append(prompt)
        return self.answers.pop(0)

    def say(self, *parts):
        self.output.append(" ".join(str(p) for p in parts))


def test_tool_approvals_store():
    """Test storing, checking and clearing preferences."""
    approvals = ToolApprovals()
    assert approvals.check("files.delete") is None
    approvals.store("files.delete", False)
    approvals.store("files.read", True)
    assert approvals.check("files.delete") is False
    assert approvals.items() == [("files.delete", False), ("files.read", True)]
    approvals.clear()
    assert approvals.items() == []


def test_prompt_human_approval_yes_and_no():
    """Test the y/n answers."""
    assert prompt_human_approval(CALL, ask=Console("y").ask, say=Console().say) is True
    assert prompt_human_approval(CALL, ask=Console(" No ").ask, say=Console().say) is False


def test_prompt_human_approval_details_then_answer():
    """Test that 'details' prints the arguments and asks again."""
    console = Console("maybe", "details", "yes")
    assert prompt_human_approval(CALL, ask=console.ask, say=console.say) is True
    assert len(console.prompts) == 3
    assert "Please respond with y/n/details" in console.output
    assert "=== Tool Call Details ===" in console.output
    assert "  path: '/tmp/x'" in console.output


def test_show_tool_details_without_arguments():
    """Test the details view of a call with no arguments."""
    console = Console()
    show_tool_details(ToolCall("c2", "clock.now"), say=console.say)
    assert "Tool Name: clock.now" in console.output
    assert "  (no arguments)" in console.output


def test_smart_approval_always_remembers():
    """Test that 'always' approves and skips the prompt next time."""
    approvals = ToolApprovals()
    console = Console("a")
    callback = smart_approval(approvals, ask=console.ask, say=console.say)
    assert callback(CALL) is True
    assert approvals.check("files.delete") is True
    assert callback(CALL) is True
    assert len(console.prompts) == 1


def test_smart_approval_block_remembers():
    """Test that 'block' denies with a reason and remembers it."""
    approvals = ToolApprovals()
    console = Console("b")
    callback = smart_approval(approvals, ask=console.ask, say=console.say)
    assert callback(CALL) == blocked_reason("files.delete")
    assert callback(CALL) == "Tool files.delete is blocked by user preference"
    assert len(console.prompts) == 1


def test_smart_approval_one_off_answers_are_not_stored():
    """Test that plain yes/no answers leave no preference behind."""
    approvals = ToolApprovals()
    console = Console("d", "?", "n", "y")
    callback = smart_approval(approvals, ask=console.ask, say=console.say)
    assert callback(CALL) is False
    assert callback(CALL) is True
    assert approvals.items() == []
    assert "Please respond with y/n/d/a/b" in console.output
