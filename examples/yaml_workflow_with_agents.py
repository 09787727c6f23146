"""Example: load a YAML workflow that mixes registered tools and a chat agent.

The agent is backed by ScriptedClient, so no provider account is needed.
"""
import logging

from llmr.agents.chat import ChatAgent
from llmr.llm_api import ScriptedClient
from llmr.messages import Message, ToolCall
from llmr.tools.registry import register_tool
from llmr.workflow.compiler import load_workflow
from llmr.workflow.diagram import render
from llmr.workflow.executor import execute


@register_tool("tickets.score")
def score_ticket(text):
    """Score the urgency of a support ticket."""
    urgent = sum(word in text.lower() for word in ("down", "outage", "urgent"))
    return {"text": text, "urgency": urgent}


@register_tool("tickets.route")
def route_ticket(text, urgency):
    """Pick the queue for a ticket."""
    return "pager" if urgency >= 2 else "inbox"


@register_tool("kb.search", parameters={"type": "object", "properties": {"query": {"type": "string"}}})
def search_kb(query):
    """Search the knowledge base."""
    return ["Restart the gateway", "Check the status page"]


WORKFLOW = """
name: triage
description: Score a ticket, then route it and draft a reply in parallel branches
steps:
  - tool: tickets.score
  - name: triage
    branches:
      queue:
        steps:
          - tool: tickets.route
      reply:
        when: "urgency > 0"
        steps:
          - agent: writer
"""


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    client = ScriptedClient([
        Message(role="assistant", content="", tool_calls=[ToolCall("c1", "kb.search", {"query": "outage"})]),
        "We are on it: the gateway is being restarted. Check the status page for updates.",
    ])
    writer = ChatAgent("writer", client, system_prompt="Draft short replies to support tickets.",
                       tools=["kb.search"])

    graph = load_workflow(WORKFLOW, agents={"writer": writer})
    print(render(graph))
    print()
    result = execute(graph, "Site is down, urgent outage!", parallel=True)
    for branch, output in result.items():
        print(f"{branch}: {output}")


if __name__ == "__main__":
    main()
