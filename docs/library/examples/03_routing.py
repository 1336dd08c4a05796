"""
Example 03: Routing support tickets to specialised prompts.

Run:
    uv run python docs/library/examples/03_routing.py
"""

from __future__ import annotations

import asyncio

from llmflows.chat import ChatClient
from llmflows.llms import create_llm_from_env
from llmflows.workflows import determine_route, step_prompt

ROUTES = {
    "billing": "You are a billing support specialist. Acknowledge the issue, "
    "explain charges clearly and list next steps with a timeline.",
    "technical": "You are a technical support engineer. Give numbered "
    "troubleshooting steps and workarounds.",
    "account": "You are an account security specialist. Prioritise account "
    "security and verification.",
    "product": "You are a product specialist. Focus on feature education "
    "with concrete examples.",
}

TICKETS = [
    "I was charged twice for my subscription this month. Order #4451.",
    "The app crashes every time I export a report to PDF.",
    "I can't log in after resetting my password.",
]


async def main() -> None:
    client = ChatClient(create_llm_from_env())
    for ticket in TICKETS:
        selection = await determine_route(client, ticket, ROUTES)
        print(f"[{selection.selection}] {selection.reasoning}")
        answer = await client.ask(step_prompt(ROUTES[selection.selection], ticket))
        print(answer.text)
        print()


if __name__ == "__main__":
    asyncio.run(main())
