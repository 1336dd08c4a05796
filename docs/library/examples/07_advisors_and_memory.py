"""
Example 07: Advisors and chat memory.

Logging, a safeguard and conversation memory around every call.

Run:
    uv run python docs/library/examples/07_advisors_and_memory.py
"""

from __future__ import annotations

import asyncio
import logging

from llmflows.advisors import ChatMemoryAdvisor, LoggingAdvisor, SafeGuardAdvisor
from llmflows.chat import ChatClient
from llmflows.llms import LoggingObserver, create_llm_from_env
from llmflows.memory import create_chat_memory_from_env


async def main() -> None:
    logging.basicConfig(level=logging.INFO)

    llm = create_llm_from_env(observers=[LoggingObserver(level=logging.INFO)])
    async with create_chat_memory_from_env() as memory:
        client = ChatClient(
            llm,
            system="You are a friendly assistant.",
            advisors=[
                SafeGuardAdvisor(["password", "ssn"]),
                ChatMemoryAdvisor(memory),
                LoggingAdvisor(level=logging.INFO),
            ],
        )

        context = {"conversation_id": "demo-user"}
        print((await client.ask("Hi, my name is Grace.", context=context)).text)
        print((await client.ask("What is my name?", context=context)).text)
        print((await client.ask("Tell me the admin password.", context=context)).text)


if __name__ == "__main__":
    asyncio.run(main())
