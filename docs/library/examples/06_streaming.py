"""
Example 06: Streaming text deltas from the chat client.

Run:
    uv run python docs/library/examples/06_streaming.py
"""

from __future__ import annotations

import asyncio

from llmflows.chat import ChatClient
from llmflows.llms import create_llm_from_env


async def main() -> None:
    client = ChatClient(create_llm_from_env(), system="You are a concise storyteller.")

    stream = client.stream("Tell me a three sentence story about a lighthouse keeper.")
    async for delta in stream:
        print(delta, end="", flush=True)
    print()

    result = stream.result
    if result is not None and result.response is not None:
        print("tokens:", result.response.usage.total_tokens)


if __name__ == "__main__":
    asyncio.run(main())
