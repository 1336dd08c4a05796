"""
Example 04: Orchestrator-workers.

Run:
    uv run python docs/library/examples/04_orchestrator_workers.py
"""

from __future__ import annotations

import asyncio

from llmflows.chat import ChatClient
from llmflows.llms import create_llm_from_env
from llmflows.workflows import Orchestrator


async def main() -> None:
    orchestrator = Orchestrator(ChatClient(create_llm_from_env()), n_workers=2)
    result = await orchestrator.process(
        "Write a product description for a new eco-friendly water bottle"
    )

    print("analysis:", result.analysis)
    for idx, text in enumerate(result.worker_responses, start=1):
        print(f"--- worker {idx} ---")
        print(text)


if __name__ == "__main__":
    asyncio.run(main())
