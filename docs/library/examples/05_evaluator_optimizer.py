"""
Example 05: Evaluator-optimizer loop.

Run:
    uv run python docs/library/examples/05_evaluator_optimizer.py
"""

from __future__ import annotations

import asyncio

from llmflows.chat import ChatClient
from llmflows.llms import create_llm_from_env
from llmflows.workflows import EvaluatorOptimizer

TASK = """
Implement a Stack in Python with:
1. push(x)
2. pop()
3. get_min()
All operations should be O(1).
"""


async def main() -> None:
    workflow = EvaluatorOptimizer(ChatClient(create_llm_from_env()), max_iterations=4)
    refined = await workflow.loop(TASK)

    print("passed:", refined.passed, "after", refined.iterations, "iteration(s)")
    for step, generation in enumerate(refined.chain_of_thought, start=1):
        print(f"{step}. {generation.thoughts}")
    print(refined.solution)


if __name__ == "__main__":
    asyncio.run(main())
