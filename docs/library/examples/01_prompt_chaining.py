"""
Example 01: Prompt chaining.

Each step's output becomes the next step's input.

Run:
    uv run python docs/library/examples/01_prompt_chaining.py
"""

from __future__ import annotations

import asyncio

from llmflows.chat import ChatClient
from llmflows.llms import create_llm_from_env
from llmflows.workflows import chain

REPORT = """
Q3 Performance Summary:
Our customer satisfaction score rose to 92 points this quarter.
Revenue grew by 45% compared to last year.
Market share is now at 23% in our primary market.
Customer churn decreased to 5% from 8%.
"""

STEPS = [
    "Extract only the numerical values and their associated metrics from the text. "
    "Format each as 'value: metric' on a new line.",
    "Convert all numerical values to percentages where possible. "
    "Keep one number per line.",
    "Sort all lines in descending order by numerical value.",
    "Format the sorted data as a markdown table with columns: | Metric | Value |",
]


async def main() -> None:
    client = ChatClient(create_llm_from_env())
    table = await chain(client, REPORT, STEPS)
    print(table)


if __name__ == "__main__":
    asyncio.run(main())
