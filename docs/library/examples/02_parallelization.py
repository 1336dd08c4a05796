"""
Example 02: Parallelization.

One prompt applied to several inputs with at most `n_workers` in flight.

Run:
    uv run python docs/library/examples/02_parallelization.py
"""

from __future__ import annotations

import asyncio

from llmflows.chat import ChatClient
from llmflows.llms import create_llm_from_env
from llmflows.workflows import parallel

STAKEHOLDERS = [
    "Customers: price sensitive, want better tech, environmental concerns",
    "Employees: job security worries, need new skills, want clear direction",
    "Investors: expect growth, want cost control, risk concerns",
    "Suppliers: capacity constraints, price pressures, tech transitions",
]


async def main() -> None:
    client = ChatClient(create_llm_from_env())
    analyses = await parallel(
        client,
        "Analyze how market changes will impact this stakeholder group. "
        "Provide specific impacts and recommended actions.",
        STAKEHOLDERS,
        n_workers=4,
    )
    for stakeholder, analysis in zip(STAKEHOLDERS, analyses):
        print("==", stakeholder.split(":")[0])
        print(analysis)


if __name__ == "__main__":
    asyncio.run(main())
