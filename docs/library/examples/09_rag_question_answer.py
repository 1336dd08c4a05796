"""
Example 09: Retrieval-augmented answers with a vector store.

Needs an embedding model (`LLMFLOWS_EMBED_MODEL`, e.g. text-embedding-3-small).

Run:
    uv run python docs/library/examples/09_rag_question_answer.py
"""

from __future__ import annotations

import asyncio

from llmflows.advisors import RETRIEVED_DOCUMENTS_KEY, QuestionAnswerAdvisor
from llmflows.chat import ChatClient
from llmflows.llms import create_llm_from_env
from llmflows.rag import Document, SearchRequest, TextSplitter, create_vector_store_from_env

HANDBOOK = """
Employees accrue 1.5 vacation days per month. Unused vacation carries over
up to 10 days into the next year. Remote work is allowed three days a week.
Expense reports must be filed within 30 days of purchase. Equipment requests
go through the IT portal and are fulfilled within five business days.
"""


async def main() -> None:
    llm = create_llm_from_env()
    chunks = TextSplitter(chunk_size=200, chunk_overlap=40).split_documents(
        [Document(id="handbook", text=HANDBOOK, metadata={"source": "handbook"})]
    )

    async with create_vector_store_from_env(llm) as store:
        await store.add(chunks)
        client = ChatClient(
            llm,
            advisors=[
                QuestionAnswerAdvisor(
                    store, search=SearchRequest(top_k=2, similarity_threshold=0.2)
                )
            ],
        )

        result = await client.ask("How many vacation days carry over?")
        print(result.text)
        for doc in result.context[RETRIEVED_DOCUMENTS_KEY]:
            print(f"  [{doc.score:.2f}] {doc.metadata['source_id']}#{doc.metadata['chunk_index']}")


if __name__ == "__main__":
    asyncio.run(main())
