from __future__ import annotations

import pytest

from llm_fakes import ScriptedLLM, run_async
from llmflows.advisors.memory import ChatMemoryAdvisor
from llmflows.advisors.question_answer import QuestionAnswerAdvisor
from llmflows.chat.client import ChatClient
from llmflows.memory.in_memory import InMemoryChatMemory
from llmflows.rag.store.in_memory import InMemoryVectorStore
from llmflows.rag.types import Document, SearchRequest

DOCS = [
    Document(id="refunds", text="Refunds are issued within 14 days of purchase."),
    Document(id="shipping", text="Shipping to Canada takes five business days."),
]


def test_user_message_is_augmented_with_retrieved_documents():
    async def scenario():
        llm = ScriptedLLM(["Within 14 days."])
        async with InMemoryVectorStore(llm) as store:
            await store.add(DOCS)
            advisor = QuestionAnswerAdvisor(store, search=SearchRequest(top_k=1))
            result = await ChatClient(llm, advisors=[advisor]).ask("When are refunds issued?")
            return llm, result

    llm, result = run_async(scenario())

    prompt = llm.requests[0].messages[-1].content
    assert prompt.startswith("When are refunds issued?")
    assert "Refunds are issued within 14 days of purchase." in prompt
    assert "Shipping" not in prompt
    assert "can't answer" in prompt
    assert [d.id for d in result.context["retrieved_documents"]] == ["refunds"]
    assert result.text == "Within 14 days."


def test_no_hits_yields_empty_context_block():
    async def scenario():
        llm = ScriptedLLM()
        async with InMemoryVectorStore(llm) as store:
            advisor = QuestionAnswerAdvisor(store)
            result = await ChatClient(llm, advisors=[advisor]).ask("Anything?")
            return llm, result

    llm, result = run_async(scenario())

    assert result.context["retrieved_documents"] == []
    assert "---------------------\n\n---------------------" in llm.requests[0].messages[-1].content


def test_custom_template_must_have_placeholders():
    store = InMemoryVectorStore(ScriptedLLM())

    with pytest.raises(ValueError, match="question_answer_context"):
        QuestionAnswerAdvisor(store, template="Answer {query}")

    advisor = QuestionAnswerAdvisor(
        store, template="Q: {query}\nDocs: {question_answer_context}"
    )
    assert advisor.template.variables == ("query", "question_answer_context")


def test_memory_records_original_question_not_augmented_prompt():
    async def scenario():
        llm = ScriptedLLM(["answer"])
        async with InMemoryVectorStore(llm) as store, InMemoryChatMemory() as memory:
            await store.add(DOCS)
            client = ChatClient(
                llm,
                advisors=[QuestionAnswerAdvisor(store), ChatMemoryAdvisor(memory)],
            )
            await client.ask("How long is shipping?")
            return await memory.get("default")

    stored = run_async(scenario())

    assert stored[0].content == "How long is shipping?"
    assert stored[1].content == "answer"
