from __future__ import annotations

import pytest
from pydantic import BaseModel

from llm_fakes import ScriptedLLM, run_async
from llmflows.advisors.base import Advisor
from llmflows.chat.client import ChatClient
from llmflows.chat.errors import ChatError, PromptTemplateError
from llmflows.chat.types import ChatOptions
from llmflows.llms.types import Message


class Movie(BaseModel):
    title: str
    year: int


def test_ask_builds_messages_from_system_history_and_user():
    llm = ScriptedLLM(["hi there"])
    client = ChatClient(llm, system="You are terse.")

    result = run_async(
        client.ask(
            "hello",
            history=[
                Message(role="user", content="earlier"),
                Message(role="assistant", content="reply"),
            ],
        )
    )

    assert result.text == "hi there"
    assert result.response is not None and result.response.usage.total_tokens == 2
    req = llm.requests[0]
    assert [(m.role, m.content) for m in req.messages] == [
        ("system", "You are terse."),
        ("user", "earlier"),
        ("assistant", "reply"),
        ("user", "hello"),
    ]
    assert req.model == "test-model"


def test_per_call_system_and_options_override_client_defaults():
    llm = ScriptedLLM()
    client = ChatClient(
        llm,
        model="client-model",
        system="default system",
        options=ChatOptions(temperature=0.1, max_tokens=50),
    )

    run_async(
        client.ask(
            "hello",
            system="call system",
            options=ChatOptions(temperature=0.9, idempotency_key="idem"),
        )
    )

    req = llm.requests[0]
    assert req.messages[0].content == "call system"
    assert req.model == "client-model"
    assert req.temperature == 0.9
    assert req.max_tokens == 50
    assert req.idempotency_key == "idem"


def test_ask_renders_params_as_prompt_template():
    llm = ScriptedLLM()
    client = ChatClient(llm)

    run_async(client.ask("Tell me about {topic}", params={"topic": "llamas"}))

    assert llm.requests[0].messages[-1].content == "Tell me about llamas"

    with pytest.raises(PromptTemplateError):
        run_async(client.ask("Tell me about {topic}", params={}))


def test_ask_rejects_blank_user_text():
    with pytest.raises(ValueError):
        run_async(ChatClient(ScriptedLLM()).ask("   "))


def test_ask_for_returns_model_instance():
    llm = ScriptedLLM(['{"title": "Alien", "year": 1979}'])
    client = ChatClient(llm)

    movie = run_async(client.ask_for("Best sci-fi horror film?", Movie))

    assert movie == Movie(title="Alien", year=1979)


def test_ask_structured_result_carries_dump():
    llm = ScriptedLLM(['{"title": "Heat", "year": 1995}'])
    result = run_async(ChatClient(llm).ask("x", response_model=Movie))

    assert result.structured == {"title": "Heat", "year": 1995}


def test_ask_for_raises_when_advisor_short_circuits():
    class _Canned(Advisor):
        async def around(self, request, call_next):
            from llmflows.chat.types import ChatResult

            return ChatResult(text="no model call", context=request.context)

    client = ChatClient(ScriptedLLM(), advisors=[_Canned()])

    with pytest.raises(ChatError, match="No structured output"):
        run_async(client.ask_for("x", Movie))


def test_ask_sync():
    client = ChatClient(ScriptedLLM(["sync answer"]))

    assert client.ask_sync("hello").text == "sync answer"


def test_context_round_trips_to_result():
    client = ChatClient(ScriptedLLM())
    context = {"conversation_id": "c1"}

    result = run_async(client.ask("hello", context=context))

    assert result.context is context


def test_with_advisors_and_with_system_return_new_clients():
    base = ChatClient(ScriptedLLM(), model="m", system="s")
    advisor = Advisor()

    extended = base.with_advisors(advisor)
    other = base.with_system("t")

    assert base.advisors == []
    assert extended.advisors == [advisor]
    assert extended.options.model == "m"
    assert other.system == "t"
    assert base.system == "s"


def test_stream_yields_deltas_and_final_result():
    llm = ScriptedLLM(["one two three"])
    client = ChatClient(llm)

    async def scenario():
        stream = client.stream("count")
        deltas = [delta async for delta in stream]
        return deltas, stream.result

    deltas, result = run_async(scenario())

    assert "".join(deltas) == "one two three"
    assert len(deltas) == 3
    assert result is not None and result.text == "one two three"


def test_stream_collect_and_single_iteration():
    client = ChatClient(ScriptedLLM(["streamed"]))

    async def scenario():
        stream = client.stream("go")
        result = await stream.collect()
        with pytest.raises(RuntimeError):
            stream.__aiter__()
        return result

    assert run_async(scenario()).text == "streamed"


def test_stream_structured_output():
    client = ChatClient(ScriptedLLM(['{"title": "Up", "year": 2009}']))

    async def scenario():
        return await client.stream("x", response_model=Movie).collect()

    assert run_async(scenario()).structured == {"title": "Up", "year": 2009}
