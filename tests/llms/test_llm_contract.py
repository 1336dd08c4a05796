from __future__ import annotations

import asyncio

import pytest
from pydantic import BaseModel

from llm_fakes import ScriptedLLM, make_config, run_async
from llmflows.llms.errors import (
    LLMCapabilityError,
    LLMConfigurationError,
    LLMError,
    LLMInvalidResponseError,
    LLMRetryableError,
    LLMTimeoutError,
)
from llmflows.llms.middleware import MiddlewareStack
from llmflows.llms.types import (
    EmbeddingRequest,
    LLMCapabilities,
    LLMRequest,
    LLMResponse,
    Message,
    StreamCompletedEvent,
    StreamTextDeltaEvent,
)


class Out(BaseModel):
    value: int


def _req(**kwargs) -> LLMRequest:
    return LLMRequest(
        model=kwargs.pop("model", "demo"),
        messages=kwargs.pop("messages", [Message(role="user", content="hi")]),
        **kwargs,
    )


class _StatusError(Exception):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"status {status_code}")
        self.status_code = status_code


def test_chat_returns_text_and_request_id():
    llm = ScriptedLLM(["hello"])

    out = run_async(llm.chat(_req()))

    assert out.text == "hello"
    assert isinstance(out.request_id, str) and out.request_id
    assert llm.requests[0].request_id == out.request_id


def test_chat_keeps_caller_request_id():
    llm = ScriptedLLM(["hello"])

    out = run_async(llm.chat(_req(request_id="req_1")))

    assert out.request_id == "req_1"


def test_chat_structured_validation_from_text():
    llm = ScriptedLLM(['Sure: ```json\n{"value": 7}\n```'])

    out = run_async(llm.chat(_req(), response_model=Out))

    assert out.structured_response == {"value": 7}
    assert len(llm.requests) == 1


def test_chat_repair_retry_until_valid():
    llm = ScriptedLLM(["not json", '{"value": 2}'])

    out = run_async(llm.chat(_req(), response_model=Out))

    assert out.structured_response == {"value": 2}
    repair = llm.requests[1]
    assert [m.role for m in repair.messages] == ["user", "assistant", "user"]
    assert repair.messages[1].content == "not json"
    assert "Previous answer" in repair.messages[2].content


def test_chat_structured_raises_when_repairs_exhausted():
    llm = ScriptedLLM(["nope", "still nope", "never"], config=make_config(json_max_retries=1))

    with pytest.raises(LLMInvalidResponseError):
        run_async(llm.chat(_req(), response_model=Out))
    assert len(llm.requests) == 2


def test_chat_retries_retryable_errors_with_idempotency_key():
    llm = ScriptedLLM([_StatusError(503), LLMRetryableError("busy"), "done"])

    out = run_async(llm.chat(_req(idempotency_key="idem-1")))

    assert out.text == "done"
    assert len(llm.requests) == 3


def test_chat_does_not_retry_without_idempotency_key():
    llm = ScriptedLLM([_StatusError(503), "done"])

    with pytest.raises(LLMRetryableError):
        run_async(llm.chat(_req()))
    assert len(llm.requests) == 1


def test_chat_does_not_retry_client_errors():
    llm = ScriptedLLM([_StatusError(400), "done"])

    with pytest.raises(LLMError) as exc_info:
        run_async(llm.chat(_req(idempotency_key="idem-1")))
    assert not isinstance(exc_info.value, LLMRetryableError)
    assert isinstance(exc_info.value.__cause__, _StatusError)


def test_chat_times_out():
    llm = ScriptedLLM(delay_s=0.2)

    with pytest.raises(LLMTimeoutError):
        run_async(llm.chat(_req(timeout_s=0.01)))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"model": " "},
        {"messages": []},
        {"max_tokens": 0},
        {"temperature": -0.1},
        {"top_p": 0.0},
        {"timeout_s": 0},
        {"idempotency_key": " "},
    ],
)
def test_chat_rejects_invalid_requests(kwargs):
    llm = ScriptedLLM()

    with pytest.raises(LLMError):
        run_async(llm.chat(_req(**kwargs)))
    assert llm.requests == []


def test_chat_rejects_oversized_input():
    llm = ScriptedLLM(config=make_config(max_input_chars=5))

    with pytest.raises(LLMError, match="max input chars"):
        run_async(llm.chat(_req(messages=[Message(role="user", content="too long")])))


def test_structured_output_requires_capability():
    llm = ScriptedLLM(capabilities=LLMCapabilities(chat=True, structured_output=False))

    with pytest.raises(LLMCapabilityError):
        run_async(llm.chat(_req(), response_model=Out))


def test_stream_requires_capability():
    llm = ScriptedLLM(capabilities=LLMCapabilities(chat=True, streaming=False))

    with pytest.raises(LLMCapabilityError):
        run_async(llm.chat_stream(_req()))


def test_embed_capability_error_when_disabled():
    llm = ScriptedLLM(capabilities=LLMCapabilities(chat=True, embeddings=False))

    with pytest.raises(LLMCapabilityError):
        run_async(llm.embed(EmbeddingRequest(model="embed", inputs=["a"])))


def test_embed_model_falls_back_to_config():
    llm = ScriptedLLM(config=make_config(embedding_model="cfg-embed"))

    out = run_async(llm.embed(EmbeddingRequest(inputs=["hello"])))

    assert len(out.embeddings) == 1
    assert llm.embed_requests[0].model == "cfg-embed"


def test_embed_raises_when_model_unresolved():
    llm = ScriptedLLM(config=make_config(embedding_model=None))

    with pytest.raises(LLMConfigurationError):
        run_async(llm.embed(EmbeddingRequest(inputs=["hello"])))


def test_embed_rejects_blank_inputs():
    llm = ScriptedLLM()

    with pytest.raises(LLMError):
        run_async(llm.embed(EmbeddingRequest(inputs=["ok", "  "])))


def test_middleware_order_chat_embed_stream():
    order: list[str] = []

    async def outer(call_next, req):
        order.append("outer_before")
        out = await call_next(req)
        order.append("outer_after")
        return out

    async def inner(call_next, req):
        order.append("inner_before")
        out = await call_next(req)
        order.append("inner_after")
        return out

    async def embed_mw(call_next, req):
        order.append("embed")
        return await call_next(req)

    def stream_mw(call_next, req):
        async def _iter():
            order.append("stream_before")
            async for event in call_next(req):
                order.append(f"stream_event:{event.type}")
                yield event
            order.append("stream_after")

        return _iter()

    llm = ScriptedLLM(
        ["a", "b"],
        middlewares=MiddlewareStack(chat=[outer, inner], embed=[embed_mw], stream=[stream_mw]),
    )

    run_async(llm.chat(_req()))
    run_async(llm.embed(EmbeddingRequest(inputs=["x"])))

    async def consume_stream():
        stream = await llm.chat_stream(_req())
        return [event async for event in stream]

    run_async(consume_stream())

    assert order == [
        "outer_before",
        "inner_before",
        "inner_after",
        "outer_after",
        "embed",
        "stream_before",
        "stream_event:message_start",
        "stream_event:text_delta",
        "stream_event:message_stop",
        "stream_event:completed",
        "stream_after",
    ]


def test_chat_stream_emits_one_completion():
    llm = ScriptedLLM(["hello stream world"])

    async def scenario():
        stream = await llm.chat_stream(_req())
        return [event async for event in stream]

    events = run_async(scenario())

    deltas = [e.delta for e in events if isinstance(e, StreamTextDeltaEvent)]
    completed = [e for e in events if isinstance(e, StreamCompletedEvent)]
    assert "".join(deltas) == "hello stream world"
    assert len(completed) == 1
    assert completed[0].response.request_id


def test_chat_stream_validates_completion_payload_when_response_model():
    llm = ScriptedLLM(['{"value": 11}'])

    async def scenario():
        stream = await llm.chat_stream(_req(), response_model=Out)
        return [event async for event in stream]

    events = run_async(scenario())
    completed = [e for e in events if isinstance(e, StreamCompletedEvent)]
    assert completed[0].response.structured_response == {"value": 11}


def test_chat_stream_rejects_stream_without_completion():
    class _NoCompletion(ScriptedLLM):
        async def _chat_stream_core(self, req, *, response_model=None):
            async def _iter():
                yield StreamTextDeltaEvent(delta="partial")

            return _iter()

    llm = _NoCompletion()

    async def scenario():
        stream = await llm.chat_stream(_req())
        return [event async for event in stream]

    with pytest.raises(LLMInvalidResponseError):
        run_async(scenario())


def test_chat_stream_rejects_duplicate_completion():
    class _Twice(ScriptedLLM):
        async def _chat_stream_core(self, req, *, response_model=None):
            async def _iter():
                yield StreamCompletedEvent(response=LLMResponse(text="a"))
                yield StreamCompletedEvent(response=LLMResponse(text="b"))

            return _iter()

    llm = _Twice()

    async def scenario():
        stream = await llm.chat_stream(_req())
        return [event async for event in stream]

    with pytest.raises(LLMInvalidResponseError):
        run_async(scenario())


def test_sync_wrappers_work_outside_event_loop():
    llm = ScriptedLLM(["sync"])

    assert llm.chat_sync(_req()).text == "sync"
    assert len(llm.embed_sync(EmbeddingRequest(inputs=["x"])).embeddings) == 1


def test_sync_wrappers_refuse_running_loop():
    llm = ScriptedLLM()

    async def scenario():
        llm.chat_sync(_req())

    with pytest.raises(RuntimeError, match="running event loop"):
        run_async(scenario())


def test_observers_receive_lifecycle_and_failures_are_ignored():
    seen: list[str] = []

    def broken(event):
        raise ValueError("observer bug")

    async def recorder(event):
        await asyncio.sleep(0)
        seen.append(f"{event.event_type}:{event.attempt}")

    llm = ScriptedLLM(
        [LLMRetryableError("busy"), "ok"],
        observers=[broken, recorder],
    )

    out = run_async(llm.chat(_req(idempotency_key="k")))

    assert out.text == "ok"
    assert seen == ["request_start:1", "retry:1", "request_success:2"]


def test_chat_repair_call_honors_timeout():
    class _SlowRepair(ScriptedLLM):
        async def _chat_core(self, req, *, response_model=None):
            if self.requests:
                await asyncio.sleep(1.0)
            return await super()._chat_core(req, response_model=response_model)

    llm = _SlowRepair(["not json", '{"value": 1}'])

    with pytest.raises(LLMTimeoutError):
        run_async(llm.chat(_req(timeout_s=0.05), response_model=Out))
    assert len(llm.requests) == 1
