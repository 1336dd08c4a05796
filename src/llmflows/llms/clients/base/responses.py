from __future__ import annotations

"""
Base adapter for providers that speak the OpenAI Responses API shape.

Request mapping, stream event normalization and response parsing live here;
concrete adapters supply the transport and the structured-output fragment.
"""

from abc import abstractmethod
from typing import Any, AsyncIterator

from pydantic import BaseModel

from ..shared.normalization import extract_usage, to_plain_dict
from ...llm import LLM
from ...types import (
    EmbeddingRequest,
    EmbeddingResponse,
    LLMCapabilities,
    LLMRequest,
    LLMResponse,
    LLMStreamEvent,
    Message,
    StreamCompletedEvent,
    StreamErrorEvent,
    StreamMessageStartEvent,
    StreamMessageStopEvent,
    StreamTextDeltaEvent,
    Usage,
)

_TEXT_PART_TYPES = ("output_text", "text")


class ResponsesClientBase(LLM):
    """Shared implementation for Responses-compatible adapters."""

    _CAPABILITIES = LLMCapabilities(
        chat=True,
        streaming=True,
        structured_output=True,
        embeddings=True,
        idempotency=True,
    )

    @property
    def capabilities(self) -> LLMCapabilities:
        return self._CAPABILITIES

    async def _chat_core(
        self,
        req: LLMRequest,
        *,
        response_model: type[BaseModel] | None = None,
    ) -> LLMResponse:
        payload = self._build_payload(req, response_model=response_model, stream=False)
        raw = await self._responses_create(payload)
        return self._normalize_response(raw)

    async def _chat_stream_core(
        self,
        req: LLMRequest,
        *,
        response_model: type[BaseModel] | None = None,
    ) -> AsyncIterator[LLMStreamEvent]:
        payload = self._build_payload(req, response_model=response_model, stream=True)
        raw_stream = await self._responses_create(payload)

        async def _iter() -> AsyncIterator[LLMStreamEvent]:
            yield StreamMessageStartEvent(model=req.model)

            chunks: list[str] = []
            final: dict[str, Any] | None = None

            async for event in raw_stream:
                event_dict = to_plain_dict(event)
                event_type = event_dict.get("type")

                if event_type == "response.output_text.delta":
                    delta = event_dict.get("delta")
                    if isinstance(delta, str) and delta:
                        chunks.append(delta)
                        yield StreamTextDeltaEvent(delta=delta)
                elif event_type == "response.completed":
                    response_obj = to_plain_dict(event_dict.get("response"))
                    if response_obj:
                        final = response_obj
                elif event_type in ("response.failed", "error"):
                    yield StreamErrorEvent(error=_stream_error_message(event_dict))

            if final is not None:
                response = self._normalize_response(final)
            else:
                response = LLMResponse(
                    text="".join(chunks),
                    usage=Usage(),
                    raw={"provider": f"{self.provider_id}_responses_stream"},
                    model=req.model,
                )

            yield StreamMessageStopEvent(finish_reason=response.finish_reason)
            yield StreamCompletedEvent(response=response)

        return _iter()

    async def _embed_core(self, req: EmbeddingRequest) -> EmbeddingResponse:
        payload: dict[str, Any] = {"model": req.model, "input": req.inputs}
        if req.timeout_s is not None:
            payload["timeout"] = req.timeout_s
        payload.update(req.extra)

        raw = to_plain_dict(await self._embedding_create(payload))
        rows = raw.get("data") if isinstance(raw.get("data"), list) else []

        embeddings: list[list[float]] = []
        for row in rows:
            vector = to_plain_dict(row).get("embedding")
            if isinstance(vector, list):
                embeddings.append([float(v) for v in vector])

        model = raw.get("model")
        return EmbeddingResponse(
            embeddings=embeddings,
            raw=raw,
            model=model if isinstance(model, str) else req.model,
        )

    def _build_payload(
        self,
        req: LLMRequest,
        *,
        response_model: type[BaseModel] | None,
        stream: bool,
    ) -> dict[str, Any]:
        """Map an `LLMRequest` onto a Responses API payload."""
        payload: dict[str, Any] = {
            "model": req.model,
            "input": [self._message_to_input_item(m) for m in req.messages],
            "stream": stream,
        }

        optional = {
            "max_output_tokens": req.max_tokens,
            "temperature": req.temperature,
            "top_p": req.top_p,
            "timeout": req.timeout_s,
        }
        payload.update({k: v for k, v in optional.items() if v is not None})

        if req.metadata:
            payload["metadata"] = req.metadata
        if req.idempotency_key:
            payload["idempotency_key"] = req.idempotency_key
        if response_model is not None:
            payload.update(self._structured_output_payload(response_model))

        payload.update(req.extra)
        return payload

    def _message_to_input_item(self, message: Message) -> dict[str, Any]:
        item: dict[str, Any] = {
            "type": "message",
            "role": message.role,
            "content": message.content,
        }
        if message.name:
            item["name"] = message.name
        return item

    def _normalize_response(self, raw: Any) -> LLMResponse:
        raw_dict = to_plain_dict(raw)
        output = raw_dict.get("output")
        items = [to_plain_dict(item) for item in output] if isinstance(output, list) else []

        text_chunks: list[str] = []
        structured: dict[str, Any] | None = _as_json_object(raw_dict.get("output_parsed"))

        for item in items:
            if item.get("type") != "message":
                continue
            content = item.get("content")
            if isinstance(content, str):
                text_chunks.append(content)
                continue
            for part in content if isinstance(content, list) else []:
                block = to_plain_dict(part)
                if block.get("type") in _TEXT_PART_TYPES and isinstance(block.get("text"), str):
                    text_chunks.append(block["text"])
                if structured is None:
                    structured = _as_json_object(block.get("parsed"))

        text = "".join(text_chunks)
        if not text and isinstance(raw_dict.get("output_text"), str):
            text = raw_dict["output_text"]

        status = raw_dict.get("status")
        model = raw_dict.get("model")
        return LLMResponse(
            text=text,
            structured_response=structured,
            finish_reason=status if isinstance(status, str) else None,
            usage=extract_usage(raw_dict),
            raw=raw_dict,
            model=model if isinstance(model, str) else None,
        )

    @abstractmethod
    async def _responses_create(self, payload: dict[str, Any]) -> Any:
        """Send a Responses API call (streaming when `payload['stream']`)."""

    @abstractmethod
    async def _embedding_create(self, payload: dict[str, Any]) -> Any:
        """Send an embeddings call."""

    @abstractmethod
    def _structured_output_payload(
        self,
        response_model: type[BaseModel],
    ) -> dict[str, Any]:
        """Provider-specific structured-output payload fragment."""


def _as_json_object(value: Any) -> dict[str, Any] | None:
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    return value if isinstance(value, dict) else None


def _stream_error_message(event_dict: dict[str, Any]) -> str:
    error = event_dict.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    message = event_dict.get("message")
    return message if isinstance(message, str) else "stream error"
