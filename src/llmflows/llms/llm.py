from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.
"""

import asyncio
import inspect
import logging
import socket
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, AsyncIterator, Awaitable, Callable, TypeVar, cast

from pydantic import BaseModel, ValidationError

from .config import LLMConfig
from .errors import (
    LLMCapabilityError,
    LLMConfigurationError,
    LLMError,
    LLMInvalidResponseError,
    LLMRetryableError,
    LLMTimeoutError,
)
from .middleware import LLMChatNext, LLMChatStreamNext, LLMEmbedNext, MiddlewareStack
from .observability import LLMLifecycleEvent, LLMObserver
from .structured import make_repair_prompt, parse_and_validate_json
from .types import (
    EmbeddingRequest,
    EmbeddingResponse,
    LLMCapabilities,
    LLMRequest,
    LLMResponse,
    LLMStreamEvent,
    Message,
    StreamCompletedEvent,
    Usage,
)
from .utils import backoff_delay, run_sync

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
ReturnT = TypeVar("ReturnT")

_ROLES = ("user", "assistant", "system")

_RETRY_PHRASES = (
    "rate limit",
    "rate_limit",
    "quota exceeded",
    "overloaded",
    "temporarily unavailable",
    "service unavailable",
    "try again",
    "timed out",
    "timeout",
    "connection reset",
    "connection refused",
    "connection error",
    "502",
    "503",
    "504",
    "429",
)


class LLM(ABC):
    """
    Base class for every provider adapter.

    The public surface is the same for all adapters:
      - chat / chat_sync
      - chat_stream
      - embed / embed_sync

    Subclasses only implement `_chat_core`, `_chat_stream_core` and
    `_embed_core`; validation, middleware, retries, structured output
    repair and observer notification live here.
    """

    def __init__(
        self,
        *,
        config: LLMConfig | None = None,
        middlewares: MiddlewareStack | None = None,
        observers: list[LLMObserver] | None = None,
    ) -> None:
        self.config = config or LLMConfig.from_env()
        self.middlewares = middlewares or MiddlewareStack()
        self._observers = list(observers or [])

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Stable provider id (e.g. 'litellm', 'openai')."""

    @property
    @abstractmethod
    def capabilities(self) -> LLMCapabilities:
        """Capability flags for the concrete adapter."""

    @classmethod
    def from_env(
        cls,
        *,
        middlewares: MiddlewareStack | None = None,
        observers: list[LLMObserver] | None = None,
    ) -> "LLM":
        """
        Build a client from environment configuration.

        On the abstract base this defers to the adapter factory
        (`LLMFLOWS_LLM_ADAPTER`).
        """
        if cls is LLM:
            from .factory import create_llm_from_env

            return create_llm_from_env(middlewares=middlewares, observers=observers)
        return cls(
            config=LLMConfig.from_env(),
            middlewares=middlewares,
            observers=observers,
        )

    def add_observer(self, observer: LLMObserver) -> None:
        self._observers.append(observer)

    async def chat(
        self,
        req: LLMRequest,
        *,
        response_model: type[ModelT] | None = None,
    ) -> LLMResponse:
        """
        Run one non-streaming chat completion.

        With `response_model`, the returned `structured_response` is the
        validated model dumped to a dict.
        """
        req = self._ensure_request_id(req)
        self._check_chat_request(req, response_model=response_model)

        async def _base_handler(current_req: LLMRequest) -> LLMResponse:
            return await self._chat_with_safety(current_req, response_model=response_model)

        call_next: LLMChatNext = _base_handler
        for middleware in reversed(self.middlewares.chat):
            call_next = _bind_chat(middleware, call_next)

        response = await call_next(req)
        return _with_request_id(req, response)

    def chat_sync(
        self,
        req: LLMRequest,
        *,
        response_model: type[ModelT] | None = None,
    ) -> LLMResponse:
        return run_sync(self.chat(req, response_model=response_model))

    async def chat_stream(
        self,
        req: LLMRequest,
        *,
        response_model: type[ModelT] | None = None,
    ) -> AsyncIterator[LLMStreamEvent]:
        """
        Run a streaming chat completion.

        The returned iterator ends with exactly one `StreamCompletedEvent`
        holding the full response.
        """
        req = self._ensure_request_id(req)
        self._ensure_capability("streaming", self.capabilities.streaming)
        self._check_chat_request(req, response_model=response_model)

        def _base_handler(current_req: LLMRequest) -> AsyncIterator[LLMStreamEvent]:
            return self._stream_with_safety(current_req, response_model=response_model)

        call_next: LLMChatStreamNext = _base_handler
        for middleware in reversed(self.middlewares.stream):
            call_next = _bind_stream(middleware, call_next)

        return call_next(req)

    async def embed(self, req: EmbeddingRequest) -> EmbeddingResponse:
        self._ensure_capability("embeddings", self.capabilities.embeddings)
        req = self._resolve_embedding_model(req)
        self._validate_embedding_request(req)
        request_id = self._new_request_id()

        async def _base_handler(current_req: EmbeddingRequest) -> EmbeddingResponse:
            timeout = self._timeout_for(current_req.timeout_s)
            return await self._call_with_retries(
                lambda: self._with_timeout(self._embed_core(current_req), timeout),
                request_id=request_id,
                model=current_req.model,
                max_retries=self.config.max_retries,
            )

        call_next: LLMEmbedNext = _base_handler
        for middleware in reversed(self.middlewares.embed):
            previous = call_next

            async def _wrapped(
                current_req: EmbeddingRequest, *, _mw=middleware, _next=previous
            ) -> EmbeddingResponse:
                return await _mw(_next, current_req)

            call_next = _wrapped

        return await call_next(req)

    def embed_sync(self, req: EmbeddingRequest) -> EmbeddingResponse:
        return run_sync(self.embed(req))

    async def _chat_with_safety(
        self,
        req: LLMRequest,
        *,
        response_model: type[ModelT] | None,
    ) -> LLMResponse:
        timeout = self._timeout_for(req.timeout_s)
        response = await self._call_with_retries(
            lambda: self._with_timeout(
                self._chat_core(req, response_model=response_model), timeout
            ),
            request_id=cast(str, req.request_id),
            model=req.model,
            max_retries=self._retries_for(req),
        )
        response = _with_request_id(req, response)
        if response_model is None:
            return response
        return await self._ensure_structured_response(req, response, response_model)

    def _stream_with_safety(
        self,
        req: LLMRequest,
        *,
        response_model: type[ModelT] | None,
    ) -> AsyncIterator[LLMStreamEvent]:
        async def _iter() -> AsyncIterator[LLMStreamEvent]:
            timeout = self._timeout_for(req.timeout_s)
            request_id = cast(str, req.request_id)
            stream = await self._call_with_retries(
                lambda: self._with_timeout(
                    self._chat_stream_core(req, response_model=response_model),
                    timeout,
                ),
                request_id=request_id,
                model=req.model,
                max_retries=self._retries_for(req),
            )

            completed = 0
            try:
                async for event in stream:
                    if isinstance(event, StreamCompletedEvent):
                        completed += 1
                        if completed > 1:
                            raise LLMInvalidResponseError(
                                "Stream emitted more than one completion event"
                            )
                        response = _with_request_id(req, event.response)
                        if response_model is not None:
                            response = await self._ensure_structured_response(
                                req, response, response_model
                            )
                        event = StreamCompletedEvent(response=response)

                    await self._emit(
                        "stream_event", request_id=request_id, model=req.model
                    )
                    yield event
            except LLMError:
                raise
            except Exception as e:
                raise self._classify_error(e) from e

            if completed != 1:
                raise LLMInvalidResponseError(
                    "Stream ended without exactly one completion event"
                )

        return _iter()

    async def _ensure_structured_response(
        self,
        req: LLMRequest,
        initial: LLMResponse,
        response_model: type[ModelT],
    ) -> LLMResponse:
        """
        Validate the response against `response_model`, asking the model to
        repair its output up to `json_max_retries` times.
        """
        response = initial
        last_error: Exception | None = None
        attempts = self.config.json_max_retries + 1

        for attempt in range(attempts):
            try:
                structured = self._validate_structured_payload(response, response_model)
                return replace(response, structured_response=structured)
            except LLMInvalidResponseError as e:
                last_error = e
                if attempt == attempts - 1:
                    break
                logger.debug(
                    "structured output invalid for request %s, repairing (attempt %d)",
                    req.request_id,
                    attempt + 1,
                )

            repair_req = replace(
                req,
                messages=[
                    *req.messages,
                    Message(role="assistant", content=response.text),
                    Message(
                        role="user",
                        content=make_repair_prompt(response.text, response_model),
                    ),
                ],
            )
            response = await self._call_with_retries(
                lambda: self._with_timeout(
                    self._chat_core(repair_req, response_model=response_model),
                    self._timeout_for(req.timeout_s),
                ),
                request_id=cast(str, req.request_id),
                model=req.model,
                max_retries=self._retries_for(repair_req),
            )
            response = _with_request_id(req, response)

        raise LLMInvalidResponseError(
            f"Structured output remained invalid after {attempts} attempts."
        ) from last_error

    def _validate_structured_payload(
        self,
        response: LLMResponse,
        response_model: type[ModelT],
    ) -> dict[str, Any]:
        payload: Any = response.structured_response
        if payload is None:
            return parse_and_validate_json(response.text, response_model).model_dump(
                mode="json"
            )

        if isinstance(payload, BaseModel):
            payload = payload.model_dump(mode="json")
        if not isinstance(payload, dict):
            raise LLMInvalidResponseError("Provider structured payload must be a JSON object")
        try:
            return response_model.model_validate(payload).model_dump(mode="json")
        except ValidationError as e:
            raise LLMInvalidResponseError(
                f"Provider structured payload did not match schema: {e}"
            ) from e

    def _check_chat_request(
        self,
        req: LLMRequest,
        *,
        response_model: type[BaseModel] | None,
    ) -> None:
        self._ensure_capability("chat", self.capabilities.chat)
        if response_model is not None:
            self._ensure_capability(
                "structured_output", self.capabilities.structured_output
            )
        self._validate_chat_request(req)

    def _ensure_capability(self, capability: str, enabled: bool) -> None:
        if not enabled:
            raise LLMCapabilityError(
                f"Provider '{self.provider_id}' does not support capability '{capability}'"
            )

    def _validate_chat_request(self, req: LLMRequest) -> None:
        if not req.model or not req.model.strip():
            raise LLMError("LLMRequest.model must be a non-empty string")
        if not req.messages:
            raise LLMError("LLMRequest.messages must contain at least one message")
        if req.idempotency_key is not None and not req.idempotency_key.strip():
            raise LLMError("LLMRequest.idempotency_key must be a non-empty string when provided")
        if req.max_tokens is not None and req.max_tokens <= 0:
            raise LLMError("LLMRequest.max_tokens must be greater than 0")
        if req.timeout_s is not None and req.timeout_s <= 0:
            raise LLMError("LLMRequest.timeout_s must be greater than 0")
        if req.temperature is not None and req.temperature < 0:
            raise LLMError("LLMRequest.temperature must be >= 0")
        if req.top_p is not None and not 0 < req.top_p <= 1:
            raise LLMError("LLMRequest.top_p must be in (0, 1]")

        total_chars = 0
        for idx, message in enumerate(req.messages):
            if message.role not in _ROLES:
                raise LLMError(f"LLMRequest.messages[{idx}] has unsupported role")
            if not isinstance(message.content, str):
                raise LLMError(f"LLMRequest.messages[{idx}].content must be a string")
            total_chars += len(message.content)

        if total_chars > self.config.max_input_chars:
            raise LLMError(
                f"LLMRequest exceeds max input chars ({self.config.max_input_chars})"
            )

    def _validate_embedding_request(self, req: EmbeddingRequest) -> None:
        if not req.inputs:
            raise LLMError("EmbeddingRequest.inputs must contain at least one input")
        if req.timeout_s is not None and req.timeout_s <= 0:
            raise LLMError("EmbeddingRequest.timeout_s must be greater than 0")

        total_chars = 0
        for idx, value in enumerate(req.inputs):
            if not isinstance(value, str) or not value.strip():
                raise LLMError(f"EmbeddingRequest.inputs[{idx}] must be a non-empty string")
            total_chars += len(value)
        if total_chars > self.config.max_input_chars:
            raise LLMError(
                f"EmbeddingRequest exceeds max input chars ({self.config.max_input_chars})"
            )

    def _resolve_embedding_model(self, req: EmbeddingRequest) -> EmbeddingRequest:
        if req.model and req.model.strip():
            return req

        cfg_model = self.config.embedding_model
        if not cfg_model or not cfg_model.strip():
            raise LLMConfigurationError(
                "Embedding model is not configured. Provide `EmbeddingRequest.model` "
                "or set `LLMConfig.embedding_model`/`LLMFLOWS_EMBED_MODEL`."
            )
        return replace(req, model=cfg_model.strip())

    def _ensure_request_id(self, req: LLMRequest) -> LLMRequest:
        if req.request_id and req.request_id.strip():
            return req
        return replace(req, request_id=self._new_request_id())

    def _new_request_id(self) -> str:
        return uuid.uuid4().hex

    def _timeout_for(self, requested: float | None) -> float | None:
        return requested if requested is not None else self.config.timeout_s

    def _retries_for(self, req: LLMRequest) -> int:
        """
        Chat calls are not idempotent: they are retried only when the caller
        supplied an idempotency key and the adapter forwards it.
        """
        if req.idempotency_key and self.capabilities.idempotency:
            return self.config.max_retries
        return 0

    async def _with_timeout(
        self, awaitable: Awaitable[ReturnT], timeout: float | None
    ) -> ReturnT:
        if timeout is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, timeout=timeout)
        except asyncio.TimeoutError as e:
            raise LLMTimeoutError(f"Provider call exceeded {timeout}s") from e

    async def _call_with_retries(
        self,
        fn: Callable[[], Awaitable[ReturnT]],
        *,
        request_id: str,
        model: str | None,
        max_retries: int,
    ) -> ReturnT:
        """Call `fn`, retrying `LLMRetryableError` with exponential backoff."""
        await self._emit("request_start", request_id=request_id, model=model, attempt=1)

        for attempt in range(max_retries + 1):
            started_at = time.monotonic()
            try:
                result = await fn()
            except asyncio.CancelledError as e:
                await self._emit(
                    "request_error",
                    request_id=request_id,
                    model=model,
                    attempt=attempt + 1,
                    latency_ms=(time.monotonic() - started_at) * 1000.0,
                    error=e,
                )
                raise
            except Exception as e:
                classified = e if isinstance(e, LLMError) else self._classify_error(e)
                latency_ms = (time.monotonic() - started_at) * 1000.0

                retryable = isinstance(classified, (LLMRetryableError, LLMTimeoutError))
                if retryable and attempt < max_retries:
                    await self._emit(
                        "retry",
                        request_id=request_id,
                        model=model,
                        attempt=attempt + 1,
                        latency_ms=latency_ms,
                        error=classified,
                    )
                    await asyncio.sleep(
                        backoff_delay(
                            attempt,
                            self.config.backoff_base_s,
                            self.config.backoff_jitter_s,
                        )
                    )
                    continue

                await self._emit(
                    "request_error",
                    request_id=request_id,
                    model=model,
                    attempt=attempt + 1,
                    latency_ms=latency_ms,
                    error=classified,
                )
                if classified is e:
                    raise
                raise classified from e

            await self._emit(
                "request_success",
                request_id=request_id,
                model=model,
                attempt=attempt + 1,
                latency_ms=(time.monotonic() - started_at) * 1000.0,
                usage=result.usage if isinstance(result, LLMResponse) else None,
            )
            return result

        raise LLMError(f"LLM call failed after {max_retries} retries")

    def _classify_error(self, e: Exception) -> LLMError:
        """Map a provider/transport exception onto retryable vs fatal."""
        msg = str(e) or repr(e)
        status = _status_code(e)

        if status is not None:
            if status in (408, 429) or 500 <= status < 600:
                return LLMRetryableError(msg)
            if 400 <= status < 500:
                return LLMError(msg)

        if isinstance(e, (asyncio.TimeoutError, TimeoutError, socket.timeout)):
            return LLMTimeoutError(msg)
        if isinstance(e, (ConnectionError, OSError)):
            return LLMRetryableError(msg)

        lowered = msg.lower()
        if any(phrase in lowered for phrase in _RETRY_PHRASES):
            return LLMRetryableError(msg)
        return LLMError(msg)

    async def _emit(
        self,
        event_type: str,
        *,
        request_id: str,
        model: str | None,
        attempt: int | None = None,
        latency_ms: float | None = None,
        usage: Usage | None = None,
        error: BaseException | None = None,
    ) -> None:
        if not self._observers:
            return

        event = LLMLifecycleEvent(
            event_type=cast(Any, event_type),
            request_id=request_id,
            provider_id=self.provider_id,
            model=model,
            attempt=attempt,
            latency_ms=latency_ms,
            usage=usage,
            error_class=type(error).__name__ if error is not None else None,
            error_message=str(error) if error is not None else None,
        )
        for observer in self._observers:
            try:
                result = observer(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.debug("llm observer %r failed", observer, exc_info=True)

    @abstractmethod
    async def _chat_core(
        self,
        req: LLMRequest,
        *,
        response_model: type[BaseModel] | None = None,
    ) -> LLMResponse:
        """
        Provider chat call.

        Adapters with native structured decoding may fill
        `LLMResponse.structured_response` when `response_model` is set.
        """

    @abstractmethod
    async def _chat_stream_core(
        self,
        req: LLMRequest,
        *,
        response_model: type[BaseModel] | None = None,
    ) -> AsyncIterator[LLMStreamEvent]:
        """Provider streaming call."""

    @abstractmethod
    async def _embed_core(self, req: EmbeddingRequest) -> EmbeddingResponse:
        """Provider embedding call."""


def _bind_chat(middleware: Any, call_next: LLMChatNext) -> LLMChatNext:
    async def _wrapped(current_req: LLMRequest) -> LLMResponse:
        return await middleware(call_next, current_req)

    return _wrapped


def _bind_stream(middleware: Any, call_next: LLMChatStreamNext) -> LLMChatStreamNext:
    def _wrapped(current_req: LLMRequest) -> AsyncIterator[LLMStreamEvent]:
        return middleware(call_next, current_req)

    return _wrapped


def _with_request_id(req: LLMRequest, response: LLMResponse) -> LLMResponse:
    if response.request_id:
        return response
    return replace(response, request_id=req.request_id)


def _status_code(e: Exception) -> int | None:
    for source in (e, getattr(e, "response", None)):
        if source is None:
            continue
        for attr in ("status_code", "status"):
            val = getattr(source, attr, None)
            if isinstance(val, int):
                return val
            if isinstance(val, str) and val.isdigit():
                return int(val)
    return None
