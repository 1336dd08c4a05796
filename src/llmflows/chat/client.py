from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

The chat client: a reusable front end over an `LLM` with default system
text, default options and an advisor chain.
"""

import logging
from typing import TYPE_CHECKING, Any, AsyncIterator, Iterable, Mapping, Sequence, TypeVar

from pydantic import BaseModel

from ..llms.types import (
    LLMRequest,
    Message,
    StreamCompletedEvent,
    StreamErrorEvent,
    StreamTextDeltaEvent,
)
from ..llms.utils import run_sync
from .errors import ChatError
from .template import PromptTemplate
from .types import ChatOptions, ChatRequest, ChatResult, ChatStreamEvent

if TYPE_CHECKING:
    from ..advisors.base import Advisor
    from ..llms.llm import LLM

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ChatClient:
    """
    Sends user prompts through the advisor chain to an `LLM`.

    Client-level `system`, `options` and `advisors` apply to every call;
    per-call arguments override options field by field and append advisors.

    Example:
        client = ChatClient(llm, system="Answer briefly.")
        result = await client.ask("What is a vector store?")
        print(result.text)
    """

    def __init__(
        self,
        llm: "LLM",
        *,
        model: str | None = None,
        system: str | None = None,
        advisors: Iterable["Advisor"] | None = None,
        options: ChatOptions | None = None,
    ) -> None:
        self.llm = llm
        self.system = system
        self.advisors: list["Advisor"] = list(advisors or ())
        base = options or ChatOptions()
        self.options = ChatOptions(model=model).merged_over(base) if model else base

    def with_advisors(self, *advisors: "Advisor") -> "ChatClient":
        """A copy of this client with `advisors` added to the chain."""
        return ChatClient(
            self.llm,
            system=self.system,
            advisors=[*self.advisors, *advisors],
            options=self.options,
        )

    def with_system(self, system: str | None) -> "ChatClient":
        return ChatClient(
            self.llm, system=system, advisors=self.advisors, options=self.options
        )

    async def ask(
        self,
        user: str,
        *,
        system: str | None = None,
        params: Mapping[str, Any] | None = None,
        response_model: type[BaseModel] | None = None,
        context: dict[str, Any] | None = None,
        history: Sequence[Message] | None = None,
        options: ChatOptions | None = None,
        advisors: Iterable["Advisor"] | None = None,
    ) -> ChatResult:
        """
        Run one exchange through the advisor chain.

        `params` renders `user` as a `PromptTemplate` first. `context` is the
        shared advisor context; it comes back on `ChatResult.context`.
        """
        from ..advisors.base import build_call_chain

        request = self._build_request(
            user,
            system=system,
            params=params,
            response_model=response_model,
            context=context,
            history=history,
            options=options,
        )
        chain = build_call_chain([*self.advisors, *(advisors or ())], self._call_model)
        return await chain(request)

    async def ask_for(
        self,
        user: str,
        response_model: type[ModelT],
        **kwargs: Any,
    ) -> ModelT:
        """Like `ask`, but returns the validated `response_model` instance."""
        result = await self.ask(user, response_model=response_model, **kwargs)
        if result.structured is None:
            raise ChatError(
                f"No structured output for {response_model.__name__}: {result.text!r}"
            )
        return response_model.model_validate(result.structured)

    def ask_sync(self, user: str, **kwargs: Any) -> ChatResult:
        return run_sync(self.ask(user, **kwargs))

    def stream(
        self,
        user: str,
        *,
        system: str | None = None,
        params: Mapping[str, Any] | None = None,
        response_model: type[BaseModel] | None = None,
        context: dict[str, Any] | None = None,
        history: Sequence[Message] | None = None,
        options: ChatOptions | None = None,
        advisors: Iterable["Advisor"] | None = None,
    ) -> "ChatStream":
        """
        Stream text deltas; after iteration `ChatStream.result` holds the
        full result as seen by the advisors.
        """
        from ..advisors.base import build_stream_chain

        request = self._build_request(
            user,
            system=system,
            params=params,
            response_model=response_model,
            context=context,
            history=history,
            options=options,
        )
        chain = build_stream_chain([*self.advisors, *(advisors or ())], self._stream_model)
        return ChatStream(chain(request))

    def _build_request(
        self,
        user: str,
        *,
        system: str | None,
        params: Mapping[str, Any] | None,
        response_model: type[BaseModel] | None,
        context: dict[str, Any] | None,
        history: Sequence[Message] | None,
        options: ChatOptions | None,
    ) -> ChatRequest:
        if params is not None:
            user = PromptTemplate(user).render(**params)
        if not isinstance(user, str) or not user.strip():
            raise ValueError("User message must be a non-empty string")
        return ChatRequest(
            user=user,
            system=system if system is not None else self.system,
            history=list(history or ()),
            options=(options or ChatOptions()).merged_over(self.options),
            response_model=response_model,
            context=context if context is not None else {},
        )

    def _to_llm_request(self, request: ChatRequest) -> LLMRequest:
        opts = request.options
        return LLMRequest(
            model=opts.model or self.llm.config.default_model,
            messages=request.to_messages(),
            idempotency_key=opts.idempotency_key,
            max_tokens=opts.max_tokens,
            temperature=opts.temperature,
            top_p=opts.top_p,
            timeout_s=opts.timeout_s,
        )

    async def _call_model(self, request: ChatRequest) -> ChatResult:
        response = await self.llm.chat(
            self._to_llm_request(request), response_model=request.response_model
        )
        return ChatResult(
            text=response.text,
            response=response,
            structured=response.structured_response,
            context=request.context,
        )

    def _stream_model(self, request: ChatRequest) -> AsyncIterator[ChatStreamEvent]:
        async def _iter() -> AsyncIterator[ChatStreamEvent]:
            events = await self.llm.chat_stream(
                self._to_llm_request(request), response_model=request.response_model
            )
            async for event in events:
                if isinstance(event, StreamTextDeltaEvent):
                    if event.delta:
                        yield ChatStreamEvent(delta=event.delta)
                elif isinstance(event, StreamErrorEvent):
                    logger.warning("LLM stream reported an error: %s", event.error)
                elif isinstance(event, StreamCompletedEvent):
                    response = event.response
                    yield ChatStreamEvent(
                        result=ChatResult(
                            text=response.text,
                            response=response,
                            structured=response.structured_response,
                            context=request.context,
                        )
                    )

        return _iter()


class ChatStream:
    """
    Async iterator of text deltas from `ChatClient.stream`.

    Can be iterated once. `result` is set when the stream finishes;
    `collect()` drains the stream and returns it.
    """

    def __init__(self, events: AsyncIterator[ChatStreamEvent]) -> None:
        self._events = events
        self._started = False
        self.result: ChatResult | None = None

    def __aiter__(self) -> AsyncIterator[str]:
        if self._started:
            raise RuntimeError("ChatStream can only be iterated once")
        self._started = True
        return self._deltas()

    async def _deltas(self) -> AsyncIterator[str]:
        async for event in self._events:
            if event.result is not None:
                self.result = event.result
            elif event.delta:
                yield event.delta
        if self.result is None:
            raise ChatError("Stream ended without a final result")

    async def collect(self) -> ChatResult:
        if not self._started:
            async for _ in self:
                pass
        if self.result is None:
            raise ChatError("Stream has not finished")
        return self.result
