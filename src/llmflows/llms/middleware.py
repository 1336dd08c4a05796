from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Middleware protocols for chat, streaming and embedding calls.
"""

from dataclasses import dataclass, field
from typing import AsyncIterator, Awaitable, Callable, Protocol

from .types import (
    EmbeddingRequest,
    EmbeddingResponse,
    LLMRequest,
    LLMResponse,
    LLMStreamEvent,
)


LLMChatNext = Callable[[LLMRequest], Awaitable[LLMResponse]]
LLMEmbedNext = Callable[[EmbeddingRequest], Awaitable[EmbeddingResponse]]
LLMChatStreamNext = Callable[[LLMRequest], AsyncIterator[LLMStreamEvent]]


class LLMChatMiddleware(Protocol):
    async def __call__(
        self, call_next: LLMChatNext, req: LLMRequest
    ) -> LLMResponse: ...


class LLMEmbedMiddleware(Protocol):
    async def __call__(
        self, call_next: LLMEmbedNext, req: EmbeddingRequest
    ) -> EmbeddingResponse: ...


class LLMStreamMiddleware(Protocol):
    def __call__(
        self, call_next: LLMChatStreamNext, req: LLMRequest
    ) -> AsyncIterator[LLMStreamEvent]: ...


@dataclass
class MiddlewareStack:
    """Ordered middleware lists; the first entry is the outermost wrapper."""

    chat: list[LLMChatMiddleware] = field(default_factory=list)
    embed: list[LLMEmbedMiddleware] = field(default_factory=list)
    stream: list[LLMStreamMiddleware] = field(default_factory=list)
