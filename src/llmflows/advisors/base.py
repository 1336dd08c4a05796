from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Advisor contract and chain assembly.

An advisor wraps one chat exchange. Advisors are sorted by `order`: the
lowest order is the outermost wrapper, so it sees the request first and the
result last. Most advisors only need `before` and/or `after`; advisors that
must short-circuit or observe the raw stream override `around` /
`around_stream`.
"""

from dataclasses import replace
from typing import AsyncIterator, Awaitable, Callable, Iterable, Sequence

from ..chat.types import ChatRequest, ChatResult, ChatStreamEvent

AdvisorNext = Callable[[ChatRequest], Awaitable[ChatResult]]
AdvisorStreamNext = Callable[[ChatRequest], AsyncIterator[ChatStreamEvent]]


class Advisor:
    name: str = "advisor"
    order: int = 0

    async def before(self, request: ChatRequest) -> ChatRequest:
        return request

    async def after(self, request: ChatRequest, result: ChatResult) -> ChatResult:
        return result

    async def around(self, request: ChatRequest, call_next: AdvisorNext) -> ChatResult:
        request = await self.before(request)
        result = await call_next(request)
        return await self.after(request, result)

    def around_stream(
        self, request: ChatRequest, call_next: AdvisorStreamNext
    ) -> AsyncIterator[ChatStreamEvent]:
        async def _iter() -> AsyncIterator[ChatStreamEvent]:
            current = await self.before(request)
            async for event in call_next(current):
                if event.result is not None:
                    event = replace(event, result=await self.after(current, event.result))
                yield event

        return _iter()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, order={self.order})"


def sort_advisors(advisors: Iterable[Advisor]) -> list[Advisor]:
    """Stable sort by `order`; ties keep registration order."""
    return sorted(advisors, key=lambda advisor: advisor.order)


def build_call_chain(advisors: Sequence[Advisor], terminal: AdvisorNext) -> AdvisorNext:
    call_next = terminal
    for advisor in reversed(sort_advisors(advisors)):
        call_next = _bind(advisor, call_next)
    return call_next


def build_stream_chain(
    advisors: Sequence[Advisor], terminal: AdvisorStreamNext
) -> AdvisorStreamNext:
    call_next = terminal
    for advisor in reversed(sort_advisors(advisors)):
        call_next = _bind_stream(advisor, call_next)
    return call_next


def _bind(advisor: Advisor, call_next: AdvisorNext) -> AdvisorNext:
    async def _wrapped(request: ChatRequest) -> ChatResult:
        return await advisor.around(request, call_next)

    return _wrapped


def _bind_stream(advisor: Advisor, call_next: AdvisorStreamNext) -> AdvisorStreamNext:
    def _wrapped(request: ChatRequest) -> AsyncIterator[ChatStreamEvent]:
        return advisor.around_stream(request, call_next)

    return _wrapped
