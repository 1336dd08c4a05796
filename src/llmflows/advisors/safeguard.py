from __future__ import annotations

import re
from typing import AsyncIterator, Iterable

from ..chat.types import ChatRequest, ChatResult, ChatStreamEvent
from .base import Advisor, AdvisorNext, AdvisorStreamNext

DEFAULT_FAILURE_RESPONSE = (
    "I'm unable to respond to that due to sensitive content. "
    "Could we rephrase or discuss something else?"
)


class SafeGuardAdvisor(Advisor):
    """
    Refuses requests whose user text contains a sensitive word.

    Matching is case-insensitive and on whole words. A blocked request never
    reaches the model; the result carries `failure_response` as its text and
    `safeguard_blocked=True` in its context.
    """

    name = "safeguard"

    def __init__(
        self,
        sensitive_words: Iterable[str],
        *,
        failure_response: str = DEFAULT_FAILURE_RESPONSE,
        order: int = -1000,
    ) -> None:
        words = sorted({w.strip().lower() for w in sensitive_words if w and w.strip()})
        if not words:
            raise ValueError("SafeGuardAdvisor needs at least one sensitive word")
        self.sensitive_words = tuple(words)
        self.failure_response = failure_response
        self.order = order
        self._pattern = re.compile(
            r"(?<!\w)(?:" + "|".join(re.escape(w) for w in words) + r")(?!\w)",
            re.IGNORECASE,
        )

    def is_blocked(self, text: str) -> bool:
        return self._pattern.search(text) is not None

    def _blocked_result(self, request: ChatRequest) -> ChatResult:
        request.context["safeguard_blocked"] = True
        return ChatResult(text=self.failure_response, context=request.context)

    async def around(self, request: ChatRequest, call_next: AdvisorNext) -> ChatResult:
        if self.is_blocked(request.user):
            return self._blocked_result(request)
        return await call_next(request)

    def around_stream(
        self, request: ChatRequest, call_next: AdvisorStreamNext
    ) -> AsyncIterator[ChatStreamEvent]:
        async def _iter() -> AsyncIterator[ChatStreamEvent]:
            if self.is_blocked(request.user):
                yield ChatStreamEvent(delta=self.failure_response)
                yield ChatStreamEvent(result=self._blocked_result(request))
                return
            async for event in call_next(request):
                yield event

        return _iter()
