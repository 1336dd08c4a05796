from __future__ import annotations

import logging

from ..chat.types import ChatRequest, ChatResult
from ..llms.utils import clamp_str
from .base import Advisor


class LoggingAdvisor(Advisor):
    """Logs each outgoing request and the text that came back."""

    name = "logging"

    def __init__(
        self,
        *,
        level: int = logging.DEBUG,
        order: int = 1000,
        max_chars: int = 2000,
        log: logging.Logger | None = None,
    ) -> None:
        self.level = level
        self.order = order
        self.max_chars = max_chars
        self._log = log or logging.getLogger("llmflows.advisors")

    async def before(self, request: ChatRequest) -> ChatRequest:
        self._log.log(
            self.level,
            "chat request: system=%r history=%d user=%r",
            clamp_str(request.system or "", self.max_chars),
            len(request.history),
            clamp_str(request.user, self.max_chars),
        )
        return request

    async def after(self, request: ChatRequest, result: ChatResult) -> ChatResult:
        usage = result.response.usage if result.response is not None else None
        self._log.log(
            self.level,
            "chat response: text=%r tokens=%s",
            clamp_str(result.text, self.max_chars),
            usage.total_tokens if usage is not None else None,
        )
        return result
