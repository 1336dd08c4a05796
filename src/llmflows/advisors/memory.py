from __future__ import annotations

from dataclasses import replace

from ..chat.types import ChatRequest, ChatResult
from ..llms.types import Message
from ..memory.base import DEFAULT_CONVERSATION_ID, ChatMemory
from .base import Advisor


class ChatMemoryAdvisor(Advisor):
    """
    Gives the model the conversation so far and records the new exchange.

    The conversation id is read from `request.context[conversation_id_key]`
    and falls back to `"default"`. History loaded from memory goes before any
    history already on the request.
    """

    name = "chat_memory"

    def __init__(
        self,
        memory: ChatMemory,
        *,
        conversation_id_key: str = "conversation_id",
        last_n: int | None = None,
        order: int = -500,
    ) -> None:
        self.memory = memory
        self.conversation_id_key = conversation_id_key
        self.last_n = last_n
        self.order = order

    def conversation_id(self, request: ChatRequest) -> str:
        value = request.context.get(self.conversation_id_key)
        return str(value) if value else DEFAULT_CONVERSATION_ID

    async def before(self, request: ChatRequest) -> ChatRequest:
        stored = await self.memory.get(self.conversation_id(request), self.last_n)
        if not stored:
            return request
        return replace(request, history=[*stored, *request.history])

    async def after(self, request: ChatRequest, result: ChatResult) -> ChatResult:
        await self.memory.add(
            self.conversation_id(request),
            [
                Message(role="user", content=request.user),
                Message(role="assistant", content=result.text),
            ],
        )
        return result
