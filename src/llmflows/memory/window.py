from __future__ import annotations

from typing import Sequence

from ..llms.types import Message
from .base import ChatMemory


class MessageWindowChatMemory(ChatMemory):
    """
    Keeps at most `max_messages` per conversation on top of another backend.

    System messages are never evicted; the oldest non-system messages go
    first. When system messages alone exceed the window, only they are kept.
    """

    def __init__(self, memory: ChatMemory, *, max_messages: int = 20) -> None:
        super().__init__()
        if max_messages <= 0:
            raise ValueError("max_messages must be greater than 0")
        self.memory = memory
        self.max_messages = max_messages

    async def setup(self) -> None:
        await self.memory.setup()
        await super().setup()

    async def close(self) -> None:
        await self.memory.close()
        await super().close()

    async def add(self, conversation_id: str, messages: Sequence[Message]) -> None:
        self._ensure_setup()
        await self.memory.add(conversation_id, messages)

        stored = await self.memory.get(conversation_id)
        if len(stored) <= self.max_messages:
            return

        kept = self._window(stored)
        await self.memory.clear(conversation_id)
        await self.memory.add(conversation_id, kept)

    def _window(self, messages: list[Message]) -> list[Message]:
        system_count = sum(1 for m in messages if m.role == "system")
        budget = max(self.max_messages - system_count, 0)
        to_drop = sum(1 for m in messages if m.role != "system") - budget

        kept: list[Message] = []
        for message in messages:
            if message.role != "system" and to_drop > 0:
                to_drop -= 1
                continue
            kept.append(message)
        return kept

    async def get(self, conversation_id: str, last_n: int | None = None) -> list[Message]:
        self._ensure_setup()
        return await self.memory.get(conversation_id, last_n)

    async def clear(self, conversation_id: str) -> None:
        self._ensure_setup()
        await self.memory.clear(conversation_id)

    async def conversation_ids(self) -> list[str]:
        self._ensure_setup()
        return await self.memory.conversation_ids()
