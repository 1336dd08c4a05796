from __future__ import annotations

"""In-process chat memory for local development and tests."""

import asyncio
from typing import Sequence

from ..llms.types import Message
from .base import ChatMemory, validate_conversation_id, validate_last_n


class InMemoryChatMemory(ChatMemory):
    def __init__(self) -> None:
        super().__init__()
        self._lock = asyncio.Lock()
        self._messages_by_conversation: dict[str, list[Message]] = {}

    async def add(self, conversation_id: str, messages: Sequence[Message]) -> None:
        self._ensure_setup()
        key = validate_conversation_id(conversation_id)
        if not messages:
            return
        async with self._lock:
            self._messages_by_conversation.setdefault(key, []).extend(messages)

    async def get(self, conversation_id: str, last_n: int | None = None) -> list[Message]:
        self._ensure_setup()
        key = validate_conversation_id(conversation_id)
        validate_last_n(last_n)
        async with self._lock:
            messages = self._messages_by_conversation.get(key, [])
            if last_n is not None:
                return list(messages[-last_n:]) if last_n else []
            return list(messages)

    async def clear(self, conversation_id: str) -> None:
        self._ensure_setup()
        key = validate_conversation_id(conversation_id)
        async with self._lock:
            self._messages_by_conversation.pop(key, None)

    async def conversation_ids(self) -> list[str]:
        self._ensure_setup()
        async with self._lock:
            return sorted(k for k, v in self._messages_by_conversation.items() if v)
