from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Chat memory contract shared by every backend.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from ..llms.types import Message

DEFAULT_CONVERSATION_ID = "default"


class ChatMemory(ABC):
    """
    Ordered message history per conversation id.

    Backends must be set up before use, either with `setup()` / `close()` or
    `async with memory:`.
    """

    def __init__(self) -> None:
        self._is_setup = False

    async def setup(self) -> None:
        self._is_setup = True

    async def close(self) -> None:
        self._is_setup = False

    async def __aenter__(self) -> "ChatMemory":
        await self.setup()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _ensure_setup(self) -> None:
        if not self._is_setup:
            raise RuntimeError(
                f"{type(self).__name__} is not initialized. Call setup() or use `async with`."
            )

    @abstractmethod
    async def add(self, conversation_id: str, messages: Sequence[Message]) -> None:
        """Append messages to the end of a conversation."""

    @abstractmethod
    async def get(self, conversation_id: str, last_n: int | None = None) -> list[Message]:
        """Return the conversation in chronological order, optionally only the last `last_n`."""

    @abstractmethod
    async def clear(self, conversation_id: str) -> None:
        """Forget a conversation."""

    @abstractmethod
    async def conversation_ids(self) -> list[str]:
        """Ids of conversations that currently hold messages."""


def validate_conversation_id(conversation_id: str) -> str:
    if not isinstance(conversation_id, str) or not conversation_id.strip():
        raise ValueError("conversation_id must be a non-empty string")
    return conversation_id.strip()


def validate_last_n(last_n: int | None) -> None:
    if last_n is not None and last_n < 0:
        raise ValueError("last_n must be >= 0")
