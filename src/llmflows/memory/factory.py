from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Chat memory construction from environment settings.
"""

import os

from .base import ChatMemory
from .in_memory import InMemoryChatMemory
from .sqlite import SQLiteChatMemory
from .window import MessageWindowChatMemory


def create_chat_memory_from_env() -> ChatMemory:
    """
    Build chat memory from `LLMFLOWS_MEMORY_BACKEND` (`memory` or `sqlite`).

    `LLMFLOWS_MEMORY_WINDOW`, when set, wraps the backend in a message window.
    """
    backend = os.getenv("LLMFLOWS_MEMORY_BACKEND", "memory").strip().lower()

    memory: ChatMemory
    if backend in ("mem", "memory", "inmemory", "in_memory"):
        memory = InMemoryChatMemory()
    elif backend in ("sqlite", "sqlite3"):
        memory = SQLiteChatMemory(path=os.getenv("LLMFLOWS_SQLITE_PATH", "llmflows.sqlite3"))
    else:
        raise ValueError(f"Unknown LLMFLOWS_MEMORY_BACKEND: {backend}")

    window = os.getenv("LLMFLOWS_MEMORY_WINDOW")
    if window:
        memory = MessageWindowChatMemory(memory, max_messages=int(window))
    return memory
