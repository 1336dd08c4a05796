from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Conversation memory used by `ChatMemoryAdvisor`.
"""

from .base import DEFAULT_CONVERSATION_ID, ChatMemory
from .factory import create_chat_memory_from_env
from .in_memory import InMemoryChatMemory
from .sqlite import SQLiteChatMemory
from .window import MessageWindowChatMemory

__all__ = [
    "DEFAULT_CONVERSATION_ID",
    "ChatMemory",
    "InMemoryChatMemory",
    "SQLiteChatMemory",
    "MessageWindowChatMemory",
    "create_chat_memory_from_env",
]
