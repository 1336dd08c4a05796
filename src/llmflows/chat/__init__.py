from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Prompt templates and the advisor-driven chat client.
"""

from .errors import ChatError, PromptTemplateError
from .template import PromptTemplate
from .types import ChatOptions, ChatRequest, ChatResult, ChatStreamEvent
from .client import ChatClient, ChatStream

__all__ = [
    "ChatClient",
    "ChatStream",
    "ChatOptions",
    "ChatRequest",
    "ChatResult",
    "ChatStreamEvent",
    "PromptTemplate",
    "ChatError",
    "PromptTemplateError",
]
