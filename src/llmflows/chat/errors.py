from __future__ import annotations


class ChatError(Exception):
    """Base exception for chat-client failures."""


class PromptTemplateError(ChatError):
    """Template could not be parsed or rendered."""
