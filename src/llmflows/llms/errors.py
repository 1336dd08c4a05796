from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Exceptions raised by the llm client layer.
"""


class LLMError(Exception):
    """Base exception for every client-layer failure."""

    pass


class LLMTimeoutError(LLMError):
    pass


class LLMRetryableError(LLMError):
    """
    Transient failure (rate limit, overloaded provider, dropped connection).
    The client retries these with backoff.
    """

    pass


class LLMInvalidResponseError(LLMError):
    """
    The model answered, but the answer could not be parsed or did not match
    the requested schema.
    """

    pass


class LLMConfigurationError(LLMError):
    pass


class LLMCapabilityError(LLMError):
    """
    The selected adapter cannot do what was asked (streaming, embeddings,
    structured output).
    """

    pass
