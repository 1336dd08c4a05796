from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Provider-neutral LLM client layer.
"""

from .config import LLMConfig
from .errors import (
    LLMCapabilityError,
    LLMConfigurationError,
    LLMError,
    LLMInvalidResponseError,
    LLMRetryableError,
    LLMTimeoutError,
)
from .factory import (
    available_llm_adapters,
    create_llm,
    create_llm_from_env,
    register_llm_adapter,
    unregister_llm_adapter,
)
from .llm import LLM
from .middleware import MiddlewareStack
from .observability import LLMLifecycleEvent, LoggingObserver, OpenTelemetryObserver
from .types import (
    EmbeddingRequest,
    EmbeddingResponse,
    LLMCapabilities,
    LLMRequest,
    LLMResponse,
    LLMStreamEvent,
    Message,
    StreamCompletedEvent,
    StreamErrorEvent,
    StreamMessageStartEvent,
    StreamMessageStopEvent,
    StreamTextDeltaEvent,
    Usage,
)

__all__ = [
    "LLM",
    "LLMConfig",
    "MiddlewareStack",
    "create_llm",
    "create_llm_from_env",
    "register_llm_adapter",
    "unregister_llm_adapter",
    "available_llm_adapters",
    "LLMLifecycleEvent",
    "LoggingObserver",
    "OpenTelemetryObserver",
    "Message",
    "LLMRequest",
    "LLMResponse",
    "Usage",
    "EmbeddingRequest",
    "EmbeddingResponse",
    "LLMCapabilities",
    "LLMStreamEvent",
    "StreamMessageStartEvent",
    "StreamTextDeltaEvent",
    "StreamMessageStopEvent",
    "StreamErrorEvent",
    "StreamCompletedEvent",
    "LLMError",
    "LLMTimeoutError",
    "LLMRetryableError",
    "LLMInvalidResponseError",
    "LLMConfigurationError",
    "LLMCapabilityError",
]
