"""LLM client package.

Structure:
- `adapters/`: provider-specific adapter implementations
- `base/`: reusable adapter base classes
- `shared/`: reusable normalization utilities
"""

from .adapters import LiteLLMClient, OpenAIClient
from .base import ResponsesClientBase

__all__ = [
    "ResponsesClientBase",
    "LiteLLMClient",
    "OpenAIClient",
]
