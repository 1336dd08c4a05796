"""Provider adapter implementations."""

from .litellm import LiteLLMClient
from .openai import OpenAIClient

__all__ = [
    "LiteLLMClient",
    "OpenAIClient",
]
