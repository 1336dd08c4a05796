from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Client configuration read from `LLMFLOWS_*` environment variables.
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LLMConfig:
    # Models
    default_model: str
    embedding_model: str | None

    # Transport
    timeout_s: float
    max_retries: int
    backoff_base_s: float
    backoff_jitter_s: float

    # Structured output repair attempts
    json_max_retries: int

    max_input_chars: int
    api_base_url: str | None = None
    api_key: str | None = None

    # Adapter name resolved by `create_llm_from_env`
    adapter: str = "litellm"

    @staticmethod
    def from_env() -> "LLMConfig":
        return LLMConfig(
            default_model=os.getenv("LLMFLOWS_LLM_MODEL", "gpt-4.1-mini"),
            embedding_model=os.getenv("LLMFLOWS_EMBED_MODEL"),
            api_base_url=os.getenv("LLMFLOWS_LLM_API_BASE_URL"),
            api_key=os.getenv("LLMFLOWS_LLM_API_KEY"),
            timeout_s=float(os.getenv("LLMFLOWS_LLM_TIMEOUT_S", "30")),
            max_retries=int(os.getenv("LLMFLOWS_LLM_MAX_RETRIES", "3")),
            backoff_base_s=float(os.getenv("LLMFLOWS_LLM_BACKOFF_BASE_S", "0.5")),
            backoff_jitter_s=float(os.getenv("LLMFLOWS_LLM_BACKOFF_JITTER_S", "0.15")),
            json_max_retries=int(os.getenv("LLMFLOWS_LLM_JSON_MAX_RETRIES", "2")),
            max_input_chars=int(os.getenv("LLMFLOWS_LLM_MAX_INPUT_CHARS", "200000")),
            adapter=os.getenv("LLMFLOWS_LLM_ADAPTER", "litellm"),
        )
