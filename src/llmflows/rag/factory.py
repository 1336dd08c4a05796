from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Vector store construction from environment settings.
"""

import os
from typing import TYPE_CHECKING

from .store.base import VectorStore
from .store.in_memory import InMemoryVectorStore
from .store.sqlite import SQLiteVectorStore

if TYPE_CHECKING:
    from ..llms.llm import LLM


def create_vector_store_from_env(llm: "LLM") -> VectorStore:
    """Build a vector store from `LLMFLOWS_MEMORY_BACKEND` (`memory` or `sqlite`)."""
    backend = os.getenv("LLMFLOWS_MEMORY_BACKEND", "memory").strip().lower()

    if backend in ("mem", "memory", "inmemory", "in_memory"):
        return InMemoryVectorStore(llm)
    if backend in ("sqlite", "sqlite3"):
        return SQLiteVectorStore(llm, path=os.getenv("LLMFLOWS_SQLITE_PATH", "llmflows.sqlite3"))
    raise ValueError(f"Unknown LLMFLOWS_MEMORY_BACKEND: {backend}")
