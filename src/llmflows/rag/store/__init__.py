from __future__ import annotations

from .base import VectorStore
from .in_memory import InMemoryVectorStore
from .sqlite import SQLiteVectorStore

__all__ = ["VectorStore", "InMemoryVectorStore", "SQLiteVectorStore"]
