from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Sequence

from ..types import Document, matches_filter
from .base import VectorStore

if TYPE_CHECKING:
    from ...llms.llm import LLM


class InMemoryVectorStore(VectorStore):
    """Process-local vector store for tests and small corpora."""

    def __init__(
        self,
        llm: "LLM",
        *,
        embedding_model: str | None = None,
        batch_size: int = 64,
    ) -> None:
        super().__init__(llm, embedding_model=embedding_model, batch_size=batch_size)
        self._lock = asyncio.Lock()
        self._documents: dict[str, tuple[Document, list[float]]] = {}

    async def _upsert(self, documents: list[Document], embeddings: list[list[float]]) -> None:
        async with self._lock:
            for document, embedding in zip(documents, embeddings):
                self._documents[document.id] = (document, embedding)

    async def delete(self, ids: Sequence[str]) -> None:
        self._ensure_setup()
        async with self._lock:
            for document_id in ids:
                self._documents.pop(document_id, None)

    async def _candidates(self, metadata_filter: dict | None) -> list[tuple[Document, list[float]]]:
        async with self._lock:
            return [
                (document, embedding)
                for document, embedding in self._documents.values()
                if matches_filter(document.metadata, metadata_filter)
            ]

    async def count(self) -> int:
        self._ensure_setup()
        async with self._lock:
            return len(self._documents)
