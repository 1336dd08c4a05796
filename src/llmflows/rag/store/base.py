from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Vector store contract. Embedding goes through an `LLM`; backends only
persist documents with their vectors and hand candidates back for scoring.
"""

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import TYPE_CHECKING, Sequence

from ...llms.errors import LLMInvalidResponseError
from ...llms.types import EmbeddingRequest
from ..types import Document, SearchRequest
from ..vector import cosine_scores

if TYPE_CHECKING:
    from ...llms.llm import LLM


class VectorStore(ABC):
    def __init__(
        self,
        llm: "LLM",
        *,
        embedding_model: str | None = None,
        batch_size: int = 64,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be greater than 0")
        self.llm = llm
        self.embedding_model = embedding_model
        self.batch_size = batch_size
        self._is_setup = False

    async def setup(self) -> None:
        self._is_setup = True

    async def close(self) -> None:
        self._is_setup = False

    async def __aenter__(self) -> "VectorStore":
        await self.setup()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _ensure_setup(self) -> None:
        if not self._is_setup:
            raise RuntimeError(
                f"{type(self).__name__} is not initialized. Call setup() or use `async with`."
            )

    async def add(self, documents: Sequence[Document]) -> list[str]:
        """Embed and store documents; existing ids are replaced. Returns the ids."""
        self._ensure_setup()
        if not documents:
            return []
        for document in documents:
            if not document.text.strip():
                raise ValueError(f"Document {document.id!r} has no text")

        embeddings: list[list[float]] = []
        for start in range(0, len(documents), self.batch_size):
            batch = documents[start : start + self.batch_size]
            embeddings.extend(await self._embed([d.text for d in batch]))

        await self._upsert(list(documents), embeddings)
        return [d.id for d in documents]

    async def similarity_search(self, request: SearchRequest | str) -> list[Document]:
        """
        Return the closest documents, best first, each with its cosine `score`.
        """
        self._ensure_setup()
        if isinstance(request, str):
            request = SearchRequest(query=request)
        if not request.query.strip():
            raise ValueError("Search query must be non-empty")
        if request.top_k <= 0:
            raise ValueError("top_k must be greater than 0")

        (query_embedding,) = await self._embed([request.query])
        candidates = [
            (document, embedding)
            for document, embedding in await self._candidates(request.metadata_filter)
            if len(embedding) == len(query_embedding)
        ]
        if not candidates:
            return []

        scores = cosine_scores(query_embedding, [embedding for _, embedding in candidates])
        ranked = sorted(
            (
                (document, float(score))
                for (document, _), score in zip(candidates, scores)
                if request.similarity_threshold is None
                or score >= request.similarity_threshold
            ),
            key=lambda item: item[1],
            reverse=True,
        )
        return [replace(document, score=score) for document, score in ranked[: request.top_k]]

    async def _embed(self, texts: list[str]) -> list[list[float]]:
        response = await self.llm.embed(
            EmbeddingRequest(model=self.embedding_model, inputs=texts)
        )
        if len(response.embeddings) != len(texts):
            raise LLMInvalidResponseError(
                f"Expected {len(texts)} embeddings, got {len(response.embeddings)}"
            )
        return [[float(value) for value in embedding] for embedding in response.embeddings]

    @abstractmethod
    async def delete(self, ids: Sequence[str]) -> None:
        """Remove documents by id; unknown ids are ignored."""

    @abstractmethod
    async def _upsert(
        self, documents: list[Document], embeddings: list[list[float]]
    ) -> None: ...

    @abstractmethod
    async def _candidates(
        self, metadata_filter: dict | None
    ) -> list[tuple[Document, list[float]]]:
        """Stored documents (with embeddings) that pass the metadata filter."""
