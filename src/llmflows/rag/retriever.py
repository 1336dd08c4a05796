from __future__ import annotations

from dataclasses import dataclass, field

from .store.base import VectorStore
from .types import Document, SearchRequest


@dataclass(slots=True)
class Retriever:
    """Binds a vector store to fixed search settings."""

    store: VectorStore
    search: SearchRequest = field(default_factory=SearchRequest)

    async def retrieve(self, query: str) -> list[Document]:
        return await self.store.similarity_search(self.search.with_query(query))
