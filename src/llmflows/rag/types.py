from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Documents and search requests for retrieval-augmented generation.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any


def new_document_id() -> str:
    return f"doc_{uuid.uuid4().hex}"


@dataclass(frozen=True, slots=True)
class Document:
    """
    A piece of text that can be embedded and retrieved.

    `score` is only set on documents returned from a similarity search.
    """

    text: str
    id: str = field(default_factory=new_document_id)
    metadata: dict[str, Any] = field(default_factory=dict)
    score: float | None = None


@dataclass(frozen=True, slots=True)
class SearchRequest:
    query: str = ""
    top_k: int = 4
    similarity_threshold: float | None = None
    metadata_filter: dict[str, Any] | None = None

    def with_query(self, query: str) -> "SearchRequest":
        return SearchRequest(
            query=query,
            top_k=self.top_k,
            similarity_threshold=self.similarity_threshold,
            metadata_filter=self.metadata_filter,
        )


def matches_filter(metadata: dict[str, Any], metadata_filter: dict[str, Any] | None) -> bool:
    """Every filter key must be present with an equal value."""
    if not metadata_filter:
        return True
    return all(
        key in metadata and metadata[key] == value for key, value in metadata_filter.items()
    )
