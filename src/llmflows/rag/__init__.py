from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Retrieval-augmented generation: documents, splitting, vector stores.
"""

from .factory import create_vector_store_from_env
from .retriever import Retriever
from .splitter import TextSplitter
from .store import InMemoryVectorStore, SQLiteVectorStore, VectorStore
from .types import Document, SearchRequest, new_document_id
from .vector import cosine_scores, cosine_similarity

__all__ = [
    "Document",
    "SearchRequest",
    "new_document_id",
    "TextSplitter",
    "VectorStore",
    "InMemoryVectorStore",
    "SQLiteVectorStore",
    "Retriever",
    "create_vector_store_from_env",
    "cosine_similarity",
    "cosine_scores",
]
