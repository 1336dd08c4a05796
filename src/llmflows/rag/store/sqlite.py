from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

SQLite-backed vector store. Embeddings are stored as JSON and scored in
process with numpy.
"""

import json
from typing import TYPE_CHECKING, Sequence, cast

import aiosqlite

from ..types import Document, matches_filter
from .base import VectorStore

if TYPE_CHECKING:
    from ...llms.llm import LLM


class SQLiteVectorStore(VectorStore):
    def __init__(
        self,
        llm: "LLM",
        *,
        path: str = "llmflows.sqlite3",
        embedding_model: str | None = None,
        batch_size: int = 64,
    ) -> None:
        super().__init__(llm, embedding_model=embedding_model, batch_size=batch_size)
        self.path = path
        self._connection: aiosqlite.Connection | None = None

    async def setup(self) -> None:
        self._connection = await aiosqlite.connect(self.path)
        self._connection.row_factory = aiosqlite.Row
        await self._connection.execute("PRAGMA journal_mode=WAL;")
        await self._connection.execute(
            """
            CREATE TABLE IF NOT EXISTS vector_documents (
              id TEXT PRIMARY KEY,
              text TEXT NOT NULL,
              metadata_json TEXT NOT NULL,
              embedding_json TEXT NOT NULL
            );
            """
        )
        await self._connection.commit()
        await super().setup()

    async def close(self) -> None:
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
        await super().close()

    def _db(self) -> aiosqlite.Connection:
        self._ensure_setup()
        if self._connection is None:
            raise RuntimeError("SQLiteVectorStore is not initialized. Call setup() first.")
        return self._connection

    async def _upsert(self, documents: list[Document], embeddings: list[list[float]]) -> None:
        db = self._db()
        await db.executemany(
            """
            INSERT INTO vector_documents(id, text, metadata_json, embedding_json)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
              text=excluded.text,
              metadata_json=excluded.metadata_json,
              embedding_json=excluded.embedding_json
            """,
            [
                (
                    document.id,
                    document.text,
                    json.dumps(document.metadata, ensure_ascii=False, separators=(",", ":")),
                    json.dumps(embedding),
                )
                for document, embedding in zip(documents, embeddings)
            ],
        )
        await db.commit()

    async def delete(self, ids: Sequence[str]) -> None:
        db = self._db()
        if not ids:
            return
        await db.executemany(
            "DELETE FROM vector_documents WHERE id = ?", [(document_id,) for document_id in ids]
        )
        await db.commit()

    async def _candidates(self, metadata_filter: dict | None) -> list[tuple[Document, list[float]]]:
        db = self._db()
        cursor = await db.execute(
            "SELECT id, text, metadata_json, embedding_json FROM vector_documents"
        )
        rows = await cursor.fetchall()
        await cursor.close()

        out: list[tuple[Document, list[float]]] = []
        for row in rows:
            metadata = json.loads(cast(str, row["metadata_json"]))
            if not matches_filter(metadata, metadata_filter):
                continue
            embedding = json.loads(cast(str, row["embedding_json"]))
            if not isinstance(embedding, list):
                continue
            document = Document(
                id=cast(str, row["id"]), text=cast(str, row["text"]), metadata=metadata
            )
            out.append((document, [float(value) for value in embedding]))
        return out

    async def count(self) -> int:
        db = self._db()
        cursor = await db.execute("SELECT COUNT(*) AS n FROM vector_documents")
        row = await cursor.fetchone()
        await cursor.close()
        return int(row["n"]) if row is not None else 0
