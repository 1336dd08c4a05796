from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

SQLite-backed chat memory.
"""

from typing import Sequence, cast

import aiosqlite

from ..llms.types import Message, Role
from .base import ChatMemory, validate_conversation_id, validate_last_n


class SQLiteChatMemory(ChatMemory):
    """Persistent chat memory; messages are ordered by insertion sequence."""

    def __init__(self, path: str = "llmflows.sqlite3") -> None:
        super().__init__()
        self.path = path
        self._connection: aiosqlite.Connection | None = None

    async def setup(self) -> None:
        self._connection = await aiosqlite.connect(self.path)
        self._connection.row_factory = aiosqlite.Row
        await self._connection.execute("PRAGMA journal_mode=WAL;")
        await self._connection.execute(
            """
            CREATE TABLE IF NOT EXISTS chat_messages (
              seq INTEGER PRIMARY KEY AUTOINCREMENT,
              conversation_id TEXT NOT NULL,
              role TEXT NOT NULL,
              content TEXT NOT NULL,
              name TEXT
            );
            """
        )
        await self._connection.execute(
            "CREATE INDEX IF NOT EXISTS idx_chat_messages_conv ON chat_messages(conversation_id, seq);"
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
            raise RuntimeError("SQLiteChatMemory is not initialized. Call setup() first.")
        return self._connection

    async def add(self, conversation_id: str, messages: Sequence[Message]) -> None:
        db = self._db()
        key = validate_conversation_id(conversation_id)
        if not messages:
            return
        await db.executemany(
            "INSERT INTO chat_messages(conversation_id, role, content, name) VALUES (?, ?, ?, ?)",
            [(key, m.role, m.content, m.name) for m in messages],
        )
        await db.commit()

    async def get(self, conversation_id: str, last_n: int | None = None) -> list[Message]:
        db = self._db()
        key = validate_conversation_id(conversation_id)
        validate_last_n(last_n)

        if last_n is None:
            cursor = await db.execute(
                "SELECT role, content, name FROM chat_messages WHERE conversation_id = ? ORDER BY seq ASC",
                (key,),
            )
            rows = list(await cursor.fetchall())
        else:
            cursor = await db.execute(
                "SELECT role, content, name FROM chat_messages WHERE conversation_id = ? "
                "ORDER BY seq DESC LIMIT ?",
                (key, last_n),
            )
            rows = list(reversed(list(await cursor.fetchall())))
        await cursor.close()

        return [
            Message(role=cast(Role, row["role"]), content=row["content"], name=row["name"])
            for row in rows
        ]

    async def clear(self, conversation_id: str) -> None:
        db = self._db()
        key = validate_conversation_id(conversation_id)
        await db.execute("DELETE FROM chat_messages WHERE conversation_id = ?", (key,))
        await db.commit()

    async def conversation_ids(self) -> list[str]:
        db = self._db()
        cursor = await db.execute(
            "SELECT DISTINCT conversation_id FROM chat_messages ORDER BY conversation_id"
        )
        rows = await cursor.fetchall()
        await cursor.close()
        return [row["conversation_id"] for row in rows]
