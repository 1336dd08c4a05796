from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Character-based document splitting.
"""

from typing import Iterable

from .types import Document

_SENTENCE_BREAKS = ("\n\n", ". ", "! ", "? ", "\n")


class TextSplitter:
    """
    Splits text into overlapping chunks of at most `chunk_size` characters.

    A chunk is cut at the last sentence break in its second half when there
    is one, otherwise at exactly `chunk_size`.
    """

    def __init__(self, chunk_size: int = 800, chunk_overlap: int = 100) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be greater than 0")
        if chunk_overlap < 0:
            raise ValueError("chunk_overlap must be >= 0")
        if chunk_overlap >= chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def split_text(self, text: str) -> list[str]:
        text = (text or "").strip()
        if not text:
            return []

        chunks: list[str] = []
        start = 0
        while start < len(text):
            end = min(start + self.chunk_size, len(text))
            if end < len(text):
                end = start + self._cut_point(text[start:end])

            chunk = text[start:end].strip()
            if chunk:
                chunks.append(chunk)
            if end >= len(text):
                break
            start = max(end - self.chunk_overlap, start + 1)
        return chunks

    def _cut_point(self, window: str) -> int:
        best = -1
        for marker in _SENTENCE_BREAKS:
            idx = window.rfind(marker)
            if idx == -1:
                continue
            # keep the punctuation, leave the trailing space for the next chunk
            cut = idx + (len(marker.rstrip(" ")) or len(marker))
            best = max(best, cut)
        if best > len(window) // 2:
            return best
        return len(window)

    def split_documents(self, documents: Iterable[Document]) -> list[Document]:
        out: list[Document] = []
        for document in documents:
            for idx, chunk in enumerate(self.split_text(document.text)):
                out.append(
                    Document(
                        id=f"{document.id}:{idx}",
                        text=chunk,
                        metadata={
                            **document.metadata,
                            "source_id": document.id,
                            "chunk_index": idx,
                        },
                    )
                )
        return out
