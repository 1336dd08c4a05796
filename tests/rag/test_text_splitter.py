from __future__ import annotations

import pytest

from llmflows.rag.splitter import TextSplitter
from llmflows.rag.types import Document


def test_short_text_is_one_chunk():
    assert TextSplitter(chunk_size=100, chunk_overlap=10).split_text("  Just one.  ") == [
        "Just one."
    ]


def test_empty_text_has_no_chunks():
    assert TextSplitter().split_text("   ") == []


def test_chunks_respect_size_and_prefer_sentence_breaks():
    text = "The cat sat on the mat. The dog chased the ball. Birds sang in the trees."
    splitter = TextSplitter(chunk_size=30, chunk_overlap=0)

    chunks = splitter.split_text(text)

    assert chunks[0] == "The cat sat on the mat."
    assert all(len(chunk) <= 30 for chunk in chunks)
    assert "".join(chunks).replace(" ", "") == text.replace(" ", "")


def test_overlap_repeats_tail_of_previous_chunk():
    text = "abcdefghijklmnopqrstuvwxyz"
    chunks = TextSplitter(chunk_size=10, chunk_overlap=3).split_text(text)

    assert chunks[0] == "abcdefghij"
    assert chunks[1].startswith("hij")
    assert chunks[-1].endswith("z")


@pytest.mark.parametrize(
    "size, overlap",
    [(0, 0), (10, 10), (10, 20), (10, -1)],
)
def test_invalid_settings(size, overlap):
    with pytest.raises(ValueError):
        TextSplitter(chunk_size=size, chunk_overlap=overlap)


def test_split_documents_tracks_source():
    doc = Document(id="guide", text="First part here. Second part here.", metadata={"lang": "en"})

    chunks = TextSplitter(chunk_size=20, chunk_overlap=0).split_documents([doc])

    assert [c.id for c in chunks] == ["guide:0", "guide:1"]
    assert chunks[0].metadata == {"lang": "en", "source_id": "guide", "chunk_index": 0}
    assert chunks[1].metadata["chunk_index"] == 1
    assert doc.metadata == {"lang": "en"}
