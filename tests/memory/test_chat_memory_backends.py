from __future__ import annotations

import pytest

from llm_fakes import run_async
from llmflows.llms.types import Message
from llmflows.memory.in_memory import InMemoryChatMemory
from llmflows.memory.sqlite import SQLiteChatMemory


@pytest.fixture(params=["memory", "sqlite"])
def make_memory(request, tmp_path):
    def _make():
        if request.param == "memory":
            return InMemoryChatMemory()
        return SQLiteChatMemory(path=str(tmp_path / "chat.sqlite3"))

    return _make


def _msgs(*contents: str) -> list[Message]:
    roles = ("user", "assistant")
    return [Message(role=roles[i % 2], content=c) for i, c in enumerate(contents)]


def test_add_get_preserves_order(make_memory):
    async def scenario():
        async with make_memory() as memory:
            await memory.add("c1", _msgs("a", "b"))
            await memory.add("c1", _msgs("c"))
            await memory.add("c2", [Message(role="system", content="s", name="sys")])
            return await memory.get("c1"), await memory.get("c2")

    c1, c2 = run_async(scenario())

    assert [m.content for m in c1] == ["a", "b", "c"]
    assert [m.role for m in c1] == ["user", "assistant", "user"]
    assert c2 == [Message(role="system", content="s", name="sys")]


def test_get_last_n(make_memory):
    async def scenario():
        async with make_memory() as memory:
            await memory.add("c", _msgs("1", "2", "3", "4"))
            return (
                await memory.get("c", last_n=2),
                await memory.get("c", last_n=0),
                await memory.get("c", last_n=10),
            )

    last_two, none, everything = run_async(scenario())

    assert [m.content for m in last_two] == ["3", "4"]
    assert none == []
    assert len(everything) == 4


def test_clear_and_conversation_ids(make_memory):
    async def scenario():
        async with make_memory() as memory:
            await memory.add("b", _msgs("x"))
            await memory.add("a", _msgs("y"))
            before = await memory.conversation_ids()
            await memory.clear("b")
            return before, await memory.conversation_ids(), await memory.get("b")

    before, after, cleared = run_async(scenario())

    assert before == ["a", "b"]
    assert after == ["a"]
    assert cleared == []


def test_unknown_conversation_is_empty(make_memory):
    async def scenario():
        async with make_memory() as memory:
            return await memory.get("missing")

    assert run_async(scenario()) == []


def test_rejects_invalid_arguments(make_memory):
    async def scenario():
        async with make_memory() as memory:
            with pytest.raises(ValueError):
                await memory.add("  ", _msgs("x"))
            with pytest.raises(ValueError):
                await memory.get("c", last_n=-1)

    run_async(scenario())


def test_use_before_setup_raises(make_memory):
    memory = make_memory()

    with pytest.raises(RuntimeError, match="not initialized"):
        run_async(memory.get("c"))


def test_sqlite_memory_persists_across_connections(tmp_path):
    path = str(tmp_path / "persist.sqlite3")

    async def write():
        async with SQLiteChatMemory(path=path) as memory:
            await memory.add("c", _msgs("kept", "also kept"))

    async def read():
        async with SQLiteChatMemory(path=path) as memory:
            return await memory.get("c")

    run_async(write())
    assert [m.content for m in run_async(read())] == ["kept", "also kept"]
