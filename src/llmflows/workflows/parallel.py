from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Parallelization: one prompt applied to many inputs with bounded concurrency.
"""

import asyncio
from typing import TYPE_CHECKING, Awaitable, Callable, Sequence, TypeVar

from .chain import step_prompt

if TYPE_CHECKING:
    from ..chat.client import ChatClient

T = TypeVar("T")


async def bounded_gather(
    calls: Sequence[Callable[[], Awaitable[T]]], *, n_workers: int
) -> list[T]:
    """
    Await every call with at most `n_workers` running at once.

    Results keep the order of `calls`. The first failure cancels the rest
    and propagates.
    """
    if n_workers < 1:
        raise ValueError("n_workers must be at least 1")
    if not calls:
        return []

    semaphore = asyncio.Semaphore(n_workers)

    async def _run(call: Callable[[], Awaitable[T]]) -> T:
        async with semaphore:
            return await call()

    tasks = [asyncio.ensure_future(_run(call)) for call in calls]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def parallel(
    client: "ChatClient",
    prompt: str,
    inputs: Sequence[str],
    *,
    n_workers: int = 3,
) -> list[str]:
    """Run `prompt` over every input concurrently; responses keep input order."""

    def _call(value: str) -> Callable[[], Awaitable[str]]:
        async def _ask() -> str:
            result = await client.ask(step_prompt(prompt, value))
            return result.text

        return _ask

    return await bounded_gather([_call(value) for value in inputs], n_workers=n_workers)
