from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

JSON extraction from model text, backoff timing and the sync bridge.
"""
import asyncio
import json
import random
from typing import Any, Coroutine, Optional, TypeVar

T = TypeVar("T")

_FENCES = ("```", "~~~")
_LANGUAGE_TAGS = ("json", "javascript", "js")


def clamp_str(s: str, max_chars: int) -> str:
    if len(s) <= max_chars:
        return s
    return s[:max_chars] + "…"


def safe_json_loads(s: str) -> Optional[dict[str, Any]]:
    try:
        obj = json.loads(s)
    except (TypeError, ValueError):
        return None
    return obj if isinstance(obj, dict) else None


def _unwrap_fence(text: str) -> str:
    """Return the body of a leading ``` / ~~~ block, or the stripped text."""
    stripped = (text or "").strip()
    lines = stripped.splitlines()
    if not lines:
        return stripped

    opener = lines[0].lstrip()
    fence = next((f for f in _FENCES if opener.startswith(f)), None)
    if fence is None:
        return stripped

    body: list[str] = []
    for line in lines[1:]:
        if line.lstrip().startswith(fence):
            break
        body.append(line)

    # bare language tag on its own line inside the fence
    if body and body[0].strip().lower() in _LANGUAGE_TAGS:
        body = body[1:]
    return "\n".join(body).strip()


def extract_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced JSON object in `text`, or None.

    Markdown fences are unwrapped first. Braces that appear inside quoted
    strings (double or single quoted, with backslash escapes) are ignored
    while matching.
    """
    body = _unwrap_fence(text)
    start = body.find("{")
    if start == -1:
        return None

    depth = 0
    quote: str | None = None
    escaped = False
    for idx in range(start, len(body)):
        ch = body[idx]
        if quote is not None:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
            continue

        if ch in ('"', "'"):
            quote = ch
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return body[start : idx + 1]
    return None


def backoff_delay(attempt: int, base_s: float, jitter_s: float) -> float:
    """
    Exponential backoff with jitter.
    attempt=0 => base, attempt=1 => 2*base, etc.
    """
    return base_s * (2**attempt) + random.uniform(0.0, jitter_s)


def run_sync(coro: Coroutine[Any, Any, T]) -> T:
    """
    Drive a coroutine to completion from synchronous code.

    Refuses to nest inside an already running event loop.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    coro.close()
    raise RuntimeError(
        "Cannot use *_sync methods inside a running event loop. Use async methods instead."
    )
