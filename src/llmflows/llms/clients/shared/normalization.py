from __future__ import annotations

"""
Helpers that flatten SDK objects into plain Python data.
"""

from dataclasses import asdict, is_dataclass
from typing import Any

from ...types import Usage


def to_plain_dict(value: Any) -> dict[str, Any]:
    """Best-effort conversion of SDK response objects into dictionaries."""
    if isinstance(value, dict):
        return value

    for method in ("model_dump", "to_dict"):
        dump = getattr(value, method, None)
        if callable(dump):
            dumped = dump()
            if isinstance(dumped, dict):
                return dumped

    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)

    if hasattr(value, "__dict__"):
        return dict(vars(value))

    return {}


def extract_usage(raw_dict: dict[str, Any]) -> Usage:
    """Read token counters from either Responses or Chat Completions naming."""
    usage = raw_dict.get("usage")
    if not isinstance(usage, dict):
        usage = to_plain_dict(usage) if usage is not None else {}

    input_tokens = usage.get("input_tokens", usage.get("prompt_tokens"))
    output_tokens = usage.get("output_tokens", usage.get("completion_tokens"))
    total_tokens = usage.get("total_tokens")
    return Usage(
        input_tokens=input_tokens if isinstance(input_tokens, int) else None,
        output_tokens=output_tokens if isinstance(output_tokens, int) else None,
        total_tokens=total_tokens if isinstance(total_tokens, int) else None,
    )
