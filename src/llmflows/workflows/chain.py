from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Prompt chaining: each step's output is the next step's input.
"""

import logging
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from ..chat.client import ChatClient

logger = logging.getLogger(__name__)


def step_prompt(prompt: str, value: str) -> str:
    return f"{prompt}\nInput: {value}"


async def chain(client: "ChatClient", user_input: str, prompts: Sequence[str]) -> str:
    """Run `prompts` in order, feeding each response into the next step."""
    current = user_input
    for idx, prompt in enumerate(prompts, start=1):
        result = await client.ask(step_prompt(prompt, current))
        current = result.text
        logger.debug("chain step %d/%d produced %d chars", idx, len(prompts), len(current))
    return current
