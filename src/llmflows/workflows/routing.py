from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Routing: classify the input, then answer it with the selected prompt.
"""

import logging
from typing import TYPE_CHECKING, Mapping

from pydantic import BaseModel, Field

from .chain import step_prompt
from .errors import RouteNotFoundError, WorkflowError

if TYPE_CHECKING:
    from ..chat.client import ChatClient

logger = logging.getLogger(__name__)

ROUTER_PROMPT = """Analyze the input and select the most appropriate route from these options: {options}
First explain your reasoning, then provide your selection in this JSON format:

{{
    "reasoning": "Brief explanation of why this input should go to a specific route. Consider key terms, user intent, and urgency level.",
    "selection": "The chosen route name"
}}

Input: {input}"""


class RouteSelection(BaseModel):
    reasoning: str = Field(description="Why the input belongs to the selected route.")
    selection: str = Field(description="Name of the selected route.")


def _normalize(name: str) -> str:
    return " ".join(name.split()).lower()


async def determine_route(
    client: "ChatClient", user_input: str, routes: Mapping[str, str]
) -> RouteSelection:
    """
    Ask the model to pick one of `routes`. The returned selection is the
    registered key, matched ignoring case and surrounding whitespace.
    """
    if not routes:
        raise WorkflowError("At least one route is required")

    options = ", ".join(routes)
    selection = await client.ask_for(
        ROUTER_PROMPT.format(options=options, input=user_input),
        RouteSelection,
    )

    by_name = {_normalize(name): name for name in routes}
    chosen = by_name.get(_normalize(selection.selection))
    if chosen is None:
        raise RouteNotFoundError(selection.selection, list(routes))

    logger.debug("routed to %r: %s", chosen, selection.reasoning)
    return RouteSelection(reasoning=selection.reasoning, selection=chosen)


async def route(client: "ChatClient", user_input: str, routes: Mapping[str, str]) -> str:
    """Pick a route for `user_input` and answer it with that route's prompt."""
    selection = await determine_route(client, user_input, routes)
    result = await client.ask(step_prompt(routes[selection.selection], user_input))
    return result.text
