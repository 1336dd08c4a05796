"""
Example 08: Structured output through the chat client.

Run:
    uv run python docs/library/examples/08_structured_output.py
"""

from __future__ import annotations

import asyncio

from pydantic import BaseModel, Field

from llmflows.chat import ChatClient
from llmflows.llms import create_llm_from_env


class ActorFilms(BaseModel):
    actor: str
    movies: list[str] = Field(min_length=1, max_length=5)


async def main() -> None:
    client = ChatClient(create_llm_from_env())

    films = await client.ask_for(
        "Generate the filmography of 5 movies for {actor}.",
        ActorFilms,
        params={"actor": "Tom Hanks"},
    )

    print(films.actor)
    for title in films.movies:
        print("-", title)


if __name__ == "__main__":
    asyncio.run(main())
