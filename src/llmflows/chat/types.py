from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Request/result types exchanged between the chat client and its advisors.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..llms.types import JSONObject, LLMResponse, Message

if TYPE_CHECKING:
    from pydantic import BaseModel


@dataclass(frozen=True, slots=True)
class ChatOptions:
    """Per-call model options. `None` means "use the client/provider default"."""

    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    top_p: float | None = None
    timeout_s: float | None = None
    idempotency_key: str | None = None

    def merged_over(self, base: "ChatOptions") -> "ChatOptions":
        """Fields set on `self` win; unset fields fall back to `base`."""
        return ChatOptions(
            model=self.model if self.model is not None else base.model,
            temperature=self.temperature if self.temperature is not None else base.temperature,
            max_tokens=self.max_tokens if self.max_tokens is not None else base.max_tokens,
            top_p=self.top_p if self.top_p is not None else base.top_p,
            timeout_s=self.timeout_s if self.timeout_s is not None else base.timeout_s,
            idempotency_key=(
                self.idempotency_key
                if self.idempotency_key is not None
                else base.idempotency_key
            ),
        )


@dataclass(frozen=True, slots=True)
class ChatRequest:
    """
    What advisors see and rewrite on the way to the model.

    `context` is shared by every advisor in the chain and handed back on the
    result, so advisors can leave data for the caller (for example the
    documents a retrieval advisor used).
    """

    user: str
    system: str | None = None
    history: list[Message] = field(default_factory=list)
    options: ChatOptions = field(default_factory=ChatOptions)
    response_model: type["BaseModel"] | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def to_messages(self) -> list[Message]:
        messages: list[Message] = []
        if self.system:
            messages.append(Message(role="system", content=self.system))
        messages.extend(self.history)
        messages.append(Message(role="user", content=self.user))
        return messages


@dataclass(frozen=True, slots=True)
class ChatResult:
    text: str
    response: LLMResponse | None = None
    structured: JSONObject | None = None
    context: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ChatStreamEvent:
    """Either a text delta or, exactly once at the end, the final result."""

    delta: str = ""
    result: ChatResult | None = None
