from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Provider-neutral request, response and stream types shared by every client.
"""

from dataclasses import dataclass, field
from typing import Any, Literal, TypeAlias


JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]

Role = Literal["user", "assistant", "system"]


@dataclass(frozen=True, slots=True)
class Message:
    role: Role
    content: str
    name: str | None = None


@dataclass(frozen=True, slots=True)
class Usage:
    input_tokens: int | None = None
    output_tokens: int | None = None
    total_tokens: int | None = None


@dataclass(frozen=True, slots=True)
class LLMResponse:
    text: str
    request_id: str | None = None
    structured_response: JSONObject | None = None
    finish_reason: str | None = None
    usage: Usage = field(default_factory=Usage)
    raw: dict[str, Any] = field(default_factory=dict)
    model: str | None = None


@dataclass(frozen=True, slots=True)
class LLMRequest:
    """
    One chat call as seen by middleware, advisors and adapters.
    """

    model: str
    messages: list[Message] = field(default_factory=list)
    request_id: str | None = None
    idempotency_key: str | None = None
    max_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    timeout_s: float | None = None
    metadata: JSONObject = field(default_factory=dict)
    extra: JSONObject = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class EmbeddingRequest:
    model: str | None = None
    inputs: list[str] = field(default_factory=list)
    timeout_s: float | None = None
    extra: JSONObject = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class EmbeddingResponse:
    embeddings: list[list[float]]
    raw: dict[str, Any] = field(default_factory=dict)
    model: str | None = None


@dataclass(frozen=True, slots=True)
class LLMCapabilities:
    chat: bool = True
    streaming: bool = False
    structured_output: bool = False
    embeddings: bool = False
    idempotency: bool = False


@dataclass(frozen=True, slots=True)
class StreamMessageStartEvent:
    type: Literal["message_start"] = "message_start"
    model: str | None = None


@dataclass(frozen=True, slots=True)
class StreamTextDeltaEvent:
    type: Literal["text_delta"] = "text_delta"
    delta: str = ""


@dataclass(frozen=True, slots=True)
class StreamMessageStopEvent:
    type: Literal["message_stop"] = "message_stop"
    finish_reason: str | None = None


@dataclass(frozen=True, slots=True)
class StreamErrorEvent:
    error: str
    type: Literal["error"] = "error"


@dataclass(frozen=True, slots=True)
class StreamCompletedEvent:
    response: LLMResponse
    type: Literal["completed"] = "completed"


LLMStreamEvent: TypeAlias = (
    StreamMessageStartEvent
    | StreamTextDeltaEvent
    | StreamMessageStopEvent
    | StreamErrorEvent
    | StreamCompletedEvent
)
