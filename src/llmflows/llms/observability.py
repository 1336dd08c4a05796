from __future__ import annotations

"""
Lifecycle events emitted by the base `LLM` and the observers that consume them.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Literal, Protocol

from .types import Usage

logger = logging.getLogger(__name__)


LLMLifecycleEventType = Literal[
    "request_start",
    "retry",
    "request_success",
    "request_error",
    "stream_event",
]


@dataclass(frozen=True, slots=True)
class LLMLifecycleEvent:
    """
    One lifecycle event for a single client request.

    Observers are best-effort: an observer that raises never breaks the call.
    """

    event_type: LLMLifecycleEventType
    request_id: str
    provider_id: str
    model: str | None = None
    attempt: int | None = None
    latency_ms: float | None = None
    usage: Usage | None = None
    error_class: str | None = None
    error_message: str | None = None


class LLMObserver(Protocol):
    def __call__(self, event: LLMLifecycleEvent) -> None | Awaitable[None]:
        ...


class LoggingObserver:
    """Write lifecycle events to the `llmflows.llms` logger."""

    def __init__(
        self,
        *,
        level: int = logging.DEBUG,
        include_stream_events: bool = False,
        log: logging.Logger | None = None,
    ) -> None:
        self.level = level
        self.include_stream_events = include_stream_events
        self._log = log or logging.getLogger("llmflows.llms")

    def __call__(self, event: LLMLifecycleEvent) -> None:
        if event.event_type == "stream_event" and not self.include_stream_events:
            return

        if event.event_type in ("retry", "request_error"):
            self._log.warning(
                "llm %s provider=%s model=%s request_id=%s attempt=%s error=%s: %s",
                event.event_type,
                event.provider_id,
                event.model,
                event.request_id,
                event.attempt,
                event.error_class,
                event.error_message,
            )
            return

        self._log.log(
            self.level,
            "llm %s provider=%s model=%s request_id=%s attempt=%s latency_ms=%s",
            event.event_type,
            event.provider_id,
            event.model,
            event.request_id,
            event.attempt,
            None if event.latency_ms is None else round(event.latency_ms, 1),
        )


@dataclass(slots=True)
class OpenTelemetryObserver:
    """
    One OpenTelemetry span per client request.

    The span opens on `request_start` and closes on `request_success` or
    `request_error`; retries are recorded as span events. `opentelemetry` is
    imported lazily so the library runs without it.
    """

    tracer_name: str = "llmflows.llms"
    _tracer: Any = field(default=None, init=False, repr=False)
    _spans: dict[str, Any] = field(default_factory=dict, init=False, repr=False)

    def _ensure_tracer(self) -> Any:
        if self._tracer is None:
            try:
                from opentelemetry import trace
            except Exception as e:
                raise RuntimeError(
                    "OpenTelemetryObserver requires 'opentelemetry-api'"
                ) from e
            self._tracer = trace.get_tracer(self.tracer_name)
        return self._tracer

    def __call__(self, event: LLMLifecycleEvent) -> None:
        if event.event_type == "request_start":
            span = self._ensure_tracer().start_span(name="llm.request")
            span.set_attributes(
                {
                    "llm.provider": event.provider_id,
                    "llm.model": event.model or "",
                    "llm.request_id": event.request_id,
                }
            )
            self._spans[event.request_id] = span
            return

        span = self._spans.get(event.request_id)
        if span is None:
            return

        if event.event_type == "retry":
            span.add_event(
                "llm.retry",
                {
                    "attempt": event.attempt or 0,
                    "error.class": event.error_class or "",
                },
            )
            return

        if event.event_type not in ("request_success", "request_error"):
            return

        from opentelemetry.trace import Status, StatusCode

        self._spans.pop(event.request_id, None)
        span.set_attributes(_final_attributes(event))
        if event.event_type == "request_success":
            span.set_status(Status(StatusCode.OK))
        else:
            span.set_status(Status(StatusCode.ERROR, event.error_message or ""))
        span.end()


def _final_attributes(event: LLMLifecycleEvent) -> dict[str, Any]:
    attrs: dict[str, Any] = {"llm.attempts": event.attempt or 1}
    if event.latency_ms is not None:
        attrs["llm.latency_ms"] = event.latency_ms
    if event.error_class:
        attrs["error.class"] = event.error_class
    usage = event.usage
    if usage is not None:
        for key in ("input_tokens", "output_tokens", "total_tokens"):
            value = getattr(usage, key)
            if value is not None:
                attrs[f"llm.usage.{key}"] = value
    return attrs
