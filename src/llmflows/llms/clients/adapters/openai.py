from __future__ import annotations

"""
OpenAI SDK adapter on top of the shared Responses base.
"""

from typing import Any

from pydantic import BaseModel

from ..base.responses import ResponsesClientBase
from ...errors import LLMConfigurationError


class OpenAIClient(ResponsesClientBase):
    """Routes calls through `openai.AsyncOpenAI`."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._client: Any = None

    @property
    def provider_id(self) -> str:
        return "openai"

    async def _responses_create(self, payload: dict[str, Any]) -> Any:
        body = dict(payload)
        idempotency_key = body.pop("idempotency_key", None)
        if idempotency_key:
            headers = dict(body.pop("extra_headers", None) or {})
            headers.setdefault("Idempotency-Key", idempotency_key)
            body["extra_headers"] = headers
        return await self._build_client().responses.create(**body)

    async def _embedding_create(self, payload: dict[str, Any]) -> Any:
        return await self._build_client().embeddings.create(**payload)

    def _structured_output_payload(
        self,
        response_model: type[BaseModel],
    ) -> dict[str, Any]:
        """Strict JSON-schema text format."""
        return {
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": response_model.__name__,
                    "schema": strict_json_schema(response_model.model_json_schema()),
                    "strict": True,
                }
            }
        }

    def _build_client(self) -> Any:
        if self._client is not None:
            return self._client
        try:
            from openai import AsyncOpenAI
        except ImportError as e:  # pragma: no cover - environment dependent
            raise LLMConfigurationError(
                "openai package is not installed. Install it with: pip install openai"
            ) from e

        kwargs: dict[str, Any] = {}
        if self.config.api_key:
            kwargs["api_key"] = self.config.api_key
        if self.config.api_base_url:
            kwargs["base_url"] = self.config.api_base_url
        self._client = AsyncOpenAI(**kwargs)
        return self._client


def strict_json_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """
    Rewrite a pydantic JSON schema for OpenAI strict mode.

    Every object gets `additionalProperties: false` and lists all of its
    properties as required. Defaults are dropped; strict mode rejects them.
    """
    return _strict_node(schema)


def _strict_node(node: Any) -> Any:
    if isinstance(node, list):
        return [_strict_node(item) for item in node]
    if not isinstance(node, dict):
        return node

    if "$ref" in node:
        return {"$ref": node["$ref"]}

    out = {key: value for key, value in node.items() if key != "default"}
    for key in ("$defs", "definitions", "properties"):
        if isinstance(out.get(key), dict):
            out[key] = {name: _strict_node(sub) for name, sub in out[key].items()}
    for key in ("items", "anyOf", "allOf", "oneOf"):
        if key in out:
            out[key] = _strict_node(out[key])

    if out.get("type") == "object" or "properties" in out:
        props = out.get("properties") or {}
        out["additionalProperties"] = False
        out["required"] = list(props)
    return out
