from __future__ import annotations

"""
LiteLLM adapter on top of the shared Responses base.
"""

from typing import Any

from pydantic import BaseModel

from ..base.responses import ResponsesClientBase
from ...errors import LLMConfigurationError


class LiteLLMClient(ResponsesClientBase):
    """Routes calls through `litellm.aresponses` / `litellm.aembedding`."""

    @property
    def provider_id(self) -> str:
        return "litellm"

    async def _responses_create(self, payload: dict[str, Any]) -> Any:
        try:
            from litellm import aresponses
        except ImportError as e:  # pragma: no cover - environment dependent
            raise LLMConfigurationError(
                "litellm is not installed. Install the dependency to use LiteLLMClient."
            ) from e

        return await aresponses(**self._with_transport_defaults(payload))

    async def _embedding_create(self, payload: dict[str, Any]) -> Any:
        try:
            from litellm import aembedding
        except ImportError as e:  # pragma: no cover - environment dependent
            raise LLMConfigurationError(
                "litellm is not installed. Install the dependency to use LiteLLMClient."
            ) from e

        return await aembedding(**self._with_transport_defaults(payload))

    def _structured_output_payload(
        self,
        response_model: type[BaseModel],
    ) -> dict[str, Any]:
        """LiteLLM takes the pydantic class itself as `text_format`."""
        return {"text_format": response_model}

    def _with_transport_defaults(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Move the idempotency key into headers and apply config credentials."""
        out = dict(payload)

        headers = dict(out.get("headers") or {})
        idempotency_key = out.pop("idempotency_key", None)
        if isinstance(idempotency_key, str) and idempotency_key:
            headers.setdefault("Idempotency-Key", idempotency_key)
        if headers:
            out["headers"] = headers

        if self.config.api_base_url:
            out.setdefault("api_base", self.config.api_base_url)
        if self.config.api_key:
            out.setdefault("api_key", self.config.api_key)
        return out
