from __future__ import annotations

"""
Adapter registry and factory functions.
"""

from typing import TYPE_CHECKING, Callable

from .config import LLMConfig
from .errors import LLMConfigurationError
from .middleware import MiddlewareStack
from .observability import LLMObserver

if TYPE_CHECKING:
    from .llm import LLM


AdapterFactory = Callable[[LLMConfig, MiddlewareStack, "list[LLMObserver]"], "LLM"]
_BUILTIN_ADAPTERS = {"litellm", "openai"}
_REGISTRY: dict[str, AdapterFactory] = {}


def register_llm_adapter(
    name: str,
    factory: AdapterFactory,
    *,
    overwrite: bool = False,
) -> None:
    """Register a custom adapter factory under `name`."""
    key = name.strip().lower()
    if not key:
        raise ValueError("Adapter name must be non-empty")
    if key in _BUILTIN_ADAPTERS:
        raise ValueError(f"Cannot replace built-in adapter: {key}")
    if not overwrite and key in _REGISTRY:
        raise ValueError(f"Adapter already registered: {key}")
    _REGISTRY[key] = factory


def unregister_llm_adapter(name: str) -> None:
    _REGISTRY.pop(name.strip().lower(), None)


def available_llm_adapters() -> list[str]:
    return sorted(_BUILTIN_ADAPTERS | set(_REGISTRY))


def create_llm(
    adapter: str,
    *,
    config: LLMConfig | None = None,
    middlewares: MiddlewareStack | None = None,
    observers: list[LLMObserver] | None = None,
) -> "LLM":
    """Instantiate the adapter registered under `adapter`."""
    key = adapter.strip().lower()
    if not key:
        raise LLMConfigurationError("Adapter name must be non-empty")

    factory = _REGISTRY.get(key) or _builtin_factory(key)
    return factory(
        config or LLMConfig.from_env(),
        middlewares or MiddlewareStack(),
        list(observers or []),
    )


def create_llm_from_env(
    *,
    config: LLMConfig | None = None,
    middlewares: MiddlewareStack | None = None,
    observers: list[LLMObserver] | None = None,
) -> "LLM":
    """
    Create the adapter named by `config.adapter`. Without a config, both the
    adapter and its settings come from `LLMFLOWS_*` (`LLMFLOWS_LLM_ADAPTER`,
    default `litellm`).
    """
    cfg = config or LLMConfig.from_env()
    return create_llm(
        cfg.adapter,
        config=cfg,
        middlewares=middlewares,
        observers=observers,
    )


def _builtin_factory(adapter: str) -> AdapterFactory:
    """Resolve built-in adapters lazily so their SDKs stay optional at import time."""
    if adapter == "litellm":
        from .clients.adapters.litellm import LiteLLMClient

        return lambda cfg, mws, obs: LiteLLMClient(
            config=cfg, middlewares=mws, observers=obs
        )

    if adapter == "openai":
        from .clients.adapters.openai import OpenAIClient

        return lambda cfg, mws, obs: OpenAIClient(
            config=cfg, middlewares=mws, observers=obs
        )

    raise LLMConfigurationError(
        f"Unknown LLM adapter '{adapter}'. Available: {', '.join(available_llm_adapters())}"
    )
