from __future__ import annotations

import pytest

from llm_fakes import ScriptedLLM, make_config
from llmflows.llms.clients.adapters.litellm import LiteLLMClient
from llmflows.llms.clients.adapters.openai import OpenAIClient
from llmflows.llms.config import LLMConfig
from llmflows.llms.errors import LLMConfigurationError
from llmflows.llms.factory import (
    available_llm_adapters,
    create_llm,
    create_llm_from_env,
    register_llm_adapter,
    unregister_llm_adapter,
)
from llmflows.llms.llm import LLM


def test_factory_defaults_to_litellm(monkeypatch):
    monkeypatch.delenv("LLMFLOWS_LLM_ADAPTER", raising=False)
    assert isinstance(create_llm_from_env(config=make_config()), LiteLLMClient)


def test_factory_resolves_adapter_from_env(monkeypatch):
    monkeypatch.setenv("LLMFLOWS_LLM_ADAPTER", "OpenAI")
    llm = create_llm_from_env()
    assert isinstance(llm, OpenAIClient)
    assert llm.provider_id == "openai"


def test_factory_uses_adapter_from_given_config(monkeypatch):
    monkeypatch.setenv("LLMFLOWS_LLM_ADAPTER", "litellm")
    llm = create_llm_from_env(config=make_config(adapter="openai"))
    assert isinstance(llm, OpenAIClient)
    assert llm.config.adapter == "openai"


def test_llm_from_env_on_base_class_uses_factory(monkeypatch):
    monkeypatch.setenv("LLMFLOWS_LLM_ADAPTER", "openai")
    assert isinstance(LLM.from_env(), OpenAIClient)


def test_factory_rejects_unknown_adapter():
    with pytest.raises(LLMConfigurationError, match="Unknown LLM adapter"):
        create_llm("not_real")


def test_register_custom_adapter():
    register_llm_adapter(
        "scripted",
        lambda cfg, mws, obs: ScriptedLLM(config=cfg, middlewares=mws, observers=obs),
    )
    try:
        assert "scripted" in available_llm_adapters()
        llm = create_llm("scripted", config=make_config(default_model="m"))
        assert isinstance(llm, ScriptedLLM)
        assert llm.config.default_model == "m"

        with pytest.raises(ValueError):
            register_llm_adapter("scripted", lambda cfg, mws, obs: ScriptedLLM())
    finally:
        unregister_llm_adapter("scripted")
    assert "scripted" not in available_llm_adapters()


def test_register_refuses_builtin_names():
    with pytest.raises(ValueError):
        register_llm_adapter("litellm", lambda cfg, mws, obs: ScriptedLLM())


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("LLMFLOWS_LLM_MODEL", "m-1")
    monkeypatch.setenv("LLMFLOWS_EMBED_MODEL", "e-1")
    monkeypatch.setenv("LLMFLOWS_LLM_MAX_RETRIES", "7")
    monkeypatch.setenv("LLMFLOWS_LLM_TIMEOUT_S", "2.5")
    monkeypatch.delenv("LLMFLOWS_LLM_API_KEY", raising=False)
    monkeypatch.setenv("LLMFLOWS_LLM_ADAPTER", "openai")

    cfg = LLMConfig.from_env()

    assert cfg.default_model == "m-1"
    assert cfg.embedding_model == "e-1"
    assert cfg.max_retries == 7
    assert cfg.timeout_s == 2.5
    assert cfg.api_key is None
    assert cfg.json_max_retries == 2
    assert cfg.adapter == "openai"
