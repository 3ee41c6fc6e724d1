#!/usr/bin/env python3
"""
Tests for LLMConfig multi-provider support and its persisted form
"""

import asyncio

import pytest

from sitescrape_core.kv_store import MemoryStore
from sitescrape_core.llm_config import (
    AI_CONFIG_KEY,
    DEFAULT_MODELS,
    PROVIDER_BASE_URLS,
    PROVIDER_ENV_VARS,
    LLMConfig,
    clear_llm_config,
    load_llm_config,
    save_llm_config,
)


@pytest.fixture(autouse=True)
def no_provider_keys(monkeypatch):
    for env_var in set(v for v in PROVIDER_ENV_VARS.values() if v):
        monkeypatch.delenv(env_var, raising=False)
    for name in ("SITESCRAPE_LLM_PROVIDER", "SITESCRAPE_LLM_API_TOKEN", "SITESCRAPE_LLM_BASE_URL", "SITESCRAPE_LLM_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


class TestLLMConfigBasic:
    def test_default_config(self):
        config = LLMConfig()
        assert config.provider_name == "openai"
        assert config.model_name == "gpt-4o-mini"
        assert config.base_url == PROVIDER_BASE_URLS["openai"]
        assert config.is_configured is False

    def test_provider_parsing(self):
        config = LLMConfig(provider="anthropic/claude-3-haiku-20240307", api_token="k")
        assert config.provider_name == "anthropic"
        assert config.model_name == "claude-3-haiku-20240307"

    def test_default_model_per_provider(self):
        for provider in ("groq", "gemini", "deepseek", "ollama"):
            assert LLMConfig(provider=provider).model_name == DEFAULT_MODELS[provider]

    def test_ollama_is_local(self):
        config = LLMConfig(provider="ollama")
        assert config.is_local is True
        assert config.requires_api_key is False
        assert config.is_configured is True
        assert config.validate() is True


class TestApiTokens:
    def test_token_from_provider_env(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "gsk-test")
        assert LLMConfig(provider="groq").resolved_api_token == "gsk-test"

    def test_token_from_custom_env(self, monkeypatch):
        monkeypatch.setenv("MY_GEMINI_KEY", "g-test")
        config = LLMConfig(provider="gemini", api_token="env:MY_GEMINI_KEY")
        assert config.resolved_api_token == "g-test"

    def test_missing_token_fails_validation(self):
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            LLMConfig(provider="openai").validate()

    def test_unsupported_provider(self):
        config = LLMConfig(provider="mystery/model", api_token="k")
        assert config.is_configured is False
        with pytest.raises(ValueError, match="Unsupported provider"):
            config.validate()

    def test_to_dict_hides_token(self):
        data = LLMConfig(provider="groq", api_token="secret").to_dict()
        assert data["has_api_token"] is True
        assert "secret" not in str(data)


class TestStoredConfig:
    def test_stored_layout(self):
        config = LLMConfig(provider="groq", api_token="gsk-1")
        assert config.to_stored() == {"provider": "groq", "apiKey": "gsk-1", "model": "llama-3.1-8b-instant"}

    def test_custom_base_url_is_stored(self):
        config = LLMConfig(provider="ollama", base_url="http://gpu-box:11434")
        assert config.to_stored()["baseUrl"] == "http://gpu-box:11434"
        assert LLMConfig.from_stored(config.to_stored()).base_url == "http://gpu-box:11434"

    def test_save_load_clear(self):
        store = MemoryStore()
        assert asyncio.run(load_llm_config(store)) is None

        asyncio.run(save_llm_config(store, LLMConfig(provider="deepseek/deepseek-chat", api_token="ds")))
        assert asyncio.run(store.get(AI_CONFIG_KEY))["provider"] == "deepseek"

        loaded = asyncio.run(load_llm_config(store))
        assert loaded.provider_name == "deepseek"
        assert loaded.model_name == "deepseek-chat"
        assert loaded.resolved_api_token == "ds"

        asyncio.run(clear_llm_config(store))
        assert asyncio.run(load_llm_config(store)) is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SITESCRAPE_LLM_PROVIDER", "ollama/llama3.2")
        monkeypatch.setenv("SITESCRAPE_LLM_TIMEOUT", "30")
        config = LLMConfig.from_env()
        assert config.provider_name == "ollama"
        assert config.model_name == "llama3.2"
        assert config.timeout == 30
