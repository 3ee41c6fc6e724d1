#!/usr/bin/env python3
"""
LLMConfig - LLM provider configuration for command parsing and schema inference

Supports:
- openai/gpt-4o-mini
- anthropic/claude-3-haiku-20240307
- gemini/gemini-2.0-flash (alias: google)
- groq/llama-3.1-8b-instant
- deepseek/deepseek-chat
- ollama/qwen2.5:7b (local, no key)

The active configuration is persisted in the key-value store under
"ai_config" as {"provider", "apiKey", "model"}.

Usage:
    llm_config = LLMConfig(provider="openai/gpt-4o-mini", api_token="sk-...")
    llm_config = LLMConfig(provider="groq")                      # default model, GROQ_API_KEY
    llm_config = LLMConfig(provider="gemini", api_token="env:MY_GEMINI_KEY")
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

AI_CONFIG_KEY = "ai_config"

# Provider to environment variable mapping
PROVIDER_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "google": "GEMINI_API_KEY",  # alias
    "groq": "GROQ_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "ollama": None,  # Ollama doesn't need API key
}

# Provider to base URL mapping
PROVIDER_BASE_URLS = {
    "openai": "https://api.openai.com/v1",
    "anthropic": "https://api.anthropic.com",
    "gemini": "https://generativelanguage.googleapis.com/v1beta",
    "google": "https://generativelanguage.googleapis.com/v1beta",
    "groq": "https://api.groq.com/openai/v1",
    "deepseek": "https://api.deepseek.com/v1",
    "ollama": "http://localhost:11434",
}

# Default models per provider
DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-haiku-20240307",
    "gemini": "gemini-2.0-flash",
    "google": "gemini-2.0-flash",
    "groq": "llama-3.1-8b-instant",
    "deepseek": "deepseek-chat",
    "ollama": "qwen2.5:7b",
}


@dataclass
class LLMConfig:
    """
    LLM provider configuration.

    Parameters:
        provider: "provider/model" or just "provider" (default model is used)
        api_token: Optional. Falls back to the provider's environment variable.
                   "env:VAR_NAME" reads a custom variable.
        base_url: Optional custom endpoint.
        temperature: Low by default; both prompts ask for strict JSON.
        max_tokens: Maximum tokens to generate
        timeout: Request timeout in seconds
    """
    provider: str = "openai/gpt-4o-mini"
    api_token: Optional[str] = None
    base_url: Optional[str] = None
    temperature: float = 0.1
    max_tokens: int = 2048
    timeout: int = 120

    def __post_init__(self):
        parts = self.provider.split("/", 1)
        self._provider_name = parts[0].lower()
        self._model_name = parts[1] if len(parts) > 1 and parts[1] else DEFAULT_MODELS.get(self._provider_name, "")
        self._resolved_token = self._resolve_api_token()
        if self.base_url is None:
            self.base_url = PROVIDER_BASE_URLS.get(self._provider_name, PROVIDER_BASE_URLS["openai"])

    def _resolve_api_token(self) -> Optional[str]:
        if self.api_token is None:
            env_var = PROVIDER_ENV_VARS.get(self._provider_name)
            if env_var:
                return os.getenv(env_var)
            return None
        if self.api_token.startswith("env:"):
            return os.getenv(self.api_token[4:].strip())
        return self.api_token

    @property
    def provider_name(self) -> str:
        return self._provider_name

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def resolved_api_token(self) -> Optional[str]:
        return self._resolved_token

    @property
    def is_local(self) -> bool:
        return self._provider_name == "ollama"

    @property
    def requires_api_key(self) -> bool:
        return not self.is_local

    @property
    def is_configured(self) -> bool:
        return self._provider_name in PROVIDER_BASE_URLS and (self.is_local or bool(self._resolved_token))

    def validate(self) -> bool:
        if self._provider_name not in PROVIDER_BASE_URLS:
            raise ValueError(f"Unsupported provider: {self._provider_name}")
        if self.requires_api_key and not self._resolved_token:
            env_var = PROVIDER_ENV_VARS.get(self._provider_name, "unknown")
            raise ValueError(
                f"API token required for {self._provider_name}. "
                f"Set api_token or {env_var} environment variable."
            )
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Public view; never includes the key itself"""
        return {
            "provider": self.provider,
            "provider_name": self._provider_name,
            "model_name": self._model_name,
            "base_url": self.base_url,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "timeout": self.timeout,
            "has_api_token": self._resolved_token is not None,
            "is_local": self.is_local,
        }

    def to_stored(self) -> Dict[str, Any]:
        stored = {"provider": self._provider_name, "apiKey": self.api_token or "", "model": self._model_name}
        if self.base_url != PROVIDER_BASE_URLS.get(self._provider_name):
            stored["baseUrl"] = self.base_url
        return stored

    @classmethod
    def from_stored(cls, data: Dict[str, Any]) -> "LLMConfig":
        provider = str(data.get("provider") or "openai")
        model = data.get("model")
        if model:
            provider = f"{provider}/{model}"
        return cls(
            provider=provider,
            api_token=data.get("apiKey") or None,
            base_url=data.get("baseUrl") or None,
        )

    @classmethod
    def from_env(cls, prefix: str = "SITESCRAPE") -> "LLMConfig":
        """
        Reads:
            {prefix}_LLM_PROVIDER
            {prefix}_LLM_API_TOKEN
            {prefix}_LLM_BASE_URL
            {prefix}_LLM_TIMEOUT
        """
        return cls(
            provider=os.getenv(f"{prefix}_LLM_PROVIDER", "openai/gpt-4o-mini"),
            api_token=os.getenv(f"{prefix}_LLM_API_TOKEN"),
            base_url=os.getenv(f"{prefix}_LLM_BASE_URL"),
            timeout=int(os.getenv(f"{prefix}_LLM_TIMEOUT", "120")),
        )


async def load_llm_config(store) -> Optional[LLMConfig]:
    """Stored configuration, or None when nothing usable is stored"""
    try:
        stored = await store.get(AI_CONFIG_KEY)
    except Exception:
        return None
    if not stored or not isinstance(stored, dict):
        return None
    return LLMConfig.from_stored(stored)


async def save_llm_config(store, llm_config: LLMConfig) -> None:
    await store.set(AI_CONFIG_KEY, llm_config.to_stored())


async def clear_llm_config(store) -> None:
    await store.remove(AI_CONFIG_KEY)
