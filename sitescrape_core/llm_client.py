"""
LLM clients used for command parsing and schema inference.

All clients take a system prompt and a user message and return the reply
text; ainvoke_json() additionally parses the first JSON object out of it.
HTTP goes through aiohttp, one session per call.
"""

import asyncio
import json
import logging
import re
from typing import Any, Dict, Optional

import aiohttp

from .errors import LLMError
from .llm_config import LLMConfig

logger = logging.getLogger(__name__)

_JSON_BLOCK_RE = re.compile(r"\{[\s\S]*\}")


def parse_json_reply(text: str) -> Dict[str, Any]:
    """Parse a JSON object from model output, tolerating prose or fences around it"""
    text = (text or "").strip()
    if not text:
        raise LLMError("Model returned an empty response")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        match = _JSON_BLOCK_RE.search(text)
        if not match:
            raise LLMError("Model did not return valid JSON")
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise LLMError(f"Model did not return valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise LLMError("Model returned JSON that is not an object")
    return data


class BaseLLMClient:
    def __init__(self, llm_config: LLMConfig):
        self.config = llm_config
        self.model = llm_config.model_name
        self.timeout = llm_config.timeout

    async def _post(self, url: str, payload: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        timeout_obj = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout_obj) as session:
                async with session.post(url, headers=headers or {}, json=payload) as resp:
                    if resp.status != 200:
                        error_text = await resp.text()
                        raise LLMError(f"{self.config.provider_name} API error {resp.status}: {error_text[:500]}")
                    try:
                        data = await resp.json(content_type=None)
                    except ValueError as e:
                        raise LLMError(f"{self.config.provider_name} returned a non-JSON body: {e}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise LLMError(f"{self.config.provider_name} request failed: {str(e) or type(e).__name__}") from e
        if not isinstance(data, dict):
            raise LLMError(f"{self.config.provider_name} returned an unexpected reply: {type(data).__name__}")
        return data

    async def ainvoke(self, system_prompt: str, user_message: str) -> str:
        raise NotImplementedError

    async def ainvoke_json(self, system_prompt: str, user_message: str) -> Dict[str, Any]:
        text = await self.ainvoke(system_prompt, user_message)
        logger.debug(f"LLM reply: {text[:300]}")
        return parse_json_reply(text)


class OpenAICompatibleClient(BaseLLMClient):
    """OpenAI, Groq, DeepSeek and other OpenAI-compatible APIs"""

    async def ainvoke(self, system_prompt: str, user_message: str) -> str:
        headers = {
            "Authorization": f"Bearer {self.config.resolved_api_token}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            "response_format": {"type": "json_object"},
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }
        data = await self._post(f"{self.config.base_url.rstrip('/')}/chat/completions", payload, headers)
        choices = data.get("choices") or [{}]
        return (choices[0].get("message") or {}).get("content") or ""


class AnthropicClient(BaseLLMClient):
    async def ainvoke(self, system_prompt: str, user_message: str) -> str:
        headers = {
            "x-api-key": self.config.resolved_api_token or "",
            "anthropic-version": "2023-06-01",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_message}],
        }
        data = await self._post(f"{self.config.base_url.rstrip('/')}/v1/messages", payload, headers)
        content = data.get("content") or []
        return content[0].get("text", "") if content else ""


class GeminiClient(BaseLLMClient):
    async def ainvoke(self, system_prompt: str, user_message: str) -> str:
        url = (
            f"{self.config.base_url.rstrip('/')}/models/{self.model}:generateContent"
            f"?key={self.config.resolved_api_token}"
        )
        payload = {
            "system_instruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": user_message}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "maxOutputTokens": self.config.max_tokens,
                "responseMimeType": "application/json",
            },
        }
        data = await self._post(url, payload)
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return parts[0].get("text", "") if parts else ""


class OllamaClient(BaseLLMClient):
    async def ainvoke(self, system_prompt: str, user_message: str) -> str:
        payload = {
            "model": self.model,
            "system": system_prompt,
            "prompt": user_message,
            "format": "json",
            "stream": False,
            "options": {"temperature": self.config.temperature, "num_predict": self.config.max_tokens},
        }
        data = await self._post(f"{self.config.base_url.rstrip('/')}/api/generate", payload)
        return data.get("response", "")


CLIENTS = {
    "openai": OpenAICompatibleClient,
    "groq": OpenAICompatibleClient,
    "deepseek": OpenAICompatibleClient,
    "anthropic": AnthropicClient,
    "gemini": GeminiClient,
    "google": GeminiClient,
    "ollama": OllamaClient,
}


def create_llm_client(llm_config: LLMConfig) -> BaseLLMClient:
    """Validate the configuration and build the matching client"""
    llm_config.validate()
    client_cls = CLIENTS[llm_config.provider_name]
    logger.debug(f"Using {client_cls.__name__} ({llm_config.provider_name}/{llm_config.model_name})")
    return client_cls(llm_config)
