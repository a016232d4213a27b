"""OpenAI-compatible model client - OpenAI, vLLM, LM Studio, LocalAI."""

import json
import logging
from typing import AsyncIterator

import httpx

from career_agent.domain.errors import LLMError
from career_agent.domain.ports.config import ModelClientConfig
from career_agent.domain.ports.llm import LLMMessage
from career_agent.infrastructure.config.validator import validate_model_client_config

logger = logging.getLogger(__name__)


def _first_choice(data: object, key: str) -> dict | None:
    """choices[0][key] as a dict; {} when absent, None when the payload has the wrong shape."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices") or [{}]
    if not isinstance(choices, list) or not isinstance(choices[0], dict):
        return None
    part = choices[0].get(key) or {}
    return part if isinstance(part, dict) else None


class ModelClient:
    """Implements LLMPort via /chat/completions. One network call per invocation."""

    def __init__(
        self,
        config: ModelClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Validate config eagerly (ConfigurationError) and prepare headers."""
        validate_model_client_config(config)
        self._config = config
        self._base_url = config.base_url.rstrip("/")
        self._headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.api_key}",
        }
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def config(self) -> ModelClientConfig:
        """Copy of the effective configuration."""
        return self._config.model_copy()

    def with_overrides(self, **changes) -> "ModelClient":
        """Return a new validated client with some settings replaced (e.g. temperature)."""
        return ModelClient(self._config.model_copy(update=changes), transport=self._transport)

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create persistent async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                headers=self._headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client (call during app shutdown)."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _chat_body(self, messages: list[LLMMessage], stream: bool) -> dict:
        return {
            "model": self._config.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
            "stream": stream,
        }

    async def complete(self, messages: list[LLMMessage]) -> str:
        """Generate a single response (non-streaming)."""
        body = self._chat_body(messages, stream=False)
        try:
            resp = await self._get_client().post(
                f"{self._base_url}/chat/completions",
                json=body,
            )
            if resp.status_code >= 400:
                logger.error("LLM API error %s: %s", resp.status_code, resp.text[:500])
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise LLMError(f"OpenAI API调用失败: {e}") from e
        except json.JSONDecodeError as e:
            raise LLMError(f"OpenAI API调用失败: invalid JSON response ({e})") from e
        message = _first_choice(data, "message")
        if message is None:
            raise LLMError("OpenAI API调用失败: unexpected response shape")
        return message.get("content") or ""

    async def stream_complete(self, messages: list[LLMMessage]) -> AsyncIterator[str]:
        """Generate response with streaming. Closing the iterator closes the HTTP stream."""
        body = self._chat_body(messages, stream=True)
        try:
            async with self._get_client().stream(
                "POST",
                f"{self._base_url}/chat/completions",
                json=body,
            ) as resp:
                if resp.status_code >= 400:
                    err_body = await resp.aread()
                    err_text = err_body.decode("utf-8", errors="replace")
                    logger.error("LLM API error %s: %s", resp.status_code, err_text[:500])
                    raise LLMError(f"OpenAI API流式调用失败: HTTP {resp.status_code}: {err_text[:200]}")
                async for line in resp.aiter_lines():
                    if not line.startswith("data: "):
                        continue
                    chunk = line[6:]
                    if chunk.strip() == "[DONE]":
                        break
                    try:
                        data = json.loads(chunk)
                    except json.JSONDecodeError:
                        logger.debug("Malformed JSON chunk in stream: %s", chunk[:100])
                        continue
                    delta = _first_choice(data, "delta")
                    if delta is None:
                        raise LLMError("OpenAI API流式调用失败: unexpected response shape")
                    if content := delta.get("content"):
                        yield content
        except httpx.HTTPError as e:
            raise LLMError(f"OpenAI API流式调用失败: {e}") from e

    async def is_available(self) -> bool:
        """Check if the backend answers on /models."""
        try:
            resp = await self._get_client().get(f"{self._base_url}/models")
            return resp.status_code == 200
        except httpx.HTTPError as e:
            logger.debug("Model backend availability check failed: %s", e)
            return False
