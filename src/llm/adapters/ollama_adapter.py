# src/llm/adapters/ollama_adapter.py — v2
"""Ollama local LLM adapter implementing BaseLLMClient.

Uses the ollama Python SDK against a local (or custom) HTTP endpoint.
No credential is needed.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import httpx

from knock.core.errors import (
    AuthError,
    GatewayError,
    MalformedResponseError,
    NetworkError,
    RateLimitError,
    UnsupportedProviderError,
)
from knock.llm.base_client import BaseLLMClient
from knock.llm.models import LLMResponse, Message

if TYPE_CHECKING:
    from knock.config.provider_config import ProviderConfig
    from knock.config.settings import Settings


class OllamaAdapter(BaseLLMClient):
    """Ollama local inference adapter."""

    def __init__(
        self,
        model: str = "llama3",
        host: str = "http://localhost:11434",
        timeout: float = 30.0,
        client: Any = None,
    ) -> None:
        self._model = model
        self._host = host
        self._timeout = timeout
        self.__client = client

    @classmethod
    def from_config(cls, config: ProviderConfig, settings: Settings) -> OllamaAdapter:
        return cls(
            model=config.model_for("ollama"),
            host=config.resolved_ollama_url,
            timeout=settings.request_timeout_s,
        )

    @property
    def _client(self):
        if self.__client is None:
            import ollama

            self.__client = ollama.AsyncClient(host=self._host, timeout=self._timeout)
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 256,
        temperature: float = 0.2,
    ) -> LLMResponse:
        msgs: list[dict[str, str]] = []
        if system:
            msgs.append({"role": "system", "content": system})
        for m in messages:
            msgs.append({"role": m.role, "content": m.content})

        options: dict[str, Any] = {
            "num_predict": max_tokens,
            "temperature": temperature,
        }

        t0 = time.monotonic()
        try:
            resp = await self._client.chat(
                model=self._model, messages=msgs, options=options, stream=False
            )
        except Exception as e:
            translated = self._translate_error(e)
            if translated is None:
                raise
            raise translated from e
        latency = int((time.monotonic() - t0) * 1000)

        try:
            content = resp["message"]["content"]
        except (KeyError, TypeError) as e:
            raise MalformedResponseError(
                f"Ollama response has no message content: {e}", provider="ollama"
            ) from e

        return LLMResponse(
            content=content or "",
            input_tokens=resp.get("prompt_eval_count") or 0,
            output_tokens=resp.get("eval_count") or 0,
            model=self._model,
            provider="ollama",
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "ollama"

    @property
    def model(self) -> str:
        return self._model

    def _translate_error(self, error: Exception) -> GatewayError | None:
        """Map ollama / httpx exceptions onto the gateway error family."""
        import ollama

        if isinstance(error, (httpx.TimeoutException, httpx.TransportError, ConnectionError)):
            return NetworkError(
                f"Cannot reach Ollama at {self._host}: {error}", provider="ollama"
            )
        if isinstance(error, ollama.ResponseError):
            status = getattr(error, "status_code", -1)
            if status in (401, 403):
                return AuthError(f"Ollama refused the request: {error}", provider="ollama")
            if status == 429:
                return RateLimitError(f"Ollama rate limit: {error}", provider="ollama")
            if status == 404:
                return UnsupportedProviderError(
                    f"Ollama model {self._model!r} not found: {error}", provider="ollama"
                )
            if status >= 500:
                return NetworkError(f"Ollama server error: {error}", provider="ollama")
            return GatewayError(f"Ollama request failed: {error}", provider="ollama")
        if isinstance(error, ollama.RequestError):
            return GatewayError(f"Ollama request invalid: {error}", provider="ollama")
        return None
