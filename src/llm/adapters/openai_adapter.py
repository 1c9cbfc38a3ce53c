# src/llm/adapters/openai_adapter.py — v2
"""OpenAI adapter implementing BaseLLMClient.

Uses the official openai SDK (chat completions). Works against any
OpenAI-compatible endpoint via base_url. SDK-level retries are disabled;
retry policy belongs to the CLI layer.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from knock.core.errors import (
    AuthError,
    GatewayError,
    MalformedResponseError,
    NetworkError,
    RateLimitError,
)
from knock.llm.base_client import BaseLLMClient
from knock.llm.models import LLMResponse, Message

if TYPE_CHECKING:
    from knock.config.provider_config import ProviderConfig
    from knock.config.settings import Settings


class OpenAIAdapter(BaseLLMClient):
    """OpenAI GPT adapter."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        client: Any = None,
    ) -> None:
        self._model = model
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self.__client = client

    @classmethod
    def from_config(cls, config: ProviderConfig, settings: Settings) -> OpenAIAdapter:
        return cls(
            model=config.model_for("openai"),
            api_key=settings.credential("openai"),
            timeout=settings.request_timeout_s,
        )

    @property
    def _client(self):
        """Lazy-init OpenAI client (only on first API call)."""
        if self.__client is None:
            import openai

            self.__client = openai.AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout,
                max_retries=0,
            )
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 256,
        temperature: float = 0.2,
    ) -> LLMResponse:
        """Text completion via the chat completions API."""
        if not self._api_key:
            raise AuthError("OPENAI_API_KEY is not set", provider="openai")

        oai_messages: list[dict[str, Any]] = []
        if system:
            oai_messages.append({"role": "system", "content": system})
        for m in messages:
            oai_messages.append({"role": m.role, "content": m.content})

        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": oai_messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        t0 = time.monotonic()
        try:
            resp = await self._client.chat.completions.create(**kwargs)
        except Exception as e:
            translated = _translate_error(e)
            if translated is None:
                raise
            raise translated from e
        latency = int((time.monotonic() - t0) * 1000)

        if not resp.choices:
            raise MalformedResponseError("OpenAI response has no choices", provider="openai")

        choice = resp.choices[0]
        usage = resp.usage
        return LLMResponse(
            content=choice.message.content or "",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=self._model,
            provider="openai",
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model


def _translate_error(error: Exception) -> GatewayError | None:
    """Map an openai SDK exception onto the gateway error family."""
    import openai

    if isinstance(error, openai.APIConnectionError):  # includes APITimeoutError
        return NetworkError(f"OpenAI connection failed: {error}", provider="openai")
    if isinstance(error, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return AuthError(f"OpenAI rejected the credential: {error}", provider="openai")
    if isinstance(error, openai.RateLimitError):
        return RateLimitError(f"OpenAI rate limit: {error}", provider="openai")
    if isinstance(error, openai.APIResponseValidationError):
        return MalformedResponseError(f"OpenAI response invalid: {error}", provider="openai")
    if isinstance(error, openai.APIStatusError) and error.status_code >= 500:
        return NetworkError(f"OpenAI service error: {error}", provider="openai")
    if isinstance(error, openai.OpenAIError):
        return GatewayError(f"OpenAI request failed: {error}", provider="openai")
    return None
