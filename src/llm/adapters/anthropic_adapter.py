# src/llm/adapters/anthropic_adapter.py — v3
"""Anthropic Claude adapter implementing BaseLLMClient.

Uses the official anthropic SDK (Messages API). Text is collected from the
response's text content blocks. SDK-level retries are disabled.
"""

from __future__ import annotations

import logging
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

logger = logging.getLogger(__name__)


class AnthropicAdapter(BaseLLMClient):
    """Adapter for Anthropic Claude models."""

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
        timeout: float = 30.0,
        client: Any = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self.__client = client  # Lazy initialization

    @classmethod
    def from_config(cls, config: ProviderConfig, settings: Settings) -> AnthropicAdapter:
        return cls(
            model=config.model_for("anthropic"),
            api_key=settings.credential("anthropic"),
            timeout=settings.request_timeout_s,
        )

    @property
    def _client(self):
        """Lazy-init Anthropic client (only on first API call)."""
        if self.__client is None:
            import anthropic

            self.__client = anthropic.AsyncAnthropic(
                api_key=self._api_key,
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
        """Text completion via Anthropic Messages API."""
        if not self._api_key:
            raise AuthError("ANTHROPIC_API_KEY is not set", provider="anthropic")

        kwargs = self._build_kwargs(messages, system, max_tokens, temperature)

        start = time.monotonic()
        try:
            response = await self._client.messages.create(**kwargs)
        except Exception as e:
            translated = _translate_error(e)
            if translated is None:
                raise
            raise translated from e
        latency_ms = int((time.monotonic() - start) * 1000)

        if getattr(response, "stop_reason", None) == "max_tokens":
            logger.debug("Anthropic response truncated at max_tokens=%d", max_tokens)

        return LLMResponse(
            content=self._extract_content(response),
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=response.model,
            provider="anthropic",
            latency_ms=latency_ms,
            raw_response=response,
        )

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @property
    def model(self) -> str:
        return self._model

    # --- Internal helpers ---

    def _build_kwargs(
        self,
        messages: list[Message],
        system: str | None,
        max_tokens: int,
        temperature: float,
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [self._to_api_message(m) for m in messages if m.role != "system"],
        }
        if system:
            kwargs["system"] = system
        return kwargs

    @staticmethod
    def _to_api_message(m: Message) -> dict[str, Any]:
        return {"role": m.role, "content": m.content}

    @staticmethod
    def _extract_content(response: Any) -> str:
        """Join text from Anthropic response content blocks."""
        blocks = getattr(response, "content", None)
        if blocks is None:
            raise MalformedResponseError(
                "Anthropic response has no content", provider="anthropic"
            )
        return "".join(
            block.text for block in blocks if getattr(block, "type", None) == "text"
        )


def _translate_error(error: Exception) -> GatewayError | None:
    """Map an anthropic SDK exception onto the gateway error family."""
    import anthropic

    if isinstance(error, anthropic.APIConnectionError):  # includes APITimeoutError
        return NetworkError(f"Anthropic connection failed: {error}", provider="anthropic")
    if isinstance(error, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
        return AuthError(f"Anthropic rejected the credential: {error}", provider="anthropic")
    if isinstance(error, anthropic.RateLimitError):
        return RateLimitError(f"Anthropic rate limit: {error}", provider="anthropic")
    if isinstance(error, anthropic.APIResponseValidationError):
        return MalformedResponseError(
            f"Anthropic response invalid: {error}", provider="anthropic"
        )
    if isinstance(error, anthropic.APIStatusError) and error.status_code >= 500:
        return NetworkError(f"Anthropic service error: {error}", provider="anthropic")
    if isinstance(error, anthropic.AnthropicError):
        return GatewayError(f"Anthropic request failed: {error}", provider="anthropic")
    return None
