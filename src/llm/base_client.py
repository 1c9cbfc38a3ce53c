# src/llm/base_client.py — v2
"""Abstract LLM client interface.

Each backend variant turns its own wire format into an LLMResponse and
translates SDK exceptions into the GatewayError family.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from knock.llm.models import LLMResponse, Message

if TYPE_CHECKING:
    from knock.config.provider_config import ProviderConfig
    from knock.config.settings import Settings


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    @classmethod
    @abstractmethod
    def from_config(cls, config: ProviderConfig, settings: Settings) -> BaseLLMClient:
        """Build the adapter from provider config and credentials."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 256,
        temperature: float = 0.2,
    ) -> LLMResponse:
        """Text completion.

        Raises:
            GatewayError: Any subclass, translated from the provider SDK.
        """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (openai, anthropic, ollama)."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Model identifier sent to the provider."""
