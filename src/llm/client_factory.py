# src/llm/client_factory.py — v4
"""Factory: instantiate the LLM client for the configured provider.

Backends form a closed registry of adapter classes; each one knows how to
build itself from ProviderConfig + Settings. Adding a backend means adding
an adapter and a registry row, nothing else.
"""

from __future__ import annotations

import importlib
import logging

from knock.config.provider_config import ProviderConfig
from knock.config.settings import Settings
from knock.core.errors import UnsupportedProviderError
from knock.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "openai": "knock.llm.adapters.openai_adapter.OpenAIAdapter",
    "anthropic": "knock.llm.adapters.anthropic_adapter.AnthropicAdapter",
    "ollama": "knock.llm.adapters.ollama_adapter.OllamaAdapter",
}


def available_providers() -> list[str]:
    return sorted(_PROVIDER_REGISTRY)


def create_llm_client(
    config: ProviderConfig,
    settings: Settings | None = None,
) -> BaseLLMClient:
    """Instantiate the adapter selected by config.provider.

    Raises:
        UnsupportedProviderError: If the provider is not registered.
    """
    provider = config.provider
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(available_providers())}",
            provider=provider,
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])
    client = adapter_cls.from_config(config, settings or Settings())
    logger.debug("Created LLM client: provider=%s, model=%s", provider, client.model)
    return client


def _import_class(class_path: str) -> type[BaseLLMClient]:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
