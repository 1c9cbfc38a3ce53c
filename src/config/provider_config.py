# src/config/provider_config.py — v2
"""Provider selection read from config.json under the storage root.

The file is written by the interactive setup; this module only reads it.
Absent fields fall back to per-provider default models.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, ValidationError

from knock.core.errors import ConfigError

logger = logging.getLogger(__name__)

ProviderName = Literal["openai", "anthropic", "ollama"]

DEFAULT_MODELS: dict[str, str] = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-sonnet-4-20250514",
    "ollama": "llama3",
}
DEFAULT_OLLAMA_URL = "http://localhost:11434"


class ProviderConfig(BaseModel):
    """Contents of config.json."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    provider: ProviderName = "openai"
    openai_model: str | None = None
    anthropic_model: str | None = None
    ollama_model: str | None = None
    ollama_url: str | None = None

    def model_for(self, provider: str | None = None) -> str:
        """Return the configured model for a provider, or its default."""
        name = provider or self.provider
        override = getattr(self, f"{name}_model", None)
        return override or DEFAULT_MODELS[name]

    @property
    def model(self) -> str:
        """Model of the selected provider."""
        return self.model_for(self.provider)

    @property
    def resolved_ollama_url(self) -> str:
        return self.ollama_url or DEFAULT_OLLAMA_URL


def load_provider_config(path: Path) -> ProviderConfig:
    """Read config.json. A missing file yields the defaults.

    Raises:
        ConfigError: If the file is unreadable, not JSON, or names an
            unknown provider.
    """
    path = Path(path).expanduser()
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return ProviderConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")

    try:
        return ProviderConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
