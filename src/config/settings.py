# src/config/settings.py — v2
"""Typed configuration loaded from environment and .env via pydantic-settings.

Covers deployment concerns (paths, credentials, logging, cache backend).
Provider selection lives in config.json, see config/provider_config.py.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from knock.core.errors import ConfigError


class ConfigurationError(ConfigError):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from environment and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Storage root ===
    knock_home: Path = Path("~/.knock")

    # === Provider credentials ===
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    request_timeout_s: float = 30.0

    # === Cache ===
    cache_enabled: bool = True
    cache_backend: Literal["sqlite", "json"] = "sqlite"

    # === History ===
    history_limit: int = 100

    # === Retry (CLI layer) ===
    max_retries: int = 0

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = Field(default=None)
    log_rotation: str = "1MB"
    log_retention: int = 3

    # --- Validators ---

    @field_validator("history_limit")
    @classmethod
    def validate_history_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("history_limit must be >= 1")
        return v

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_retries must be >= 0")
        return v

    @field_validator("request_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout_s must be > 0")
        return v

    # --- Helpers ---

    @property
    def home(self) -> Path:
        """Expanded storage root."""
        return self.knock_home.expanduser()

    def credential(self, provider: str) -> str | None:
        """Return the API key for a provider, or None when absent."""
        value = {
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
        }.get(provider, "")
        return value or None


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment/.env with optional overrides.

    Raises:
        ConfigurationError: If a value fails validation.
    """
    try:
        return Settings(**overrides)  # type: ignore[arg-type]
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e
