# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types — all imports come from core.models.
"""

from __future__ import annotations

from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, field_validator

RequestMode = Literal["standard", "verbose", "alt", "explain"]
REQUEST_MODES: tuple[str, ...] = get_args(RequestMode)


# === INVOCATION CONTEXT ===


class ContextSnapshot(BaseModel):
    """Environment facts captured once per invocation.

    Empty strings mean "unknown"; the fields are always present.
    """

    model_config = ConfigDict(frozen=True)

    os: str = ""
    shell: str = ""
    cwd: str = ""


# === PROVIDER RESULTS ===


class ProviderResponse(BaseModel):
    """Normalized result of a provider call, independent of the backend."""

    model_config = ConfigDict(frozen=True)

    command: str
    explanation: str | None = None
    alternatives: list[str] | None = None

    @field_validator("command")
    @classmethod
    def validate_command(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("command must not be empty")
        return v


# === HISTORY ===


class HistoryEntry(BaseModel):
    """One past translation: what was asked and what came back."""

    model_config = ConfigDict(frozen=True)

    query: str
    command: str
    timestamp: int  # epoch seconds
