# src/logging/context.py — v2
"""Contextual logging support — attach invocation, mode, provider and
fingerprint to log records.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging — set per invocation.
_invocation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "invocation_id", default=None
)
_mode: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "mode", default=None
)
_provider: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "provider", default=None
)
_fingerprint: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "fingerprint", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    invocation_id: str | None = None
    mode: str | None = None
    provider: str | None = None
    fingerprint: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        invocation_id=_invocation_id.get(),
        mode=_mode.get(),
        provider=_provider.get(),
        fingerprint=_fingerprint.get(),
    )


def set_invocation_context(
    invocation_id: str, mode: str | None = None, provider: str | None = None
) -> None:
    """Set invocation-level context (called once per CLI run)."""
    _invocation_id.set(invocation_id)
    _mode.set(mode)
    _provider.set(provider)


def set_fingerprint_context(fingerprint: str | None) -> None:
    """Attach the request fingerprint once computed."""
    _fingerprint.set(fingerprint)


def clear_context() -> None:
    """Reset all context variables."""
    _invocation_id.set(None)
    _mode.set(None)
    _provider.set(None)
    _fingerprint.set(None)
