# src/core/errors.py — v1
"""Exception hierarchy shared by the pipeline, stores and provider gateway.

StoreError is recoverable: the pipeline logs it and carries on.
GatewayError subclasses end the pipeline and reach the caller unchanged.
"""

from __future__ import annotations


class KnockError(Exception):
    """Base class for all knock errors."""


class InputError(KnockError, ValueError):
    """Query is empty or otherwise unusable."""


class StoreError(KnockError):
    """Cache or history I/O / serialization failure."""


class ConfigError(KnockError):
    """Configuration is missing, unreadable or inconsistent."""


class GatewayError(KnockError):
    """Provider call failed."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        self.provider = provider
        super().__init__(message)


class NetworkError(GatewayError):
    """Connection failure or timeout talking to the provider."""


class AuthError(GatewayError):
    """Credential is missing or rejected by the provider."""


class RateLimitError(GatewayError):
    """Provider throttled the request."""


class MalformedResponseError(GatewayError):
    """Provider answered but no usable command could be parsed."""


class UnsupportedProviderError(ConfigError, GatewayError):
    """Provider tag is not one of the registered backends."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        GatewayError.__init__(self, message, provider=provider)
