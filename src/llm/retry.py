# src/llm/retry.py — v2
"""Retry policy with exponential backoff, applied by the CLI layer.

The gateway itself never retries. Only transient failures (network,
rate limit) are retried; everything else propagates on the first attempt.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from knock.core.errors import GatewayError, NetworkError, RateLimitError

logger = logging.getLogger(__name__)


class RetryExhausted(GatewayError):
    """All retries exhausted for a provider call."""

    def __init__(self, error_type: str, attempts: int, last_error: Exception):
        self.error_type = error_type
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Provider call failed after {attempts} attempts ({error_type}): {last_error}",
            provider=getattr(last_error, "provider", None),
        )


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration for a specific error type."""

    max_retries: int
    base_delay_s: float
    backoff_factor: float = 2.0
    jitter: bool = True


def default_retry_configs(max_retries: int) -> dict[str, RetryConfig]:
    """Per-error-type configs sharing one retry count."""
    return {
        "rate_limit": RetryConfig(max_retries=max_retries, base_delay_s=2.0),
        "network": RetryConfig(max_retries=max_retries, base_delay_s=1.0),
    }


def classify_error(error: Exception) -> str | None:
    """Classify an exception into a retryable error type, or None."""
    if isinstance(error, RateLimitError):
        return "rate_limit"
    if isinstance(error, NetworkError):
        return "network"
    return None


def _compute_delay(config: RetryConfig, attempt: int) -> float:
    """Compute delay for a given attempt (0-based)."""
    delay = config.base_delay_s * (config.backoff_factor ** attempt)
    if config.jitter:
        delay *= 0.5 + random.random()  # noqa: S311
    return delay


async def with_retry(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    retry_configs: dict[str, RetryConfig] | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    **kwargs: Any,
) -> Any:
    """Execute an async function, retrying transient gateway failures.

    Non-retryable errors propagate unchanged on first occurrence.

    Raises:
        RetryExhausted: If a retryable error persists past max_retries.
    """
    configs = retry_configs if retry_configs is not None else default_retry_configs(0)
    attempts = 0

    while True:
        try:
            return await fn(*args, **kwargs)
        except GatewayError as e:
            error_type = classify_error(e)
            config = configs.get(error_type) if error_type else None
            if config is None:
                raise
            attempts += 1
            if attempts > config.max_retries:
                if attempts == 1:
                    raise
                raise RetryExhausted(error_type, attempts, e) from e

            delay = _compute_delay(config, attempts - 1)
            logger.warning(
                "%s (attempt %d/%d), retrying in %.1fs",
                error_type, attempts, config.max_retries, delay,
            )
            await sleep(delay)
