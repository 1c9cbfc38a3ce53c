# src/cache/models.py — v2
"""Cache domain model: CacheEntry."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from knock.core.models import ProviderResponse


class CacheEntry(BaseModel):
    """Single cache entry linking a fingerprint to a provider response."""

    model_config = ConfigDict(frozen=True)

    fingerprint: str
    response: ProviderResponse
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
