# src/cache/base_cache_store.py — v2
"""Abstract cache store interface.

Entries are never evicted and never expire. Implementations raise
StoreError on I/O failures; a corrupt stored value reads as a miss.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from knock.cache.models import CacheEntry
from knock.core.models import ProviderResponse


class BaseCacheStore(ABC):
    """Unified interface for cache storage backends."""

    @abstractmethod
    async def get(self, fingerprint: str) -> CacheEntry | None:
        """Retrieve cache entry by fingerprint."""

    @abstractmethod
    async def put(self, fingerprint: str, response: ProviderResponse) -> None:
        """Store a response, replacing any previous entry."""

    @abstractmethod
    async def delete(self, fingerprint: str) -> None:
        """Remove cache entry."""

    @abstractmethod
    async def list_entries(self) -> list[CacheEntry]:
        """List all cached entries."""

    async def count(self) -> int:
        """Number of stored entries."""
        return len(await self.list_entries())

    def close(self) -> None:
        """Release any held resources."""
