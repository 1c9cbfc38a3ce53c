# src/history/base_history_store.py — v1
"""Abstract history log interface.

The log keeps at most `limit` entries. Recency is defined by timestamp,
ties broken by insertion order; pruning drops the oldest first.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from knock.core.models import HistoryEntry

DEFAULT_HISTORY_LIMIT = 100


class BaseHistoryStore(ABC):
    """Unified interface for history storage backends."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError("history limit must be >= 1")
        self._limit = limit

    @property
    def limit(self) -> int:
        return self._limit

    @abstractmethod
    async def append(self, entry: HistoryEntry) -> None:
        """Persist an entry, then prune to the most recent `limit` entries."""

    @abstractmethod
    async def recent(self, limit: int) -> list[HistoryEntry]:
        """Return up to `limit` entries, most recent first."""

    @abstractmethod
    async def search(self, substring: str, limit: int | None = None) -> list[HistoryEntry]:
        """Return entries whose query or command contains `substring`."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every entry."""

    @abstractmethod
    async def count(self) -> int:
        """Number of stored entries."""

    def close(self) -> None:
        """Release any held resources."""
