# src/cache/sqlite_store.py — v2
"""SQLite-based cache store (CACHE_BACKEND=sqlite, the default).

Uses stdlib sqlite3 — no external dependency.
WAL journaling lets concurrent invocations read while another writes;
every put is a single committed statement, so readers never see half a row.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from pydantic import ValidationError

from knock.cache.base_cache_store import BaseCacheStore
from knock.cache.models import CacheEntry
from knock.core.errors import StoreError
from knock.core.models import ProviderResponse

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cache_entries (
    fingerprint TEXT PRIMARY KEY,
    data TEXT NOT NULL,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


class SqliteCacheStore(BaseCacheStore):
    """SQLite-backed cache store."""

    def __init__(self, db_path: Path | str, busy_timeout_ms: int = 5000) -> None:
        self._db_path = Path(db_path).expanduser()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(
                str(self._db_path), timeout=busy_timeout_ms / 1000
            )
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
            self._conn.executescript(_SCHEMA)
        except (OSError, sqlite3.Error) as e:
            raise StoreError(f"Cannot open cache database {self._db_path}: {e}") from e

    async def get(self, fingerprint: str) -> CacheEntry | None:
        """Retrieve cache entry by fingerprint."""
        try:
            cursor = self._conn.execute(
                "SELECT data FROM cache_entries WHERE fingerprint = ?", (fingerprint,)
            )
            row = cursor.fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Cache read failed: {e}") from e
        if row is None:
            return None
        try:
            return CacheEntry.model_validate_json(row[0])
        except ValidationError as e:
            logger.warning("Failed to deserialize cache entry %s: %s", fingerprint, e)
            return None

    async def put(self, fingerprint: str, response: ProviderResponse) -> None:
        """Store a cache entry (upsert)."""
        entry = CacheEntry(fingerprint=fingerprint, response=response)
        try:
            with self._conn:
                self._conn.execute(
                    """INSERT OR REPLACE INTO cache_entries (fingerprint, data)
                       VALUES (?, ?)""",
                    (fingerprint, entry.model_dump_json()),
                )
        except sqlite3.Error as e:
            raise StoreError(f"Cache write failed: {e}") from e

    async def delete(self, fingerprint: str) -> None:
        """Remove a cache entry."""
        try:
            with self._conn:
                self._conn.execute(
                    "DELETE FROM cache_entries WHERE fingerprint = ?", (fingerprint,)
                )
        except sqlite3.Error as e:
            raise StoreError(f"Cache delete failed: {e}") from e

    async def list_entries(self) -> list[CacheEntry]:
        """List all cached entries."""
        try:
            rows = self._conn.execute("SELECT data FROM cache_entries").fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Cache scan failed: {e}") from e
        entries: list[CacheEntry] = []
        for row in rows:
            try:
                entries.append(CacheEntry.model_validate_json(row[0]))
            except ValidationError:
                continue
        return entries

    async def count(self) -> int:
        try:
            return self._conn.execute("SELECT COUNT(*) FROM cache_entries").fetchone()[0]
        except sqlite3.Error as e:
            raise StoreError(f"Cache count failed: {e}") from e

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
