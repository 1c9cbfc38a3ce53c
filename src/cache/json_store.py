# src/cache/json_store.py — v3
"""JSON file-based cache store (CACHE_BACKEND=json).

Stores cache entries as individual JSON files under the cache directory.
Writes go to a temp file in the same directory and are moved into place
with os.replace, which is atomic on POSIX and Windows.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from knock.cache.base_cache_store import BaseCacheStore
from knock.cache.models import CacheEntry
from knock.core.errors import StoreError
from knock.core.models import ProviderResponse

logger = logging.getLogger(__name__)


class JsonCacheStore(BaseCacheStore):
    """File-based cache store using JSON files."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create cache directory {self._root}: {e}") from e

    async def get(self, fingerprint: str) -> CacheEntry | None:
        """Retrieve cache entry by fingerprint."""
        path = self._entry_path(fingerprint)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreError(f"Cache read failed for {path}: {e}") from e
        try:
            return CacheEntry.model_validate_json(raw)
        except (ValidationError, UnicodeDecodeError) as e:
            logger.warning("Failed to read cache entry %s: %s", fingerprint, e)
            return None

    async def put(self, fingerprint: str, response: ProviderResponse) -> None:
        """Store a cache entry."""
        entry = CacheEntry(fingerprint=fingerprint, response=response)
        path = self._entry_path(fingerprint)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self._root, prefix=".tmp-", suffix=".json"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(entry.model_dump_json(indent=2))
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreError(f"Cache write failed for {path}: {e}") from e

    async def delete(self, fingerprint: str) -> None:
        """Remove a cache entry."""
        try:
            self._entry_path(fingerprint).unlink(missing_ok=True)
        except OSError as e:
            raise StoreError(f"Cache delete failed: {e}") from e

    async def list_entries(self) -> list[CacheEntry]:
        """List all cached entries."""
        entries: list[CacheEntry] = []
        if not self._root.is_dir():
            return entries

        for path in self._root.glob("*.json"):
            if path.name.startswith(".tmp-"):
                continue
            try:
                entries.append(
                    CacheEntry.model_validate_json(path.read_bytes())
                )
            except (OSError, ValidationError, UnicodeDecodeError):
                continue

        return entries

    def _entry_path(self, fingerprint: str) -> Path:
        """Return file path for a fingerprint."""
        safe_key = fingerprint.replace("/", "_").replace("\\", "_")
        return self._root / f"{safe_key}.json"
