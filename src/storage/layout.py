# src/storage/layout.py — v2
"""On-disk layout under the user-scoped storage root.

    {root}/config.json
    {root}/cache/      cache store (cache.db or <fingerprint>.json files)
    {root}/history/    history.db
    {root}/logs/       knock.log (+ rotated backups)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE = "config.json"
CACHE_DIR = "cache"
HISTORY_DIR = "history"
LOGS_DIR = "logs"

CACHE_DB = "cache.db"
HISTORY_DB = "history.db"
LOG_FILE = "knock.log"


@dataclass(frozen=True)
class StorageLayout:
    """Resolved paths for one storage root."""

    root: Path

    @classmethod
    def at(cls, root: Path | str) -> StorageLayout:
        return cls(root=Path(root).expanduser())

    @property
    def config_file(self) -> Path:
        return self.root / CONFIG_FILE

    @property
    def cache_dir(self) -> Path:
        return self.root / CACHE_DIR

    @property
    def cache_db(self) -> Path:
        return self.cache_dir / CACHE_DB

    @property
    def history_dir(self) -> Path:
        return self.root / HISTORY_DIR

    @property
    def history_db(self) -> Path:
        return self.history_dir / HISTORY_DB

    @property
    def logs_dir(self) -> Path:
        return self.root / LOGS_DIR

    @property
    def log_file(self) -> Path:
        return self.logs_dir / LOG_FILE
