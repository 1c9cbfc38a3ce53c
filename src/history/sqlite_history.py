# src/history/sqlite_history.py — v1
"""SQLite-backed history log.

Insert and prune run inside one BEGIN IMMEDIATE transaction, so concurrent
invocations serialize on the write lock and no append is lost. Rows are
keyed by an autoincrement id; order comes from (timestamp, id).
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from knock.core.errors import StoreError
from knock.core.models import HistoryEntry
from knock.history.base_history_store import DEFAULT_HISTORY_LIMIT, BaseHistoryStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    query TEXT NOT NULL,
    command TEXT NOT NULL,
    timestamp INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_history_recency ON history(timestamp, id);
"""

_PRUNE = """
DELETE FROM history WHERE id NOT IN (
    SELECT id FROM history ORDER BY timestamp DESC, id DESC LIMIT ?
)
"""


class SqliteHistoryStore(BaseHistoryStore):
    """History log stored in a single SQLite table."""

    def __init__(
        self,
        db_path: Path | str,
        limit: int = DEFAULT_HISTORY_LIMIT,
        busy_timeout_ms: int = 5000,
    ) -> None:
        super().__init__(limit=limit)
        self._db_path = Path(db_path).expanduser()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            # Autocommit mode: transactions are opened explicitly below.
            self._conn = sqlite3.connect(
                str(self._db_path),
                timeout=busy_timeout_ms / 1000,
                isolation_level=None,
            )
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
            self._conn.executescript(_SCHEMA)
        except (OSError, sqlite3.Error) as e:
            raise StoreError(f"Cannot open history database {self._db_path}: {e}") from e

    async def append(self, entry: HistoryEntry) -> None:
        """Insert an entry and prune, atomically."""
        try:
            self._conn.execute("BEGIN IMMEDIATE")
            try:
                self._conn.execute(
                    "INSERT INTO history (query, command, timestamp) VALUES (?, ?, ?)",
                    (entry.query, entry.command, entry.timestamp),
                )
                pruned = self._conn.execute(_PRUNE, (self._limit,)).rowcount
                self._conn.execute("COMMIT")
            except sqlite3.Error:
                self._conn.execute("ROLLBACK")
                raise
        except sqlite3.Error as e:
            raise StoreError(f"History append failed: {e}") from e
        if pruned > 0:
            logger.debug("Pruned %d history entries (limit=%d)", pruned, self._limit)

    async def recent(self, limit: int) -> list[HistoryEntry]:
        """Most recent entries first."""
        if limit <= 0:
            return []
        return self._select(
            "SELECT query, command, timestamp FROM history "
            "ORDER BY timestamp DESC, id DESC LIMIT ?",
            (limit,),
        )

    async def search(self, substring: str, limit: int | None = None) -> list[HistoryEntry]:
        """Case-insensitive substring match on query or command."""
        pattern = "%" + _escape_like(substring) + "%"
        sql = (
            "SELECT query, command, timestamp FROM history "
            "WHERE query LIKE ? ESCAPE '\\' OR command LIKE ? ESCAPE '\\' "
            "ORDER BY timestamp DESC, id DESC"
        )
        params: tuple = (pattern, pattern)
        if limit is not None:
            sql += " LIMIT ?"
            params += (limit,)
        return self._select(sql, params)

    async def clear(self) -> None:
        try:
            self._conn.execute("DELETE FROM history")
        except sqlite3.Error as e:
            raise StoreError(f"History clear failed: {e}") from e

    async def count(self) -> int:
        try:
            return self._conn.execute("SELECT COUNT(*) FROM history").fetchone()[0]
        except sqlite3.Error as e:
            raise StoreError(f"History count failed: {e}") from e

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def _select(self, sql: str, params: tuple) -> list[HistoryEntry]:
        try:
            rows = self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"History read failed: {e}") from e
        return [
            HistoryEntry(query=row[0], command=row[1], timestamp=row[2]) for row in rows
        ]


def _escape_like(text: str) -> str:
    """Escape LIKE wildcards so the substring matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
