# src/history/history_factory.py — v1
"""Factory for history store instantiation."""

from __future__ import annotations

from knock.config.settings import Settings
from knock.history.base_history_store import DEFAULT_HISTORY_LIMIT, BaseHistoryStore
from knock.history.sqlite_history import SqliteHistoryStore
from knock.storage.layout import StorageLayout


def create_history_store(
    settings: Settings | None = None,
    layout: StorageLayout | None = None,
) -> BaseHistoryStore:
    """Open the history log under the storage root.

    Raises:
        StoreError: If the database cannot be opened.
    """
    if layout is None:
        layout = StorageLayout.at(settings.home if settings else "~/.knock")
    limit = DEFAULT_HISTORY_LIMIT if settings is None else settings.history_limit
    return SqliteHistoryStore(db_path=layout.history_db, limit=limit)
