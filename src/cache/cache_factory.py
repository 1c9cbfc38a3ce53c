# src/cache/cache_factory.py — v3
"""Factory for cache store instantiation."""

from __future__ import annotations

from knock.cache.base_cache_store import BaseCacheStore
from knock.config.settings import Settings
from knock.core.errors import ConfigError
from knock.storage.layout import StorageLayout


def create_cache_store(
    settings: Settings | None = None,
    layout: StorageLayout | None = None,
) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to the SQLite backend.
        layout: Storage layout. Defaults to the settings' storage root.

    Returns:
        Configured BaseCacheStore implementation.

    Raises:
        ConfigError: If the backend name is not supported.
        StoreError: If the store cannot be opened.
    """
    backend = "sqlite" if settings is None else settings.cache_backend
    if layout is None:
        layout = StorageLayout.at(settings.home if settings else "~/.knock")

    if backend == "sqlite":
        from knock.cache.sqlite_store import SqliteCacheStore
        return SqliteCacheStore(db_path=layout.cache_db)

    if backend == "json":
        from knock.cache.json_store import JsonCacheStore
        return JsonCacheStore(cache_root=layout.cache_dir)

    raise ConfigError(f"Unsupported cache backend: {backend!r}")
