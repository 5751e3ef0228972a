# src/cache/cache_factory.py — v1
"""Factory for result store instantiation."""

from __future__ import annotations

from examgrader.cache.base_result_store import BaseResultStore
from examgrader.config.settings import Settings


def create_result_store(settings: Settings | None = None) -> BaseResultStore:
    """Instantiate the configured result store backend.

    Args:
        settings: Application settings. Defaults to JSON backend.

    Returns:
        Configured BaseResultStore implementation.
    """
    if settings is not None and not settings.cache_enabled:
        from examgrader.cache.memory_store import MemoryResultStore
        return MemoryResultStore()

    backend = "json" if settings is None else settings.cache_backend
    cache_root = "~/.examgrader/cache" if settings is None else str(settings.cache_root)

    if backend == "json":
        from examgrader.cache.json_store import JsonResultStore
        return JsonResultStore(cache_root=cache_root)

    if backend == "sqlite":
        from examgrader.cache.sqlite_store import SqliteResultStore
        return SqliteResultStore(db_path=f"{cache_root}/grading_cache.db")

    if backend == "memory":
        from examgrader.cache.memory_store import MemoryResultStore
        return MemoryResultStore()

    raise ValueError(f"Unsupported cache backend: {backend!r}")
