# tests/unit/cache/test_cache_factory.py — v1
"""Tests for cache/cache_factory.py."""

from __future__ import annotations

import pytest

from examgrader.cache.cache_factory import create_result_store
from examgrader.cache.json_store import JsonResultStore
from examgrader.cache.memory_store import MemoryResultStore
from examgrader.cache.sqlite_store import SqliteResultStore
from examgrader.config.settings import Settings


class TestCreateResultStore:
    def test_json(self, tmp_path):
        s = Settings(_env_file=None, cache_backend="json", cache_root=tmp_path)
        assert isinstance(create_result_store(s), JsonResultStore)

    def test_sqlite(self, tmp_path):
        s = Settings(_env_file=None, cache_backend="sqlite", cache_root=tmp_path)
        store = create_result_store(s)
        assert isinstance(store, SqliteResultStore)
        assert (tmp_path / "grading_cache.db").exists()
        store.close()

    def test_memory(self, tmp_path):
        s = Settings(_env_file=None, cache_backend="memory", cache_root=tmp_path)
        assert isinstance(create_result_store(s), MemoryResultStore)

    def test_disabled_cache_uses_memory(self, tmp_path):
        s = Settings(_env_file=None, cache_enabled=False, cache_root=tmp_path)
        assert isinstance(create_result_store(s), MemoryResultStore)

    def test_unsupported(self, tmp_path):
        s = Settings(_env_file=None, cache_root=tmp_path)
        object.__setattr__(s, "cache_backend", "redis")
        with pytest.raises(ValueError, match="Unsupported"):
            create_result_store(s)
