# tests/unit/grading/test_credentials.py — v1
"""Tests for grading/credentials.py — credential pool and sticky rotation."""

from __future__ import annotations

import json
import threading

import pytest

from examgrader.config.settings import ConfigurationError, Settings
from examgrader.grading.credentials import CredentialPool, CredentialStateStore


class TestCredentialPool:
    def test_current_is_first_key(self):
        pool = CredentialPool(["a", "b"])
        assert pool.current == "a"
        assert pool.index == 0
        assert pool.size == 2

    def test_blank_keys_dropped(self):
        pool = CredentialPool([" a ", "", "  ", "b"])
        assert pool.size == 2
        assert pool.current == "a"

    def test_rotate_wraps(self):
        pool = CredentialPool(["a", "b", "c"])
        assert [pool.rotate() for _ in range(4)] == [1, 2, 0, 1]
        assert pool.current == "b"

    def test_single_key_does_not_rotate(self):
        pool = CredentialPool(["only"])
        assert pool.rotate() == 0
        assert pool.current == "only"

    def test_empty_pool_raises_on_use(self):
        pool = CredentialPool([])
        assert pool.size == 0
        with pytest.raises(ConfigurationError, match="GEMINI_API_KEYS"):
            _ = pool.current

    def test_concurrent_rotation_is_serialized(self):
        pool = CredentialPool([f"k{i}" for i in range(7)])
        threads = [threading.Thread(target=pool.rotate) for _ in range(70)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert pool.index == 0


class TestPersistence:
    def test_rotation_persists_index(self, tmp_path):
        state = CredentialStateStore(tmp_path / "state.json")
        pool = CredentialPool(["a", "b", "c"], state_store=state)
        pool.rotate()
        assert json.loads((tmp_path / "state.json").read_text()) == {"index": 1}

    def test_restored_on_new_pool(self, tmp_path):
        state = CredentialStateStore(tmp_path / "state.json")
        CredentialPool(["a", "b", "c"], state_store=state).rotate()
        restored = CredentialPool(["a", "b", "c"], state_store=state)
        assert restored.current == "b"

    def test_restored_index_wraps_to_pool_size(self, tmp_path):
        state = CredentialStateStore(tmp_path / "state.json")
        state.save(5)
        assert CredentialPool(["a", "b"], state_store=state).index == 1

    def test_unreadable_state_starts_at_zero(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("garbage", encoding="utf-8")
        pool = CredentialPool(["a", "b"], state_store=CredentialStateStore(path))
        assert pool.index == 0

    def test_missing_state(self, tmp_path):
        assert CredentialStateStore(tmp_path / "missing.json").load() is None

    def test_negative_index_ignored(self, tmp_path):
        state = CredentialStateStore(tmp_path / "state.json")
        state.save(-3)
        assert state.load() is None


class TestFromSettings:
    def test_key_list(self, tmp_path):
        s = Settings(
            _env_file=None,
            gemini_api_keys="k1, k2,k3",
            credential_state_file=tmp_path / "state.json",
        )
        pool = CredentialPool.from_settings(s)
        assert pool.size == 3
        assert pool.current == "k1"

    def test_single_key_fallback(self, tmp_path):
        s = Settings(
            _env_file=None,
            gemini_api_key="solo",
            credential_state_file=tmp_path / "state.json",
        )
        assert CredentialPool.from_settings(s).current == "solo"
