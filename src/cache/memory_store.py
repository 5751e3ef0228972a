# src/cache/memory_store.py — v1
"""In-process result store (CACHE_BACKEND=memory or CACHE_ENABLED=false)."""

from __future__ import annotations

from examgrader.cache.base_result_store import BaseResultStore
from examgrader.core.models import GradingResult


class MemoryResultStore(BaseResultStore):
    """Keeps results for the lifetime of the process only."""

    def __init__(self) -> None:
        self._results: dict[str, GradingResult] = {}
        self.save_count = 0

    def load(self) -> dict[str, GradingResult]:
        return {k: v.model_copy(deep=True) for k, v in self._results.items()}

    def save(self, results: dict[str, GradingResult]) -> None:
        self._results = {k: v.model_copy(deep=True) for k, v in results.items()}
        self.save_count += 1

    @property
    def backend_name(self) -> str:
        return "memory"
