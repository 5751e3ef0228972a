# src/cache/base_result_store.py — v1
"""Abstract durable store for cached grading results."""

from __future__ import annotations

from abc import ABC, abstractmethod

from examgrader.core.models import GradingResult


class BaseResultStore(ABC):
    """Persistent map of cache key -> GradingResult.

    Loaded once when the grading cache starts and rewritten after every
    insert. Insertion order is preserved.
    """

    @abstractmethod
    def load(self) -> dict[str, GradingResult]:
        """Read every stored result."""

    @abstractmethod
    def save(self, results: dict[str, GradingResult]) -> None:
        """Replace the stored results with ``results``."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Backend identifier (json, sqlite, memory)."""

    def close(self) -> None:
        """Release backend resources. File and memory stores hold none."""
