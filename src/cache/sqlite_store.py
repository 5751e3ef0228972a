# src/cache/sqlite_store.py — v1
"""SQLite-based result store (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3 — no external dependency.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path

from pydantic import ValidationError

from examgrader.cache.base_result_store import BaseResultStore
from examgrader.core.models import GradingResult

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS grading_results (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    data TEXT NOT NULL,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


class SqliteResultStore(BaseResultStore):
    """SQLite-backed result store; row order follows insertion order."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    def load(self) -> dict[str, GradingResult]:
        """Read all results in insertion order."""
        cursor = self._conn.execute(
            "SELECT key, data FROM grading_results ORDER BY seq"
        )
        results: dict[str, GradingResult] = {}
        for key, data in cursor.fetchall():
            try:
                results[key] = GradingResult.model_validate(json.loads(data))
            except (json.JSONDecodeError, ValidationError) as e:
                logger.warning("Failed to deserialize cache entry %s: %s", key[:16], e)
        return results

    def save(self, results: dict[str, GradingResult]) -> None:
        """Replace table content in a single transaction."""
        rows = [
            (key, result.model_dump_json(by_alias=True))
            for key, result in results.items()
        ]
        with self._conn:
            self._conn.execute("DELETE FROM grading_results")
            self._conn.executemany(
                "INSERT INTO grading_results (key, data) VALUES (?, ?)", rows
            )

    @property
    def backend_name(self) -> str:
        return "sqlite"

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
