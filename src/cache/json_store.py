# src/cache/json_store.py — v1
"""JSON file-based result store (default CACHE_BACKEND=json).

All results live in a single JSON document under CACHE_ROOT, keyed by
cache key.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from examgrader.cache.base_result_store import BaseResultStore
from examgrader.core.models import GradingResult

logger = logging.getLogger(__name__)

CACHE_FILENAME = "grading_cache.json"
CORRUPT_SUFFIX = ".corrupt"


class JsonResultStore(BaseResultStore):
    """File-based result store using one JSON document."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)
        self._path = self._root / CACHE_FILENAME

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, GradingResult]:
        """Read all results; a missing or unreadable file yields an empty map.

        A file that is not a JSON object is renamed to ``*.corrupt`` so the
        next save does not overwrite the grades it may still hold.
        """
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except OSError as e:
            logger.warning("Failed to read result cache %s: %s", self._path, e)
            return {}
        except json.JSONDecodeError as e:
            logger.warning("Result cache %s is not valid JSON: %s", self._path, e)
            self._set_aside()
            return {}
        if not isinstance(data, dict):
            logger.warning("Result cache %s is not a JSON object", self._path)
            self._set_aside()
            return {}

        results: dict[str, GradingResult] = {}
        for key, raw in data.items():
            try:
                results[key] = GradingResult.model_validate(raw)
            except ValidationError as e:
                logger.warning("Skipping invalid cache entry %s: %s", key[:16], e)
        logger.info("Loaded %d cached grading results from %s", len(results), self._path)
        return results

    def save(self, results: dict[str, GradingResult]) -> None:
        """Atomically rewrite the cache file."""
        payload = {
            key: result.model_dump(by_alias=True) for key, result in results.items()
        }
        fd, tmp_name = tempfile.mkstemp(dir=self._root, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    @property
    def backend_name(self) -> str:
        return "json"

    @property
    def corrupt_path(self) -> Path:
        return self._path.with_name(self._path.name + CORRUPT_SUFFIX)

    def _set_aside(self) -> None:
        """Move an unparsable cache file to ``corrupt_path``."""
        try:
            os.replace(self._path, self.corrupt_path)
        except OSError as e:
            logger.warning("Could not move corrupt cache %s aside: %s", self._path, e)
            return
        logger.warning("Corrupt result cache kept as %s", self.corrupt_path)
