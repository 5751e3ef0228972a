# src/grading/credentials.py — v1
"""API credential pool with sticky rotation.

The active index is persisted so a restarted process resumes on the
credential that last worked instead of retrying an exhausted first key.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from examgrader.config.settings import ConfigurationError

if TYPE_CHECKING:
    from examgrader.config.settings import Settings

logger = logging.getLogger(__name__)


class CredentialStateStore:
    """Persists the pool cursor as ``{"index": n}`` in a JSON file."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> int | None:
        """Return the saved index, or None if absent or unreadable."""
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            index = int(data["index"])
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable credential state %s: %s", self._path, e)
            return None
        return index if index >= 0 else None

    def save(self, index: int) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps({"index": index}), encoding="utf-8")


class CredentialPool:
    """Ordered credentials plus the index of the one currently in use."""

    def __init__(
        self,
        keys: Iterable[str],
        state_store: CredentialStateStore | None = None,
    ) -> None:
        self._keys = [k.strip() for k in keys if k and k.strip()]
        self._state_store = state_store
        self._lock = threading.Lock()
        self._index = 0

        if self._keys and state_store is not None:
            saved = state_store.load()
            if saved is not None:
                self._index = saved % len(self._keys)
                logger.debug("Restored credential index %d", self._index)

    @classmethod
    def from_settings(cls, settings: Settings) -> CredentialPool:
        """Build the pool from GEMINI_API_KEYS (or GEMINI_API_KEY)."""
        return cls(
            settings.gemini_api_keys_list,
            state_store=CredentialStateStore(settings.credential_state_file),
        )

    @property
    def size(self) -> int:
        return len(self._keys)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> str:
        """Credential in use.

        Raises:
            ConfigurationError: If the pool is empty.
        """
        if not self._keys:
            raise ConfigurationError(
                "No API credentials configured (set GEMINI_API_KEYS or GEMINI_API_KEY)"
            )
        return self._keys[self._index]

    def rotate(self) -> int:
        """Advance to the next credential and persist the new index.

        A pool of one (or none) has nothing to rotate to.

        Returns:
            The index now in use.
        """
        with self._lock:
            if len(self._keys) <= 1:
                return self._index
            self._index = (self._index + 1) % len(self._keys)
            new_index = self._index

        logger.warning("Rotating to API credential index %d/%d", new_index, len(self._keys))
        if self._state_store is not None:
            try:
                self._state_store.save(new_index)
            except OSError as e:
                logger.warning("Could not persist credential index: %s", e)
        return new_index
