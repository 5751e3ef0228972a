# src/grading/grading_cache.py — v1
"""Content-addressed cache in front of the grading backend.

Grading calls are slow, cost money and are not guaranteed to return the
same grade twice. Results are memoized under a key built from the page
bytes and the rubric (see cache/fingerprint.py), so re-grading the same
photos under the same rubric returns the stored grade without a call.

Quota and credential failures rotate through the credential pool, at
most one attempt per credential. Every other failure propagates as is.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from examgrader.cache.base_result_store import BaseResultStore
from examgrader.cache.fingerprint import build_cache_key
from examgrader.core.models import GradingResult, RubricConfig, SubmissionPage
from examgrader.grading.backend import GradingBackend
from examgrader.grading.credentials import CredentialPool
from examgrader.grading.errors import GradingError

logger = logging.getLogger(__name__)


class GradingCache:
    """Memoizes grading results and rotates credentials on quota errors.

    Not safe for concurrent callers on the same key: submissions are
    expected to be graded one at a time.
    """

    def __init__(
        self,
        store: BaseResultStore,
        credentials: CredentialPool,
        max_entries: int = 0,
    ) -> None:
        if max_entries < 0:
            raise ValueError("max_entries must be >= 0")
        self._store = store
        self._credentials = credentials
        self._max_entries = max_entries
        self._results: dict[str, GradingResult] = store.load()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._results)

    def __contains__(self, key: object) -> bool:
        return key in self._results

    @property
    def credentials(self) -> CredentialPool:
        return self._credentials

    async def grade_or_fetch(
        self,
        pages: Sequence[SubmissionPage],
        rubric: RubricConfig,
        backend: GradingBackend,
    ) -> GradingResult:
        """Return the cached grade for (pages, rubric), grading on a miss.

        Args:
            pages: Submission pages, in order.
            rubric: Grading configuration.
            backend: Grading capability invoked on a cache miss.

        Returns:
            A copy of the grading result; mutating it never affects the cache.

        Raises:
            GradingError: Non-retriable backend failure, or the last
                quota/credential failure once every credential was tried.
        """
        key = build_cache_key(pages, rubric)

        cached = self._results.get(key)
        if cached is not None:
            self.hits += 1
            logger.info("Grading cache hit (%d entries)", len(self._results))
            return cached.model_copy(deep=True)

        self.misses += 1
        result = await self._invoke_with_rotation(list(pages), rubric, backend)
        result = result.model_copy(update={"max_score": rubric.max_score})

        self._results[key] = result
        self._evict()
        self._store.save(self._results)
        logger.info("Grading cache stored new result (%d entries)", len(self._results))
        return result.model_copy(deep=True)

    def clear(self) -> int:
        """Drop every cached result and persist the empty cache.

        Returns:
            Number of entries removed.
        """
        removed = len(self._results)
        self._results = {}
        self._store.save(self._results)
        logger.info("Grading cache cleared (%d entries removed)", removed)
        return removed

    async def _invoke_with_rotation(
        self,
        pages: list[SubmissionPage],
        rubric: RubricConfig,
        backend: GradingBackend,
    ) -> GradingResult:
        """Call the backend, rotating credentials on retriable errors."""
        attempts = max(self._credentials.size, 1)

        for attempt in range(1, attempts + 1):
            credential = self._credentials.current
            try:
                return await backend.invoke(pages, rubric, credential)
            except GradingError as e:
                if not e.retriable or attempt >= attempts:
                    raise
                logger.warning(
                    "Backend %s — %s (attempt %d/%d), rotating credential",
                    backend.provider_name, e.kind, attempt, attempts,
                )
                self._credentials.rotate()

        # Unreachable: the final attempt either returns or raises.
        raise AssertionError("credential rotation loop exited without a result")

    def _evict(self) -> None:
        """Drop the oldest entries beyond max_entries (0 = unbounded)."""
        if not self._max_entries:
            return
        overflow = len(self._results) - self._max_entries
        if overflow <= 0:
            return
        for key in list(self._results)[:overflow]:
            del self._results[key]
        logger.debug("Evicted %d oldest cache entries", overflow)
