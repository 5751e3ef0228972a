# src/batch/grader.py — v1
"""Sequential batch grading with partial-failure semantics.

Submissions are graded one at a time to stay under the backend's rate
limits. A failed submission is marked ERROR with its message and the
batch moves on; ERROR submissions are picked up again on the next pass.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Sequence

from examgrader.batch.models import BatchResult
from examgrader.core.models import Candidate, GradingStatus, RubricConfig, Submission
from examgrader.grading.backend import GradingBackend
from examgrader.grading.errors import GradingError
from examgrader.grading.grading_cache import GradingCache
from examgrader.logging.context import set_batch_context, set_submission_context
from examgrader.matching.name_matcher import find_best_match

logger = logging.getLogger(__name__)

_GRADABLE = (GradingStatus.PENDING, GradingStatus.ERROR)


class BatchGrader:
    """Grade a submission queue through the grading cache.

    Workflow:
        1. Select PENDING and ERROR submissions, mark them PROCESSING
        2. Grade each in order through GradingCache
        3. COMPLETED: store result, match transcribed name to the roster
        4. ERROR: store the error message, continue with the next one
    """

    def __init__(
        self,
        cache: GradingCache,
        backend: GradingBackend,
        roster: Sequence[Candidate] | None = None,
        match_options: dict[str, float | int] | None = None,
    ) -> None:
        self._cache = cache
        self._backend = backend
        self._roster = list(roster or [])
        self._match_options = dict(match_options or {})

    async def grade_pending(
        self, submissions: list[Submission], rubric: RubricConfig,
    ) -> BatchResult:
        """Grade every PENDING or ERROR submission in place.

        Raises:
            ValueError: If the rubric has neither a description nor a reference file.
        """
        if not rubric.has_content:
            raise ValueError(
                "Rubric needs a description or a reference file before grading"
            )

        batch_id = uuid.uuid4().hex[:8]
        set_batch_context(batch_id)
        started = time.monotonic()
        hits_before = self._cache.hits

        queue = [s for s in submissions if s.status in _GRADABLE]
        for submission in queue:
            submission.status = GradingStatus.PROCESSING

        logger.info(
            "Batch %s: grading %d of %d submissions",
            batch_id, len(queue), len(submissions),
        )

        completed = failed = 0
        for submission in queue:
            set_submission_context(submission.id, step="grade")
            if await self._grade_one(submission, rubric):
                completed += 1
            else:
                failed += 1
        set_submission_context(None)

        result = BatchResult(
            total=len(submissions),
            completed=completed,
            failed=failed,
            skipped=len(submissions) - len(queue),
            cache_hits=self._cache.hits - hits_before,
            duration_seconds=round(time.monotonic() - started, 3),
        )
        logger.info(
            "Batch %s complete: %d completed, %d failed, %d cache hits",
            batch_id, result.completed, result.failed, result.cache_hits,
        )
        return result

    async def _grade_one(self, submission: Submission, rubric: RubricConfig) -> bool:
        """Grade a single submission; returns True on success."""
        try:
            result = await self._cache.grade_or_fetch(
                submission.pages, rubric, self._backend
            )
        except GradingError as e:
            logger.error("Grading failed for %s (%s): %s", submission.file_name, e.kind, e)
            submission.status = GradingStatus.ERROR
            submission.error = str(e)
            return False
        except Exception as e:
            logger.exception("Unexpected error grading %s", submission.file_name)
            submission.status = GradingStatus.ERROR
            submission.error = str(e) or type(e).__name__
            return False

        submission.status = GradingStatus.COMPLETED
        submission.result = result
        submission.error = None
        if self._roster:
            submission.matched_student_id = find_best_match(
                result.student_name, self._roster, **self._match_options
            )
        return True
