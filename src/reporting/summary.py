# src/reporting/summary.py — v1
"""Class-level statistics over graded results.

Thresholds assume the usual 0-10 grading scale.
"""

from __future__ import annotations

from collections.abc import Sequence

from examgrader.reporting.models import (
    PerformanceBand,
    ResultRow,
    ResultsSummary,
    ScoreDistribution,
)

PASSING_SCORE = 7.0
EXCELLENT_SCORE = 8.0
FAIR_SCORE = 4.0
LOW_SCORE = 5.0


def performance_band(score: float) -> PerformanceBand:
    """Qualitative band for a score."""
    if score >= EXCELLENT_SCORE:
        return "excellent"
    if score >= PASSING_SCORE:
        return "passing"
    if score >= FAIR_SCORE:
        return "fair"
    return "failing"


def summarize(rows: Sequence[ResultRow]) -> ResultsSummary:
    """Total, average, passing count, best score and distribution."""
    scores = [row.score for row in rows]
    total = len(scores)

    distribution = ScoreDistribution(
        low=sum(1 for s in scores if s < LOW_SCORE),
        mid=sum(1 for s in scores if LOW_SCORE <= s < EXCELLENT_SCORE),
        high=sum(1 for s in scores if s >= EXCELLENT_SCORE),
    )
    return ResultsSummary(
        total_students=total,
        average_score=sum(scores) / total if total else 0.0,
        passing=sum(1 for s in scores if s >= PASSING_SCORE),
        highest_score=max(scores) if scores else 0.0,
        distribution=distribution,
    )
