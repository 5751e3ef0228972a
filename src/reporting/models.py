# src/reporting/models.py — v1
"""Reporting models: ResultRow, ScoreDistribution, ResultsSummary."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

PerformanceBand = Literal["excellent", "passing", "fair", "failing"]


class ResultRow(BaseModel):
    """One graded submission as exported to / read from CSV."""

    id: str
    file_name: str
    student: str
    score: float
    max_score: float
    feedback: str = ""
    transcription: str = ""


class ScoreDistribution(BaseModel):
    """Counts of scores below 5, in [5, 8) and at least 8."""

    low: int = 0
    mid: int = 0
    high: int = 0


class ResultsSummary(BaseModel):
    """Aggregate figures over a set of graded results."""

    total_students: int
    average_score: float
    passing: int
    highest_score: float
    distribution: ScoreDistribution
