# src/batch/models.py — v1
"""Batch grading models: BatchResult."""

from __future__ import annotations

from pydantic import BaseModel


class BatchResult(BaseModel):
    """Summary of one pass over a grading queue."""

    total: int
    completed: int
    failed: int
    skipped: int
    cache_hits: int
    duration_seconds: float
