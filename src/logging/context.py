# src/logging/context.py — v1
"""Contextual logging support — attach batch_id, submission_id, step to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging — set per grading batch.
_batch_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "batch_id", default=None
)
_submission_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "submission_id", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    batch_id: str | None = None
    submission_id: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        batch_id=_batch_id.get(),
        submission_id=_submission_id.get(),
        step=_step.get(),
    )


def set_batch_context(batch_id: str) -> None:
    """Set batch-level context (called once per grading pass)."""
    _batch_id.set(batch_id)


def set_submission_context(submission_id: str | None, step: str | None = None) -> None:
    """Set submission-level context (called per graded submission)."""
    _submission_id.set(submission_id)
    _step.set(step)


def clear_context() -> None:
    """Reset all context variables."""
    _batch_id.set(None)
    _submission_id.set(None)
    _step.set(None)
