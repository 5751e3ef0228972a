# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types — all imports come from core.models.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


# === RUBRIC ===


class ReferenceDocument(BaseModel):
    """Reference solution or official rubric attached to a grading configuration."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    media_type: str
    display_name: str | None = None


class RubricConfig(BaseModel):
    """Grading criteria shared by every submission of an exam.

    Immutable: the grading cache derives part of its key from it.
    Unknown keys are rejected so a misspelled field cannot silently
    fall back to its default.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    description: str = ""
    reference: ReferenceDocument | None = None
    max_score: float = Field(default=10.0, gt=0, alias="maxScore")
    strictness: Literal["lenient", "moderate", "strict"] = "moderate"
    language: Literal["english", "spanish", "auto"] = "auto"

    @property
    def has_content(self) -> bool:
        """True when there is something to grade against (text or reference file)."""
        return bool(self.description.strip()) or (
            self.reference is not None and len(self.reference.data) > 0
        )


# === ROSTER ===


class Candidate(BaseModel):
    """A roster entry a transcribed name can be matched to."""

    id: str
    name: str


# === SUBMISSIONS ===


class SubmissionPage(BaseModel):
    """One photographed page of a submission."""

    data: bytes
    media_type: str


class GradingResult(BaseModel):
    """Structured grading output of the vision model.

    Field aliases follow the model's JSON response schema.
    """

    model_config = ConfigDict(populate_by_name=True)

    student_name: str = Field(default="Unknown", alias="studentName")
    transcription: str
    score: float
    max_score: float = Field(default=0.0, alias="maxScore")
    feedback: str
    areas_for_improvement: list[str] = Field(
        default_factory=list, alias="areasForImprovement"
    )


class GradingStatus(str, Enum):
    """Lifecycle of a submission in a grading queue."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"


class Submission(BaseModel):
    """A student's submission as it moves through the grading queue."""

    id: str
    file_name: str
    pages: list[SubmissionPage]
    status: GradingStatus = GradingStatus.PENDING
    result: GradingResult | None = None
    error: str | None = None
    matched_student_id: str | None = None
