# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides sample rubrics, pages, rosters, grading results and a scripted
fake grading backend. No external dependencies — all I/O is local.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from examgrader.cache.memory_store import MemoryResultStore
from examgrader.core.models import (
    Candidate,
    GradingResult,
    RubricConfig,
    SubmissionPage,
)
from examgrader.grading.backend import GradingBackend
from examgrader.grading.credentials import CredentialPool


class ScriptedBackend(GradingBackend):
    """Fake backend: each call pops the next outcome (result or exception).

    Once the script is exhausted, ``default`` is returned. Every call is
    recorded as (page count, rubric, credential).
    """

    def __init__(
        self,
        outcomes: list[GradingResult | Exception] | None = None,
        default: GradingResult | None = None,
    ) -> None:
        self.outcomes = list(outcomes or [])
        self.default = default
        self.calls: list[tuple[int, RubricConfig, str]] = []

    async def invoke(self, pages, rubric, credential):
        self.calls.append((len(pages), rubric, credential))
        if self.outcomes:
            outcome = self.outcomes.pop(0)
        else:
            outcome = self.default
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            raise AssertionError("ScriptedBackend has no outcome left")
        return outcome.model_copy(deep=True)

    @property
    def provider_name(self) -> str:
        return "scripted"

    @property
    def credentials_used(self) -> list[str]:
        return [c[2] for c in self.calls]


# === FIXTURES: Sample data ===


@pytest.fixture
def sample_rubric() -> RubricConfig:
    """Minimal rubric with a text description."""
    return RubricConfig(
        description="Award 2 points per correctly solved equation.",
        max_score=10,
        strictness="moderate",
        language="english",
    )


@pytest.fixture
def sample_pages() -> list[SubmissionPage]:
    """Two-page submission."""
    return [
        SubmissionPage(data=b"\x89PNG page one bytes", media_type="image/png"),
        SubmissionPage(data=b"\x89PNG page two bytes", media_type="image/png"),
    ]


@pytest.fixture
def sample_result() -> GradingResult:
    """Typical grading result as returned by the model."""
    return GradingResult(
        student_name="Maria Garcia",
        transcription="x + 3 = 7, x = 4",
        score=8,
        max_score=20,
        feedback="Good work, show every step.",
        areas_for_improvement=["Show intermediate steps"],
    )


@pytest.fixture
def sample_roster() -> list[Candidate]:
    """Small classroom roster."""
    return [
        Candidate(id="1", name="Maria Garcia"),
        Candidate(id="2", name="Juan Perez"),
        Candidate(id="3", name="Sofía Hernández López"),
    ]


# === FIXTURES: Grading doubles ===


@pytest.fixture
def memory_store() -> MemoryResultStore:
    return MemoryResultStore()


@pytest.fixture
def credential_pool() -> CredentialPool:
    """Pool of three credentials, no persistence."""
    return CredentialPool(["key-a", "key-b", "key-c"])


@pytest.fixture
def make_backend():
    """Factory for ScriptedBackend instances."""
    return ScriptedBackend


@pytest.fixture
def scripted_backend(sample_result: GradingResult) -> ScriptedBackend:
    """Backend that always succeeds with sample_result."""
    return ScriptedBackend(default=sample_result)


# === FIXTURES: Temp dirs ===


@pytest.fixture
def tmp_cache_dir(tmp_path: Path) -> Path:
    """Temporary cache directory."""
    cache = tmp_path / "cache"
    cache.mkdir()
    return cache
