# src/grading/backend.py — v1
"""Abstract grading backend interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from examgrader.core.models import GradingResult, RubricConfig, SubmissionPage


class GradingBackend(ABC):
    """External capability that transcribes and scores one submission."""

    @abstractmethod
    async def invoke(
        self,
        pages: list[SubmissionPage],
        rubric: RubricConfig,
        credential: str,
    ) -> GradingResult:
        """Grade the pages against the rubric using ``credential``.

        Raises:
            QuotaExceeded: Rate/usage limit hit for this credential.
            CredentialRejected: Credential invalid, leaked or unauthorized.
            BackendUnavailable: Any other backend failure.
            MalformedResponse: Response could not be parsed into a result.
        """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (e.g. google)."""
