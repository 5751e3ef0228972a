# src/grading/errors.py — v1
"""Typed grading backend errors.

Backends raise these instead of leaking SDK exceptions, so retry
decisions are made on an error kind rather than on message text.
"""

from __future__ import annotations

from typing import Literal

ErrorKind = Literal[
    "quota_exceeded",
    "credential_rejected",
    "backend_unavailable",
    "malformed_response",
]

# Kinds that rotate to the next credential and retry.
RETRIABLE_KINDS: frozenset[str] = frozenset({"quota_exceeded", "credential_rejected"})


class GradingError(Exception):
    """Base class for grading backend failures."""

    kind: ErrorKind = "backend_unavailable"

    def __init__(self, message: str, *, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)

    @property
    def retriable(self) -> bool:
        """Whether a different credential may succeed."""
        return self.kind in RETRIABLE_KINDS


class QuotaExceeded(GradingError):
    """The backend reported a rate or usage limit for the current credential."""

    kind: ErrorKind = "quota_exceeded"


class CredentialRejected(GradingError):
    """The backend rejected the credential (invalid, leaked or unauthorized)."""

    kind: ErrorKind = "credential_rejected"


class BackendUnavailable(GradingError):
    """Any other backend failure (network, server error, unexpected SDK error)."""

    kind: ErrorKind = "backend_unavailable"


class MalformedResponse(GradingError):
    """The backend answered, but not with a parsable grading result."""

    kind: ErrorKind = "malformed_response"

    def __init__(self, message: str, *, raw_text: str = ""):
        self.raw_text = raw_text
        super().__init__(message)
