# src/grading/gemini_backend.py — v1
"""Google Gemini grading backend.

Uses the google-generativeai SDK in JSON response mode. The SDK reports
quota and key problems only through exception text, so this adapter is
the one place that sniffs messages and turns them into typed errors.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from examgrader.core.models import GradingResult, RubricConfig, SubmissionPage
from examgrader.grading.backend import GradingBackend
from examgrader.grading.errors import (
    BackendUnavailable,
    CredentialRejected,
    GradingError,
    QuotaExceeded,
)
from examgrader.grading.prompt import build_grading_prompt, grading_response_schema
from examgrader.grading.response_parser import parse_grading_response

logger = logging.getLogger(__name__)

_QUOTA_MARKERS = ("429", "resource_exhausted", "quota")
_CREDENTIAL_MARKERS = ("403", "permission_denied", "leaked", "api key not valid", "api_key_invalid")


def classify_backend_error(error: Exception) -> GradingError:
    """Map an SDK exception to a typed grading error."""
    if isinstance(error, GradingError):
        return error

    msg = str(error).lower()
    status_code = getattr(error, "code", None)
    if not isinstance(status_code, int):
        status_code = None

    if status_code == 429 or any(m in msg for m in _QUOTA_MARKERS):
        return QuotaExceeded(f"Quota exceeded: {error}", status_code=status_code)
    if status_code in (401, 403) or any(m in msg for m in _CREDENTIAL_MARKERS):
        return CredentialRejected(f"Credential rejected: {error}", status_code=status_code)
    return BackendUnavailable(f"Grading backend failed: {error}", status_code=status_code)


def build_content_parts(
    pages: list[SubmissionPage], rubric: RubricConfig
) -> list[dict[str, Any]]:
    """Student pages, then the reference document, then the prompt text."""
    parts: list[dict[str, Any]] = [
        {"inline_data": {"mime_type": page.media_type, "data": page.data}}
        for page in pages
    ]
    if rubric.reference is not None:
        parts.append({
            "inline_data": {
                "mime_type": rubric.reference.media_type,
                "data": rubric.reference.data,
            }
        })
    parts.append({"text": build_grading_prompt(rubric)})
    return parts


class GeminiGradingBackend(GradingBackend):
    """Grades submissions with a Gemini vision model."""

    def __init__(
        self,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.0,
        max_tokens: int = 8192,
    ) -> None:
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    @property
    def model(self) -> str:
        return self._model

    @property
    def provider_name(self) -> str:
        return "google"

    async def invoke(
        self,
        pages: list[SubmissionPage],
        rubric: RubricConfig,
        credential: str,
    ) -> GradingResult:
        parts = build_content_parts(pages, rubric)

        t0 = time.monotonic()
        try:
            text = await self._generate(parts, credential)
        except Exception as e:
            raise classify_backend_error(e) from e
        latency = int((time.monotonic() - t0) * 1000)

        logger.debug(
            "Gemini grading call finished: model=%s pages=%d latency_ms=%d",
            self._model, len(pages), latency,
        )
        return parse_grading_response(text)

    async def _generate(self, parts: list[dict[str, Any]], credential: str) -> str:
        """Single SDK round trip; returns the raw response text."""
        import google.generativeai as genai

        genai.configure(api_key=credential)
        model = genai.GenerativeModel(self._model)

        gen_config: dict[str, Any] = {
            "max_output_tokens": self._max_tokens,
            "temperature": self._temperature,
            "response_mime_type": "application/json",
            "response_schema": grading_response_schema(),
        }
        resp = await model.generate_content_async(parts, generation_config=gen_config)
        return resp.text or ""
