# tests/unit/grading/test_gemini_backend.py — v1
"""Tests for grading/gemini_backend.py — SDK round trip is mocked."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest

from examgrader.core.models import ReferenceDocument, RubricConfig
from examgrader.grading.errors import (
    BackendUnavailable,
    CredentialRejected,
    MalformedResponse,
    QuotaExceeded,
)
from examgrader.grading.gemini_backend import (
    GeminiGradingBackend,
    build_content_parts,
    classify_backend_error,
)

_RESPONSE = json.dumps({
    "studentName": "Maria Garcia",
    "transcription": "x = 4",
    "score": 7,
    "maxScore": 10,
    "feedback": "Fine.",
    "areasForImprovement": [],
})


class _CodedError(Exception):
    def __init__(self, message: str, code: int):
        super().__init__(message)
        self.code = code


class TestClassifyBackendError:
    @pytest.mark.parametrize("message", [
        "429 Too Many Requests",
        "RESOURCE_EXHAUSTED: try later",
        "You exceeded your current quota",
    ])
    def test_quota(self, message):
        assert isinstance(classify_backend_error(RuntimeError(message)), QuotaExceeded)

    @pytest.mark.parametrize("message", [
        "403 Forbidden",
        "PERMISSION_DENIED",
        "Your API key was reported as leaked",
        "API key not valid. Please pass a valid API key.",
    ])
    def test_credential(self, message):
        assert isinstance(classify_backend_error(RuntimeError(message)), CredentialRejected)

    def test_status_code_attribute(self):
        err = classify_backend_error(_CodedError("slow down", 429))
        assert isinstance(err, QuotaExceeded)
        assert err.status_code == 429
        assert isinstance(classify_backend_error(_CodedError("nope", 401)), CredentialRejected)

    def test_other_errors_unavailable(self):
        err = classify_backend_error(ConnectionError("connection reset by peer"))
        assert isinstance(err, BackendUnavailable)
        assert "connection reset" in str(err)
        assert err.status_code is None

    def test_typed_error_passthrough(self):
        original = MalformedResponse("bad")
        assert classify_backend_error(original) is original


class TestBuildContentParts:
    def test_pages_then_prompt(self, sample_pages, sample_rubric):
        parts = build_content_parts(sample_pages, sample_rubric)
        assert len(parts) == 3
        assert parts[0]["inline_data"]["data"] == sample_pages[0].data
        assert parts[1]["inline_data"]["data"] == sample_pages[1].data
        assert "text" in parts[2]

    def test_reference_after_pages(self, sample_pages):
        rubric = RubricConfig(
            reference=ReferenceDocument(data=b"%PDF", media_type="application/pdf"),
        )
        parts = build_content_parts(sample_pages, rubric)
        assert len(parts) == 4
        assert parts[2]["inline_data"] == {"mime_type": "application/pdf", "data": b"%PDF"}
        assert "OFFICIAL RUBRIC" in parts[3]["text"]


class TestGeminiGradingBackend:
    def test_defaults(self):
        backend = GeminiGradingBackend()
        assert backend.provider_name == "google"
        assert backend.model == "gemini-2.5-flash"

    @pytest.mark.asyncio
    async def test_invoke_parses_response(self, sample_pages, sample_rubric):
        backend = GeminiGradingBackend()
        with patch.object(backend, "_generate", new=AsyncMock(return_value=_RESPONSE)) as gen:
            result = await backend.invoke(sample_pages, sample_rubric, "key-a")
        assert result.student_name == "Maria Garcia"
        assert result.score == 7
        parts, credential = gen.await_args.args
        assert credential == "key-a"
        assert len(parts) == 3

    @pytest.mark.asyncio
    async def test_invoke_fenced_response(self, sample_pages, sample_rubric):
        backend = GeminiGradingBackend()
        fenced = f"```json\n{_RESPONSE}\n```"
        with patch.object(backend, "_generate", new=AsyncMock(return_value=fenced)):
            result = await backend.invoke(sample_pages, sample_rubric, "key-a")
        assert result.feedback == "Fine."

    @pytest.mark.asyncio
    async def test_quota_error_typed(self, sample_pages, sample_rubric):
        backend = GeminiGradingBackend()
        sdk_error = RuntimeError("429 Resource has been exhausted (e.g. check quota).")
        with patch.object(backend, "_generate", new=AsyncMock(side_effect=sdk_error)):
            with pytest.raises(QuotaExceeded) as exc_info:
                await backend.invoke(sample_pages, sample_rubric, "key-a")
        assert exc_info.value.__cause__ is sdk_error

    @pytest.mark.asyncio
    async def test_network_error_typed(self, sample_pages, sample_rubric):
        backend = GeminiGradingBackend()
        with patch.object(
            backend, "_generate", new=AsyncMock(side_effect=TimeoutError("deadline")),
        ):
            with pytest.raises(BackendUnavailable):
                await backend.invoke(sample_pages, sample_rubric, "key-a")

    @pytest.mark.asyncio
    async def test_malformed_output(self, sample_pages, sample_rubric):
        backend = GeminiGradingBackend()
        with patch.object(backend, "_generate", new=AsyncMock(return_value="Score: 7")):
            with pytest.raises(MalformedResponse):
                await backend.invoke(sample_pages, sample_rubric, "key-a")
