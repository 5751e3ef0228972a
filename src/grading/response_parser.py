# src/grading/response_parser.py — v1
"""Parse raw model output into a GradingResult."""

from __future__ import annotations

import json
import re

from pydantic import ValidationError

from examgrader.core.models import GradingResult
from examgrader.grading.errors import MalformedResponse

_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?```$", re.DOTALL | re.IGNORECASE)


def strip_code_fence(text: str) -> str:
    """Remove a surrounding Markdown code fence, if any."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def parse_grading_response(text: str | None) -> GradingResult:
    """Parse the model's JSON answer.

    Raises:
        MalformedResponse: Empty text, invalid JSON, or a JSON value that
            does not have the grading result shape.
    """
    if not text or not text.strip():
        raise MalformedResponse("Empty response from grading model", raw_text=text or "")

    body = strip_code_fence(text)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Grading response is not valid JSON: {e}", raw_text=text) from e

    if not isinstance(data, dict):
        raise MalformedResponse(
            f"Grading response is a JSON {type(data).__name__}, expected an object",
            raw_text=text,
        )

    try:
        return GradingResult.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise MalformedResponse(
            f"Grading response has invalid or missing fields: {fields}", raw_text=text,
        ) from e
