# src/cache/fingerprint.py — v1
"""Deterministic cache keys for grading results.

A key pairs a hash of the submitted page bytes with a canonical
serialization of the rubric: ``"<image_hash>::<rubric_key>"``.
Byte-identical pages graded under a value-identical rubric always
produce the same key, so the same cached grade is served back.
"""

from __future__ import annotations

import base64
import hashlib
import json
from collections.abc import Iterable
from typing import Any

from examgrader.core.models import RubricConfig, SubmissionPage

KEY_SEPARATOR = "::"


def content_hash(pages: Iterable[SubmissionPage]) -> str:
    """SHA-256 over the concatenated bytes of all pages, in order."""
    digest = hashlib.sha256()
    for page in pages:
        digest.update(page.data)
    return digest.hexdigest()


def canonical_rubric_key(rubric: RubricConfig) -> str:
    """Serialize a rubric with sorted keys and no insignificant whitespace.

    Reference document bytes are base64-encoded so the key stays valid JSON.
    """
    payload: dict[str, Any] = rubric.model_dump()
    reference = payload.get("reference")
    if reference is not None:
        reference["data"] = base64.b64encode(reference["data"]).decode("ascii")
    return json.dumps(
        payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )


def build_cache_key(pages: Iterable[SubmissionPage], rubric: RubricConfig) -> str:
    """Combine page content hash and rubric key into the cache key."""
    return f"{content_hash(pages)}{KEY_SEPARATOR}{canonical_rubric_key(rubric)}"
