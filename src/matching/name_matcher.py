# src/matching/name_matcher.py — v1
"""Fuzzy matching of OCR-extracted student names against a course roster.

Handwritten names come back from OCR with misread letters, missing
surnames or swapped word order. A roster entry is matched by token
agreement: each OCR token (length >= 3) counts as found when a roster
token contains it or is within one edit of it (adjacent swaps count as
one edit). The best entry wins only with a strict majority of tokens found.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from examgrader.core.models import Candidate

logger = logging.getLogger(__name__)

DEFAULT_MATCH_THRESHOLD = 0.5
DEFAULT_MIN_TOKEN_LENGTH = 3
DEFAULT_MAX_EDIT_DISTANCE = 1


def levenshtein_distance(a: str, b: str) -> int:
    """Classic dynamic-programming edit distance (insert, delete, substitute)."""
    rows = len(a) + 1
    cols = len(b) + 1
    matrix = [[0] * cols for _ in range(rows)]

    for i in range(rows):
        matrix[i][0] = i
    for j in range(cols):
        matrix[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            matrix[i][j] = min(
                matrix[i - 1][j] + 1,  # deletion
                matrix[i][j - 1] + 1,  # insertion
                matrix[i - 1][j - 1] + cost,  # substitution
            )

    return matrix[-1][-1]


def transposition_distance(a: str, b: str) -> int:
    """Levenshtein distance where swapping two adjacent letters costs one edit.

    Optimal string alignment variant: handwriting OCR often swaps
    neighbouring letters ("jaun" for "juan"), which plain Levenshtein
    scores as two substitutions.
    """
    rows = len(a) + 1
    cols = len(b) + 1
    matrix = [[0] * cols for _ in range(rows)]

    for i in range(rows):
        matrix[i][0] = i
    for j in range(cols):
        matrix[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            matrix[i][j] = min(
                matrix[i - 1][j] + 1,
                matrix[i][j - 1] + 1,
                matrix[i - 1][j - 1] + cost,
            )
            if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                matrix[i][j] = min(matrix[i][j], matrix[i - 2][j - 2] + 1)

    return matrix[-1][-1]


def tokenize_name(name: str) -> list[str]:
    """Lowercase, trim and split a name on whitespace."""
    return name.lower().strip().split()


def token_found(
    ocr_token: str,
    candidate_tokens: Iterable[str],
    max_edit_distance: int = DEFAULT_MAX_EDIT_DISTANCE,
) -> bool:
    """Whether an OCR token appears in a candidate name (substring or near-typo)."""
    for token in candidate_tokens:
        if ocr_token in token:
            return True
        if transposition_distance(ocr_token, token) <= max_edit_distance:
            return True
    return False


def match_score(
    ocr_tokens: list[str],
    candidate_name: str,
    max_edit_distance: int = DEFAULT_MAX_EDIT_DISTANCE,
) -> float:
    """Fraction of OCR tokens found in the candidate name."""
    if not ocr_tokens:
        return 0.0
    candidate_tokens = tokenize_name(candidate_name)
    found = sum(
        1
        for token in ocr_tokens
        if token_found(token, candidate_tokens, max_edit_distance)
    )
    return found / len(ocr_tokens)


def find_best_match(
    ocr_name: str | None,
    roster: Iterable[Candidate | dict] | None,
    *,
    match_threshold: float = DEFAULT_MATCH_THRESHOLD,
    min_token_length: int = DEFAULT_MIN_TOKEN_LENGTH,
    max_edit_distance: int = DEFAULT_MAX_EDIT_DISTANCE,
) -> str | None:
    """Return the id of the roster entry the OCR name most likely refers to.

    Args:
        ocr_name: Name as transcribed from the exam sheet.
        roster: Candidates, as Candidate models or ``{"id", "name"}`` dicts.
        match_threshold: Score a candidate must strictly exceed.
        min_token_length: OCR tokens shorter than this are ignored.
        max_edit_distance: Edit distance tolerated between tokens.

    Returns:
        The matched candidate id, or None when no candidate is confident.
        Ties keep the candidate seen first in roster order.
    """
    if not isinstance(ocr_name, str) or not ocr_name.strip():
        return None
    if not roster:
        return None

    ocr_tokens = [t for t in tokenize_name(ocr_name) if len(t) >= min_token_length]
    if not ocr_tokens:
        return None

    best_id: str | None = None
    best_score = 0.0

    for entry in roster:
        candidate_id, candidate_name = _unpack(entry)
        if candidate_id is None or candidate_name is None:
            continue

        score = match_score(ocr_tokens, candidate_name, max_edit_distance)
        if score > match_threshold and score > best_score:
            best_score = score
            best_id = candidate_id

    if best_id is None:
        logger.debug("No roster match for %r", ocr_name)
    else:
        logger.debug("Matched %r -> %s (score %.2f)", ocr_name, best_id, best_score)
    return best_id


def _unpack(entry: Candidate | dict) -> tuple[str | None, str | None]:
    """Extract (id, name) from a roster entry; (None, None) if malformed."""
    if isinstance(entry, Candidate):
        return entry.id, entry.name
    if isinstance(entry, dict):
        candidate_id = entry.get("id")
        name = entry.get("name")
        if isinstance(name, str) and candidate_id is not None:
            return str(candidate_id), name
    return None, None
