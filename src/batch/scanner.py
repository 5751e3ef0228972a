# src/batch/scanner.py — v1
"""Submission discovery — turn image files and folders into a grading queue.

A file is a single-page submission. Inside a scanned directory, each
image file is a submission and each sub-directory is one multi-page
submission whose pages are its image files in name order.
"""

from __future__ import annotations

import logging
import mimetypes
import uuid
from collections.abc import Iterable
from pathlib import Path

from examgrader.core.models import Submission, SubmissionPage

logger = logging.getLogger(__name__)

# Supported page extensions mapped to media types
SUPPORTED_FORMATS: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".pdf": "application/pdf",
}


def detect_media_type(path: Path) -> str | None:
    """Media type of a supported page file, None otherwise."""
    media_type = SUPPORTED_FORMATS.get(path.suffix.lower())
    if media_type is None:
        guessed, _ = mimetypes.guess_type(path.name)
        if guessed and guessed.startswith("image/"):
            return guessed
    return media_type


def read_page(path: Path) -> SubmissionPage:
    """Read one page file.

    Raises:
        ValueError: If the file type is not supported.
    """
    media_type = detect_media_type(path)
    if media_type is None:
        raise ValueError(f"Unsupported page format: {path.name}")
    return SubmissionPage(data=path.read_bytes(), media_type=media_type)


def _page_files(directory: Path) -> list[Path]:
    return [
        p for p in sorted(directory.iterdir())
        if p.is_file() and detect_media_type(p) is not None
    ]


def _new_submission(file_name: str, pages: list[SubmissionPage]) -> Submission:
    return Submission(id=uuid.uuid4().hex[:12], file_name=file_name, pages=pages)


def load_submissions(paths: Iterable[Path]) -> list[Submission]:
    """Build a PENDING submission queue from files and directories.

    Args:
        paths: Page files and/or directories to scan.

    Returns:
        Submissions in the order discovered.

    Raises:
        FileNotFoundError: If a path does not exist.
    """
    submissions: list[Submission] = []

    for path in paths:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"No such file or directory: {path}")

        if path.is_file():
            submissions.append(_new_submission(path.name, [read_page(path)]))
            continue

        for child in sorted(path.iterdir()):
            if child.is_dir():
                files = _page_files(child)
                if not files:
                    logger.debug("Skipping %s: no page files", child)
                    continue
                pages = [read_page(f) for f in files]
                submissions.append(_new_submission(child.name, pages))
            elif detect_media_type(child) is not None:
                submissions.append(_new_submission(child.name, [read_page(child)]))

    logger.info("Loaded %d submissions", len(submissions))
    return submissions
