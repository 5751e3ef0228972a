# src/reporting/exporter.py — v1
"""Graded results export to CSV and summary text, and CSV re-import."""

from __future__ import annotations

import csv
import logging
from collections.abc import Sequence
from pathlib import Path

from examgrader.core.models import Submission
from examgrader.reporting.models import ResultRow, ResultsSummary
from examgrader.reporting.summary import performance_band

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "ID", "File Name", "Student", "Score", "Max Score", "Feedback", "Transcription",
]

_DEFAULT_IMPORT_MAX_SCORE = 10.0


def submission_to_row(submission: Submission, default_max_score: float) -> ResultRow:
    """Flatten a submission; ungraded ones get N/A, 0 and the rubric maximum."""
    result = submission.result
    if result is None:
        return ResultRow(
            id=submission.id,
            file_name=submission.file_name,
            student="N/A",
            score=0.0,
            max_score=default_max_score,
        )
    return ResultRow(
        id=submission.id,
        file_name=submission.file_name,
        student=result.student_name or "N/A",
        score=result.score,
        max_score=result.max_score or default_max_score,
        feedback=result.feedback,
        transcription=result.transcription,
    )


def export_results_csv(
    submissions: Sequence[Submission], path: Path, default_max_score: float,
) -> int:
    """Write one CSV row per submission.

    Args:
        submissions: Submissions in queue order.
        path: Output file path.
        default_max_score: Max score written for ungraded submissions.

    Returns:
        Number of rows written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADERS)
        for submission in submissions:
            row = submission_to_row(submission, default_max_score)
            writer.writerow([
                row.id, row.file_name, row.student,
                f"{row.score:g}", f"{row.max_score:g}",
                row.feedback, row.transcription,
            ])

    logger.info("Exported %d results to %s", len(submissions), path)
    return len(submissions)


def _to_float(value: str | None, default: float) -> float:
    try:
        return float(value) if value not in (None, "") else default
    except ValueError:
        return default


def load_results_csv(path: Path) -> list[ResultRow]:
    """Read a results CSV written by export_results_csv (columns by position).

    Unparsable scores become 0 and unparsable max scores 10.
    """
    rows: list[ResultRow] = []
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.reader(f)
        next(reader, None)  # header
        for values in reader:
            if not any(v.strip() for v in values):
                continue
            values = [v.strip() for v in values] + [""] * (7 - len(values))
            rows.append(ResultRow(
                id=values[0],
                file_name=values[1],
                student=values[2],
                score=_to_float(values[3], 0.0),
                max_score=_to_float(values[4], _DEFAULT_IMPORT_MAX_SCORE),
                feedback=values[5],
                transcription=values[6],
            ))
    return rows


def export_summary_text(summary: ResultsSummary, rows: Sequence[ResultRow] = ()) -> str:
    """Generate a human-readable summary of graded results.

    Args:
        summary: Aggregate figures.
        rows: Optional rows, listed with their performance band.

    Returns:
        Formatted summary string.
    """
    dist = summary.distribution
    lines: list[str] = [
        "=== Grading Summary ===",
        f"Students      : {summary.total_students}",
        f"Average score : {summary.average_score:.2f}",
        f"Passing       : {summary.passing}",
        f"Highest score : {summary.highest_score:g}",
        f"Distribution  : <5: {dist.low} | 5-8: {dist.mid} | >=8: {dist.high}",
    ]

    if rows:
        lines.append("")
        lines.append("--- Per Student ---")
        for row in rows:
            lines.append(
                f"  {row.student[:30]:30s} | {row.score:5g}/{row.max_score:<5g} | "
                f"{performance_band(row.score)}"
            )

    return "\n".join(lines)
