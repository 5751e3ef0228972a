# tests/unit/reporting/test_exporter.py — v1
"""Tests for reporting/exporter.py — CSV export/import and summary text."""

from __future__ import annotations

import csv

from examgrader.core.models import GradingResult, GradingStatus, Submission, SubmissionPage
from examgrader.reporting.exporter import (
    CSV_HEADERS,
    export_results_csv,
    export_summary_text,
    load_results_csv,
    submission_to_row,
)
from examgrader.reporting.models import ResultRow
from examgrader.reporting.summary import summarize

_PAGE = SubmissionPage(data=b"x", media_type="image/png")


def _graded(sub_id: str, name: str, score: float, feedback: str = "ok") -> Submission:
    return Submission(
        id=sub_id,
        file_name=f"{sub_id}.png",
        pages=[_PAGE],
        status=GradingStatus.COMPLETED,
        result=GradingResult(
            student_name=name,
            transcription="line one\nline two",
            score=score,
            max_score=10,
            feedback=feedback,
        ),
    )


def _failed(sub_id: str) -> Submission:
    return Submission(
        id=sub_id, file_name=f"{sub_id}.png", pages=[_PAGE],
        status=GradingStatus.ERROR, error="quota",
    )


class TestSubmissionToRow:
    def test_graded(self):
        row = submission_to_row(_graded("a", "Ana", 8.5), default_max_score=20)
        assert row.student == "Ana"
        assert row.score == 8.5
        assert row.max_score == 10

    def test_ungraded(self):
        row = submission_to_row(_failed("b"), default_max_score=20)
        assert row.student == "N/A"
        assert row.score == 0
        assert row.max_score == 20
        assert row.feedback == ""


class TestExportResultsCsv:
    def test_header_and_rows(self, tmp_path):
        path = tmp_path / "out" / "results.csv"
        count = export_results_csv(
            [_graded("a", "Ana", 8), _failed("b")], path, default_max_score=10,
        )
        assert count == 2

        with path.open(newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == CSV_HEADERS
        assert rows[1][:5] == ["a", "a.png", "Ana", "8", "10"]
        assert rows[2][2] == "N/A"

    def test_quotes_and_newlines_survive(self, tmp_path):
        path = tmp_path / "results.csv"
        feedback = 'Said "well done", then, more'
        export_results_csv([_graded("a", "Pérez, Juan", 7.5, feedback)], path, 10)

        (row,) = load_results_csv(path)
        assert row.student == "Pérez, Juan"
        assert row.feedback == feedback
        assert row.transcription == "line one\nline two"
        assert row.score == 7.5


class TestLoadResultsCsv:
    def test_bad_numbers_defaulted(self, tmp_path):
        path = tmp_path / "results.csv"
        path.write_text(
            ",".join(CSV_HEADERS) + "\n"
            "a,a.png,Ana,abc,,fine,\n"
            "\n"
            "b,b.png,Luis,6\n",
            encoding="utf-8",
        )
        rows = load_results_csv(path)
        assert [r.id for r in rows] == ["a", "b"]
        assert rows[0].score == 0
        assert rows[0].max_score == 10
        assert rows[1].score == 6
        assert rows[1].feedback == ""

    def test_header_only(self, tmp_path):
        path = tmp_path / "results.csv"
        path.write_text(",".join(CSV_HEADERS) + "\n", encoding="utf-8")
        assert load_results_csv(path) == []


class TestExportSummaryText:
    def test_contains_figures(self):
        rows = [
            ResultRow(id="1", file_name="1.png", student="Ana", score=9, max_score=10),
            ResultRow(id="2", file_name="2.png", student="Luis", score=3, max_score=10),
        ]
        text = export_summary_text(summarize(rows), rows)
        assert "Students      : 2" in text
        assert "Average score : 6.00" in text
        assert "Passing       : 1" in text
        assert "<5: 1 | 5-8: 0 | >=8: 1" in text
        assert "excellent" in text
        assert "failing" in text

    def test_without_rows(self):
        text = export_summary_text(summarize([]))
        assert "Per Student" not in text
        assert "Students      : 0" in text
