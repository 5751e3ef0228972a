# src/batch/roster.py — v1
"""Roster loading from CSV exports of the course student list."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from examgrader.core.models import Candidate

logger = logging.getLogger(__name__)


def load_roster_csv(path: Path) -> list[Candidate]:
    """Read a roster CSV with ``id`` and ``name`` columns.

    Rows with a blank id or name are skipped. Column names are matched
    case-insensitively.

    Raises:
        ValueError: If the header lacks an ``id`` or ``name`` column.
    """
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        fields = {name.strip().lower(): name for name in reader.fieldnames or []}
        if "id" not in fields or "name" not in fields:
            raise ValueError(f"Roster {path} must have 'id' and 'name' columns")

        roster: list[Candidate] = []
        skipped = 0
        for row in reader:
            student_id = (row.get(fields["id"]) or "").strip()
            name = (row.get(fields["name"]) or "").strip()
            if not student_id or not name:
                skipped += 1
                continue
            roster.append(Candidate(id=student_id, name=name))

    if skipped:
        logger.warning("Skipped %d incomplete roster rows in %s", skipped, path)
    return roster
