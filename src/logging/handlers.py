# src/logging/handlers.py — v1
"""Size-based rotating file handler for grading session logs."""

from __future__ import annotations

import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

_SIZE_RE = re.compile(r"^(\d+)\s*(B|KB|MB|GB)?$", re.IGNORECASE)
_UNITS = {"B": 1, "KB": 1024, "MB": 1024**2, "GB": 1024**3}


def parse_size(size_str: str) -> int:
    """Parse a size like '10MB', '512KB' or '2048' (bytes) into bytes.

    Raises:
        ValueError: If the string is not a recognised size.
    """
    match = _SIZE_RE.match(size_str.strip())
    if not match:
        raise ValueError(f"Invalid size format: {size_str!r}. Use e.g. '10MB'.")
    unit = (match.group(2) or "B").upper()
    return int(match.group(1)) * _UNITS[unit]


def create_rotating_handler(
    log_file: str | Path,
    rotation: str = "10MB",
    retention: int = 5,
) -> RotatingFileHandler:
    """Create a rotating file handler, creating parent directories.

    Args:
        log_file: Path to log file (``~`` is expanded).
        rotation: Max file size before rotation.
        retention: Number of rotated files to keep.
    """
    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)

    return RotatingFileHandler(
        filename=str(path),
        maxBytes=parse_size(rotation),
        backupCount=retention,
        encoding="utf-8",
    )
