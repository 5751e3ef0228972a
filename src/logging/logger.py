# src/logging/logger.py — v2
"""Handlers and formatters for the ``examgrader`` package logger.

Modules log through ``logging.getLogger(__name__)``; this module only
decides where records go and how they look. Both formats carry the
grading context (batch, submission, step) from logging/context.py.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from examgrader.logging.context import get_context

if TYPE_CHECKING:
    from examgrader.config.settings import Settings

PACKAGE_LOGGER = "examgrader"

# Third-party loggers that are chatty at INFO during Gemini calls
_NOISY_LOGGERS = ("urllib3", "httpx", "grpc", "google.auth")

_TEXT_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s%(grading)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, for log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = get_context().as_dict()
        if context:
            entry["context"] = context
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Single-line console format; the submission being graded is shown inline."""

    def __init__(self) -> None:
        super().__init__(_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        tag = ""
        if ctx.submission_id:
            tag += f" [{ctx.submission_id}]"
        if ctx.step:
            tag += f" ({ctx.step})"
        record.grading = tag
        return super().format(record)


def _formatter_for(log_format: str) -> logging.Formatter:
    return JsonFormatter() if log_format == "json" else TextFormatter()


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 5,
) -> logging.Logger:
    """(Re)configure the package logger; safe to call more than once.

    Console output goes to stderr so command output on stdout stays clean.

    Args:
        level: DEBUG, INFO, WARNING or ERROR.
        log_format: "json" or "text".
        log_file: Optional file, rotated by size.
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of rotated files to keep.

    Returns:
        The configured package logger.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = _formatter_for(log_format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        from examgrader.logging.handlers import create_rotating_handler

        handlers.append(create_rotating_handler(log_file, rotation, retention))
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return package_logger


def setup_logging_from_settings(settings: Settings, verbose: bool = False) -> logging.Logger:
    """Apply LOG_LEVEL, LOG_FORMAT and LOG_FILE; ``verbose`` forces DEBUG."""
    return setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
