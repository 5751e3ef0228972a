# src/__init__.py — v1
"""examgrader — cached vision-model grading and roster name matching."""

from examgrader.version import __version__

__all__ = ["__version__"]
