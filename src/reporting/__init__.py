# src/reporting/__init__.py — v1
"""Results export and class statistics."""
