# src/grading/__init__.py — v1
"""Grading backend interface, credential rotation and the result cache."""
