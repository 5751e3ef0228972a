# src/batch/__init__.py — v1
"""Batch grading: submission discovery, roster loading, sequential grading."""
