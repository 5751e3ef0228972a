# src/cache/__init__.py — v1
"""Durable grading result stores and cache key derivation."""
