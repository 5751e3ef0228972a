# src/matching/__init__.py — v1
"""Roster name matching."""
