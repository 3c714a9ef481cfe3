"""Deterministic turn engine for a multi-civilization strategy game."""

__version__ = "0.1.0"
