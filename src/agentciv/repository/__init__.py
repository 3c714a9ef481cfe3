"""Persistence adapters for game snapshots."""

from .json_store import JsonGameRepository

__all__ = ["JsonGameRepository"]
