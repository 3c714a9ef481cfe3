"""Utility functions for the agentciv turn engine."""

from agentciv.utils.grid_math import GridCoord, manhattan, tile_key
from agentciv.utils.rng import generate_seed, random_choice, random_int, seeded_random

__all__ = [
    "GridCoord",
    "generate_seed",
    "manhattan",
    "random_choice",
    "random_int",
    "seeded_random",
    "tile_key",
]
