"""Deterministic Random Number Generator (RNG) system for agentciv.

All randomness in the turn engine is seeded from game state (game seed, turn,
context) so that:
- Reproducibility: the same seed always produces the same results
- Fairness: no hidden randomness between civilizations
- Replays: a turn can be re-run from a snapshot with identical outcome

Examples:
    >>> seed = generate_seed(7, 12, "combat:u3:u9")
    >>> result = random_int(seed, 0, 1000)
    >>> 0 <= result["value"] <= 1000
    True

    >>> result = random_choice(seed, ["north", "south", "east"])
    >>> result["choice"] in ["north", "south", "east"]
    True
"""

import hashlib
import random
from typing import Any


def generate_seed(game_seed: int, turn: int, context: str) -> str:
    """Generate deterministic seed from game state.

    Format: "game_seed:turn:context"

    Args:
        game_seed: Seed the turn is being resolved with
        turn: Current game turn
        context: What the roll is for (e.g., 'combat:u3:u9', 'map:terrain')

    Returns:
        Seed string for RNG in format "game_seed:turn:context"

    Examples:
        >>> generate_seed(1, 42, "combat:u1:u2")
        '1:42:combat:u1:u2'

    Raises:
        ValueError: If game_seed or turn is negative
    """
    if game_seed < 0:
        raise ValueError(f"game_seed must be non-negative, got {game_seed}")
    if turn < 0:
        raise ValueError(f"turn must be non-negative, got {turn}")

    return f"{game_seed}:{turn}:{context}"


def _seed_to_int(seed: str) -> int:
    """Convert seed string to a stable 64-bit integer for random.Random().

    Args:
        seed: Seed string

    Returns:
        64-bit integer derived from SHA-256(seed)
    """
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    # Use first 8 bytes for a 64-bit integer
    return int.from_bytes(digest[:8], "big", signed=False)


def seeded_random(seed: str) -> random.Random:
    """Return a ``random.Random`` stream bound to ``seed``.

    Used where a single operation needs many draws (map generation); each call
    with the same seed yields an identical stream.
    """
    return random.Random(_seed_to_int(seed))


def random_choice(seed: str, options: list[Any]) -> dict[str, Any]:
    """Choose randomly from options with deterministic seed.

    Args:
        seed: Deterministic seed string
        options: List of options to choose from (must be non-empty)

    Returns:
        Dictionary containing:
            - choice: The selected option
            - index: Index of the selected option
            - seed: The seed used

    Raises:
        ValueError: If options list is empty
    """
    if not options:
        raise ValueError("options list cannot be empty")

    rng = random.Random(_seed_to_int(seed))
    index = rng.randint(0, len(options) - 1)

    return {
        "choice": options[index],
        "index": index,
        "seed": seed,
    }


def random_int(seed: str, min_val: int, max_val: int) -> dict[str, Any]:
    """Generate random integer in range with deterministic seed.

    Generates a random integer between min_val and max_val (inclusive) using
    the seed. The same seed and range will always produce the same value.

    Args:
        seed: Deterministic seed string
        min_val: Minimum value (inclusive)
        max_val: Maximum value (inclusive)

    Returns:
        Dictionary containing:
            - value: The random integer
            - min: The minimum value
            - max: The maximum value
            - seed: The seed used

    Examples:
        >>> seed = generate_seed(1, 1, "test")
        >>> result = random_int(seed, 1, 100)
        >>> 1 <= result['value'] <= 100
        True

    Raises:
        ValueError: If min_val > max_val
    """
    if min_val > max_val:
        raise ValueError(f"min_val ({min_val}) cannot be greater than max_val ({max_val})")

    rng = random.Random(_seed_to_int(seed))
    value = rng.randint(min_val, max_val)

    return {
        "value": value,
        "min": min_val,
        "max": max_val,
        "seed": seed,
    }
