"""
Square-grid coordinate mathematics for agentciv.

The world is a square grid addressed by ``(x, y)`` with ``grid[y][x]``
storage. Two distance metrics are in use:

1. Manhattan distance - orthogonal steps; used for movement adjacency,
   melee/ranged reach, border radius and trade-route length.
2. Chebyshev distance - king moves; used for city work areas, vision
   squares and great-person placement rings.

Tiles are referenced by string keys ``"x,y"`` inside fog-of-war sets so that
state stays a plain JSON document.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class GridCoord:
    """
    A square-grid coordinate.

    Example:
        >>> manhattan(GridCoord(0, 0), GridCoord(2, 1))
        3
    """

    x: int
    y: int


def manhattan(a: GridCoord, b: GridCoord) -> int:
    """Return the number of orthogonal steps between ``a`` and ``b``."""
    return abs(a.x - b.x) + abs(a.y - b.y)


def chebyshev(a: GridCoord, b: GridCoord) -> int:
    """Return the king-move distance between ``a`` and ``b``."""
    return max(abs(a.x - b.x), abs(a.y - b.y))


_ORTHOGONAL: list[tuple[int, int]] = [(0, -1), (1, 0), (0, 1), (-1, 0)]
_DIAGONAL: list[tuple[int, int]] = [(1, -1), (1, 1), (-1, 1), (-1, -1)]


def neighbors4(coord: GridCoord) -> list[GridCoord]:
    """
    Return the four orthogonal neighbours (north, east, south, west).

    Bounds are not checked; callers filter with ``in_bounds``.
    """
    return [GridCoord(coord.x + dx, coord.y + dy) for dx, dy in _ORTHOGONAL]


def neighbors8(coord: GridCoord) -> list[GridCoord]:
    """Return the eight surrounding tiles, orthogonal ones first."""
    return [GridCoord(coord.x + dx, coord.y + dy) for dx, dy in _ORTHOGONAL + _DIAGONAL]


def in_bounds(coord: GridCoord, size: int) -> bool:
    return 0 <= coord.x < size and 0 <= coord.y < size


def tiles_within_manhattan(center: GridCoord, radius: int, size: int) -> list[GridCoord]:
    """
    All in-bounds tiles whose Manhattan distance to ``center`` is ``<= radius``.

    The result is ordered row by row so that callers iterating it stay
    deterministic.
    """
    result = []
    for y in range(center.y - radius, center.y + radius + 1):
        for x in range(center.x - radius, center.x + radius + 1):
            coord = GridCoord(x, y)
            if in_bounds(coord, size) and manhattan(center, coord) <= radius:
                result.append(coord)
    return result


def tiles_within_square(center: GridCoord, radius: int, size: int) -> list[GridCoord]:
    """All in-bounds tiles within Chebyshev ``radius`` of ``center``, row by row."""
    result = []
    for y in range(center.y - radius, center.y + radius + 1):
        for x in range(center.x - radius, center.x + radius + 1):
            coord = GridCoord(x, y)
            if in_bounds(coord, size):
                result.append(coord)
    return result


def ring(center: GridCoord, radius: int) -> list[GridCoord]:
    """
    Tiles at exactly Chebyshev ``radius`` from ``center``.

    ``ring(c, 0)`` is ``[c]``. Bounds are not checked.
    """
    if radius == 0:
        return [center]
    return [
        GridCoord(center.x + dx, center.y + dy)
        for dy in range(-radius, radius + 1)
        for dx in range(-radius, radius + 1)
        if max(abs(dx), abs(dy)) == radius
    ]


def tile_key(x: int, y: int) -> str:
    """Fog-of-war key for a tile."""
    return f"{x},{y}"
