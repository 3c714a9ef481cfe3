"""Pathfinding Service Protocol Interface.

This module defines the protocol (interface) the turn engine uses to plan
unit movement.
"""

from typing import Protocol

from agentciv.domain.models import GameState
from agentciv.utils.grid_math import GridCoord


class IPathfinder(Protocol):
    """Protocol for services that plan unit movement on the grid.

    Implementations may raise
    :class:`~agentciv.domain.context.CollaboratorUnavailableError` when they
    cannot answer; the engine treats that as "no path".
    """

    def find_path(
        self,
        state: GameState,
        from_x: int,
        from_y: int,
        to_x: int,
        to_y: int,
        movement_budget: float,
        acting_civ_id: str,
    ) -> list[GridCoord] | None:
        """Return the cheapest legal path, start tile included, or ``None``.

        A returned path must stop at or before the first tile inside an
        enemy zone of control unless that tile is the destination.

        Args:
            state: Current game snapshot (read-only)
            from_x: Start column
            from_y: Start row
            to_x: Destination column
            to_y: Destination row
            movement_budget: Movement points the unit may spend
            acting_civ_id: Owner of the moving unit, used to decide who is an enemy

        Returns:
            Ordered list of coordinates from start to destination, or None
        """
        ...
