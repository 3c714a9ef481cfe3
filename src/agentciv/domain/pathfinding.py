"""Default pathfinding service: A* over the square grid with zones of control.

Movement is orthogonal. Each step costs the terrain's move cost, or the
improvement's move cost when a road is present. A unit may not spend more
than its movement budget. Entering a tile orthogonally adjacent to a foreign
military unit (a zone-of-control tile) ends movement: such a tile is never
expanded further, so it can only appear as the last tile of a path.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from heapq import heappop, heappush

from agentciv.domain import world
from agentciv.domain.enums import ZOC_CLASSES
from agentciv.domain.models import GameState
from agentciv.domain.ruleset import Ruleset
from agentciv.utils.grid_math import GridCoord, in_bounds, manhattan, neighbors4


@dataclass(slots=True)
class GridPathfinder:
    """A* pathfinder implementing :class:`agentciv.interfaces.IPathfinder`."""

    ruleset: Ruleset

    def tile_cost(self, state: GameState, coord: GridCoord) -> float:
        """Cost of entering ``coord``; ``math.inf`` when impassable."""

        return world.tile_move_cost(state, self.ruleset, coord)

    def exerts_zoc(self, unit_type: str) -> bool:
        unit_def = self.ruleset.unit(unit_type)
        return unit_def is not None and unit_def.unit_class in ZOC_CLASSES

    def in_enemy_zoc(self, state: GameState, coord: GridCoord, civ_id: str) -> bool:
        for neighbor in neighbors4(coord):
            if not in_bounds(neighbor, state.grid_size):
                continue
            unit_id = state.grid[neighbor.y][neighbor.x].unit_id
            if unit_id is None:
                continue
            unit = state.units.get(unit_id)
            if (
                unit is not None
                and world.is_hostile(state, civ_id, unit.owner_id)
                and self.exerts_zoc(unit.type)
            ):
                return True
        return False

    def _blocked(self, state: GameState, coord: GridCoord, civ_id: str) -> bool:
        unit_id = state.grid[coord.y][coord.x].unit_id
        if unit_id is None:
            return False
        unit = state.units.get(unit_id)
        return unit is not None and unit.owner_id != civ_id

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
        start = GridCoord(from_x, from_y)
        goal = GridCoord(to_x, to_y)
        size = state.grid_size
        if not in_bounds(start, size) or not in_bounds(goal, size):
            return None
        if math.isinf(self.tile_cost(state, goal)):
            return None
        if start == goal:
            return [start]

        # (f, tie-breaker, g, coord)
        open_heap: list[tuple[float, int, float, GridCoord]] = []
        counter = 0
        heappush(open_heap, (float(manhattan(start, goal)), counter, 0.0, start))
        best_cost: dict[GridCoord, float] = {start: 0.0}
        parents: dict[GridCoord, GridCoord] = {}
        closed: set[GridCoord] = set()

        while open_heap:
            _, _, cost, current = heappop(open_heap)
            if current in closed:
                continue
            if current == goal:
                return self._reconstruct(parents, current)
            closed.add(current)

            if current != start and self.in_enemy_zoc(state, current, acting_civ_id):
                continue

            for neighbor in neighbors4(current):
                if not in_bounds(neighbor, size) or neighbor in closed:
                    continue
                step = self.tile_cost(state, neighbor)
                if math.isinf(step):
                    continue
                new_cost = cost + step
                if new_cost > movement_budget:
                    continue
                if neighbor != goal and self._blocked(state, neighbor, acting_civ_id):
                    continue
                if new_cost >= best_cost.get(neighbor, math.inf):
                    continue
                best_cost[neighbor] = new_cost
                parents[neighbor] = current
                counter += 1
                heappush(
                    open_heap,
                    (new_cost + manhattan(neighbor, goal), counter, new_cost, neighbor),
                )

        return None

    @staticmethod
    def _reconstruct(
        parents: dict[GridCoord, GridCoord], current: GridCoord
    ) -> list[GridCoord]:
        path = [current]
        while current in parents:
            current = parents[current]
            path.append(current)
        path.reverse()
        return path
