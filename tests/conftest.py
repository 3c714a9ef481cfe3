"""Pytest configuration and shared world-building fixtures.

This adds the `src/` directory to `sys.path` so tests can import the
`agentciv` package without requiring an editable install in CI.
"""

import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from agentciv.domain import world  # noqa: E402
from agentciv.domain.context import EngineContext  # noqa: E402
from agentciv.domain.enums import TerrainType  # noqa: E402
from agentciv.domain.models import (  # noqa: E402
    City,
    CivID,
    Civilization,
    GameID,
    GameState,
    Tile,
    Unit,
)
from agentciv.domain.ruleset import Ruleset, default_ruleset  # noqa: E402

FIXED_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_TIME


class WorldBuilder:
    """Hand-built game states for focused tests."""

    def __init__(self, ruleset: Ruleset) -> None:
        self.ruleset = ruleset

    def state(
        self, size: int = 10, terrain: TerrainType = TerrainType.GRASSLAND, **fields
    ) -> GameState:
        grid = [[Tile(x=x, y=y, terrain=terrain) for x in range(size)] for y in range(size)]
        return GameState(id=GameID("test"), seed=1, grid_size=size, grid=grid, **fields)

    def civ(self, state: GameState, civ_id: str, *, gold: int = 0, **fields) -> Civilization:
        civ = Civilization(
            id=CivID(civ_id), name=civ_id.title(), leader_name="Leader", gold=gold, **fields
        )
        state.civilizations[civ.id] = civ
        return civ

    def unit(self, state: GameState, owner_id: str, unit_type: str, x: int, y: int, **overrides) -> Unit:
        unit_def = self.ruleset.unit(unit_type)
        assert unit_def is not None, unit_type
        unit = world.spawn_unit(state, unit_def, owner_id, x, y)
        for name, value in overrides.items():
            setattr(unit, name, value)
        return unit

    def city(self, state: GameState, owner_id: str, x: int, y: int, **overrides) -> City:
        civ = state.civilizations[CivID(owner_id)]
        city = world.create_city(state, civ, x, y, name=f"{civ.name} {len(civ.cities) + 1}")
        for name, value in overrides.items():
            setattr(city, name, value)
        return city

    @staticmethod
    def terrain(state: GameState, x: int, y: int, terrain: TerrainType) -> Tile:
        tile = state.grid[y][x]
        tile.terrain = terrain
        return tile


@pytest.fixture(scope="session")
def ruleset() -> Ruleset:
    return default_ruleset()


@pytest.fixture(scope="session")
def builder(ruleset: Ruleset) -> WorldBuilder:
    return WorldBuilder(ruleset)


@pytest.fixture(scope="session")
def context(ruleset: Ruleset) -> EngineContext:
    return EngineContext(ruleset=ruleset, clock=fixed_clock)


def _assert_occupancy_consistent(state: GameState) -> None:
    """Grid occupancy, unit positions and owner rosters describe the same units."""

    on_grid = {}
    for row in state.grid:
        for tile in row:
            if tile.unit_id is not None:
                assert tile.unit_id in state.units, f"stale unit {tile.unit_id} at {tile.x},{tile.y}"
                on_grid[tile.unit_id] = (tile.x, tile.y)
    for unit in state.units.values():
        assert on_grid.get(unit.id) == (unit.x, unit.y)
        if unit.owner_id == "barbarians":
            assert unit.id in state.barbarian_units
        else:
            assert unit.id in state.civilizations[unit.owner_id].units
    for civ in state.civilizations.values():
        for unit_id in civ.units:
            assert unit_id in state.units
    for unit_id in state.barbarian_units:
        assert unit_id in state.units


@pytest.fixture(scope="session")
def check_occupancy():
    return _assert_occupancy_consistent


@pytest.fixture(scope="session")
def make_context(ruleset: Ruleset):
    """Factory for contexts with substituted collaborators."""

    def factory(**collaborators) -> EngineContext:
        return EngineContext(ruleset=ruleset, clock=fixed_clock, **collaborators)

    return factory
