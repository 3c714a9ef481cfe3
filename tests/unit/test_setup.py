"""Tests for seeded world generation."""

from __future__ import annotations

import pytest

from agentciv.domain.enums import RelationshipStatus, TerrainType
from agentciv.domain.setup import MAX_NATURAL_WONDERS, STARTING_GOLD, create_game, generate_terrain


@pytest.fixture(scope="module")
def game(context):
    return create_game("g1", seed=11, grid_size=30, context=context)


def test_every_civilization_starts_with_a_city(game, ruleset) -> None:
    assert sorted(game.civilizations) == sorted(ruleset.civilizations)
    for civ in game.civilizations.values():
        assert civ.gold == STARTING_GOLD
        assert len(civ.cities) == 1
        city = game.cities[civ.cities[0]]
        assert "palace" in city.buildings
        assert game.grid[city.y][city.x].terrain == TerrainType.GRASSLAND
        assert game.grid[city.y][city.x].owner_id == civ.id


def test_starting_units_stand_on_passable_land(game, ruleset, check_occupancy) -> None:
    check_occupancy(game)
    assert game.units
    for unit in game.units.values():
        assert ruleset.is_passable(game.grid[unit.y][unit.x].terrain)


def test_relationships_start_neutral(game) -> None:
    for civ in game.civilizations.values():
        assert civ.id not in civ.relationships
        assert set(civ.relationships.values()) == {RelationshipStatus.NEUTRAL}
        assert len(civ.relationships) == len(game.civilizations) - 1


def test_features_are_placed(game) -> None:
    assert 2 <= len(game.barbarian_camps) <= 4
    assert len(game.natural_wonders) <= MAX_NATURAL_WONDERS
    for wonder in game.natural_wonders.values():
        assert game.grid[wonder.y][wonder.x].natural_wonder_id == wonder.id


def test_new_game_is_quiet(game) -> None:
    assert game.turn == 1
    assert game.winner is None
    assert game.turn_events == []
    assert game.notifications == []


def test_same_seed_same_world(context) -> None:
    first = create_game("a", seed=5, grid_size=20, context=context)
    second = create_game("a", seed=5, grid_size=20, context=context)
    assert first == second


def test_terrain_depends_on_seed(ruleset) -> None:
    first = generate_terrain(1, 20, ruleset)
    second = generate_terrain(2, 20, ruleset)
    assert [[t.terrain for t in row] for row in first] != [[t.terrain for t in row] for row in second]


def test_map_edges_drift_towards_water(ruleset) -> None:
    grid = generate_terrain(3, 30, ruleset)
    corners = [grid[0][0], grid[0][29], grid[29][0], grid[29][29]]
    assert all(tile.terrain == TerrainType.WATER for tile in corners)


@pytest.mark.parametrize(
    ("grid_size", "max_turns", "message"),
    [(9, 100, "grid_size"), (20, 0, "max_turns")],
)
def test_rejects_bad_parameters(context, grid_size, max_turns, message) -> None:
    with pytest.raises(ValueError, match=message):
        create_game("bad", seed=1, grid_size=grid_size, max_turns=max_turns, context=context)
