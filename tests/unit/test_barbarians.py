"""Tests for the barbarian faction."""

from __future__ import annotations

import pytest

from agentciv.domain import world
from agentciv.domain.barbarians import run_barbarian_turn
from agentciv.domain.models import BARBARIAN_CIV_ID, BarbarianCamp


@pytest.fixture
def state(builder):
    state = builder.state(turn=5)
    builder.civ(state, "alpha")
    return state


def _camp(state, x: int, y: int, last_spawn_turn: int = 0) -> BarbarianCamp:
    camp = BarbarianCamp(id="bcamp1", x=x, y=y, strength=60, last_spawn_turn=last_spawn_turn)
    state.barbarian_camps[camp.id] = camp
    return camp


def _barbarian(state, ruleset, x: int, y: int):
    return world.spawn_unit(state, ruleset.unit("warrior"), BARBARIAN_CIV_ID, x, y)


def test_occupied_camp_is_destroyed_for_gold(state, builder, context) -> None:
    _camp(state, 5, 5)
    builder.unit(state, "alpha", "warrior", 5, 5)

    events = run_barbarian_turn(state, 1, context)

    assert events == ["Alpha destroyed a barbarian camp and looted 25 gold"]
    assert state.barbarian_camps == {}
    assert state.civilizations["alpha"].gold == 25
    assert state.barbarian_units == []


def test_camp_spawns_on_interval(state, context, check_occupancy) -> None:
    camp = _camp(state, 5, 5)

    events = run_barbarian_turn(state, 1, context)

    assert events == ["Barbarians emerge near (5, 5)"]
    assert camp.last_spawn_turn == 5
    unit = state.units[state.barbarian_units[0]]
    assert (unit.x, unit.y) == (5, 5)
    assert unit.owner_id == BARBARIAN_CIV_ID
    assert unit.type == "warrior"
    check_occupancy(state)


def test_camp_waits_between_spawns(state, context) -> None:
    _camp(state, 5, 5, last_spawn_turn=1)
    assert run_barbarian_turn(state, 1, context) == []
    assert state.barbarian_units == []


def test_camp_spawn_is_capped(state, ruleset, context) -> None:
    _camp(state, 5, 5)
    for x, y in [(5, 6), (5, 7), (6, 5)]:
        _barbarian(state, ruleset, x, y)

    run_barbarian_turn(state, 1, context)

    assert len(state.barbarian_units) == 3


def test_barbarians_attack_adjacent_units(state, builder, ruleset, context) -> None:
    raider = _barbarian(state, ruleset, 3, 3)
    victim = builder.unit(state, "alpha", "warrior", 4, 3)

    run_barbarian_turn(state, 1, context)

    entry = state.combat_log[-1]
    assert entry.attacker_id == raider.id
    assert entry.attacker_civ_id == BARBARIAN_CIV_ID
    assert victim.hp == 100 - entry.damage_to_defender
    assert state.civilizations["alpha"].war_weariness == 1
    assert state.civilizations["alpha"].relationships == {}


def test_barbarians_march_on_the_nearest_city(state, builder, ruleset, context) -> None:
    builder.city(state, "alpha", 5, 5)
    raider = _barbarian(state, ruleset, 0, 5)

    run_barbarian_turn(state, 1, context)

    assert (raider.x, raider.y) == (1, 5)


def test_barbarians_do_not_enter_cities(state, builder, ruleset, context) -> None:
    builder.city(state, "alpha", 5, 5)
    raider = _barbarian(state, ruleset, 4, 5)

    run_barbarian_turn(state, 1, context)

    assert (raider.x, raider.y) == (4, 5)
    assert state.grid[5][5].unit_id is None
