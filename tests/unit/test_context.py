"""Tests for engine context collaborators."""

from __future__ import annotations

from agentciv.domain.combat import CombatResolver
from agentciv.domain.context import (
    CombatUnavailableError,
    EngineContext,
    PathfindingUnavailableError,
)
from agentciv.domain.pathfinding import GridPathfinder
from agentciv.utils.grid_math import GridCoord


class _FixedPathfinder:
    def find_path(self, state, from_x, from_y, to_x, to_y, movement_budget, acting_civ_id):
        return [GridCoord(to_x, to_y)]


class _OfflinePathfinder:
    def find_path(self, state, from_x, from_y, to_x, to_y, movement_budget, acting_civ_id):
        raise PathfindingUnavailableError("offline")


class _OfflineCombat:
    def resolve_combat(self, state, attacker_id, defender_id, seed):
        raise CombatUnavailableError("offline")

    def resolve_ranged_combat(self, state, attacker_id, defender_id, seed):
        raise CombatUnavailableError("offline")


def test_default_collaborators(ruleset) -> None:
    context = EngineContext(ruleset=ruleset)

    assert isinstance(context.pathfinding_service, GridPathfinder)
    assert isinstance(context.combat_service, CombatResolver)


def test_substituted_pathfinder_is_used(builder, make_context) -> None:
    state = builder.state()
    context = make_context(pathfinder=_FixedPathfinder())

    assert context.find_path(state, 0, 0, 9, 9, 1.0, "alpha") == [GridCoord(9, 9)]
    assert isinstance(context.combat_service, CombatResolver)


def test_unavailable_collaborators_yield_none(builder, make_context) -> None:
    state = builder.state()
    context = make_context(pathfinder=_OfflinePathfinder(), combat=_OfflineCombat())

    assert context.find_path(state, 0, 0, 1, 0, 1.0, "alpha") is None
    assert context.resolve_combat(state, "u1", "u2", "1", ranged=False) is None
    assert context.resolve_combat(state, "u1", "u2", "1", ranged=True) is None
