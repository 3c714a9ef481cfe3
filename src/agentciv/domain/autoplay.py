"""Deterministic local policy for civilizations that submitted no actions."""

from __future__ import annotations

from agentciv.domain import world
from agentciv.domain.actions import Action, Attack, Build, FoundCity, MoveUnit
from agentciv.domain.context import EngineContext
from agentciv.domain.enums import ProductionKind
from agentciv.domain.models import City, Civilization, GameState, Unit
from agentciv.domain.validation import validate_action
from agentciv.utils.grid_math import GridCoord, in_bounds, manhattan, neighbors4
from agentciv.utils.rng import generate_seed, random_choice

SETTLE_DISTANCE = 3
WANDERER_TYPE = "scout"


def local_actions(state: GameState, civ_id: str, context: EngineContext) -> list[Action]:
    """Build a plausible action list for ``civ_id`` without any external agent.

    Idle cities queue the strongest military unit they can build, military
    units attack adjacent enemies, settlers walk away from existing cities and
    settle, and scouts wander on a seeded walk. Every proposed action is
    pre-checked with the validator so the list only holds legal orders.
    """
    civ = state.civilizations.get(civ_id)
    if civ is None or not civ.is_alive:
        return []

    actions: list[Action] = []
    for city_id in civ.cities:
        city = state.cities.get(city_id)
        if city is not None and city.production is None:
            order = _best_military_build(state, civ, city, context)
            if order is not None:
                actions.append(order)

    for unit_id in list(civ.units):
        unit = state.units.get(unit_id)
        if unit is None:
            continue
        action = _unit_action(state, civ, unit, context)
        if action is not None and validate_action(state, action, civ.id, context):
            actions.append(action)
    return actions


def _best_military_build(
    state: GameState, civ: Civilization, city: City, context: EngineContext
) -> Build | None:
    options = [
        unit_def
        for unit_def in context.ruleset.available_units(civ.researched_techs)
        if unit_def.can_attack
    ]
    options.sort(key=lambda unit_def: (-unit_def.attack, unit_def.id))
    for unit_def in options:
        order = Build(city_id=city.id, target=unit_def.id, build_type=ProductionKind.UNIT)
        if validate_action(state, order, civ.id, context):
            return order
    return None


def _unit_action(
    state: GameState, civ: Civilization, unit: Unit, context: EngineContext
) -> Action | None:
    unit_def = context.ruleset.unit(unit.type)
    if unit_def is None:
        return None
    if unit_def.can_found_city:
        return _settler_action(state, civ, unit, context)
    if unit_def.can_attack:
        for coord in neighbors4(GridCoord(unit.x, unit.y)):
            target = world.unit_at(state, coord.x, coord.y)
            if target is not None and target.owner_id != civ.id:
                return Attack(unit_id=unit.id, target_unit_id=target.id)
    if unit.type == WANDERER_TYPE:
        return _wander(state, unit, context)
    return None


def _open_steps(state: GameState, unit: Unit, context: EngineContext) -> list[GridCoord]:
    steps = []
    for coord in neighbors4(GridCoord(unit.x, unit.y)):
        if not in_bounds(coord, state.grid_size):
            continue
        tile = state.grid[coord.y][coord.x]
        if tile.unit_id is None and context.ruleset.is_passable(tile.terrain):
            steps.append(coord)
    return steps


def _distance_to_cities(state: GameState, coord: GridCoord) -> int:
    if not state.cities:
        return state.grid_size * 2
    return min(manhattan(coord, GridCoord(city.x, city.y)) for city in state.cities.values())


def _settler_action(
    state: GameState, civ: Civilization, unit: Unit, context: EngineContext
) -> Action | None:
    here = GridCoord(unit.x, unit.y)
    if _distance_to_cities(state, here) >= SETTLE_DISTANCE:
        return FoundCity(unit_id=unit.id)
    steps = _open_steps(state, unit, context)
    if not steps:
        return None
    best = max(steps, key=lambda coord: (_distance_to_cities(state, coord), -coord.y, -coord.x))
    return MoveUnit(unit_id=unit.id, target_x=best.x, target_y=best.y)


def _wander(state: GameState, unit: Unit, context: EngineContext) -> MoveUnit | None:
    steps = _open_steps(state, unit, context)
    if not steps:
        return None
    seed = generate_seed(state.seed, state.turn, f"wander:{unit.id}")
    step = random_choice(seed, steps)["choice"]
    return MoveUnit(unit_id=unit.id, target_x=step.x, target_y=step.y)
