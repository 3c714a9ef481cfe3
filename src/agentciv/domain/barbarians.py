"""Barbarian faction: camp destruction, spawning and simple unit AI."""

from __future__ import annotations

import math

from agentciv.domain import execution, world
from agentciv.domain.context import EngineContext
from agentciv.domain.enums import CameraPriority, EventType
from agentciv.domain.models import BARBARIAN_CIV_ID, BarbarianCamp, City, GameState, Unit
from agentciv.utils.grid_math import GridCoord, in_bounds, manhattan, neighbors4
from agentciv.utils.rng import generate_seed


def run_barbarian_turn(state: GameState, seed: int, context: EngineContext) -> list[str]:
    events = _destroy_occupied_camps(state, context)
    events.extend(_spawn_from_camps(state, context))
    events.extend(_move_and_attack(state, seed, context))
    return events


def _destroy_occupied_camps(state: GameState, context: EngineContext) -> list[str]:
    events: list[str] = []
    reward = context.rules.barbarians.camp_reward
    for camp_id in sorted(state.barbarian_camps):
        camp = state.barbarian_camps[camp_id]
        occupant = world.unit_at(state, camp.x, camp.y)
        if occupant is None or occupant.owner_id == BARBARIAN_CIV_ID:
            continue
        civ = state.civilizations.get(occupant.owner_id)
        del state.barbarian_camps[camp_id]
        if civ is None:
            continue
        civ.gold += reward
        message = world.record_event(
            state,
            EventType.BARBARIAN,
            f"{civ.name} destroyed a barbarian camp and looted {reward} gold",
            civ.id,
        )
        world.notify(state, context.clock, EventType.BARBARIAN, message, civ_id=civ.id, x=camp.x, y=camp.y)
        world.pan_camera(state, EventType.BARBARIAN, camp.x, camp.y, CameraPriority.MEDIUM)
        events.append(message)
    return events


def _units_near(state: GameState, camp: BarbarianCamp, radius: int) -> int:
    here = GridCoord(camp.x, camp.y)
    return sum(
        1
        for unit_id in state.barbarian_units
        if (unit := state.units.get(unit_id)) is not None
        and manhattan(here, GridCoord(unit.x, unit.y)) <= radius
    )


def _spawn_from_camps(state: GameState, context: EngineContext) -> list[str]:
    rules = context.rules.barbarians
    unit_def = context.ruleset.unit(rules.unit_type)
    if unit_def is None:
        return []
    events: list[str] = []
    for camp_id in sorted(state.barbarian_camps):
        camp = state.barbarian_camps[camp_id]
        if state.turn - camp.last_spawn_turn < rules.spawn_interval:
            continue
        if _units_near(state, camp, rules.camp_radius) >= rules.max_units_near_camp:
            continue
        spot = world.free_land_tile_near(state, context.ruleset, camp.x, camp.y, 1)
        if spot is None:
            continue
        world.spawn_unit(state, unit_def, BARBARIAN_CIV_ID, spot.x, spot.y)
        camp.last_spawn_turn = state.turn
        events.append(
            world.record_event(
                state, EventType.BARBARIAN, f"Barbarians emerge near ({camp.x}, {camp.y})"
            )
        )
    return events


def _adjacent_target(state: GameState, unit: Unit) -> Unit | None:
    targets = []
    for coord in neighbors4(GridCoord(unit.x, unit.y)):
        other = world.unit_at(state, coord.x, coord.y)
        if other is not None and other.owner_id != BARBARIAN_CIV_ID:
            targets.append(other)
    if not targets:
        return None
    return min(targets, key=lambda other: other.id)


def _nearest_city(state: GameState, unit: Unit) -> City | None:
    if not state.cities:
        return None
    here = GridCoord(unit.x, unit.y)
    return min(
        state.cities.values(),
        key=lambda city: (manhattan(here, GridCoord(city.x, city.y)), city.id),
    )


def _step_towards(state: GameState, unit: Unit, goal: City, context: EngineContext) -> bool:
    here = GridCoord(unit.x, unit.y)
    target = GridCoord(goal.x, goal.y)
    best: GridCoord | None = None
    best_distance = manhattan(here, target)
    for coord in neighbors4(here):
        if not in_bounds(coord, state.grid_size):
            continue
        tile = state.grid[coord.y][coord.x]
        if tile.unit_id is not None or tile.city_id is not None:
            continue
        if math.isinf(world.tile_move_cost(state, context.ruleset, coord)):
            continue
        distance = manhattan(coord, target)
        if distance < best_distance:
            best, best_distance = coord, distance
    if best is None:
        return False
    world.move_unit(state, unit, best.x, best.y)
    return True


def _move_and_attack(state: GameState, seed: int, context: EngineContext) -> list[str]:
    events: list[str] = []
    for unit_id in sorted(state.barbarian_units):
        unit = state.units.get(unit_id)
        if unit is None:
            continue
        target = _adjacent_target(state, unit)
        if target is not None:
            combat_seed = generate_seed(seed, state.turn, f"barbarian:{unit.id}:{target.id}")
            outcome = context.resolve_combat(state, unit.id, target.id, combat_seed, ranged=False)
            if outcome is not None:
                events.extend(execution.apply_combat(state, outcome, context))
            continue
        city = _nearest_city(state, unit)
        if city is not None:
            _step_towards(state, unit, city, context)
        unit.movement_left = float(unit.movement)
    return events
