"""Aggregate-mutating operations on :class:`~agentciv.domain.models.GameState`.

Grid occupancy, entity positions and owner rosters are three views of the
same fact. Every structural change (placing, moving, removing a unit;
founding a city; claiming tiles) goes through this module so that the three
stay consistent. Units are always cleared from their tile before they leave
their owner's roster and the entity store.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import datetime

from agentciv.domain.enums import CameraPriority, EventType, RelationshipStatus
from agentciv.domain.models import (
    BARBARIAN_CIV_ID,
    CameraEvent,
    City,
    CityID,
    CivID,
    Civilization,
    GameNotification,
    GameState,
    Tile,
    TurnEvent,
    Unit,
    UnitID,
)
from agentciv.domain.rules_config import DEFAULT_RULES, RulesConfig
from agentciv.domain.ruleset import Ruleset, UnitDef
from agentciv.utils.grid_math import (
    GridCoord,
    in_bounds,
    ring,
    tile_key,
    tiles_within_manhattan,
    tiles_within_square,
)

# --- Queries --------------------------------------------------------------------


def tile_at(state: GameState, x: int, y: int) -> Tile | None:
    if not in_bounds(GridCoord(x, y), state.grid_size):
        return None
    return state.grid[y][x]


def unit_at(state: GameState, x: int, y: int) -> Unit | None:
    tile = tile_at(state, x, y)
    if tile is None or tile.unit_id is None:
        return None
    return state.units.get(tile.unit_id)


def tile_move_cost(state: GameState, ruleset: Ruleset, coord: GridCoord) -> float:
    """Cost of entering ``coord``; roads override terrain, ``math.inf`` if impassable."""

    tile = state.grid[coord.y][coord.x]
    base = ruleset.move_cost(tile.terrain)
    if math.isinf(base):
        return base
    if tile.improvement is not None:
        improvement = ruleset.improvement(tile.improvement)
        if improvement is not None and improvement.move_cost is not None:
            return improvement.move_cost
    return base


def capital_of(state: GameState, civ: Civilization) -> City | None:
    for city_id in civ.cities:
        city = state.cities.get(city_id)
        if city is not None:
            return city
    return None


def alive_civilizations(state: GameState) -> list[Civilization]:
    return [
        state.civilizations[civ_id]
        for civ_id in sorted(state.civilizations)
        if state.civilizations[civ_id].is_alive
    ]


def free_land_tile_near(
    state: GameState, ruleset: Ruleset, x: int, y: int, max_radius: int
) -> GridCoord | None:
    """Nearest unoccupied passable tile by Chebyshev ring, the centre first."""

    center = GridCoord(x, y)
    for radius in range(max_radius + 1):
        for coord in ring(center, radius):
            if not in_bounds(coord, state.grid_size):
                continue
            tile = state.grid[coord.y][coord.x]
            if tile.unit_id is None and ruleset.is_passable(tile.terrain):
                return coord
    return None


# --- Units ----------------------------------------------------------------------


def _roster(state: GameState, owner_id: str) -> list[UnitID] | None:
    if owner_id == BARBARIAN_CIV_ID:
        return state.barbarian_units
    civ = state.civilizations.get(CivID(owner_id))
    return civ.units if civ is not None else None


def place_unit(state: GameState, unit: Unit) -> Unit:
    """Register ``unit`` in the store, on its tile and in its owner's roster.

    Raises:
        ValueError: If the target tile is outside the grid or occupied.
    """
    tile = tile_at(state, unit.x, unit.y)
    if tile is None:
        raise ValueError(f"tile ({unit.x}, {unit.y}) is outside the grid")
    if tile.unit_id is not None:
        raise ValueError(f"tile ({unit.x}, {unit.y}) is already occupied by {tile.unit_id}")
    state.units[unit.id] = unit
    tile.unit_id = unit.id
    roster = _roster(state, unit.owner_id)
    if roster is not None and unit.id not in roster:
        roster.append(unit.id)
    return unit


def spawn_unit(state: GameState, unit_def: UnitDef, owner_id: str, x: int, y: int) -> Unit:
    """Create a full-strength unit from its definition and place it."""

    prefix = "bu" if owner_id == BARBARIAN_CIV_ID else "u"
    unit = Unit(
        id=UnitID(state.ids.next(prefix)),
        type=unit_def.id,
        owner_id=CivID(owner_id),
        x=x,
        y=y,
        hp=unit_def.hp,
        max_hp=unit_def.hp,
        attack=unit_def.attack,
        defense=unit_def.defense,
        movement=unit_def.movement,
        movement_left=float(unit_def.movement),
        range=unit_def.range,
        is_great_person=unit_def.is_great_person,
    )
    return place_unit(state, unit)


def _abandon_work(tile: Tile, unit_id: str) -> None:
    if tile.improvement_work is not None and tile.improvement_work.worker_id == unit_id:
        tile.improvement_work = None


def move_unit(state: GameState, unit: Unit, x: int, y: int) -> None:
    """Relocate ``unit`` keeping tile occupancy in step with its position.

    Raises:
        ValueError: If the destination is outside the grid or held by another unit.
    """
    target = tile_at(state, x, y)
    if target is None:
        raise ValueError(f"tile ({x}, {y}) is outside the grid")
    if target.unit_id is not None and target.unit_id != unit.id:
        raise ValueError(f"tile ({x}, {y}) is already occupied by {target.unit_id}")
    origin = tile_at(state, unit.x, unit.y)
    if origin is not None and origin.unit_id == unit.id:
        origin.unit_id = None
        _abandon_work(origin, unit.id)
    unit.x = x
    unit.y = y
    target.unit_id = unit.id


def remove_unit(state: GameState, unit_id: str) -> Unit | None:
    """Remove a unit from its tile, then its owner's roster, then the store."""

    unit = state.units.get(UnitID(unit_id))
    if unit is None:
        return None
    tile = tile_at(state, unit.x, unit.y)
    if tile is not None and tile.unit_id == unit.id:
        tile.unit_id = None
        _abandon_work(tile, unit.id)
    roster = _roster(state, unit.owner_id)
    if roster is not None and unit.id in roster:
        roster.remove(unit.id)
    del state.units[unit.id]
    return unit


def damage_unit(state: GameState, unit: Unit, amount: int) -> bool:
    """Apply damage; a unit at or below zero hp is removed. Returns True if destroyed."""

    unit.hp -= amount
    if unit.hp <= 0:
        remove_unit(state, unit.id)
        return True
    return False


# --- Territory and fog ----------------------------------------------------------


def claim_tiles(state: GameState, civ_id: str, x: int, y: int, radius: int) -> int:
    """Claim every unowned tile within Manhattan ``radius``; owned tiles are never taken."""

    claimed = 0
    for coord in tiles_within_manhattan(GridCoord(x, y), radius, state.grid_size):
        tile = state.grid[coord.y][coord.x]
        if tile.owner_id is None:
            tile.owner_id = CivID(civ_id)
            claimed += 1
    return claimed


def reveal(state: GameState, civ_id: str, x: int, y: int, radius: int) -> None:
    civ = state.civilizations.get(CivID(civ_id))
    if civ is None:
        return
    for coord in tiles_within_square(GridCoord(x, y), radius, state.grid_size):
        civ.known_tiles.add(tile_key(coord.x, coord.y))


# --- Cities ---------------------------------------------------------------------


def next_city_name(state: GameState, ruleset: Ruleset, civ: Civilization) -> str:
    used = {city.name for city in state.cities.values()}
    civ_def = ruleset.civilization(civ.id)
    if civ_def is not None:
        for name in civ_def.city_names:
            if name not in used:
                return name
    return f"City {len(state.cities) + 1}"


def create_city(
    state: GameState,
    civ: Civilization,
    x: int,
    y: int,
    *,
    name: str,
    rules: RulesConfig = DEFAULT_RULES,
) -> City:
    """Found a city: register it, mark its tile, claim unowned tiles around it."""

    city = City(
        id=CityID(state.ids.next("c")),
        name=name,
        owner_id=civ.id,
        x=x,
        y=y,
        border_radius=rules.city.starting_border_radius,
        defense=rules.city.starting_defense,
    )
    if not civ.cities:
        city.buildings.append(rules.city.capital_building)
    state.cities[city.id] = city
    civ.cities.append(city.id)

    tile = state.grid[y][x]
    tile.city_id = city.id
    tile.owner_id = civ.id
    claim_tiles(state, civ.id, x, y, city.border_radius)
    reveal(state, civ.id, x, y, rules.city.founding_reveal_radius)
    return city


# --- Diplomacy ------------------------------------------------------------------


def set_relationship(
    state: GameState, civ_a: str, civ_b: str, status: RelationshipStatus
) -> bool:
    """Set the relationship between two civilizations in both directions.

    Returns ``False`` when either side is not a civilization (barbarians
    included) or the pair is the same civilization.
    """
    first = state.civilizations.get(CivID(civ_a))
    second = state.civilizations.get(CivID(civ_b))
    if first is None or second is None or first.id == second.id:
        return False
    first.relationships[second.id] = status
    second.relationships[first.id] = status
    return True


def declare_war(state: GameState, civ_a: str, civ_b: str) -> None:
    """Put a pair at war and stamp the turn of their latest fight."""

    if set_relationship(state, civ_a, civ_b, RelationshipStatus.WAR):
        state.civilizations[CivID(civ_a)].last_combat_turn[CivID(civ_b)] = state.turn
        state.civilizations[CivID(civ_b)].last_combat_turn[CivID(civ_a)] = state.turn


def make_peace(state: GameState, civ_a: str, civ_b: str) -> bool:
    return set_relationship(state, civ_a, civ_b, RelationshipStatus.NEUTRAL)


def at_war(civ: Civilization) -> bool:
    return any(status == RelationshipStatus.WAR for status in civ.relationships.values())


def is_hostile(state: GameState, civ_id: str, other_id: str) -> bool:
    """Whether units of ``other_id`` are enemies of ``civ_id``; allies and self are not."""

    if civ_id == other_id:
        return False
    civ = state.civilizations.get(CivID(civ_id))
    if civ is None:
        return True
    return civ.relationships.get(CivID(other_id)) != RelationshipStatus.ALLIED


# --- Event records --------------------------------------------------------------


def record_event(
    state: GameState, event_type: EventType, message: str, civ_id: str | None = None
) -> str:
    """Append a turn event and return its message for the caller's event list."""

    state.turn_events.append(
        TurnEvent(
            id=state.ids.next("e"),
            turn=state.turn,
            type=event_type,
            message=message,
            civ_id=CivID(civ_id) if civ_id is not None else None,
        )
    )
    return message


def notify(
    state: GameState,
    clock: Callable[[], datetime],
    event_type: EventType,
    message: str,
    *,
    civ_id: str | None = None,
    x: int | None = None,
    y: int | None = None,
) -> None:
    state.notifications.append(
        GameNotification(
            id=state.ids.next("n"),
            turn=state.turn,
            type=event_type,
            message=message,
            timestamp=clock(),
            civ_id=CivID(civ_id) if civ_id is not None else None,
            x=x,
            y=y,
        )
    )


def pan_camera(
    state: GameState,
    event_type: EventType,
    x: int,
    y: int,
    priority: CameraPriority = CameraPriority.MEDIUM,
) -> None:
    state.camera_events.append(
        CameraEvent(type=event_type, x=x, y=y, priority=priority, turn=state.turn)
    )
