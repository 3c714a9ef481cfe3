"""Great-person point tracks and spawning.

Scientists, artists, merchants and engineers are fed by the science,
culture, gold and production that a civilization's buildings yield. Generals
are fed by combat damage dealt (see :func:`add_general_points`). Each track
has its own threshold, multiplied after every spawn.
"""

from __future__ import annotations

from agentciv.domain import world
from agentciv.domain.context import EngineContext
from agentciv.domain.enums import CameraPriority, EventType, GreatPersonType
from agentciv.domain.models import Civilization, GameState, Unit


def threshold(civ: Civilization, kind: GreatPersonType, context: EngineContext) -> int:
    return civ.great_people_thresholds.get(kind, context.rules.great_people.base_threshold)


def add_general_points(civ: Civilization, damage: int) -> None:
    civ.great_people_progress[GreatPersonType.GENERAL] = (
        civ.great_people_progress.get(GreatPersonType.GENERAL, 0) + max(0, damage)
    )


def building_points(
    state: GameState, civ: Civilization, context: EngineContext
) -> dict[GreatPersonType, int]:
    points = {
        GreatPersonType.SCIENTIST: 0,
        GreatPersonType.ARTIST: 0,
        GreatPersonType.MERCHANT: 0,
        GreatPersonType.ENGINEER: 0,
    }
    for city_id in civ.cities:
        city = state.cities.get(city_id)
        if city is None:
            continue
        for building_id in city.buildings:
            building = context.ruleset.building(building_id)
            if building is None:
                continue
            points[GreatPersonType.SCIENTIST] += building.science
            points[GreatPersonType.ARTIST] += building.culture
            points[GreatPersonType.MERCHANT] += building.gold
            points[GreatPersonType.ENGINEER] += building.production
    return points


def spawn_great_person(
    state: GameState, civ: Civilization, kind: GreatPersonType, context: EngineContext
) -> Unit | None:
    """Place a great person near the capital; ``None`` if there is no room."""

    person = context.ruleset.great_person(kind)
    if person is None:
        return None
    unit_def = context.ruleset.unit(person.unit_type)
    capital = world.capital_of(state, civ)
    if unit_def is None or capital is None:
        return None
    spot = world.free_land_tile_near(
        state,
        context.ruleset,
        capital.x,
        capital.y,
        context.rules.great_people.spawn_search_radius,
    )
    if spot is None:
        return None
    return world.spawn_unit(state, unit_def, civ.id, spot.x, spot.y)


def process_great_people(state: GameState, civ: Civilization, context: EngineContext) -> list[str]:
    events: list[str] = []
    for kind, amount in building_points(state, civ, context).items():
        civ.great_people_progress[kind] = civ.great_people_progress.get(kind, 0) + amount

    for kind in GreatPersonType:
        needed = threshold(civ, kind, context)
        if civ.great_people_progress.get(kind, 0) < needed:
            continue
        unit = spawn_great_person(state, civ, kind, context)
        if unit is None:
            continue
        civ.great_people_progress[kind] = 0
        civ.great_people_thresholds[kind] = round(
            needed * context.rules.great_people.threshold_multiplier
        )
        unit_def = context.ruleset.unit(unit.type)
        label = unit_def.name if unit_def is not None else unit.type
        message = world.record_event(
            state, EventType.GREAT_PERSON, f"A {label} is born in {civ.name}", civ.id
        )
        world.notify(
            state, context.clock, EventType.GREAT_PERSON, message, civ_id=civ.id, x=unit.x, y=unit.y
        )
        world.pan_camera(state, EventType.GREAT_PERSON, unit.x, unit.y, CameraPriority.HIGH)
        events.append(message)
    return events
