"""City-level turn steps: improvements, production, yields, growth and borders."""

from __future__ import annotations

import logging
import math

from agentciv.domain import world
from agentciv.domain.context import EngineContext
from agentciv.domain.enums import CameraPriority, EventType, ProductionKind, SpaceshipPart
from agentciv.domain.models import City, Civilization, GameState
from agentciv.utils.grid_math import GridCoord, in_bounds, neighbors8

logger = logging.getLogger(__name__)


def work_area(state: GameState, city: City) -> list[GridCoord]:
    """City tile plus its eight neighbours, minus tiles owned by other civilizations."""

    area = []
    for coord in [GridCoord(city.x, city.y), *neighbors8(GridCoord(city.x, city.y))]:
        if not in_bounds(coord, state.grid_size):
            continue
        owner = state.grid[coord.y][coord.x].owner_id
        if owner is None or owner == city.owner_id:
            area.append(coord)
    return area


# --- Improvements -----------------------------------------------------------------


def process_improvements(state: GameState, civ: Civilization, context: EngineContext) -> list[str]:
    """Advance improvement work for each worker still standing on its tile."""

    events: list[str] = []
    for unit_id in list(civ.units):
        unit = state.units.get(unit_id)
        if unit is None:
            continue
        tile = state.grid[unit.y][unit.x]
        work = tile.improvement_work
        if work is None or work.worker_id != unit.id:
            continue
        work.turns_remaining -= 1
        if work.turns_remaining > 0:
            continue
        tile.improvement = work.improvement
        tile.improvement_work = None
        improvement = context.ruleset.improvement(work.improvement)
        label = improvement.name if improvement is not None else str(work.improvement)
        events.append(
            world.record_event(
                state,
                EventType.PRODUCTION,
                f"{civ.name} completed a {label} at ({tile.x}, {tile.y})",
                civ.id,
            )
        )
    return events


# --- Production -------------------------------------------------------------------


def effective_production(
    civ: Civilization, city: City, context: EngineContext, *, golden_age: bool
) -> int:
    """Production applied this turn after government, golden-age and unhappiness modifiers."""

    base = city.production_per_turn
    if base <= 0:
        return 0
    multiplier = 1.0
    government = context.ruleset.government(civ.government)
    if government is not None and civ.anarchy_turns == 0:
        multiplier += government.effects.production_bonus
    if golden_age:
        multiplier *= context.rules.economy.golden_age_production_multiplier
    if civ.happiness < 0:
        multiplier *= context.rules.economy.unhappy_production_multiplier
    return max(1, math.floor(base * multiplier))


def complete_production(
    state: GameState, civ: Civilization, city: City, context: EngineContext
) -> list[str]:
    """Deliver the city's order. A unit with no free tile to spawn on keeps waiting."""

    order = city.production
    if order is None:
        return []
    ruleset = context.ruleset

    if order.kind == ProductionKind.UNIT:
        unit_def = ruleset.unit(order.target)
        if unit_def is None:
            logger.warning("city %s dropped unknown unit order %s", city.id, order.target)
            city.production = None
            return []
        spot = world.free_land_tile_near(state, ruleset, city.x, city.y, 1)
        if spot is None:
            order.progress = max(order.progress, order.cost)
            return []
        unit = world.spawn_unit(state, unit_def, civ.id, spot.x, spot.y)
        world.reveal(state, civ.id, unit.x, unit.y, unit_def.vision)
        city.production = None
        message = world.record_event(
            state, EventType.PRODUCTION, f"{city.name} produced a {unit_def.name}", civ.id
        )
        world.notify(state, context.clock, EventType.PRODUCTION, message, civ_id=civ.id, x=city.x, y=city.y)
        return [message]

    building = ruleset.building(order.target)
    city.production = None
    if building is None:
        logger.warning("city %s dropped unknown building order %s", city.id, order.target)
        return []
    if building.id not in city.buildings:
        city.buildings.append(building.id)
        city.defense += building.defense
    if building.spaceship_part is not None:
        _set_spaceship_part(civ, building.spaceship_part)
    message = world.record_event(
        state, EventType.PRODUCTION, f"{city.name} completed {building.name}", civ.id
    )
    world.notify(state, context.clock, EventType.PRODUCTION, message, civ_id=civ.id, x=city.x, y=city.y)
    if building.spaceship_part is not None:
        world.pan_camera(state, EventType.PRODUCTION, city.x, city.y, CameraPriority.HIGH)
    return [message]


def _set_spaceship_part(civ: Civilization, part: SpaceshipPart) -> None:
    match part:
        case SpaceshipPart.BOOSTER:
            civ.spaceship_parts.booster = True
        case SpaceshipPart.COCKPIT:
            civ.spaceship_parts.cockpit = True
        case SpaceshipPart.ENGINE:
            civ.spaceship_parts.engine = True


def process_production(
    state: GameState, civ: Civilization, context: EngineContext, *, golden_age: bool
) -> list[str]:
    events: list[str] = []
    for city_id in list(civ.cities):
        city = state.cities.get(city_id)
        if city is None or city.production is None:
            continue
        order = city.production
        if order.progress < order.cost:
            order.progress += effective_production(civ, city, context, golden_age=golden_age)
        if order.progress >= order.cost:
            events.extend(complete_production(state, civ, city, context))
    return events


# --- Yields -----------------------------------------------------------------------


def update_city_yields(state: GameState, city: City, context: EngineContext) -> list[str]:
    """Recompute per-turn yields; the first city to see a natural wonder discovers it."""

    ruleset = context.ruleset
    rules = context.rules.city
    events: list[str] = []

    center = state.grid[city.y][city.x]
    terrain = ruleset.terrains.get(center.terrain)
    food = rules.base_food + city.population
    production = rules.base_production + city.population // 2
    gold = rules.base_gold + city.population * 3 // 2
    science = 0
    culture = rules.base_culture
    if terrain is not None:
        food += terrain.food
        production += terrain.production
        gold += terrain.gold

    for coord in work_area(state, city):
        tile = state.grid[coord.y][coord.x]
        if tile.improvement is not None:
            improvement = ruleset.improvement(tile.improvement)
            if improvement is not None:
                food += improvement.food
                production += improvement.production
                gold += improvement.gold
        if tile.resource is not None:
            resource = ruleset.resource(tile.resource)
            if resource is not None:
                food += resource.food
                production += resource.production
                gold += resource.gold
        if tile.natural_wonder_id is not None:
            wonder = state.natural_wonders.get(tile.natural_wonder_id)
            if wonder is None:
                continue
            food += wonder.bonuses.get("food", 0)
            production += wonder.bonuses.get("production", 0)
            gold += wonder.bonuses.get("gold", 0)
            science += wonder.bonuses.get("science", 0)
            culture += wonder.bonuses.get("culture", 0)
            if wonder.discovered_by is None:
                wonder.discovered_by = city.owner_id
                city.local_happiness += wonder.discovery_happiness
                owner = state.civilizations.get(city.owner_id)
                owner_name = owner.name if owner is not None else city.owner_id
                message = world.record_event(
                    state, EventType.WONDER, f"{owner_name} discovered {wonder.name}", city.owner_id
                )
                world.notify(
                    state,
                    context.clock,
                    EventType.WONDER,
                    message,
                    civ_id=city.owner_id,
                    x=wonder.x,
                    y=wonder.y,
                )
                world.pan_camera(state, EventType.WONDER, wonder.x, wonder.y, CameraPriority.MEDIUM)
                events.append(message)

    for building_id in city.buildings:
        building = ruleset.building(building_id)
        if building is None:
            continue
        food += building.food
        production += building.production
        gold += building.gold
        science += building.science
        culture += building.culture

    civ_def = ruleset.civilization(city.owner_id)
    if civ_def is not None:
        production += civ_def.bonuses.production

    city.food_per_turn = max(0, food)
    city.production_per_turn = max(0, production)
    city.gold_per_turn = max(0, gold)
    city.science_per_turn = max(0, science)
    city.culture_per_turn = max(0, culture)
    return events


# --- Growth and borders -----------------------------------------------------------


def _growth_interval(city: City, context: EngineContext) -> int:
    for building_id in city.buildings:
        building = context.ruleset.building(building_id)
        if building is not None and building.pop_growth_bonus:
            return context.rules.city.boosted_growth_interval
    return context.rules.city.growth_interval


def process_growth(state: GameState, civ: Civilization, context: EngineContext) -> list[str]:
    events: list[str] = []
    for city_id in civ.cities:
        city = state.cities.get(city_id)
        if city is None:
            continue
        surplus = city.food_per_turn - city.population * context.rules.city.food_per_population
        if surplus > 0 and state.turn % _growth_interval(city, context) == 0:
            city.population += 1
            events.append(
                world.record_event(
                    state,
                    EventType.GROWTH,
                    f"{city.name} grew to population {city.population}",
                    civ.id,
                )
            )
    return events


def border_threshold(city: City, context: EngineContext) -> int:
    return context.rules.city.border_culture_base * city.border_radius


def process_culture(state: GameState, civ: Civilization, context: EngineContext) -> list[str]:
    events: list[str] = []
    for city_id in civ.cities:
        city = state.cities.get(city_id)
        if city is None:
            continue
        city.culture_stored += max(0, city.culture_per_turn)
        if city.border_radius >= context.rules.city.max_border_radius:
            continue
        needed = border_threshold(city, context)
        if city.culture_stored < needed:
            continue
        city.culture_stored -= needed
        city.border_radius += 1
        claimed = world.claim_tiles(state, civ.id, city.x, city.y, city.border_radius)
        events.append(
            world.record_event(
                state,
                EventType.BORDERS,
                f"{city.name}'s borders expanded ({claimed} tiles claimed)",
                civ.id,
            )
        )
    return events
