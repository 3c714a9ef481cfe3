"""Action legality checks.

:func:`validate_action` is a pure predicate: it never mutates state and
never raises for an illegal action, it only answers ``False``.
"""

from __future__ import annotations

from typing import assert_never

from agentciv.domain import research, world
from agentciv.domain.actions import (
    Action,
    Attack,
    Build,
    BuildImprovement,
    ChangeGovernment,
    EstablishTradeRoute,
    ExpendGreatPerson,
    Fortify,
    FoundCity,
    MoveUnit,
    RangedAttack,
    SetResearch,
    UpgradeUnit,
)
from agentciv.domain.context import EngineContext
from agentciv.domain.enums import GreatPersonAbility, ProductionKind, TerrainType
from agentciv.domain.models import City, Civilization, GameState, Unit
from agentciv.utils.grid_math import GridCoord, manhattan

UNSETTLEABLE_TERRAIN = frozenset({TerrainType.WATER, TerrainType.MOUNTAIN})


def validate_action(
    state: GameState, action: Action, civ_id: str, context: EngineContext
) -> bool:
    """Return whether ``action`` is currently legal for ``civ_id``."""

    civ = state.civilizations.get(civ_id)
    if civ is None or not civ.is_alive:
        return False

    match action:
        case MoveUnit():
            return _validate_move(state, action, civ, context)
        case Attack():
            return _validate_attack(state, action, civ, context)
        case RangedAttack():
            return _validate_ranged_attack(state, action, civ)
        case FoundCity():
            return _validate_found_city(state, action, civ, context)
        case Build():
            return _validate_build(state, action, civ, context)
        case SetResearch():
            return _validate_set_research(action, civ, context)
        case BuildImprovement():
            return _validate_build_improvement(state, action, civ, context)
        case Fortify():
            return _validate_fortify(state, action, civ, context)
        case UpgradeUnit():
            return _validate_upgrade(state, action, civ, context)
        case EstablishTradeRoute():
            return _validate_trade_route(state, action, civ, context)
        case ChangeGovernment():
            return _validate_change_government(action, civ, context)
        case ExpendGreatPerson():
            return _validate_expend_great_person(state, action, civ, context)
        case _:
            assert_never(action)


# --- shared checks --------------------------------------------------------------


def _unit_on_trade_route(state: GameState, unit_id: str) -> bool:
    return any(route.unit_id == unit_id for route in state.trade_routes.values())


def _ready_unit(state: GameState, unit_id: str, civ: Civilization) -> Unit | None:
    """Own unit with movement left that is not committed to a trade route."""

    unit = state.units.get(unit_id)
    if unit is None or unit.owner_id != civ.id:
        return None
    if unit.movement_left <= 0:
        return None
    if _unit_on_trade_route(state, unit.id):
        return None
    return unit


def _own_city(state: GameState, city_id: str, civ: Civilization) -> City | None:
    city = state.cities.get(city_id)
    if city is None or city.owner_id != civ.id:
        return None
    return city


def owns_resource(state: GameState, civ_id: str, resource: str) -> bool:
    return any(
        tile.owner_id == civ_id and tile.resource == resource
        for row in state.grid
        for tile in row
    )


# --- per-kind rules -------------------------------------------------------------


def _validate_move(
    state: GameState, action: MoveUnit, civ: Civilization, context: EngineContext
) -> bool:
    unit = _ready_unit(state, action.unit_id, civ)
    if unit is None:
        return False
    target = world.tile_at(state, action.target_x, action.target_y)
    if target is None or target.unit_id is not None:
        return False
    path = context.find_path(
        state, unit.x, unit.y, action.target_x, action.target_y, unit.movement_left, civ.id
    )
    return path is not None and len(path) >= 2


def _validate_attack(
    state: GameState, action: Attack, civ: Civilization, context: EngineContext
) -> bool:
    unit = _ready_unit(state, action.unit_id, civ)
    if unit is None:
        return False
    unit_def = context.ruleset.unit(unit.type)
    if unit_def is None or not unit_def.can_attack:
        return False
    target = state.units.get(action.target_unit_id)
    if target is None or not world.is_hostile(state, civ.id, target.owner_id):
        return False
    return manhattan(GridCoord(unit.x, unit.y), GridCoord(target.x, target.y)) == 1


def _validate_ranged_attack(state: GameState, action: RangedAttack, civ: Civilization) -> bool:
    unit = _ready_unit(state, action.unit_id, civ)
    if unit is None or unit.range <= 0:
        return False
    target = world.unit_at(state, action.target_x, action.target_y)
    if target is None or not world.is_hostile(state, civ.id, target.owner_id):
        return False
    distance = manhattan(GridCoord(unit.x, unit.y), GridCoord(target.x, target.y))
    return 1 <= distance <= unit.range


def _validate_found_city(
    state: GameState, action: FoundCity, civ: Civilization, context: EngineContext
) -> bool:
    unit = _ready_unit(state, action.unit_id, civ)
    if unit is None:
        return False
    unit_def = context.ruleset.unit(unit.type)
    if unit_def is None or not unit_def.can_found_city:
        return False
    tile = state.grid[unit.y][unit.x]
    if tile.terrain in UNSETTLEABLE_TERRAIN or tile.city_id is not None:
        return False
    return tile.owner_id is None or tile.owner_id == civ.id


def _validate_build(
    state: GameState, action: Build, civ: Civilization, context: EngineContext
) -> bool:
    city = _own_city(state, action.city_id, civ)
    if city is None or city.production is not None:
        return False
    ruleset = context.ruleset
    researched = set(civ.researched_techs)

    if action.build_type == ProductionKind.UNIT:
        unit_def = ruleset.unit(action.target)
        if unit_def is None or not unit_def.buildable or unit_def.is_great_person:
            return False
        if unit_def.tech is not None and unit_def.tech not in researched:
            return False
        if unit_def.resource is not None and not owns_resource(state, civ.id, unit_def.resource):
            return False
        return True

    building = ruleset.building(action.target)
    if building is None or not building.buildable:
        return False
    if building.id in city.buildings:
        return False
    if building.tech is not None and building.tech not in researched:
        return False
    if building.requires_building is not None and building.requires_building not in city.buildings:
        return False
    return True


def _validate_set_research(action: SetResearch, civ: Civilization, context: EngineContext) -> bool:
    tech = context.ruleset.tech(action.tech_id)
    if tech is None or tech.id in civ.researched_techs:
        return False
    return all(prereq in civ.researched_techs for prereq in tech.prerequisites)


def _validate_build_improvement(
    state: GameState, action: BuildImprovement, civ: Civilization, context: EngineContext
) -> bool:
    unit = _ready_unit(state, action.unit_id, civ)
    if unit is None:
        return False
    unit_def = context.ruleset.unit(unit.type)
    if unit_def is None or not unit_def.can_build_improvements:
        return False
    improvement = context.ruleset.improvement(action.improvement)
    if improvement is None:
        return False
    tile = state.grid[unit.y][unit.x]
    if tile.terrain not in improvement.valid_terrain:
        return False
    return tile.improvement is None and tile.improvement_work is None


def _validate_fortify(
    state: GameState, action: Fortify, civ: Civilization, context: EngineContext
) -> bool:
    unit = _ready_unit(state, action.unit_id, civ)
    if unit is None:
        return False
    unit_def = context.ruleset.unit(unit.type)
    if unit_def is None:
        return False
    return not (unit_def.can_found_city or unit_def.can_build_improvements)


def _validate_upgrade(
    state: GameState, action: UpgradeUnit, civ: Civilization, context: EngineContext
) -> bool:
    unit = _ready_unit(state, action.unit_id, civ)
    if unit is None:
        return False
    current = context.ruleset.unit(unit.type)
    if current is None or current.obsolete_by != action.target_type:
        return False
    if current.upgrade_cost is None or civ.gold < current.upgrade_cost:
        return False
    target = context.ruleset.unit(action.target_type)
    if target is None:
        return False
    return target.tech is None or target.tech in civ.researched_techs


def _validate_trade_route(
    state: GameState, action: EstablishTradeRoute, civ: Civilization, context: EngineContext
) -> bool:
    unit = _ready_unit(state, action.unit_id, civ)
    if unit is None:
        return False
    unit_def = context.ruleset.unit(unit.type)
    if unit_def is None or not unit_def.can_establish_trade:
        return False
    home_id = state.grid[unit.y][unit.x].city_id
    if home_id is None or _own_city(state, home_id, civ) is None:
        return False
    target = state.cities.get(action.target_city_id)
    return target is not None and target.id != home_id


def _validate_change_government(
    action: ChangeGovernment, civ: Civilization, context: EngineContext
) -> bool:
    government = context.ruleset.government(action.government)
    if government is None or government.id == civ.government:
        return False
    if civ.anarchy_turns > 0:
        return False
    return government.tech is None or government.tech in civ.researched_techs


def _validate_expend_great_person(
    state: GameState, action: ExpendGreatPerson, civ: Civilization, context: EngineContext
) -> bool:
    unit = _ready_unit(state, action.unit_id, civ)
    if unit is None or not unit.is_great_person:
        return False
    person = context.ruleset.great_person_for_unit(unit.type)
    if person is None or person.ability != action.ability:
        return False

    match action.ability:
        case GreatPersonAbility.INSTANT_RESEARCH:
            return civ.current_research is not None or bool(
                research.researchable(civ, context.ruleset)
            )
        case GreatPersonAbility.RUSH_PRODUCTION:
            return any(
                city.production is not None
                for city_id in civ.cities
                if (city := state.cities.get(city_id)) is not None
            )
        case GreatPersonAbility.GOLDEN_AGE:
            return civ.golden_age_turns == 0
        case GreatPersonAbility.COMBAT_BONUS | GreatPersonAbility.GOLD_BONUS:
            return True
        case _:
            assert_never(action.ability)
