"""Action execution: state transitions for validated actions.

:func:`execute_action` never re-validates. If an entity the action refers to
vanished earlier in the same batch, the handler returns ``[]`` without
touching state.
"""

from __future__ import annotations

import logging
from typing import assert_never

from agentciv.domain import cities, golden_age, great_people, research, world
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
from agentciv.domain.combat import CombatOutcome
from agentciv.domain.context import EngineContext
from agentciv.domain.enums import CameraPriority, EventType, GreatPersonAbility, ProductionKind
from agentciv.domain.models import (
    BARBARIAN_CIV_ID,
    CityID,
    Civilization,
    CivID,
    CombatEffect,
    CombatEvent,
    GameState,
    ImprovementWork,
    ProductionOrder,
    TradeRoute,
    TradeRouteID,
    Unit,
    UnitID,
)
from agentciv.utils.grid_math import GridCoord, manhattan
from agentciv.utils.rng import generate_seed

logger = logging.getLogger(__name__)


def execute_action(
    state: GameState, action: Action, civ_id: str, seed: int, context: EngineContext
) -> list[str]:
    """Apply one pre-validated action and return human-readable events."""

    civ = state.civilizations.get(civ_id)
    if civ is None:
        return []

    match action:
        case MoveUnit():
            return _execute_move(state, action, civ, context)
        case Attack():
            return _execute_attack(state, action, civ, seed, context)
        case RangedAttack():
            return _execute_ranged_attack(state, action, civ, seed, context)
        case FoundCity():
            return _execute_found_city(state, action, civ, context)
        case Build():
            return _execute_build(state, action, civ, context)
        case SetResearch():
            return _execute_set_research(action, civ, context)
        case BuildImprovement():
            return _execute_build_improvement(state, action, civ, context)
        case Fortify():
            return _execute_fortify(state, action, civ)
        case UpgradeUnit():
            return _execute_upgrade(state, action, civ, context)
        case EstablishTradeRoute():
            return _execute_trade_route(state, action, civ, context)
        case ChangeGovernment():
            return _execute_change_government(state, action, civ, context)
        case ExpendGreatPerson():
            return _execute_expend_great_person(state, action, civ, context)
        case _:
            assert_never(action)


def _own_unit(state: GameState, unit_id: str, civ: Civilization) -> Unit | None:
    unit = state.units.get(UnitID(unit_id))
    if unit is None or unit.owner_id != civ.id:
        return None
    return unit


def _unit_label(unit: Unit, context: EngineContext) -> str:
    unit_def = context.ruleset.unit(unit.type)
    return unit_def.name if unit_def is not None else unit.type


def _owner_name(state: GameState, civ_id: str) -> str:
    if civ_id == BARBARIAN_CIV_ID:
        return "Barbarians"
    civ = state.civilizations.get(CivID(civ_id))
    return civ.name if civ is not None else civ_id


# --- Movement -------------------------------------------------------------------


def _execute_move(
    state: GameState, action: MoveUnit, civ: Civilization, context: EngineContext
) -> list[str]:
    unit = _own_unit(state, action.unit_id, civ)
    if unit is None:
        return []
    path = context.find_path(
        state, unit.x, unit.y, action.target_x, action.target_y, unit.movement_left, civ.id
    )
    if path is None or len(path) < 2:
        return []
    end = path[-1]
    destination = state.grid[end.y][end.x]
    if destination.unit_id is not None and destination.unit_id != unit.id:
        return []

    cost = sum(world.tile_move_cost(state, context.ruleset, coord) for coord in path[1:])
    world.move_unit(state, unit, end.x, end.y)
    unit.movement_left = max(0.0, unit.movement_left - cost)
    unit.fortified = False
    unit.acted_this_turn = True

    unit_def = context.ruleset.unit(unit.type)
    vision = unit_def.vision if unit_def is not None else 1
    world.reveal(state, civ.id, unit.x, unit.y, vision)
    return [f"{civ.name}'s {_unit_label(unit, context)} moved to ({end.x}, {end.y})"]


# --- Combat ---------------------------------------------------------------------


def apply_combat(state: GameState, outcome: CombatOutcome, context: EngineContext) -> list[str]:
    """Apply a resolver outcome: damage, removals, war state, weariness and logs."""

    attacker = state.units.get(UnitID(outcome.attacker_id))
    defender = state.units.get(UnitID(outcome.defender_id))
    if attacker is None or defender is None:
        return []

    attacker_label = _unit_label(attacker, context)
    defender_label = _unit_label(defender, context)
    attacker_name = _owner_name(state, outcome.attacker_civ_id)
    defender_name = _owner_name(state, outcome.defender_civ_id)
    ax, ay, dx, dy = attacker.x, attacker.y, defender.x, defender.y

    defender_destroyed = world.damage_unit(state, defender, outcome.damage_to_defender)
    attacker_destroyed = False
    if outcome.damage_to_attacker > 0:
        attacker_destroyed = world.damage_unit(state, attacker, outcome.damage_to_attacker)
    if not attacker_destroyed:
        attacker.movement_left = 0.0
        attacker.acted_this_turn = True
        attacker.fortified = False

    weariness = context.rules.happiness.war_weariness_per_combat
    for civ_id in (outcome.attacker_civ_id, outcome.defender_civ_id):
        side = state.civilizations.get(CivID(civ_id))
        if side is not None:
            side.war_weariness += weariness
    world.declare_war(state, outcome.attacker_civ_id, outcome.defender_civ_id)

    attacker_civ = state.civilizations.get(CivID(outcome.attacker_civ_id))
    if attacker_civ is not None:
        great_people.add_general_points(attacker_civ, outcome.damage_to_defender)
    defender_civ = state.civilizations.get(CivID(outcome.defender_civ_id))
    if defender_civ is not None:
        great_people.add_general_points(defender_civ, outcome.damage_to_attacker)

    state.combat_log.append(
        CombatEvent(
            turn=state.turn,
            attacker_id=attacker.id,
            defender_id=defender.id,
            attacker_civ_id=CivID(outcome.attacker_civ_id),
            defender_civ_id=CivID(outcome.defender_civ_id),
            x=dx,
            y=dy,
            damage_to_defender=outcome.damage_to_defender,
            damage_to_attacker=outcome.damage_to_attacker,
            attacker_destroyed=attacker_destroyed,
            defender_destroyed=defender_destroyed,
            ranged=outcome.ranged,
        )
    )
    state.combat_effects.append(
        CombatEffect(
            id=state.ids.next("fx"),
            attacker_x=ax,
            attacker_y=ay,
            defender_x=dx,
            defender_y=dy,
            damage=outcome.damage_to_defender,
            attacker_civ_id=CivID(outcome.attacker_civ_id),
            defender_civ_id=CivID(outcome.defender_civ_id),
            timestamp=context.clock(),
            defender_destroyed=defender_destroyed,
        )
    )

    verb = "bombarded" if outcome.ranged else "attacked"
    events = [
        world.record_event(
            state,
            EventType.COMBAT,
            f"{attacker_name}'s {attacker_label} {verb} {defender_name}'s {defender_label} "
            f"(dealt {outcome.damage_to_defender}, took {outcome.damage_to_attacker})",
            outcome.attacker_civ_id if attacker_civ is not None else None,
        )
    ]
    if defender_destroyed:
        events.append(
            world.record_event(
                state,
                EventType.UNIT_DESTROYED,
                f"{defender_name}'s {defender_label} was destroyed",
                outcome.defender_civ_id if defender_civ is not None else None,
            )
        )
    if attacker_destroyed:
        events.append(
            world.record_event(
                state,
                EventType.UNIT_DESTROYED,
                f"{attacker_name}'s {attacker_label} was destroyed",
                outcome.attacker_civ_id if attacker_civ is not None else None,
            )
        )
    for side in (attacker_civ, defender_civ):
        if side is not None:
            world.notify(state, context.clock, EventType.COMBAT, events[0], civ_id=side.id, x=dx, y=dy)
    world.pan_camera(state, EventType.COMBAT, dx, dy, CameraPriority.HIGH)
    return events


def _execute_attack(
    state: GameState, action: Attack, civ: Civilization, seed: int, context: EngineContext
) -> list[str]:
    attacker = _own_unit(state, action.unit_id, civ)
    defender = state.units.get(UnitID(action.target_unit_id))
    if attacker is None or defender is None:
        return []
    combat_seed = generate_seed(seed, state.turn, f"combat:{attacker.id}:{defender.id}")
    outcome = context.resolve_combat(state, attacker.id, defender.id, combat_seed, ranged=False)
    if outcome is None:
        return []
    return apply_combat(state, outcome, context)


def _execute_ranged_attack(
    state: GameState, action: RangedAttack, civ: Civilization, seed: int, context: EngineContext
) -> list[str]:
    attacker = _own_unit(state, action.unit_id, civ)
    defender = world.unit_at(state, action.target_x, action.target_y)
    if attacker is None or defender is None or defender.owner_id == civ.id:
        return []
    combat_seed = generate_seed(seed, state.turn, f"ranged:{attacker.id}:{defender.id}")
    outcome = context.resolve_combat(state, attacker.id, defender.id, combat_seed, ranged=True)
    if outcome is None:
        return []
    return apply_combat(state, outcome, context)


# --- Cities ---------------------------------------------------------------------


def _execute_found_city(
    state: GameState, action: FoundCity, civ: Civilization, context: EngineContext
) -> list[str]:
    settler = _own_unit(state, action.unit_id, civ)
    if settler is None:
        return []
    x, y = settler.x, settler.y
    if state.grid[y][x].city_id is not None:
        return []
    name = action.name or world.next_city_name(state, context.ruleset, civ)
    world.remove_unit(state, settler.id)
    city = world.create_city(state, civ, x, y, name=name, rules=context.rules)
    events = [
        world.record_event(state, EventType.CITY_FOUNDED, f"{civ.name} founded {city.name}", civ.id)
    ]
    events.extend(cities.update_city_yields(state, city, context))
    world.notify(state, context.clock, EventType.CITY_FOUNDED, events[0], civ_id=civ.id, x=x, y=y)
    world.pan_camera(state, EventType.CITY_FOUNDED, x, y, CameraPriority.HIGH)
    return events


def _execute_build(
    state: GameState, action: Build, civ: Civilization, context: EngineContext
) -> list[str]:
    city = state.cities.get(CityID(action.city_id))
    if city is None or city.owner_id != civ.id:
        return []
    if action.build_type == ProductionKind.UNIT:
        target = context.ruleset.unit(action.target)
    else:
        target = context.ruleset.building(action.target)
    if target is None:
        return []
    city.production = ProductionOrder(
        kind=action.build_type, target=target.id, progress=0, cost=target.cost
    )
    return [f"{city.name} started building {target.name}"]


def _execute_set_research(
    action: SetResearch, civ: Civilization, context: EngineContext
) -> list[str]:
    tech = context.ruleset.tech(action.tech_id)
    if tech is None:
        return []
    research.switch_research(civ, tech, context)
    return [f"{civ.name} is now researching {tech.name}"]


def _execute_build_improvement(
    state: GameState, action: BuildImprovement, civ: Civilization, context: EngineContext
) -> list[str]:
    worker = _own_unit(state, action.unit_id, civ)
    improvement = context.ruleset.improvement(action.improvement)
    if worker is None or improvement is None:
        return []
    tile = state.grid[worker.y][worker.x]
    tile.improvement_work = ImprovementWork(
        improvement=improvement.id,
        turns_remaining=improvement.turns_to_complete,
        worker_id=worker.id,
    )
    worker.movement_left = 0.0
    worker.acted_this_turn = True
    return [f"{civ.name}'s worker began a {improvement.name} at ({tile.x}, {tile.y})"]


def _execute_fortify(state: GameState, action: Fortify, civ: Civilization) -> list[str]:
    unit = _own_unit(state, action.unit_id, civ)
    if unit is None:
        return []
    unit.fortified = True
    unit.movement_left = 0.0
    return [f"{civ.name}'s {unit.type} fortified at ({unit.x}, {unit.y})"]


def _execute_upgrade(
    state: GameState, action: UpgradeUnit, civ: Civilization, context: EngineContext
) -> list[str]:
    unit = _own_unit(state, action.unit_id, civ)
    if unit is None:
        return []
    current = context.ruleset.unit(unit.type)
    target = context.ruleset.unit(action.target_type)
    if current is None or target is None or current.upgrade_cost is None:
        return []
    civ.gold -= current.upgrade_cost
    ratio = unit.hp / unit.max_hp if unit.max_hp > 0 else 1.0
    unit.type = target.id
    unit.max_hp = target.hp
    unit.hp = max(1, round(target.hp * ratio))
    unit.attack = target.attack
    unit.defense = target.defense
    unit.movement = target.movement
    unit.range = target.range
    unit.movement_left = 0.0
    return [f"{civ.name} upgraded a {current.name} to {target.name}"]


def _execute_trade_route(
    state: GameState, action: EstablishTradeRoute, civ: Civilization, context: EngineContext
) -> list[str]:
    caravan = _own_unit(state, action.unit_id, civ)
    if caravan is None:
        return []
    home_id = state.grid[caravan.y][caravan.x].city_id
    home = state.cities.get(home_id) if home_id is not None else None
    target = state.cities.get(CityID(action.target_city_id))
    if home is None or target is None:
        return []

    rules = context.rules.trade
    distance = manhattan(GridCoord(home.x, home.y), GridCoord(target.x, target.y))
    route = TradeRoute(
        id=TradeRouteID(state.ids.next("tr")),
        owner_id=civ.id,
        from_city_id=home.id,
        to_city_id=target.id,
        unit_id=caravan.id,
        gold_per_turn=max(1, rules.base_gold + distance // rules.distance_divisor),
        turns_remaining=rules.duration_turns,
    )
    state.trade_routes[route.id] = route
    caravan.movement_left = 0.0
    caravan.acted_this_turn = True
    return [
        world.record_event(
            state,
            EventType.TRADE,
            f"{civ.name} opened a trade route from {home.name} to {target.name} "
            f"(+{route.gold_per_turn} gold/turn)",
            civ.id,
        )
    ]


def _execute_change_government(
    state: GameState, action: ChangeGovernment, civ: Civilization, context: EngineContext
) -> list[str]:
    government = context.ruleset.government(action.government)
    if government is None:
        return []
    civ.government = government.id
    civ.anarchy_turns = context.rules.government.anarchy_turns
    message = world.record_event(
        state,
        EventType.GOVERNMENT,
        f"{civ.name} adopts {government.name} after {civ.anarchy_turns} turns of anarchy",
        civ.id,
    )
    world.notify(state, context.clock, EventType.GOVERNMENT, message, civ_id=civ.id)
    return [message]


# --- Great people ---------------------------------------------------------------


def _nearest_city_with_order(state: GameState, civ: Civilization, origin: Unit):
    candidates = [
        city
        for city_id in civ.cities
        if (city := state.cities.get(city_id)) is not None and city.production is not None
    ]
    if not candidates:
        return None
    here = GridCoord(origin.x, origin.y)
    return min(candidates, key=lambda c: (manhattan(here, GridCoord(c.x, c.y)), c.id))


def _execute_expend_great_person(
    state: GameState, action: ExpendGreatPerson, civ: Civilization, context: EngineContext
) -> list[str]:
    unit = _own_unit(state, action.unit_id, civ)
    if unit is None or not unit.is_great_person:
        return []
    label = _unit_label(unit, context)
    rules = context.rules.great_people
    events: list[str] = []

    match action.ability:
        case GreatPersonAbility.INSTANT_RESEARCH:
            events.extend(research.complete_research(state, civ, context))
        case GreatPersonAbility.GOLDEN_AGE:
            if golden_age.in_golden_age(civ):
                return []
            events.append(
                golden_age.start_golden_age(
                    state, civ, rules.golden_age_turns, context, counts_towards_threshold=False
                )
            )
        case GreatPersonAbility.COMBAT_BONUS:
            civ.combat_bonus_turns = rules.combat_bonus_turns
        case GreatPersonAbility.GOLD_BONUS:
            civ.gold += rules.gold_bonus
        case GreatPersonAbility.RUSH_PRODUCTION:
            city = _nearest_city_with_order(state, civ, unit)
            if city is None:
                return []
            order = city.production
            if order is None:
                return []
            order.progress = max(order.progress, order.cost)
            events.extend(cities.complete_production(state, civ, city, context))
        case _:
            assert_never(action.ability)

    world.remove_unit(state, unit.id)
    events.insert(
        0,
        world.record_event(
            state, EventType.GREAT_PERSON, f"{civ.name} expended a {label} ({action.ability})", civ.id
        ),
    )
    return events
