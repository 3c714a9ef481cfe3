"""Civilization economy steps: income, upkeep, attrition, healing, happiness, score."""

from __future__ import annotations

from agentciv.domain import world
from agentciv.domain.context import EngineContext
from agentciv.domain.enums import EventType, RelationshipStatus
from agentciv.domain.models import Civilization, GameState
from agentciv.domain.ruleset import GovernmentEffects

NO_EFFECTS = GovernmentEffects()


def government_effects(civ: Civilization, context: EngineContext) -> GovernmentEffects:
    """Active government modifiers; none apply during anarchy."""

    if civ.anarchy_turns > 0:
        return NO_EFFECTS
    government = context.ruleset.government(civ.government)
    return government.effects if government is not None else NO_EFFECTS


def tick_timers(civ: Civilization) -> bool:
    """Count down anarchy and combat-bonus timers.

    Returns whether the civilization was in anarchy at the start of the turn,
    so ``N`` anarchy turns suspend exactly ``N`` resolutions.
    """
    in_anarchy = civ.anarchy_turns > 0
    if civ.anarchy_turns > 0:
        civ.anarchy_turns -= 1
    if civ.combat_bonus_turns > 0:
        civ.combat_bonus_turns -= 1
    return in_anarchy


def collect_income(
    state: GameState,
    civ: Civilization,
    context: EngineContext,
    effects: GovernmentEffects,
    *,
    golden_age: bool,
) -> int:
    cities = [city for city_id in civ.cities if (city := state.cities.get(city_id)) is not None]
    income = float(sum(city.gold_per_turn for city in cities))
    civ_def = context.ruleset.civilization(civ.id)
    if civ_def is not None:
        income += civ_def.bonuses.gold
    income += effects.gold_per_city * len(cities)
    if golden_age:
        income *= context.rules.economy.golden_age_gold_multiplier

    for route in state.trade_routes.values():
        if route.owner_id != civ.id:
            continue
        if route.from_city_id not in state.cities or route.to_city_id not in state.cities:
            continue
        income += route.gold_per_turn * (1 + effects.trade_bonus)

    total = int(income)
    civ.gold += total
    return total


def pay_upkeep(
    state: GameState, civ: Civilization, context: EngineContext, effects: GovernmentEffects
) -> int:
    building_upkeep = 0
    for city_id in civ.cities:
        city = state.cities.get(city_id)
        if city is None:
            continue
        for building_id in city.buildings:
            building = context.ruleset.building(building_id)
            if building is not None:
                building_upkeep += building.upkeep

    unit_upkeep = 0
    for unit_id in civ.units:
        unit = state.units.get(unit_id)
        if unit is None:
            continue
        unit_def = context.ruleset.unit(unit.type)
        if unit_def is not None:
            unit_upkeep += unit_def.maintenance

    total = building_upkeep + round(unit_upkeep * (1 - effects.unit_maintenance_reduction))
    civ.gold -= total
    return total


def apply_attrition(state: GameState, civ: Civilization, context: EngineContext) -> list[str]:
    """Damage every unit once while the treasury is negative."""

    if civ.gold >= 0:
        return []
    events: list[str] = []
    damage = context.rules.economy.attrition_damage
    for unit_id in list(civ.units):
        unit = state.units.get(unit_id)
        if unit is None:
            continue
        if world.damage_unit(state, unit, damage):
            events.append(
                world.record_event(
                    state,
                    EventType.ECONOMY,
                    f"{civ.name}'s unpaid {unit.type} disbanded",
                    civ.id,
                )
            )
    return events


def reset_movement(state: GameState, civ: Civilization) -> None:
    for unit_id in civ.units:
        unit = state.units.get(unit_id)
        if unit is not None:
            unit.movement_left = float(unit.movement)


def heal_units(state: GameState, civ: Civilization, context: EngineContext) -> None:
    """Heal by location unless the unit acted; no healing while in debt."""

    rules = context.rules.healing
    for unit_id in civ.units:
        unit = state.units.get(unit_id)
        if unit is None:
            continue
        if civ.gold >= 0:
            tile = state.grid[unit.y][unit.x]
            if unit.acted_this_turn:
                amount = rules.acted
            elif tile.city_id is not None and tile.owner_id == civ.id:
                amount = rules.friendly_city
            elif tile.owner_id == civ.id:
                amount = rules.friendly_territory
            else:
                amount = rules.neutral
            unit.hp = min(unit.max_hp, unit.hp + amount)
        unit.acted_this_turn = False


def update_war_weariness(civ: Civilization, context: EngineContext) -> None:
    rules = context.rules.happiness
    if world.at_war(civ):
        civ.war_weariness += rules.war_weariness_per_war_turn
    else:
        civ.war_weariness = max(0, civ.war_weariness - rules.war_weariness_decay)


def expire_wars(state: GameState, context: EngineContext) -> list[str]:
    """End wars that saw no combat for a while, or whose other side was eliminated."""

    quiet_turns = context.rules.diplomacy.peace_after_quiet_turns
    events: list[str] = []
    for civ in sorted(state.civilizations.values(), key=lambda c: c.id):
        for other_id in sorted(civ.relationships):
            if civ.relationships[other_id] != RelationshipStatus.WAR:
                continue
            other = state.civilizations.get(other_id)
            if other is None:
                civ.relationships[other_id] = RelationshipStatus.NEUTRAL
                continue
            both_alive = civ.is_alive and other.is_alive
            last_combat = civ.last_combat_turn.get(other_id, 0)
            if both_alive and state.turn - last_combat < quiet_turns:
                continue
            world.make_peace(state, civ.id, other_id)
            if both_alive:
                events.append(
                    world.record_event(
                        state,
                        EventType.DIPLOMACY,
                        f"The war between {civ.name} and {other.name} has ended",
                    )
                )
    return events


def owned_luxuries(state: GameState, civ: Civilization, context: EngineContext) -> set[str]:
    luxuries: set[str] = set()
    for row in state.grid:
        for tile in row:
            if tile.owner_id != civ.id or tile.resource is None:
                continue
            resource = context.ruleset.resource(tile.resource)
            if resource is not None and resource.luxury:
                luxuries.add(resource.id)
    return luxuries


def compute_happiness(
    state: GameState, civ: Civilization, context: EngineContext, effects: GovernmentEffects
) -> int:
    rules = context.rules.happiness
    happiness = float(rules.base)
    happiness += rules.per_luxury * len(owned_luxuries(state, civ, context))
    happiness += effects.happiness_bonus
    for city_id in civ.cities:
        city = state.cities.get(city_id)
        if city is None:
            continue
        happiness += city.local_happiness
        for building_id in city.buildings:
            building = context.ruleset.building(building_id)
            if building is not None:
                happiness += building.happiness
        if not effects.no_happiness_penalty:
            happiness -= 1 + city.population // rules.population_divisor
    happiness -= civ.war_weariness * (1 - effects.war_weariness_reduction)
    return int(happiness)


def compute_score(state: GameState, civ: Civilization, context: EngineContext) -> int:
    rules = context.rules.score
    cities = [city for city_id in civ.cities if (city := state.cities.get(city_id)) is not None]
    units = [unit_id for unit_id in civ.units if unit_id in state.units]
    population = sum(city.population for city in cities)
    return (
        rules.per_city * len(cities)
        + rules.per_unit * len(units)
        + civ.gold // rules.gold_divisor
        + rules.per_population * population
        + rules.per_tech * len(civ.researched_techs)
        + rules.per_golden_age * civ.golden_ages_completed
        + rules.per_spaceship_part * civ.spaceship_parts.count()
    )


def check_elimination(state: GameState, civ: Civilization, context: EngineContext) -> list[str]:
    has_city = any(city_id in state.cities for city_id in civ.cities)
    has_unit = any(unit_id in state.units for unit_id in civ.units)
    if has_city or has_unit:
        return []
    civ.is_alive = False
    message = world.record_event(
        state, EventType.ELIMINATION, f"{civ.name} has been eliminated!", civ.id
    )
    world.notify(state, context.clock, EventType.ELIMINATION, message, civ_id=civ.id)
    return [message]


def process_trade_routes(state: GameState, context: EngineContext) -> list[str]:
    """Count routes down; expired or broken routes are removed, freeing their unit."""

    events: list[str] = []
    for route_id in sorted(state.trade_routes):
        route = state.trade_routes[route_id]
        broken = (
            route.unit_id not in state.units
            or route.from_city_id not in state.cities
            or route.to_city_id not in state.cities
        )
        if not broken:
            route.turns_remaining -= 1
        if broken or route.turns_remaining <= 0:
            del state.trade_routes[route_id]
            events.append(
                world.record_event(
                    state,
                    EventType.TRADE,
                    f"Trade route {route_id} has ended",
                    route.owner_id,
                )
            )
    return events
