"""Golden age accumulation, triggering and countdown."""

from __future__ import annotations

from agentciv.domain import world
from agentciv.domain.context import EngineContext
from agentciv.domain.enums import CameraPriority, EventType
from agentciv.domain.models import Civilization, GameState
from agentciv.domain.rules_config import RulesConfig


def in_golden_age(civ: Civilization) -> bool:
    return civ.golden_age_turns > 0


def threshold(civ: Civilization, rules: RulesConfig) -> int:
    tuning = rules.golden_age
    return tuning.base_threshold + tuning.threshold_increment * civ.golden_ages_completed


def start_golden_age(
    state: GameState,
    civ: Civilization,
    turns: int,
    context: EngineContext,
    *,
    counts_towards_threshold: bool = True,
) -> str:
    """Begin a golden age. Callers guarantee none is active, so bonuses never stack."""

    civ.golden_age_turns = turns
    civ.golden_age_points = 0
    if counts_towards_threshold:
        civ.golden_ages_completed += 1
    message = world.record_event(
        state, EventType.GOLDEN_AGE, f"{civ.name} enters a golden age", civ.id
    )
    world.notify(state, context.clock, EventType.GOLDEN_AGE, message, civ_id=civ.id)
    capital = world.capital_of(state, civ)
    if capital is not None:
        world.pan_camera(state, EventType.GOLDEN_AGE, capital.x, capital.y, CameraPriority.MEDIUM)
    return message


def process_golden_age(state: GameState, civ: Civilization, context: EngineContext) -> list[str]:
    """Tick an active golden age, or accumulate points towards the next one."""

    rules = context.rules
    if in_golden_age(civ):
        civ.golden_age_turns -= 1
        if civ.golden_age_turns == 0:
            return [
                world.record_event(
                    state, EventType.GOLDEN_AGE, f"{civ.name}'s golden age has ended", civ.id
                )
            ]
        return []

    culture = sum(
        city.culture_per_turn
        for city_id in civ.cities
        if (city := state.cities.get(city_id)) is not None
    )
    civ.golden_age_points += max(0, culture // rules.golden_age.culture_divisor)
    if civ.golden_age_points >= threshold(civ, rules):
        return [start_golden_age(state, civ, rules.golden_age.duration_turns, context)]
    return []
