"""Turn orchestration: action batches followed by end-of-turn resolution."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from agentciv.domain import (
    barbarians,
    cities,
    economy,
    golden_age,
    great_people,
    research,
    victory,
    world,
)
from agentciv.domain.actions import Action
from agentciv.domain.context import EngineContext, default_context
from agentciv.domain.enums import TurnPhase
from agentciv.domain.execution import execute_action
from agentciv.domain.models import Civilization, GameState
from agentciv.domain.validation import validate_action

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TurnResult:
    state: GameState
    events: list[str] = field(default_factory=list)


def _resolve_civilization(
    state: GameState, civ: Civilization, context: EngineContext
) -> list[str]:
    events: list[str] = []

    in_anarchy = economy.tick_timers(civ)
    effects = economy.government_effects(civ, context)
    in_golden_age = golden_age.in_golden_age(civ)

    economy.collect_income(state, civ, context, effects, golden_age=in_golden_age)
    economy.pay_upkeep(state, civ, context, effects)
    events.extend(economy.apply_attrition(state, civ, context))

    events.extend(cities.process_improvements(state, civ, context))
    if not in_anarchy:
        events.extend(cities.process_production(state, civ, context, golden_age=in_golden_age))
    for city_id in list(civ.cities):
        city = state.cities.get(city_id)
        if city is not None:
            events.extend(cities.update_city_yields(state, city, context))
    events.extend(cities.process_growth(state, civ, context))
    events.extend(cities.process_culture(state, civ, context))

    events.extend(golden_age.process_golden_age(state, civ, context))
    events.extend(great_people.process_great_people(state, civ, context))
    events.extend(research.process_research(state, civ, context))

    economy.reset_movement(state, civ)
    economy.heal_units(state, civ, context)
    economy.update_war_weariness(civ, context)
    civ.happiness = economy.compute_happiness(state, civ, context, effects)
    civ.score = economy.compute_score(state, civ, context)
    events.extend(economy.check_elimination(state, civ, context))
    return events


def resolve_end_of_turn(state: GameState, seed: int, context: EngineContext) -> list[str]:
    """End quiet wars, then run each civilization's steps and the world-level steps."""

    events: list[str] = []
    events.extend(economy.expire_wars(state, context))
    for civ in world.alive_civilizations(state):
        events.extend(_resolve_civilization(state, civ, context))

    events.extend(economy.process_trade_routes(state, context))
    events.extend(barbarians.run_barbarian_turn(state, seed, context))
    events.extend(victory.evaluate_victory(state, context))
    return events


def execute_actions(
    state: GameState,
    civ_id: str,
    actions: Sequence[Action],
    seed: int,
    context: EngineContext,
) -> list[str]:
    """Validate and execute one civilization's actions in submission order."""

    events: list[str] = []
    for action in actions:
        if not validate_action(state, action, civ_id, context):
            logger.debug("rejected %s action from %s: %r", action.type, civ_id, action)
            continue
        events.extend(execute_action(state, action, civ_id, seed, context))
    return events


def advance_turn(
    state: GameState,
    submissions: Mapping[str, Sequence[Action]],
    *,
    seed: int | None = None,
    context: EngineContext | None = None,
) -> TurnResult:
    """Apply submitted actions, resolve the turn and advance the turn counter.

    ``submissions`` maps civilization ids to their ordered action lists.
    Civilizations act in sorted id order. The seed defaults to the current
    turn number, so replaying the same state and submissions is deterministic.
    """
    if state.winner is not None or state.turn > state.max_turns:
        return TurnResult(state=state)

    context = context or default_context()
    turn_seed = state.turn if seed is None else seed
    state.camera_events.clear()
    state.phase = TurnPhase.RESOLUTION

    events: list[str] = []
    for civ_id in sorted(submissions):
        civ = state.civilizations.get(civ_id)
        if civ is None or not civ.is_alive:
            logger.debug("ignoring submissions from unknown or eliminated civ %s", civ_id)
            continue
        events.extend(execute_actions(state, civ_id, submissions[civ_id], turn_seed, context))

    events.extend(resolve_end_of_turn(state, turn_seed, context))

    resolved_turn = state.turn
    state.turn += 1
    if state.winner is None:
        state.phase = TurnPhase.IDLE
    logger.info(
        "game %s resolved turn %s with %s events", state.id, resolved_turn, len(events)
    )
    return TurnResult(state=state, events=events)
