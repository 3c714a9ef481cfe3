"""Win-condition evaluation, run once at the end of each resolution."""

from __future__ import annotations

import logging

from agentciv.domain import world
from agentciv.domain.context import EngineContext
from agentciv.domain.enums import EventType, TurnPhase, VictoryType
from agentciv.domain.models import Civilization, GameState

logger = logging.getLogger(__name__)

SPACESHIP_PARTS_REQUIRED = 3


def _declare(
    state: GameState, civ: Civilization, victory: VictoryType, context: EngineContext
) -> list[str]:
    state.winner = civ.id
    state.victory_type = victory
    state.phase = TurnPhase.GAME_OVER
    message = world.record_event(
        state, EventType.VICTORY, f"{civ.name} wins a {victory} victory!", civ.id
    )
    world.notify(state, context.clock, EventType.VICTORY, message, civ_id=civ.id)
    logger.info("game %s won by %s (%s) on turn %s", state.id, civ.id, victory, state.turn)
    return [message]


def evaluate_victory(state: GameState, context: EngineContext) -> list[str]:
    """Check conquest, science and score victories in that order.

    A game with a winner is never re-evaluated. The score victory at the turn
    limit requires a strict leader; a tie ends the game without a winner.
    """
    if state.winner is not None:
        return []

    alive = world.alive_civilizations(state)
    if len(alive) == 1:
        return _declare(state, alive[0], VictoryType.CONQUEST, context)

    for civ in alive:
        if civ.spaceship_parts.count() >= SPACESHIP_PARTS_REQUIRED:
            return _declare(state, civ, VictoryType.SCIENCE, context)

    if state.turn >= state.max_turns and alive:
        top = max(civ.score for civ in alive)
        leaders = [civ for civ in alive if civ.score == top]
        if len(leaders) == 1:
            return _declare(state, leaders[0], VictoryType.SCORE, context)
        logger.info("game %s reached the turn limit with a tied score of %s", state.id, top)
    return []
