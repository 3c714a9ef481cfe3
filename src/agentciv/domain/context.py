"""Collaborators and configuration shared by every engine step."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import InitVar, dataclass, field
from datetime import UTC, datetime

from agentciv.domain.combat import CombatOutcome, CombatResolver
from agentciv.domain.models import GameState
from agentciv.domain.pathfinding import GridPathfinder
from agentciv.domain.rules_config import DEFAULT_RULES, RulesConfig
from agentciv.domain.ruleset import Ruleset, default_ruleset
from agentciv.interfaces import ICombatResolver, IPathfinder
from agentciv.utils.grid_math import GridCoord

logger = logging.getLogger(__name__)


class CollaboratorUnavailableError(RuntimeError):
    """Raised by an external collaborator that cannot produce an answer."""


class PathfindingUnavailableError(CollaboratorUnavailableError):
    """The pathfinding service failed to respond."""


class CombatUnavailableError(CollaboratorUnavailableError):
    """The combat resolver failed to respond."""


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class EngineContext:
    """Ruleset, tuning and external collaborators for one engine instance.

    ``pathfinder`` and ``combat`` default to the bundled implementations.
    Collaborator failures are absorbed here: a pathfinder or combat resolver
    raising :class:`CollaboratorUnavailableError` yields ``None`` ("no path",
    "no combat") so the turn always completes.
    """

    ruleset: Ruleset = field(default_factory=default_ruleset)
    rules: RulesConfig = DEFAULT_RULES
    pathfinder: InitVar[IPathfinder | None] = None
    combat: InitVar[ICombatResolver | None] = None
    clock: Callable[[], datetime] = _utc_now
    pathfinding_service: IPathfinder = field(init=False)
    combat_service: ICombatResolver = field(init=False)

    def __post_init__(
        self, pathfinder: IPathfinder | None, combat: ICombatResolver | None
    ) -> None:
        self.pathfinding_service = (
            pathfinder if pathfinder is not None else GridPathfinder(self.ruleset)
        )
        self.combat_service = (
            combat if combat is not None else CombatResolver(self.ruleset, self.rules)
        )

    def find_path(
        self,
        state: GameState,
        from_x: int,
        from_y: int,
        to_x: int,
        to_y: int,
        movement_budget: float,
        acting_civ_id: str,
    ) -> list[GridCoord] | None:
        try:
            return self.pathfinding_service.find_path(
                state, from_x, from_y, to_x, to_y, movement_budget, acting_civ_id
            )
        except CollaboratorUnavailableError as exc:
            logger.warning("pathfinding unavailable, treating as no path: %s", exc)
            return None

    def resolve_combat(
        self, state: GameState, attacker_id: str, defender_id: str, seed: str, *, ranged: bool
    ) -> CombatOutcome | None:
        try:
            if ranged:
                return self.combat_service.resolve_ranged_combat(
                    state, attacker_id, defender_id, seed
                )
            return self.combat_service.resolve_combat(state, attacker_id, defender_id, seed)
        except CollaboratorUnavailableError as exc:
            logger.warning("combat resolver unavailable, treating as no combat: %s", exc)
            return None


def default_context() -> EngineContext:
    return EngineContext()
