"""Runtime primitives backing the agentciv HTTP API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from contextlib import suppress
from typing import Any

from pydantic import TypeAdapter

from agentciv.config import Settings, get_settings
from agentciv.domain import models as dm
from agentciv.domain.actions import Action, dump_action
from agentciv.domain.autoplay import local_actions
from agentciv.domain.context import EngineContext
from agentciv.domain.ruleset import default_ruleset, load_ruleset
from agentciv.domain.setup import create_game
from agentciv.domain.turn import TurnResult, advance_turn
from agentciv.domain.world import alive_civilizations
from agentciv.repository import JsonGameRepository

logger = logging.getLogger(__name__)

_STATE_ADAPTER: TypeAdapter[dm.GameState] = TypeAdapter(dm.GameState)


class GameService:
    """Load, create and stage actions for persisted games."""

    def __init__(self, repository: JsonGameRepository, context: EngineContext) -> None:
        self._repository = repository
        self._context = context
        self._pending: dict[str, dict[str, list[Action]]] = {}

    def list_games(self) -> list[dm.GameState]:
        """Return every persisted game ordered by identifier."""

        games: list[dm.GameState] = []
        for game_id in self._repository.list_games():
            with suppress(FileNotFoundError):
                games.append(self._repository.load(game_id))
        return games

    def get_game(self, game_id: str) -> dm.GameState:
        """Load a single game or raise ``FileNotFoundError``."""

        return self._repository.load(game_id)

    def create_game(
        self,
        *,
        seed: int | None = None,
        grid_size: int,
        max_turns: int,
    ) -> dm.GameState:
        """Generate and persist a new game."""

        index = self._next_index()
        game_seed = seed if seed is not None else index
        state = create_game(
            f"game{index}",
            seed=game_seed,
            grid_size=grid_size,
            max_turns=max_turns,
            context=self._context,
        )
        self._repository.save(state)
        return state

    def _next_index(self) -> int:
        used = set(self._repository.list_games())
        index = len(used) + 1
        while f"game{index}" in used:
            index += 1
        return index

    def stage_actions(self, game_id: str, civ_id: str, actions: Sequence[Action]) -> int:
        """Replace ``civ_id``'s pending actions for the next turn of ``game_id``.

        Raises:
            FileNotFoundError: If the game does not exist.
            ValueError: If the civilization is unknown, eliminated, or the game is over.
        """
        state = self._repository.load(game_id)
        if state.winner is not None or state.turn > state.max_turns:
            raise ValueError("game is over")
        civ = state.civilizations.get(dm.CivID(civ_id))
        if civ is None or not civ.is_alive:
            raise ValueError(f"civilization {civ_id!r} cannot act in this game")
        self._pending.setdefault(game_id, {})[civ_id] = list(actions)
        return len(actions)

    def pending_actions(self, game_id: str) -> dict[str, list[Action]]:
        return {civ_id: list(actions) for civ_id, actions in self._pending.get(game_id, {}).items()}

    def take_pending(self, game_id: str) -> dict[str, list[Action]]:
        return self._pending.pop(game_id, {})

    def clear_pending(self) -> None:
        self._pending.clear()

    def to_summary_dict(self, state: dm.GameState) -> dict[str, object]:
        """Return a JSON-friendly overview of a game."""

        pending = self._pending.get(state.id, {})
        return {
            "id": state.id,
            "seed": state.seed,
            "turn": state.turn,
            "max_turns": state.max_turns,
            "phase": str(state.phase),
            "grid_size": state.grid_size,
            "winner": state.winner,
            "victory_type": str(state.victory_type) if state.victory_type is not None else None,
            "civilizations": [
                {
                    "id": civ.id,
                    "name": civ.name,
                    "gold": civ.gold,
                    "score": civ.score,
                    "happiness": civ.happiness,
                    "government": civ.government,
                    "city_count": len(civ.cities),
                    "unit_count": len(civ.units),
                    "tech_count": len(civ.researched_techs),
                    "is_alive": civ.is_alive,
                }
                for civ in sorted(state.civilizations.values(), key=lambda c: c.id)
            ],
            "pending_submissions": sorted(pending),
        }

    @staticmethod
    def to_state_dict(state: dm.GameState) -> dict[str, Any]:
        return _STATE_ADAPTER.dump_python(state, mode="json")

    def pending_as_dicts(self, game_id: str) -> dict[str, list[dict[str, Any]]]:
        return {
            civ_id: [dump_action(action) for action in actions]
            for civ_id, actions in self.pending_actions(game_id).items()
        }


class TurnManager:
    """Serializes turn advances and runs the synchronous engine off the event loop."""

    def __init__(
        self, repository: JsonGameRepository, games: GameService, context: EngineContext
    ) -> None:
        self._repository = repository
        self._games = games
        self._context = context
        self._advance_lock = asyncio.Lock()

    async def advance(self, game_id: str, *, autoplay: bool = True) -> TurnResult:
        """Resolve one turn of ``game_id`` with the staged submissions.

        Raises:
            FileNotFoundError: If the game does not exist.
        """
        async with self._advance_lock:
            submissions = self._games.take_pending(game_id)
            try:
                return await asyncio.to_thread(
                    self._advance_game_sync, game_id, submissions, autoplay
                )
            except FileNotFoundError:
                logger.warning("game %s missing from repository; dropping submissions", game_id)
                raise

    def _advance_game_sync(
        self, game_id: str, submissions: dict[str, list[Action]], autoplay: bool
    ) -> TurnResult:
        state = self._repository.load(game_id)
        if autoplay:
            for civ in alive_civilizations(state):
                if civ.id not in submissions:
                    submissions[civ.id] = local_actions(state, civ.id, self._context)
        result = advance_turn(state, submissions, context=self._context)
        self._repository.save(result.state)
        return result


def build_context(settings: Settings) -> EngineContext:
    ruleset = (
        load_ruleset(settings.ruleset_path) if settings.ruleset_path is not None else default_ruleset()
    )
    return EngineContext(ruleset=ruleset)


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self, *, settings: Settings | None = None, context: EngineContext | None = None
    ) -> None:
        self.settings = settings or get_settings()
        self.context = context or build_context(self.settings)
        self.repository = JsonGameRepository(self.settings.data_dir)
        self.games = GameService(self.repository, self.context)
        self.turns = TurnManager(self.repository, self.games, self.context)

    async def shutdown(self) -> None:
        self.games.clear_pending()


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
