"""HTTP routes for the agentciv API."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field, ValidationError

from agentciv import __version__
from agentciv.api.runtime import ApiState
from agentciv.domain import models as dm
from agentciv.domain.actions import parse_actions

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


class CivilizationSummary(BaseModel):
    id: str
    name: str
    gold: int
    score: int
    happiness: int
    government: str
    city_count: int
    unit_count: int
    tech_count: int
    is_alive: bool


class GameSummary(BaseModel):
    id: str
    seed: int
    turn: int
    max_turns: int
    phase: str
    grid_size: int
    winner: str | None
    victory_type: str | None
    civilizations: list[CivilizationSummary]
    pending_submissions: list[str]


class CreateGameRequest(BaseModel):
    seed: int | None = Field(default=None, ge=0)
    grid_size: int | None = Field(default=None, ge=10, le=80)
    max_turns: int | None = Field(default=None, ge=1, le=1000)


class SubmitActionsRequest(BaseModel):
    civ_id: str = Field(min_length=1)
    actions: list[dict[str, Any]] = Field(default_factory=list)


class SubmitActionsResponse(BaseModel):
    game_id: str
    civ_id: str
    turn: int
    action_count: int


class AdvanceRequest(BaseModel):
    autoplay: bool = True


class AdvanceResponse(BaseModel):
    game: GameSummary
    events: list[str]


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="game not found")


def _load(state: ApiState, game_id: str) -> dm.GameState:
    try:
        return state.games.get_game(game_id)
    except FileNotFoundError as exc:
        raise _not_found() from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "version": __version__,
        "civilizations": sorted(state.context.ruleset.civilizations),
        "default_max_turns": state.settings.default_max_turns,
    }


@router.get("/games", response_model=list[GameSummary])
async def list_games(state: ApiStateDep) -> list[GameSummary]:
    games = state.games.list_games()
    return [GameSummary.model_validate(state.games.to_summary_dict(game)) for game in games]


@router.post("/games", response_model=GameSummary, status_code=status.HTTP_201_CREATED)
async def create_game(request: CreateGameRequest, state: ApiStateDep) -> GameSummary:
    try:
        game = state.games.create_game(
            seed=request.seed,
            grid_size=request.grid_size or state.settings.default_grid_size,
            max_turns=request.max_turns or state.settings.default_max_turns,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return GameSummary.model_validate(state.games.to_summary_dict(game))


@router.get("/games/{game_id}", response_model=GameSummary)
async def get_game(game_id: str, state: ApiStateDep) -> GameSummary:
    game = _load(state, game_id)
    return GameSummary.model_validate(state.games.to_summary_dict(game))


@router.get("/games/{game_id}/state")
async def get_game_state(game_id: str, state: ApiStateDep) -> dict[str, Any]:
    game = _load(state, game_id)
    return state.games.to_state_dict(game)


@router.get("/games/{game_id}/actions")
async def get_pending_actions(game_id: str, state: ApiStateDep) -> dict[str, list[dict[str, Any]]]:
    _load(state, game_id)
    return state.games.pending_as_dicts(game_id)


@router.post(
    "/games/{game_id}/actions",
    response_model=SubmitActionsResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def submit_actions(
    game_id: str, request: SubmitActionsRequest, state: ApiStateDep
) -> SubmitActionsResponse:
    game = _load(state, game_id)
    try:
        actions = parse_actions(request.actions)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    try:
        count = state.games.stage_actions(game_id, request.civ_id, actions)
    except FileNotFoundError as exc:
        raise _not_found() from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return SubmitActionsResponse(
        game_id=game_id, civ_id=request.civ_id, turn=game.turn, action_count=count
    )


@router.post("/games/{game_id}/advance", response_model=AdvanceResponse)
async def advance_game(
    game_id: str, state: ApiStateDep, request: AdvanceRequest | None = None
) -> AdvanceResponse:
    _load(state, game_id)
    autoplay = request.autoplay if request is not None else True
    try:
        result = await state.turns.advance(game_id, autoplay=autoplay)
    except FileNotFoundError as exc:
        raise _not_found() from exc
    return AdvanceResponse(
        game=GameSummary.model_validate(state.games.to_summary_dict(result.state)),
        events=result.events,
    )
