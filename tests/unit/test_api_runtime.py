"""Tests for API runtime helpers (game service and turn manager)."""

from __future__ import annotations

import asyncio

import pytest

from agentciv.api.runtime import GameService, TurnManager
from agentciv.domain.actions import Fortify, SetResearch
from agentciv.repository import JsonGameRepository


def _services(tmp_path, context):
    repo = JsonGameRepository(tmp_path)
    games = GameService(repo, context)
    turns = TurnManager(repo, games, context)
    return repo, games, turns


def test_game_service_create_and_list(tmp_path, context):
    repo, games, _ = _services(tmp_path, context)

    first = games.create_game(seed=3, grid_size=16, max_turns=20)
    second = games.create_game(grid_size=16, max_turns=20)

    assert first.id == "game1"
    assert second.id == "game2"
    assert second.seed == 2
    assert repo.list_games() == ["game1", "game2"]
    assert [game.id for game in games.list_games()] == ["game1", "game2"]
    assert games.get_game("game1") == first


def test_stage_actions_replaces_previous_submission(tmp_path, context):
    _, games, _ = _services(tmp_path, context)
    game = games.create_game(seed=1, grid_size=16, max_turns=20)
    civ_id = sorted(game.civilizations)[0]

    games.stage_actions(game.id, civ_id, [SetResearch(tech_id="pottery")])
    count = games.stage_actions(game.id, civ_id, [SetResearch(tech_id="mining")])

    assert count == 1
    assert games.pending_actions(game.id) == {civ_id: [SetResearch(tech_id="mining")]}
    assert games.pending_as_dicts(game.id) == {
        civ_id: [{"type": "set_research", "tech_id": "mining"}]
    }
    assert games.to_summary_dict(game)["pending_submissions"] == [civ_id]


def test_stage_actions_rejections(tmp_path, context):
    repo, games, _ = _services(tmp_path, context)
    game = games.create_game(seed=1, grid_size=16, max_turns=20)
    civ_id = sorted(game.civilizations)[0]

    with pytest.raises(ValueError, match="cannot act"):
        games.stage_actions(game.id, "atlantis", [])
    with pytest.raises(FileNotFoundError):
        games.stage_actions("game9", civ_id, [])

    game.winner = civ_id
    repo.save(game)
    with pytest.raises(ValueError, match="game is over"):
        games.stage_actions(game.id, civ_id, [])


@pytest.mark.asyncio
async def test_turn_manager_advances_and_persists(tmp_path, context):
    repo, games, turns = _services(tmp_path, context)
    game = games.create_game(seed=2, grid_size=16, max_turns=20)
    civ_id = sorted(game.civilizations)[0]
    games.stage_actions(game.id, civ_id, [SetResearch(tech_id="archery")])

    result = await turns.advance(game.id, autoplay=False)

    assert result.state.turn == 2
    assert games.pending_actions(game.id) == {}
    stored = repo.load(game.id)
    assert stored.turn == 2
    assert stored.civilizations[civ_id].current_research.tech_id == "archery"


@pytest.mark.asyncio
async def test_turn_manager_autoplays_missing_civs(tmp_path, context):
    repo, games, turns = _services(tmp_path, context)
    game = games.create_game(seed=2, grid_size=16, max_turns=20)

    await turns.advance(game.id)

    stored = repo.load(game.id)
    assert all(
        stored.cities[civ.cities[0]].production is not None
        for civ in stored.civilizations.values()
    )


@pytest.mark.asyncio
async def test_turn_manager_serializes_concurrent_advances(tmp_path, context):
    repo, games, turns = _services(tmp_path, context)
    game = games.create_game(seed=4, grid_size=16, max_turns=20)
    civ_id = sorted(game.civilizations)[0]
    unit_id = game.civilizations[civ_id].units[0]
    games.stage_actions(game.id, civ_id, [Fortify(unit_id=unit_id)])

    await asyncio.gather(*(turns.advance(game.id, autoplay=False) for _ in range(3)))

    assert repo.load(game.id).turn == 4


@pytest.mark.asyncio
async def test_turn_manager_missing_game(tmp_path, context):
    _, _, turns = _services(tmp_path, context)
    with pytest.raises(FileNotFoundError):
        await turns.advance("game7")
