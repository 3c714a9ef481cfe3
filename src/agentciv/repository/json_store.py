"""JSON-based repository for agentciv games."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import TypeAdapter

from agentciv.domain import models as dm

_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]+$")


class JsonGameRepository:
    """Persist games as JSON snapshots on disk."""

    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._adapter: TypeAdapter[dm.GameState] = TypeAdapter(dm.GameState)

    def _path_for(self, game_id: str) -> Path:
        if not _SAFE_ID.match(game_id):
            raise ValueError(f"invalid game id {game_id!r}")
        return self.base_path / f"game_{game_id}.json"

    def save(self, state: dm.GameState) -> Path:
        """Serialize a game to disk and return the snapshot path."""

        path = self._path_for(state.id)
        payload = self._adapter.dump_json(state, indent=2)
        path.write_bytes(payload)
        return path

    def load(self, game_id: str) -> dm.GameState:
        """Load a previously saved game snapshot.

        Raises:
            FileNotFoundError: If no snapshot exists for ``game_id``.
        """
        path = self._path_for(game_id)
        data = path.read_bytes()
        return self._adapter.validate_json(data)

    def exists(self, game_id: str) -> bool:
        return self._path_for(game_id).exists()

    def list_games(self) -> list[dm.GameID]:
        """Return all game ids currently persisted in the repository."""

        ids: list[dm.GameID] = []
        prefix = "game_"
        suffix = ".json"
        for path in self.base_path.glob("game_*.json"):
            name = path.name
            if name.startswith(prefix) and name.endswith(suffix):
                raw = name[len(prefix) : -len(suffix)]
                if _SAFE_ID.match(raw):
                    ids.append(dm.GameID(raw))
        return sorted(ids)

    def delete(self, game_id: str) -> None:
        """Remove a game snapshot if it exists."""

        path = self._path_for(game_id)
        if path.exists():
            path.unlink()
