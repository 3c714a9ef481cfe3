"""Application settings for the agentciv service."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings, read from the environment or a ``.env`` file."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="AGENTCIV_"
    )

    data_dir: Path = Field(default=Path("games"), description="Where game snapshots live")
    ruleset_path: Path | None = Field(
        default=None,
        description="Optional JSON ruleset replacing the bundled content catalog",
    )
    default_max_turns: int = Field(
        default=100, description="Turn limit for newly created games", ge=1
    )
    default_grid_size: int = Field(
        default=30, description="Map width and height for newly created games", ge=10
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Origins allowed to call the HTTP API",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    settings = Settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    return settings
