"""Application settings via pydantic-settings. Loads from environment and .env file."""

from __future__ import annotations

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

VALID_ENVS = frozenset({"development", "test", "production"})

# Points values a championship may award for a win.
VALID_POINTS_FOR_WIN = frozenset({2, 3})


class Settings(BaseSettings):
    """Placar application configuration.

    All values can be overridden via environment variables or .env file.
    """

    # Database
    database_url: str = "sqlite+aiosqlite:///placar.db"

    # Environment
    placar_env: str = "development"

    # Championship defaults
    placar_default_points_for_win: int = 3

    # Logging
    placar_log_level: str = "INFO"

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}

    @field_validator("placar_env")
    @classmethod
    def _check_env(cls, value: str) -> str:
        if value not in VALID_ENVS:
            msg = f"placar_env must be one of {sorted(VALID_ENVS)}, got {value!r}"
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def _check_default_points(self) -> Settings:
        """Reject a default that no championship could legally use."""
        if self.placar_default_points_for_win not in VALID_POINTS_FOR_WIN:
            msg = (
                "PLACAR_DEFAULT_POINTS_FOR_WIN must be 2 or 3, "
                f"got {self.placar_default_points_for_win}"
            )
            raise ValueError(msg)
        return self

    @property
    def docs_enabled(self) -> bool:
        """Interactive API docs are only served outside production."""
        return self.placar_env != "production"
