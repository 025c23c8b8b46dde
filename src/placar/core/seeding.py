"""Championship seeding from YAML.

A championship file lists its settings and its teams, either flat or by
group::

    name: Copa Centro
    points_for_win: 3
    groups:
      Grupo A: [Leões, Tigres, Falcões]
      Grupo B: [Lobos, Ursos]

or, without groups::

    name: Liga Bairro
    teams: [Leões, Tigres, Falcões, Lobos]
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, model_validator


class ChampionshipConfig(BaseModel):
    """Hand-authored description of a championship to seed."""

    name: str = Field(min_length=1)
    description: str | None = None
    city: str | None = None
    state: str | None = None
    points_for_win: Literal[2, 3] = 3
    teams: list[str] = Field(default_factory=list)
    groups: dict[str, list[str]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_team_names(self) -> ChampionshipConfig:
        if self.teams and self.groups:
            msg = "use either 'teams' or 'groups', not both"
            raise ValueError(msg)
        names = self.all_team_names()
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            msg = f"duplicate team names: {', '.join(duplicates)}"
            raise ValueError(msg)
        return self

    def all_team_names(self) -> list[str]:
        """Every team name, in file order (groups flattened)."""
        if self.groups:
            return [name for members in self.groups.values() for name in members]
        return list(self.teams)


def load_championship_config(path: str | Path) -> ChampionshipConfig:
    """Load and validate a championship YAML file."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return ChampionshipConfig.model_validate(data)
