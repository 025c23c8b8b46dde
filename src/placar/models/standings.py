"""Standings output types from the standings engine."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

FormResult = Literal["W", "D", "L", "-"]

# Number of matches shown in a team's recent form.
FORM_LENGTH = 5


class Standing(BaseModel):
    """One team's line in a standings table. Derived, never stored."""

    team_id: str
    team_name: str
    points: int = 0
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    percentage: float = 0.0
    recent_form: list[FormResult] = Field(default_factory=lambda: ["-"] * FORM_LENGTH)


class GroupStandings(BaseModel):
    """A standings table scoped to one group (``group_id`` None = whole championship)."""

    group_id: str | None = None
    group_name: str
    standings: list[Standing] = Field(default_factory=list)
