"""Match and goal models.

A Match is either played (both scores set) or unplayed (both scores null).
Half-scored matches are rejected at construction time so the standings
engine never has to guess what they mean.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class Match(BaseModel):
    """A fixture between two distinct teams, with a result once played."""

    id: str
    team1_id: str
    team2_id: str
    team1_score: int | None = Field(default=None, ge=0)
    team2_score: int | None = Field(default=None, ge=0)
    match_date: datetime | None = None
    championship_id: str | None = None
    group_id: str | None = None
    round_id: str | None = None
    location: str | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def _check_teams_and_scores(self) -> Match:
        if self.team1_id == self.team2_id:
            msg = f"match {self.id}: a team cannot play itself ({self.team1_id})"
            raise ValueError(msg)
        if (self.team1_score is None) != (self.team2_score is None):
            msg = f"match {self.id}: scores must both be set or both be empty"
            raise ValueError(msg)
        return self

    @property
    def is_played(self) -> bool:
        return self.team1_score is not None and self.team2_score is not None


class MatchGoal(BaseModel):
    """A single goal credited to a player of one of the match's teams."""

    match_id: str
    team_id: str
    player_name: str = Field(min_length=1)
    jersey_number: int | None = Field(default=None, ge=0)
