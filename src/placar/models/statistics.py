"""Aggregate statistics for a championship."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ScoreFrequency(BaseModel):
    """How often a final scoreline (``"2-1"``) occurred."""

    score: str
    count: int


class ChampionshipStats(BaseModel):
    total_matches: int = 0
    played_matches: int = 0
    total_goals: int = 0
    avg_goals_per_match: float = 0.0
    decisive_results: int = 0
    draws: int = 0
    top_scores: list[ScoreFrequency] = Field(default_factory=list)


class TopScorer(BaseModel):
    """Goals scored by one player for one team."""

    player_name: str
    team_id: str
    team_name: str
    total_goals: int
