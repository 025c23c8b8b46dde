"""Standings API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from placar.api.deps import RepoDep, require_championship
from placar.api.snapshot import group_from_row, load_teams_and_matches
from placar.core.standings import compute_group_standings, simulate_standings

router = APIRouter(prefix="/api/championships", tags=["standings"])


class SimulatedScore(BaseModel):
    match_id: str
    team1_score: int = Field(ge=0)
    team2_score: int = Field(ge=0)


class SimulateStandingsRequest(BaseModel):
    group_id: str | None = None
    scores: list[SimulatedScore] = Field(default_factory=list)


@router.get("/{championship_id}/standings")
async def get_standings(championship_id: str, repo: RepoDep) -> dict:
    """Current standings: one table per group, or a single general table.

    Computed from scratch on every request using the championship's
    points-for-win rule.
    """
    championship = await require_championship(repo, championship_id)
    teams, matches = await load_teams_and_matches(repo, championship_id)
    groups = [group_from_row(g) for g in await repo.get_groups(championship_id)]

    tables = compute_group_standings(teams, matches, groups, championship.points_for_win)
    return {
        "data": [t.model_dump(mode="json") for t in tables],
        "points_for_win": championship.points_for_win,
    }


@router.post("/{championship_id}/standings/simulate")
async def simulate(championship_id: str, body: SimulateStandingsRequest, repo: RepoDep) -> dict:
    """What-if standings: fill unplayed matches with hypothetical scores.

    Nothing is persisted. Scores for matches that already have a result are
    ignored.
    """
    championship = await require_championship(repo, championship_id)
    if body.group_id is not None:
        group = await repo.get_group(body.group_id)
        if group is None or group.championship_id != championship_id:
            raise HTTPException(400, "Group does not belong to this championship")

    teams, matches = await load_teams_and_matches(repo, championship_id, group_id=body.group_id)
    known = {m.id for m in matches}
    unknown = [s.match_id for s in body.scores if s.match_id not in known]
    if unknown:
        raise HTTPException(400, f"Unknown matches: {', '.join(unknown)}")

    hypothetical = {s.match_id: (s.team1_score, s.team2_score) for s in body.scores}
    standings = simulate_standings(teams, matches, hypothetical, championship.points_for_win)
    return {"data": [s.model_dump(mode="json") for s in standings]}
