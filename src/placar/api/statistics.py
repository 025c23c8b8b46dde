"""Championship statistics and top scorers endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from placar.api.deps import RepoDep, require_championship
from placar.api.snapshot import goal_from_row, load_teams_and_matches
from placar.core.statistics import compute_championship_stats, compute_top_scorers

router = APIRouter(prefix="/api/championships", tags=["statistics"])


@router.get("/{championship_id}/statistics")
async def get_statistics(championship_id: str, repo: RepoDep) -> dict:
    await require_championship(repo, championship_id)
    _, matches = await load_teams_and_matches(repo, championship_id)
    return {"data": compute_championship_stats(matches).model_dump()}


@router.get("/{championship_id}/top-scorers")
async def get_top_scorers(
    championship_id: str,
    repo: RepoDep,
    limit: int | None = Query(default=None, ge=1),
) -> dict:
    """Players ranked by goals scored in this championship."""
    await require_championship(repo, championship_id)
    teams, _ = await load_teams_and_matches(repo, championship_id)
    goals = [goal_from_row(g) for g in await repo.get_goals_for_championship(championship_id)]
    scorers = compute_top_scorers(goals, teams, limit=limit)
    return {"data": [s.model_dump() for s in scorers]}
