"""Match API endpoints: manual fixtures, score updates and schedule generation."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, model_validator

from placar.api.deps import RepoDep, require_championship
from placar.core.scheduler import generate_round_robin
from placar.db.models import MatchRow
from placar.db.repository import Repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["matches"])


class CreateMatchRequest(BaseModel):
    team1_id: str
    team2_id: str
    group_id: str | None = None
    round_id: str | None = None
    match_date: datetime | None = None
    location: str | None = Field(default=None, max_length=200)

    @model_validator(mode="after")
    def _distinct_teams(self) -> CreateMatchRequest:
        if self.team1_id == self.team2_id:
            msg = "teams must be different"
            raise ValueError(msg)
        return self


class GoalInput(BaseModel):
    team_id: str
    player_name: str = Field(min_length=1, max_length=100)
    jersey_number: int | None = Field(default=None, ge=0)


class ScoreUpdateRequest(BaseModel):
    """A result, or two nulls to mark the match unplayed again."""

    team1_score: int | None = Field(default=None, ge=0)
    team2_score: int | None = Field(default=None, ge=0)
    goals: list[GoalInput] | None = None

    @model_validator(mode="after")
    def _both_or_neither(self) -> ScoreUpdateRequest:
        if (self.team1_score is None) != (self.team2_score is None):
            msg = "scores must both be set or both be empty"
            raise ValueError(msg)
        return self


class UpdateMatchRequest(BaseModel):
    """Scheduling details. Any field sent as null is cleared."""

    match_date: datetime | None = None
    location: str | None = Field(default=None, max_length=200)
    group_id: str | None = None
    round_id: str | None = None
    notes: str | None = None


class GenerateMatchesRequest(BaseModel):
    group_id: str | None = None
    round_id: str | None = None


def match_to_dict(row: MatchRow) -> dict:
    return {
        "id": row.id,
        "championship_id": row.championship_id,
        "team1_id": row.team1_id,
        "team2_id": row.team2_id,
        "team1_score": row.team1_score,
        "team2_score": row.team2_score,
        "match_date": (
            row.match_date.replace(tzinfo=UTC).isoformat() if row.match_date else None
        ),
        "group_id": row.group_id,
        "round_id": row.round_id,
        "round_number": row.round_number,
        "location": row.location,
        "notes": row.notes,
    }


async def _check_scope(
    repo: Repository,
    championship_id: str,
    group_id: str | None,
    round_id: str | None,
) -> None:
    """Reject group/round ids that belong to another championship."""
    if group_id is not None:
        group = await repo.get_group(group_id)
        if group is None or group.championship_id != championship_id:
            raise HTTPException(400, "Group does not belong to this championship")
    if round_id is not None:
        rnd = await repo.get_round(round_id)
        if rnd is None or rnd.championship_id != championship_id:
            raise HTTPException(400, "Round does not belong to this championship")


@router.get("/championships/{championship_id}/matches")
async def list_matches(
    championship_id: str,
    repo: RepoDep,
    group_id: str | None = None,
    round_id: str | None = None,
) -> dict:
    await require_championship(repo, championship_id)
    rows = await repo.get_matches(championship_id, group_id=group_id, round_id=round_id)
    return {"data": [match_to_dict(r) for r in rows]}


@router.post("/championships/{championship_id}/matches", status_code=201)
async def create_match(championship_id: str, body: CreateMatchRequest, repo: RepoDep) -> dict:
    """Schedule a single match between two teams of the championship."""
    await require_championship(repo, championship_id)
    for team_id in (body.team1_id, body.team2_id):
        team = await repo.get_team(team_id)
        if team is None or team.championship_id != championship_id:
            raise HTTPException(400, f"Team {team_id} does not belong to this championship")
    await _check_scope(repo, championship_id, body.group_id, body.round_id)

    row = await repo.create_match(
        championship_id,
        body.team1_id,
        body.team2_id,
        group_id=body.group_id,
        round_id=body.round_id,
        match_date=body.match_date,
        location=body.location,
    )
    return {"data": match_to_dict(row)}


@router.post("/championships/{championship_id}/matches/generate")
async def generate_matches(
    championship_id: str, body: GenerateMatchesRequest, repo: RepoDep
) -> dict:
    """Replace the matches in scope with a fresh single round-robin.

    With a group, only that group's teams are scheduled and only that group's
    matches are replaced; otherwise the whole championship is. A round tags
    the new matches and narrows what gets deleted.
    """
    await require_championship(repo, championship_id)
    await _check_scope(repo, championship_id, body.group_id, body.round_id)

    teams = await repo.get_teams(championship_id, group_id=body.group_id)
    if len(teams) < 2:
        logger.info(
            "matches_generate_skipped championship=%s group=%s teams=%d",
            championship_id,
            body.group_id,
            len(teams),
        )
        return {"data": [], "generated": 0}

    fixtures = generate_round_robin([t.id for t in teams])
    rows = await repo.replace_matches(
        championship_id, fixtures, group_id=body.group_id, round_id=body.round_id
    )
    logger.info(
        "matches_generated championship=%s group=%s round=%s count=%d",
        championship_id,
        body.group_id,
        body.round_id,
        len(rows),
    )
    return {"data": [match_to_dict(r) for r in rows], "generated": len(rows)}


@router.get("/matches/{match_id}")
async def get_match(match_id: str, repo: RepoDep) -> dict:
    row = await repo.get_match(match_id)
    if row is None:
        raise HTTPException(404, "Match not found")
    goals = await repo.get_goals_for_match(match_id)
    data = match_to_dict(row)
    data["goals"] = [
        {"team_id": g.team_id, "player_name": g.player_name, "jersey_number": g.jersey_number}
        for g in goals
    ]
    return {"data": data}


@router.patch("/matches/{match_id}")
async def update_match(match_id: str, body: UpdateMatchRequest, repo: RepoDep) -> dict:
    """Set kick-off time, location, group, round or notes of a match."""
    row = await repo.get_match(match_id)
    if row is None:
        raise HTTPException(404, "Match not found")
    fields = body.model_dump(exclude_unset=True)
    await _check_scope(
        repo, row.championship_id, fields.get("group_id"), fields.get("round_id")
    )
    row = await repo.update_match(match_id, fields)
    logger.info("match_updated match=%s fields=%s", match_id, ",".join(sorted(fields)))
    return {"data": match_to_dict(row)}


@router.put("/matches/{match_id}/score")
async def update_score(match_id: str, body: ScoreUpdateRequest, repo: RepoDep) -> dict:
    """Record a result and, when given, replace the match's goal list."""
    row = await repo.get_match(match_id)
    if row is None:
        raise HTTPException(404, "Match not found")
    if body.goals is not None:
        allowed = {row.team1_id, row.team2_id}
        if any(g.team_id not in allowed for g in body.goals):
            raise HTTPException(400, "Goals must be credited to one of the match's teams")

    row = await repo.update_match_score(match_id, body.team1_score, body.team2_score)
    if body.goals is not None:
        await repo.replace_match_goals(match_id, [g.model_dump() for g in body.goals])
    logger.info(
        "match_score_updated match=%s score=%s-%s",
        match_id,
        body.team1_score,
        body.team2_score,
    )
    return {"data": match_to_dict(row)}


@router.delete("/matches/{match_id}")
async def delete_match(match_id: str, repo: RepoDep) -> dict:
    if not await repo.delete_match(match_id):
        raise HTTPException(404, "Match not found")
    return {"data": {"id": match_id, "deleted": True}}
