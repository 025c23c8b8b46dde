"""Team API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from placar.api.deps import RepoDep, require_championship
from placar.api.matches import match_to_dict
from placar.db.models import TeamRow

router = APIRouter(prefix="/api", tags=["teams"])


class CreateTeamRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    group_id: str | None = None
    logo_url: str | None = None


class UpdateTeamRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    group_id: str | None = None
    logo_url: str | None = None


def team_to_dict(row: TeamRow) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "championship_id": row.championship_id,
        "group_id": row.group_id,
        "logo_url": row.logo_url,
    }


@router.get("/championships/{championship_id}/teams")
async def list_teams(championship_id: str, repo: RepoDep, group_id: str | None = None) -> dict:
    """List a championship's teams, optionally only those of one group."""
    await require_championship(repo, championship_id)
    teams = await repo.get_teams(championship_id, group_id=group_id)
    return {"data": [team_to_dict(t) for t in teams]}


@router.post("/championships/{championship_id}/teams", status_code=201)
async def create_team(championship_id: str, body: CreateTeamRequest, repo: RepoDep) -> dict:
    await require_championship(repo, championship_id)
    if body.group_id is not None:
        group = await repo.get_group(body.group_id)
        if group is None or group.championship_id != championship_id:
            raise HTTPException(400, "Group does not belong to this championship")
    team = await repo.create_team(
        championship_id, body.name, group_id=body.group_id, logo_url=body.logo_url
    )
    return {"data": team_to_dict(team)}


@router.get("/teams/{team_id}")
async def get_team(team_id: str, repo: RepoDep) -> dict:
    team = await repo.get_team(team_id)
    if not team:
        raise HTTPException(404, "Team not found")
    return {"data": team_to_dict(team)}


@router.get("/teams/{team_id}/matches")
async def list_team_matches(team_id: str, repo: RepoDep) -> dict:
    """A team's fixtures and results, home and away, in schedule order."""
    team = await repo.get_team(team_id)
    if not team:
        raise HTTPException(404, "Team not found")
    matches = await repo.get_matches_for_team(team_id)
    return {"data": [match_to_dict(m) for m in matches]}


@router.patch("/teams/{team_id}")
async def update_team(team_id: str, body: UpdateTeamRequest, repo: RepoDep) -> dict:
    """Rename a team or move it to another group (null group_id ungroups it)."""
    team = await repo.get_team(team_id)
    if not team:
        raise HTTPException(404, "Team not found")
    fields = body.model_dump(exclude_unset=True)
    if "name" in fields and fields["name"] is None:
        raise HTTPException(400, "name cannot be cleared")
    if fields.get("group_id") is not None:
        group = await repo.get_group(fields["group_id"])
        if group is None or group.championship_id != team.championship_id:
            raise HTTPException(400, "Group does not belong to this championship")
    team = await repo.update_team(team_id, fields)
    return {"data": team_to_dict(team)}


@router.delete("/teams/{team_id}")
async def delete_team(team_id: str, repo: RepoDep) -> dict:
    """Delete a team together with its matches."""
    if not await repo.delete_team(team_id):
        raise HTTPException(404, "Team not found")
    return {"data": {"id": team_id, "deleted": True}}
