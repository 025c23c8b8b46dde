"""Championship, group and round API endpoints."""

from __future__ import annotations

import logging
from typing import Annotated, Literal

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from placar.api.deps import RepoDep, SettingsDep, require_championship
from placar.db.models import ChampionshipRow, GroupRow, RoundRow
from placar.models.championship import AgeCategory, Gender, RoundType, SportType, TieBreaker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/championships", tags=["championships"])


class CreateChampionshipRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str | None = None
    city: str | None = None
    state: str | None = None
    logo_url: str | None = None
    points_for_win: Literal[2, 3] | None = None
    sport_type: SportType = "futebol_de_campo"
    gender: Gender = "masculino"
    age_category: AgeCategory = "adulto"


class UpdateChampionshipRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = None
    city: str | None = None
    state: str | None = None
    logo_url: str | None = None
    points_for_win: Literal[2, 3] | None = None
    sport_type: SportType | None = None
    gender: Gender | None = None
    age_category: AgeCategory | None = None
    tie_breaker_order: Annotated[list[TieBreaker], Field(min_length=1)] | None = None


# Columns that are NOT NULL; a PATCH may change them but never clear them.
_REQUIRED_CHAMPIONSHIP_FIELDS = frozenset(
    {"name", "points_for_win", "sport_type", "gender", "age_category", "tie_breaker_order"}
)


class CreateGroupRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class CreateRoundRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    order_index: int = Field(default=0, ge=0)
    type: RoundType = "group_stage"


class UpdateRoundRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    order_index: int | None = Field(default=None, ge=0)
    type: RoundType | None = None


def championship_to_dict(row: ChampionshipRow) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "description": row.description,
        "city": row.city,
        "state": row.state,
        "logo_url": row.logo_url,
        "points_for_win": row.points_for_win,
        "sport_type": row.sport_type,
        "gender": row.gender,
        "age_category": row.age_category,
        "tie_breaker_order": row.tie_breaker_order,
        "created_at": row.created_at.isoformat() if row.created_at else None,
    }


def _group_to_dict(row: GroupRow) -> dict:
    return {"id": row.id, "name": row.name, "championship_id": row.championship_id}


def _round_to_dict(row: RoundRow) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "order_index": row.order_index,
        "type": row.type,
        "championship_id": row.championship_id,
    }


@router.get("")
async def list_championships(repo: RepoDep) -> dict:
    """List all championships, most recent first."""
    rows = await repo.get_all_championships()
    return {"data": [championship_to_dict(r) for r in rows]}


@router.post("", status_code=201)
async def create_championship(
    body: CreateChampionshipRequest, repo: RepoDep, settings: SettingsDep
) -> dict:
    """Create a championship. ``points_for_win`` falls back to the configured default."""
    fields = body.model_dump(exclude={"name"})
    if fields["points_for_win"] is None:
        fields["points_for_win"] = settings.placar_default_points_for_win
    row = await repo.create_championship(body.name, **fields)
    logger.info("championship_created id=%s name=%s", row.id, row.name)
    return {"data": championship_to_dict(row)}


@router.get("/{championship_id}")
async def get_championship(championship_id: str, repo: RepoDep) -> dict:
    row = await require_championship(repo, championship_id)
    return {"data": championship_to_dict(row)}


@router.patch("/{championship_id}")
async def update_championship(
    championship_id: str, body: UpdateChampionshipRequest, repo: RepoDep
) -> dict:
    """Update championship settings; omitted fields are left alone."""
    fields = body.model_dump(exclude_unset=True)
    cleared = sorted(
        key for key, value in fields.items()
        if value is None and key in _REQUIRED_CHAMPIONSHIP_FIELDS
    )
    if cleared:
        raise HTTPException(400, f"Cannot clear required fields: {', '.join(cleared)}")
    row = await repo.update_championship(championship_id, fields)
    if row is None:
        raise HTTPException(404, "Championship not found")
    return {"data": championship_to_dict(row)}


@router.delete("/{championship_id}")
async def delete_championship(championship_id: str, repo: RepoDep) -> dict:
    """Delete a championship with all its groups, rounds, teams and matches."""
    if not await repo.delete_championship(championship_id):
        raise HTTPException(404, "Championship not found")
    logger.info("championship_deleted id=%s", championship_id)
    return {"data": {"id": championship_id, "deleted": True}}


@router.get("/{championship_id}/groups")
async def list_groups(championship_id: str, repo: RepoDep) -> dict:
    await require_championship(repo, championship_id)
    groups = await repo.get_groups(championship_id)
    return {"data": [_group_to_dict(g) for g in groups]}


@router.post("/{championship_id}/groups", status_code=201)
async def create_group(championship_id: str, body: CreateGroupRequest, repo: RepoDep) -> dict:
    await require_championship(repo, championship_id)
    group = await repo.create_group(championship_id, body.name)
    return {"data": _group_to_dict(group)}


@router.get("/{championship_id}/rounds")
async def list_rounds(championship_id: str, repo: RepoDep) -> dict:
    """List rounds in display order."""
    await require_championship(repo, championship_id)
    rounds = await repo.get_rounds(championship_id)
    return {"data": [_round_to_dict(r) for r in rounds]}


@router.post("/{championship_id}/rounds", status_code=201)
async def create_round(championship_id: str, body: CreateRoundRequest, repo: RepoDep) -> dict:
    await require_championship(repo, championship_id)
    rnd = await repo.create_round(
        championship_id, body.name, order_index=body.order_index, type=body.type
    )
    return {"data": _round_to_dict(rnd)}


@router.delete("/{championship_id}/groups/{group_id}")
async def delete_group(championship_id: str, group_id: str, repo: RepoDep) -> dict:
    """Delete a group. Its teams and matches stay, no longer grouped."""
    group = await repo.get_group(group_id)
    if group is None or group.championship_id != championship_id:
        raise HTTPException(404, "Group not found")
    await repo.delete_group(group_id)
    logger.info("group_deleted championship=%s group=%s", championship_id, group_id)
    return {"data": {"id": group_id, "deleted": True}}


@router.patch("/{championship_id}/rounds/{round_id}")
async def update_round(
    championship_id: str, round_id: str, body: UpdateRoundRequest, repo: RepoDep
) -> dict:
    rnd = await repo.get_round(round_id)
    if rnd is None or rnd.championship_id != championship_id:
        raise HTTPException(404, "Round not found")
    fields = body.model_dump(exclude_unset=True)
    cleared = sorted(k for k, v in fields.items() if v is None)
    if cleared:
        raise HTTPException(400, f"Cannot clear required fields: {', '.join(cleared)}")
    rnd = await repo.update_round(round_id, fields)
    return {"data": _round_to_dict(rnd)}


@router.delete("/{championship_id}/rounds/{round_id}")
async def delete_round(championship_id: str, round_id: str, repo: RepoDep) -> dict:
    """Delete a round. Its matches stay, no longer tied to a round."""
    rnd = await repo.get_round(round_id)
    if rnd is None or rnd.championship_id != championship_id:
        raise HTTPException(404, "Round not found")
    await repo.delete_round(round_id)
    logger.info("round_deleted championship=%s round=%s", championship_id, round_id)
    return {"data": {"id": round_id, "deleted": True}}
