"""SQLAlchemy ORM models for the Placar database.

Tables: championships, groups, rounds, teams, matches, match_goals.
Child rows reference their championship with ON DELETE CASCADE, so deleting
a championship removes everything it owns (foreign keys are enforced by the
engine's connect pragma).
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.sqlite import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from placar.models.championship import DEFAULT_TIE_BREAKER_ORDER


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class ChampionshipRow(Base):
    __tablename__ = "championships"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    logo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    points_for_win: Mapped[int] = mapped_column(Integer, default=3)
    sport_type: Mapped[str] = mapped_column(String(30), default="futebol_de_campo")
    gender: Mapped[str] = mapped_column(String(20), default="masculino")
    age_category: Mapped[str] = mapped_column(String(20), default="adulto")
    tie_breaker_order: Mapped[list] = mapped_column(
        JSON, default=lambda: list(DEFAULT_TIE_BREAKER_ORDER)
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)


class GroupRow(Base):
    __tablename__ = "groups"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    championship_id: Mapped[str] = mapped_column(
        ForeignKey("championships.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    __table_args__ = (Index("ix_groups_championship_id", "championship_id"),)


class RoundRow(Base):
    __tablename__ = "rounds"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    championship_id: Mapped[str] = mapped_column(
        ForeignKey("championships.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, default=0)
    type: Mapped[str] = mapped_column(String(30), default="group_stage")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    __table_args__ = (Index("ix_rounds_championship_order", "championship_id", "order_index"),)


class TeamRow(Base):
    __tablename__ = "teams"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    championship_id: Mapped[str] = mapped_column(
        ForeignKey("championships.id", ondelete="CASCADE"), nullable=False
    )
    group_id: Mapped[str | None] = mapped_column(
        ForeignKey("groups.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    logo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    __table_args__ = (Index("ix_teams_championship_id", "championship_id"),)


class MatchRow(Base):
    __tablename__ = "matches"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    championship_id: Mapped[str] = mapped_column(
        ForeignKey("championships.id", ondelete="CASCADE"), nullable=False
    )
    team1_id: Mapped[str] = mapped_column(
        ForeignKey("teams.id", ondelete="CASCADE"), nullable=False
    )
    team2_id: Mapped[str] = mapped_column(
        ForeignKey("teams.id", ondelete="CASCADE"), nullable=False
    )
    team1_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    team2_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    match_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    group_id: Mapped[str | None] = mapped_column(
        ForeignKey("groups.id", ondelete="SET NULL"), nullable=True
    )
    round_id: Mapped[str | None] = mapped_column(
        ForeignKey("rounds.id", ondelete="SET NULL"), nullable=True
    )
    # Set for generated fixtures: circle-method round and position within it
    round_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    matchup_index: Mapped[int | None] = mapped_column(Integer, nullable=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    __table_args__ = (
        Index("ix_matches_championship_id", "championship_id"),
        Index("ix_matches_championship_group_round", "championship_id", "group_id", "round_id"),
    )


class MatchGoalRow(Base):
    """One goal, credited to a player. Replaced wholesale when a score is edited."""

    __tablename__ = "match_goals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    match_id: Mapped[str] = mapped_column(
        ForeignKey("matches.id", ondelete="CASCADE"), nullable=False
    )
    team_id: Mapped[str] = mapped_column(
        ForeignKey("teams.id", ondelete="CASCADE"), nullable=False
    )
    player_name: Mapped[str] = mapped_column(String(100), nullable=False)
    jersey_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    __table_args__ = (Index("ix_match_goals_match_id", "match_id"),)
