"""Repository pattern for database access.

Wraps SQLAlchemy async sessions. Standings and statistics are never stored:
callers load teams and matches through this class and hand them to the pure
functions in ``placar.core``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from placar.core.scheduler import Fixture
from placar.db.models import (
    ChampionshipRow,
    GroupRow,
    MatchGoalRow,
    MatchRow,
    RoundRow,
    TeamRow,
)

logger = logging.getLogger(__name__)

# Championship columns a PATCH may touch.
_UPDATABLE_CHAMPIONSHIP_FIELDS = frozenset(
    {
        "name",
        "description",
        "city",
        "state",
        "logo_url",
        "points_for_win",
        "sport_type",
        "gender",
        "age_category",
        "tie_breaker_order",
    }
)

_UPDATABLE_TEAM_FIELDS = frozenset({"name", "group_id", "logo_url"})

_UPDATABLE_ROUND_FIELDS = frozenset({"name", "order_index", "type"})

# Scheduling details; results go through update_match_score.
_UPDATABLE_MATCH_FIELDS = frozenset({"match_date", "location", "group_id", "round_id", "notes"})

# Kick-off first (undated last), then generated round and position, then
# creation order.
_MATCH_ORDER = (
    MatchRow.match_date.is_(None),
    MatchRow.match_date,
    MatchRow.round_number.is_(None),
    MatchRow.round_number,
    MatchRow.matchup_index,
    MatchRow.created_at,
)


def to_utc_naive(value: datetime | None) -> datetime | None:
    """Kick-off times are stored as naive UTC; SQLite keeps no offset."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def _check_fields(kind: str, fields: dict[str, object], allowed: frozenset[str]) -> None:
    unknown = set(fields) - allowed
    if unknown:
        msg = f"unknown {kind} fields: {', '.join(sorted(unknown))}"
        raise ValueError(msg)


class Repository:
    """Async repository for all database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # --- Championships ---

    async def create_championship(self, name: str, **fields: object) -> ChampionshipRow:
        _check_fields("championship", fields, _UPDATABLE_CHAMPIONSHIP_FIELDS)
        row = ChampionshipRow(name=name, **fields)
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_championship(self, championship_id: str) -> ChampionshipRow | None:
        return await self.session.get(ChampionshipRow, championship_id)

    async def get_all_championships(self) -> list[ChampionshipRow]:
        """Return all championships, most recent first."""
        stmt = select(ChampionshipRow).order_by(ChampionshipRow.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_championship(
        self, championship_id: str, fields: dict[str, object]
    ) -> ChampionshipRow | None:
        """Apply a partial update. Returns None if the championship doesn't exist."""
        _check_fields("championship", fields, _UPDATABLE_CHAMPIONSHIP_FIELDS)
        row = await self.get_championship(championship_id)
        if row is None:
            return None
        for key, value in fields.items():
            setattr(row, key, value)
        await self.session.flush()
        return row

    async def delete_championship(self, championship_id: str) -> bool:
        """Delete a championship and, via cascade, everything it owns."""
        row = await self.get_championship(championship_id)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True

    # --- Groups / Rounds ---

    async def create_group(self, championship_id: str, name: str) -> GroupRow:
        row = GroupRow(championship_id=championship_id, name=name)
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_group(self, group_id: str) -> GroupRow | None:
        return await self.session.get(GroupRow, group_id)

    async def get_groups(self, championship_id: str) -> list[GroupRow]:
        stmt = (
            select(GroupRow)
            .where(GroupRow.championship_id == championship_id)
            .order_by(GroupRow.name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_group(self, group_id: str) -> bool:
        """Delete a group. Its teams and matches are kept with ``group_id`` cleared."""
        row = await self.get_group(group_id)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True

    async def create_round(
        self,
        championship_id: str,
        name: str,
        order_index: int = 0,
        type: str = "group_stage",
    ) -> RoundRow:
        row = RoundRow(
            championship_id=championship_id,
            name=name,
            order_index=order_index,
            type=type,
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_round(self, round_id: str) -> RoundRow | None:
        return await self.session.get(RoundRow, round_id)

    async def get_rounds(self, championship_id: str) -> list[RoundRow]:
        """Rounds in display order."""
        stmt = (
            select(RoundRow)
            .where(RoundRow.championship_id == championship_id)
            .order_by(RoundRow.order_index, RoundRow.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_round(self, round_id: str, fields: dict[str, object]) -> RoundRow | None:
        _check_fields("round", fields, _UPDATABLE_ROUND_FIELDS)
        row = await self.get_round(round_id)
        if row is None:
            return None
        for key, value in fields.items():
            setattr(row, key, value)
        await self.session.flush()
        return row

    async def delete_round(self, round_id: str) -> bool:
        """Delete a round. Its matches are kept with ``round_id`` cleared."""
        row = await self.get_round(round_id)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True

    # --- Teams ---

    async def create_team(
        self,
        championship_id: str,
        name: str,
        group_id: str | None = None,
        logo_url: str | None = None,
    ) -> TeamRow:
        row = TeamRow(
            championship_id=championship_id,
            name=name,
            group_id=group_id,
            logo_url=logo_url,
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_team(self, team_id: str) -> TeamRow | None:
        return await self.session.get(TeamRow, team_id)

    async def get_teams(
        self, championship_id: str, group_id: str | None = None
    ) -> list[TeamRow]:
        """Teams of a championship in creation order, optionally for one group."""
        stmt = select(TeamRow).where(TeamRow.championship_id == championship_id)
        if group_id is not None:
            stmt = stmt.where(TeamRow.group_id == group_id)
        stmt = stmt.order_by(TeamRow.created_at, TeamRow.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_team(self, team_id: str, fields: dict[str, object]) -> TeamRow | None:
        """Rename a team, move it between groups or change its logo."""
        _check_fields("team", fields, _UPDATABLE_TEAM_FIELDS)
        row = await self.get_team(team_id)
        if row is None:
            return None
        for key, value in fields.items():
            setattr(row, key, value)
        await self.session.flush()
        return row

    async def delete_team(self, team_id: str) -> bool:
        """Delete a team. Its matches and goals go with it."""
        row = await self.get_team(team_id)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True

    # --- Matches ---

    async def create_match(
        self,
        championship_id: str,
        team1_id: str,
        team2_id: str,
        group_id: str | None = None,
        round_id: str | None = None,
        match_date: datetime | None = None,
        location: str | None = None,
        team1_score: int | None = None,
        team2_score: int | None = None,
    ) -> MatchRow:
        row = MatchRow(
            championship_id=championship_id,
            team1_id=team1_id,
            team2_id=team2_id,
            group_id=group_id,
            round_id=round_id,
            match_date=to_utc_naive(match_date),
            location=location,
            team1_score=team1_score,
            team2_score=team2_score,
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_match(self, match_id: str) -> MatchRow | None:
        return await self.session.get(MatchRow, match_id)

    async def get_matches(
        self,
        championship_id: str,
        group_id: str | None = None,
        round_id: str | None = None,
    ) -> list[MatchRow]:
        """Matches of a championship, optionally narrowed to a group and/or round.

        Ordered by kick-off (undated matches last), then by generated round
        and position, then creation order.
        """
        stmt = select(MatchRow).where(MatchRow.championship_id == championship_id)
        if group_id is not None:
            stmt = stmt.where(MatchRow.group_id == group_id)
        if round_id is not None:
            stmt = stmt.where(MatchRow.round_id == round_id)
        stmt = stmt.order_by(*_MATCH_ORDER)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_matches_for_team(self, team_id: str) -> list[MatchRow]:
        """Every match a team plays, home or away, in schedule order."""
        stmt = (
            select(MatchRow)
            .where(or_(MatchRow.team1_id == team_id, MatchRow.team2_id == team_id))
            .order_by(*_MATCH_ORDER)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_match(self, match_id: str, fields: dict[str, object]) -> MatchRow | None:
        """Reschedule a match: kick-off, location, group, round or notes."""
        _check_fields("match", fields, _UPDATABLE_MATCH_FIELDS)
        row = await self.get_match(match_id)
        if row is None:
            return None
        for key, value in fields.items():
            if key == "match_date":
                value = to_utc_naive(value)
            setattr(row, key, value)
        await self.session.flush()
        return row

    async def update_match_score(
        self,
        match_id: str,
        team1_score: int | None,
        team2_score: int | None,
    ) -> MatchRow | None:
        """Set (or clear, with two Nones) a match result."""
        row = await self.get_match(match_id)
        if row is None:
            return None
        row.team1_score = team1_score
        row.team2_score = team2_score
        await self.session.flush()
        return row

    async def delete_match(self, match_id: str) -> bool:
        row = await self.get_match(match_id)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True

    async def replace_matches(
        self,
        championship_id: str,
        fixtures: Sequence[Fixture],
        group_id: str | None = None,
        round_id: str | None = None,
    ) -> list[MatchRow]:
        """Delete the matches in scope and insert ``fixtures`` in their place.

        Scope is the whole championship, narrowed to ``group_id`` and/or
        ``round_id`` when given. New matches are tagged with the same group
        and round.
        """
        stmt = delete(MatchRow).where(MatchRow.championship_id == championship_id)
        if group_id is not None:
            stmt = stmt.where(MatchRow.group_id == group_id)
        if round_id is not None:
            stmt = stmt.where(MatchRow.round_id == round_id)
        result = await self.session.execute(stmt)
        logger.info(
            "matches_cleared championship=%s group=%s round=%s count=%d",
            championship_id,
            group_id,
            round_id,
            result.rowcount,
        )

        rows: list[MatchRow] = []
        per_round: dict[int, int] = {}
        for f in fixtures:
            index = per_round.get(f.round_number, 0)
            per_round[f.round_number] = index + 1
            rows.append(
                MatchRow(
                    championship_id=championship_id,
                    team1_id=f.team1_id,
                    team2_id=f.team2_id,
                    group_id=group_id,
                    round_id=round_id,
                    round_number=f.round_number,
                    matchup_index=index,
                )
            )
        self.session.add_all(rows)
        await self.session.flush()
        return rows

    # --- Goals ---

    async def replace_match_goals(
        self, match_id: str, goals: Sequence[dict]
    ) -> list[MatchGoalRow]:
        """Replace every goal recorded for a match."""
        await self.session.execute(delete(MatchGoalRow).where(MatchGoalRow.match_id == match_id))
        rows = [
            MatchGoalRow(
                match_id=match_id,
                team_id=g["team_id"],
                player_name=g["player_name"],
                jersey_number=g.get("jersey_number"),
            )
            for g in goals
        ]
        self.session.add_all(rows)
        await self.session.flush()
        return rows

    async def get_goals_for_match(self, match_id: str) -> list[MatchGoalRow]:
        stmt = select(MatchGoalRow).where(MatchGoalRow.match_id == match_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_goals_for_championship(self, championship_id: str) -> list[MatchGoalRow]:
        stmt = (
            select(MatchGoalRow)
            .join(MatchRow, MatchGoalRow.match_id == MatchRow.id)
            .where(MatchRow.championship_id == championship_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
