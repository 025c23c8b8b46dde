"""Load domain snapshots (teams, matches, goals) for the pure core functions."""

from __future__ import annotations

from placar.db.models import GroupRow, MatchGoalRow, MatchRow, TeamRow
from placar.db.repository import Repository
from placar.models.championship import Group
from placar.models.match import Match, MatchGoal
from placar.models.team import Team


def team_from_row(row: TeamRow) -> Team:
    return Team.model_validate(row, from_attributes=True)


def match_from_row(row: MatchRow) -> Match:
    return Match.model_validate(row, from_attributes=True)


def group_from_row(row: GroupRow) -> Group:
    return Group.model_validate(row, from_attributes=True)


def goal_from_row(row: MatchGoalRow) -> MatchGoal:
    return MatchGoal.model_validate(row, from_attributes=True)


async def load_teams_and_matches(
    repo: Repository, championship_id: str, group_id: str | None = None
) -> tuple[list[Team], list[Match]]:
    """Teams and matches of a championship, or of one of its groups."""
    team_rows = await repo.get_teams(championship_id, group_id=group_id)
    match_rows = await repo.get_matches(championship_id, group_id=group_id)
    return (
        [team_from_row(r) for r in team_rows],
        [match_from_row(r) for r in match_rows],
    )
