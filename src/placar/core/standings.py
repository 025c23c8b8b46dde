"""Standings computation.

All functions are pure: they take snapshots of teams and matches and build a
fresh table on every call. Nothing is cached between calls.

Ranking is points desc, goal difference desc, goals for desc. Python's sort
is stable, so exact ties keep the order in which teams were passed in.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime

from placar.models.championship import Group
from placar.models.match import Match
from placar.models.standings import FORM_LENGTH, FormResult, GroupStandings, Standing
from placar.models.team import Team

logger = logging.getLogger(__name__)

DRAW_POINTS = 1

GENERAL_TABLE_NAME = "Geral"

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def _match_sort_key(match: Match) -> datetime:
    """Kick-off time for ordering recent form; undated matches sort earliest."""
    if match.match_date is None:
        return _EPOCH
    if match.match_date.tzinfo is None:
        return match.match_date.replace(tzinfo=UTC)
    return match.match_date


def _result_for(team_id: str, match: Match) -> FormResult:
    if match.team1_id == team_id:
        scored, conceded = match.team1_score, match.team2_score
    else:
        scored, conceded = match.team2_score, match.team1_score
    if scored > conceded:
        return "W"
    if scored < conceded:
        return "L"
    return "D"


def compute_recent_form(team_id: str, matches: Iterable[Match]) -> list[FormResult]:
    """Return the team's last five results, most recent first, padded with ``-``."""
    played = [
        m for m in matches if m.is_played and team_id in (m.team1_id, m.team2_id)
    ]
    played.sort(key=_match_sort_key, reverse=True)
    form = [_result_for(team_id, m) for m in played[:FORM_LENGTH]]
    return form + ["-"] * (FORM_LENGTH - len(form))


def compute_standings(
    teams: Sequence[Team],
    matches: Sequence[Match],
    points_for_win: int = 3,
) -> list[Standing]:
    """Compute ranked standings for ``teams`` from ``matches``.

    Args:
        teams: Teams to rank. Every team gets exactly one Standing, even with
            no matches played.
        matches: Matches to aggregate. Unplayed matches and matches involving
            a team not in ``teams`` are skipped.
        points_for_win: Points for a win. A draw is always worth 1.

    Returns:
        Standings sorted by points, goal difference, then goals for.

    Raises:
        ValueError: If ``points_for_win`` is not a positive integer.
    """
    if points_for_win <= 0:
        msg = f"points_for_win must be positive, got {points_for_win}"
        raise ValueError(msg)

    table: dict[str, Standing] = {
        team.id: Standing(team_id=team.id, team_name=team.name) for team in teams
    }

    counted: list[Match] = []
    for match in matches:
        if not match.is_played:
            continue
        home = table.get(match.team1_id)
        away = table.get(match.team2_id)
        if home is None or away is None:
            logger.debug(
                "standings_skip_match match=%s reason=unknown_team", match.id
            )
            continue
        counted.append(match)

        home.played += 1
        away.played += 1
        home.goals_for += match.team1_score
        home.goals_against += match.team2_score
        away.goals_for += match.team2_score
        away.goals_against += match.team1_score
        home.goal_difference = home.goals_for - home.goals_against
        away.goal_difference = away.goals_for - away.goals_against

        if match.team1_score > match.team2_score:
            home.wins += 1
            home.points += points_for_win
            away.losses += 1
        elif match.team1_score < match.team2_score:
            away.wins += 1
            away.points += points_for_win
            home.losses += 1
        else:
            home.draws += 1
            away.draws += 1
            home.points += DRAW_POINTS
            away.points += DRAW_POINTS

    for standing in table.values():
        if standing.played > 0:
            standing.percentage = standing.points / (standing.played * points_for_win) * 100
        standing.recent_form = compute_recent_form(standing.team_id, counted)

    return sorted(
        table.values(),
        key=lambda s: (-s.points, -s.goal_difference, -s.goals_for),
    )


def compute_group_standings(
    teams: Sequence[Team],
    matches: Sequence[Match],
    groups: Sequence[Group],
    points_for_win: int = 3,
) -> list[GroupStandings]:
    """Build one standings table per group.

    Each table only sees the group's own teams and matches. A championship
    without groups gets a single general table covering everything.
    """
    if not groups:
        return [
            GroupStandings(
                group_id=None,
                group_name=GENERAL_TABLE_NAME,
                standings=compute_standings(teams, matches, points_for_win),
            )
        ]

    tables: list[GroupStandings] = []
    for group in groups:
        group_teams = [t for t in teams if t.group_id == group.id]
        group_matches = [m for m in matches if m.group_id == group.id]
        tables.append(
            GroupStandings(
                group_id=group.id,
                group_name=group.name,
                standings=compute_standings(group_teams, group_matches, points_for_win),
            )
        )
    return tables


def apply_hypothetical_scores(
    matches: Sequence[Match],
    hypothetical_scores: Mapping[str, tuple[int, int]],
) -> list[Match]:
    """Return copies of ``matches`` with simulated scores filled in.

    Only unplayed matches take a simulated score; real results always win.
    """
    simulated: list[Match] = []
    for match in matches:
        score = hypothetical_scores.get(match.id)
        if score is None or match.is_played:
            simulated.append(match)
            continue
        team1_score, team2_score = score
        simulated.append(
            Match.model_validate(
                {**match.model_dump(), "team1_score": team1_score, "team2_score": team2_score}
            )
        )
    return simulated


def simulate_standings(
    teams: Sequence[Team],
    matches: Sequence[Match],
    hypothetical_scores: Mapping[str, tuple[int, int]],
    points_for_win: int = 3,
) -> list[Standing]:
    """Standings as they would be if the unplayed matches ended as given."""
    simulated = apply_hypothetical_scores(matches, hypothetical_scores)
    return compute_standings(teams, simulated, points_for_win)
