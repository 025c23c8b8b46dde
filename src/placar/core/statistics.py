"""Championship statistics and top-scorer tables.

Pure aggregations over matches and goal records, same as the standings
engine: nothing is read from or written to the database here.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from placar.models.match import Match, MatchGoal
from placar.models.statistics import ChampionshipStats, ScoreFrequency, TopScorer
from placar.models.team import Team

TOP_SCORELINES = 3


def compute_championship_stats(matches: Sequence[Match]) -> ChampionshipStats:
    """Summarise results across a championship's matches.

    Scorelines are read as ``team1-team2``; ``2-1`` and ``1-2`` count as
    different scorelines. Ties in frequency keep first-seen order.
    """
    played = [m for m in matches if m.is_played]
    total_goals = sum(m.team1_score + m.team2_score for m in played)
    draws = sum(1 for m in played if m.team1_score == m.team2_score)

    scorelines = Counter(f"{m.team1_score}-{m.team2_score}" for m in played)
    top_scores = [
        ScoreFrequency(score=score, count=count)
        for score, count in scorelines.most_common(TOP_SCORELINES)
    ]

    return ChampionshipStats(
        total_matches=len(matches),
        played_matches=len(played),
        total_goals=total_goals,
        avg_goals_per_match=round(total_goals / len(played), 2) if played else 0.0,
        decisive_results=len(played) - draws,
        draws=draws,
        top_scores=top_scores,
    )


def compute_top_scorers(
    goals: Sequence[MatchGoal],
    teams: Sequence[Team],
    limit: int | None = None,
) -> list[TopScorer]:
    """Rank players by goals scored.

    Goals are grouped by ``(player_name, team_id)`` so two players sharing a
    name on different teams stay separate. Goals credited to a team that is
    not in ``teams`` are dropped.
    """
    team_names = {t.id: t.name for t in teams}
    tally: Counter[tuple[str, str]] = Counter()
    for goal in goals:
        if goal.team_id not in team_names:
            continue
        tally[(goal.player_name, goal.team_id)] += 1

    scorers = [
        TopScorer(
            player_name=player_name,
            team_id=team_id,
            team_name=team_names[team_id],
            total_goals=total,
        )
        for (player_name, team_id), total in tally.items()
    ]
    scorers.sort(key=lambda s: (-s.total_goals, s.player_name))
    if limit is not None:
        return scorers[:limit]
    return scorers
