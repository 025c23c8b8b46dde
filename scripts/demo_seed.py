"""Seed a Placar championship and play it out for demo purposes.

Usage:
    python scripts/demo_seed.py seed [FILE]   # Create championship + teams + fixtures
    python scripts/demo_seed.py play [N]      # Give N unplayed matches a random score
    python scripts/demo_seed.py status        # Print standings per group

FILE defaults to scripts/demo_championship.yaml.
Uses a local SQLite database (demo_placar.db).
"""

from __future__ import annotations

import asyncio
import os
import random
import sys
from pathlib import Path

from placar.api.snapshot import group_from_row, load_teams_and_matches
from placar.core.scheduler import generate_round_robin
from placar.core.seeding import load_championship_config
from placar.core.standings import compute_group_standings
from placar.db.engine import create_engine, create_tables, dispose_engine, get_session
from placar.db.repository import Repository

DEMO_DB = os.environ.get("DATABASE_URL", "sqlite+aiosqlite:///demo_placar.db")
DEFAULT_FILE = Path(__file__).with_name("demo_championship.yaml")


async def seed(path: Path) -> None:
    """Create the demo championship with a round-robin per group."""
    config = load_championship_config(path)
    engine = create_engine(DEMO_DB)
    await create_tables(engine)

    async with get_session(engine) as session:
        repo = Repository(session)
        championship = await repo.create_championship(
            config.name,
            description=config.description,
            city=config.city,
            state=config.state,
            points_for_win=config.points_for_win,
        )

        total = 0
        if config.groups:
            for group_name, members in config.groups.items():
                group = await repo.create_group(championship.id, group_name)
                team_ids = [
                    (await repo.create_team(championship.id, name, group_id=group.id)).id
                    for name in members
                ]
                fixtures = generate_round_robin(team_ids)
                await repo.replace_matches(championship.id, fixtures, group_id=group.id)
                total += len(fixtures)
        else:
            team_ids = [
                (await repo.create_team(championship.id, name)).id for name in config.teams
            ]
            fixtures = generate_round_robin(team_ids)
            await repo.replace_matches(championship.id, fixtures)
            total += len(fixtures)

        print(f"Championship seeded: {len(config.all_team_names())} teams, {total} matches")
        print(f"Championship ID: {championship.id}")

    await dispose_engine(engine)


async def _latest_championship(repo: Repository):
    championships = await repo.get_all_championships()
    return championships[0] if championships else None


async def play(count: int) -> None:
    """Fill up to ``count`` unplayed matches with random scores."""
    engine = create_engine(DEMO_DB)
    async with get_session(engine) as session:
        repo = Repository(session)
        championship = await _latest_championship(repo)
        if championship is None:
            print("No championship found. Run 'seed' first.")
            return

        unplayed = [m for m in await repo.get_matches(championship.id) if m.team1_score is None]
        for match in unplayed[:count]:
            home, away = random.randint(0, 4), random.randint(0, 4)
            await repo.update_match_score(match.id, home, away)
        print(f"Played {min(count, len(unplayed))} of {len(unplayed)} pending matches")

    await dispose_engine(engine)


async def status() -> None:
    """Print current standings."""
    engine = create_engine(DEMO_DB)
    async with get_session(engine) as session:
        repo = Repository(session)
        championship = await _latest_championship(repo)
        if championship is None:
            print("No championship found.")
            return

        teams, matches = await load_teams_and_matches(repo, championship.id)
        groups = [group_from_row(g) for g in await repo.get_groups(championship.id)]
        tables = compute_group_standings(teams, matches, groups, championship.points_for_win)

        print(f"{championship.name} | {championship.points_for_win} points per win")
        for table in tables:
            print()
            print(table.group_name)
            print(
                f"{'#':>2} {'Team':<22} {'P':>3} {'J':>3} {'V':>3} {'E':>3} {'D':>3} "
                f"{'GP':>3} {'GC':>3} {'SG':>4} {'%':>6}  Form"
            )
            print("-" * 72)
            for pos, s in enumerate(table.standings, start=1):
                print(
                    f"{pos:>2} {s.team_name:<22} {s.points:>3} {s.played:>3} {s.wins:>3} "
                    f"{s.draws:>3} {s.losses:>3} {s.goals_for:>3} {s.goals_against:>3} "
                    f"{s.goal_difference:>+4} {s.percentage:>6.1f}  {''.join(s.recent_form)}"
                )

    await dispose_engine(engine)


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        return

    cmd = sys.argv[1]
    if cmd == "seed":
        path = Path(sys.argv[2]) if len(sys.argv) > 2 else DEFAULT_FILE
        asyncio.run(seed(path))
    elif cmd == "play":
        n = int(sys.argv[2]) if len(sys.argv) > 2 else 1
        asyncio.run(play(n))
    elif cmd == "status":
        asyncio.run(status())
    else:
        print(f"Unknown command: {cmd}")
        print(__doc__)


if __name__ == "__main__":
    main()
