"""Round-robin schedule generation.

Generates a single round-robin ("todos contra todos", one leg) where every
team meets every other team exactly once. Uses the circle method:

  - with an odd number of teams a bye placeholder is added, and any pairing
    against it is dropped (that team rests for the round);
  - each round pairs position ``i`` with position ``N-1-i``;
  - between rounds position 0 stays put and the last team moves to
    position 1, shifting the rest one place to the right;
  - home/away flips on odd rounds so home games are spread out.

With N teams (even) that's N-1 rounds of N/2 fixtures, C(N,2) in total.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

# Sentinel for the resting slot. A plain object so it can never collide with
# a real team id.
_BYE = object()


@dataclass(frozen=True)
class Fixture:
    """A generated pairing. ``team1_id`` plays at home."""

    team1_id: str
    team2_id: str
    round_number: int = 1


def generate_round_robin(team_ids: Sequence[str]) -> list[Fixture]:
    """Generate a single round-robin schedule using the circle method.

    Args:
        team_ids: Distinct team ids, in seeding order. Not mutated.

    Returns:
        Fixtures in generation order: all of round 1, then round 2, and so
        on. ``round_number`` is 1-based.

    Raises:
        ValueError: If ``team_ids`` contains duplicates.
    """
    if len(set(team_ids)) != len(team_ids):
        msg = "team ids must be unique to build a round-robin"
        raise ValueError(msg)
    if len(team_ids) < 2:
        return []

    slots: list[object] = list(team_ids)
    if len(slots) % 2 != 0:
        slots.append(_BYE)

    n = len(slots)
    fixtures: list[Fixture] = []

    for rnd in range(n - 1):
        for i in range(n // 2):
            first = slots[i]
            second = slots[n - 1 - i]
            if first is _BYE or second is _BYE:
                continue
            if rnd % 2 == 0:
                fixtures.append(Fixture(first, second, rnd + 1))  # type: ignore[arg-type]
            else:
                fixtures.append(Fixture(second, first, rnd + 1))  # type: ignore[arg-type]

        # Rotate: keep slot 0 fixed, move the last slot to position 1
        slots.insert(1, slots.pop())

    return fixtures


def group_fixtures_by_round(fixtures: Sequence[Fixture]) -> dict[int, list[Fixture]]:
    """Bucket fixtures by round number, keeping generation order within each round."""
    rounds: dict[int, list[Fixture]] = {}
    for fixture in fixtures:
        rounds.setdefault(fixture.round_number, []).append(fixture)
    return rounds
