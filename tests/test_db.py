"""Tests for database layer: engine, ORM models, repository round-trips."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from placar.core.scheduler import generate_round_robin
from placar.db.engine import (
    _session_factories,
    create_engine,
    create_session_factory,
    create_tables,
    dispose_engine,
    get_session,
)
from placar.db.repository import Repository


async def _seed_teams(repo: Repository, championship_id: str, names, group_id=None):
    return [await repo.create_team(championship_id, name, group_id=group_id) for name in names]


class TestTableCreation:
    async def test_all_tables_created(self, engine: AsyncEngine):
        async with engine.connect() as conn:
            tables = await conn.run_sync(
                lambda sync_conn: sync_conn.dialect.get_table_names(sync_conn)
            )
        expected = {"championships", "groups", "rounds", "teams", "matches", "match_goals"}
        assert expected.issubset(set(tables))


class TestChampionships:
    async def test_create_defaults(self, repo: Repository):
        c = await repo.create_championship("Copa Centro")
        assert c.id
        assert c.points_for_win == 3
        assert c.sport_type == "futebol_de_campo"
        assert c.tie_breaker_order == ["points", "goal_difference", "goals_for"]

    async def test_create_with_fields(self, repo: Repository):
        c = await repo.create_championship("Copa", points_for_win=2, city="Goiânia")
        fetched = await repo.get_championship(c.id)
        assert fetched.points_for_win == 2
        assert fetched.city == "Goiânia"

    async def test_unknown_field_rejected(self, repo: Repository):
        with pytest.raises(ValueError, match="unknown championship fields"):
            await repo.create_championship("Copa", owner="x")

    async def test_get_missing(self, repo: Repository):
        assert await repo.get_championship("nope") is None

    async def test_list(self, repo: Repository):
        await repo.create_championship("A")
        await repo.create_championship("B")
        assert {c.name for c in await repo.get_all_championships()} == {"A", "B"}

    async def test_update(self, repo: Repository):
        c = await repo.create_championship("Copa")
        updated = await repo.update_championship(c.id, {"name": "Copa 2", "points_for_win": 2})
        assert updated.name == "Copa 2"
        assert updated.points_for_win == 2
        assert await repo.update_championship("nope", {"name": "x"}) is None

    async def test_delete_cascades(self, repo: Repository):
        c = await repo.create_championship("Copa")
        g = await repo.create_group(c.id, "Grupo A")
        a, b = await _seed_teams(repo, c.id, ["A", "B"], group_id=g.id)
        m = await repo.create_match(c.id, a.id, b.id, group_id=g.id)
        await repo.replace_match_goals(m.id, [{"team_id": a.id, "player_name": "Rafa"}])

        assert await repo.delete_championship(c.id)
        repo.session.expunge_all()

        assert await repo.get_championship(c.id) is None
        assert await repo.get_groups(c.id) == []
        assert await repo.get_teams(c.id) == []
        assert await repo.get_matches(c.id) == []
        assert await repo.get_goals_for_match(m.id) == []

    async def test_delete_missing(self, repo: Repository):
        assert not await repo.delete_championship("nope")


class TestGroupsAndRounds:
    async def test_groups_sorted_by_name(self, repo: Repository):
        c = await repo.create_championship("Copa")
        await repo.create_group(c.id, "Grupo B")
        await repo.create_group(c.id, "Grupo A")
        assert [g.name for g in await repo.get_groups(c.id)] == ["Grupo A", "Grupo B"]

    async def test_rounds_by_order_index(self, repo: Repository):
        c = await repo.create_championship("Copa")
        await repo.create_round(c.id, "Final", order_index=2, type="final")
        await repo.create_round(c.id, "1ª Rodada", order_index=0)
        await repo.create_round(c.id, "Semifinal", order_index=1, type="semi_finals")
        rounds = await repo.get_rounds(c.id)
        assert [r.name for r in rounds] == ["1ª Rodada", "Semifinal", "Final"]
        assert rounds[0].type == "group_stage"

    async def test_update_round(self, repo: Repository):
        c = await repo.create_championship("Copa")
        r = await repo.create_round(c.id, "Semi")
        updated = await repo.update_round(r.id, {"name": "Semifinal", "type": "semi_finals"})
        assert updated.name == "Semifinal"
        assert updated.type == "semi_finals"
        assert updated.order_index == 0
        assert await repo.update_round("nope", {"name": "x"}) is None
        with pytest.raises(ValueError, match="unknown round fields"):
            await repo.update_round(r.id, {"championship_id": "other"})

    async def test_delete_group_ungroups_teams_and_matches(self, repo: Repository):
        c = await repo.create_championship("Copa")
        g = await repo.create_group(c.id, "Grupo A")
        a, b = await _seed_teams(repo, c.id, ["A", "B"], group_id=g.id)
        await repo.create_match(c.id, a.id, b.id, group_id=g.id)

        assert await repo.delete_group(g.id)
        repo.session.expunge_all()
        assert await repo.get_groups(c.id) == []
        assert [t.group_id for t in await repo.get_teams(c.id)] == [None, None]
        assert [m.group_id for m in await repo.get_matches(c.id)] == [None]
        assert not await repo.delete_group(g.id)

    async def test_delete_round_keeps_matches(self, repo: Repository):
        c = await repo.create_championship("Copa")
        r = await repo.create_round(c.id, "Turno")
        a, b = await _seed_teams(repo, c.id, ["A", "B"])
        await repo.create_match(c.id, a.id, b.id, round_id=r.id)

        assert await repo.delete_round(r.id)
        repo.session.expunge_all()
        assert await repo.get_rounds(c.id) == []
        assert [m.round_id for m in await repo.get_matches(c.id)] == [None]
        assert not await repo.delete_round(r.id)


class TestTeams:
    async def test_filter_by_group(self, repo: Repository):
        c = await repo.create_championship("Copa")
        g = await repo.create_group(c.id, "Grupo A")
        await repo.create_team(c.id, "Leões", group_id=g.id)
        await repo.create_team(c.id, "Tigres")
        assert len(await repo.get_teams(c.id)) == 2
        assert [t.name for t in await repo.get_teams(c.id, group_id=g.id)] == ["Leões"]

    async def test_update_team(self, repo: Repository):
        c = await repo.create_championship("Copa")
        g = await repo.create_group(c.id, "Grupo A")
        t = await repo.create_team(c.id, "Leoes")
        updated = await repo.update_team(t.id, {"name": "Leões", "group_id": g.id})
        assert updated.name == "Leões"
        assert [x.id for x in await repo.get_teams(c.id, group_id=g.id)] == [t.id]
        assert await repo.update_team("nope", {"name": "x"}) is None
        with pytest.raises(ValueError, match="unknown team fields"):
            await repo.update_team(t.id, {"championship_id": "other"})

    async def test_delete_team_removes_matches(self, repo: Repository):
        c = await repo.create_championship("Copa")
        a, b = await _seed_teams(repo, c.id, ["A", "B"])
        await repo.create_match(c.id, a.id, b.id)
        assert await repo.delete_team(a.id)
        repo.session.expunge_all()
        assert await repo.get_matches(c.id) == []
        assert not await repo.delete_team(a.id)


class TestMatches:
    async def test_score_round_trip(self, repo: Repository):
        c = await repo.create_championship("Copa")
        a, b = await _seed_teams(repo, c.id, ["A", "B"])
        m = await repo.create_match(c.id, a.id, b.id, match_date=datetime(2024, 5, 1, 15))
        assert m.team1_score is None

        updated = await repo.update_match_score(m.id, 2, 1)
        assert (updated.team1_score, updated.team2_score) == (2, 1)
        cleared = await repo.update_match_score(m.id, None, None)
        assert cleared.team1_score is None
        assert await repo.update_match_score("nope", 1, 0) is None

    async def test_matches_for_team(self, repo: Repository):
        c = await repo.create_championship("Copa")
        a, b, d = await _seed_teams(repo, c.id, ["A", "B", "D"])
        await repo.create_match(c.id, a.id, b.id)
        await repo.create_match(c.id, d.id, a.id)
        await repo.create_match(c.id, b.id, d.id)
        assert len(await repo.get_matches_for_team(a.id)) == 2

    async def test_matches_for_team_in_schedule_order(self, repo: Repository):
        c = await repo.create_championship("Copa")
        a, b, d = await _seed_teams(repo, c.id, ["A", "B", "D"])
        undated = await repo.create_match(c.id, a.id, b.id)
        late = await repo.create_match(c.id, d.id, a.id, match_date=datetime(2024, 6, 1))
        early = await repo.create_match(c.id, a.id, d.id, match_date=datetime(2024, 5, 1))
        ids = [m.id for m in await repo.get_matches_for_team(a.id)]
        assert ids == [early.id, late.id, undated.id]

    async def test_aware_dates_stored_as_utc(self, repo: Repository):
        c = await repo.create_championship("Copa")
        a, b = await _seed_teams(repo, c.id, ["A", "B"])
        kickoff = datetime(2025, 1, 1, 12, tzinfo=timezone(timedelta(hours=-5)))
        m = await repo.create_match(c.id, a.id, b.id, match_date=kickoff)
        repo.session.expunge_all()
        stored = await repo.get_match(m.id)
        assert stored.match_date == datetime(2025, 1, 1, 17)

    async def test_update_match(self, repo: Repository):
        c = await repo.create_championship("Copa")
        r = await repo.create_round(c.id, "Turno")
        a, b = await _seed_teams(repo, c.id, ["A", "B"])
        m = await repo.create_match(c.id, a.id, b.id, location="Campo 1")
        kickoff = datetime(2025, 3, 9, 16, tzinfo=timezone(timedelta(hours=-3)))
        updated = await repo.update_match(
            m.id, {"match_date": kickoff, "round_id": r.id, "notes": "Clássico"}
        )
        assert updated.match_date == datetime(2025, 3, 9, 19)
        assert updated.round_id == r.id
        assert updated.location == "Campo 1"
        assert await repo.update_match("nope", {"notes": "x"}) is None
        with pytest.raises(ValueError, match="unknown match fields"):
            await repo.update_match(m.id, {"team1_score": 3})

    async def test_dated_matches_first(self, repo: Repository):
        c = await repo.create_championship("Copa")
        a, b = await _seed_teams(repo, c.id, ["A", "B"])
        undated = await repo.create_match(c.id, a.id, b.id)
        late = await repo.create_match(c.id, b.id, a.id, match_date=datetime(2024, 6, 1))
        early = await repo.create_match(c.id, a.id, b.id, match_date=datetime(2024, 5, 1))
        ids = [m.id for m in await repo.get_matches(c.id)]
        assert ids == [early.id, late.id, undated.id]

    async def test_delete_match(self, repo: Repository):
        c = await repo.create_championship("Copa")
        a, b = await _seed_teams(repo, c.id, ["A", "B"])
        m = await repo.create_match(c.id, a.id, b.id)
        assert await repo.delete_match(m.id)
        assert not await repo.delete_match(m.id)


class TestReplaceMatches:
    async def test_inserts_generated_fixtures_in_order(self, repo: Repository):
        c = await repo.create_championship("Copa")
        teams = await _seed_teams(repo, c.id, ["A", "B", "C", "D"])
        fixtures = generate_round_robin([t.id for t in teams])

        rows = await repo.replace_matches(c.id, fixtures)
        assert len(rows) == 6
        assert [r.matchup_index for r in rows] == [0, 1, 0, 1, 0, 1]

        stored = await repo.get_matches(c.id)
        assert [(m.team1_id, m.team2_id) for m in stored] == [
            (f.team1_id, f.team2_id) for f in fixtures
        ]
        assert [m.round_number for m in stored] == [1, 1, 2, 2, 3, 3]

    async def test_regenerating_replaces_whole_championship(self, repo: Repository):
        c = await repo.create_championship("Copa")
        teams = await _seed_teams(repo, c.id, ["A", "B", "C"])
        await repo.create_match(c.id, teams[0].id, teams[1].id, team1_score=1, team2_score=0)
        await repo.replace_matches(c.id, generate_round_robin([t.id for t in teams]))
        stored = await repo.get_matches(c.id)
        assert len(stored) == 3
        assert all(m.team1_score is None for m in stored)

    async def test_group_scope_leaves_other_groups(self, repo: Repository):
        c = await repo.create_championship("Copa")
        g1 = await repo.create_group(c.id, "Grupo A")
        g2 = await repo.create_group(c.id, "Grupo B")
        group_a = await _seed_teams(repo, c.id, ["A1", "A2"], group_id=g1.id)
        group_b = await _seed_teams(repo, c.id, ["B1", "B2", "B3"], group_id=g2.id)

        await repo.replace_matches(c.id, generate_round_robin([t.id for t in group_b]), g2.id)
        await repo.replace_matches(c.id, generate_round_robin([t.id for t in group_a]), g1.id)
        await repo.replace_matches(c.id, generate_round_robin([t.id for t in group_a]), g1.id)

        assert len(await repo.get_matches(c.id, group_id=g1.id)) == 1
        assert len(await repo.get_matches(c.id, group_id=g2.id)) == 3
        assert len(await repo.get_matches(c.id)) == 4

    async def test_round_scope(self, repo: Repository):
        c = await repo.create_championship("Copa")
        r1 = await repo.create_round(c.id, "Turno")
        r2 = await repo.create_round(c.id, "Returno", order_index=1)
        teams = await _seed_teams(repo, c.id, ["A", "B"])
        fixtures = generate_round_robin([t.id for t in teams])
        await repo.replace_matches(c.id, fixtures, round_id=r1.id)
        await repo.replace_matches(c.id, fixtures, round_id=r2.id)
        assert len(await repo.get_matches(c.id, round_id=r1.id)) == 1
        assert len(await repo.get_matches(c.id)) == 2


class TestGoals:
    async def test_replace_goals(self, repo: Repository):
        c = await repo.create_championship("Copa")
        a, b = await _seed_teams(repo, c.id, ["A", "B"])
        m = await repo.create_match(c.id, a.id, b.id, team1_score=2, team2_score=0)
        await repo.replace_match_goals(
            m.id,
            [
                {"team_id": a.id, "player_name": "Rafa", "jersey_number": 9},
                {"team_id": a.id, "player_name": "Caio"},
            ],
        )
        await repo.replace_match_goals(m.id, [{"team_id": a.id, "player_name": "Rafa"}])
        goals = await repo.get_goals_for_match(m.id)
        assert [g.player_name for g in goals] == ["Rafa"]

    async def test_goals_for_championship(self, repo: Repository):
        c1 = await repo.create_championship("Copa 1")
        c2 = await repo.create_championship("Copa 2")
        a, b = await _seed_teams(repo, c1.id, ["A", "B"])
        x, y = await _seed_teams(repo, c2.id, ["X", "Y"])
        m1 = await repo.create_match(c1.id, a.id, b.id, team1_score=1, team2_score=0)
        m2 = await repo.create_match(c2.id, x.id, y.id, team1_score=0, team2_score=1)
        await repo.replace_match_goals(m1.id, [{"team_id": a.id, "player_name": "Rafa"}])
        await repo.replace_match_goals(m2.id, [{"team_id": y.id, "player_name": "Beto"}])
        goals = await repo.get_goals_for_championship(c1.id)
        assert [g.player_name for g in goals] == ["Rafa"]


class TestSessionLifecycle:
    async def test_commit_visible_to_new_session(self, engine: AsyncEngine):
        async with get_session(engine) as session:
            c = await Repository(session).create_championship("Copa")
        async with get_session(engine) as session:
            fetched = await Repository(session).get_championship(c.id)
        assert fetched is not None

    async def test_rollback_on_error(self, engine: AsyncEngine):
        with pytest.raises(RuntimeError):
            async with get_session(engine) as session:
                await Repository(session).create_championship("Perdida")
                raise RuntimeError("boom")
        async with get_session(engine) as session:
            assert await Repository(session).get_all_championships() == []

    async def test_dispose_drops_cached_factory(self):
        eng = create_engine("sqlite+aiosqlite:///:memory:")
        await create_tables(eng)
        factory = create_session_factory(eng)
        assert create_session_factory(eng) is factory
        await dispose_engine(eng)
        assert id(eng.sync_engine) not in _session_factories
