"""Tests for the league store - phases, publishing, views."""

import asyncio

import pytest

from conftest import FakeGateway
from src.gateway import GatewayError
from src.league.league_store import LeagueStore, Phase
from src.league.loader import FetchFailure
from src.league.models import ScoreEntry
from src.league.score_mutator import SaveFailure


def _loaded_store(gateway):
    store = LeagueStore(gateway)
    asyncio.run(store.refetch())
    return store


class TestInitialState:
    def test_starts_loading_with_empty_snapshot(self, gateway):
        store = LeagueStore(gateway)
        assert store.phase is Phase.LOADING
        assert store.loading is True
        assert store.error is None
        assert store.snapshot.family_members == ()
        assert store.current_week == 1

    def test_views_work_before_load(self, gateway):
        store = LeagueStore(gateway)
        assert store.get_leaderboard() == []
        assert store.get_weekly_breakdown(1) == []


class TestRefetch:
    def test_publishes_snapshot(self, gateway):
        store = _loaded_store(gateway)
        assert store.phase is Phase.READY
        assert store.loading is False
        assert store.current_week == 2
        assert [(e.family_member.name, e.total_points) for e in store.get_leaderboard()] == [
            ("Alma", 18),
            ("Bruno", 5),
        ]

    def test_failure_sets_error_and_keeps_previous(self, gateway):
        store = _loaded_store(gateway)
        previous = store.snapshot
        gateway.fail_on["weekly_scores"] = GatewayError("timeout")

        with pytest.raises(FetchFailure):
            asyncio.run(store.refetch())

        assert store.phase is Phase.ERROR
        assert store.error == "Weekly scores fetch failed: timeout"
        assert store.snapshot is previous

    def test_first_load_failure_leaves_empty(self, gateway):
        gateway.fail_on["players"] = GatewayError("down")
        store = LeagueStore(gateway)
        with pytest.raises(FetchFailure):
            asyncio.run(store.refetch())
        assert store.snapshot.family_members == ()

    def test_retry_clears_error(self, gateway):
        store = LeagueStore(gateway)
        gateway.fail_on["players"] = GatewayError("down")
        with pytest.raises(FetchFailure):
            asyncio.run(store.refetch())
        del gateway.fail_on["players"]
        asyncio.run(store.refetch())
        assert store.phase is Phase.READY
        assert store.error is None

    def test_refetch_picks_up_remote_changes(self, gateway):
        store = _loaded_store(gateway)
        gateway.tables["weekly_scores"].append(
            {"week_number": 6, "contestant_id": "y", "points": 1}
        )
        asyncio.run(store.refetch())
        assert store.current_week == 6


class TestUpdateWeeklyScores:
    def test_publishes_patched_snapshot(self, gateway):
        store = _loaded_store(gateway)
        asyncio.run(store.update_weekly_scores(3, [ScoreEntry("x", 7)]))
        assert store.current_week == 3
        assert store.get_leaderboard()[0].total_points == 25

    def test_patch_matches_reload(self, gateway):
        store = _loaded_store(gateway)
        asyncio.run(store.update_weekly_scores(1, [ScoreEntry("y", 2), ScoreEntry("x", 4)]))
        patched_board = [(e.family_member.id, e.total_points) for e in store.get_leaderboard()]

        asyncio.run(store.refetch())
        reloaded_board = [(e.family_member.id, e.total_points) for e in store.get_leaderboard()]
        assert patched_board == reloaded_board

    def test_failure_keeps_published_snapshot(self, gateway):
        store = _loaded_store(gateway)
        previous = store.snapshot
        gateway.fail_on["weekly_scores"] = GatewayError("rejected")
        with pytest.raises(SaveFailure):
            asyncio.run(store.update_weekly_scores(3, [ScoreEntry("x", 7)]))
        assert store.snapshot is previous
        assert store.phase is Phase.READY


class TestReentry:
    def test_save_during_load_rejected(self, scenario_tables):
        gateway = _BlockingGateway(scenario_tables)
        store = LeagueStore(gateway)

        async def scenario():
            load = asyncio.create_task(store.refetch())
            await gateway.started.wait()
            with pytest.raises(RuntimeError, match="in progress"):
                await store.update_weekly_scores(1, [ScoreEntry("x", 1)])
            gateway.release.set()
            await load

        asyncio.run(scenario())
        assert store.phase is Phase.READY
        assert gateway.upserts == []

    def test_gate_released_after_failure(self, gateway):
        store = LeagueStore(gateway)
        gateway.fail_on["players"] = GatewayError("down")
        with pytest.raises(FetchFailure):
            asyncio.run(store.refetch())
        del gateway.fail_on["players"]
        asyncio.run(store.refetch())


class TestViews:
    def test_tribe_rosters(self, gateway):
        store = _loaded_store(gateway)
        rosters = store.get_tribe_rosters()
        assert [r.family_member.id for r in rosters] == ["A", "B"]
        assert rosters[0].eliminated_count == 1

    def test_contestant_week_scores(self, gateway):
        store = _loaded_store(gateway)
        assert [r.points for r in store.get_contestant_week_scores(1)] == [10, 5]

    def test_summary(self, gateway):
        summary = _loaded_store(gateway).get_summary()
        assert summary.leader.family_member.name == "Alma"
        assert summary.eliminated_contestants == 1


class _BlockingGateway(FakeGateway):
    """Holds every read until ``release`` is set."""

    def __init__(self, tables):
        super().__init__(tables)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def select(self, table, order_by=None):
        self.started.set()
        await self.release.wait()
        return await super().select(table, order_by)
