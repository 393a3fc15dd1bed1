"""Shared fixtures for the league test suite."""

import copy
from typing import Dict, List, Optional, Sequence

import pytest

from src.gateway import GatewayError
from src.league.models import Contestant, FamilyMember, Snapshot, WeeklyScore


# ------------------------------------------------------------------
# In-memory gateway
# ------------------------------------------------------------------


class FakeGateway:
    """Stands in for RestGateway: tables are lists of row dicts.

    ``fail_on`` maps a table name to the error raised when that table is
    read or written.
    """

    def __init__(self, tables: Optional[Dict[str, List[Dict]]] = None):
        self.tables = {
            "players": [],
            "contestants": [],
            "weekly_scores": [],
            "player_picks": [],
        }
        if tables:
            self.tables.update(copy.deepcopy(tables))
        self.fail_on: Dict[str, Exception] = {}
        self.selects: List[tuple] = []
        self.upserts: List[tuple] = []

    async def select(self, table: str, order_by: Optional[str] = None) -> List[Dict]:
        self.selects.append((table, order_by))
        if table in self.fail_on:
            raise self.fail_on[table]
        rows = [dict(r) for r in self.tables[table]]
        if order_by:
            rows.sort(key=lambda r: r[order_by])
        return rows

    async def upsert(self, table: str, rows: Sequence[Dict], on_conflict: Sequence[str]) -> None:
        self.upserts.append((table, [dict(r) for r in rows], tuple(on_conflict)))
        if table in self.fail_on:
            raise self.fail_on[table]
        stored = self.tables[table]
        for row in rows:
            key = tuple(row[c] for c in on_conflict)
            for i, existing in enumerate(stored):
                if tuple(existing[c] for c in on_conflict) == key:
                    stored[i] = dict(row)
                    break
            else:
                stored.append(dict(row))


# ------------------------------------------------------------------
# Factories
# ------------------------------------------------------------------


def make_snapshot(
    members=(),
    contestants=(),
    scores=(),
    picks=None,
    current_week=None,
) -> Snapshot:
    """Build a snapshot from compact tuples and ids.

    ``members`` are ids (name and color derived), ``contestants`` are ids or
    Contestant records, ``scores`` are ``(week, contestant_id, points)``.
    """
    weekly = tuple(WeeklyScore(w, cid, pts) for w, cid, pts in scores)
    if current_week is None:
        current_week = max([1, *(s.week_number for s in weekly)])
    return Snapshot(
        family_members=tuple(
            FamilyMember(id=m, name=f"Member {m}", color="#3b82f6") for m in members
        ),
        contestants=tuple(
            c if isinstance(c, Contestant) else Contestant(id=c, name=f"Contestant {c}", tribe="Vatu")
            for c in contestants
        ),
        weekly_scores=weekly,
        draft_picks={k: tuple(v) for k, v in (picks or {}).items()},
        current_week=current_week,
    )


# ------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------


@pytest.fixture
def scenario_snapshot():
    """Members A(x, y) and B(y); scores (1,x)=10, (1,y)=5, (2,x)=3."""
    return make_snapshot(
        members=["A", "B"],
        contestants=["x", "y"],
        scores=[(1, "x", 10), (1, "y", 5), (2, "x", 3)],
        picks={"A": ["x", "y"], "B": ["y"]},
    )


@pytest.fixture
def scenario_tables():
    """Wire rows matching ``scenario_snapshot``."""
    return {
        "players": [
            {"id": "A", "name": "Alma", "color": "#3b82f6", "created_at": "2025-01-01"},
            {"id": "B", "name": "Bruno", "color": "#10b981", "created_at": "2025-01-01"},
        ],
        "contestants": [
            {"id": "x", "name": "Xena", "tribe": "Vatu", "is_eliminated": False},
            {"id": "y", "name": "Yusuf", "tribe": "Kalo", "is_eliminated": True},
        ],
        "weekly_scores": [
            {"id": "s2", "week_number": 2, "contestant_id": "x", "points": 3},
            {"id": "s1", "week_number": 1, "contestant_id": "x", "points": 10},
            {"id": "s3", "week_number": 1, "contestant_id": "y", "points": 5},
        ],
        "player_picks": [
            {"id": "p1", "player_id": "A", "contestant_id": "x"},
            {"id": "p2", "player_id": "B", "contestant_id": "y"},
            {"id": "p3", "player_id": "A", "contestant_id": "y"},
        ],
    }


@pytest.fixture
def gateway(scenario_tables):
    return FakeGateway(scenario_tables)


@pytest.fixture
def failing_error():
    return GatewayError("connection refused", status_code=503)
