"""Derived league views.

Every function here is pure over a :class:`Snapshot`: it reads the snapshot,
never mutates it, and returns fresh lists. A member's picks are treated as a
set when summing points, so a contestant picked twice by the same member
still counts once toward that member's totals.
"""

import math
from typing import Dict, List

from src.league.config import DRAFT_SIZE
from src.league.models import (
    ContestantScore,
    ContestantWeekScore,
    LeaderboardEntry,
    LeagueSummary,
    RosterContestant,
    Snapshot,
    TribeRosterEntry,
    WeeklyBreakdownEntry,
)


def _points_by_contestant(snapshot: Snapshot) -> Dict[str, int]:
    """Season total per contestant id, over all weeks."""
    totals: Dict[str, int] = {}
    for score in snapshot.weekly_scores:
        totals[score.contestant_id] = totals.get(score.contestant_id, 0) + score.points
    return totals


def _week_points(snapshot: Snapshot, week_number: int) -> Dict[str, int]:
    """Points per contestant id for a single week."""
    return {
        s.contestant_id: s.points
        for s in snapshot.weekly_scores
        if s.week_number == week_number
    }


def _member_total(picks, points: Dict[str, int]) -> int:
    return sum(points.get(cid, 0) for cid in dict.fromkeys(picks))


# ----------------------------------------------------------------------
# Leaderboard
# ----------------------------------------------------------------------


def leaderboard(snapshot: Snapshot) -> List[LeaderboardEntry]:
    """Rank members by season points, highest first.

    Ties keep the order the members appear in the snapshot.
    """
    totals = _points_by_contestant(snapshot)
    entries = [
        LeaderboardEntry(
            family_member=member,
            total_points=_member_total(snapshot.get_picks(member.id), totals),
        )
        for member in snapshot.family_members
    ]
    # sorted() is stable
    return sorted(entries, key=lambda e: e.total_points, reverse=True)


# ----------------------------------------------------------------------
# Weekly breakdown
# ----------------------------------------------------------------------


def weekly_breakdown(snapshot: Snapshot, week_number: int) -> List[WeeklyBreakdownEntry]:
    """Per-member points for one week, in snapshot member order.

    Each member's ``contestant_scores`` follows pick order. A pick whose id
    no longer resolves gets ``contestant=None`` rather than an error, and a
    pick with no score row that week gets 0 points.
    """
    week_points = _week_points(snapshot, week_number)
    contestants = snapshot.contestants_by_id()

    entries = []
    for member in snapshot.family_members:
        picks = snapshot.get_picks(member.id)
        entries.append(
            WeeklyBreakdownEntry(
                family_member=member,
                week_total=_member_total(picks, week_points),
                contestant_scores=[
                    ContestantScore(
                        contestant_id=cid,
                        contestant=contestants.get(cid),
                        points=week_points.get(cid, 0),
                    )
                    for cid in picks
                ],
            )
        )
    return entries


def rank_breakdown(entries: List[WeeklyBreakdownEntry]) -> List[WeeklyBreakdownEntry]:
    """Sorted copy of a breakdown, best week total first."""
    return sorted(entries, key=lambda e: e.week_total, reverse=True)


# ----------------------------------------------------------------------
# Tribe rosters
# ----------------------------------------------------------------------


def contestant_total_points(snapshot: Snapshot, contestant_id: str) -> int:
    """Season points for a single contestant."""
    return sum(
        s.points for s in snapshot.weekly_scores if s.contestant_id == contestant_id
    )


def tribe_rosters(snapshot: Snapshot) -> List[TribeRosterEntry]:
    """Each member's drafted contestants with season totals.

    Dangling picks are left out of the contestant list but still count
    against the member's remaining picks.
    """
    totals = _points_by_contestant(snapshot)
    contestants = snapshot.contestants_by_id()

    rosters = []
    for member in snapshot.family_members:
        picks = snapshot.get_picks(member.id)
        roster = [
            RosterContestant(contestant=contestants[cid], total_points=totals.get(cid, 0))
            for cid in picks
            if cid in contestants
        ]
        eliminated = sum(1 for rc in roster if rc.contestant.is_eliminated)
        rosters.append(
            TribeRosterEntry(
                family_member=member,
                contestants=roster,
                total_points=_member_total(picks, totals),
                active_count=len(roster) - eliminated,
                eliminated_count=eliminated,
                picks_remaining=max(DRAFT_SIZE - len(picks), 0),
            )
        )
    return rosters


# ----------------------------------------------------------------------
# Contestant table and summary
# ----------------------------------------------------------------------


def contestant_week_scores(snapshot: Snapshot, week_number: int) -> List[ContestantWeekScore]:
    """All contestants, in snapshot order, with their points for one week."""
    week_points = _week_points(snapshot, week_number)
    return [
        ContestantWeekScore(contestant=c, points=week_points.get(c.id, 0))
        for c in snapshot.contestants
    ]


def league_summary(snapshot: Snapshot) -> LeagueSummary:
    board = leaderboard(snapshot)
    eliminated = sum(1 for c in snapshot.contestants if c.is_eliminated)

    average = 0
    if board:
        mean = sum(e.total_points for e in board) / len(board)
        average = math.floor(mean + 0.5)

    return LeagueSummary(
        current_week=snapshot.current_week,
        active_contestants=len(snapshot.contestants) - eliminated,
        eliminated_contestants=eliminated,
        average_points=average,
        leader=board[0] if board else None,
    )


# ----------------------------------------------------------------------
# Week selectors
# ----------------------------------------------------------------------


def viewable_weeks(current_week: int) -> List[int]:
    """Weeks a reader can browse: 1 through the current week."""
    return list(range(1, max(current_week, 1) + 1))
