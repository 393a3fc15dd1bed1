"""League store - owns the published snapshot and its load phase."""

import logging
from enum import Enum
from typing import Iterable, List, Optional

from src.league import aggregation
from src.league.loader import SnapshotLoader
from src.league.models import (
    ContestantWeekScore,
    LeaderboardEntry,
    LeagueSummary,
    ScoreEntry,
    Snapshot,
    TribeRosterEntry,
    WeeklyBreakdownEntry,
)
from src.league.score_mutator import ScoreMutator

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class LeagueStore:
    """Single source of truth for the league views.

    Coordinates SnapshotLoader (reads) and ScoreMutator (writes). Only the
    store replaces the published snapshot, and it does so with a single
    assignment once an operation has fully succeeded, so views never see a
    half-loaded or half-patched snapshot.
    """

    def __init__(self, gateway):
        self.loader = SnapshotLoader(gateway)
        self.mutator = ScoreMutator(gateway)
        self._snapshot = Snapshot.empty()
        self.phase = Phase.LOADING
        self.error: Optional[str] = None
        self._busy = False

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def loading(self) -> bool:
        return self.phase is Phase.LOADING

    @property
    def current_week(self) -> int:
        return self._snapshot.current_week

    def _enter(self, operation: str):
        if self._busy:
            raise RuntimeError(f"Cannot {operation} while another operation is in progress")
        self._busy = True

    async def refetch(self) -> Snapshot:
        """Reload everything from the store and publish the new snapshot.

        On failure the previous snapshot stays published, ``phase`` becomes
        ``ERROR`` and ``error`` carries the message.

        Raises:
            FetchFailure: If any relation could not be read.
            RuntimeError: If a load or save is already running.
        """
        self._enter("reload")
        self.phase = Phase.LOADING
        self.error = None
        try:
            snapshot = await self.loader.load()
        except Exception as e:
            self.phase = Phase.ERROR
            self.error = str(e)
            logger.warning("League reload failed: %s", e)
            raise
        finally:
            self._busy = False

        self._snapshot = snapshot
        self.phase = Phase.READY
        return snapshot

    async def update_weekly_scores(
        self, week_number: int, entries: Iterable[ScoreEntry]
    ) -> Snapshot:
        """Save a week's points and publish the patched snapshot.

        Raises:
            ValueError: If week_number is not a positive integer.
            SaveFailure: If the store rejects the write. The published
                snapshot is left as it was.
            RuntimeError: If a load or save is already running.
        """
        self._enter("save scores")
        try:
            patched = await self.mutator.update_weekly_scores(
                self._snapshot, week_number, entries
            )
        finally:
            self._busy = False

        self._snapshot = patched
        return patched

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def get_leaderboard(self) -> List[LeaderboardEntry]:
        return aggregation.leaderboard(self._snapshot)

    def get_weekly_breakdown(self, week_number: int) -> List[WeeklyBreakdownEntry]:
        return aggregation.weekly_breakdown(self._snapshot, week_number)

    def get_tribe_rosters(self) -> List[TribeRosterEntry]:
        return aggregation.tribe_rosters(self._snapshot)

    def get_contestant_week_scores(self, week_number: int) -> List[ContestantWeekScore]:
        return aggregation.contestant_week_scores(self._snapshot, week_number)

    def get_summary(self) -> LeagueSummary:
        return aggregation.league_summary(self._snapshot)
