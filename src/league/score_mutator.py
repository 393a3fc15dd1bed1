"""Weekly score writes - upsert to the store, then patch the snapshot."""

import logging
import math
import re
from typing import Dict, Iterable, List, Mapping

from src.league.aggregation import weekly_breakdown
from src.league.config import DEFAULT_SEASON_WEEKS, TABLES, WEEKLY_SCORE_KEY
from src.league.models import ScoreEntry, Snapshot, WeeklyScore

logger = logging.getLogger(__name__)

# Leading integer, as typed into a score field ("12", " -3", "7pts")
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


class SaveFailure(Exception):
    """Raised when the store rejects a weekly score upsert."""

    def __init__(self, cause: Exception):
        super().__init__(f"Failed to save scores: {cause}")
        self.cause = cause


def coerce_points(value) -> int:
    """Lenient integer coercion for point values.

    Integers pass through, floats truncate, strings are read up to the first
    non-digit. Anything without a leading integer becomes 0.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        return int(match.group(1)) if match else 0
    return 0


def parse_score_form(form: Mapping[str, object]) -> List[ScoreEntry]:
    """Turn a ``{contestant_id: raw_value}`` form into score entries."""
    return [
        ScoreEntry(contestant_id=cid, points=coerce_points(raw))
        for cid, raw in form.items()
    ]


def prefill_week_scores(snapshot: Snapshot, week_number: int) -> Dict[str, int]:
    """Score form for *week_number*: every drafted, known contestant.

    Unscored contestants start at 0, so saving the form untouched writes an
    explicit 0 row for each of them.
    """
    initial: Dict[str, int] = {}
    for entry in weekly_breakdown(snapshot, week_number):
        for cs in entry.contestant_scores:
            if cs.is_found:
                initial.setdefault(cs.contestant_id, cs.points)
    return initial


def editable_weeks(current_week: int) -> List[int]:
    """Weeks offered by the score editor: one past current, at least a season."""
    return list(range(1, max(current_week + 1, DEFAULT_SEASON_WEEKS) + 1))


def _dedupe_entries(entries: Iterable[ScoreEntry]) -> List[ScoreEntry]:
    """Collapse repeated contestant ids, last value wins, first position kept."""
    latest: Dict[str, ScoreEntry] = {}
    for entry in entries:
        latest[entry.contestant_id] = ScoreEntry(
            contestant_id=entry.contestant_id, points=coerce_points(entry.points)
        )
    return list(latest.values())


def apply_scores(snapshot: Snapshot, week_number: int, entries: List[ScoreEntry]) -> Snapshot:
    """Snapshot with *entries* merged into *week_number*.

    Existing ``(week, contestant)`` rows are replaced where they stand; new
    rows are appended. The current week only ever moves forward.
    """
    scores = list(snapshot.weekly_scores)
    positions = {s.key: i for i, s in enumerate(scores)}

    for entry in entries:
        row = WeeklyScore(week_number, entry.contestant_id, entry.points)
        idx = positions.get(row.key)
        if idx is None:
            positions[row.key] = len(scores)
            scores.append(row)
        else:
            scores[idx] = row

    return snapshot.with_weekly_scores(
        tuple(scores), max(snapshot.current_week, week_number)
    )


class ScoreMutator:
    """Writes one week's points and reconciles the in-memory snapshot."""

    def __init__(self, gateway):
        self.gateway = gateway

    async def update_weekly_scores(
        self,
        snapshot: Snapshot,
        week_number: int,
        entries: Iterable[ScoreEntry],
    ) -> Snapshot:
        """Upsert *entries* for *week_number* and return the patched snapshot.

        The write is a single batch keyed on ``(week_number, contestant_id)``,
        so repeating the same call leaves the store unchanged.

        Args:
            snapshot: Snapshot to patch. Never modified.
            week_number: Positive week to write.
            entries: Contestant points for that week.

        Returns:
            A new snapshot reflecting the write.

        Raises:
            ValueError: If week_number is not a positive integer.
            SaveFailure: If the store rejects the upsert.
        """
        if isinstance(week_number, bool) or not isinstance(week_number, int) or week_number < 1:
            raise ValueError(f"week_number must be a positive integer, got {week_number!r}")

        entries = _dedupe_entries(entries)
        if not entries:
            logger.info("No scores to save for week %d", week_number)
            return snapshot.with_weekly_scores(
                snapshot.weekly_scores, max(snapshot.current_week, week_number)
            )

        rows = [
            {
                "week_number": week_number,
                "contestant_id": e.contestant_id,
                "points": e.points,
            }
            for e in entries
        ]

        try:
            await self.gateway.upsert(
                TABLES["weekly_scores"], rows, on_conflict=WEEKLY_SCORE_KEY
            )
        except Exception as e:
            logger.warning("Saving week %d scores failed: %s", week_number, e)
            raise SaveFailure(e) from e

        patched = apply_scores(snapshot, week_number, entries)
        logger.info(
            "Saved %d scores for week %d (current week %d)",
            len(entries),
            week_number,
            patched.current_week,
        )
        return patched
