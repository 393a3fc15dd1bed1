"""Snapshot loading - one coordinated read of all four league relations."""

import asyncio
import logging
from typing import Dict, Iterable, List, Tuple

from src.league.config import READ_ORDER, TABLES
from src.league.models import Contestant, FamilyMember, Snapshot, WeeklyScore

logger = logging.getLogger(__name__)

# Order in which failures are reported when several reads fail
RELATIONS = ("members", "contestants", "weekly_scores", "picks")


class FetchFailure(Exception):
    """Raised when one of the bulk reads behind a snapshot fails."""

    def __init__(self, relation: str, cause: Exception):
        label = relation.replace("_", " ").capitalize()
        super().__init__(f"{label} fetch failed: {cause}")
        self.relation = relation
        self.cause = cause


# ----------------------------------------------------------------------
# Wire row mapping
# ----------------------------------------------------------------------


def member_from_row(row: Dict) -> FamilyMember:
    return FamilyMember(id=row["id"], name=row["name"], color=row["color"])


def contestant_from_row(row: Dict) -> Contestant:
    return Contestant(
        id=row["id"],
        name=row["name"],
        tribe=row["tribe"],
        is_eliminated=bool(row["is_eliminated"]),
    )


def weekly_score_from_row(row: Dict) -> WeeklyScore:
    return WeeklyScore(
        week_number=row["week_number"],
        contestant_id=row["contestant_id"],
        points=row["points"],
    )


def fold_picks(rows: Iterable[Dict]) -> Dict[str, Tuple[str, ...]]:
    """Group pick rows by member id, keeping row order within each member."""
    grouped: Dict[str, List[str]] = {}
    for row in rows:
        grouped.setdefault(row["player_id"], []).append(row["contestant_id"])
    return {member_id: tuple(ids) for member_id, ids in grouped.items()}


def derive_current_week(weekly_scores: Iterable[WeeklyScore]) -> int:
    """Latest week with any score, never less than 1."""
    return max([1, *(s.week_number for s in weekly_scores)])


_ROW_MAPPERS = {
    "members": lambda rows: tuple(member_from_row(r) for r in rows),
    "contestants": lambda rows: tuple(contestant_from_row(r) for r in rows),
    "weekly_scores": lambda rows: tuple(weekly_score_from_row(r) for r in rows),
    "picks": fold_picks,
}


class SnapshotLoader:
    """Builds a :class:`Snapshot` from the store.

    The four reads run concurrently; the snapshot is only built once every
    read has come back, and any failure discards the whole batch.
    """

    def __init__(self, gateway):
        self.gateway = gateway

    async def _read(self, relation: str) -> List[Dict]:
        return await self.gateway.select(TABLES[relation], order_by=READ_ORDER[relation])

    async def load(self) -> Snapshot:
        """Fetch all relations and build a fresh snapshot.

        Raises:
            FetchFailure: If any read fails. Names the first failing
                relation in ``RELATIONS`` order.
        """
        results = await asyncio.gather(
            *(self._read(relation) for relation in RELATIONS),
            return_exceptions=True,
        )

        for relation, result in zip(RELATIONS, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning("Snapshot load failed on %s: %s", relation, result)
                raise FetchFailure(relation, result) from result

        mapped = {}
        for relation, rows in zip(RELATIONS, results):
            try:
                mapped[relation] = _ROW_MAPPERS[relation](rows)
                if relation == "weekly_scores":
                    current_week = derive_current_week(mapped[relation])
            except (KeyError, TypeError) as e:
                logger.warning("Malformed %s row: %r", relation, e)
                raise FetchFailure(relation, e) from e

        snapshot = Snapshot(
            family_members=mapped["members"],
            contestants=mapped["contestants"],
            weekly_scores=mapped["weekly_scores"],
            draft_picks=mapped["picks"],
            current_week=current_week,
        )

        logger.info(
            "Loaded snapshot: %d members, %d contestants, %d scores, "
            "%d picks (current week %d)",
            len(snapshot.family_members),
            len(snapshot.contestants),
            len(snapshot.weekly_scores),
            len(results[RELATIONS.index("picks")]),
            snapshot.current_week,
        )
        return snapshot
