"""Standings reports built on pandas.

Turns a snapshot into tables (season leaderboard, member-by-week totals,
per-contestant totals) and writes them as a single JSON report.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from src.league.aggregation import leaderboard, weekly_breakdown
from src.league.config import REPORTS_DIR
from src.league.models import Snapshot

logger = logging.getLogger(__name__)

REPORT_VERSION = "1.0"


def _scores_df(snapshot: Snapshot) -> pd.DataFrame:
    return pd.DataFrame(
        [(s.week_number, s.contestant_id, s.points) for s in snapshot.weekly_scores],
        columns=["week_number", "contestant_id", "points"],
    )


def _picks_df(snapshot: Snapshot) -> pd.DataFrame:
    """One row per distinct (member, contestant) pick."""
    rows = [
        (member_id, cid)
        for member_id, picks in snapshot.draft_picks.items()
        for cid in picks
    ]
    df = pd.DataFrame(rows, columns=["member_id", "contestant_id"])
    return df.drop_duplicates().reset_index(drop=True)


def _to_records(df: pd.DataFrame) -> List[Dict]:
    """JSON-safe records (plain ints/strings, no numpy scalars)."""
    return json.loads(df.to_json(orient="records"))


# ----------------------------------------------------------------------
# Tables
# ----------------------------------------------------------------------


def leaderboard_frame(snapshot: Snapshot) -> pd.DataFrame:
    """Season leaderboard with 1-based rank."""
    board = leaderboard(snapshot)
    return pd.DataFrame(
        [
            {
                "rank": rank,
                "member_id": e.family_member.id,
                "name": e.family_member.name,
                "color": e.family_member.color,
                "total_points": e.total_points,
            }
            for rank, e in enumerate(board, start=1)
        ],
        columns=["rank", "member_id", "name", "color", "total_points"],
    )


def weekly_totals_frame(snapshot: Snapshot) -> pd.DataFrame:
    """Member-by-week matrix of points, plus a ``total`` column.

    Rows follow snapshot member order and are indexed by member id. Columns
    cover week 1 through the current week (and any other week that has
    scores). Each row's ``total`` equals the member's leaderboard total.
    """
    member_ids = [m.id for m in snapshot.family_members]
    scores = _scores_df(snapshot)
    weeks = sorted(
        set(range(1, snapshot.current_week + 1)) | set(scores["week_number"].tolist())
    )

    merged = _picks_df(snapshot).merge(scores, on="contestant_id", how="inner")
    if merged.empty:
        matrix = pd.DataFrame(0, index=member_ids, columns=weeks)
    else:
        matrix = merged.pivot_table(
            index="member_id",
            columns="week_number",
            values="points",
            aggfunc="sum",
            fill_value=0,
        )
        matrix = matrix.reindex(index=member_ids, columns=weeks, fill_value=0)

    matrix = matrix.fillna(0).astype(int)
    matrix.index.name = "member_id"
    matrix.columns.name = "week_number"
    matrix["total"] = matrix[weeks].sum(axis=1)
    return matrix


def contestant_totals_frame(snapshot: Snapshot) -> pd.DataFrame:
    """Season points per contestant, best first.

    ``drafted_by`` counts the members holding the contestant.
    """
    columns = ["contestant_id", "name", "tribe", "is_eliminated", "total_points", "drafted_by"]
    if not snapshot.contestants:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame(
        [
            {
                "contestant_id": c.id,
                "name": c.name,
                "tribe": c.tribe,
                "is_eliminated": c.is_eliminated,
            }
            for c in snapshot.contestants
        ]
    )

    scores = _scores_df(snapshot)
    totals = scores.groupby("contestant_id")["points"].sum()
    drafted = _picks_df(snapshot).groupby("contestant_id")["member_id"].count()

    df["total_points"] = df["contestant_id"].map(totals).fillna(0).astype(int)
    df["drafted_by"] = df["contestant_id"].map(drafted).fillna(0).astype(int)

    df = df.sort_values("total_points", ascending=False, kind="stable")
    return df.reset_index(drop=True)[columns]


# ----------------------------------------------------------------------
# Report
# ----------------------------------------------------------------------


def build_report(snapshot: Snapshot, week_number: Optional[int] = None) -> Dict:
    """Assemble the full standings report as a JSON-serializable dict.

    Args:
        snapshot: League snapshot to report on.
        week_number: Week for the breakdown section. Defaults to the
            snapshot's current week.
    """
    week = week_number if week_number is not None else snapshot.current_week

    totals = weekly_totals_frame(snapshot)
    names = {m.id: m.name for m in snapshot.family_members}
    totals_out = totals.reset_index()
    totals_out.insert(1, "name", totals_out["member_id"].map(names))
    totals_out.columns = [str(c) for c in totals_out.columns]

    breakdown = [
        {
            "member_id": entry.family_member.id,
            "name": entry.family_member.name,
            "week_total": entry.week_total,
            "contestants": [
                {
                    "contestant_id": cs.contestant_id,
                    "name": cs.contestant.name if cs.contestant else None,
                    "points": cs.points,
                }
                for cs in entry.contestant_scores
            ],
        }
        for entry in weekly_breakdown(snapshot, week)
    ]

    return {
        "metadata": {
            "version": REPORT_VERSION,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "current_week": snapshot.current_week,
            "week": week,
            "total_members": len(snapshot.family_members),
            "total_contestants": len(snapshot.contestants),
        },
        "leaderboard": _to_records(leaderboard_frame(snapshot)),
        "weekly_breakdown": breakdown,
        "weekly_totals": _to_records(totals_out),
        "contestants": _to_records(contestant_totals_frame(snapshot)),
    }


def export_report(
    snapshot: Snapshot,
    output_dir: Optional[Path] = None,
    week_number: Optional[int] = None,
) -> Path:
    """Write the standings report to ``standings_week_<n>.json``.

    Also points ``standings_latest.json`` at the new file.

    Returns:
        Path to the written report.
    """
    output_dir = Path(output_dir) if output_dir is not None else REPORTS_DIR
    report = build_report(snapshot, week_number)

    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / f"standings_week_{report['metadata']['week']}.json"

    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)

    latest_link = output_dir / "standings_latest.json"
    if latest_link.exists() or latest_link.is_symlink():
        latest_link.unlink()
    latest_link.symlink_to(output_file.name)

    logger.info(
        "Exported week %d standings for %d members to %s",
        report["metadata"]["week"],
        report["metadata"]["total_members"],
        output_file,
    )
    return output_file
