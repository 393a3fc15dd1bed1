from src.league.aggregation import (
    contestant_total_points,
    contestant_week_scores,
    league_summary,
    leaderboard,
    rank_breakdown,
    tribe_rosters,
    viewable_weeks,
    weekly_breakdown,
)
from src.league.league_store import LeagueStore, Phase
from src.league.loader import FetchFailure, SnapshotLoader
from src.league.models import (
    Contestant,
    ContestantScore,
    FamilyMember,
    LeaderboardEntry,
    ScoreEntry,
    Snapshot,
    TribeRosterEntry,
    WeeklyBreakdownEntry,
    WeeklyScore,
)
from src.league.score_mutator import (
    SaveFailure,
    ScoreMutator,
    coerce_points,
    editable_weeks,
    parse_score_form,
    prefill_week_scores,
)

__all__ = [
    "Contestant",
    "ContestantScore",
    "FamilyMember",
    "FetchFailure",
    "LeaderboardEntry",
    "LeagueStore",
    "Phase",
    "SaveFailure",
    "ScoreEntry",
    "ScoreMutator",
    "Snapshot",
    "SnapshotLoader",
    "TribeRosterEntry",
    "WeeklyBreakdownEntry",
    "WeeklyScore",
    "coerce_points",
    "contestant_total_points",
    "contestant_week_scores",
    "editable_weeks",
    "leaderboard",
    "league_summary",
    "parse_score_form",
    "prefill_week_scores",
    "rank_breakdown",
    "tribe_rosters",
    "viewable_weeks",
    "weekly_breakdown",
]
