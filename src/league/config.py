from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Standings exports
REPORTS_DIR = PROJECT_ROOT / "data" / "reports"

# Relation name -> table name in the hosted store
TABLES = {
    "members": "players",
    "contestants": "contestants",
    "weekly_scores": "weekly_scores",
    "picks": "player_picks",
}

# Relation name -> column to sort by on bulk read (None = unordered)
READ_ORDER = {
    "members": "name",
    "contestants": "name",
    "weekly_scores": "week_number",
    "picks": None,
}

# Composite key of the weekly_scores table
WEEKLY_SCORE_KEY = ("week_number", "contestant_id")

# Contestants each family member drafts
DRAFT_SIZE = 9

# Weeks offered in the score editor before the season has data
DEFAULT_SEASON_WEEKS = 13
