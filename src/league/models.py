"""League data models - snapshot of everything the views are derived from."""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Contestant:
    """A contestant on the show."""

    id: str
    name: str
    tribe: str
    is_eliminated: bool = False


@dataclass(frozen=True)
class FamilyMember:
    """A league member who drafts contestants."""

    id: str
    name: str
    color: str


@dataclass(frozen=True)
class WeeklyScore:
    """Points one contestant earned in one week."""

    week_number: int
    contestant_id: str
    points: int

    @property
    def key(self) -> Tuple[int, str]:
        return (self.week_number, self.contestant_id)


@dataclass(frozen=True)
class ScoreEntry:
    """One line of a weekly score update."""

    contestant_id: str
    points: int


@dataclass(frozen=True)
class Snapshot:
    """Everything loaded from the store at one point in time.

    ``draft_picks`` maps member id to that member's contestant ids in pick
    order. A member missing from the map has no picks.
    """

    contestants: Tuple[Contestant, ...] = ()
    family_members: Tuple[FamilyMember, ...] = ()
    weekly_scores: Tuple[WeeklyScore, ...] = ()
    draft_picks: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    current_week: int = 1

    @classmethod
    def empty(cls) -> "Snapshot":
        return cls()

    def get_picks(self, member_id: str) -> Tuple[str, ...]:
        """Contestant ids picked by *member_id*, in pick order."""
        return self.draft_picks.get(member_id, ())

    def contestants_by_id(self) -> Dict[str, Contestant]:
        return {c.id: c for c in self.contestants}

    def with_weekly_scores(
        self, weekly_scores: Tuple[WeeklyScore, ...], current_week: int
    ) -> "Snapshot":
        return replace(self, weekly_scores=weekly_scores, current_week=current_week)


@dataclass(frozen=True)
class LeaderboardEntry:
    family_member: FamilyMember
    total_points: int


@dataclass(frozen=True)
class ContestantScore:
    """A pick's points for one week; ``contestant`` is None for a dangling pick."""

    contestant_id: str
    contestant: Optional[Contestant]
    points: int

    @property
    def is_found(self) -> bool:
        return self.contestant is not None


@dataclass(frozen=True)
class WeeklyBreakdownEntry:
    family_member: FamilyMember
    week_total: int
    contestant_scores: List[ContestantScore]


@dataclass(frozen=True)
class RosterContestant:
    """A drafted contestant with season-to-date points."""

    contestant: Contestant
    total_points: int


@dataclass(frozen=True)
class TribeRosterEntry:
    """One member's drafted tribe."""

    family_member: FamilyMember
    contestants: List[RosterContestant]
    total_points: int
    active_count: int
    eliminated_count: int
    picks_remaining: int


@dataclass(frozen=True)
class ContestantWeekScore:
    contestant: Contestant
    points: int


@dataclass(frozen=True)
class LeagueSummary:
    current_week: int
    active_contestants: int
    eliminated_contestants: int
    average_points: int
    leader: Optional[LeaderboardEntry] = None
