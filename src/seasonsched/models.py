"""Data models for the season scheduler."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class InvalidInput(ValueError):
    """A scheduling request was rejected before any rounds were generated."""


class Weekday(Enum):
    monday = 0
    tuesday = 1
    wednesday = 2
    thursday = 3
    friday = 4
    saturday = 5
    sunday = 6

    @classmethod
    def from_str(cls, s: str) -> "Weekday":
        try:
            return cls[s.strip().lower()]
        except (KeyError, AttributeError):
            raise InvalidInput(f"invalid day of week: {s}") from None

    def matches(self, d: date) -> bool:
        return d.weekday() == self.value


class RowType(Enum):
    match = "match"
    catchup = "catchup"
    free = "free"
    special = "special"
    bye = "bye"

    @property
    def is_exclusion(self) -> bool:
        return self in EXCLUSION_KINDS


EXCLUSION_KINDS = (RowType.catchup, RowType.free, RowType.special)


class ScheduleStatus(Enum):
    ok = "ok"
    too_few_dates = "too_few_dates"


@dataclass(frozen=True)
class Bye:
    """Phantom opponent added to odd rosters. All instances compare equal."""

    def __str__(self) -> str:
        return "BYE"


BYE = Bye()

# A pairing side is either a real team name or the bye sentinel.
Participant = str | Bye


@dataclass(frozen=True)
class ExcludedDate:
    """A date withheld from automatic match assignment."""
    date: date
    kind: RowType
    notes: str = ""

    def __post_init__(self):
        if not self.kind.is_exclusion:
            raise InvalidInput(
                f"exclusion kind must be catchup, free or special, got {self.kind.value}"
            )


@dataclass(frozen=True)
class Pairing:
    """One home/away pairing inside a round. Never mutated once generated."""
    home: Participant
    away: Participant
    round_index: int

    @property
    def is_bye(self) -> bool:
        return self.home == BYE or self.away == BYE

    @property
    def real_team(self) -> str:
        """The team that actually plays (or sits out, for a bye pairing)."""
        if self.home == BYE:
            return self.away
        return self.home

    def involves(self, team: str) -> bool:
        return team in (self.home, self.away)

    def reversed(self, round_index: int) -> "Pairing":
        return Pairing(self.away, self.home, round_index)


@dataclass
class Round:
    """A set of pairings in which every team appears at most once."""
    index: int
    pairings: list[Pairing]

    @property
    def bye_team(self) -> Optional[str]:
        for p in self.pairings:
            if p.is_bye:
                return p.real_team
        return None

    @property
    def matches(self) -> list[Pairing]:
        return [p for p in self.pairings if not p.is_bye]


@dataclass
class ScheduleRow:
    """One line of the fixture list: a match, a bye, or an exclusion week."""
    date: date
    row_type: RowType
    home_team: Optional[str] = None
    away_team: Optional[str] = None
    notes: str = ""
    order: int = 0
    holiday_warning: str = ""

    @property
    def is_exclusion(self) -> bool:
        return self.row_type.is_exclusion

    def teams(self) -> list[str]:
        """Real teams named on this row (bye rows name only one)."""
        if self.row_type == RowType.match:
            return [t for t in (self.home_team, self.away_team) if t]
        if self.row_type == RowType.bye and self.home_team:
            return [self.home_team]
        return []

    def to_dict(self) -> dict:
        d = {
            "date": self.date.isoformat(),
            "rowType": self.row_type.value,
            "rowOrder": self.order,
        }
        if self.home_team:
            d["homeTeam"] = self.home_team
        if self.away_team:
            d["awayTeam"] = self.away_team
        if self.notes:
            d["notes"] = self.notes
        if self.holiday_warning:
            d["holidayWarning"] = self.holiday_warning
        return d


@dataclass
class Schedule:
    """Result of a generation request."""
    rows: list[ScheduleRow]
    required_dates: int
    status: ScheduleStatus
    message: str
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "rows": [r.to_dict() for r in self.rows],
            "requiredDates": self.required_dates,
            "status": self.status.value,
            "message": self.message,
        }


@dataclass
class SeasonRequest:
    """Everything needed to generate one season."""
    teams: list[str]
    weekday: Weekday | str
    season_start: date
    season_end: date
    exclude_dates: list[ExcludedDate] = field(default_factory=list)


@dataclass(frozen=True)
class Holiday:
    date: date
    title: str
    notes: str = ""
