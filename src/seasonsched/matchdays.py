"""Match-day calendar: weekly date sequence and exclusion handling."""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

from seasonsched.models import ExcludedDate, InvalidInput, Weekday

logger = logging.getLogger(__name__)


def generate_dates(weekday: Weekday | str, start: date, end: date) -> list[date]:
    """Return every date falling on ``weekday`` between start and end inclusive.

    Scans forward from start to the first matching day, then steps a week at
    a time. An empty list is returned if the range holds no such day.
    """
    if isinstance(weekday, str):
        weekday = Weekday.from_str(weekday)
    if end < start:
        raise InvalidInput(f"season end {end} precedes season start {start}")

    dates = []
    current = start
    while not weekday.matches(current):
        current += timedelta(days=1)
        if current > end:
            return dates

    while current <= end:
        dates.append(current)
        current += timedelta(days=7)

    return dates


@dataclass
class DateIndex:
    """The season's match days, each with a stable integer position.

    Rows and exclusions are grouped by position rather than by formatted
    date strings.
    """
    dates: list[date]
    _positions: dict[date, int] = field(init=False, repr=False)

    def __post_init__(self):
        self._positions = {d: i for i, d in enumerate(self.dates)}

    def __len__(self) -> int:
        return len(self.dates)

    def __iter__(self):
        return iter(self.dates)

    def __contains__(self, d: date) -> bool:
        return d in self._positions

    def position(self, d: date) -> int:
        return self._positions[d]


@dataclass
class ResolvedDates:
    """Full date sequence, plus which dates are withheld and which can host a round."""
    all_dates: DateIndex
    exclusions: dict[int, ExcludedDate]
    available: list[date]

    def exclusion_for(self, d: date) -> ExcludedDate | None:
        if d not in self.all_dates:
            return None
        return self.exclusions.get(self.all_dates.position(d))

    def is_excluded(self, d: date) -> bool:
        return self.exclusion_for(d) is not None


def resolve_exclusions(all_dates: list[date],
                       exclude_dates: list[ExcludedDate]) -> ResolvedDates:
    """Split the season's dates into excluded and available.

    The full list is kept so exclusion and spare weeks still appear in their
    chronological slot when the schedule is assembled. Exclusions on dates
    that are not match days are ignored; a later exclusion for the same date
    replaces an earlier one.
    """
    index = DateIndex(list(all_dates))

    exclusions: dict[int, ExcludedDate] = {}
    for ex in exclude_dates:
        if ex.date not in index:
            logger.debug("Ignoring exclusion on %s: not a match day", ex.date)
            continue
        exclusions[index.position(ex.date)] = ex

    available = [d for i, d in enumerate(index.dates) if i not in exclusions]

    return ResolvedDates(all_dates=index, exclusions=exclusions, available=available)
