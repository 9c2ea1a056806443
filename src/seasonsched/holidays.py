"""Public-holiday lookups and proximity warnings for scheduled dates.

Holiday data is best-effort: if a source fails, schedules are still
generated, just without warnings.
"""

import json
import logging
import urllib.error
import urllib.request
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Protocol

import yaml

from seasonsched.models import Holiday, InvalidInput, ScheduleRow

logger = logging.getLogger(__name__)

UK_BANK_HOLIDAYS_URL = "https://www.gov.uk/bank-holidays.json"

SEASON_WINDOW_DAYS = 7
DATE_CHECK_WINDOW_DAYS = 10


class HolidaySourceError(Exception):
    """A holiday source could not supply holidays."""


class HolidaySource(Protocol):
    def fetch(self, start: date, end: date) -> list[Holiday]:
        ...


def _parse_iso(s) -> date:
    if isinstance(s, date):
        return s
    return date.fromisoformat(str(s).strip())


def _holidays_from_entries(entries: list[dict]) -> list[Holiday]:
    """Build holidays from {date, title, notes} dicts, skipping malformed ones."""
    holidays = []
    for entry in entries:
        try:
            d = _parse_iso(entry["date"])
        except (KeyError, TypeError, ValueError):
            logger.debug("Skipping malformed holiday entry: %r", entry)
            continue
        holidays.append(Holiday(
            date=d,
            title=str(entry.get("title", "")),
            notes=str(entry.get("notes", "") or ""),
        ))
    return holidays


class GovUkHolidaySource:
    """UK bank holidays from the GOV.UK JSON feed."""

    def __init__(self, url: str = UK_BANK_HOLIDAYS_URL,
                 division: str = "england-and-wales", timeout: float = 10.0):
        self.url = url
        self.division = division
        self.timeout = timeout

    def fetch(self, start: date, end: date) -> list[Holiday]:
        req = urllib.request.Request(self.url, headers={"Accept": "application/json"})
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                payload = json.load(resp)
        except (urllib.error.URLError, OSError, ValueError) as e:
            raise HolidaySourceError(f"failed to fetch bank holidays: {e}") from e

        try:
            events = payload[self.division]["events"]
        except (KeyError, TypeError) as e:
            raise HolidaySourceError(
                f"bank holidays feed has no '{self.division}' events"
            ) from e

        return filter_holidays_in_range(_holidays_from_entries(events), start, end)


class FileHolidaySource:
    """Holidays listed in a YAML file, either a bare list or under 'holidays'."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def fetch(self, start: date, end: date) -> list[Holiday]:
        try:
            with open(self.path) as f:
                raw = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise HolidaySourceError(f"failed to read {self.path}: {e}") from e

        if isinstance(raw, dict):
            raw = raw.get("holidays", [])
        if not isinstance(raw, list):
            raise HolidaySourceError(f"{self.path}: expected a list of holidays")

        return filter_holidays_in_range(_holidays_from_entries(raw), start, end)


class StaticHolidaySource:
    """Fixed holiday list, e.g. from the season config."""

    def __init__(self, holidays: list[Holiday]):
        self.holidays = list(holidays)

    def fetch(self, start: date, end: date) -> list[Holiday]:
        return filter_holidays_in_range(self.holidays, start, end)


def fetch_holidays_safely(source: HolidaySource | None, start: date,
                          end: date) -> list[Holiday] | None:
    """Fetch holidays, returning None instead of raising on failure.

    Sources may be caller-supplied, so any exception they raise is treated
    as the source being unavailable.
    """
    if source is None:
        return None
    try:
        return source.fetch(start, end)
    except Exception as e:
        logger.warning("Holiday lookup failed, skipping warnings: %s", e)
        return None


def filter_holidays_in_range(holidays: list[Holiday], start: date,
                             end: date) -> list[Holiday]:
    """Holidays falling between start and end inclusive."""
    return [h for h in holidays if start <= h.date <= end]


def nearest_holiday(d: date, holidays: list[Holiday],
                    window_days: int) -> Holiday | None:
    """Closest holiday within +/- window_days of d; the earlier one on a tie."""
    if window_days < 0:
        raise InvalidInput(f"holiday window must not be negative: {window_days}")
    best = None
    best_key = None
    for h in holidays:
        distance = abs((h.date - d).days)
        if distance > window_days:
            continue
        key = (distance, h.date)
        if best_key is None or key < best_key:
            best, best_key = h, key
    return best


def format_holiday_warning(h: Holiday) -> str:
    return f"Near {h.title} ({h.date.strftime('%b')} {h.date.day})"


def annotate_holidays(rows: list[ScheduleRow], holidays: list[Holiday],
                      window_days: int = SEASON_WINDOW_DAYS) -> list[ScheduleRow]:
    """Return copies of rows with a warning set on dates near a holiday.

    Rows with no nearby holiday have their warning cleared.
    """
    annotated = []
    for row in rows:
        h = nearest_holiday(row.date, holidays, window_days)
        warning = format_holiday_warning(h) if h else ""
        annotated.append(replace(row, holiday_warning=warning))
    return annotated


def check_dates(dates: list[date], holidays: list[Holiday],
                window_days: int = DATE_CHECK_WINDOW_DAYS
                ) -> list[tuple[date, Holiday | None]]:
    """Ad-hoc check of candidate dates against the holiday list."""
    return [(d, nearest_holiday(d, holidays, window_days)) for d in dates]
