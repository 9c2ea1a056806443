"""Config loading and validation for the season scheduler."""

from datetime import date
from pathlib import Path

import yaml

from seasonsched.models import (
    ExcludedDate, Holiday, InvalidInput, RowType, SeasonRequest, Weekday,
)


def parse_date(s) -> date:
    """Parse date string YYYY-MM-DD.

    YAML already turns unquoted ISO dates into date objects; those pass
    straight through.
    """
    if isinstance(s, date):
        return s
    parts = str(s).strip().split("-")
    try:
        if len(parts) != 3:
            raise ValueError(s)
        return date(int(parts[0]), int(parts[1]), int(parts[2]))
    except ValueError:
        raise InvalidInput(f"invalid date: {s!r} (expected YYYY-MM-DD)") from None


def parse_weekday(s: str) -> Weekday:
    return Weekday.from_str(str(s))


def parse_exclusion(entry: dict) -> ExcludedDate:
    """Parse {date, kind, notes} into an ExcludedDate. kind defaults to free."""
    if not isinstance(entry, dict) or "date" not in entry:
        raise InvalidInput(f"exclusion needs a date: {entry!r}")
    kind_name = str(entry.get("kind", entry.get("type", "free"))).strip().lower()
    try:
        kind = RowType(kind_name)
    except ValueError:
        raise InvalidInput(f"unknown exclusion kind: {kind_name}") from None
    return ExcludedDate(
        date=parse_date(entry["date"]),
        kind=kind,
        notes=str(entry.get("notes", "") or ""),
    )


def parse_holiday(entry: dict) -> Holiday:
    if not isinstance(entry, dict) or "date" not in entry:
        raise InvalidInput(f"holiday needs a date: {entry!r}")
    return Holiday(
        date=parse_date(entry["date"]),
        title=str(entry.get("title", "Holiday")),
        notes=str(entry.get("notes", "") or ""),
    )


def build_request(raw: dict) -> SeasonRequest:
    """Build a SeasonRequest from already-parsed config data."""
    season = raw.get("season")
    if not isinstance(season, dict):
        raise InvalidInput("config has no 'season' section")
    for key in ("weekday", "start_date", "end_date"):
        if key not in season:
            raise InvalidInput(f"season.{key} is required")

    teams = raw.get("teams") or []
    if not isinstance(teams, list):
        raise InvalidInput("'teams' must be a list of team names")

    return SeasonRequest(
        teams=[str(t) for t in teams],
        weekday=parse_weekday(season["weekday"]),
        season_start=parse_date(season["start_date"]),
        season_end=parse_date(season["end_date"]),
        exclude_dates=[parse_exclusion(e) for e in raw.get("exclude_dates") or []],
    )


def load_config(path: str | Path) -> dict:
    """Load and validate a season YAML file, returning structured data.

    Returns dict with:
    - name: season name (may be empty)
    - request: SeasonRequest
    - holidays: list[Holiday] listed in the file (may be empty)
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise InvalidInput(f"{path}: expected a mapping at the top level")

    request = build_request(raw)
    holidays = [parse_holiday(h) for h in raw.get("holidays") or []]

    return {
        "name": str(raw["season"].get("name", "")),
        "request": request,
        "holidays": holidays,
    }
