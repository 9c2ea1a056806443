"""Standalone verifier for the season scheduler.

Re-imports a schedule CSV (possibly edited by hand) and checks it for
same-date conflicts, matches on excluded dates and home/away balance.
Usage: seasonsched-verify <schedule.csv> [season.yaml]
"""

import csv
import sys
from pathlib import Path

from seasonsched.config import load_config, parse_date
from seasonsched.constraints import format_validation_report, validate_schedule
from seasonsched.models import InvalidInput, RowType, ScheduleRow
from seasonsched.output import CSV_BYE
from seasonsched.stats import compute_stats, format_stats_report


def parse_csv_schedule(csv_path: str | Path) -> list[ScheduleRow]:
    """Parse a Date, Home Team, Away Team CSV back into schedule rows.

    Rows keep file order; blank lines and rows without a home team are
    skipped.
    """
    rows = []
    with open(csv_path, newline="") as f:
        reader = csv.DictReader(f)
        for record in reader:
            date_str = (record.get("Date") or "").strip()
            home = (record.get("Home Team") or "").strip()
            away = (record.get("Away Team") or "").strip()
            if not date_str or not home:
                continue

            if not away or away.upper() == CSV_BYE:
                rows.append(ScheduleRow(date=parse_date(date_str),
                                        row_type=RowType.bye, home_team=home))
            else:
                rows.append(ScheduleRow(date=parse_date(date_str),
                                        row_type=RowType.match,
                                        home_team=home, away_team=away))

    for i, row in enumerate(rows):
        row.order = i
    return rows


def teams_in_rows(rows: list[ScheduleRow]) -> list[str]:
    """Teams in order of first appearance."""
    seen: dict[str, None] = {}
    for row in rows:
        for t in row.teams():
            seen.setdefault(t, None)
    return list(seen)


def main():
    if len(sys.argv) < 2:
        print("Usage: seasonsched-verify <schedule.csv> [season.yaml]")
        print("  Checks a schedule CSV for conflicts and home/away balance.")
        sys.exit(1)

    csv_path = sys.argv[1]
    config_path = sys.argv[2] if len(sys.argv) > 2 else None

    if not Path(csv_path).exists():
        print(f"Error: {csv_path} not found")
        sys.exit(1)

    teams = None
    exclude_dates = []
    if config_path:
        if not Path(config_path).exists():
            print(f"Error: {config_path} not found")
            sys.exit(1)
        print(f"Loading config from {config_path}...")
        try:
            config = load_config(config_path)
        except InvalidInput as e:
            print(f"Error: {e}")
            sys.exit(1)
        teams = config["request"].teams
        exclude_dates = config["request"].exclude_dates

    print(f"Parsing schedule from {csv_path}...")
    try:
        rows = parse_csv_schedule(csv_path)
    except InvalidInput as e:
        print(f"Error: {e}")
        sys.exit(1)
    print(f"Loaded {len(rows)} rows")

    if not rows:
        print("No fixtures found in CSV. Check the format.")
        sys.exit(1)

    if teams is None:
        teams = teams_in_rows(rows)

    result = validate_schedule(rows, teams, exclude_dates)
    print(format_validation_report(result))
    print("\n" + format_stats_report(compute_stats(rows, teams)))

    sys.exit(0 if result["valid"] and not result["warnings"] else 1)


if __name__ == "__main__":
    main()
