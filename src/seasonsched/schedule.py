#!/usr/bin/env python3
"""Season Schedule Builder.

Generate a double round-robin season from a YAML season file:
    seasonsched [season.yaml] [-o DIR] [--holidays SOURCE]

    Writes:
      {DIR}/schedule.txt   - Human-readable week-by-week + per-team fixtures
      {DIR}/schedule.csv   - Date, Home Team, Away Team
      {DIR}/schedule.json  - Full schedule rows incl. exclusion weeks
      {DIR}/stats.txt      - Validation report + home/away statistics

Holiday sources:
    config  holidays listed in the season file (default)
    govuk   UK bank holidays feed (needs network; skipped if unreachable)
    file    a separate YAML holiday list given with --holiday-file
    none    no holiday warnings

Examples:
    seasonsched                              # season.yaml, config holidays
    seasonsched darts.yaml -o winter2026     # custom output directory
    seasonsched --holidays govuk -v          # live bank holidays, verbose
"""

import argparse
import logging
import sys
from pathlib import Path

from seasonsched.config import load_config
from seasonsched.constraints import format_validation_report, validate_schedule
from seasonsched.holidays import (
    SEASON_WINDOW_DAYS, FileHolidaySource, GovUkHolidaySource, StaticHolidaySource,
)
from seasonsched.models import InvalidInput, ScheduleStatus
from seasonsched.output import write_schedule
from seasonsched.scheduler import generate_schedule
from seasonsched.stats import compute_stats, format_stats_report


def build_holiday_source(args, config: dict):
    if args.holidays == "none":
        return None
    if args.holidays == "govuk":
        return GovUkHolidaySource()
    if args.holidays == "file":
        if not args.holiday_file:
            print("Error: --holidays file needs --holiday-file PATH")
            sys.exit(1)
        return FileHolidaySource(args.holiday_file)
    if config["holidays"]:
        return StaticHolidaySource(config["holidays"])
    return None


def main():
    parser = argparse.ArgumentParser(
        description="Season Schedule Builder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Exit codes:
  0  Full schedule generated with no validation errors
  1  Invalid season file, too few dates, or validation errors
""",
    )
    parser.add_argument(
        "config", nargs="?", default="season.yaml",
        help="Path to season YAML file (default: season.yaml)"
    )
    parser.add_argument(
        "--output-prefix", "-o", default="output",
        help="Output directory for generated files (default: output/)"
    )
    parser.add_argument(
        "--holidays", choices=["config", "govuk", "file", "none"],
        default="config",
        help="Where to get holidays for proximity warnings (default: config)"
    )
    parser.add_argument(
        "--holiday-file", metavar="YAML",
        help="Holiday list for --holidays file"
    )
    parser.add_argument(
        "--holiday-window", type=int, default=SEASON_WINDOW_DAYS,
        help=f"Warn when a match day is within this many days of a holiday "
             f"(default: {SEASON_WINDOW_DAYS})"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log scheduling details"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="  %(levelname)s %(name)s: %(message)s",
    )

    config_path = args.config
    if not Path(config_path).exists():
        print(f"Error: config file {config_path} not found")
        sys.exit(1)

    print(f"Loading config from {config_path}...")
    try:
        config = load_config(config_path)
    except InvalidInput as e:
        print(f"Error: {e}")
        sys.exit(1)

    request = config["request"]
    print(f"Generating schedule for {len(request.teams)} teams "
          f"on {request.weekday.name.capitalize()}s...")
    try:
        schedule = generate_schedule(
            request,
            holiday_source=build_holiday_source(args, config),
            holiday_window=args.holiday_window,
        )
    except InvalidInput as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"  {schedule.message}")

    # Validate
    print("\nValidating...")
    result = validate_schedule(schedule.rows, request.teams, request.exclude_dates)
    report = format_validation_report(result)
    print(report)

    stats_text = format_stats_report(compute_stats(schedule.rows, request.teams))
    print("\n" + stats_text)

    # Write outputs
    print("\nWriting output files...")
    write_schedule(schedule, output_prefix=args.output_prefix, name=config["name"])

    stats_path = Path(args.output_prefix) / "stats.txt"
    stats_path.write_text(report + "\n\n" + stats_text)
    print(f"Written: {stats_path}")

    if schedule.status == ScheduleStatus.too_few_dates:
        print(f"\nPartial schedule: {schedule.required_dates} dates required.")
        print("Extend the season or remove exclusions.")
        sys.exit(1)
    if not result["valid"]:
        print(f"\nSchedule has {len(result['errors'])} constraint violations.")
        sys.exit(1)

    print("\nSchedule generated successfully!")


if __name__ == "__main__":
    main()
