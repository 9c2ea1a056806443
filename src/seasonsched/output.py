"""Output formatters for the season scheduler."""

import csv
import json
from datetime import date
from io import StringIO
from pathlib import Path

from seasonsched.constraints import conflict_messages
from seasonsched.models import RowType, Schedule, ScheduleRow

CSV_HEADER = ["Date", "Home Team", "Away Team"]
CSV_BYE = "BYE"


def _row_text(row: ScheduleRow) -> str:
    if row.row_type == RowType.match:
        return f"{row.home_team} vs {row.away_team}"
    if row.row_type == RowType.bye:
        return f"{row.home_team} (bye)"
    label = row.row_type.value.upper()
    if row.notes:
        return f"{label}: {row.notes}"
    return label


def format_schedule(schedule: Schedule, name: str = "") -> str:
    """Format schedule as human-readable text, one block per date."""
    lines = []
    lines.append("=" * 70)
    lines.append(name.upper() if name else "SEASON SCHEDULE")
    lines.append("=" * 70)
    lines.append(f"Status: {schedule.status.value}  "
                 f"(rounds required: {schedule.required_dates})")
    for msg_line in schedule.message.splitlines():
        lines.append(f"  {msg_line}")

    conflicts = conflict_messages(schedule.rows)

    by_date: dict[date, list[tuple[int, ScheduleRow]]] = {}
    for i, row in enumerate(schedule.rows):
        by_date.setdefault(row.date, []).append((i, row))

    for week, (d, entries) in enumerate(by_date.items(), 1):
        header = f"\n  Week {week:>2}  {d.strftime('%a %d %b %Y')}"
        warning = next((r.holiday_warning for _, r in entries if r.holiday_warning), "")
        if warning:
            header += f"   [{warning}]"
        lines.append(header)
        for i, row in entries:
            flag = f"   !! {conflicts[i]}" if i in conflicts else ""
            lines.append(f"    {row.order:>4}. {_row_text(row)}{flag}")

    # Per-team fixtures
    lines.append("\n" + "=" * 70)
    lines.append("PER-TEAM FIXTURES")
    lines.append("=" * 70)

    by_team: dict[str, list[ScheduleRow]] = {}
    for row in schedule.rows:
        for team in row.teams():
            by_team.setdefault(team, []).append(row)

    for team in sorted(by_team):
        lines.append(f"\n{team}:")
        for n, row in enumerate(by_team[team], 1):
            day = row.date.strftime("%a %d %b")
            if row.row_type == RowType.bye:
                lines.append(f"  {n:>2}. {day}   BYE")
                continue
            is_home = row.home_team == team
            opponent = row.away_team if is_home else row.home_team
            h_a = "H" if is_home else "A"
            lines.append(f"  {n:>2}. {day} {h_a} vs {opponent}")

    return "\n".join(lines)


def format_csv(rows: list[ScheduleRow]) -> str:
    """Format fixtures as a Date, Home Team, Away Team CSV.

    Only match and bye rows are written; a bye has BYE as the away team.
    """
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADER)

    for row in rows:
        if row.row_type == RowType.match:
            writer.writerow([row.date.isoformat(), row.home_team, row.away_team])
        elif row.row_type == RowType.bye:
            writer.writerow([row.date.isoformat(), row.home_team, CSV_BYE])

    return output.getvalue()


def format_json(schedule: Schedule) -> str:
    return json.dumps(schedule.to_dict(), indent=2)


def write_schedule(schedule: Schedule, output_prefix: str = "output",
                   name: str = ""):
    """Write all output files into {output_prefix}/ directory."""
    out_dir = Path(output_prefix)
    out_dir.mkdir(parents=True, exist_ok=True)

    schedule_path = out_dir / "schedule.txt"
    schedule_path.write_text(format_schedule(schedule, name=name))
    print(f"Written: {schedule_path}")

    csv_path = out_dir / "schedule.csv"
    csv_path.write_text(format_csv(schedule.rows))
    print(f"Written: {csv_path}")

    json_path = out_dir / "schedule.json"
    json_path.write_text(format_json(schedule))
    print(f"Written: {json_path}")
