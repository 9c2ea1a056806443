"""Constraint validation for the season scheduler.

Works on a row list, so it can check a freshly generated schedule, one that
has been reordered by hand, or one re-imported from CSV.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date

from seasonsched.models import ExcludedDate, RowType, ScheduleRow


@dataclass
class Conflict:
    """A team that appears more than once on a single date."""
    date: date
    team: str
    row_indices: list[int]

    @property
    def message(self) -> str:
        return f"{self.team} plays multiple times on this date"


def validate_balance(rows: list[ScheduleRow], teams: list[str]) -> list[str]:
    """Check every pair of teams meets exactly once home and once away.

    Returns one human-readable string per deviation; empty when balanced.
    Bye rows and exclusion rows are ignored.
    """
    errors = []
    known = set(teams)
    counts: dict[tuple[str, str], int] = defaultdict(int)

    for row in rows:
        if row.row_type != RowType.match:
            continue
        if row.home_team not in known or row.away_team not in known:
            errors.append(
                f"Unknown team in match on {row.date}: "
                f"{row.home_team} vs {row.away_team}"
            )
            continue
        counts[(row.home_team, row.away_team)] += 1

    for i, t1 in enumerate(teams):
        for t2 in teams[i + 1:]:
            home_count = counts[(t1, t2)]
            away_count = counts[(t2, t1)]
            if home_count != 1:
                errors.append(
                    f"{t1} should play home vs {t2} exactly once, "
                    f"but plays {home_count} times"
                )
            if away_count != 1:
                errors.append(
                    f"{t1} should play away vs {t2} exactly once, "
                    f"but plays {away_count} times"
                )

    return errors


def detect_conflicts(rows: list[ScheduleRow]) -> list[Conflict]:
    """Find teams playing more than one match on the same date.

    Only match rows count. Conflicts are returned in the order their date
    first appears in the row list, each listing every responsible row index.
    """
    by_date: dict[date, list[int]] = {}
    for i, row in enumerate(rows):
        by_date.setdefault(row.date, []).append(i)

    conflicts = []
    for d, indices in by_date.items():
        team_rows: dict[str, list[int]] = {}
        for i in indices:
            if rows[i].row_type != RowType.match:
                continue
            for team in rows[i].teams():
                team_rows.setdefault(team, []).append(i)
        for team, team_indices in team_rows.items():
            if len(team_indices) > 1:
                conflicts.append(Conflict(date=d, team=team, row_indices=team_indices))

    return conflicts


def conflict_messages(rows: list[ScheduleRow]) -> dict[int, str]:
    """Map each row index involved in a conflict to a highlight message.

    A row caught up in more than one conflict keeps the first message.
    """
    messages: dict[int, str] = {}
    for c in detect_conflicts(rows):
        for i in c.row_indices:
            messages.setdefault(i, c.message)
    return messages


def validate_schedule(rows: list[ScheduleRow], teams: list[str],
                      exclude_dates: list[ExcludedDate] | None = None) -> dict:
    """Validate a schedule against all constraints.

    Returns dict with:
    - valid: bool (True if no errors)
    - errors: same-date conflicts, matches on excluded dates, broken ordering
    - warnings: home/away balance deviations
    - conflicts: list of Conflict
    """
    errors = []

    conflicts = detect_conflicts(rows)
    for c in conflicts:
        errors.append(f"{c.date}: {c.team} plays {len(c.row_indices)} times")

    excluded = {ex.date: ex for ex in exclude_dates or []}
    for row in rows:
        if row.row_type in (RowType.match, RowType.bye) and row.date in excluded:
            kind = excluded[row.date].kind.value
            errors.append(
                f"{row.date}: {row.row_type.value} row on excluded ({kind}) date"
            )

    orders = [row.order for row in rows]
    if orders != list(range(len(rows))):
        errors.append("Row order is not a dense 0..n-1 sequence")

    warnings = validate_balance(rows, teams)

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
        "conflicts": conflicts,
    }


def format_validation_report(result: dict) -> str:
    """Format validation results as readable text."""
    lines = []
    lines.append("=" * 60)
    lines.append("VALIDATION REPORT")
    lines.append("=" * 60)

    if result["valid"]:
        lines.append("All hard constraints PASSED")
    else:
        lines.append(f"ERRORS ({len(result['errors'])}):")
        for e in result["errors"]:
            lines.append(f"  - {e}")

    if result["warnings"]:
        lines.append(f"\nWARNINGS ({len(result['warnings'])}):")
        for w in result["warnings"]:
            lines.append(f"  - {w}")

    return "\n".join(lines)
