"""Main scheduling engine for the season scheduler.

Phases:
1. Match days: every date on the league's weekday in the season range
2. Exclusions: withheld dates are set aside but keep their calendar slot
3. Pairings: double round-robin rounds (roundrobin.py), independent of dates
4. Assembly: walk the calendar, one round per available date
5. Diagnostics: home/away balance check and holiday proximity warnings

A shortfall of dates is not an error: as many rounds as fit are scheduled
and the status says how many more dates are needed.
"""

import logging
from datetime import date

from seasonsched.constraints import validate_balance
from seasonsched.holidays import (
    SEASON_WINDOW_DAYS, HolidaySource, annotate_holidays, fetch_holidays_safely,
)
from seasonsched.matchdays import ResolvedDates, generate_dates, resolve_exclusions
from seasonsched.models import (
    InvalidInput, Round, RowType, Schedule, ScheduleRow, ScheduleStatus,
    SeasonRequest, Weekday,
)
from seasonsched.roundrobin import (
    generate_double_round_robin, required_rounds, validate_teams,
)

logger = logging.getLogger(__name__)

FREE_WEEK_NOTES = "Free Week"


def validate_request(request: SeasonRequest) -> Weekday:
    """Reject a request before any rounds are generated.

    Returns the match day, accepting either a Weekday or its name.
    """
    validate_teams(request.teams)
    weekday = request.weekday
    if isinstance(weekday, str):
        weekday = Weekday.from_str(weekday)
    elif not isinstance(weekday, Weekday):
        raise InvalidInput(f"invalid day of week: {weekday}")
    for name in ("season_start", "season_end"):
        if not isinstance(getattr(request, name), date):
            raise InvalidInput(f"{name} must be a date")
    if request.season_end <= request.season_start:
        raise InvalidInput(
            f"season end {request.season_end} must be after "
            f"season start {request.season_start}"
        )
    return weekday


def _round_rows(rnd: Round, d: date) -> list[ScheduleRow]:
    rows = []
    for p in rnd.pairings:
        if p.is_bye:
            rows.append(ScheduleRow(date=d, row_type=RowType.bye,
                                    home_team=p.real_team))
        else:
            rows.append(ScheduleRow(date=d, row_type=RowType.match,
                                    home_team=p.home, away_team=p.away))
    return rows


def assemble_schedule(resolved: ResolvedDates,
                      rounds: list[Round]) -> list[ScheduleRow]:
    """Lay rounds onto the calendar.

    Walks every match day in order. Excluded dates get a row of their kind
    and do not consume a round; other dates take the next round, one row
    per pairing; once rounds run out, remaining dates become free weeks.
    Rounds that do not fit are dropped.
    """
    rows: list[ScheduleRow] = []
    cursor = 0

    for d in resolved.all_dates:
        excluded = resolved.exclusion_for(d)
        if excluded is not None:
            rows.append(ScheduleRow(date=d, row_type=excluded.kind,
                                    notes=excluded.notes))
        elif cursor < len(rounds):
            rows.extend(_round_rows(rounds[cursor], d))
            cursor += 1
        else:
            rows.append(ScheduleRow(date=d, row_type=RowType.free,
                                    notes=FREE_WEEK_NOTES))

    for i, row in enumerate(rows):
        row.order = i

    if cursor < len(rounds):
        logger.info("Scheduled %d of %d rounds", cursor, len(rounds))
    return rows


def _status_message(required: int, available: int) -> tuple[ScheduleStatus, str]:
    if available < required:
        return ScheduleStatus.too_few_dates, (
            f"Need {required} dates but only {available} available "
            f"(after exclusions). Need {required - available} more dates."
        )
    spare = available - required
    return ScheduleStatus.ok, (
        f"Schedule generated successfully. {spare} spare week(s) "
        f"assigned as Free Week."
    )


def _append_warnings(message: str, warnings: list[str]) -> str:
    if not warnings:
        return message
    if message:
        message += "\n\n"
    message += "Validation warnings:\n" + warnings[0]
    if len(warnings) > 1:
        message += f"\n(+{len(warnings) - 1} more warnings)"
    return message


def generate_schedule(request: SeasonRequest,
                      holiday_source: HolidaySource | None = None,
                      holiday_window: int = SEASON_WINDOW_DAYS) -> Schedule:
    """Generate a complete season schedule.

    Raises InvalidInput for a malformed request. Everything else, including
    too few dates and an unreachable holiday source, comes back in the
    returned Schedule.
    """
    weekday = validate_request(request)

    all_dates = generate_dates(weekday, request.season_start,
                               request.season_end)
    resolved = resolve_exclusions(all_dates, request.exclude_dates)

    rounds = generate_double_round_robin(request.teams)
    required = required_rounds(len(request.teams))
    available = len(resolved.available)
    logger.info("%d teams, %d match days, %d available, %d rounds required",
                len(request.teams), len(all_dates), available, required)

    rows = assemble_schedule(resolved, rounds)
    status, message = _status_message(required, available)

    warnings = validate_balance(rows, request.teams)
    if warnings:
        logger.warning("Schedule has %d balance warnings", len(warnings))
    message = _append_warnings(message, warnings)

    holidays = fetch_holidays_safely(holiday_source, request.season_start,
                                     request.season_end)
    if holidays:
        rows = annotate_holidays(rows, holidays, holiday_window)

    return Schedule(
        rows=rows,
        required_dates=required,
        status=status,
        message=message,
        warnings=warnings,
    )


def check_date_count(teams: list[str], dates: list[date]) -> str | None:
    """Check a proposed date list holds exactly the rounds the roster needs.

    Returns None when it does, otherwise a description of the mismatch.
    """
    validate_teams(teams)
    required = required_rounds(len(teams))
    if len(dates) != required:
        return f"date count mismatch: need {required}, have {len(dates)}"
    return None

