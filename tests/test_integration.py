"""Integration test: full end-to-end schedule generation and validation."""

import json
import sys
from collections import Counter
from datetime import date
from pathlib import Path

import pytest

from seasonsched import schedule as schedule_cli
from seasonsched import verify as verify_cli
from seasonsched.config import load_config
from seasonsched.constraints import detect_conflicts, validate_schedule
from seasonsched.holidays import StaticHolidaySource
from seasonsched.models import RowType, ScheduleStatus
from seasonsched.output import format_csv, write_schedule
from seasonsched.reorder import move_row
from seasonsched.scheduler import generate_schedule
from seasonsched.verify import parse_csv_schedule

SEASON_YAML = Path(__file__).resolve().parent.parent / "season.yaml"


def _generate():
    config = load_config(SEASON_YAML)
    schedule = generate_schedule(
        config["request"], holiday_source=StaticHolidaySource(config["holidays"])
    )
    return config, schedule


class TestEndToEnd:
    def test_generate_and_validate(self):
        config, schedule = _generate()
        request = config["request"]

        assert schedule.status == ScheduleStatus.ok
        assert schedule.required_dates == 10
        assert schedule.warnings == []

        result = validate_schedule(schedule.rows, request.teams, request.exclude_dates)
        assert result["valid"], f"Validation failed: {result['errors']}"
        assert result["warnings"] == []

    def test_every_wednesday_has_rows(self):
        _, schedule = _generate()
        dates = sorted({r.date for r in schedule.rows})
        # 2 Sep 2026 .. 28 Apr 2027
        assert len(dates) == 35
        assert all(d.weekday() == 2 for d in dates)

    def test_spare_weeks(self):
        _, schedule = _generate()
        assert "21 spare week(s) assigned as Free Week" in schedule.message
        kinds = Counter(r.row_type for r in schedule.rows)
        assert kinds[RowType.match] == 30
        assert kinds[RowType.catchup] == 1
        assert kinds[RowType.special] == 1
        # 21 spare weeks plus the two configured free weeks
        assert kinds[RowType.free] == 23

    def test_excluded_dates_untouched(self):
        config, schedule = _generate()
        for ex in config["request"].exclude_dates:
            rows = [r for r in schedule.rows if r.date == ex.date]
            assert len(rows) == 1
            assert rows[0].row_type == ex.kind
            assert rows[0].notes == ex.notes

    def test_holiday_warning_near_christmas(self):
        _, schedule = _generate()
        row = next(r for r in schedule.rows if r.date == date(2026, 12, 23))
        assert row.holiday_warning == "Near Christmas Day (Dec 25)"

    def test_csv_round_trip_validates(self, tmp_path):
        config, schedule = _generate()
        path = tmp_path / "schedule.csv"
        path.write_text(format_csv(schedule.rows))

        rows = parse_csv_schedule(path)
        assert len(rows) == 30
        request = config["request"]
        result = validate_schedule(rows, request.teams, request.exclude_dates)
        assert result["valid"]
        assert result["warnings"] == []

    def test_manual_move_to_other_week_flags_conflict(self):
        config, schedule = _generate()
        rows = move_row(schedule.rows, 0, 3, keep_dates=True)
        assert detect_conflicts(rows)
        result = validate_schedule(rows, config["request"].teams)
        assert not result["valid"]

    def test_write_schedule(self, tmp_path):
        config, schedule = _generate()
        out = tmp_path / "out"
        write_schedule(schedule, output_prefix=str(out), name=config["name"])

        text = (out / "schedule.txt").read_text()
        assert "WINTER DARTS LEAGUE 2026/27" in text
        assert "Red Lion:" in text
        data = json.loads((out / "schedule.json").read_text())
        assert data["status"] == "ok"
        assert data["requiredDates"] == 10
        assert len(data["rows"]) == len(schedule.rows)


class TestCommandLine:
    def test_schedule_then_verify(self, tmp_path, monkeypatch):
        out = tmp_path / "winter"
        monkeypatch.setattr(sys, "argv", [
            "seasonsched", str(SEASON_YAML), "-o", str(out), "--holidays", "none",
        ])
        schedule_cli.main()
        for name in ("schedule.txt", "schedule.csv", "schedule.json", "stats.txt"):
            assert (out / name).exists()

        monkeypatch.setattr(sys, "argv", [
            "seasonsched-verify", str(out / "schedule.csv"), str(SEASON_YAML),
        ])
        with pytest.raises(SystemExit) as exc:
            verify_cli.main()
        assert exc.value.code == 0

    def test_too_few_dates_exits_1(self, tmp_path, monkeypatch):
        season = tmp_path / "short.yaml"
        season.write_text(
            "season:\n"
            "  weekday: wednesday\n"
            "  start_date: 2026-09-01\n"
            "  end_date: 2026-09-30\n"
            "teams: [A, B, C, D]\n"
        )
        monkeypatch.setattr(sys, "argv", [
            "seasonsched", str(season), "-o", str(tmp_path / "out"),
        ])
        with pytest.raises(SystemExit) as exc:
            schedule_cli.main()
        assert exc.value.code == 1
        # partial schedule is still written
        assert (tmp_path / "out" / "schedule.csv").exists()

    def test_missing_config_exits_1(self, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["seasonsched", str(tmp_path / "nope.yaml")])
        with pytest.raises(SystemExit) as exc:
            schedule_cli.main()
        assert exc.value.code == 1
