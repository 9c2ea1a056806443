"""Tests for reorder.py: single-row and block moves."""

from datetime import date

import pytest

from seasonsched.constraints import detect_conflicts
from seasonsched.models import InvalidInput, RowType, ScheduleRow
from seasonsched.reorder import (
    group_rows_by_date,
    move_block,
    move_row,
    move_row_direction,
    needs_displacement,
    renumber,
)

D1 = date(2026, 1, 7)
D2 = date(2026, 1, 14)
D3 = date(2026, 1, 21)
D4 = date(2026, 1, 28)
D5 = date(2026, 2, 4)


def _match(home, away, d):
    return ScheduleRow(date=d, row_type=RowType.match, home_team=home, away_team=away)


def _labels(rows):
    return [r.notes or f"{r.home_team}-{r.away_team}" for r in rows]


def _five_weeks():
    return renumber([
        _match("A", "B", D1),
        _match("C", "D", D2),
        _match("A", "C", D3),
        _match("B", "D", D4),
        _match("A", "D", D5),
    ])


def _shared_date_rows():
    return renumber([
        _match("A", "B", D1),
        _match("C", "D", D1),
        ScheduleRow(D2, RowType.catchup, notes="Catch-up"),
        _match("A", "C", D2),
        _match("B", "D", D2),
        _match("A", "D", D3),
        _match("B", "C", D3),
    ])


class TestHelpers:
    def test_renumber(self):
        rows = [_match("A", "B", D1), _match("C", "D", D2)]
        out = renumber(list(reversed(rows)))
        assert [r.order for r in out] == [0, 1]
        assert all(r.order == 0 for r in rows)

    def test_group_rows_by_date(self):
        assert group_rows_by_date(_shared_date_rows()) == [[0, 1], [2, 3, 4], [5, 6]]

    def test_needs_displacement(self):
        rows = _shared_date_rows()
        assert needs_displacement(rows, 2)
        assert not needs_displacement(rows, 3)

    def test_lone_exclusion_does_not_displace(self):
        rows = [_match("A", "B", D1), ScheduleRow(D2, RowType.free, notes="Free Week")]
        assert not needs_displacement(rows, 1)


class TestMoveRow:
    def test_move_down(self):
        rows = _five_weeks()
        out = move_row(rows, 0, 2)
        assert _labels(out) == ["C-D", "A-C", "A-B", "B-D", "A-D"]
        assert [r.order for r in out] == [0, 1, 2, 3, 4]

    def test_rows_carry_their_dates_when_asked(self):
        out = move_row(_five_weeks(), 0, 2, keep_dates=False)
        assert out[2].date == D1
        assert out[0].date == D2

    def test_dates_stay_in_slots_by_default(self):
        out = move_row(_five_weeks(), 0, 2)
        assert [r.date for r in out] == [D1, D2, D3, D4, D5]
        assert (out[2].home_team, out[2].away_team) == ("A", "B")

    def test_holiday_warning_stays_with_slot(self):
        rows = _five_weeks()
        rows[0].holiday_warning = "Near New Year's Day (Jan 1)"
        out = move_row(rows, 0, 4)
        assert out[0].holiday_warning == "Near New Year's Day (Jan 1)"
        assert out[4].holiday_warning == ""

    def test_default_move_never_splits_a_date(self):
        rows = renumber([
            _match("A", "B", D1),
            _match("C", "D", D1),
            _match("A", "C", D2),
            _match("B", "D", D2),
        ])
        out = move_row(rows, 0, 3)
        assert group_rows_by_date(out) == [[0, 1], [2, 3]]

    def test_default_move_can_create_conflicts(self):
        rows = renumber([
            _match("A", "B", D1),
            _match("C", "D", D1),
            _match("A", "C", D2),
            _match("B", "D", D2),
        ])
        out = move_row(rows, 0, 2)
        found = {(c.date, c.team) for c in detect_conflicts(out)}
        assert found == {(D1, "C"), (D2, "B")}

    def test_order_gaps_closed_even_without_move(self):
        rows = _five_weeks()
        for r, order in zip(rows, [0, 3, 7, 8, 20]):
            r.order = order
        assert [r.order for r in move_row(rows, 2, 2)] == [0, 1, 2, 3, 4]
        assert [r.order for r in rows] == [0, 3, 7, 8, 20]

    def test_same_index_is_identity(self):
        rows = _five_weeks()
        out = move_row(rows, 3, 3)
        assert out == rows
        assert out is not rows

    @pytest.mark.parametrize("src,dst", [(-1, 0), (0, 5), (9, 1), (True, 2)])
    def test_invalid_index_is_noop(self, src, dst):
        rows = _five_weeks()
        assert move_row(rows, src, dst) is rows

    def test_input_not_mutated(self):
        rows = _five_weeks()
        before = [(r.home_team, r.away_team, r.date, r.order) for r in rows]
        move_row(rows, 4, 0)
        assert [(r.home_team, r.away_team, r.date, r.order) for r in rows] == before

    def test_displaced_date_moves_as_block_to_top(self):
        out = move_row(_shared_date_rows(), 2, 0)
        assert _labels(out) == ["Catch-up", "A-C", "B-D", "A-B", "C-D", "A-D", "B-C"]
        assert [r.date for r in out[:3]] == [D2, D2, D2]

    def test_displaced_date_moves_as_block_to_bottom(self):
        out = move_row(_shared_date_rows(), 2, 6)
        assert _labels(out) == ["A-B", "C-D", "A-D", "B-C", "Catch-up", "A-C", "B-D"]

    def test_displacement_never_splits_a_date(self):
        out = move_row(_shared_date_rows(), 2, 0, keep_dates=True)
        for group in group_rows_by_date(out):
            assert group == list(range(group[0], group[-1] + 1))
        assert detect_conflicts(out) == []

    def test_move_within_own_date_group_is_identity(self):
        rows = _shared_date_rows()
        out = move_row(rows, 2, 4)
        assert _labels(out) == _labels(rows)


class TestMoveBlock:
    def test_top(self):
        out = move_block(_five_weeks(), [1, 3], "top")
        assert _labels(out) == ["C-D", "B-D", "A-B", "A-C", "A-D"]

    def test_bottom(self):
        out = move_block(_five_weeks(), [1, 3], "bottom")
        assert _labels(out) == ["A-B", "A-C", "A-D", "C-D", "B-D"]

    def test_up(self):
        out = move_block(_five_weeks(), [1, 3], "up")
        assert _labels(out) == ["C-D", "A-B", "B-D", "A-C", "A-D"]

    def test_down(self):
        out = move_block(_five_weeks(), [1, 3], "down")
        assert _labels(out) == ["A-B", "A-C", "C-D", "A-D", "B-D"]

    def test_pinned_at_top_stays(self):
        rows = _five_weeks()
        out = move_block(rows, [0, 1], "up")
        assert _labels(out) == _labels(rows)

    def test_pinned_at_bottom_stays(self):
        rows = _five_weeks()
        out = move_block(rows, [4], "down")
        assert _labels(out) == _labels(rows)

    def test_pinned_block_still_renumbered(self):
        rows = _five_weeks()
        rows[3].order = 10
        out = move_block(rows, [0, 1], "up")
        assert _labels(out) == _labels(rows)
        assert [r.order for r in out] == [0, 1, 2, 3, 4]

    def test_dates_stay_in_slots_by_default(self):
        out = move_block(_five_weeks(), [4], "top")
        assert [r.date for r in out] == [D1, D2, D3, D4, D5]
        assert (out[0].home_team, out[0].away_team) == ("A", "D")

    def test_rows_carry_their_dates_when_asked(self):
        out = move_block(_five_weeks(), [4], "top", keep_dates=False)
        assert [r.date for r in out] == [D5, D1, D2, D3, D4]

    def test_orders_dense(self):
        out = move_block(_five_weeks(), [2, 4], "top")
        assert [r.order for r in out] == [0, 1, 2, 3, 4]

    def test_invalid_direction(self):
        with pytest.raises(InvalidInput):
            move_block(_five_weeks(), [1], "sideways")

    def test_empty_selection_is_noop(self):
        rows = _five_weeks()
        assert move_block(rows, [], "top") is rows

    def test_out_of_range_selection_is_noop(self):
        rows = _five_weeks()
        assert move_block(rows, [1, 7], "top") is rows

    def test_displacement_moves_whole_date(self):
        out = move_block(_shared_date_rows(), [2], "bottom")
        assert _labels(out) == ["A-B", "C-D", "A-D", "B-C", "Catch-up", "A-C", "B-D"]

    def test_move_row_direction(self):
        out = move_row_direction(_five_weeks(), 2, "up")
        assert _labels(out) == ["A-B", "A-C", "C-D", "B-D", "A-D"]
