"""Manual reordering of schedule rows.

All operations return a new row list with ``order`` renumbered 0..n-1 and
leave their input untouched. Invalid indices are a no-op and hand back the
input list itself.

Displacement: an exclusion row (catchup/free/special) that shares its date
with match or bye rows never moves alone. Rows are grouped by date and the
whole date moves as one unit, so a date's rows are never split apart.

By default dates (and their holiday warnings) stay in their positions and
rows are moved between them, which is how a fixture gets moved to another
week. Such a move can put a team on one date twice; detect_conflicts reports
it. With ``keep_dates=False`` a row carries its own date instead. Displacement
moves always carry their date, since the unit *is* that date.
"""

from dataclasses import replace

from seasonsched.models import InvalidInput, RowType, ScheduleRow

DIRECTIONS = ("up", "down", "top", "bottom")


def renumber(rows: list[ScheduleRow]) -> list[ScheduleRow]:
    """Copies of rows with order set to their list position."""
    return [replace(r, order=i) for i, r in enumerate(rows)]


def group_rows_by_date(rows: list[ScheduleRow]) -> list[list[int]]:
    """Row indices grouped by date, groups ordered by first appearance."""
    groups: dict = {}
    for i, row in enumerate(rows):
        groups.setdefault(row.date, []).append(i)
    return list(groups.values())


def needs_displacement(rows: list[ScheduleRow], index: int) -> bool:
    """True if the row is an exclusion sharing its date with match or bye rows."""
    row = rows[index]
    if not row.is_exclusion:
        return False
    return any(
        r.date == row.date and r.row_type in (RowType.match, RowType.bye)
        for r in rows
    )


def _valid_index(rows: list[ScheduleRow], i) -> bool:
    return isinstance(i, int) and not isinstance(i, bool) and 0 <= i < len(rows)


def _units(rows: list[ScheduleRow], displace: bool) -> list[list[int]]:
    if displace:
        return group_rows_by_date(rows)
    return [[i] for i in range(len(rows))]


def _unit_of(units: list[list[int]], index: int) -> int:
    for u, unit in enumerate(units):
        if index in unit:
            return u
    raise IndexError(index)


def _rebuild(rows: list[ScheduleRow], units: list[list[int]],
             keep_dates: bool) -> list[ScheduleRow]:
    flat = [i for unit in units for i in unit]
    if flat == list(range(len(rows))):
        return renumber(rows)

    moved = [rows[i] for i in flat]
    if keep_dates:
        moved = [
            replace(r, date=slot.date, holiday_warning=slot.holiday_warning)
            for r, slot in zip(moved, rows)
        ]
    return renumber(moved)


def move_row(rows: list[ScheduleRow], from_index: int, to_index: int,
             keep_dates: bool = True) -> list[ScheduleRow]:
    """Remove the row at from_index and reinsert it at to_index."""
    if not (_valid_index(rows, from_index) and _valid_index(rows, to_index)):
        return rows
    if from_index == to_index:
        return renumber(rows)

    displace = needs_displacement(rows, from_index)
    units = _units(rows, displace)
    src = _unit_of(units, from_index)
    dst = _unit_of(units, to_index)
    if src == dst:
        return renumber(rows)

    unit = units.pop(src)
    units.insert(dst, unit)
    return _rebuild(rows, units, keep_dates and not displace)


def _reorder_units(count: int, selected: set[int], direction: str) -> list[int]:
    ids = list(range(count))
    if direction == "top":
        return [u for u in ids if u in selected] + [u for u in ids if u not in selected]
    if direction == "bottom":
        return [u for u in ids if u not in selected] + [u for u in ids if u in selected]
    if direction == "up":
        for pos in range(1, count):
            if ids[pos] in selected and ids[pos - 1] not in selected:
                ids[pos - 1], ids[pos] = ids[pos], ids[pos - 1]
        return ids
    # down
    for pos in range(count - 2, -1, -1):
        if ids[pos] in selected and ids[pos + 1] not in selected:
            ids[pos], ids[pos + 1] = ids[pos + 1], ids[pos]
    return ids


def move_block(rows: list[ScheduleRow], selected_indices, direction: str,
               keep_dates: bool = True) -> list[ScheduleRow]:
    """Move a selection of rows together, keeping their relative order.

    direction is one of 'up', 'down' (one step) or 'top', 'bottom'.
    Selected rows already pinned against the edge they move towards stay put.
    """
    if direction not in DIRECTIONS:
        raise InvalidInput(f"invalid move direction: {direction}")

    selected = set(selected_indices)
    if not selected or not all(_valid_index(rows, i) for i in selected):
        return rows

    displace = any(needs_displacement(rows, i) for i in selected)
    units = _units(rows, displace)
    chosen = {u for u, unit in enumerate(units) if any(i in selected for i in unit)}

    new_order = _reorder_units(len(units), chosen, direction)
    return _rebuild(rows, [units[u] for u in new_order], keep_dates and not displace)


def move_row_direction(rows: list[ScheduleRow], index: int, direction: str,
                       keep_dates: bool = True) -> list[ScheduleRow]:
    """Move a single row one step up/down or to the top/bottom."""
    return move_block(rows, [index], direction, keep_dates=keep_dates)
