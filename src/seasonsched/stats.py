"""Statistics and balance reporting for the season scheduler."""

from collections import defaultdict

from seasonsched.models import RowType, ScheduleRow


def _longest_run(seq: list[str], value: str) -> int:
    best = run = 0
    for s in seq:
        run = run + 1 if s == value else 0
        best = max(best, run)
    return best


def compute_stats(rows: list[ScheduleRow], teams: list[str]) -> dict:
    """Compute per-team statistics for a schedule, in row order.

    Home/away streaks are reported because the generator only guarantees
    the per-pair balance, not short streaks. Byes do not break a streak.
    """
    home_counts = defaultdict(int)
    away_counts = defaultdict(int)
    bye_counts = defaultdict(int)
    sequence: dict[str, list[str]] = defaultdict(list)  # team -> ["H", "A", ...]
    matchup_counts = defaultdict(lambda: defaultdict(int))  # home -> away -> count

    row_type_counts = defaultdict(int)

    for row in rows:
        row_type_counts[row.row_type.value] += 1
        if row.row_type == RowType.bye:
            bye_counts[row.home_team] += 1
            continue
        if row.row_type != RowType.match:
            continue
        h = row.home_team
        a = row.away_team
        home_counts[h] += 1
        away_counts[a] += 1
        sequence[h].append("H")
        sequence[a].append("A")
        matchup_counts[h][a] += 1

    longest_home = {t: _longest_run(sequence[t], "H") for t in teams}
    longest_away = {t: _longest_run(sequence[t], "A") for t in teams}

    return {
        "teams": list(teams),
        "home_counts": dict(home_counts),
        "away_counts": dict(away_counts),
        "bye_counts": dict(bye_counts),
        "total_games": {t: home_counts[t] + away_counts[t] for t in teams},
        "longest_home_streak": longest_home,
        "longest_away_streak": longest_away,
        "sequence": {t: "".join(sequence[t]) for t in teams},
        "matchup_counts": {k: dict(v) for k, v in matchup_counts.items()},
        "row_type_counts": dict(row_type_counts),
    }


def format_stats_report(stats: dict) -> str:
    """Format statistics into a human-readable report."""
    lines = []
    lines.append("=" * 70)
    lines.append("SCHEDULE STATISTICS")
    lines.append("=" * 70)

    teams = stats["teams"]
    width = max([8] + [len(t) + 1 for t in teams])

    def _z(v, w=5):
        """Format an integer, suppressing zeros to blank."""
        if v == 0:
            return " " * w
        return f"{v:>{w}}"

    lines.append("\n--- SEASON BALANCE ---")
    lines.append(f"{'Team':<{width}} {'Home':>5} {'Away':>5} {'Bye':>5} {'Total':>5} "
                 f"{'H-run':>5} {'A-run':>5}  Sequence")
    lines.append("-" * (width + 50))
    for t in teams:
        h = stats["home_counts"].get(t, 0)
        a = stats["away_counts"].get(t, 0)
        bye = stats["bye_counts"].get(t, 0)
        hr = stats["longest_home_streak"][t]
        ar = stats["longest_away_streak"][t]
        flag = " ***" if max(hr, ar) > 2 else ""
        lines.append(f"{t:<{width}} {_z(h)} {_z(a)} {_z(bye)} {_z(h + a)} "
                     f"{_z(hr)} {_z(ar)}  {stats['sequence'][t]}{flag}")

    # Matchup matrix: row = home team, column = away team
    lines.append("\n--- HOME (row) vs AWAY (column) ---")
    header = f"{'':>{width}}"
    for t in teams:
        header += f" {t[:5]:>5}"
    lines.append(header)
    lines.append("-" * (width + 6 * len(teams)))
    for t1 in teams:
        row = f"{t1:>{width}}"
        for t2 in teams:
            if t1 == t2:
                row += "     -"
            else:
                c = stats["matchup_counts"].get(t1, {}).get(t2, 0)
                row += f" {c:>5}"
        lines.append(row)

    lines.append("\n--- ROWS BY TYPE ---")
    for kind in ("match", "bye", "catchup", "free", "special"):
        lines.append(f"  {kind:<8} {stats['row_type_counts'].get(kind, 0):>4}")

    return "\n".join(lines)
