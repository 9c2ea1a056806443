"""Double round-robin pairing generation for the season scheduler."""

import logging
from collections.abc import Mapping

from seasonsched.models import BYE, InvalidInput, Pairing, Participant, Round

logger = logging.getLogger(__name__)

# participant -> True if their most recent pairing was at home
HomeAwayState = Mapping[Participant, bool]


def adjusted_team_count(team_count: int) -> int:
    """Roster size after adding the bye placeholder to odd rosters."""
    return team_count + team_count % 2


def required_rounds(team_count: int) -> int:
    """Rounds needed for every team to meet every other team home and away."""
    return 2 * (adjusted_team_count(team_count) - 1)


def validate_teams(teams: list[str]) -> None:
    if len(teams) < 2:
        raise InvalidInput("need at least 2 teams")
    seen = set()
    for t in teams:
        if not isinstance(t, str) or not t.strip():
            raise InvalidInput(f"invalid team name: {t!r}")
        if t in seen:
            raise InvalidInput(f"duplicate team: {t}")
        seen.add(t)


def choose_home(t1: Participant, t2: Participant, state: HomeAwayState,
                round_index: int) -> tuple[Participant, Participant]:
    """Pick the home side for a pairing, returning (home, away).

    Prefers whichever side was not at home in its previous pairing. When
    neither side's history decides it, odd rounds put t2 at home and even
    rounds put t1 at home. This only smooths alternation locally; long home
    or away runs are still possible.
    """
    t1_played = t1 in state
    t2_played = t2 in state
    swap = round_index % 2 == 1

    if t1_played and t2_played:
        if state[t1] and not state[t2]:
            swap = True
        elif not state[t1] and state[t2]:
            swap = False
    elif t1_played:
        swap = state[t1]
    elif t2_played:
        swap = not state[t2]

    if swap:
        return t2, t1
    return t1, t2


def pair_round(rotation: list[Participant], state: HomeAwayState,
               round_index: int) -> tuple[Round, HomeAwayState]:
    """Pair position i with position n-1-i and assign home sides.

    Returns the round and the updated home/away state; the input state is
    left untouched.
    """
    n = len(rotation)
    new_state = dict(state)
    pairings = []
    for i in range(n // 2):
        home, away = choose_home(rotation[i], rotation[n - 1 - i], new_state,
                                 round_index)
        pairings.append(Pairing(home, away, round_index))
        new_state[home] = True
        new_state[away] = False
    return Round(index=round_index, pairings=pairings), new_state


def rotate(rotation: list[Participant]) -> list[Participant]:
    """Keep position 0 fixed and move the last participant to position 1."""
    return [rotation[0], rotation[-1]] + rotation[1:-1]


def generate_single_round_robin(teams: list[str]) -> list[Round]:
    """Generate the first half-season: every unordered pair meets once.

    Uses the circle method. Odd rosters get the BYE placeholder, so each
    round then holds exactly one bye pairing.
    """
    validate_teams(teams)

    rotation: list[Participant] = list(teams)
    if len(rotation) % 2 == 1:
        rotation.append(BYE)
    n = len(rotation)

    rounds = []
    state: HomeAwayState = {}
    for r in range(n - 1):
        rnd, state = pair_round(rotation, state, r)
        rounds.append(rnd)
        rotation = rotate(rotation)

    return rounds


def mirror_rounds(first_half: list[Round]) -> list[Round]:
    """Second half-season: the same rounds with home and away swapped."""
    offset = len(first_half)
    mirrored = []
    for rnd in first_half:
        index = rnd.index + offset
        mirrored.append(Round(
            index=index,
            pairings=[p.reversed(index) for p in rnd.pairings],
        ))
    return mirrored


def generate_double_round_robin(teams: list[str]) -> list[Round]:
    """Generate a full season of rounds.

    Every pair of teams meets twice, once with each side at home. The second
    half mirrors the first exactly, so that balance holds regardless of how
    the first half assigned home sides.

    Returns 2 * (n - 1) rounds for even n and 2 * n rounds for odd n.
    """
    first_half = generate_single_round_robin(teams)
    rounds = first_half + mirror_rounds(first_half)
    logger.debug("Generated %d rounds for %d teams", len(rounds), len(teams))
    return rounds


def verify_double_round_robin(rounds: list[Round], teams: list[str]) -> dict:
    """Verify a list of rounds forms a valid double round-robin.

    Returns dict with:
    - valid: bool
    - errors: list of error strings
    - pair_counts: dict of (home, away) -> count
    - games_per_team: dict of team -> game count (byes excluded)
    - byes_per_team: dict of team -> bye count
    """
    errors = []
    pair_counts: dict[tuple[str, str], int] = {}
    games_per_team: dict[str, int] = {t: 0 for t in teams}
    byes_per_team: dict[str, int] = {t: 0 for t in teams}

    for rnd in rounds:
        in_round = set()
        byes = 0
        for p in rnd.pairings:
            for side in (p.home, p.away):
                if side == BYE:
                    continue
                if side in in_round:
                    errors.append(f"Round {rnd.index}: {side} appears twice")
                in_round.add(side)

            if p.is_bye:
                byes += 1
                team = p.real_team
                byes_per_team[team] = byes_per_team.get(team, 0) + 1
                continue

            key = (p.home, p.away)
            pair_counts[key] = pair_counts.get(key, 0) + 1
            games_per_team[p.home] = games_per_team.get(p.home, 0) + 1
            games_per_team[p.away] = games_per_team.get(p.away, 0) + 1

        if byes > 1:
            errors.append(f"Round {rnd.index}: {byes} byes (expected at most 1)")

    # Every ordered pair plays exactly once
    for t1 in teams:
        for t2 in teams:
            if t1 == t2:
                continue
            count = pair_counts.get((t1, t2), 0)
            if count != 1:
                errors.append(
                    f"{t1} (home) vs {t2} (away): played {count} times (expected 1)"
                )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "pair_counts": pair_counts,
        "games_per_team": games_per_team,
        "byes_per_team": byes_per_team,
    }
