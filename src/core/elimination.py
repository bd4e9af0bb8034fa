"""
Single elimination bracket generation and winner propagation.

Matches are addressed by (round, position). Match (r, p) feeds slot p % 2 of
match (r + 1, p // 2); that mapping lives in next_slot() and nowhere else.
"""
import math
from typing import List, Optional, Tuple

from core.errors import InvalidEntrantList
from core.models import BYE, Bracket, Match


def calculate_round_sizes(num_entrants: int) -> List[int]:
    """
    Number of matches in each round for a field of ``num_entrants``.

    Odd fields get one bye, so the first round has ceil(n / 2) matches.
    Each later round has ceil(previous / 2) matches, down to the final.
    """
    if num_entrants < 2:
        return []
    sizes = [(num_entrants + num_entrants % 2) // 2]
    while sizes[-1] > 1:
        sizes.append(math.ceil(sizes[-1] / 2))
    return sizes


def next_slot(round_index: int, position: int) -> Tuple[int, int, int]:
    """Return (round, position, slot) of the match fed by match (round_index, position)."""
    return round_index + 1, position // 2, position % 2


def feeder_positions(bracket: Bracket, round_index: int, position: int) -> List[Optional[int]]:
    """
    Positions in the previous round feeding slot 0 and slot 1 of a match.

    A slot with no feeder (odd-sized previous round) is reported as None.
    Round 0 matches have no feeders at all.
    """
    if round_index == 0:
        return [None, None]
    previous_size = len(bracket[round_index - 1])
    feeders = []
    for slot in (0, 1):
        candidate = position * 2 + slot
        feeders.append(candidate if candidate < previous_size else None)
    return feeders


def get_round_label(round_index: int, total_rounds: int) -> str:
    """Get the display label of a round from its distance to the final."""
    rounds_from_end = total_rounds - round_index
    if rounds_from_end <= 1:
        return "Final"
    elif rounds_from_end == 2:
        return "Semi-Finals"
    elif rounds_from_end == 3:
        return "Quarter-Finals"

    number = round_index + 1
    if 10 <= number % 100 <= 20:
        suffix = 'th'
    else:
        suffix = {1: 'st', 2: 'nd', 3: 'rd'}.get(number % 10, 'th')
    return f"{number}{suffix} Round"


def validate_entrants(entrants, min_count: int = 2) -> List[str]:
    """
    Check an entrant list and return it as a new list.

    Raises InvalidEntrantList for too few entrants, non-string or blank
    names, the reserved bye name, or duplicates.
    """
    if entrants is None or isinstance(entrants, (str, bytes)):
        raise InvalidEntrantList("Entrants must be a list of names")
    entrants = list(entrants)
    if len(entrants) < min_count:
        raise InvalidEntrantList(f"At least {min_count} entrants are required, got {len(entrants)}")

    seen = set()
    for name in entrants:
        if not isinstance(name, str) or not name.strip():
            raise InvalidEntrantList(f"Entrant names must be non-empty strings, got {name!r}")
        if name == BYE:
            raise InvalidEntrantList(f"'{BYE}' is reserved and cannot be used as an entrant name")
        if name in seen:
            raise InvalidEntrantList(f"Duplicate entrant: {name}")
        seen.add(name)
    return entrants


def build_bracket(entrants: List[str]) -> Bracket:
    """
    Build a single elimination bracket from an ordered list of entrants.

    Entrants are paired in the order given: (0, 1), (2, 3), ... An odd field
    gets one BYE appended; the entrant paired with it wins automatically and
    is already placed in its second round slot. Later rounds start empty.
    """
    field = validate_entrants(entrants)
    if len(field) % 2:
        field.append(BYE)

    rounds = []
    first_round = []
    for i in range(0, len(field), 2):
        entrant1, entrant2 = field[i], field[i + 1]
        is_bye = entrant1 == BYE or entrant2 == BYE
        match = Match(round=0, position=i // 2, slots=[entrant1, entrant2], is_bye=is_bye)
        if is_bye:
            match.winner = entrant2 if entrant1 == BYE else entrant1
        first_round.append(match)
    rounds.append(first_round)

    for round_index, num_matches in enumerate(calculate_round_sizes(len(entrants))[1:], start=1):
        rounds.append([Match(round=round_index, position=i) for i in range(num_matches)])

    bracket = Bracket(rounds)
    for match in first_round:
        if match.is_bye:
            propagate_winner(bracket, match.round, match.position)
    return bracket


def propagate_winner(bracket: Bracket, round_index: int, position: int) -> List[Tuple[int, int]]:
    """
    Push the winner of a match into the next round and invalidate what depends on it.

    The child slot is only rewritten when its value differs. A rewritten
    child that already had a winner loses it, and the now-empty winner is
    pushed on in turn. Stops at the final or at the first unchanged slot.

    Returns the (round, position) of every match whose slots changed.
    """
    changed = []
    last_round = len(bracket) - 1
    while round_index < last_round:
        winner = bracket.match(round_index, position).winner
        child_round, child_position, slot = next_slot(round_index, position)
        child = bracket.match(child_round, child_position)
        if child.slots[slot] == winner:
            break
        child.slots[slot] = winner
        changed.append((child_round, child_position))
        if child.winner is None:
            break
        child.winner = None
        round_index, position = child_round, child_position
    return changed


def current_round_index(bracket: Bracket) -> int:
    """First round with an undecided match, or the final round once all are decided."""
    for round_index, round_matches in enumerate(bracket):
        if any(match.winner is None for match in round_matches):
            return round_index
    return len(bracket) - 1 if len(bracket) else 0


def find_inconsistencies(bracket: Bracket) -> List[str]:
    """
    Describe every place where the bracket breaks its slot/winner invariants.

    An empty list means every winner sits in its match and every later
    round slot holds its feeder's current winner or nothing.
    """
    problems = []
    for round_index, round_matches in enumerate(bracket):
        for match in round_matches:
            if match.winner is not None and match.winner not in match.slots:
                problems.append(f"R{round_index}-M{match.position}: winner {match.winner} not in {match.slots}")
            if round_index == 0:
                continue
            feeders = feeder_positions(bracket, round_index, match.position)
            for slot, feeder in enumerate(feeders):
                value = match.slots[slot]
                if value is None:
                    continue
                expected = bracket.match(round_index - 1, feeder).winner if feeder is not None else None
                if value != expected:
                    problems.append(
                        f"R{round_index}-M{match.position} slot {slot}: {value} is not the feeder winner {expected}"
                    )
    return problems


def get_bracket_display(bracket: Bracket) -> dict:
    """
    Get bracket data formatted for observers.
    """
    total_rounds = len(bracket)
    byes = sum(1 for m in bracket[0] if m.is_bye) if total_rounds else 0
    return {
        'rounds': bracket.to_list(),
        'roundLabels': [get_round_label(i, total_rounds) for i in range(total_rounds)],
        'currentRound': current_round_index(bracket),
        'totalRounds': total_rounds,
        'byes': byes,
        'champion': bracket.champion,
    }
