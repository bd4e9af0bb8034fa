"""
Exceptions raised by bracket construction and winner selection.
"""


class BracketError(Exception):
    """Base exception for all bracket errors."""
    code = 'bracket_error'
    status_code = 400


class InvalidEntrantList(BracketError):
    """Raised when the entrant list is empty, too short, or has bad names."""
    code = 'invalid_entrant_list'


class InvalidMatchAddress(BracketError):
    """Raised when a round/position pair does not name an existing match."""
    code = 'invalid_match_address'
    status_code = 404

    def __init__(self, round_index, position):
        self.round_index = round_index
        self.position = position
        super().__init__(f"No match at round {round_index}, position {position}")


class InvalidWinner(BracketError):
    """Raised when the requested winner is not one of the match's slots."""
    code = 'invalid_winner'

    def __init__(self, winner, slots):
        self.winner = winner
        self.slots = tuple(slots)
        super().__init__(f"{winner!r} is not playing in this match (slots: {list(self.slots)})")


class ImmutableByeMatch(BracketError):
    """Raised on an attempt to change the auto-resolved winner of a bye match."""
    code = 'immutable_bye_match'

    def __init__(self, round_index, position):
        self.round_index = round_index
        self.position = position
        super().__init__(f"Match at round {round_index}, position {position} is a bye and cannot be changed")


class TournamentStateError(BracketError):
    """Raised when an operation is not allowed in the current tournament phase."""
    code = 'tournament_state'
    status_code = 409
