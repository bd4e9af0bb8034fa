import logging

from core.elimination import propagate_winner
from core.errors import ImmutableByeMatch, InvalidMatchAddress, InvalidWinner
from core.models import BYE, Bracket

logger = logging.getLogger(__name__)


class AdvancementManager:
    """Holds one bracket and applies winner selections to it."""

    def __init__(self, bracket=None):
        self.bracket = bracket if bracket is not None else Bracket()

    def reset(self, bracket=None):
        self.bracket = bracket if bracket is not None else Bracket()

    def _validate(self, round_index, position, winner):
        if not self.bracket.has_match(round_index, position):
            raise InvalidMatchAddress(round_index, position)
        match = self.bracket.match(round_index, position)

        if match.is_bye:
            if winner != match.winner:
                raise ImmutableByeMatch(round_index, position)
            return match

        if winner is not None and (winner == BYE or not match.has_entrant(winner)):
            raise InvalidWinner(winner, match.slots)
        return match

    def set_winner(self, round_index, position, winner):
        """
        Record ``winner`` (or clear it with None) for match (round_index, position).

        Everything is validated before the bracket is touched. The new value
        is then pushed into the next round, and any later result that relied
        on the old value is cleared.
        """
        match = self._validate(round_index, position, winner)
        if match.winner == winner:
            return self.bracket

        previous = match.winner
        match.winner = winner
        changed = propagate_winner(self.bracket, round_index, position)
        logger.info(f'Winner of R{round_index}-M{position}: {previous} -> {winner}')
        for changed_round, changed_position in changed:
            logger.debug(f'Updated R{changed_round}-M{changed_position}: '
                         f'{self.bracket.match(changed_round, changed_position)}')
        return self.bracket

    @property
    def champion(self):
        return self.bracket.champion

    @property
    def is_complete(self):
        return self.bracket.is_complete
