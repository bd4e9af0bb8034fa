"""
The live tournament: roster, bracket and the single lock that serialises them.
"""
import logging
import random
import threading
from typing import Callable, List, Optional

from core.advancement import AdvancementManager
from core.elimination import build_bracket, get_bracket_display, validate_entrants
from core.errors import InvalidEntrantList, TournamentStateError

logger = logging.getLogger(__name__)

DEFAULT_MAX_PLAYERS = 32


class TournamentService:
    """
    Owns the authoritative tournament state.

    Every public mutation runs entirely under one lock, including the whole
    winner cascade, and ends by handing a full snapshot to each listener.
    Listeners are called in mutation order and must not block.
    """

    def __init__(self, max_players: int = DEFAULT_MAX_PLAYERS, shuffle_players: bool = True, rng=None):
        self.max_players = max_players
        self.shuffle_players = shuffle_players
        self._rng = rng if rng is not None else random.Random()
        self._lock = threading.Lock()
        self._listeners: List[Callable[[dict], None]] = []
        self.players: List[str] = []
        self.started = False
        self.advancement = AdvancementManager()

    def add_listener(self, callback: Callable[[dict], None]):
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[dict], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self, snapshot: dict):
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception('Snapshot listener failed')

    def _snapshot(self) -> dict:
        display = get_bracket_display(self.advancement.bracket)
        display['players'] = list(self.players)
        display['started'] = self.started
        return display

    def snapshot(self) -> dict:
        """Return a consistent copy of the whole tournament state."""
        with self._lock:
            return self._snapshot()

    def _require_setup(self):
        if self.started:
            raise TournamentStateError('The tournament is running; reset it before changing players')

    def _commit(self) -> dict:
        snapshot = self._snapshot()
        self._notify(snapshot)
        return snapshot

    def set_players(self, names) -> dict:
        """Replace the roster."""
        roster = validate_entrants(names, min_count=0)
        if len(roster) > self.max_players:
            raise InvalidEntrantList(f'Maximum of {self.max_players} players allowed')
        with self._lock:
            self._require_setup()
            self.players = roster
            logger.info(f'Roster set to {len(roster)} players')
            return self._commit()

    def add_player(self, name) -> dict:
        if not isinstance(name, str) or not name.strip():
            raise InvalidEntrantList('Player name must not be empty')
        name = name.strip()
        with self._lock:
            self._require_setup()
            if len(self.players) >= self.max_players:
                raise InvalidEntrantList(f'Maximum of {self.max_players} players allowed')
            roster = validate_entrants(self.players + [name], min_count=0)
            self.players = roster
            logger.info(f'Added player {name}')
            return self._commit()

    def remove_player(self, name) -> dict:
        with self._lock:
            self._require_setup()
            if name not in self.players:
                raise InvalidEntrantList(f'Unknown player: {name}')
            self.players.remove(name)
            logger.info(f'Removed player {name}')
            return self._commit()

    def start(self, players=None, shuffle: Optional[bool] = None) -> dict:
        """
        Build the bracket from the roster (or from ``players`` if given).

        The roster is shuffled first unless disabled; the shuffled order is
        kept as the roster so observers see the order the bracket used.
        """
        if shuffle is None:
            shuffle = self.shuffle_players
        with self._lock:
            self._require_setup()
            roster = validate_entrants(self.players if players is None else players)
            if len(roster) > self.max_players:
                raise InvalidEntrantList(f'Maximum of {self.max_players} players allowed')
            if shuffle:
                self._rng.shuffle(roster)
            bracket = build_bracket(roster)
            self.players = roster
            self.advancement.reset(bracket)
            self.started = True
            logger.info(f'Tournament started with {len(roster)} players, {len(bracket)} rounds')
            return self._commit()

    def select_winner(self, round_index, position, winner) -> dict:
        with self._lock:
            if not self.started:
                raise TournamentStateError('The tournament has not started')
            self.advancement.set_winner(round_index, position, winner)
            if self.advancement.is_complete:
                logger.info(f'Champion decided: {self.advancement.champion}')
            return self._commit()

    def reset(self) -> dict:
        with self._lock:
            self.players = []
            self.started = False
            self.advancement.reset()
            logger.info('Tournament reset')
            return self._commit()

    @property
    def champion(self):
        with self._lock:
            return self.advancement.champion
