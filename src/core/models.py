BYE = 'BYE'


class Match:
    def __init__(self, round, position, slots=None, winner=None, is_bye=False):
        self.round = round
        self.position = position
        self.slots = list(slots) if slots is not None else [None, None]
        self.winner = winner
        self.is_bye = is_bye

    def has_entrant(self, name):
        """True if ``name`` currently occupies one of the two slots."""
        return name is not None and name in self.slots

    def to_dict(self):
        return {
            'slots': list(self.slots),
            'winner': self.winner,
            'isBye': self.is_bye,
            'round': self.round,
            'position': self.position,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            round=data['round'],
            position=data['position'],
            slots=data.get('slots', [None, None]),
            winner=data.get('winner'),
            is_bye=data.get('isBye', False),
        )

    def __eq__(self, other):
        if not isinstance(other, Match):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"Match(round={self.round}, position={self.position}, slots={self.slots}, "
                f"winner={self.winner}, is_bye={self.is_bye})")


class Bracket:
    """Ordered rounds of matches, round 0 first and the single-match final last."""

    def __init__(self, rounds=None):
        self.rounds = rounds if rounds is not None else []

    def __len__(self):
        return len(self.rounds)

    def __iter__(self):
        return iter(self.rounds)

    def __getitem__(self, round_index):
        return self.rounds[round_index]

    def has_match(self, round_index, position) -> bool:
        if not isinstance(round_index, int) or not isinstance(position, int):
            return False
        if round_index < 0 or round_index >= len(self.rounds):
            return False
        return 0 <= position < len(self.rounds[round_index])

    def match(self, round_index, position) -> Match:
        return self.rounds[round_index][position]

    @property
    def final_match(self):
        if not self.rounds or len(self.rounds[-1]) != 1:
            return None
        return self.rounds[-1][0]

    @property
    def champion(self):
        final = self.final_match
        return final.winner if final else None

    @property
    def is_complete(self) -> bool:
        return self.champion is not None

    def to_list(self):
        return [[match.to_dict() for match in round_matches] for round_matches in self.rounds]

    @classmethod
    def from_list(cls, data):
        return cls([[Match.from_dict(m) for m in round_matches] for round_matches in data])

    def copy(self):
        return Bracket.from_list(self.to_list())

    def __eq__(self, other):
        if not isinstance(other, Bracket):
            return NotImplemented
        return self.to_list() == other.to_list()

    def __repr__(self):
        sizes = [len(r) for r in self.rounds]
        return f"Bracket(rounds={sizes}, champion={self.champion})"
