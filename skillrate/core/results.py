"""match results accumulated over a rating period"""
from typing import Iterable, Iterator, List, Optional
from skillrate.core.rating import Rating
from skillrate.errors import InvalidInputError

POINTS_FOR_WIN = 1.0
POINTS_FOR_LOSS = 0.0
POINTS_FOR_DRAW = 0.5


class MatchResult:
    """the outcome of one match between two distinct competitors"""

    __slots__ = ('_winner', '_loser', '_is_draw')

    def __init__(self, winner: Rating, loser: Rating, is_draw: bool = False):
        if winner is loser:
            raise InvalidInputError('a match needs two different competitors')
        self._winner = winner
        self._loser = loser
        self._is_draw = bool(is_draw)

    @property
    def winner(self) -> Rating:
        return self._winner

    @property
    def loser(self) -> Rating:
        return self._loser

    @property
    def is_draw(self) -> bool:
        return self._is_draw

    def participated(self, player: Rating) -> bool:
        return self._winner is player or self._loser is player

    def score_for(self, player: Rating) -> float:
        """1 for a win, 0.5 for a draw and 0 for a loss"""
        if self._winner is player:
            score = POINTS_FOR_WIN
        elif self._loser is player:
            score = POINTS_FOR_LOSS
        else:
            raise InvalidInputError('player did not participate in match')
        if self._is_draw:
            score = POINTS_FOR_DRAW
        return score

    def opponent_for(self, player: Rating) -> Rating:
        if self._winner is player:
            return self._loser
        if self._loser is player:
            return self._winner
        raise InvalidInputError('player did not participate in match')

    def __repr__(self):
        kind = 'draw' if self._is_draw else 'win'
        return f'MatchResult({kind}, winner={self._winner!r}, loser={self._loser!r})'


class RatingPeriodResults:
    """
    Results of one rating period plus the competitors to rate at its end.

    Competitors registered with add_participant are rated even if they play no
    matches, in which case only their deviation grows. Registrations survive
    clear(), which only drops the results.
    """

    def __init__(self, participants: Optional[Iterable[Rating]] = None):
        self._results: List[MatchResult] = []
        self._participants: List[Rating] = []
        self._tracked = set()
        for player in participants or ():
            self.add_participant(player)

    def add_result(self, winner: Rating, loser: Rating):
        self._results.append(MatchResult(winner, loser))

    def add_draw(self, player_1: Rating, player_2: Rating):
        self._results.append(MatchResult(player_1, player_2, is_draw=True))

    def add_outcome(self, player_1: Rating, player_2: Rating, outcome: float):
        """record a match given player_1's score"""
        if outcome == POINTS_FOR_WIN:
            self.add_result(player_1, player_2)
        elif outcome == POINTS_FOR_LOSS:
            self.add_result(player_2, player_1)
        elif outcome == POINTS_FOR_DRAW:
            self.add_draw(player_1, player_2)
        else:
            raise InvalidInputError(f'outcome must be 1.0, 0.5 or 0.0, got {outcome}')

    def add_participant(self, player: Rating):
        if player not in self._tracked:
            self._tracked.add(player)
            self._participants.append(player)

    def results_for(self, player: Rating) -> Iterator[MatchResult]:
        """lazily yield the results the player took part in"""
        return (result for result in self._results if result.participated(player))

    def participants(self) -> List[Rating]:
        """every registered competitor plus everyone who appears in a result"""
        for result in self._results:
            self.add_participant(result.winner)
            self.add_participant(result.loser)
        return list(self._participants)

    def clear(self):
        self._results = []

    def __len__(self):
        return len(self._results)

    def __iter__(self) -> Iterator[MatchResult]:
        return iter(self._results)
