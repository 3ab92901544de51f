"""competitor ratings held between rating periods"""
from dataclasses import dataclass
from skillrate.errors import InvalidInputError
from skillrate.utils.constants import DEFAULT_RATING, DEFAULT_RATING_DEV, DEFAULT_VOLATILITY
from skillrate.utils.scale import to_display_rating, to_display_rd, to_glicko2_rating, to_glicko2_rd


@dataclass(frozen=True)
class Glicko2State:
    """a competitor's post-period values on the internal glicko-2 scale"""

    mu: float
    phi: float
    sigma: float
    num_new_results: int = 0


@dataclass(eq=False)
class Rating:
    """
    A single competitor's Glicko-2 rating, stored on the display scale.

    Ratings are compared and hashed by identity: two competitors that happen to
    share the same numbers are still different competitors. mu and phi are views
    of rating and rating_deviation on the internal scale, not separate state.

    Attributes:
        rating (float): average skill estimate, 1500 centred
        rating_deviation (float): uncertainty of the estimate, always positive
        volatility (float): expected fluctuation of skill between periods
        num_results (int): number of results this competitor has been rated on
    """

    rating: float = DEFAULT_RATING
    rating_deviation: float = DEFAULT_RATING_DEV
    volatility: float = DEFAULT_VOLATILITY
    num_results: int = 0

    def __post_init__(self):
        for name in ('rating_deviation', 'volatility'):
            value = getattr(self, name)
            if not value > 0:
                raise InvalidInputError(f'{name} must be positive, got {value}')

    @property
    def mu(self) -> float:
        return to_glicko2_rating(self.rating)

    @mu.setter
    def mu(self, value: float):
        self.rating = to_display_rating(value)

    @property
    def phi(self) -> float:
        return to_glicko2_rd(self.rating_deviation)

    @phi.setter
    def phi(self, value: float):
        self.rating_deviation = to_display_rd(value)

    def apply(self, state: Glicko2State):
        """move a computed post-period state into place"""
        self.mu = state.mu
        self.phi = state.phi
        self.volatility = state.sigma
        self.num_results += state.num_new_results
