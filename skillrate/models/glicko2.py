"""
Glicko 2
paper: http://www.glicko.net/research/dpcmsv.pdf
example: http://www.glicko.net/glicko/glicko2.pdf

"""
import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence
import numpy as np
from skillrate.core.base import RatingSystem
from skillrate.core.rating import Glicko2State, Rating
from skillrate.core.results import MatchResult, RatingPeriodResults
from skillrate.errors import InvalidInputError, NumericDivergenceError
from skillrate.utils.constants import (
    CONVERGENCE_TOLERANCE,
    DEFAULT_RATING,
    DEFAULT_RATING_DEV,
    DEFAULT_TAU,
    DEFAULT_VOLATILITY,
    MAX_SOLVER_ITERATIONS,
)
from skillrate.utils.math_utils import g_scalar, g_vector, sigmoid, sigmoid_scalar

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Glicko2Config:
    initial_rating: float = DEFAULT_RATING
    initial_rd: float = DEFAULT_RATING_DEV
    initial_volatility: float = DEFAULT_VOLATILITY
    tau: float = DEFAULT_TAU
    epsilon: float = CONVERGENCE_TOLERANCE
    max_iterations: int = MAX_SOLVER_ITERATIONS

    def __post_init__(self):
        for name in ('initial_rd', 'initial_volatility', 'tau', 'epsilon', 'max_iterations'):
            value = getattr(self, name)
            if not value > 0:
                raise InvalidInputError(f'{name} must be positive, got {value}')


class Glicko2(RatingSystem):
    """
    Implements the Glicko 2 rating system, designed by Mark Glickman.

    A period is rated in two phases. compute_updates works out every participant's
    new state from the ratings committed before the period, so the order results were
    added in never matters, then commit writes all of them at once.
    """

    def __init__(
        self,
        initial_volatility: float = DEFAULT_VOLATILITY,
        tau: float = DEFAULT_TAU,
        initial_rating: float = DEFAULT_RATING,
        initial_rd: float = DEFAULT_RATING_DEV,
        epsilon: float = CONVERGENCE_TOLERANCE,
        max_iterations: int = MAX_SOLVER_ITERATIONS,
    ):
        """
        Initializes the Glicko-2 rating system with the given parameters.

        Parameters:
            initial_volatility (float, optional): volatility given to new ratings. Defaults to 0.06.
            tau (float, optional): constrains how much volatility can change per period. Defaults to 0.75.
            initial_rating (float, optional): rating given to new ratings. Defaults to 1500.0.
            initial_rd (float, optional): rating deviation given to new ratings. Defaults to 350.0.
            epsilon (float, optional): convergence tolerance of the volatility solve. Defaults to 1e-6.
            max_iterations (int, optional): cap on the bracket search and on the solver iterations.
        """
        self.config = Glicko2Config(
            initial_rating=initial_rating,
            initial_rd=initial_rd,
            initial_volatility=initial_volatility,
            tau=tau,
            epsilon=epsilon,
            max_iterations=max_iterations,
        )
        self.tau2 = self.config.tau**2.0

    @property
    def tau(self) -> float:
        return self.config.tau

    @property
    def epsilon(self) -> float:
        return self.config.epsilon

    @property
    def max_iterations(self) -> int:
        return self.config.max_iterations

    @classmethod
    def from_config(cls, config: Glicko2Config) -> 'Glicko2':
        return cls(
            initial_volatility=config.initial_volatility,
            tau=config.tau,
            initial_rating=config.initial_rating,
            initial_rd=config.initial_rd,
            epsilon=config.epsilon,
            max_iterations=config.max_iterations,
        )

    @property
    def default_rating(self) -> float:
        return self.config.initial_rating

    @property
    def default_rating_deviation(self) -> float:
        return self.config.initial_rd

    @property
    def default_volatility(self) -> float:
        return self.config.initial_volatility

    def create_rating(
        self,
        rating: Optional[float] = None,
        rating_deviation: Optional[float] = None,
        volatility: Optional[float] = None,
    ) -> Rating:
        return Rating(
            rating=self.default_rating if rating is None else rating,
            rating_deviation=self.default_rating_deviation if rating_deviation is None else rating_deviation,
            volatility=self.default_volatility if volatility is None else volatility,
        )

    def expected_score(self, player: Rating, opponent: Rating) -> float:
        return sigmoid_scalar(g_scalar(opponent.phi) * (player.mu - opponent.mu))

    def predict(self, roster: Sequence[Rating], matchups: np.ndarray) -> np.ndarray:
        mus = np.array([rating.mu for rating in roster])
        phis = np.array([rating.phi for rating in roster])
        mu_diffs = mus[matchups[:, 0]] - mus[matchups[:, 1]]
        return sigmoid(g_vector(phis[matchups[:, 1]]) * mu_diffs)

    @staticmethod
    def opponent_terms(player: Rating, results: Sequence[MatchResult]):
        """g of each opponent's deviation, the expected scores against them and the actual scores"""
        opponents = [result.opponent_for(player) for result in results]
        opp_mus = np.array([opponent.mu for opponent in opponents])
        opp_phis = np.array([opponent.phi for opponent in opponents])
        scores = np.array([result.score_for(player) for result in results])
        gs = g_vector(opp_phis)
        probs = sigmoid(gs * (player.mu - opp_mus))
        return gs, probs, scores

    @staticmethod
    def compute_v(gs: np.ndarray, probs: np.ndarray) -> float:
        """estimated variance of the rating from game outcomes alone (step 3)"""
        v_inverse = math.fsum(np.square(gs) * probs * (1.0 - probs))
        if not (v_inverse > 0.0 and math.isfinite(v_inverse)):
            message = f'estimated variance is undefined (1/v = {v_inverse})'
            logger.warning(message)
            raise NumericDivergenceError(message)
        return 1.0 / v_inverse

    @staticmethod
    def compute_grad(gs: np.ndarray, probs: np.ndarray, scores: np.ndarray) -> float:
        """sum of g(phi_j) * (s_j - E_j), shared by delta and the new rating"""
        return math.fsum(gs * (scores - probs))

    def f(self, x, delta2, phi2, v, a):
        ex = math.exp(x)
        phi2_v_ex = phi2 + v + ex
        num_1 = ex * (delta2 - phi2_v_ex)
        denom_1 = 2.0 * (phi2_v_ex**2.0)
        term_2 = (x - a) / self.tau2
        return (num_1 / denom_1) - term_2

    def _diverged(self, message: str):
        logger.warning(message)
        raise NumericDivergenceError(message)

    def get_sigma_prime(self, phi, delta, v, sigma):
        """new volatility via the Illinois algorithm (step 5)"""
        delta2 = delta**2.0
        phi2 = phi**2.0
        A = a = math.log(sigma**2.0)
        if delta2 > (phi2 + v):
            B = math.log(delta2 - phi2 - v)
        else:
            k = 1
            while self.f(a - (k * self.tau), delta2, phi2, v, a) < 0:
                k += 1
                if k > self.max_iterations:
                    self._diverged(f'volatility bracket not found after {self.max_iterations} steps')
            B = a - (k * self.tau)

        f_A = self.f(A, delta2, phi2, v, a)
        f_B = self.f(B, delta2, phi2, v, a)
        num_iterations = 0
        while math.fabs(B - A) > self.epsilon:
            num_iterations += 1
            if num_iterations > self.max_iterations:
                self._diverged(f'volatility solve did not converge in {self.max_iterations} iterations')
            if f_B == f_A:
                C = (A + B) / 2.0
            else:
                C = A + ((A - B) * f_A) / (f_B - f_A)
            f_C = self.f(C, delta2, phi2, v, a)
            if not (math.isfinite(C) and math.isfinite(f_C)):
                self._diverged(f'volatility solve left the real line at x={C}')
            if f_C == 0.0:
                # exact root, the bracket would otherwise stop shrinking
                A = B = C
                break
            if (f_C * f_B) < 0:
                A = B
                f_A = f_B
            else:
                f_A = f_A / 2.0
            B = C
            f_B = f_C
        logger.debug(f'volatility solve converged in {num_iterations} iterations')

        sigma_prime = math.exp(A / 2.0)
        if not (sigma_prime > 0.0 and math.isfinite(sigma_prime)):
            self._diverged(f'volatility solve produced sigma={sigma_prime}')
        return sigma_prime

    @staticmethod
    def inflate_phi(phi, sigma):
        """pre-period deviation grown by one period of volatility (step 6)"""
        return math.sqrt((phi**2.0) + (sigma**2.0))

    def compute_new_state(self, player: Rating, results: Sequence[MatchResult]) -> Glicko2State:
        """steps 3 through 7 for one competitor, reading only committed ratings"""
        if not results:
            return Glicko2State(
                mu=player.mu,
                phi=self.inflate_phi(player.phi, player.volatility),
                sigma=player.volatility,
            )

        mu = player.mu
        phi = player.phi
        gs, probs, scores = self.opponent_terms(player, results)
        v = self.compute_v(gs, probs)
        grad = self.compute_grad(gs, probs, scores)
        delta = v * grad

        sigma_prime = self.get_sigma_prime(phi=phi, delta=delta, v=v, sigma=player.volatility)
        phi_star = self.inflate_phi(phi, sigma_prime)
        phi_prime = 1.0 / math.sqrt((1.0 / (phi_star**2.0)) + (1.0 / v))
        mu_prime = mu + ((phi_prime**2.0) * grad)
        return Glicko2State(mu=mu_prime, phi=phi_prime, sigma=sigma_prime, num_new_results=len(results))

    def compute_updates(self, results: RatingPeriodResults) -> Dict[Rating, Glicko2State]:
        """new states for every participant of the period, without touching any rating"""
        updates = {}
        for player in results.participants():
            updates[player] = self.compute_new_state(player, list(results.results_for(player)))
        return updates

    @staticmethod
    def commit(updates: Dict[Rating, Glicko2State]):
        for player, state in updates.items():
            player.apply(state)

    def update_ratings(self, results: RatingPeriodResults):
        """
        Rates every participant and then clears the results for the next period.

        Participants without results this period keep their rating and volatility
        while their deviation grows.
        """
        updates = self.compute_updates(results)
        logger.debug(f'rating period with {len(results)} results and {len(updates)} participants')
        self.commit(updates)
        results.clear()
