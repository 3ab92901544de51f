"""base class for period based rating systems"""
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Mapping, Optional, Sequence, Tuple
import numpy as np
from skillrate.core.rating import Rating
from skillrate.core.results import RatingPeriodResults
from skillrate.metrics import binary_metrics_suite
from skillrate.utils.data_utils import PeriodDataset


class RatingSystem(ABC):
    """
    Base class for rating systems that update all competitors once per rating period.

    Subclasses own the maths: how to seed a new Rating, how to score a matchup
    before it is played, and how to turn a RatingPeriodResults batch into new
    ratings. This class drives them over a whole dataset and reports leaderboards.
    """

    @abstractmethod
    def create_rating(
        self,
        rating: Optional[float] = None,
        rating_deviation: Optional[float] = None,
        volatility: Optional[float] = None,
    ) -> Rating:
        """Builds a Rating for a new competitor, filling gaps from the system defaults."""

    @abstractmethod
    def update_ratings(self, results: RatingPeriodResults):
        """
        Rates every participant of the period and clears the results.

        Parameters:
            results (RatingPeriodResults): the matches of the period and the registered participants
        """

    @abstractmethod
    def expected_score(self, player: Rating, opponent: Rating) -> float:
        """Probability-like score the player is expected to take from a match against opponent."""

    @abstractmethod
    def predict(self, roster: Sequence[Rating], matchups: np.ndarray) -> np.ndarray:
        """
        Expected scores for the first competitor of each matchup.

        Parameters:
            roster (sequence of Rating): ratings indexed by competitor index
            matchups (np.ndarray of shape (n,2)): competitor indices

        Returns:
            np.ndarray of shape (n,): expected score of matchups[:, 0]
        """

    def fit_dataset(self, dataset: PeriodDataset, return_pre_match_probs: bool = False):
        """
        Runs every rating period of a dataset through the system.

        Competitors are registered in the period they first play and stay registered, so
        each later period in which they sit out (including empty periods between time steps)
        grows their deviation.

        Returns:
            dict mapping competitor to Rating, and the pre-match probabilities if requested
        """
        roster = [self.create_rating() for _ in dataset.competitors]
        results = RatingPeriodResults()
        if return_pre_match_probs:
            pre_match_probs = np.empty(shape=len(dataset))

        idx = 0
        prev_time_step = None
        for matchups, outcomes, time_step in dataset:
            if prev_time_step is not None:
                for _ in range(time_step - prev_time_step - 1):
                    self.update_ratings(results)
            if return_pre_match_probs:
                pre_match_probs[idx : idx + matchups.shape[0]] = self.predict(roster, matchups)
            for (comp_1, comp_2), outcome in zip(matchups, outcomes):
                results.add_outcome(roster[comp_1], roster[comp_2], float(outcome))
            self.update_ratings(results)
            idx += matchups.shape[0]
            prev_time_step = time_step

        ratings = dict(zip(dataset.competitors, roster))
        if return_pre_match_probs:
            return ratings, pre_match_probs
        return ratings

    def evaluate(self, dataset: PeriodDataset) -> Dict[str, float]:
        """
        Fits the dataset and scores the pre-match predictions of every period against its outcomes.

        Returns:
            dict of metric name to value, plus the fitting duration in seconds
        """
        start_time = time.time()
        _, probs = self.fit_dataset(dataset, return_pre_match_probs=True)
        metrics = binary_metrics_suite(probs, dataset.outcomes)
        metrics['duration'] = time.time() - start_time
        return metrics

    @staticmethod
    def leaderboard(ratings: Mapping[str, Rating], num_places: Optional[int] = None) -> List[Tuple[str, float]]:
        """competitors sorted by conservative rating, rating - 2 * deviation"""
        scored: Dict[str, float] = {
            competitor: rating.rating - (2.0 * rating.rating_deviation) for competitor, rating in ratings.items()
        }
        ranked = sorted(scored.items(), key=lambda item: item[1], reverse=True)
        return ranked[:num_places]

    def print_leaderboard(self, ratings: Mapping[str, Rating], num_places: Optional[int] = None):
        ranked = self.leaderboard(ratings, num_places)
        max_len = min(max([len(str(comp)) for comp, _ in ranked] + [10]), 25)
        print(f'{"competitor": <{max_len}}\t{"rating - (2*dev)"}\t')
        for competitor, score in ranked:
            print(f'{str(competitor): <{max_len}}\t{score:.2f}')
