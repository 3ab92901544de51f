"""
skillrate
=========

Glicko-2 rating periods for pairwise competitions.

A rating period is collected in a RatingPeriodResults batch and handed to a
Glicko2 engine, which updates every participant against the ratings they had
when the period started.
"""
from skillrate.core.rating import Rating, Glicko2State
from skillrate.core.results import MatchResult, RatingPeriodResults
from skillrate.errors import InvalidInputError, NumericDivergenceError
from skillrate.models.glicko2 import Glicko2, Glicko2Config

__all__ = [
    'Glicko2',
    'Glicko2Config',
    'Glicko2State',
    'InvalidInputError',
    'MatchResult',
    'NumericDivergenceError',
    'Rating',
    'RatingPeriodResults',
]
