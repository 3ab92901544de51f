"""
conversions between the display scale (centred on 1500) and the internal glicko-2 scale (centred on 0)

All functions are pure and accept python floats or numpy arrays.
"""
from skillrate.utils.constants import DEFAULT_RATING, GLICKO2_SCALE


def to_glicko2_rating(rating):
    """display rating -> mu"""
    return (rating - DEFAULT_RATING) / GLICKO2_SCALE


def to_display_rating(mu):
    """mu -> display rating"""
    return (mu * GLICKO2_SCALE) + DEFAULT_RATING


def to_glicko2_rd(rating_dev):
    """display rating deviation -> phi"""
    return rating_dev / GLICKO2_SCALE


def to_display_rd(phi):
    """phi -> display rating deviation"""
    return phi * GLICKO2_SCALE
