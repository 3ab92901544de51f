"""math utility functions for rating systems"""
import math
import numpy as np
from scipy.special import expit
from skillrate.utils.constants import THREE_OVER_PI_SQUARED


def sigmoid(x):
    """a little faster than implementing it in numpy for d < 100000"""
    return expit(x)


def sigmoid_scalar(x):
    """no need to use numpy on scalars"""
    return 1.0 / (1.0 + math.exp(-x))


def g_scalar(phi):
    """glicko-2 attenuation of an opponent's impact by their deviation"""
    return 1.0 / math.sqrt(1.0 + (THREE_OVER_PI_SQUARED * (phi**2.0)))


def g_vector(phi):
    """vector version"""
    return 1.0 / np.sqrt(1.0 + (THREE_OVER_PI_SQUARED * np.square(phi)))
