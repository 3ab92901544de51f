"""mathematical constants computed once here to avoid recomputation"""
import math

# general math constants
PI2 = math.pi**2.0
THREE_OVER_PI_SQUARED = 3.0 / PI2

# glicko-2 scale constants
GLICKO2_SCALE = 173.7178
DEFAULT_RATING = 1500.0

# glicko-2 defaults
DEFAULT_RATING_DEV = 350.0
DEFAULT_VOLATILITY = 0.06
DEFAULT_TAU = 0.75
CONVERGENCE_TOLERANCE = 1e-6
MAX_SOLVER_ITERATIONS = 10_000
