"""exceptions raised by skillrate"""


class InvalidInputError(ValueError):
    """a caller broke a precondition, e.g. matched a competitor against itself"""


class NumericDivergenceError(ArithmeticError):
    """the volatility solver did not converge or produced a non-finite value"""
