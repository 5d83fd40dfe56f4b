class SelectionError(Exception):
    """Base class for every failure raised by the selector."""


class InvalidInput(SelectionError, ValueError):
    """Bad shape, size or k out of range."""


class NumericError(SelectionError, ArithmeticError):
    """Degenerate (zero-norm) or non-finite vector data."""
