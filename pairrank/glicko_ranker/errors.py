"""Exceptions raised by the ranking system."""


class RankingError(Exception):
    """Base class for all pairrank errors."""


class InsufficientCandidates(RankingError, ValueError):
    """Fewer than two items are available to compare."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"Need at least 2 candidates to select a pair, got {count}")


class NonConvergence(RankingError, ArithmeticError):
    """The volatility solver could not produce a result.

    Raised when the iteration bound is exceeded or the inputs are not
    finite and positive. Either way the stored ratings are malformed.
    """


class InvalidComparison(RankingError, ValueError):
    """A comparison that cannot be recorded, e.g. an item against itself."""
