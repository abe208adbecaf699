"""Mapping from public rating to a bounded 0-100 display score."""

import math

DEFAULT_STEEPNESS = 0.005
DEFAULT_MIDPOINT = 1500.0


def normalized_score(
    rating: float,
    steepness: float = DEFAULT_STEEPNESS,
    midpoint: float = DEFAULT_MIDPOINT,
) -> float:
    """Map a rating onto (0, 100) with a logistic curve.

    score = 100 / (1 + e^(-steepness * (rating - midpoint)))

    The midpoint maps to exactly 50. With the default steepness a rating
    300 points either side of the midpoint lands near 18 or 82.
    """
    exponent = -steepness * (rating - midpoint)
    # exp overflows past ~709; the score is 0 there anyway
    if exponent > 700.0:
        return 0.0
    return 100.0 / (1.0 + math.exp(exponent))
