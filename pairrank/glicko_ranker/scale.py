"""Conversion between the public rating scale and the Glicko-2 internal scale."""

GLICKO2_SCALE = 173.7178
RATING_CENTER = 1500.0


def to_internal(rating: float, rd: float, scale: float = GLICKO2_SCALE) -> tuple[float, float]:
    """Convert a public (rating, RD) pair to internal (mu, phi).

    Args:
        rating: Public-scale rating, centered at 1500
        rd: Public-scale rating deviation
        scale: Glicko-2 scale factor

    Returns:
        Tuple of (mu, phi) on the zero-centered internal scale
    """
    mu = (rating - RATING_CENTER) / scale
    phi = rd / scale
    return mu, phi


def to_public(mu: float, phi: float, scale: float = GLICKO2_SCALE) -> tuple[float, float]:
    """Convert internal (mu, phi) back to a public (rating, RD) pair."""
    rating = RATING_CENTER + mu * scale
    rd = phi * scale
    return rating, rd
