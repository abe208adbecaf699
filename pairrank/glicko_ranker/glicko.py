"""Pure Glicko-2 rating calculations for a single pairwise match."""

import math

from pairrank.glicko_ranker.errors import NonConvergence
from pairrank.glicko_ranker.models import RankerConfig, Rating
from pairrank.glicko_ranker.scale import to_internal, to_public
from pairrank.glicko_ranker.volatility import solve_volatility

WIN = 1.0
LOSS = 0.0


def g(phi: float) -> float:
    """Down-weight an opponent by its uncertainty.

    g(phi) = 1 / sqrt(1 + 3 * phi^2 / pi^2)
    """
    return 1.0 / math.sqrt(1.0 + 3.0 * phi * phi / (math.pi * math.pi))


def expected_score(mu: float, mu_j: float, phi_j: float) -> float:
    """Calculate the expected score against opponent j on the internal scale.

    Args:
        mu: Own internal rating
        mu_j: Opponent's internal rating
        phi_j: Opponent's internal deviation

    Returns:
        Win probability, strictly between 0 and 1 for moderate gaps
    """
    exponent = -g(phi_j) * (mu - mu_j)
    # exp overflows past ~709; the probability is 0 there anyway
    if exponent > 700.0:
        return 0.0
    return 1.0 / (1.0 + math.exp(exponent))


def update_one(
    mu: float,
    phi: float,
    sigma: float,
    mu_j: float,
    phi_j: float,
    score: float,
    config: RankerConfig,
) -> tuple[float, float, float]:
    """Update one side of a match against a single opponent.

    Returns:
        Tuple of (new_mu, new_phi, new_sigma) on the internal scale
    """
    g_phi_j = g(phi_j)
    e_val = expected_score(mu, mu_j, phi_j)
    if not 0.0 < e_val < 1.0:
        raise NonConvergence(
            f"Expected score saturated at {e_val!r} (mu={mu!r}, mu_j={mu_j!r})"
        )

    # Estimated variance and improvement
    v = 1.0 / (g_phi_j * g_phi_j * e_val * (1.0 - e_val))
    delta = v * g_phi_j * (score - e_val)

    new_sigma = solve_volatility(
        delta,
        phi,
        v,
        sigma,
        tau=config.tau,
        epsilon=config.epsilon,
        max_iterations=config.max_iterations,
    )

    # Pre-period deviation grows with volatility, then shrinks with evidence
    phi_star = math.sqrt(phi * phi + new_sigma * new_sigma)
    new_phi = 1.0 / math.sqrt(1.0 / (phi_star * phi_star) + 1.0 / v)
    new_mu = mu + new_phi * new_phi * g_phi_j * (score - e_val)

    return new_mu, new_phi, new_sigma


def update_ratings(
    winner: Rating,
    loser: Rating,
    config: RankerConfig | None = None,
) -> tuple[Rating, Rating]:
    """Calculate both ratings after winner beat loser.

    Both sides are updated from the same pre-match snapshot, so the
    result does not depend on which side is computed first.

    Args:
        winner: Winner's rating before the match
        loser: Loser's rating before the match
        config: System constants (uses defaults if None)

    Returns:
        Tuple of (new_winner, new_loser)
    """
    config = config or RankerConfig()

    w_mu, w_phi = to_internal(winner.rating, winner.deviation, config.scale)
    l_mu, l_phi = to_internal(loser.rating, loser.deviation, config.scale)

    new_w_mu, new_w_phi, new_w_sigma = update_one(
        w_mu, w_phi, winner.volatility, l_mu, l_phi, WIN, config
    )
    new_l_mu, new_l_phi, new_l_sigma = update_one(
        l_mu, l_phi, loser.volatility, w_mu, w_phi, LOSS, config
    )

    w_rating, w_rd = to_public(new_w_mu, new_w_phi, config.scale)
    l_rating, l_rd = to_public(new_l_mu, new_l_phi, config.scale)

    return (
        Rating(rating=w_rating, deviation=w_rd, volatility=new_w_sigma),
        Rating(rating=l_rating, deviation=l_rd, volatility=new_l_sigma),
    )
