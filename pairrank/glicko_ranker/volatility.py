"""Volatility update for Glicko-2 (step 5 of Glickman's algorithm).

Finds the root of f(x) with the Illinois variant of regula falsi. The
root x gives the new volatility as exp(x / 2).
"""

import math

from pairrank.glicko_ranker.errors import NonConvergence
from pairrank.logging import get_logger

log = get_logger(__name__)


def _make_f(delta: float, phi: float, v: float, a: float, tau: float):
    delta_sq = delta * delta
    phi_sq = phi * phi
    tau_sq = tau * tau

    def f(x: float) -> float:
        ex = math.exp(x)
        numerator = ex * (delta_sq - phi_sq - v - ex)
        denominator = 2.0 * (phi_sq + v + ex) ** 2
        return numerator / denominator - (x - a) / tau_sq

    return f


def _check_inputs(delta: float, phi: float, v: float, sigma: float, tau: float) -> None:
    values = {"delta": delta, "phi": phi, "v": v, "sigma": sigma, "tau": tau}
    for name, value in values.items():
        if not math.isfinite(value):
            raise NonConvergence(f"Volatility solver got non-finite {name}={value!r}")
    for name in ("phi", "v", "sigma", "tau"):
        if values[name] <= 0:
            raise NonConvergence(f"Volatility solver needs {name} > 0, got {values[name]!r}")


def solve_volatility(
    delta: float,
    phi: float,
    v: float,
    sigma: float,
    tau: float = 0.5,
    epsilon: float = 1e-6,
    max_iterations: int = 100,
) -> float:
    """Compute the post-match volatility for one side of a match.

    Args:
        delta: Estimated improvement implied by the outcome
        phi: Pre-match deviation on the internal scale
        v: Estimated variance of the outcome
        sigma: Pre-match volatility
        tau: System constant bounding volatility change
        epsilon: Convergence tolerance on the bracket width
        max_iterations: Bound on both the bracket search and the refinement

    Returns:
        New volatility (always > 0)

    Raises:
        NonConvergence: If inputs are malformed or the bound is exceeded
    """
    _check_inputs(delta, phi, v, sigma, tau)

    a = math.log(sigma * sigma)
    f = _make_f(delta, phi, v, a, tau)

    # Initial bracket
    big_a = a
    if delta * delta > phi * phi + v:
        big_b = math.log(delta * delta - phi * phi - v)
    else:
        k = 1
        while f(a - k * tau) < 0:
            k += 1
            if k > max_iterations:
                log.error("volatility_bracket_not_found", sigma=sigma, phi=phi, v=v, delta=delta)
                raise NonConvergence(
                    f"No volatility bracket found within {max_iterations} steps"
                )
        big_b = a - k * tau

    f_a = f(big_a)
    f_b = f(big_b)

    iterations = 0
    while abs(big_b - big_a) > epsilon:
        iterations += 1
        if iterations > max_iterations:
            log.error(
                "volatility_not_converged",
                sigma=sigma,
                phi=phi,
                v=v,
                delta=delta,
                bracket=(big_a, big_b),
            )
            raise NonConvergence(
                f"Volatility did not converge within {max_iterations} iterations"
            )

        big_c = big_a + (big_a - big_b) * f_a / (f_b - f_a)
        f_c = f(big_c)

        if f_c * f_b <= 0:
            big_a = big_b
            f_a = f_b
        else:
            # Illinois step: halve the retained endpoint's value
            f_a = f_a / 2.0

        big_b = big_c
        f_b = f_c

    return math.exp(big_a / 2.0)
