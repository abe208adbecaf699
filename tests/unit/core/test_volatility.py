"""Unit tests for the Glicko-2 volatility solver."""

import math

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from pairrank.glicko_ranker.errors import NonConvergence
from pairrank.glicko_ranker.volatility import solve_volatility

# Mark all tests in this module as unit tests
pytestmark = pytest.mark.unit


class TestSolveVolatility:
    """Tests for solve_volatility."""

    def test_glickman_worked_example(self):
        """Step 5 of Glickman's worked example gives sigma' = 0.05999."""
        result = solve_volatility(delta=-0.4834, phi=1.1513, v=1.7785, sigma=0.06, tau=0.5)
        assert result == pytest.approx(0.05999, abs=1e-4)

    def test_expected_result_lowers_volatility(self):
        """A result in line with expectations does not raise volatility."""
        result = solve_volatility(delta=0.1, phi=0.5, v=2.0, sigma=0.06)
        assert 0.0 < result < 0.06

    def test_large_surprise_raises_volatility(self):
        """delta^2 > phi^2 + v takes the log bracket and increases sigma."""
        result = solve_volatility(delta=3.0, phi=0.5, v=1.0, sigma=0.06)
        assert result > 0.06
        assert math.isfinite(result)

    def test_zero_sigma_raises(self):
        with pytest.raises(NonConvergence):
            solve_volatility(delta=0.5, phi=1.0, v=2.0, sigma=0.0)

    def test_negative_phi_raises(self):
        with pytest.raises(NonConvergence):
            solve_volatility(delta=0.5, phi=-1.0, v=2.0, sigma=0.06)

    def test_non_finite_variance_raises(self):
        with pytest.raises(NonConvergence):
            solve_volatility(delta=0.5, phi=1.0, v=math.inf, sigma=0.06)

    def test_nan_delta_raises(self):
        with pytest.raises(NonConvergence):
            solve_volatility(delta=math.nan, phi=1.0, v=2.0, sigma=0.06)

    def test_iteration_bound_raises(self):
        """Running out of iterations is reported, not silently accepted."""
        with pytest.raises(NonConvergence):
            solve_volatility(
                delta=3.0, phi=0.5, v=1.0, sigma=0.06, epsilon=1e-15, max_iterations=1
            )

    def test_bracket_search_bound_raises(self):
        """A large tau and sigma need k = 2 in the bracket search, more than a bound of 1 allows."""
        with pytest.raises(NonConvergence, match="bracket"):
            solve_volatility(delta=0.0, phi=1.0, v=1.0, sigma=1000.0, tau=10.0, max_iterations=1)

    def test_bracket_search_steps_past_first_k(self):
        """The same inputs converge once the bound leaves room for the second step."""
        result = solve_volatility(delta=0.0, phi=1.0, v=1.0, sigma=1000.0, tau=10.0)
        assert 0.0 < result < 1000.0
        assert math.isfinite(result)

    def test_non_convergence_is_arithmetic_error(self):
        """Callers can catch it as a generic arithmetic failure."""
        with pytest.raises(ArithmeticError):
            solve_volatility(delta=0.5, phi=1.0, v=2.0, sigma=-0.06)

    @given(
        delta=st.floats(min_value=-20, max_value=20),
        phi=st.floats(min_value=0.1, max_value=2.5),
        v=st.floats(min_value=0.5, max_value=50),
        sigma=st.floats(min_value=0.01, max_value=0.2),
    )
    @settings(max_examples=200)
    def test_converges_for_valid_inputs(self, delta, phi, v, sigma):
        """Property test: valid inputs converge to a positive volatility."""
        result = solve_volatility(delta, phi, v, sigma)
        assert result > 0
        assert math.isfinite(result)
