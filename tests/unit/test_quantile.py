"""
Unit tests for the quantile solvers.

This module validates:
1. Quantiles against scipy.stats ppf for every family
2. Newton-Raphson and Brent building blocks
3. Critical values for the classical test statistics
4. Error handling for invalid probabilities and parameters
"""

import math

import pytest
from scipy import stats

from probcalc.solvers.brent import brent_quantile, expand_bracket
from probcalc.solvers.newton_raphson import newton_raphson_quantile
from probcalc.solvers.quantile import (
    critical_value,
    discrete_quantile,
    initial_guess,
    quantile,
    quantiles,
    support_bounds,
)
from probcalc.utils.types import DistributionId


CONTINUOUS_CASES = [
    (DistributionId.NORMAL, [1.5, 2.0], stats.norm(1.5, 2.0), "closed-form"),
    (DistributionId.EXPONENTIAL, [0.5], stats.expon(scale=2.0), "closed-form"),
    (DistributionId.WEIBULL, [1.8, 2.0], stats.weibull_min(1.8, scale=2.0), "closed-form"),
    (DistributionId.RAYLEIGH, [1.3], stats.rayleigh(scale=1.3), "closed-form"),
    (DistributionId.PARETO, [1.0, 3.0], stats.pareto(3.0, scale=1.0), "closed-form"),
    (DistributionId.UNIFORM, [-2.0, 3.0], stats.uniform(-2.0, 5.0), "closed-form"),
    (DistributionId.CHI_SQUARE, [5.0], stats.chi2(5.0), None),
    (DistributionId.CHI_SQUARE, [1.0], stats.chi2(1.0), None),
    (DistributionId.T, [7.0], stats.t(7.0), None),
    (DistributionId.T, [1.0], stats.t(1.0), None),
    (DistributionId.F, [5.0, 12.0], stats.f(5.0, 12.0), None),
    (DistributionId.GAMMA, [2.5, 1.5], stats.gamma(2.5, scale=1.5), None),
    (DistributionId.GAMMA, [0.3, 1.0], stats.gamma(0.3), None),
    (DistributionId.BETA, [2.0, 3.5], stats.beta(2.0, 3.5), None),
    (DistributionId.BETA, [0.5, 0.5], stats.beta(0.5, 0.5), None),
]

PROBABILITIES = [0.01, 0.1, 0.5, 0.9, 0.99]


# ===========================
# Continuous families
# ===========================


@pytest.mark.parametrize("distribution_id, params, reference, method", CONTINUOUS_CASES)
def test_continuous_quantiles_match_scipy(distribution_id, params, reference, method):
    """Quantiles against scipy.stats ppf, tails and center."""
    for p in PROBABILITIES:
        result = quantile(distribution_id, p, params)
        assert result.success, f"p={p}: {result.message}"
        assert result.probability == p
        assert result.value == pytest.approx(reference.ppf(p), rel=1e-6, abs=1e-8), f"p={p}"
        if method is not None:
            assert result.method == method
        else:
            assert result.method in ("newton-raphson", "brent")


@pytest.mark.parametrize("method", ["newton", "brent"])
def test_explicit_methods(method):
    """Gamma(2, 1) 75% quantile by Newton-Raphson alone and by Brent alone."""
    result = quantile(DistributionId.GAMMA, 0.75, [2.0, 1.0], method=method)
    assert result.success
    assert result.method == ("newton-raphson" if method == "newton" else "brent")
    assert result.value == pytest.approx(stats.gamma.ppf(0.75, 2.0), rel=1e-8)


# ===========================
# Discrete families
# ===========================


DISCRETE_CASES = [
    (DistributionId.GEOMETRIC, [0.25], stats.geom(0.25)),
    (DistributionId.BINOMIAL, [20.0, 0.3], stats.binom(20, 0.3)),
    (DistributionId.NEGATIVE_BINOMIAL, [4.0, 0.4], stats.nbinom(4, 0.4)),
    (DistributionId.HYPERGEOMETRIC, [40.0, 15.0, 10.0], stats.hypergeom(40, 15, 10)),
    (DistributionId.POISSON, [6.5], stats.poisson(6.5)),
]


@pytest.mark.parametrize("distribution_id, params, reference", DISCRETE_CASES)
def test_discrete_quantiles_match_scipy(distribution_id, params, reference):
    """Smallest k with F(k) >= p, as scipy.stats ppf defines it."""
    for p in (0.05, 0.3, 0.5, 0.77, 0.95):
        result = quantile(distribution_id, p, params)
        assert result.success, result.message
        assert result.method == "discrete-search"
        assert result.value == reference.ppf(p), f"p={p}"


def test_discrete_quantile_is_smallest_point_reaching_p():
    """Bisection lands on the first step reaching p."""
    def cdf(k):
        return min(max(math.floor(k), 0) / 10.0, 1.0)

    result = discrete_quantile(cdf, 0.35, 0.0, 10.0)
    assert result.value == 4.0
    assert cdf(result.value) >= 0.35
    assert cdf(result.value - 1.0) < 0.35


def test_discrete_quantile_at_lower_bound():
    """When F(lower) >= p the lower support point is returned."""
    result = quantile(DistributionId.GEOMETRIC, 0.5, [0.9])
    assert result.value == 1.0


# ===========================
# Building blocks
# ===========================


def test_newton_raphson_solves_exponential():
    """Exponential(2) median = ln 2 / 2."""
    rate = 2.0
    result = newton_raphson_quantile(
        cdf=lambda x: 1.0 - math.exp(-rate * x),
        pdf=lambda x: rate * math.exp(-rate * x),
        p=0.5,
        initial_guess=0.1,
        lower=0.0,
    )
    assert result.success
    assert result.method == "newton-raphson"
    assert result.value == pytest.approx(math.log(2.0) / rate, rel=1e-10)


def test_newton_raphson_reports_vanishing_density():
    """Zero density stops Newton-Raphson with a message."""
    result = newton_raphson_quantile(cdf=lambda x: 0.0, pdf=lambda x: 0.0, p=0.5, initial_guess=1.0)
    assert not result.success
    assert "Density" in result.message


def test_newton_raphson_reports_leaving_support():
    """A step below the support stops Newton-Raphson."""
    result = newton_raphson_quantile(
        cdf=lambda x: 0.9, pdf=lambda x: 1.0, p=0.1, initial_guess=0.5, lower=0.0
    )
    assert not result.success
    assert "out of support" in result.message


def test_brent_quantile_on_bracket():
    """x² = 0.25 on [0, 1] → 0.5"""
    result = brent_quantile(lambda x: x * x, 0.25, 0.0, 1.0)
    assert result.success
    assert result.method == "brent"
    assert result.value == pytest.approx(0.5, abs=1e-10)


def test_brent_quantile_without_sign_change():
    """No sign change yields a failed result with NaN."""
    result = brent_quantile(lambda x: 0.9, 0.5, 0.0, 1.0)
    assert not result.success
    assert math.isnan(result.value)


def test_expand_bracket_for_unbounded_support():
    """Bracket expansion reaches a mean far from the start."""
    cdf = stats.norm(100.0, 1.0).cdf
    bracket = expand_bracket(cdf, 0.3, -math.inf, math.inf, start=0.0)
    assert bracket is not None
    low, high = bracket
    assert cdf(low) <= 0.3 <= cdf(high)


def test_expand_bracket_gives_up():
    """Expansion is bounded and returns None on failure."""
    assert expand_bracket(lambda x: 0.0, 0.5, 0.0, math.inf, max_expansions=5) is None


def test_support_bounds():
    """Support intervals, including the Hypergeometric range."""
    assert support_bounds(DistributionId.NORMAL, (0.0, 1.0)) == (-math.inf, math.inf)
    assert support_bounds(DistributionId.BETA, (2.0, 2.0)) == (0.0, 1.0)
    assert support_bounds(DistributionId.PARETO, (2.0, 3.0)) == (2.0, math.inf)
    assert support_bounds(DistributionId.HYPERGEOMETRIC, (10.0, 8.0, 5.0)) == (3.0, 5.0)
    assert support_bounds(DistributionId.GEOMETRIC, (0.5,)) == (1.0, math.inf)


def test_initial_guess_is_inside_support():
    """Initial guesses stay strictly inside the support."""
    assert initial_guess(DistributionId.CHI_SQUARE, (3.0,), 0.001) > 0.0
    assert initial_guess(DistributionId.GAMMA, (0.01, 1.0), 0.5) > 0.0
    assert 0.0 < initial_guess(DistributionId.BETA, (0.5, 0.5), 0.999) < 1.0


# ===========================
# Critical values
# ===========================


def test_chi_square_critical_value():
    """χ²(1) at α = 0.05 → 3.841459"""
    result = critical_value(DistributionId.CHI_SQUARE, 0.05, [1.0])
    assert result.value == pytest.approx(3.841459, abs=1e-5)


def test_t_two_sided_critical_value():
    """t(10) two-sided at α = 0.05 → 2.228139"""
    result = critical_value(DistributionId.T, 0.05, [10.0], tail="two-sided")
    assert result.value == pytest.approx(2.228139, abs=1e-5)


def test_f_critical_value():
    """F(3, 20) at α = 0.05 against scipy.stats."""
    result = critical_value(DistributionId.F, 0.05, [3.0, 20.0])
    assert result.value == pytest.approx(stats.f.ppf(0.95, 3, 20), rel=1e-7)


def test_quantiles_batch():
    """χ²(4) quantiles at 5%, 50% and 95%."""
    results = quantiles(DistributionId.CHI_SQUARE, [0.05, 0.5, 0.95], [4.0])
    assert [round(r.value, 3) for r in results] == [0.711, 3.357, 9.488]


# ===========================
# Error handling
# ===========================


@pytest.mark.parametrize("p", [0.0, 1.0, -0.2, 1.5, math.nan])
def test_probability_outside_open_interval_raises(p):
    """p must lie strictly inside (0, 1)."""
    with pytest.raises(ValueError, match="Probability"):
        quantile(DistributionId.NORMAL, p, [0.0, 1.0])


def test_unknown_distribution_raises():
    """Unknown ids are API misuse."""
    with pytest.raises(ValueError, match="Unknown distribution"):
        quantile(123, 0.5, [1.0])


def test_invalid_parameters_raise():
    """Parameters outside the domain are API misuse."""
    with pytest.raises(ValueError, match="Invalid parameters"):
        quantile(DistributionId.GAMMA, 0.5, [0.0, 1.0])


def test_unknown_method_and_tail_raise():
    """Unknown method, tail or alpha are rejected."""
    with pytest.raises(ValueError):
        quantile(DistributionId.GAMMA, 0.5, [2.0, 1.0], method="secant")
    with pytest.raises(ValueError):
        critical_value(DistributionId.T, 0.05, [5.0], tail="lower")
    with pytest.raises(ValueError):
        critical_value(DistributionId.T, 1.5, [5.0])
