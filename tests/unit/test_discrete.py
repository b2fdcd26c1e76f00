"""
Unit tests for discrete distribution formulas.

This module validates:
1. Mass and cumulative values against scipy.stats
2. Documented scenarios (Binomial, Hypergeometric)
3. Normal-approximation and incomplete-beta branches
4. Point-mass semantics (non-integers, floors, degenerate probabilities)
"""

import math

import pytest
from scipy import stats

from probcalc.core import discrete


REFERENCE_CASES = [
    (discrete.GEOMETRIC, [0.25], stats.geom(0.25), range(0, 25)),
    (discrete.GEOMETRIC, [0.9], stats.geom(0.9), range(0, 8)),
    (discrete.BINOMIAL, [20.0, 0.3], stats.binom(20, 0.3), range(0, 21)),
    (discrete.BINOMIAL, [40.0, 0.1], stats.binom(40, 0.1), range(0, 15)),
    (discrete.NEGATIVE_BINOMIAL, [4.0, 0.4], stats.nbinom(4, 0.4), range(0, 30)),
    (discrete.NEGATIVE_BINOMIAL, [1.0, 0.7], stats.nbinom(1, 0.7), range(0, 10)),
    (discrete.HYPERGEOMETRIC, [40.0, 15.0, 10.0], stats.hypergeom(40, 15, 10), range(0, 11)),
    (discrete.HYPERGEOMETRIC, [30.0, 25.0, 12.0], stats.hypergeom(30, 25, 12), range(0, 13)),
    (discrete.POISSON, [6.5], stats.poisson(6.5), range(0, 25)),
    (discrete.POISSON, [0.2], stats.poisson(0.2), range(0, 6)),
]


# ===========================
# Reference values
# ===========================


@pytest.mark.parametrize("functions, params, reference, ks", REFERENCE_CASES)
def test_pmf_matches_scipy(functions, params, reference, ks):
    """Mass function against scipy.stats over the bulk of the support."""
    for k in ks:
        assert functions.pdf(float(k), params) == pytest.approx(reference.pmf(k), rel=1e-8, abs=1e-15), f"k={k}"


@pytest.mark.parametrize("functions, params, reference, ks", REFERENCE_CASES)
def test_cdf_matches_scipy(functions, params, reference, ks):
    """Exact-summation CDFs against scipy.stats."""
    for k in ks:
        assert functions.cdf(float(k), params) == pytest.approx(reference.cdf(k), abs=1e-10), f"k={k}"


# ===========================
# Documented scenarios
# ===========================


def test_binomial_ten_half_at_five():
    """Binomial(10, 0.5) at 5 → C(10,5)/1024 ≈ 0.246094"""
    assert discrete.binomial_pdf(5.0, [10.0, 0.5]) == pytest.approx(0.246094, abs=1e-6)


def test_hypergeometric_scenario():
    """Hypergeometric(N=10, K=5, n=4) at 2 → C(5,2)·C(5,2)/C(10,4) = 100/210"""
    assert discrete.hypergeometric_pdf(2.0, [10.0, 5.0, 4.0]) == pytest.approx(100.0 / 210.0, rel=1e-10)


def test_hypergeometric_rejects_success_states_above_population():
    """K > N is outside the domain."""
    assert math.isnan(discrete.hypergeometric_pdf(1.0, [5.0, 10.0, 2.0]))


# ===========================
# Approximation branches
# ===========================


@pytest.mark.parametrize("k", [40, 45, 50, 55, 60])
def test_binomial_normal_approximation(k):
    """n=100, p=0.5 meets every normal-approximation threshold."""
    assert discrete.binomial_cdf(float(k), [100.0, 0.5]) == pytest.approx(stats.binom.cdf(k, 100, 0.5), abs=3e-3)


def test_binomial_small_variance_stays_exact():
    """n·p·(1-p) < 9 keeps direct summation even for large n."""
    value = discrete.binomial_cdf(3.0, [200.0, 0.01])
    assert value == pytest.approx(stats.binom.cdf(3, 200, 0.01), abs=1e-10)


def test_binomial_beyond_summation_limit_uses_incomplete_beta():
    """n above the summation ceiling uses F(k) = I_(1-p)(n-k, k+1)."""
    n, p = 200000, 1e-5
    for k in (0, 1, 2, 5):
        assert discrete.binomial_cdf(float(k), [float(n), p]) == pytest.approx(stats.binom.cdf(k, n, p), abs=1e-8)


@pytest.mark.parametrize("k", [35, 45, 50, 55, 65])
def test_poisson_normal_approximation(k):
    """λ >= 30 uses the continuity-corrected normal approximation."""
    assert discrete.poisson_cdf(float(k), [50.0]) == pytest.approx(stats.poisson.cdf(k, 50.0), abs=1.5e-2)


def test_negative_binomial_far_mode_summation():
    """Terms before a distant mode are not cut off early."""
    r, p = 50, 0.05
    for k in (500, 931, 1500):
        assert discrete.negative_binomial_cdf(float(k), [float(r), p]) == pytest.approx(
            stats.nbinom.cdf(k, r, p), abs=1e-9
        )


def test_negative_binomial_underflowing_first_term_uses_incomplete_beta():
    """p^r below the double range falls back to I_p(r, k+1)."""
    r, p = 400, 0.1
    for k in (3000, 3600, 4200):
        assert discrete.negative_binomial_cdf(float(k), [float(r), p]) == pytest.approx(
            stats.nbinom.cdf(k, r, p), abs=1e-8
        )


def test_negative_binomial_beyond_summation_limit():
    """k past the summation ceiling still converges to 1."""
    assert discrete.negative_binomial_cdf(250000.0, [2.0, 0.5]) == pytest.approx(1.0, abs=1e-12)


def test_poisson_large_k_is_bounded():
    """A huge k terminates and returns 1."""
    assert discrete.poisson_cdf(1e9, [4.0]) == pytest.approx(1.0, abs=1e-12)


# ===========================
# Point-mass semantics
# ===========================


def test_non_integer_points_have_no_mass():
    """Mass only at integers inside the support."""
    assert discrete.binomial_pdf(2.5, [10.0, 0.5]) == 0.0
    assert discrete.poisson_pdf(1.2, [3.0]) == 0.0
    assert discrete.geometric_pdf(0.0, [0.5]) == 0.0
    assert discrete.negative_binomial_pdf(-1.0, [3.0, 0.5]) == 0.0


def test_cdf_is_step_function_of_floor():
    """CDF is right-continuous in floor(x)."""
    params = [12.0, 0.4]
    assert discrete.binomial_cdf(4.7, params) == discrete.binomial_cdf(4.0, params)
    assert discrete.poisson_cdf(2.999, [2.0]) == discrete.poisson_cdf(2.0, [2.0])
    assert discrete.geometric_cdf(0.9, [0.3]) == 0.0
    assert discrete.binomial_cdf(-0.5, params) == 0.0


def test_geometric_closed_form():
    """F(k) = 1 - (1-p)^k, with p = 1 concentrated at k = 1."""
    assert discrete.geometric_cdf(3.0, [0.5]) == pytest.approx(0.875, abs=1e-15)
    assert discrete.geometric_pdf(1.0, [1.0]) == 1.0
    assert discrete.geometric_pdf(2.0, [1.0]) == 0.0
    assert discrete.geometric_cdf(1.0, [1.0]) == 1.0


def test_binomial_degenerate_probabilities():
    """p = 0, p = 1 and n = 0 are point masses."""
    assert discrete.binomial_pdf(0.0, [8.0, 0.0]) == 1.0
    assert discrete.binomial_cdf(0.0, [8.0, 0.0]) == 1.0
    assert discrete.binomial_pdf(8.0, [8.0, 1.0]) == 1.0
    assert discrete.binomial_cdf(7.0, [8.0, 1.0]) == 0.0
    assert discrete.binomial_pdf(0.0, [0.0, 0.3]) == 1.0
    assert discrete.binomial_cdf(0.0, [0.0, 0.3]) == 1.0


def test_hypergeometric_support_edges():
    """Support is [max(0, n-(N-K)), min(n, K)]."""
    params = [10.0, 8.0, 5.0]
    # support is [3, 5]
    assert discrete.hypergeometric_pdf(2.0, params) == 0.0
    assert discrete.hypergeometric_cdf(2.0, params) == 0.0
    assert discrete.hypergeometric_cdf(5.0, params) == 1.0
    assert discrete.hypergeometric_cdf(4.0, params) == pytest.approx(stats.hypergeom.cdf(4, 10, 8, 5), abs=1e-12)


def test_poisson_zero_mass():
    """P(X = 0) = e^(-λ)."""
    assert discrete.poisson_pdf(0.0, [2.0]) == pytest.approx(math.exp(-2.0), rel=1e-15)


# ===========================
# Invalid inputs
# ===========================


ALL_FAMILIES = [
    (discrete.GEOMETRIC, [0.5]),
    (discrete.BINOMIAL, [10.0, 0.5]),
    (discrete.NEGATIVE_BINOMIAL, [3.0, 0.5]),
    (discrete.HYPERGEOMETRIC, [20.0, 7.0, 5.0]),
    (discrete.POISSON, [3.0]),
]


@pytest.mark.parametrize("functions, params", ALL_FAMILIES)
def test_infinite_and_nan_inputs(functions, params):
    """Infinite inputs map to the CDF limits; NaN propagates."""
    assert functions.cdf(-math.inf, params) == 0.0
    assert functions.cdf(math.inf, params) == 1.0
    assert functions.pdf(math.inf, params) == 0.0
    assert math.isnan(functions.pdf(math.nan, params))
    assert math.isnan(functions.cdf(math.nan, params))


@pytest.mark.parametrize(
    "functions, params",
    [
        (discrete.GEOMETRIC, [0.0]),
        (discrete.GEOMETRIC, [1.5]),
        (discrete.BINOMIAL, [-1.0, 0.5]),
        (discrete.BINOMIAL, [10.5, 0.5]),
        (discrete.BINOMIAL, [10.0, 1.2]),
        (discrete.NEGATIVE_BINOMIAL, [0.0, 0.5]),
        (discrete.NEGATIVE_BINOMIAL, [2.0, 0.0]),
        (discrete.HYPERGEOMETRIC, [0.0, 0.0, 0.0]),
        (discrete.HYPERGEOMETRIC, [10.0, 5.0, 11.0]),
        (discrete.HYPERGEOMETRIC, [10.0, 4.5, 3.0]),
        (discrete.POISSON, [0.0]),
        (discrete.POISSON, [math.inf]),
    ],
)
def test_invalid_parameters_give_nan(functions, params):
    """Parameters outside the domain give NaN for any x."""
    assert not functions.validate(params)
    for x in (-1.0, 0.0, 1.0, 3.0):
        assert math.isnan(functions.pdf(x, params))
        assert math.isnan(functions.cdf(x, params))


@pytest.mark.parametrize("functions, params", ALL_FAMILIES)
def test_count_mismatch_gives_nan(functions, params):
    """Arity mismatches give NaN."""
    assert math.isnan(functions.pdf(1.0, params, len(params) + 1))
    assert math.isnan(functions.cdf(1.0, params[:-1]))
