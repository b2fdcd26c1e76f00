"""
Discrete distributions: probability mass and cumulative distribution functions.

The pdf of a discrete family is a point mass: it is non-zero only at integers
inside the support and 0 everywhere else. The cdf is a right-continuous step
function of floor(x).

Cumulative sums use multiplicative recurrences between consecutive terms.
Open-ended sums (Negative Binomial, Poisson) stop once they are past the mode
and the running term has fallen below DISCRETE_TERM_TOLERANCE, and never run
more than MAX_SUMMATION_TERMS terms.
"""

import math
from typing import Optional

from probcalc.core.parameters import infinite_cdf, unpack
from probcalc.core.special_functions import (
    is_non_negative_integer,
    is_positive_integer,
    log_combination,
    log_factorial,
    regularized_incomplete_beta,
    safe_exp,
    standard_normal_cdf,
)
from probcalc.utils.constants import (
    BINOMIAL_NORMAL_MIN_EXPECTATION,
    BINOMIAL_NORMAL_MIN_TRIALS,
    BINOMIAL_NORMAL_MIN_VARIANCE,
    CONTINUITY_CORRECTION,
    DISCRETE_TERM_TOLERANCE,
    MAX_SUMMATION_TERMS,
    POISSON_NORMAL_MIN_LAMBDA,
)
from probcalc.utils.types import DistributionFunctions, Params


def _point_mass_index(x: float) -> Optional[int]:
    """Integer k if x is a finite integer, otherwise None."""
    if not math.isfinite(x) or math.floor(x) != x:
        return None
    return int(x)


def _open_probability(p: float) -> bool:
    """0 < p <= 1."""
    return math.isfinite(p) and 0.0 < p <= 1.0


# ===========================
# Geometric (trials until first success)
# ===========================


def geometric_validate_params(params: Params, count: Optional[int] = None) -> bool:
    values = unpack(params, count, 1)
    return values is not None and _open_probability(values[0])


def geometric_pdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """P(X = k) = (1-p)^(k-1)·p for k >= 1."""
    if not geometric_validate_params(params, count):
        return math.nan
    p = params[0]

    if math.isnan(x):
        return math.nan
    k = _point_mass_index(x)
    if k is None or k < 1:
        return 0.0
    if p == 1.0:
        return 1.0 if k == 1 else 0.0

    return p * safe_exp((k - 1) * math.log1p(-p))


def geometric_cdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """F(x) = 1 - (1-p)^floor(x) for x >= 1."""
    if not geometric_validate_params(params, count):
        return math.nan
    p = params[0]

    if not math.isfinite(x):
        return infinite_cdf(x)
    k = math.floor(x)
    if k < 1:
        return 0.0
    if p == 1.0:
        return 1.0

    return -math.expm1(k * math.log1p(-p))


# ===========================
# Binomial
# ===========================


def binomial_validate_params(params: Params, count: Optional[int] = None) -> bool:
    """trials: non-negative integer; probability: [0, 1]."""
    values = unpack(params, count, 2)
    if values is None:
        return False
    trials, p = values
    return is_non_negative_integer(trials) and math.isfinite(p) and 0.0 <= p <= 1.0


def _binomial_log_term(n: int, k: int, p: float) -> float:
    return log_combination(n, k) + k * math.log(p) + (n - k) * math.log1p(-p)


def binomial_pdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """
    Binomial mass function.

    Formula:
        P(X = k) = C(n, k)·p^k·(1-p)^(n-k)

    Examples:
        >>> round(binomial_pdf(5, [10, 0.5]), 6)
        0.246094
    """
    if not binomial_validate_params(params, count):
        return math.nan
    n, p = int(params[0]), params[1]

    if math.isnan(x):
        return math.nan
    k = _point_mass_index(x)
    if k is None or k < 0 or k > n:
        return 0.0
    if p == 0.0:
        return 1.0 if k == 0 else 0.0
    if p == 1.0:
        return 1.0 if k == n else 0.0

    return safe_exp(_binomial_log_term(n, k, p))


def _binomial_normal_applies(n: int, p: float) -> bool:
    mean = n * p
    return (
        n >= BINOMIAL_NORMAL_MIN_TRIALS
        and mean * (1.0 - p) >= BINOMIAL_NORMAL_MIN_VARIANCE
        and mean >= BINOMIAL_NORMAL_MIN_EXPECTATION
        and n * (1.0 - p) >= BINOMIAL_NORMAL_MIN_EXPECTATION
    )


def binomial_cdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """
    Binomial CDF.

    Uses the continuity-corrected normal approximation
        F(k) ≈ Φ((k + 0.5 - np) / √(np(1-p)))
    when n >= 30, np(1-p) >= 9, np >= 5 and n(1-p) >= 5. Otherwise sums the
    mass function directly, or, for n beyond MAX_SUMMATION_TERMS, uses the
    exact relation F(k) = I_(1-p)(n-k, k+1).
    """
    if not binomial_validate_params(params, count):
        return math.nan
    n, p = int(params[0]), params[1]

    if not math.isfinite(x):
        return infinite_cdf(x)
    k = math.floor(x)
    if k < 0:
        return 0.0
    if k >= n:
        return 1.0
    if p == 0.0:
        return 1.0
    if p == 1.0:
        return 0.0

    if _binomial_normal_applies(n, p):
        mean = n * p
        std_dev = math.sqrt(mean * (1.0 - p))
        return standard_normal_cdf((k + CONTINUITY_CORRECTION - mean) / std_dev)

    if n > MAX_SUMMATION_TERMS:
        return regularized_incomplete_beta(n - k, k + 1.0, 1.0 - p)

    total = 0.0
    for i in range(k + 1):
        total += safe_exp(_binomial_log_term(n, i, p))
    return min(total, 1.0)


# ===========================
# Negative Binomial (failures before the r-th success)
# ===========================


def negative_binomial_validate_params(params: Params, count: Optional[int] = None) -> bool:
    """successes: positive integer; probability: (0, 1]."""
    values = unpack(params, count, 2)
    if values is None:
        return False
    successes, p = values
    return is_positive_integer(successes) and _open_probability(p)


def negative_binomial_pdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """P(X = k) = C(k+r-1, k)·p^r·(1-p)^k for k >= 0."""
    if not negative_binomial_validate_params(params, count):
        return math.nan
    r, p = int(params[0]), params[1]

    if math.isnan(x):
        return math.nan
    k = _point_mass_index(x)
    if k is None or k < 0:
        return 0.0
    if p == 1.0:
        return 1.0 if k == 0 else 0.0

    log_mass = log_combination(k + r - 1, k) + r * math.log(p) + k * math.log1p(-p)
    return safe_exp(log_mass)


def negative_binomial_cdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """
    Negative Binomial CDF by recurrence summation.

    Consecutive terms satisfy
        P(i) = P(i-1)·(i+r-1)·(1-p)/i
    starting from P(0) = p^r. When P(0) underflows or k exceeds
    MAX_SUMMATION_TERMS, the exact relation F(k) = I_p(r, k+1) is used.
    """
    if not negative_binomial_validate_params(params, count):
        return math.nan
    r, p = int(params[0]), params[1]

    if not math.isfinite(x):
        return infinite_cdf(x)
    k = math.floor(x)
    if k < 0:
        return 0.0
    if p == 1.0:
        return 1.0

    term = safe_exp(r * math.log(p))
    if term == 0.0 or k > MAX_SUMMATION_TERMS:
        return regularized_incomplete_beta(float(r), k + 1.0, p)

    q = 1.0 - p
    mode = (r - 1) * q / p
    total = term
    for i in range(1, k + 1):
        term *= (i + r - 1) * q / i
        total += term
        if i > mode and term < DISCRETE_TERM_TOLERANCE:
            break
    return min(total, 1.0)


# ===========================
# Hypergeometric
# ===========================


def hypergeometric_validate_params(params: Params, count: Optional[int] = None) -> bool:
    """population_size N >= 1, 0 <= success_states K <= N, 0 <= sample_size n <= N; all integers."""
    values = unpack(params, count, 3)
    if values is None:
        return False
    population, successes, sample = values
    return (
        is_positive_integer(population)
        and is_non_negative_integer(successes)
        and is_non_negative_integer(sample)
        and successes <= population
        and sample <= population
    )


def _hypergeometric_support(population: int, successes: int, sample: int) -> tuple[int, int]:
    return max(0, sample - (population - successes)), min(sample, successes)


def _hypergeometric_mass(k: int, population: int, successes: int, sample: int) -> float:
    log_mass = (
        log_combination(successes, k)
        + log_combination(population - successes, sample - k)
        - log_combination(population, sample)
    )
    return safe_exp(log_mass)


def hypergeometric_pdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """
    Hypergeometric mass function.

    Formula:
        P(X = k) = C(K, k)·C(N-K, n-k) / C(N, n)
    on the support [max(0, n-(N-K)), min(n, K)].
    """
    if not hypergeometric_validate_params(params, count):
        return math.nan
    population, successes, sample = (int(v) for v in params[:3])

    if math.isnan(x):
        return math.nan
    k = _point_mass_index(x)
    low, high = _hypergeometric_support(population, successes, sample)
    if k is None or k < low or k > high:
        return 0.0

    return _hypergeometric_mass(k, population, successes, sample)


def hypergeometric_cdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """Direct summation over the shorter side of the support."""
    if not hypergeometric_validate_params(params, count):
        return math.nan
    population, successes, sample = (int(v) for v in params[:3])

    if not math.isfinite(x):
        return infinite_cdf(x)
    k = math.floor(x)
    low, high = _hypergeometric_support(population, successes, sample)
    if k < low:
        return 0.0
    if k >= high:
        return 1.0

    if k - low <= high - k:
        total = sum(_hypergeometric_mass(i, population, successes, sample) for i in range(low, k + 1))
        return min(total, 1.0)

    upper = sum(_hypergeometric_mass(i, population, successes, sample) for i in range(k + 1, high + 1))
    return max(1.0 - upper, 0.0)


# ===========================
# Poisson
# ===========================


def poisson_validate_params(params: Params, count: Optional[int] = None) -> bool:
    values = unpack(params, count, 1)
    return values is not None and math.isfinite(values[0]) and values[0] > 0.0


def poisson_pdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """P(X = k) = λ^k·e^(-λ)/k!, evaluated in log space."""
    if not poisson_validate_params(params, count):
        return math.nan
    lam = params[0]

    if math.isnan(x):
        return math.nan
    k = _point_mass_index(x)
    if k is None or k < 0:
        return 0.0
    if k == 0:
        return safe_exp(-lam)

    return safe_exp(k * math.log(lam) - lam - log_factorial(k))


def poisson_cdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """
    Poisson CDF.

    For λ >= 30 uses Φ((k + 0.5 - λ)/√λ); otherwise sums terms with the
    recurrence P(i) = P(i-1)·λ/i starting from e^(-λ).
    """
    if not poisson_validate_params(params, count):
        return math.nan
    lam = params[0]

    if not math.isfinite(x):
        return infinite_cdf(x)
    k = math.floor(x)
    if k < 0:
        return 0.0

    if lam >= POISSON_NORMAL_MIN_LAMBDA:
        return standard_normal_cdf((k + CONTINUITY_CORRECTION - lam) / math.sqrt(lam))

    term = safe_exp(-lam)
    total = term
    for i in range(1, min(k, MAX_SUMMATION_TERMS) + 1):
        term *= lam / i
        total += term
        if i > lam and term < DISCRETE_TERM_TOLERANCE:
            break
    return min(total, 1.0)


GEOMETRIC = DistributionFunctions(geometric_pdf, geometric_cdf, geometric_validate_params)
BINOMIAL = DistributionFunctions(binomial_pdf, binomial_cdf, binomial_validate_params)
NEGATIVE_BINOMIAL = DistributionFunctions(
    negative_binomial_pdf, negative_binomial_cdf, negative_binomial_validate_params
)
HYPERGEOMETRIC = DistributionFunctions(
    hypergeometric_pdf, hypergeometric_cdf, hypergeometric_validate_params
)
POISSON = DistributionFunctions(poisson_pdf, poisson_cdf, poisson_validate_params)
