"""
Continuous distributions: density and cumulative distribution functions.

Each family provides a pdf/cdf/validate triple with the signature
f(x, params, count=None). All functions return NaN when the parameter vector
is absent, has the wrong arity, or lies outside the family's mathematical
domain; they never raise.

Common conventions:
    - pdf(NaN) and cdf(NaN) are NaN
    - pdf(±inf) = 0, cdf(-inf) = 0, cdf(+inf) = 1
    - Densities are computed in log space and exponentiated with
      overflow/underflow guards
    - Boundary points of the support follow the family's analytic limit
      (0, a finite value, or +inf)
"""

import math
from typing import Optional

from probcalc.core.parameters import infinite_cdf, unpack
from probcalc.core.special_functions import (
    error_function,
    is_finite_number,
    log_beta_function,
    log_gamma,
    regularized_incomplete_beta,
    regularized_incomplete_gamma_p,
    safe_exp,
    safe_log,
    standard_normal_cdf,
)
from probcalc.utils.constants import LN_2, SQRT_2, SQRT_2PI, T_NORMAL_MIN_DF
from probcalc.utils.types import DistributionFunctions, Params


def _positive(value: float) -> bool:
    return is_finite_number(value) and value > 0.0


def _power_law_at_zero(shape: float, value_at_one: float) -> float:
    """Limit of x^(shape-1)·(...) as x -> 0+: +inf, a finite value, or 0."""
    if shape < 1.0:
        return math.inf
    if shape == 1.0:
        return value_at_one
    return 0.0


# ===========================
# Normal
# ===========================


def normal_validate_params(params: Params, count: Optional[int] = None) -> bool:
    """mean: any finite real; std_dev: positive."""
    values = unpack(params, count, 2)
    if values is None:
        return False
    mean, std_dev = values
    return is_finite_number(mean) and _positive(std_dev)


def normal_pdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """
    Normal density.

    Formula:
        f(x) = 1/(σ√(2π)) · exp(-((x-μ)/σ)²/2)

    Examples:
        >>> abs(normal_pdf(0.0, [0.0, 1.0]) - 0.3989423) < 1e-6
        True
    """
    if not normal_validate_params(params, count):
        return math.nan
    mean, std_dev = params[0], params[1]

    if math.isnan(x):
        return math.nan
    if math.isinf(x):
        return 0.0

    z = (x - mean) / std_dev
    return safe_exp(-0.5 * z * z) / (std_dev * SQRT_2PI)


def normal_cdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """
    Normal CDF.

    Formula:
        F(x) = 0.5·(1 + erf((x-μ)/(σ√2)))
    """
    if not normal_validate_params(params, count):
        return math.nan
    mean, std_dev = params[0], params[1]

    if not math.isfinite(x):
        return infinite_cdf(x)

    return 0.5 * (1.0 + error_function((x - mean) / (std_dev * SQRT_2)))


# ===========================
# Exponential
# ===========================


def exponential_validate_params(params: Params, count: Optional[int] = None) -> bool:
    values = unpack(params, count, 1)
    return values is not None and _positive(values[0])


def exponential_pdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """f(x) = λ·e^(-λx) for x >= 0, 0 otherwise."""
    if not exponential_validate_params(params, count):
        return math.nan
    lam = params[0]

    if math.isnan(x):
        return math.nan
    if math.isinf(x) or x < 0.0:
        return 0.0

    return lam * safe_exp(-lam * x)


def exponential_cdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """F(x) = 1 - e^(-λx) for x >= 0, 0 otherwise."""
    if not exponential_validate_params(params, count):
        return math.nan
    lam = params[0]

    if not math.isfinite(x):
        return infinite_cdf(x)
    if x < 0.0:
        return 0.0

    return 1.0 - safe_exp(-lam * x)


# ===========================
# Gamma (shape/scale)
# ===========================


def gamma_validate_params(params: Params, count: Optional[int] = None) -> bool:
    values = unpack(params, count, 2)
    return values is not None and _positive(values[0]) and _positive(values[1])


def gamma_pdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """
    Gamma density with shape k and scale θ.

    Formula:
        f(x) = x^(k-1)·e^(-x/θ) / (Γ(k)·θ^k)

    Edge Cases:
        At x = 0: 1/θ when k = 1, 0 when k > 1, +inf when k < 1.
    """
    if not gamma_validate_params(params, count):
        return math.nan
    shape, scale = params[0], params[1]

    if math.isnan(x):
        return math.nan
    if math.isinf(x) or x < 0.0:
        return 0.0
    if x == 0.0:
        return _power_law_at_zero(shape, 1.0 / scale)

    log_density = (
        (shape - 1.0) * math.log(x) - x / scale - shape * math.log(scale) - log_gamma(shape)
    )
    return safe_exp(log_density)


def gamma_cdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """F(x) = P(k, x/θ), the regularized lower incomplete gamma function."""
    if not gamma_validate_params(params, count):
        return math.nan
    shape, scale = params[0], params[1]

    if not math.isfinite(x):
        return infinite_cdf(x)
    if x <= 0.0:
        return 0.0

    return regularized_incomplete_gamma_p(shape, x / scale)


# ===========================
# Chi-square
# ===========================


def chi_square_validate_params(params: Params, count: Optional[int] = None) -> bool:
    values = unpack(params, count, 1)
    return values is not None and _positive(values[0])


def chi_square_pdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """
    Chi-square density with k degrees of freedom.

    Formula:
        f(x) = x^(k/2-1)·e^(-x/2) / (2^(k/2)·Γ(k/2))

    Edge Cases:
        At x = 0: +inf when k < 2, exactly 0.5 when k = 2, 0 when k > 2.
    """
    if not chi_square_validate_params(params, count):
        return math.nan
    df = params[0]

    if math.isnan(x):
        return math.nan
    if math.isinf(x) or x < 0.0:
        return 0.0
    if x == 0.0:
        return _power_law_at_zero(df / 2.0, 0.5)

    half_df = df / 2.0
    log_coefficient = -half_df * LN_2 - log_gamma(half_df)
    return safe_exp(log_coefficient + (half_df - 1.0) * math.log(x) - x / 2.0)


def chi_square_cdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """F(x) = P(k/2, x/2)."""
    if not chi_square_validate_params(params, count):
        return math.nan
    df = params[0]

    if not math.isfinite(x):
        return infinite_cdf(x)
    if x <= 0.0:
        return 0.0

    return regularized_incomplete_gamma_p(df / 2.0, x / 2.0)


# ===========================
# F
# ===========================


def f_validate_params(params: Params, count: Optional[int] = None) -> bool:
    values = unpack(params, count, 2)
    return values is not None and _positive(values[0]) and _positive(values[1])


def f_pdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """
    F density with ν₁ numerator and ν₂ denominator degrees of freedom.

    Formula:
        f(x) = (ν₁/ν₂)^(ν₁/2)·x^(ν₁/2-1)·(1 + ν₁x/ν₂)^(-(ν₁+ν₂)/2) / B(ν₁/2, ν₂/2)

    Edge Cases:
        At x = 0: +inf when ν₁ < 2, 1 when ν₁ = 2, 0 when ν₁ > 2.
    """
    if not f_validate_params(params, count):
        return math.nan
    nu1, nu2 = params[0], params[1]

    if math.isnan(x):
        return math.nan
    if math.isinf(x) or x < 0.0:
        return 0.0
    if x == 0.0:
        return _power_law_at_zero(nu1 / 2.0, 1.0)

    half_nu1 = nu1 / 2.0
    half_sum = (nu1 + nu2) / 2.0
    ratio = nu1 / nu2

    log_density = (
        half_nu1 * math.log(ratio)
        + (half_nu1 - 1.0) * math.log(x)
        - half_sum * math.log1p(ratio * x)
        - log_beta_function(half_nu1, nu2 / 2.0)
    )
    return safe_exp(log_density)


def f_cdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """F(x) = I_z(ν₁/2, ν₂/2) with z = ν₁x/(ν₁x + ν₂)."""
    if not f_validate_params(params, count):
        return math.nan
    nu1, nu2 = params[0], params[1]

    if not math.isfinite(x):
        return infinite_cdf(x)
    if x <= 0.0:
        return 0.0

    z = (nu1 * x) / (nu1 * x + nu2)
    return regularized_incomplete_beta(nu1 / 2.0, nu2 / 2.0, z)


# ===========================
# Student's t
# ===========================


def t_validate_params(params: Params, count: Optional[int] = None) -> bool:
    values = unpack(params, count, 1)
    return values is not None and _positive(values[0])


# Above this |x|/√ν, w² overflows; 1 + w² is then w² to double precision
_T_SQUARE_LIMIT = 1e150


def _log1p_square(w: float) -> float:
    """log(1 + w²) for w >= 0 without overflowing w²."""
    if w < _T_SQUARE_LIMIT:
        return math.log1p(w * w)
    return 2.0 * math.log(w)


def t_pdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """
    Student's t density with ν degrees of freedom.

    Formula:
        f(x) = Γ((ν+1)/2) / (√(νπ)·Γ(ν/2)) · (1 + x²/ν)^(-(ν+1)/2)
    """
    if not t_validate_params(params, count):
        return math.nan
    nu = params[0]

    if math.isnan(x):
        return math.nan
    if math.isinf(x):
        return 0.0

    half_nu_plus_1 = (nu + 1.0) / 2.0
    log_norm = log_gamma(half_nu_plus_1) - 0.5 * safe_log(nu * math.pi) - log_gamma(nu / 2.0)
    log_power = -half_nu_plus_1 * _log1p_square(abs(x) / math.sqrt(nu))
    return safe_exp(log_norm + log_power)


def t_cdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """
    Student's t CDF.

    Uses the incomplete beta relation for the tail mass beyond |x|:
        P(T < -|x|) = 0.5·I_(ν/(ν+x²))(ν/2, 1/2)
    split at x = 0. Above 100 degrees of freedom the standard normal CDF is
    used instead.
    """
    if not t_validate_params(params, count):
        return math.nan
    nu = params[0]

    if not math.isfinite(x):
        return infinite_cdf(x)
    if x == 0.0:
        return 0.5

    if nu > T_NORMAL_MIN_DF:
        return standard_normal_cdf(x)

    w = abs(x) / math.sqrt(nu)
    if w < _T_SQUARE_LIMIT:
        tail = 0.5 * regularized_incomplete_beta(nu / 2.0, 0.5, 1.0 / (1.0 + w * w))
    else:
        # z = 1/(1+w²) is below 1e-300: leading term I_z(a, 1/2) ≈ z^a / (a·B(a, 1/2))
        a = nu / 2.0
        tail = 0.5 * safe_exp(-a * _log1p_square(w) - math.log(a) - log_beta_function(a, 0.5))
    return tail if x < 0.0 else 1.0 - tail


# ===========================
# Beta
# ===========================


def beta_validate_params(params: Params, count: Optional[int] = None) -> bool:
    values = unpack(params, count, 2)
    return values is not None and _positive(values[0]) and _positive(values[1])


def beta_pdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """
    Beta density on [0, 1].

    Formula:
        f(x) = x^(α-1)·(1-x)^(β-1) / B(α, β)

    Edge Cases:
        At x = 0 the value is +inf (α < 1), β (α = 1) or 0 (α > 1).
        At x = 1 the value is +inf (β < 1), α (β = 1) or 0 (β > 1).
    """
    if not beta_validate_params(params, count):
        return math.nan
    alpha, beta = params[0], params[1]

    if math.isnan(x):
        return math.nan
    if x < 0.0 or x > 1.0:
        return 0.0
    if x == 0.0:
        return _power_law_at_zero(alpha, beta)
    if x == 1.0:
        return _power_law_at_zero(beta, alpha)

    log_density = (
        (alpha - 1.0) * math.log(x)
        + (beta - 1.0) * math.log1p(-x)
        - log_beta_function(alpha, beta)
    )
    return safe_exp(log_density)


def beta_cdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """F(x) = I_x(α, β)."""
    if not beta_validate_params(params, count):
        return math.nan
    alpha, beta = params[0], params[1]

    if math.isnan(x):
        return math.nan
    if x <= 0.0:
        return 0.0
    if x >= 1.0:
        return 1.0

    return regularized_incomplete_beta(alpha, beta, x)


# ===========================
# Weibull
# ===========================


def weibull_validate_params(params: Params, count: Optional[int] = None) -> bool:
    values = unpack(params, count, 2)
    return values is not None and _positive(values[0]) and _positive(values[1])


def weibull_pdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """f(x) = (k/λ)·(x/λ)^(k-1)·exp(-(x/λ)^k) for x >= 0."""
    if not weibull_validate_params(params, count):
        return math.nan
    shape, scale = params[0], params[1]

    if math.isnan(x):
        return math.nan
    if math.isinf(x) or x < 0.0:
        return 0.0
    if x == 0.0:
        return _power_law_at_zero(shape, 1.0 / scale)

    log_ratio = math.log(x) - math.log(scale)
    log_density = (
        math.log(shape) - math.log(scale) + (shape - 1.0) * log_ratio - safe_exp(shape * log_ratio)
    )
    return safe_exp(log_density)


def weibull_cdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """F(x) = 1 - exp(-(x/λ)^k) for x >= 0."""
    if not weibull_validate_params(params, count):
        return math.nan
    shape, scale = params[0], params[1]

    if not math.isfinite(x):
        return infinite_cdf(x)
    if x <= 0.0:
        return 0.0

    return 1.0 - safe_exp(-safe_exp(shape * (math.log(x) - math.log(scale))))


# ===========================
# Rayleigh
# ===========================


def rayleigh_validate_params(params: Params, count: Optional[int] = None) -> bool:
    values = unpack(params, count, 1)
    return values is not None and _positive(values[0])


def rayleigh_pdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """f(x) = x/σ²·exp(-x²/(2σ²)) for x >= 0."""
    if not rayleigh_validate_params(params, count):
        return math.nan
    scale = params[0]

    if math.isnan(x):
        return math.nan
    if math.isinf(x) or x <= 0.0:
        return 0.0

    scale_sq = scale * scale
    return safe_exp(math.log(x) - math.log(scale_sq) - (x * x) / (2.0 * scale_sq))


def rayleigh_cdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """F(x) = 1 - exp(-x²/(2σ²)) for x >= 0."""
    if not rayleigh_validate_params(params, count):
        return math.nan
    scale = params[0]

    if not math.isfinite(x):
        return infinite_cdf(x)
    if x <= 0.0:
        return 0.0

    return 1.0 - safe_exp(-(x * x) / (2.0 * scale * scale))


# ===========================
# Pareto (Type I)
# ===========================


def pareto_validate_params(params: Params, count: Optional[int] = None) -> bool:
    """scale x_m > 0, shape α > 0."""
    values = unpack(params, count, 2)
    return values is not None and _positive(values[0]) and _positive(values[1])


def pareto_pdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """f(x) = α·x_m^α / x^(α+1) for x >= x_m."""
    if not pareto_validate_params(params, count):
        return math.nan
    scale, shape = params[0], params[1]

    if math.isnan(x):
        return math.nan
    if math.isinf(x) or x < scale:
        return 0.0

    return safe_exp(math.log(shape) + shape * math.log(scale) - (shape + 1.0) * math.log(x))


def pareto_cdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """F(x) = 1 - (x_m/x)^α for x >= x_m."""
    if not pareto_validate_params(params, count):
        return math.nan
    scale, shape = params[0], params[1]

    if not math.isfinite(x):
        return infinite_cdf(x)
    if x <= scale:
        return 0.0

    return 1.0 - safe_exp(shape * (math.log(scale) - math.log(x)))


# ===========================
# Uniform
# ===========================


def uniform_validate_params(params: Params, count: Optional[int] = None) -> bool:
    """Finite bounds with lower < upper."""
    values = unpack(params, count, 2)
    if values is None:
        return False
    lower, upper = values
    return is_finite_number(lower) and is_finite_number(upper) and lower < upper


def uniform_pdf(x: float, params: Params, count: Optional[int] = None) -> float:
    """f(x) = 1/(b-a) on [a, b]."""
    if not uniform_validate_params(params, count):
        return math.nan
    lower, upper = params[0], params[1]

    if math.isnan(x):
        return math.nan
    if lower <= x <= upper:
        return 1.0 / (upper - lower)
    return 0.0


def uniform_cdf(x: float, params: Params, count: Optional[int] = None) -> float:
    if not uniform_validate_params(params, count):
        return math.nan
    lower, upper = params[0], params[1]

    if math.isnan(x):
        return math.nan
    if x <= lower:
        return 0.0
    if x >= upper:
        return 1.0
    return (x - lower) / (upper - lower)


NORMAL = DistributionFunctions(normal_pdf, normal_cdf, normal_validate_params)
EXPONENTIAL = DistributionFunctions(exponential_pdf, exponential_cdf, exponential_validate_params)
GAMMA = DistributionFunctions(gamma_pdf, gamma_cdf, gamma_validate_params)
CHI_SQUARE = DistributionFunctions(chi_square_pdf, chi_square_cdf, chi_square_validate_params)
F = DistributionFunctions(f_pdf, f_cdf, f_validate_params)
T = DistributionFunctions(t_pdf, t_cdf, t_validate_params)
BETA = DistributionFunctions(beta_pdf, beta_cdf, beta_validate_params)
WEIBULL = DistributionFunctions(weibull_pdf, weibull_cdf, weibull_validate_params)
RAYLEIGH = DistributionFunctions(rayleigh_pdf, rayleigh_cdf, rayleigh_validate_params)
PARETO = DistributionFunctions(pareto_pdf, pareto_cdf, pareto_validate_params)
UNIFORM = DistributionFunctions(uniform_pdf, uniform_cdf, uniform_validate_params)
