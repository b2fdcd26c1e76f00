"""
Quantile (inverse CDF) solver with automatic method selection.

This module provides the high-level interface for inverting any catalog
distribution's CDF:

    - closed forms where the inverse is elementary (Normal, Exponential,
      Weibull, Rayleigh, Pareto, Uniform)
    - Newton-Raphson with a Brent fallback for the remaining continuous
      families
    - bracket doubling plus integer bisection for discrete families, which
      returns the smallest support point k with cdf(k) >= p
"""

import logging
import math
from typing import Callable, Literal, Optional, Sequence

from probcalc.catalog.registry import DistributionCatalog, default_catalog
from probcalc.core.special_functions import inverse_normal_cdf, safe_exp
from probcalc.solvers.brent import brent_quantile, expand_bracket
from probcalc.solvers.newton_raphson import newton_raphson_quantile
from probcalc.utils.constants import QUANTILE_DISCRETE_MAX_STEPS
from probcalc.utils.types import (
    DistributionDescriptor,
    DistributionId,
    Params,
    QuantileResult,
)

logger = logging.getLogger(__name__)

Tail = Literal["upper", "two-sided"]

# Smallest guess used for families supported on (0, inf)
_MIN_POSITIVE_GUESS = 1e-8


# ===========================
# Support and starting points
# ===========================


def support_bounds(distribution_id: DistributionId, values: Sequence[float]) -> tuple[float, float]:
    """
    Support [lower, upper] of a distribution for validated parameters.

    Discrete supports are returned as the integer end points (upper may be
    inf); continuous supports may be open at either end.
    """
    if distribution_id in (DistributionId.NORMAL, DistributionId.T):
        return -math.inf, math.inf
    if distribution_id == DistributionId.BETA:
        return 0.0, 1.0
    if distribution_id == DistributionId.PARETO:
        return values[0], math.inf
    if distribution_id == DistributionId.UNIFORM:
        return values[0], values[1]
    if distribution_id == DistributionId.GEOMETRIC:
        return 1.0, math.inf
    if distribution_id == DistributionId.BINOMIAL:
        return 0.0, values[0]
    if distribution_id == DistributionId.HYPERGEOMETRIC:
        population, successes, sample = values
        return max(0.0, sample - (population - successes)), min(sample, successes)
    return 0.0, math.inf


def _wilson_hilferty(df: float, z: float) -> float:
    """Wilson-Hilferty approximation to the chi-square quantile."""
    c = 2.0 / (9.0 * df)
    return df * (1.0 - c + z * math.sqrt(c)) ** 3


def initial_guess(distribution_id: DistributionId, values: Sequence[float], p: float) -> float:
    """
    Starting point for Newton-Raphson, built from the standard normal quantile.

    Args:
        distribution_id: Catalog id of a continuous family without a closed form
        values: Validated parameters
        p: Target probability

    Returns:
        A point strictly inside the support
    """
    z = inverse_normal_cdf(p)

    if distribution_id == DistributionId.CHI_SQUARE:
        guess = _wilson_hilferty(values[0], z)
    elif distribution_id == DistributionId.GAMMA:
        shape, scale = values
        guess = 0.5 * scale * _wilson_hilferty(2.0 * shape, z)
    elif distribution_id == DistributionId.T:
        nu = values[0]
        return z * math.sqrt(nu / (nu - 2.0)) if nu > 2.0 else z
    elif distribution_id == DistributionId.F:
        nu2 = values[1]
        mean = nu2 / (nu2 - 2.0) if nu2 > 2.0 else 1.0
        guess = mean * math.exp(0.5 * z)
    elif distribution_id == DistributionId.BETA:
        alpha, beta = values
        total = alpha + beta
        mean = alpha / total
        spread = math.sqrt(alpha * beta / (total * total * (total + 1.0)))
        return min(max(mean + z * spread, 1e-6), 1.0 - 1e-6)
    else:
        guess = 1.0

    return max(guess, _MIN_POSITIVE_GUESS)


def closed_form_quantile(distribution_id: DistributionId, values: Sequence[float],
                         p: float) -> Optional[float]:
    """Elementary inverse CDF, or None if the family has none."""
    if distribution_id == DistributionId.NORMAL:
        mean, std_dev = values
        return mean + std_dev * inverse_normal_cdf(p)
    if distribution_id == DistributionId.EXPONENTIAL:
        return -math.log1p(-p) / values[0]
    if distribution_id == DistributionId.WEIBULL:
        shape, scale = values
        return scale * safe_exp(math.log(-math.log1p(-p)) / shape)
    if distribution_id == DistributionId.RAYLEIGH:
        return values[0] * math.sqrt(-2.0 * math.log1p(-p))
    if distribution_id == DistributionId.PARETO:
        scale, shape = values
        return scale * safe_exp(-math.log1p(-p) / shape)
    if distribution_id == DistributionId.UNIFORM:
        lower, upper = values
        return lower + p * (upper - lower)
    return None


# ===========================
# Solvers
# ===========================


def discrete_quantile(
    cdf: Callable[[float], float],
    p: float,
    lower: float,
    upper: float,
    max_steps: int = QUANTILE_DISCRETE_MAX_STEPS,
) -> QuantileResult:
    """
    Smallest integer k in [lower, upper] with cdf(k) >= p.

    Doubles the step from the lower end until cdf crosses p, then bisects
    between the last two probes.
    """
    steps = 1
    low = lower
    if cdf(low) >= p:
        return QuantileResult(low, p, steps, "discrete-search", True, "Lower support bound")

    step = 1.0
    high = min(low + step, upper)
    while cdf(high) < p:
        steps += 1
        if high >= upper or steps > max_steps:
            return QuantileResult(
                value=high,
                probability=p,
                iterations=steps,
                method="discrete-search",
                success=False,
                message=f"CDF did not reach {p} within {steps} bracket steps",
            )
        low = high
        step *= 2.0
        high = min(low + step, upper)

    # cdf(low) < p <= cdf(high)
    while high - low > 1.0:
        steps += 1
        mid = math.floor((low + high) / 2.0)
        if cdf(mid) >= p:
            high = mid
        else:
            low = mid

    return QuantileResult(
        value=high,
        probability=p,
        iterations=steps,
        method="discrete-search",
        success=True,
        message=f"Found in {steps} steps",
    )


def _resolve(distribution_id, params: Params, count: Optional[int],
             catalog: Optional[DistributionCatalog]) -> tuple[DistributionDescriptor, tuple[float, ...]]:
    descriptor = (catalog or default_catalog()).get(distribution_id)
    if descriptor is None:
        raise ValueError(f"Unknown distribution type: {distribution_id}")
    if not descriptor.in_domain(params, count):
        raise ValueError(f"Invalid parameters for {descriptor.name} distribution: {params}")
    values = tuple(float(v) for v in params[:descriptor.parameter_count])
    return descriptor, values


def quantile(
    distribution_id,
    p: float,
    params: Params,
    count: Optional[int] = None,
    method: str = "auto",
    catalog: Optional[DistributionCatalog] = None,
) -> QuantileResult:
    """
    Solve for x with cdf(x) = p.

    This is the main entry point for quantile calculation. It:
    1. Validates p and the parameters
    2. Uses the closed form where one exists
    3. Tries Newton-Raphson (unless method="brent")
    4. Falls back to Brent over an expanded bracket (unless method="newton")

    Args:
        distribution_id: Catalog id
        p: Target probability, strictly between 0 and 1
        params: Parameter vector
        count: Number of meaningful entries; defaults to len(params)
        method: "auto" (default), "newton", or "brent"; ignored for closed
            forms and discrete families
        catalog: Catalog to resolve the id in; the default catalog if omitted

    Returns:
        QuantileResult

    Raises:
        ValueError: If p is not in (0, 1), the id is unknown, the parameters
            are outside the mathematical domain, or method is not recognized

    Examples:
        >>> result = quantile(DistributionId.NORMAL, 0.975, [0.0, 1.0])
        >>> round(result.value, 4)
        1.96
    """
    if not isinstance(p, (int, float)) or not 0.0 < p < 1.0:
        raise ValueError(f"Probability must be strictly between 0 and 1, got {p}")
    if method not in ("auto", "newton", "brent"):
        raise ValueError(f"Unknown quantile method: {method}")

    descriptor, values = _resolve(distribution_id, params, count, catalog)
    family = descriptor.id
    lower, upper = support_bounds(family, values)

    def cdf(x: float) -> float:
        return descriptor.cdf(x, values)

    def pdf(x: float) -> float:
        return descriptor.pdf(x, values)

    if descriptor.is_discrete:
        result = discrete_quantile(cdf, p, lower, upper)
        if not result.success:
            logger.warning("%s quantile search failed: %s", descriptor.name, result.message)
        return result

    exact = closed_form_quantile(family, values, p)
    if exact is not None:
        return QuantileResult(
            value=exact,
            probability=p,
            iterations=0,
            method="closed-form",
            success=math.isfinite(exact),
            message="Closed-form inverse" if math.isfinite(exact) else "Inverse overflowed",
        )

    guess = initial_guess(family, values, p)

    if method in ("auto", "newton"):
        nr_result = newton_raphson_quantile(cdf, pdf, p, guess, lower, upper)
        if nr_result.success or method == "newton":
            return nr_result
        logger.info("%s quantile: %s; falling back to Brent", descriptor.name, nr_result.message)

    bracket = expand_bracket(cdf, p, lower, upper, start=guess)
    if bracket is None:
        logger.warning("%s quantile: no bracket found for p=%g", descriptor.name, p)
        return QuantileResult(
            value=math.nan,
            probability=p,
            iterations=0,
            method="brent",
            success=False,
            message="Could not bracket the quantile",
        )
    return brent_quantile(cdf, p, *bracket)


def critical_value(
    distribution_id,
    alpha: float,
    params: Params,
    count: Optional[int] = None,
    tail: Tail = "upper",
    catalog: Optional[DistributionCatalog] = None,
) -> QuantileResult:
    """
    Critical value for significance level alpha.

    Args:
        distribution_id: Catalog id
        alpha: Significance level in (0, 1)
        params: Parameter vector
        count: Number of meaningful entries; defaults to len(params)
        tail: "upper" solves cdf(x) = 1 - alpha; "two-sided" solves
            cdf(x) = 1 - alpha/2
        catalog: Catalog to resolve the id in

    Raises:
        ValueError: If alpha is not in (0, 1) or tail is not recognized

    Examples:
        >>> result = critical_value(DistributionId.T, 0.05, [10.0], tail="two-sided")
        >>> round(result.value, 3)
        2.228
    """
    if not isinstance(alpha, (int, float)) or not 0.0 < alpha < 1.0:
        raise ValueError(f"Significance level must be strictly between 0 and 1, got {alpha}")

    if tail == "upper":
        target = 1.0 - alpha
    elif tail == "two-sided":
        target = 1.0 - alpha / 2.0
    else:
        raise ValueError(f"Unknown tail: {tail}")

    return quantile(distribution_id, target, params, count, catalog=catalog)


def quantiles(
    distribution_id,
    probabilities: Sequence[float],
    params: Params,
    count: Optional[int] = None,
    catalog: Optional[DistributionCatalog] = None,
) -> list[QuantileResult]:
    """
    Solve quantiles for several probabilities of one distribution.

    Example:
        >>> results = quantiles(DistributionId.CHI_SQUARE, [0.05, 0.5, 0.95], [4.0])
        >>> [round(r.value, 3) for r in results]
        [0.711, 3.357, 9.488]
    """
    return [quantile(distribution_id, p, params, count, catalog=catalog) for p in probabilities]
