"""
Brent's method for continuous quantiles.

Brent's method (hybrid bisection / inverse quadratic interpolation) is the
robust fallback when Newton-Raphson fails. It is guaranteed to converge once
cdf(x) - p changes sign over the bracket; expand_bracket() finds such a
bracket for supports that are unbounded on either side.
"""

import logging
import math
from typing import Callable, Optional

from scipy.optimize import brentq

from probcalc.utils.constants import (
    QUANTILE_BRACKET_EXPANSIONS,
    QUANTILE_BRENT_MAX_ITERATIONS,
    QUANTILE_STEP_TOLERANCE,
)
from probcalc.utils.types import QuantileResult

logger = logging.getLogger(__name__)


def expand_bracket(
    cdf: Callable[[float], float],
    p: float,
    lower: float,
    upper: float,
    start: float = 1.0,
    max_expansions: int = QUANTILE_BRACKET_EXPANSIONS,
) -> Optional[tuple[float, float]]:
    """
    Find finite [a, b] inside the support with cdf(a) <= p <= cdf(b).

    Finite support bounds are used as they are. An infinite bound is replaced
    by a point that is pushed outward, doubling its distance from `start`,
    until it brackets p.

    Args:
        cdf: Cumulative distribution function of one argument
        p: Target probability
        lower, upper: Support bounds (may be infinite)
        start: Reference point inside the support
        max_expansions: Maximum number of doublings per side

    Returns:
        (a, b), or None if no bracket was found
    """
    width = max(1.0, abs(start))

    a = lower
    if math.isinf(lower):
        a = start - width
        for _ in range(max_expansions):
            if cdf(a) <= p:
                break
            width *= 2.0
            a = start - width
        else:
            return None

    width = max(1.0, abs(start))
    b = upper
    if math.isinf(upper):
        b = start + width
        for _ in range(max_expansions):
            if cdf(b) >= p:
                break
            width *= 2.0
            b = start + width
        else:
            return None

    return a, b


def brent_quantile(
    cdf: Callable[[float], float],
    p: float,
    lower: float,
    upper: float,
    tolerance: float = QUANTILE_STEP_TOLERANCE,
    max_iterations: int = QUANTILE_BRENT_MAX_ITERATIONS,
) -> QuantileResult:
    """
    Solve cdf(x) = p using Brent's method over [lower, upper].

    Args:
        cdf: Cumulative distribution function of one argument
        p: Target probability
        lower: Finite lower end of the bracket
        upper: Finite upper end of the bracket
        tolerance: Absolute tolerance on x
        max_iterations: Maximum number of Brent iterations

    Returns:
        QuantileResult with value, iterations, method, success flag
    """

    def objective(x: float) -> float:
        """cdf(x) - p; the quantile is the root."""
        return cdf(x) - p

    try:
        value, info = brentq(
            objective,
            lower,
            upper,
            xtol=tolerance,
            rtol=1e-12,
            maxiter=max_iterations,
            full_output=True,
        )
    except (ValueError, RuntimeError) as e:
        logger.warning("Brent quantile search failed on [%g, %g]: %s", lower, upper, e)
        return QuantileResult(
            value=math.nan,
            probability=p,
            iterations=0,
            method="brent",
            success=False,
            message=(
                f"Brent method failed: objective does not bracket a root. "
                f"obj({lower:.6g}) = {objective(lower):.4g}, "
                f"obj({upper:.6g}) = {objective(upper):.4g}"
            ),
        )

    probability_error = abs(objective(value))
    return QuantileResult(
        value=value,
        probability=p,
        iterations=info.iterations,
        method="brent",
        success=bool(info.converged),
        message=f"Converged with probability error {probability_error:.2e}",
    )
