"""
Newton-Raphson method for continuous quantiles.

Solves cdf(x) = p for x using the density as the derivative. Convergence is
quadratic near the root, but the iteration can leave the support or stall
where the density vanishes; in both cases the result is returned with
success=False so the caller can fall back to Brent's method.
"""

import math
from typing import Callable

from probcalc.utils.constants import (
    QUANTILE_MAX_ITERATIONS,
    QUANTILE_MIN_DENSITY,
    QUANTILE_PROB_TOLERANCE,
    QUANTILE_STEP_TOLERANCE,
)
from probcalc.utils.types import QuantileResult


def newton_raphson_quantile(
    cdf: Callable[[float], float],
    pdf: Callable[[float], float],
    p: float,
    initial_guess: float,
    lower: float = -math.inf,
    upper: float = math.inf,
    max_iterations: int = QUANTILE_MAX_ITERATIONS,
    prob_tolerance: float = QUANTILE_PROB_TOLERANCE,
    step_tolerance: float = QUANTILE_STEP_TOLERANCE,
) -> QuantileResult:
    """
    Solve cdf(x) = p using the Newton-Raphson method.

    The update is:
        x_{n+1} = x_n - (F(x_n) - p) / f(x_n)

    Args:
        cdf: Cumulative distribution function of one argument
        pdf: Density of one argument
        p: Target probability in (0, 1)
        initial_guess: Starting point, strictly inside the support
        lower, upper: Support bounds; an iterate outside (lower, upper) fails
        max_iterations: Maximum number of iterations
        prob_tolerance: Convergence tolerance on |F(x) - p|
        step_tolerance: Convergence tolerance on the step, relative to max(1, |x|)

    Returns:
        QuantileResult with value, iterations, method, success flag

    Notes:
        - Returns success=False if the density drops below QUANTILE_MIN_DENSITY
        - Returns success=False if an iterate leaves the support
        - Returns success=False if max_iterations is reached
    """
    x = initial_guess
    iterations = 0

    for _ in range(max_iterations):
        iterations += 1

        residual = cdf(x) - p
        if math.isnan(residual):
            return QuantileResult(
                value=x,
                probability=p,
                iterations=iterations,
                method="newton-raphson",
                success=False,
                message=f"CDF undefined at x={x:.6g}, need fallback",
            )

        if abs(residual) < prob_tolerance:
            return QuantileResult(
                value=x,
                probability=p,
                iterations=iterations,
                method="newton-raphson",
                success=True,
                message=f"Converged in {iterations} iterations (probability tol)",
            )

        density = pdf(x)
        if not math.isfinite(density) or density < QUANTILE_MIN_DENSITY:
            return QuantileResult(
                value=x,
                probability=p,
                iterations=iterations,
                method="newton-raphson",
                success=False,
                message=f"Density unusable ({density:.2e}) at iteration {iterations}, need fallback",
            )

        step = residual / density
        x_new = x - step

        if not lower < x_new < upper:
            return QuantileResult(
                value=x,
                probability=p,
                iterations=iterations,
                method="newton-raphson",
                success=False,
                message=f"Stepped out of support (x={x_new:.6g}) at iteration {iterations}",
            )

        if abs(step) < step_tolerance * max(1.0, abs(x_new)):
            return QuantileResult(
                value=x_new,
                probability=p,
                iterations=iterations,
                method="newton-raphson",
                success=True,
                message=f"Converged in {iterations} iterations (step tol)",
            )

        x = x_new

    return QuantileResult(
        value=x,
        probability=p,
        iterations=iterations,
        method="newton-raphson",
        success=False,
        message=f"Max iterations ({max_iterations}) reached without convergence",
    )
