"""
Consistency diagnostics for distribution implementations.

This module checks the properties every catalog family must satisfy:
- CDF limits at -inf and +inf
- CDF monotonicity
- Normalization of the density (quadrature) or mass function (summation)
- NaN results for parameters outside the mathematical domain
"""

import math
from typing import Optional, Sequence

import numpy as np
from scipy.integrate import quad

from probcalc.catalog.registry import DistributionCatalog, default_catalog
from probcalc.solvers.quantile import quantile, support_bounds
from probcalc.utils.constants import (
    CDF_LIMIT_TOLERANCE,
    MAX_SUMMATION_TERMS,
    MONOTONICITY_TOLERANCE,
    NORMALIZATION_TOLERANCE,
)
from probcalc.utils.types import ConsistencyCheck, DistributionDescriptor, Params

# Probability mass left outside the default evaluation window
_TAIL_PROBABILITY = 1e-4
_DEFAULT_GRID_POINTS = 201
_MAX_DISCRETE_GRID_POINTS = 2001


def _resolve(distribution_id, params: Params,
             catalog: Optional[DistributionCatalog]) -> tuple[DistributionDescriptor, tuple[float, ...]]:
    descriptor = (catalog or default_catalog()).get(distribution_id)
    if descriptor is None:
        raise ValueError(f"Unknown distribution type: {distribution_id}")
    if not descriptor.in_domain(params):
        raise ValueError(f"Invalid parameters for {descriptor.name} distribution: {params}")
    return descriptor, tuple(float(v) for v in params)


def _bulk_window(descriptor: DistributionDescriptor, values: tuple[float, ...],
                 catalog: Optional[DistributionCatalog]) -> tuple[float, float]:
    """Interval holding all but _TAIL_PROBABILITY of the mass on each side."""
    low = quantile(descriptor.id, _TAIL_PROBABILITY, values, catalog=catalog).value
    high = quantile(descriptor.id, 1.0 - _TAIL_PROBABILITY, values, catalog=catalog).value
    support_low, support_high = support_bounds(descriptor.id, values)
    if not math.isfinite(low):
        low = support_low
    if not math.isfinite(high):
        high = support_high
    return low, high


def default_grid(distribution_id, params: Params,
                 catalog: Optional[DistributionCatalog] = None) -> np.ndarray:
    """
    Evaluation grid covering the bulk of a distribution plus some margin.

    Continuous families get evenly spaced points; discrete families get the
    integers of the window (thinned when the window is very wide).
    """
    descriptor, values = _resolve(distribution_id, params, catalog)
    low, high = _bulk_window(descriptor, values, catalog)

    if descriptor.is_discrete:
        start, stop = math.floor(low) - 1, math.ceil(high) + 1
        if stop - start + 1 <= _MAX_DISCRETE_GRID_POINTS:
            return np.arange(start, stop + 1, dtype=float)
        return np.unique(np.round(np.linspace(start, stop, _MAX_DISCRETE_GRID_POINTS)))

    margin = 0.1 * (high - low) if high > low else 1.0
    return np.linspace(low - margin, high + margin, _DEFAULT_GRID_POINTS)


def check_cdf_limits(
    distribution_id,
    params: Params,
    tolerance: float = CDF_LIMIT_TOLERANCE,
    catalog: Optional[DistributionCatalog] = None,
) -> ConsistencyCheck:
    """
    Validate the CDF limits.

    Checks:
    1. cdf(-inf) = 0
    2. cdf(+inf) = 1

    Args:
        distribution_id: Catalog id
        params: Valid parameter vector
        tolerance: Allowed absolute deviation
        catalog: Catalog to resolve the id in

    Returns:
        ConsistencyCheck with validation results
    """
    descriptor, values = _resolve(distribution_id, params, catalog)
    violations = []

    lower_limit = descriptor.cdf(-math.inf, values)
    upper_limit = descriptor.cdf(math.inf, values)
    details = {"lower_limit": lower_limit, "upper_limit": upper_limit}

    if not abs(lower_limit) <= tolerance:
        violations.append(f"cdf(-inf) = {lower_limit} differs from 0")
    if not abs(upper_limit - 1.0) <= tolerance:
        violations.append(f"cdf(+inf) = {upper_limit} differs from 1")

    return ConsistencyCheck(is_valid=len(violations) == 0, violations=violations, details=details)


def check_cdf_monotonicity(
    distribution_id,
    params: Params,
    grid: Optional[Sequence[float]] = None,
    tolerance: float = MONOTONICITY_TOLERANCE,
    catalog: Optional[DistributionCatalog] = None,
) -> ConsistencyCheck:
    """
    Validate that the CDF is non-decreasing and within [0, 1] over a grid.

    Args:
        distribution_id: Catalog id
        params: Valid parameter vector
        grid: Points to evaluate; default_grid() if omitted
        tolerance: Allowed decrease between consecutive points
        catalog: Catalog to resolve the id in

    Returns:
        ConsistencyCheck with validation results
    """
    descriptor, values = _resolve(distribution_id, params, catalog)
    if grid is None:
        grid = default_grid(distribution_id, values, catalog)

    points = sorted(float(x) for x in grid)
    cdf_values = [descriptor.cdf(x, values) for x in points]

    violations = []
    max_decrease = 0.0
    for i, value in enumerate(cdf_values):
        if not 0.0 <= value <= 1.0:
            violations.append(f"cdf({points[i]:.6g}) = {value} outside [0, 1]")
            continue
        if i > 0 and 0.0 <= cdf_values[i - 1] <= 1.0:
            decrease = cdf_values[i - 1] - value
            max_decrease = max(max_decrease, decrease)
            if decrease > tolerance:
                violations.append(
                    f"CDF decreases from {cdf_values[i - 1]:.12f} at x={points[i - 1]:.6g} "
                    f"to {value:.12f} at x={points[i]:.6g}"
                )

    details = {"points_checked": float(len(points)), "max_decrease": max_decrease}
    return ConsistencyCheck(is_valid=len(violations) == 0, violations=violations, details=details)


def _continuous_total(descriptor: DistributionDescriptor, values: tuple[float, ...],
                      catalog: Optional[DistributionCatalog]) -> float:
    lower, upper = support_bounds(descriptor.id, values)
    low, high = _bulk_window(descriptor, values, catalog)
    low, high = max(low, lower), min(high, upper)

    def density(x: float) -> float:
        return descriptor.pdf(x, values)

    # Integrate the tails separately so a narrow bulk is never skipped
    total = quad(density, low, high, limit=200)[0]
    if low > lower:
        total += quad(density, lower, low, limit=200)[0]
    if high < upper:
        total += quad(density, high, upper, limit=200)[0]
    return total


def _discrete_total(descriptor: DistributionDescriptor, values: tuple[float, ...],
                    catalog: Optional[DistributionCatalog]) -> float:
    lower, upper = support_bounds(descriptor.id, values)
    _, high = _bulk_window(descriptor, values, catalog)

    total = 0.0
    k = int(lower)
    last = int(min(upper, lower + MAX_SUMMATION_TERMS))
    while k <= last:
        mass = descriptor.pdf(float(k), values)
        total += mass
        if k > high and mass < 1e-15:
            break
        k += 1
    return total


def check_normalization(
    distribution_id,
    params: Params,
    tolerance: float = NORMALIZATION_TOLERANCE,
    catalog: Optional[DistributionCatalog] = None,
) -> ConsistencyCheck:
    """
    Validate that the density integrates (or the mass function sums) to 1.

    Continuous families are integrated with adaptive quadrature
    (scipy.integrate.quad), split at the bulk window so narrow peaks are not
    missed. Discrete families are summed over their support, stopping past
    the bulk once terms are negligible.

    Args:
        distribution_id: Catalog id
        params: Valid parameter vector
        tolerance: Allowed absolute deviation of the total from 1
        catalog: Catalog to resolve the id in

    Returns:
        ConsistencyCheck with details["total"] and details["error"]
    """
    descriptor, values = _resolve(distribution_id, params, catalog)

    if descriptor.is_discrete:
        total = _discrete_total(descriptor, values, catalog)
    else:
        total = _continuous_total(descriptor, values, catalog)

    error = abs(total - 1.0)
    violations = []
    if not error <= tolerance:
        violations.append(
            f"{descriptor.name} total probability {total:.6f} differs from 1 by {error:.2e}"
        )

    details = {"total": total, "error": error}
    return ConsistencyCheck(is_valid=len(violations) == 0, violations=violations, details=details)


def check_invalid_parameters_yield_nan(
    distribution_id,
    params: Params,
    xs: Sequence[float] = (-1.0, 0.0, 0.5, 1.0, 2.0, 10.0),
    count: Optional[int] = None,
    catalog: Optional[DistributionCatalog] = None,
) -> ConsistencyCheck:
    """
    Validate that parameters outside the domain produce NaN everywhere.

    Args:
        distribution_id: Catalog id
        params: Parameter vector expected to fail the domain check
        xs: Points at which pdf and cdf are evaluated
        count: Explicit parameter count passed through to the formulas
        catalog: Catalog to resolve the id in

    Returns:
        ConsistencyCheck; a violation is reported for the parameters being
        valid or for every non-NaN value
    """
    descriptor = (catalog or default_catalog()).get(distribution_id)
    if descriptor is None:
        raise ValueError(f"Unknown distribution type: {distribution_id}")

    violations = []
    if descriptor.in_domain(params, count):
        violations.append(f"Parameters {params} are inside the {descriptor.name} domain")

    finite_results = 0
    for x in xs:
        pdf_value = descriptor.pdf(x, params, count)
        cdf_value = descriptor.cdf(x, params, count)
        if not math.isnan(pdf_value):
            finite_results += 1
            violations.append(f"pdf({x}) = {pdf_value} instead of NaN")
        if not math.isnan(cdf_value):
            finite_results += 1
            violations.append(f"cdf({x}) = {cdf_value} instead of NaN")

    details = {"points_checked": float(len(xs)), "non_nan_results": float(finite_results)}
    return ConsistencyCheck(is_valid=len(violations) == 0, violations=violations, details=details)


def run_all_checks(distribution_id, params: Params,
                   catalog: Optional[DistributionCatalog] = None) -> dict[str, ConsistencyCheck]:
    """Run limits, monotonicity and normalization checks for valid parameters."""
    return {
        "cdf_limits": check_cdf_limits(distribution_id, params, catalog=catalog),
        "cdf_monotonicity": check_cdf_monotonicity(distribution_id, params, catalog=catalog),
        "normalization": check_normalization(distribution_id, params, catalog=catalog),
    }
