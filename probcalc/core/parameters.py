"""
Argument handling shared by the distribution formulas.

Every pdf/cdf/validate function receives a parameter vector plus an explicit
count. These helpers turn that pair into a plain tuple of floats, or None when
the vector is absent or malformed, so the formulas can return NaN uniformly.
"""

import math
from numbers import Real
from typing import Optional

from probcalc.utils.types import Params

MAX_PARAMETERS = 4


def unpack(params: Params, count: Optional[int], arity: int) -> Optional[tuple[float, ...]]:
    """
    Extract the first `arity` parameters.

    Args:
        params: Parameter vector (may hold up to MAX_PARAMETERS values)
        count: Number of meaningful entries; defaults to len(params)
        arity: Parameter count the distribution requires

    Returns:
        Tuple of floats, or None if params is missing, count does not match
        arity, or an entry is not a real number
    """
    if params is None:
        return None
    try:
        available = len(params)
    except TypeError:
        return None

    if count is None:
        count = available
    if count != arity or available < count or count > MAX_PARAMETERS:
        return None

    values = tuple(params[:arity])
    if not all(isinstance(v, Real) for v in values):
        return None
    return tuple(float(v) for v in values)


def infinite_cdf(x: float) -> float:
    """CDF value at ±inf; NaN for NaN input."""
    if x == -math.inf:
        return 0.0
    if x == math.inf:
        return 1.0
    return math.nan
