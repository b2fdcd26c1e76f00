"""
Parameter validation against catalog metadata.

The validator is stateless: every rule is derived from the descriptor that
the catalog returns for a distribution id. Each check returns a
ValidationOutcome; none of them raise.

Validation order in validate_all():
    1. null input
    2. parameter count against the descriptor's arity
    3. each parameter against its practical range (first failure wins)
    4. family-specific mathematical constraints
"""

import logging
import math
from numbers import Integral
from typing import Optional, Sequence

from probcalc.catalog.registry import DistributionCatalog, default_catalog
from probcalc.core.special_functions import is_finite_number
from probcalc.utils.types import (
    DistributionDescriptor,
    DistributionId,
    Params,
    ValidationCode,
    ValidationOutcome,
)

logger = logging.getLogger(__name__)

SUCCESS = ValidationOutcome()
MALFORMED_PARAMETERS_MESSAGE = "Parameters must be a sequence of numbers"

_CODE_DESCRIPTIONS: dict[str, str] = {
    "success": "Validation successful",
    "count_mismatch": "Invalid parameter count",
    "out_of_range": "Parameter out of valid range",
    "invalid_format": "Invalid number format",
    "math_constraint_violation": "Mathematical constraint violation",
    "null_input": "Null pointer error",
    "unknown_distribution": "Unknown distribution type",
}


def describe_validation_code(code: ValidationCode) -> str:
    """Short human-readable description of an outcome code."""
    return _CODE_DESCRIPTIONS.get(code, "Unknown validation error")


def format_error_message(raw_text: Optional[str] = None) -> str:
    """Message for text that could not be parsed as a number."""
    if raw_text is None:
        return "Invalid number format. Please enter a valid number."
    return f"Invalid number format: '{raw_text}'. Please enter a valid number."


def round_half_away(value: float) -> float:
    """Round to the nearest integer, halves away from zero."""
    return math.copysign(math.floor(abs(value) + 0.5), value)


def _resolve(distribution_id, catalog: Optional[DistributionCatalog]) -> Optional[DistributionDescriptor]:
    return (catalog or default_catalog()).get(distribution_id)


def _unknown(distribution_id) -> ValidationOutcome:
    return ValidationOutcome(
        code="unknown_distribution",
        message=f"Unknown distribution type: {_id_text(distribution_id)}",
    )


def _id_text(distribution_id) -> str:
    if isinstance(distribution_id, DistributionId):
        return str(int(distribution_id))
    return str(distribution_id)


def _index_in_arity(descriptor: DistributionDescriptor, index) -> bool:
    if isinstance(index, bool) or not isinstance(index, Integral):
        return False
    return 0 <= index < descriptor.parameter_count


def _index_failure(descriptor: DistributionDescriptor, index) -> ValidationOutcome:
    return _failure(
        "count_mismatch",
        f"Parameter index {index} is invalid for distribution with "
        f"{descriptor.parameter_count} parameters",
    )


def vector_length(params) -> Optional[int]:
    """len(params), or None when params is not a sized sequence."""
    try:
        return len(params)
    except TypeError:
        return None


def _failure(code: ValidationCode, message: str, index: Optional[int] = None,
             suggestion: Optional[float] = None) -> ValidationOutcome:
    logger.debug("Validation failed (%s): %s", code, message)
    return ValidationOutcome(
        code=code,
        message=message,
        parameter_index=index,
        suggested_value=suggestion,
        has_suggestion=suggestion is not None,
    )


# ===========================
# Range helpers
# ===========================


def is_parameter_in_range(distribution_id, index: int, value: float,
                          catalog: Optional[DistributionCatalog] = None) -> bool:
    descriptor = _resolve(distribution_id, catalog)
    if descriptor is None or not _index_in_arity(descriptor, index):
        return False
    return descriptor.practical_ranges[index].contains(value)


def suggest_parameter_value(distribution_id, index: int, value: float,
                            catalog: Optional[DistributionCatalog] = None) -> float:
    """
    Suggested replacement for an out-of-range value.

    Returns the violated bound, or the midpoint of the range when the value
    is already inside it. Unknown ids and indices return the value unchanged.
    """
    descriptor = _resolve(distribution_id, catalog)
    if descriptor is None or not _index_in_arity(descriptor, index):
        return value

    practical = descriptor.practical_ranges[index]
    if value < practical.minimum:
        return practical.minimum
    if value > practical.maximum:
        return practical.maximum
    return practical.midpoint


def has_parameter_suggestion(distribution_id, index: int,
                             catalog: Optional[DistributionCatalog] = None) -> bool:
    descriptor = _resolve(distribution_id, catalog)
    return descriptor is not None and _index_in_arity(descriptor, index)


# ===========================
# Individual checks
# ===========================


def validate_count(distribution_id, provided_count: int,
                   catalog: Optional[DistributionCatalog] = None) -> ValidationOutcome:
    """Check the number of supplied parameters against the descriptor's arity."""
    descriptor = _resolve(distribution_id, catalog)
    if descriptor is None:
        return _unknown(distribution_id)

    expected = descriptor.parameter_count
    if provided_count != expected:
        return _failure(
            "count_mismatch",
            f"{descriptor.name} distribution requires {expected} parameters, "
            f"but {provided_count} provided",
        )
    return SUCCESS


def validate_range(distribution_id, index: int, value,
                   catalog: Optional[DistributionCatalog] = None) -> ValidationOutcome:
    """
    Check one parameter against its practical range.

    Non-finite or non-numeric values yield "invalid_format"; finite values
    outside the range yield "out_of_range" with the violated bound as the
    suggested value.
    """
    descriptor = _resolve(distribution_id, catalog)
    if descriptor is None:
        return _unknown(distribution_id)

    if not _index_in_arity(descriptor, index):
        return _index_failure(descriptor, index)
    if not is_finite_number(value):
        return _failure("invalid_format", "Parameter value must be a finite number", index)

    practical = descriptor.practical_ranges[index]
    if practical.contains(value):
        return SUCCESS

    message = "%s parameter '%s' (%.3f) must be between %.3f and %.3f" % (
        descriptor.name,
        descriptor.parameter_names[index],
        value,
        practical.minimum,
        practical.maximum,
    )
    return _failure(
        "out_of_range",
        message,
        index,
        suggest_parameter_value(distribution_id, index, value, catalog),
    )


def _constraint(descriptor: DistributionDescriptor, description: str, index: int,
                suggestion: float) -> ValidationOutcome:
    return _failure("math_constraint_violation", f"{descriptor.name}: {description}", index, suggestion)


def validate_math_constraints(distribution_id, params: Sequence[float],
                              catalog: Optional[DistributionCatalog] = None) -> ValidationOutcome:
    """
    Family-specific cross-parameter rules.

    Rules:
        Hypergeometric: K <= N, then n <= N (suggest N); all three integral
        F: both degrees of freedom >= 1 (suggest 1)
        Binomial: trials a non-negative integer
        Negative Binomial: successes a positive integer
        Uniform: lower < upper (suggest lower + 1)
    """
    descriptor = _resolve(distribution_id, catalog)
    if descriptor is None:
        return _unknown(distribution_id)

    if params is None or vector_length(params) is None:
        return _failure("null_input", MALFORMED_PARAMETERS_MESSAGE)
    values = [float(v) for v in params[:descriptor.parameter_count]]
    family = descriptor.id

    if family == DistributionId.HYPERGEOMETRIC and len(values) >= 3:
        population, successes, sample = values
        if successes > population:
            return _constraint(descriptor, "Success states cannot exceed population size", 1, population)
        if sample > population:
            return _constraint(descriptor, "Sample size cannot exceed population size", 2, population)
        for index, value in enumerate(values):
            if math.floor(value) != value:
                return _constraint(
                    descriptor,
                    f"Parameter '{descriptor.parameter_names[index]}' must be an integer",
                    index,
                    round_half_away(value),
                )

    elif family == DistributionId.F and len(values) >= 2:
        df1, df2 = values
        if df1 < 1.0 or df2 < 1.0:
            return _constraint(
                descriptor, "Degrees of freedom must be at least 1", 0 if df1 < 1.0 else 1, 1.0
            )

    elif family == DistributionId.BINOMIAL and values:
        n = values[0]
        if n < 0.0 or math.floor(n) != n:
            return _constraint(
                descriptor, "Number of trials must be a non-negative integer", 0,
                round_half_away(max(1.0, n)),
            )

    elif family == DistributionId.NEGATIVE_BINOMIAL and values:
        r = values[0]
        if r < 1.0 or math.floor(r) != r:
            return _constraint(
                descriptor, "Number of successes must be a positive integer", 0,
                round_half_away(max(1.0, r)),
            )

    elif family == DistributionId.UNIFORM and len(values) >= 2:
        lower, upper = values
        if not lower < upper:
            return _constraint(descriptor, "Lower bound must be less than upper bound", 1, lower + 1.0)

    return SUCCESS


def validate_single_parameter(distribution_id, index: int, value,
                              catalog: Optional[DistributionCatalog] = None) -> ValidationOutcome:
    """Range-check one parameter, guarding the id and index first."""
    descriptor = _resolve(distribution_id, catalog)
    if descriptor is None:
        return _unknown(distribution_id)

    if not _index_in_arity(descriptor, index):
        return _index_failure(descriptor, index)
    return validate_range(distribution_id, index, value, catalog)


def validate_all(distribution_id, params: Params, count: Optional[int] = None,
                 catalog: Optional[DistributionCatalog] = None) -> ValidationOutcome:
    """
    Full validation: null input, count, per-parameter ranges, constraints.

    Args:
        distribution_id: Catalog id
        params: Parameter vector
        count: Number of meaningful entries; defaults to len(params)
        catalog: Catalog to validate against; the default catalog if omitted

    Returns:
        The first failing ValidationOutcome, or a success outcome

    Examples:
        >>> validate_all(DistributionId.HYPERGEOMETRIC, [5, 10, 2]).parameter_index
        1
    """
    if params is None:
        return _failure("null_input", "Parameters array cannot be null")
    available = vector_length(params)
    if available is None:
        return _failure("null_input", MALFORMED_PARAMETERS_MESSAGE)

    provided = available if count is None else count
    outcome = validate_count(distribution_id, provided, catalog)
    if not outcome.is_valid:
        return outcome
    if available < provided:
        descriptor = _resolve(distribution_id, catalog)
        return _failure(
            "count_mismatch",
            f"{descriptor.name} distribution requires {descriptor.parameter_count} parameters, "
            f"but {available} provided",
        )

    for index in range(provided):
        outcome = validate_range(distribution_id, index, params[index], catalog)
        if not outcome.is_valid:
            return outcome

    return validate_math_constraints(distribution_id, params, catalog)
