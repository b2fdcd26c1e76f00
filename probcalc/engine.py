"""
Calculation engine: the public surface of the toolkit.

evaluate() computes pdf and cdf for one distribution at one input value and
reports failures as an EvaluationResult instead of raising. The metadata
accessors answer questions about catalog entries by id and return None for
unknown ids. Quantile solving is re-exported from probcalc.solvers.quantile.
"""

import logging
import math
from typing import Optional

from probcalc.catalog.registry import DistributionCatalog, default_catalog
from probcalc.solvers.quantile import critical_value, quantile, quantiles
from probcalc.utils.types import (
    Category,
    DistributionDescriptor,
    EvaluationResult,
    ParameterRange,
    Params,
    ValidationOutcome,
)
from probcalc.validators.parameter_validator import (
    MALFORMED_PARAMETERS_MESSAGE,
    validate_all,
    vector_length,
)

logger = logging.getLogger(__name__)

__all__ = [
    "evaluate",
    "validate_parameters",
    "distribution_name",
    "distribution_description",
    "distribution_category",
    "parameter_count",
    "parameter_names",
    "parameter_range",
    "list_distributions",
    "quantile",
    "quantiles",
    "critical_value",
]


def _catalog(catalog: Optional[DistributionCatalog]) -> DistributionCatalog:
    return catalog if catalog is not None else default_catalog()


def _failed(x: float, message: str) -> EvaluationResult:
    logger.debug("Evaluation failed at x=%s: %s", x, message)
    return EvaluationResult(success=False, error_message=message, input_value=x)


def evaluate(
    distribution_id,
    x: float,
    params: Params,
    count: Optional[int] = None,
    *,
    catalog: Optional[DistributionCatalog] = None,
    enforce_practical_ranges: bool = False,
) -> EvaluationResult:
    """
    Evaluate pdf and cdf of a distribution at x.

    Args:
        distribution_id: Catalog id (int or DistributionId)
        x: Input value
        params: Parameter vector
        count: Number of meaningful entries; defaults to len(params)
        catalog: Catalog to resolve the id in; the default catalog if omitted
        enforce_practical_ranges: Also reject parameters outside the catalog's
            practical ranges, using the validator's message

    Returns:
        EvaluationResult; success=False with NaN values when the id is
        unknown, the parameters are missing, miscounted or outside the
        mathematical domain, or either value is undefined (NaN). A +inf
        density at a boundary singularity is a valid result.

    Examples:
        >>> result = evaluate(0, 0.0, [0.0, 1.0])
        >>> round(result.pdf_value, 6), result.cdf_value
        (0.398942, 0.5)
    """
    descriptor = _catalog(catalog).get(distribution_id)
    if descriptor is None:
        return _failed(x, f"Unknown distribution type: {distribution_id}")
    if params is None:
        return _failed(x, "Parameters array cannot be null")
    available = vector_length(params)
    if available is None:
        return _failed(x, MALFORMED_PARAMETERS_MESSAGE)

    provided = available if count is None else count
    if provided != descriptor.parameter_count or available < provided:
        return _failed(
            x,
            f"{descriptor.name} distribution requires {descriptor.parameter_count} "
            f"parameters, but {provided} provided",
        )

    if enforce_practical_ranges:
        outcome = validate_all(descriptor.id, params, count, catalog=catalog)
        if not outcome.is_valid:
            return _failed(x, outcome.message)

    if not descriptor.in_domain(params, count):
        return _failed(x, f"Invalid parameters for {descriptor.name} distribution")

    pdf_value = descriptor.pdf(x, params, count)
    if math.isnan(pdf_value):
        return _failed(x, "PDF calculation failed")

    cdf_value = descriptor.cdf(x, params, count)
    if math.isnan(cdf_value):
        return _failed(x, "CDF calculation failed")

    return EvaluationResult(
        pdf_value=pdf_value,
        cdf_value=cdf_value,
        success=True,
        input_value=x,
    )


def validate_parameters(
    distribution_id,
    params: Params,
    count: Optional[int] = None,
    catalog: Optional[DistributionCatalog] = None,
) -> ValidationOutcome:
    """Run the full validator (count, practical ranges, constraints)."""
    return validate_all(distribution_id, params, count, catalog=catalog)


# ===========================
# Metadata accessors
# ===========================


def _descriptor(distribution_id, catalog: Optional[DistributionCatalog]) -> Optional[DistributionDescriptor]:
    return _catalog(catalog).get(distribution_id)


def distribution_name(distribution_id, catalog: Optional[DistributionCatalog] = None) -> Optional[str]:
    descriptor = _descriptor(distribution_id, catalog)
    return descriptor.name if descriptor else None


def distribution_description(distribution_id,
                             catalog: Optional[DistributionCatalog] = None) -> Optional[str]:
    descriptor = _descriptor(distribution_id, catalog)
    return descriptor.description if descriptor else None


def distribution_category(distribution_id,
                          catalog: Optional[DistributionCatalog] = None) -> Optional[Category]:
    descriptor = _descriptor(distribution_id, catalog)
    return descriptor.category if descriptor else None


def parameter_count(distribution_id, catalog: Optional[DistributionCatalog] = None) -> Optional[int]:
    descriptor = _descriptor(distribution_id, catalog)
    return descriptor.parameter_count if descriptor else None


def parameter_names(distribution_id,
                    catalog: Optional[DistributionCatalog] = None) -> Optional[tuple[str, ...]]:
    descriptor = _descriptor(distribution_id, catalog)
    return descriptor.parameter_names if descriptor else None


def parameter_range(distribution_id, index: int,
                    catalog: Optional[DistributionCatalog] = None) -> Optional[ParameterRange]:
    """Practical range of one parameter, or None for an unknown id or index."""
    descriptor = _descriptor(distribution_id, catalog)
    if descriptor is None or not 0 <= index < descriptor.parameter_count:
        return None
    return descriptor.practical_ranges[index]


def list_distributions(category: Optional[Category] = None,
                       catalog: Optional[DistributionCatalog] = None) -> list[DistributionDescriptor]:
    """All catalog entries in id order, optionally filtered by category."""
    entries = _catalog(catalog)
    if category is None:
        return list(entries)
    return list(entries.by_category(category))
