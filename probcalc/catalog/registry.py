"""
Distribution catalog: the immutable table of descriptors keyed by id.

build_catalog() is the composition root; it assembles every descriptor once
and returns a read-only DistributionCatalog that callers may share freely
between threads. default_catalog() holds one process-wide instance built
behind a lock on first use.
"""

import logging
import threading
from types import MappingProxyType
from typing import Iterator, Optional

from probcalc.core import continuous, discrete
from probcalc.utils.types import (
    Category,
    DistributionDescriptor,
    DistributionFunctions,
    DistributionId,
    ParameterRange,
)

logger = logging.getLogger(__name__)


class DistributionCatalog:
    """
    Read-only lookup over a fixed set of distribution descriptors.

    Lookups never raise on unknown ids; they return None so callers can turn
    the miss into a structured outcome.
    """

    __slots__ = ("_entries", "_by_id")

    def __init__(self, entries: tuple[DistributionDescriptor, ...]):
        by_id = {}
        for entry in entries:
            if entry.id in by_id:
                raise ValueError(f"Duplicate distribution id: {int(entry.id)}")
            by_id[int(entry.id)] = entry
        self._entries = tuple(entries)
        self._by_id = MappingProxyType(by_id)

    def get(self, distribution_id) -> Optional[DistributionDescriptor]:
        """Descriptor for an id (int or DistributionId), or None if unknown."""
        if isinstance(distribution_id, bool) or not isinstance(distribution_id, int):
            return None
        return self._by_id.get(int(distribution_id))

    def get_by_index(self, index: int) -> Optional[DistributionDescriptor]:
        """Descriptor at a position in catalog order, or None if out of bounds."""
        if 0 <= index < len(self._entries):
            return self._entries[index]
        return None

    def by_category(self, category: Category) -> tuple[DistributionDescriptor, ...]:
        return tuple(entry for entry in self._entries if entry.category == category)

    def category_count(self, category: Category) -> int:
        return len(self.by_category(category))

    def is_valid_id(self, distribution_id) -> bool:
        return self.get(distribution_id) is not None

    @property
    def total_count(self) -> int:
        return len(self._entries)

    def find_by_name(self, name: str) -> Optional[DistributionDescriptor]:
        """Case-insensitive lookup by display name."""
        wanted = name.strip().casefold()
        for entry in self._entries:
            if entry.name.casefold() == wanted:
                return entry
        return None

    def __iter__(self) -> Iterator[DistributionDescriptor]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, distribution_id) -> bool:
        return self.is_valid_id(distribution_id)


def _ranges(*bounds: tuple[float, float]) -> tuple[ParameterRange, ...]:
    return tuple(ParameterRange(low, high) for low, high in bounds)


def _entry(
    distribution_id: DistributionId,
    name: str,
    description: str,
    category: Category,
    parameter_names: tuple[str, ...],
    practical_ranges: tuple[ParameterRange, ...],
    functions: DistributionFunctions,
) -> DistributionDescriptor:
    return DistributionDescriptor(
        id=distribution_id,
        name=name,
        description=description,
        category=category,
        parameter_names=parameter_names,
        practical_ranges=practical_ranges,
        functions=functions,
    )


def build_catalog() -> DistributionCatalog:
    """
    Assemble the full catalog.

    Returns:
        DistributionCatalog with all 16 families in id order
    """
    entries = (
        _entry(
            DistributionId.NORMAL, "Normal", "Normal (Gaussian) distribution", "continuous",
            ("mean", "std_dev"), _ranges((-1000.0, 1000.0), (0.001, 1000.0)),
            continuous.NORMAL,
        ),
        _entry(
            DistributionId.EXPONENTIAL, "Exponential", "Exponential distribution", "continuous",
            ("lambda",), _ranges((0.001, 1000.0)),
            continuous.EXPONENTIAL,
        ),
        _entry(
            DistributionId.CHI_SQUARE, "Chi-Square", "Chi-square distribution", "continuous",
            ("degrees_of_freedom",), _ranges((1.0, 1000.0)),
            continuous.CHI_SQUARE,
        ),
        _entry(
            DistributionId.T, "t-Distribution", "Student's t-distribution", "continuous",
            ("degrees_of_freedom",), _ranges((1.0, 1000.0)),
            continuous.T,
        ),
        _entry(
            DistributionId.F, "F-Distribution", "F-distribution", "continuous",
            ("df_numerator", "df_denominator"), _ranges((1.0, 1000.0), (1.0, 1000.0)),
            continuous.F,
        ),
        _entry(
            DistributionId.GEOMETRIC, "Geometric", "Geometric distribution", "discrete",
            ("probability",), _ranges((0.001, 0.999)),
            discrete.GEOMETRIC,
        ),
        _entry(
            DistributionId.HYPERGEOMETRIC, "Hypergeometric", "Hypergeometric distribution",
            "discrete",
            ("population_size", "success_states", "sample_size"),
            _ranges((1.0, 10000.0), (0.0, 10000.0), (1.0, 10000.0)),
            discrete.HYPERGEOMETRIC,
        ),
        _entry(
            DistributionId.BINOMIAL, "Binomial", "Binomial distribution", "discrete",
            ("trials", "probability"), _ranges((1.0, 10000.0), (0.001, 0.999)),
            discrete.BINOMIAL,
        ),
        _entry(
            DistributionId.NEGATIVE_BINOMIAL, "Negative Binomial",
            "Negative binomial distribution", "discrete",
            ("successes", "probability"), _ranges((1.0, 10000.0), (0.001, 0.999)),
            discrete.NEGATIVE_BINOMIAL,
        ),
        _entry(
            DistributionId.POISSON, "Poisson", "Poisson distribution", "discrete",
            ("lambda",), _ranges((0.001, 1000.0)),
            discrete.POISSON,
        ),
        _entry(
            DistributionId.GAMMA, "Gamma", "Gamma distribution (shape/scale)", "continuous",
            ("shape", "scale"), _ranges((0.001, 1000.0), (0.001, 1000.0)),
            continuous.GAMMA,
        ),
        _entry(
            DistributionId.BETA, "Beta", "Beta distribution on [0, 1]", "continuous",
            ("alpha", "beta"), _ranges((0.001, 1000.0), (0.001, 1000.0)),
            continuous.BETA,
        ),
        _entry(
            DistributionId.WEIBULL, "Weibull", "Weibull distribution", "continuous",
            ("shape", "scale"), _ranges((0.001, 1000.0), (0.001, 1000.0)),
            continuous.WEIBULL,
        ),
        _entry(
            DistributionId.RAYLEIGH, "Rayleigh", "Rayleigh distribution", "continuous",
            ("scale",), _ranges((0.001, 1000.0)),
            continuous.RAYLEIGH,
        ),
        _entry(
            DistributionId.PARETO, "Pareto", "Pareto (Type I) distribution", "continuous",
            ("scale", "shape"), _ranges((0.001, 1000.0), (0.001, 1000.0)),
            continuous.PARETO,
        ),
        _entry(
            DistributionId.UNIFORM, "Uniform", "Continuous uniform distribution", "continuous",
            ("lower", "upper"), _ranges((-1000.0, 1000.0), (-1000.0, 1000.0)),
            continuous.UNIFORM,
        ),
    )

    catalog = DistributionCatalog(entries)
    logger.debug(
        "Built distribution catalog: %d entries (%d continuous, %d discrete)",
        catalog.total_count,
        catalog.category_count("continuous"),
        catalog.category_count("discrete"),
    )
    return catalog


_default_catalog: Optional[DistributionCatalog] = None
_default_lock = threading.Lock()


def default_catalog() -> DistributionCatalog:
    """Process-wide catalog, built exactly once on first use."""
    global _default_catalog
    if _default_catalog is None:
        with _default_lock:
            if _default_catalog is None:
                _default_catalog = build_catalog()
    return _default_catalog
