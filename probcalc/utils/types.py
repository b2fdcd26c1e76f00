"""
Data types and structures for distribution calculations.

This module defines the dataclasses and types used throughout the toolkit
for describing catalog entries, validation outcomes, evaluation results and
solver results.
"""

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Literal, Optional, Sequence

Category = Literal["continuous", "discrete"]

ValidationCode = Literal[
    "success",
    "unknown_distribution",
    "count_mismatch",
    "out_of_range",
    "invalid_format",
    "math_constraint_violation",
    "null_input",
]

QuantileMethod = Literal["newton-raphson", "brent", "discrete-search", "closed-form"]

Params = Optional[Sequence[float]]
DensityFunction = Callable[[float, Params, Optional[int]], float]
DomainCheck = Callable[[Params, Optional[int]], bool]


class DistributionId(IntEnum):
    """Stable numeric identifiers of the catalog entries."""

    NORMAL = 0
    EXPONENTIAL = 1
    CHI_SQUARE = 2
    T = 3
    F = 4
    GEOMETRIC = 5
    HYPERGEOMETRIC = 6
    BINOMIAL = 7
    NEGATIVE_BINOMIAL = 8
    POISSON = 9
    GAMMA = 10
    BETA = 11
    WEIBULL = 12
    RAYLEIGH = 13
    PARETO = 14
    UNIFORM = 15


@dataclass(frozen=True)
class ParameterRange:
    """
    Closed interval [minimum, maximum] of practical parameter values.

    Practical ranges are catalog policy (reasonable UI input bounds), not
    mathematical domain limits.
    """
    minimum: float
    maximum: float

    def __post_init__(self) -> None:
        if not self.minimum <= self.maximum:
            raise ValueError(
                f"Range minimum must not exceed maximum, got [{self.minimum}, {self.maximum}]"
            )

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum

    def clamp(self, value: float) -> float:
        return min(max(value, self.minimum), self.maximum)

    @property
    def midpoint(self) -> float:
        return (self.minimum + self.maximum) / 2.0


@dataclass(frozen=True)
class DistributionFunctions:
    """
    Capability set of one distribution family.

    Attributes:
        pdf: Density (continuous) or mass (discrete) function pdf(x, params, count)
        cdf: Cumulative distribution function cdf(x, params, count)
        validate: Mathematical domain check validate(params, count)
    """
    pdf: DensityFunction
    cdf: DensityFunction
    validate: DomainCheck


@dataclass(frozen=True)
class DistributionDescriptor:
    """
    Immutable catalog entry for one distribution.

    Attributes:
        id: Stable numeric identifier
        name: Display name
        description: One-line description
        category: "continuous" or "discrete"
        parameter_names: Ordered parameter names
        practical_ranges: Per-parameter practical [min, max] bounds
        functions: The pdf/cdf/validate triple
    """
    id: DistributionId
    name: str
    description: str
    category: Category
    parameter_names: tuple[str, ...]
    practical_ranges: tuple[ParameterRange, ...]
    functions: DistributionFunctions

    def __post_init__(self) -> None:
        if not 1 <= len(self.parameter_names) <= 3:
            raise ValueError(f"{self.name}: parameter count must be 1-3")
        if len(self.practical_ranges) != len(self.parameter_names):
            raise ValueError(f"{self.name}: one practical range is required per parameter")

    @property
    def parameter_count(self) -> int:
        return len(self.parameter_names)

    @property
    def is_discrete(self) -> bool:
        return self.category == "discrete"

    def in_domain(self, params: Params, count: Optional[int] = None) -> bool:
        """Check params against the mathematical domain (not the practical ranges)."""
        return self.functions.validate(params, count)

    def pdf(self, x: float, params: Params, count: Optional[int] = None) -> float:
        return self.functions.pdf(x, params, count)

    def cdf(self, x: float, params: Params, count: Optional[int] = None) -> float:
        return self.functions.cdf(x, params, count)


@dataclass(frozen=True)
class ValidationOutcome:
    """
    Result from parameter validation.

    Attributes:
        code: Outcome code ("success" when all checks pass)
        message: Human-readable description of the problem
        parameter_index: Index of the offending parameter, if any
        suggested_value: Suggested replacement value, if any
        has_suggestion: Whether suggested_value is meaningful
    """
    code: ValidationCode = "success"
    message: str = ""
    parameter_index: Optional[int] = None
    suggested_value: Optional[float] = None
    has_suggestion: bool = False

    @property
    def is_valid(self) -> bool:
        return self.code == "success"


@dataclass
class EvaluationResult:
    """
    Result from evaluating one distribution at one input value.

    Attributes:
        pdf_value: Density or mass at the input value
        cdf_value: Cumulative probability at the input value
        success: Whether both values were computed
        error_message: Reason for failure, empty on success
        input_value: The input value that was evaluated
    """
    pdf_value: float = math.nan
    cdf_value: float = math.nan
    success: bool = False
    error_message: str = ""
    input_value: float = math.nan


@dataclass
class QuantileResult:
    """
    Result from the quantile (inverse CDF) solver.

    Attributes:
        value: Solved quantile
        probability: Target cumulative probability
        iterations: Number of iterations required
        method: Method that produced the value
        success: Whether the solver converged successfully
        message: Additional information about convergence
    """
    value: float
    probability: float
    iterations: int
    method: QuantileMethod
    success: bool
    message: str = ""


@dataclass
class ConsistencyCheck:
    """
    Result from a distribution consistency diagnostic.

    Attributes:
        is_valid: Whether the distribution passed the check
        violations: List of specific violations detected
        details: Dictionary with detailed check results
    """
    is_valid: bool
    violations: list[str] = field(default_factory=list)
    details: dict[str, float] = field(default_factory=dict)
