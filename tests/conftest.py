"""
Pytest configuration and shared fixtures.
"""

import pytest

from probcalc.catalog.registry import build_catalog
from probcalc.utils.types import DistributionId


@pytest.fixture(scope="session")
def catalog():
    """A freshly built catalog, independent of the process-wide default."""
    return build_catalog()


@pytest.fixture
def valid_parameters():
    """One parameter vector per family, inside both domain and practical range."""
    return {
        DistributionId.NORMAL: [1.5, 2.0],
        DistributionId.EXPONENTIAL: [0.5],
        DistributionId.CHI_SQUARE: [5.0],
        DistributionId.T: [7.0],
        DistributionId.F: [5.0, 12.0],
        DistributionId.GEOMETRIC: [0.25],
        DistributionId.HYPERGEOMETRIC: [40.0, 15.0, 10.0],
        DistributionId.BINOMIAL: [20.0, 0.3],
        DistributionId.NEGATIVE_BINOMIAL: [4.0, 0.4],
        DistributionId.POISSON: [6.5],
        DistributionId.GAMMA: [2.5, 1.5],
        DistributionId.BETA: [2.0, 3.5],
        DistributionId.WEIBULL: [1.8, 2.0],
        DistributionId.RAYLEIGH: [1.3],
        DistributionId.PARETO: [1.0, 3.0],
        DistributionId.UNIFORM: [-2.0, 3.0],
    }


@pytest.fixture
def invalid_parameters():
    """One parameter vector per family outside the mathematical domain."""
    return {
        DistributionId.NORMAL: [0.0, -1.0],
        DistributionId.EXPONENTIAL: [0.0],
        DistributionId.CHI_SQUARE: [-2.0],
        DistributionId.T: [0.0],
        DistributionId.F: [5.0, -1.0],
        DistributionId.GEOMETRIC: [0.0],
        DistributionId.HYPERGEOMETRIC: [5.0, 10.0, 2.0],
        DistributionId.BINOMIAL: [10.5, 0.5],
        DistributionId.NEGATIVE_BINOMIAL: [0.0, 0.5],
        DistributionId.POISSON: [-3.0],
        DistributionId.GAMMA: [2.0, 0.0],
        DistributionId.BETA: [-1.0, 2.0],
        DistributionId.WEIBULL: [0.0, 1.0],
        DistributionId.RAYLEIGH: [-1.0],
        DistributionId.PARETO: [1.0, 0.0],
        DistributionId.UNIFORM: [3.0, 1.0],
    }
