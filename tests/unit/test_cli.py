"""
Unit tests for the command-line interface.
"""

import click
import pytest
from click.testing import CliRunner

from interfaces.cli import cli, parse_parameters, resolve_distribution
from probcalc.utils.types import DistributionId


@pytest.fixture
def runner():
    return CliRunner()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("7", DistributionId.BINOMIAL),
        ("binomial", DistributionId.BINOMIAL),
        ("Chi-Square", DistributionId.CHI_SQUARE),
        ("negative-binomial", DistributionId.NEGATIVE_BINOMIAL),
        ("T", DistributionId.T),
    ],
)
def test_resolve_distribution(text, expected):
    """Distributions resolve by numeric id, display name or enum name."""
    assert resolve_distribution(text).id == expected


def test_resolve_unknown_distribution():
    """Unknown names are a click usage error."""
    with pytest.raises(click.BadParameter):
        resolve_distribution("Cauchy")


def test_parse_parameters_rejects_text():
    """Unparseable values carry the "Invalid number format" message."""
    assert parse_parameters(("1", "2.5")) == [1.0, 2.5]
    with pytest.raises(click.BadParameter, match="Invalid number format: 'abc'"):
        parse_parameters(("abc",))


def test_list(runner):
    """list prints one line per family and filters by category."""
    result = runner.invoke(cli, ["list"])
    assert result.exit_code == 0
    assert len(result.output.strip().splitlines()) == 16

    discrete = runner.invoke(cli, ["list", "--category", "discrete"])
    assert len(discrete.output.strip().splitlines()) == 5
    assert "Poisson" in discrete.output


def test_info(runner):
    """info shows identity, category and parameter names."""
    result = runner.invoke(cli, ["info", "normal"])
    assert result.exit_code == 0
    assert "Normal (id 0, continuous)" in result.output
    assert "std_dev" in result.output


def test_evaluate(runner):
    """Standard normal at 0: PDF = 1/√(2π), CDF = 0.5."""
    result = runner.invoke(cli, ["evaluate", "normal", "0", "-p", "0", "-p", "1"])
    assert result.exit_code == 0
    assert "0.39894228" in result.output
    assert "0.5" in result.output


def test_evaluate_invalid_parameters(runner):
    """Parameters outside the domain exit with status 1."""
    result = runner.invoke(cli, ["evaluate", "exponential", "1", "-p", "0"])
    assert result.exit_code == 1
    assert "Invalid parameters for Exponential distribution" in result.output


def test_evaluate_strict_ranges(runner):
    """--strict also enforces the practical ranges."""
    lenient = runner.invoke(cli, ["evaluate", "poisson", "3", "-p", "5000"])
    assert lenient.exit_code == 0

    strict = runner.invoke(cli, ["evaluate", "poisson", "3", "-p", "5000", "--strict"])
    assert strict.exit_code == 1
    assert "must be between" in strict.output


def test_evaluate_bad_number(runner):
    """A non-numeric parameter is a usage error (status 2)."""
    result = runner.invoke(cli, ["evaluate", "normal", "0", "-p", "abc", "-p", "1"])
    assert result.exit_code == 2
    assert "Invalid number format" in result.output


def test_validate_suggests_value(runner):
    """Hypergeometric K > N reports the constraint and suggests K = N."""
    result = runner.invoke(cli, ["validate", "hypergeometric", "-p", "5", "-p", "10", "-p", "2"])
    assert result.exit_code == 1
    assert "Mathematical constraint violation" in result.output
    assert "Suggestion: set success_states to 5" in result.output


def test_validate_success(runner):
    """Valid parameters exit cleanly."""
    result = runner.invoke(cli, ["validate", "binomial", "-p", "10", "-p", "0.5"])
    assert result.exit_code == 0
    assert "Binomial parameters are valid" in result.output


def test_quantile(runner):
    """χ²(4) 95% quantile ≈ 9.4877."""
    result = runner.invoke(cli, ["quantile", "chi-square", "0.95", "-p", "4"])
    assert result.exit_code == 0
    assert "Quantile: 9.48772" in result.output


def test_quantile_rejects_probability(runner):
    """Probabilities outside (0, 1) are reported, not raised."""
    result = runner.invoke(cli, ["quantile", "normal", "1.5", "-p", "0", "-p", "1"])
    assert result.exit_code == 1
    assert "Probability must be strictly between 0 and 1" in result.output


def test_critical(runner):
    """t(10) two-sided 5% critical value ≈ 2.2281."""
    result = runner.invoke(cli, ["critical", "t", "0.05", "-p", "10", "--tail", "two-sided"])
    assert result.exit_code == 0
    assert "2.22814" in result.output


def test_check(runner):
    """Poisson(3) passes every consistency check."""
    result = runner.invoke(cli, ["check", "poisson", "-p", "3"])
    assert result.exit_code == 0
    assert "normalization" in result.output
    assert "FAIL" not in result.output


def test_unknown_distribution_is_usage_error(runner):
    """Unknown distributions exit with click's usage status."""
    result = runner.invoke(cli, ["info", "cauchy"])
    assert result.exit_code == 2
    assert "Unknown distribution" in result.output
