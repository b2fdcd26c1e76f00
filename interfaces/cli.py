"""
Command-line interface for the probability distribution toolkit.

This CLI provides access to:
- The distribution catalog
- PDF/CDF evaluation
- Parameter validation
- Quantiles and critical values
- Consistency diagnostics
"""

import logging
from typing import Optional

import click

from probcalc.catalog.registry import default_catalog
from probcalc.diagnostics.consistency import run_all_checks
from probcalc.engine import (
    critical_value,
    evaluate,
    list_distributions,
    quantile,
    validate_parameters,
)
from probcalc.utils.types import DistributionDescriptor, DistributionId
from probcalc.validators.parameter_validator import describe_validation_code, format_error_message


def resolve_distribution(text: str) -> DistributionDescriptor:
    """Look up a distribution by numeric id, display name, or enum name."""
    catalog = default_catalog()
    descriptor: Optional[DistributionDescriptor] = None

    if text.strip().lstrip("-").isdigit():
        descriptor = catalog.get(int(text))
    if descriptor is None:
        descriptor = catalog.find_by_name(text)
    if descriptor is None:
        key = text.strip().upper().replace("-", "_").replace(" ", "_")
        if key in DistributionId.__members__:
            descriptor = catalog.get(DistributionId[key])

    if descriptor is None:
        raise click.BadParameter(f"Unknown distribution: {text}")
    return descriptor


def parse_parameters(raw_values: tuple[str, ...]) -> list[float]:
    values = []
    for raw in raw_values:
        try:
            values.append(float(raw))
        except ValueError:
            raise click.BadParameter(format_error_message(raw), param_hint="--param")
    return values


@click.group()
@click.version_option(version="1.0.0")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """Probability Distribution Toolkit - PDF/CDF evaluation and validation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )


@cli.command(name="list")
@click.option("--category", "-c", type=click.Choice(["continuous", "discrete"]), default=None)
def list_command(category):
    """List catalog distributions."""
    for descriptor in list_distributions(category):
        names = ", ".join(descriptor.parameter_names)
        click.echo(f"{int(descriptor.id):>3}  {descriptor.name:<18} {descriptor.category:<11} ({names})")


@cli.command()
@click.argument("distribution")
def info(distribution):
    """Show the parameters and practical ranges of a distribution."""
    descriptor = resolve_distribution(distribution)

    click.echo(f"\n{descriptor.name} (id {int(descriptor.id)}, {descriptor.category})")
    click.echo(f"  {descriptor.description}")
    for name, practical in zip(descriptor.parameter_names, descriptor.practical_ranges):
        click.echo(f"  {name:<20} [{practical.minimum:g}, {practical.maximum:g}]")


@cli.command(name="evaluate")
@click.argument("distribution")
@click.argument("x", type=float)
@click.option("--param", "-p", "params", multiple=True, required=True, help="Parameter value (repeat)")
@click.option("--strict", is_flag=True, help="Also enforce practical parameter ranges")
def evaluate_command(distribution, x, params, strict):
    """Evaluate PDF and CDF at X."""
    descriptor = resolve_distribution(distribution)
    values = parse_parameters(params)

    result = evaluate(descriptor.id, x, values, enforce_practical_ranges=strict)
    if result.success:
        click.echo(f"\n{descriptor.name} at x = {x:g}")
        click.echo(f"  PDF:  {result.pdf_value:>14.8g}")
        click.echo(f"  CDF:  {result.cdf_value:>14.8g}")
    else:
        click.echo(f"\nError: {result.error_message}", err=True)
        raise SystemExit(1)


@cli.command()
@click.argument("distribution")
@click.option("--param", "-p", "params", multiple=True, required=True, help="Parameter value (repeat)")
def validate(distribution, params):
    """Validate parameters against practical ranges and constraints."""
    descriptor = resolve_distribution(distribution)
    values = parse_parameters(params)

    outcome = validate_parameters(descriptor.id, values)
    if outcome.is_valid:
        click.echo(f"\n{descriptor.name} parameters are valid")
        return

    click.echo(f"\n{describe_validation_code(outcome.code)}: {outcome.message}", err=True)
    if outcome.has_suggestion:
        name = descriptor.parameter_names[outcome.parameter_index]
        click.echo(f"Suggestion: set {name} to {outcome.suggested_value:g}", err=True)
    raise SystemExit(1)


@cli.command(name="quantile")
@click.argument("distribution")
@click.argument("probability", type=float)
@click.option("--param", "-p", "params", multiple=True, required=True, help="Parameter value (repeat)")
@click.option("--method", type=click.Choice(["auto", "newton", "brent"]), default="auto")
def quantile_command(distribution, probability, params, method):
    """Solve for x with CDF(x) = PROBABILITY."""
    descriptor = resolve_distribution(distribution)
    values = parse_parameters(params)

    try:
        result = quantile(descriptor.id, probability, values, method=method)
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)
        raise SystemExit(1)

    if result.success:
        click.echo(f"\nQuantile: {result.value:.8g}")
        click.echo(f"Method: {result.method}")
        click.echo(f"Iterations: {result.iterations}")
    else:
        click.echo(f"\nSolver failed: {result.message}", err=True)
        raise SystemExit(1)


@cli.command()
@click.argument("distribution")
@click.argument("alpha", type=float)
@click.option("--param", "-p", "params", multiple=True, required=True, help="Parameter value (repeat)")
@click.option("--tail", type=click.Choice(["upper", "two-sided"]), default="upper")
def critical(distribution, alpha, params, tail):
    """Critical value at significance level ALPHA."""
    descriptor = resolve_distribution(distribution)
    values = parse_parameters(params)

    try:
        result = critical_value(descriptor.id, alpha, values, tail=tail)
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)
        raise SystemExit(1)

    if result.success:
        click.echo(f"\n{descriptor.name} {tail} critical value (alpha={alpha:g}): {result.value:.6g}")
    else:
        click.echo(f"\nSolver failed: {result.message}", err=True)
        raise SystemExit(1)


@cli.command()
@click.argument("distribution")
@click.option("--param", "-p", "params", multiple=True, required=True, help="Parameter value (repeat)")
def check(distribution, params):
    """Run consistency diagnostics (limits, monotonicity, normalization)."""
    descriptor = resolve_distribution(distribution)
    values = parse_parameters(params)

    try:
        results = run_all_checks(descriptor.id, values)
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)
        raise SystemExit(1)

    failed = False
    for name, result in results.items():
        status = "OK" if result.is_valid else "FAIL"
        click.echo(f"  {name:<18} {status}")
        for violation in result.violations:
            click.echo(f"    - {violation}")
        failed = failed or not result.is_valid

    if failed:
        raise SystemExit(1)


def main():
    cli()


if __name__ == "__main__":
    main()
