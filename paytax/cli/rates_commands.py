"""Rate registry commands."""

import click

from .common import echo_json, get_registry, resolve_fallback, sdk_errors


@click.group()
def rates():
    """Inspect published tax rates and tables."""
    pass


@rates.command("years")
def rates_years():
    """List years with published rates."""
    registry = get_registry()
    california = set(registry.california_years())
    for year in registry.available_years():
        suffix = "" if year in california else " (federal only, no CA tables)"
        click.echo(f"{year}{suffix}")


@rates.command("show")
@click.argument("year", type=int)
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
@click.option("--fallback", is_flag=True, help="Use the latest earlier year if YEAR is not published")
def rates_show(year, output_format, fallback):
    """Show the scalar rates for YEAR.

    Example:
        pay-tax rates show 2025 --format json
    """
    registry = get_registry()
    with sdk_errors():
        rules = registry.get_rules(year, resolve_fallback(fallback))

    if output_format == "json":
        echo_json(rules.model_dump(mode="json"))
        return

    federal, california = rules.federal, rules.california
    click.echo(f"Tax year {year}" + (f" (using {rules.year} rates)" if rules.year != year else ""))
    click.echo()
    click.echo("Federal:")
    click.echo(f"  Social Security: {federal.social_security_rate:.2%} up to ${federal.social_security_wage_base:,.0f}")
    click.echo(f"  Medicare: {federal.medicare_rate:.2%}, additional {federal.additional_medicare_rate:.2%} "
               f"over ${federal.additional_medicare_threshold:,.0f}")
    click.echo(f"  FUTA: {federal.futa_net_rate:.2%} net on the first ${federal.futa_limit:,.0f}")
    click.echo("  Standard deduction (W-4 Step 2 not checked):")
    for status, amount in federal.standard_deduction.items():
        click.echo(f"    {status}: ${amount:,.0f}")
    click.echo()
    click.echo("California:")
    click.echo(f"  SDI: {california.sdi_rate:.2%} (no wage base)")
    click.echo(f"  SUI/ETT wage base: ${california.sui_wage_base:,.0f} / ${california.ett_wage_base:,.0f}")
    click.echo(f"  FUTA credit reduction: {california.futa_credit_reduction_rate:.2%}")
    click.echo(f"  DE 44 tables: {'published' if rules.california_tables else 'not published'}")
