"""Settings CLI commands for Pay Tax.

Manages settings.json - tax rules directory, year fallback, company rates.
"""

import click
import yaml

from paytax.sdk import (
    get_company_rates,
    get_settings_path,
    get_tax_rules_dir_override,
    load_settings,
    set_setting,
)

KNOWN_SETTINGS = ("tax_rules_dir", "fallback_to_latest_year", "company_rates")


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - tax_rules_dir: extra directory of <year>.yaml rule files
    - fallback_to_latest_year: use the latest published year for later years
    - company_rates: {ui_rate, ett_rate} assigned by the EDD
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their effective values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if current:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")
    else:
        click.echo("No settings configured (using defaults).")

    rates = get_company_rates()
    rules_dir = get_tax_rules_dir_override()
    click.echo()
    click.echo("Effective values:")
    click.echo(f"  tax_rules_dir: {rules_dir or '(packaged rules only)'}")
    click.echo(f"  fallback_to_latest_year: {bool(current.get('fallback_to_latest_year', False))}")
    click.echo(f"  ui_rate: {rates['ui_rate']}")
    click.echo(f"  ett_rate: {rates['ett_rate']}")


@settings.command("set")
@click.argument("key", type=click.Choice(KNOWN_SETTINGS))
@click.argument("value")
def settings_set(key, value):
    """Set KEY to VALUE.

    VALUE is parsed as YAML, so numbers, booleans and mappings work.

    Examples:
        pay-tax settings set fallback_to_latest_year true
        pay-tax settings set company_rates "{ui_rate: 0.027, ett_rate: 0.001}"
        pay-tax settings set tax_rules_dir ~/tax-rules
    """
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError as e:
        raise click.ClickException(f"Cannot parse value: {e}")

    if key == "company_rates":
        if not isinstance(parsed, dict) or not set(parsed) <= {"ui_rate", "ett_rate"}:
            raise click.ClickException("company_rates must be a mapping with ui_rate and/or ett_rate")
    elif key == "fallback_to_latest_year" and not isinstance(parsed, bool):
        raise click.ClickException("fallback_to_latest_year must be true or false")
    elif key == "tax_rules_dir":
        parsed = value

    path = set_setting(key, parsed)
    click.echo(f"Set {key} = {parsed}")
    click.echo(f"Saved to: {path}")
