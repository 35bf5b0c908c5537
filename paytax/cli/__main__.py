"""Pay Tax CLI - Command-line interface for payroll tax calculations."""

import logging
import os

import click

from paytax import __version__

from .filings_commands import filings as filings_group
from .payroll_commands import period as period_command
from .payroll_commands import run as run_command
from .rates_commands import rates as rates_group
from .settings_commands import settings as settings_group
from .withhold_commands import withhold as withhold_group


@click.group()
@click.version_option(version=__version__, prog_name="pay-tax")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging (bracket selection, year fallback)")
def cli(verbose):
    """Pay Tax - Payroll tax withholding and filing figures.

    Federal (IRS Pub 15-T percentage method) and California (DE 44
    Method B) withholding, Social Security, Medicare, FUTA, SUI, ETT
    and SDI, and Form 941, Form 940 and DE 9 figures.

    Settings are loaded from (in order):

    \b
    1. PAY_TAX_CONFIG_PATH environment variable
    2. ~/.config/pay-tax/settings.json (XDG default)

    Run 'pay-tax settings show' to see effective settings.
    """
    # LOG_LEVEL environment variable unless --verbose
    level = "DEBUG" if verbose else os.environ.get("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


cli.add_command(rates_group)
cli.add_command(withhold_group)
cli.add_command(period_command)
cli.add_command(run_command)
cli.add_command(filings_group)
cli.add_command(settings_group)


def main():
    cli()


if __name__ == "__main__":
    main()
