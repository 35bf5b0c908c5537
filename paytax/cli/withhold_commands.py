"""Withholding commands."""

import click

from paytax.sdk import (
    FederalElection,
    StateElection,
    calc_california_withholding,
    calc_federal_withholding,
)
from paytax.sdk.taxes import PAY_PERIODS

from .common import get_registry, resolve_fallback, sdk_errors

FEDERAL_STATUSES = ["single_or_married_separately", "married_jointly", "head_of_household", "exempt"]
STATE_STATUSES = ["single_or_married_multiple_incomes", "married_one_income", "head_of_household", "do_not_withhold"]


@click.group()
def withhold():
    """Calculate income tax withholding for one paycheck."""
    pass


@withhold.command("federal")
@click.argument("gross", type=float)
@click.option("--year", type=int, required=True, help="Tax year")
@click.option("--frequency", type=click.Choice(list(PAY_PERIODS)), default="biweekly", help="Pay frequency")
@click.option("--filing-status", type=click.Choice(FEDERAL_STATUSES), default="single_or_married_separately")
@click.option("--step2", is_flag=True, help="W-4 Step 2 checkbox (multiple jobs)")
@click.option("--dependents", type=float, default=0, help="Step 3 annual dependents amount")
@click.option("--other-income", type=float, default=0, help="Step 4(a) annual other income")
@click.option("--deductions", type=float, default=0, help="Step 4(b) annual deductions")
@click.option("--extra", type=float, default=0, help="Step 4(c) extra withholding per period")
@click.option("--no-cushion", is_flag=True, help="Skip the low-wage withholding floor")
@click.option("--fallback", is_flag=True, help="Use the latest earlier year if YEAR is not published")
def withhold_federal(gross, year, frequency, filing_status, step2, dependents, other_income,
                     deductions, extra, no_cushion, fallback):
    """Federal income tax withholding on GROSS pay.

    Example:
        pay-tax withhold federal 2000 --year 2025 --frequency biweekly
    """
    registry = get_registry()
    with sdk_errors():
        election = FederalElection(
            filing_status=filing_status,
            multiple_jobs=step2,
            dependents_deduction=dependents,
            other_income=other_income,
            deductions=deductions,
            extra_withholding=extra,
        )
        rules = registry.get_rules(year, resolve_fallback(fallback))
        amount = calc_federal_withholding(
            gross, frequency, election, rules.parameters, rules.federal_tables, apply_cushion=not no_cushion
        )
    click.echo(f"{amount:.2f}")


@withhold.command("california")
@click.argument("gross", type=float)
@click.option("--year", type=int, required=True, help="Tax year")
@click.option("--frequency", type=click.Choice(["monthly", "biweekly"]), default="biweekly", help="Pay frequency")
@click.option("--filing-status", type=click.Choice(STATE_STATUSES), default="single_or_married_multiple_incomes")
@click.option("--allowances", type=int, default=0, help="DE 4 regular allowances (Worksheet A)")
@click.option("--estimated", type=int, default=0, help="DE 4 estimated deduction allowances (Worksheet B)")
@click.option("--additional", type=float, default=0, help="Additional withholding per period")
@click.option("--fallback", is_flag=True, help="Use the latest earlier year's tables if YEAR has none")
def withhold_california(gross, year, frequency, filing_status, allowances, estimated, additional, fallback):
    """California income tax withholding on GROSS pay.

    Example:
        pay-tax withhold california 5000 --year 2025 --frequency monthly --allowances 1
    """
    registry = get_registry()
    with sdk_errors():
        election = StateElection(
            filing_status=filing_status,
            regular_allowances=allowances,
            estimated_deduction_allowances=estimated,
            additional_withholding=additional,
        )
        tables = registry.get_state_brackets(year, resolve_fallback(fallback))
        amount = calc_california_withholding(gross, frequency, election, tables)
    click.echo(f"{amount:.2f}")
