"""Per-period and payroll run commands."""

from typing import Dict, List, Optional

import click
from pydantic import BaseModel, ConfigDict, Field

from paytax.sdk import (
    CompanyRates,
    FederalElection,
    PayrollRunEntry,
    StateElection,
    TaxExemptions,
    YtdTotals,
    calc_payroll_run,
    calc_period_taxes,
    get_company_rates,
)
from paytax.sdk.schemas import PayFrequency

from .common import echo_json, echo_model, get_registry, load_input_file, resolve_fallback, sdk_errors


class PeriodInput(BaseModel):
    """Input file for 'pay-tax period'."""

    model_config = ConfigDict(extra="forbid")

    year: int
    gross_pay: float = Field(..., ge=0)
    pay_frequency: PayFrequency
    prior_ytd_wages: float = Field(default=0, ge=0)
    federal: Optional[FederalElection] = None
    state: Optional[StateElection] = None
    exemptions: TaxExemptions = Field(default_factory=TaxExemptions)
    company_rates: Optional[CompanyRates] = None


class RunInput(BaseModel):
    """Input file for 'pay-tax run'."""

    model_config = ConfigDict(extra="forbid")

    entries: List[PayrollRunEntry]
    ytd: Dict[str, YtdTotals] = Field(default_factory=dict, description="Approved YTD by employee id")
    company_rates: Optional[CompanyRates] = None


def _company_rates(configured: Optional[CompanyRates]) -> CompanyRates:
    return configured or CompanyRates(**get_company_rates())


@click.command("period")
@click.argument("input_file", type=click.Path())
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="json",
              help="Output format (default: json)")
@click.option("--no-cushion", is_flag=True, help="Skip the low-wage federal withholding floor")
@click.option("--fallback", is_flag=True, help="Use the latest earlier year if the year is not published")
def period(input_file, output_format, no_cushion, fallback):
    """Calculate all taxes for one employee and one pay period.

    INPUT_FILE is YAML or JSON with year, gross_pay, pay_frequency,
    prior_ytd_wages and optional federal, state, exemptions and
    company_rates sections.

    Example:
        pay-tax period paycheck.yaml --format text
    """
    data = load_input_file(input_file)
    registry = get_registry()
    with sdk_errors():
        inputs = PeriodInput.model_validate(data)
        result = calc_period_taxes(
            inputs.gross_pay,
            inputs.pay_frequency,
            inputs.year,
            prior_ytd_wages=inputs.prior_ytd_wages,
            federal=inputs.federal,
            state=inputs.state,
            exemptions=inputs.exemptions,
            company_rates=_company_rates(inputs.company_rates),
            registry=registry,
            fallback_to_latest_year=resolve_fallback(fallback),
            apply_cushion=not no_cushion,
        )
    echo_model(result, output_format)


@click.command("run")
@click.argument("input_file", type=click.Path())
@click.option("--fallback", is_flag=True, help="Use the latest earlier year if the year is not published")
def run(input_file, fallback):
    """Calculate a payroll run against a YTD snapshot.

    INPUT_FILE is YAML or JSON with 'entries' (one per employee) and an
    optional 'ytd' mapping of employee id to approved YTD totals. Prints
    the period results and the YTD totals each employee would have once
    the run is approved.
    """
    data = load_input_file(input_file)
    registry = get_registry()
    with sdk_errors():
        inputs = RunInput.model_validate(data)
        results = calc_payroll_run(
            inputs.entries,
            inputs.ytd,
            registry=registry,
            company_rates=_company_rates(inputs.company_rates),
            fallback_to_latest_year=resolve_fallback(fallback),
        )

    output = {}
    for employee_id, result in results.items():
        ytd_after = inputs.ytd.get(employee_id, YtdTotals()).plus(result)
        output[employee_id] = {
            "result": result.model_dump(mode="json"),
            "ytd_after_approval": ytd_after.model_dump(mode="json"),
        }
    echo_json(output)
