"""Filing commands: Form 941, Form 940 and DE 9 figures from payroll history."""

from typing import Dict, List, Tuple

import click

from paytax.sdk import CompanyRates, PayrollRunEntry, YtdTotals, calc_payroll_history, get_company_rates
from paytax.sdk.filings import (
    ExemptPayments,
    calc_de9,
    calc_de9c,
    calc_form940,
    calc_form941,
    futa_deposit_requirements,
    records_in_quarter,
    sum_lookback,
)

from .common import echo_json, echo_model, get_registry, load_input_file, resolve_fallback, sdk_errors


def _load_history_input(path: str) -> Tuple[List[PayrollRunEntry], Dict[str, YtdTotals]]:
    """Entries from a file holding a list, or a mapping with an 'entries' list
    and an optional 'opening_ytd' mapping of employee id to YTD totals."""
    data = load_input_file(path)
    opening = {}
    if isinstance(data, dict):
        opening = data.get("opening_ytd") or {}
        data = data.get("entries")
    if not isinstance(data, list):
        raise click.ClickException(f"{path}: expected a list of payroll entries")
    if not isinstance(opening, dict):
        raise click.ClickException(f"{path}: opening_ytd must map employee ids to YTD totals")
    with sdk_errors():
        entries = [PayrollRunEntry.model_validate(item) for item in data]
        opening_ytd = {str(k): YtdTotals.model_validate(v) for k, v in opening.items()}
    return entries, opening_ytd


def _history(path: str, fallback: bool):
    entries, opening_ytd = _load_history_input(path)
    registry = get_registry()
    with sdk_errors():
        records = calc_payroll_history(
            entries,
            registry=registry,
            company_rates=CompanyRates(**get_company_rates()),
            fallback_to_latest_year=fallback,
            opening_ytd=opening_ytd,
        )
    return records, registry


@click.group()
def filings():
    """Build quarterly and annual return figures from payroll history.

    INPUT_FILE holds the approved periods for the year (YAML or JSON),
    either as a list or as 'entries' plus an optional 'opening_ytd'
    mapping for histories that start mid-year. The history is replayed in
    pay-date order so wage-base caps see each employee's earlier wages.
    """
    pass


@filings.command("form941")
@click.argument("input_file", type=click.Path())
@click.option("--year", type=int, required=True, help="Tax year")
@click.option("--quarter", type=click.IntRange(1, 4), required=True, help="Quarter (1-4)")
@click.option("--lookback", type=float, multiple=True,
              help="Line 12 of a lookback quarter (repeat up to 4 times)")
@click.option("--deposits", type=float, default=0, help="Deposits made for the quarter")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="json")
@click.option("--fallback", is_flag=True, help="Use the latest earlier year if the year is not published")
def form941(input_file, year, quarter, lookback, deposits, output_format, fallback):
    """Form 941 figures for one quarter.

    Example:
        pay-tax filings form941 payroll.yaml --year 2025 --quarter 1 --lookback 9000 --lookback 8500
    """
    fallback = resolve_fallback(fallback)
    records, registry = _history(input_file, fallback)
    with sdk_errors():
        lookback_total = sum_lookback(lookback)
        figures = calc_form941(
            records_in_quarter(records, year, quarter),
            year,
            quarter,
            registry.get_parameters(year, fallback),
            lookback_total=lookback_total,
            deposits=deposits,
        )
    echo_model(figures, output_format)


@filings.command("form940")
@click.argument("input_file", type=click.Path())
@click.option("--year", type=int, required=True, help="Tax year")
@click.option("--deposited", type=float, default=0, help="FUTA deposited for the year")
@click.option("--fringe", type=float, default=0, help="Line 4 exempt fringe benefits")
@click.option("--retirement", type=float, default=0, help="Line 4 exempt retirement/pension")
@click.option("--dependent-care", type=float, default=0, help="Line 4 exempt dependent care")
@click.option("--suta-excluded-wages", type=float, default=0, help="Line 10 wages excluded from state UI")
@click.option("--fallback", is_flag=True, help="Use the latest earlier year if the year is not published")
def form940(input_file, year, deposited, fringe, retirement, dependent_care, suta_excluded_wages, fallback):
    """Form 940 figures and FUTA deposit requirements for a year."""
    fallback = resolve_fallback(fallback)
    records, registry = _history(input_file, fallback)
    with sdk_errors():
        params = registry.get_parameters(year, fallback)
        figures = calc_form940(
            [r for r in records if r.pay_date.year == year],
            year,
            params,
            exempt_payments=ExemptPayments(fringe=fringe, retirement=retirement, dependent_care=dependent_care),
            suta_excluded_wages=suta_excluded_wages,
            deposited=deposited,
        )
        deposits = futa_deposit_requirements(
            year, figures.quarterly_liability, params.federal.futa_quarterly_deposit_threshold
        )
    echo_json({
        "form940": figures.model_dump(mode="json"),
        "futa_deposits": [d.model_dump(mode="json") for d in deposits],
    })


@filings.command("de9")
@click.argument("input_file", type=click.Path())
@click.option("--year", type=int, required=True, help="Tax year")
@click.option("--quarter", type=click.IntRange(1, 4), required=True, help="Quarter (1-4)")
@click.option("--fallback", is_flag=True, help="Use the latest earlier year if the year is not published")
def de9(input_file, year, quarter, fallback):
    """California DE 9 and DE 9C figures for one quarter."""
    fallback = resolve_fallback(fallback)
    records, registry = _history(input_file, fallback)
    with sdk_errors():
        quarter_records = records_in_quarter(records, year, quarter)
        figures = calc_de9(quarter_records, year, quarter, registry.get_parameters(year, fallback))
        detail = calc_de9c(quarter_records, year, quarter)
    echo_json({
        "de9": figures.model_dump(mode="json"),
        "de9c": detail.model_dump(mode="json"),
    })
