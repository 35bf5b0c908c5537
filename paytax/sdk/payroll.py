"""Payroll runs over many employees.

A run computes every employee's period against one YTD snapshot taken
before the run. A history replays approved periods in pay-date order,
folding each result into YTD so wage-base caps carry across periods.
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .rounding import require_amount, round_to_cents
from .schemas import CompanyRates, FilingRecord, PayrollRunEntry, PeriodTaxResult, YtdTotals
from .taxes.period import calc_period_taxes
from .taxes.registry import TaxRegistry, load_registry
from .taxes.withholding import get_pay_periods

logger = logging.getLogger(__name__)


class DuplicatePayrollEntry(ValueError):
    """Raised when one employee appears twice for the same pay period."""
    pass


def _calc_entry(
    entry: PayrollRunEntry,
    prior_ytd_wages: float,
    registry: TaxRegistry,
    company_rates: Optional[CompanyRates],
    fallback_to_latest_year: bool,
) -> PeriodTaxResult:
    return calc_period_taxes(
        entry.gross_pay,
        entry.pay_frequency,
        entry.year,
        prior_ytd_wages=prior_ytd_wages,
        federal=entry.federal,
        state=entry.state,
        exemptions=entry.exemptions,
        company_rates=company_rates,
        registry=registry,
        fallback_to_latest_year=fallback_to_latest_year,
    )


def calc_payroll_run(
    entries: Iterable[PayrollRunEntry],
    ytd_snapshot: Mapping[str, YtdTotals],
    registry: Optional[TaxRegistry] = None,
    company_rates: Optional[CompanyRates] = None,
    fallback_to_latest_year: bool = False,
) -> Dict[str, PeriodTaxResult]:
    """Calculate one payroll run.

    Args:
        entries: One entry per employee
        ytd_snapshot: Approved YTD totals by employee id, taken before the run.
            Employees missing from the snapshot start the year at zero.
        registry: Rate registry (defaults to the packaged rules)
        company_rates: Employer UI/ETT rates
        fallback_to_latest_year: Passed through to the registry lookups

    Returns:
        Results by employee id. Results are not folded into YTD here; that
        happens only when the run is approved (YtdTotals.plus).

    Raises:
        DuplicatePayrollEntry: If an employee appears more than once
    """
    registry = registry or load_registry()
    entries = list(entries)

    seen = set()
    for entry in entries:
        if entry.employee_id in seen:
            raise DuplicatePayrollEntry(f"Employee {entry.employee_id} appears more than once in the run")
        seen.add(entry.employee_id)

    results = {}
    for entry in entries:
        ytd = ytd_snapshot.get(entry.employee_id, YtdTotals())
        results[entry.employee_id] = _calc_entry(
            entry, ytd.gross, registry, company_rates, fallback_to_latest_year
        )
    logger.debug(f"Payroll run: {len(results)} employees")
    return results


def calc_payroll_history(
    entries: Iterable[PayrollRunEntry],
    registry: Optional[TaxRegistry] = None,
    company_rates: Optional[CompanyRates] = None,
    fallback_to_latest_year: bool = False,
    opening_ytd: Optional[Mapping[str, YtdTotals]] = None,
) -> List[FilingRecord]:
    """Replay approved periods in pay-date order with running YTD.

    YTD resets at each calendar year. Without opening_ytd the history must
    start with each employee's first paycheck of the year, or wage-base caps
    in later periods are under-applied.

    Args:
        entries: Approved periods, in any order
        registry: Rate registry (defaults to the packaged rules)
        company_rates: Employer UI/ETT rates
        fallback_to_latest_year: Passed through to the registry lookups
        opening_ytd: Approved YTD by employee id as of the day before the
            history starts. Applies to the calendar year of each employee's
            earliest entry.

    Returns:
        FilingRecords ordered by pay date, then employee id

    Raises:
        DuplicatePayrollEntry: If an employee has two entries on one pay date
    """
    registry = registry or load_registry()
    opening_ytd = opening_ytd or {}
    ordered = sorted(entries, key=lambda e: (e.pay_date, e.employee_id))

    ytd: Dict[Tuple[str, int], YtdTotals] = {}
    first_year: Dict[str, int] = {}
    seen = set()
    records = []
    for entry in ordered:
        key = (entry.employee_id, entry.pay_date)
        if key in seen:
            raise DuplicatePayrollEntry(f"Employee {entry.employee_id} has two entries paid {entry.pay_date}")
        seen.add(key)

        first_year.setdefault(entry.employee_id, entry.year)
        ytd_key = (entry.employee_id, entry.year)
        if ytd_key in ytd:
            prior = ytd[ytd_key]
        elif entry.year == first_year[entry.employee_id]:
            prior = opening_ytd.get(entry.employee_id, YtdTotals())
        else:
            prior = YtdTotals()
        result = _calc_entry(entry, prior.gross, registry, company_rates, fallback_to_latest_year)
        ytd[ytd_key] = prior.plus(result)

        records.append(FilingRecord(
            employee_id=entry.employee_id,
            first_name=entry.first_name,
            last_name=entry.last_name,
            pay_date=entry.pay_date,
            period_end=entry.period_end or entry.pay_date,
            wage_plan_code=entry.state.wage_plan_code if entry.state is not None else None,
            exemptions=entry.exemptions,
            taxes=result,
        ))
    return records


# =============================================================================
# Gross pay
# =============================================================================


def calc_hours(weekly_hours: float, pay_frequency: str, start: date, end: date) -> float:
    """Hours worked in a pay period from a weekly schedule.

    Frequencies without a fixed week count use the period's calendar days.
    """
    weekly_hours = require_amount("weekly_hours", weekly_hours)
    if pay_frequency == "weekly":
        return weekly_hours
    if pay_frequency == "biweekly":
        return weekly_hours * 2
    if pay_frequency == "monthly":
        return round(weekly_hours * 52 / 12)
    days = (end - start).days + 1
    return round(days / 7 * weekly_hours)


def calc_gross_pay(pay_rate: float, pay_frequency: str, pay_type: str, hours: float = 0) -> float:
    """Gross pay for a period.

    Args:
        pay_rate: Hourly rate ('hourly') or annual salary ('yearly')
        pay_frequency: Pay frequency
        pay_type: 'hourly' or 'yearly'
        hours: Hours worked (hourly pay only)
    """
    pay_rate = require_amount("pay_rate", pay_rate)
    if pay_type == "hourly":
        return round_to_cents(pay_rate * require_amount("hours", hours))
    if pay_type == "yearly":
        return round_to_cents(pay_rate / get_pay_periods(pay_frequency))
    raise ValueError(f"Unknown pay type: {pay_type}")


def calc_hourly_rate(pay_rate: float, pay_type: str) -> float:
    """Hourly rate; salaries assume 52 weeks of 40 hours."""
    pay_rate = require_amount("pay_rate", pay_rate)
    if pay_type == "hourly":
        return pay_rate
    return pay_rate / 52 / 40
