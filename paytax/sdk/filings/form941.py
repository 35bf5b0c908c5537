"""Form 941 - Employer's Quarterly Federal Tax Return.

Builds the return from a quarter's FilingRecords:

- Lines 5a-5d are computed on the quarter's summed wages, so they can
  differ by a few cents from the per-paycheck amounts actually withheld
  and matched. Line 7 reconciles the two.
- Line 16 classifies the deposit schedule: de minimis, monthly or
  semiweekly (Schedule B).
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Sequence

from ..rounding import require_amount, round_to_cents, sum_cents
from ..schemas import FilingRecord
from ..taxes.schemas import TaxYearParameters
from ..taxes.statutory import additional_medicare_wages, capped_taxable_wage
from .quarters import check_records_in_quarter, month_in_quarter, quarter_end, quarterly_due_date
from .schemas import Form941Figures, Form941Line16, MonthlyLiability

logger = logging.getLogger(__name__)

SMALL_LIABILITY_THRESHOLD = 2500  # de minimis test
LOOKBACK_MONTHLY_LIMIT = 50000  # <= 50k -> monthly depositor
HUNDRED_K_THRESHOLD = 100000  # next-day deposit rule


def period_liability(record: FilingRecord) -> float:
    """941 deposit liability from one paycheck: FIT plus both FICA shares."""
    employee, employer = record.taxes.employee, record.taxes.employer
    return (
        employee.federal_income_tax
        + employee.social_security
        + employer.social_security
        + employee.medicare
        + employer.medicare
    )


def check_hundred_k_rule(records: Iterable[FilingRecord]) -> bool:
    """True if the liability accumulated on any one pay date reached $100,000."""
    daily: Dict = defaultdict(float)
    for record in records:
        daily[record.pay_date] += period_liability(record)
    return any(total >= HUNDRED_K_THRESHOLD for total in daily.values())


def monthly_liabilities(records: Iterable[FilingRecord]) -> List[float]:
    """Liability by month of the quarter [month1, month2, month3], unrounded."""
    sums = [0.0, 0.0, 0.0]
    for record in records:
        sums[month_in_quarter(record.pay_date)] += period_liability(record)
    return sums


def split_monthly_liability(line12: float, raw_monthly: Sequence[float]) -> MonthlyLiability:
    """Round months 1 and 2; month 3 takes the remainder so the months sum to line 12."""
    month1 = round_to_cents(raw_monthly[0])
    month2 = round_to_cents(raw_monthly[1])
    month3 = round_to_cents(line12 - month1 - month2)
    return MonthlyLiability(month1=month1, month2=month2, month3=month3, total=round_to_cents(line12))


def classify_deposit_schedule(
    line12: float,
    lookback_total: float,
    hundred_k_triggered: bool,
    raw_monthly: Sequence[float],
) -> Form941Line16:
    """Line 16.

    Args:
        line12: Current quarter total tax after adjustments
        lookback_total: Line 12 total of the four lookback quarters
        hundred_k_triggered: Whether the $100k next-day rule applied this quarter
        raw_monthly: Liability by month of the quarter

    Returns:
        Form941Line16 with the monthly breakdown (monthly depositors) or the
        Schedule B total (semiweekly depositors)
    """
    if line12 < SMALL_LIABILITY_THRESHOLD and not hundred_k_triggered:
        return Form941Line16(deposit_schedule="de_minimis")

    if lookback_total <= LOOKBACK_MONTHLY_LIMIT and not hundred_k_triggered:
        return Form941Line16(
            deposit_schedule="monthly",
            monthly_liability=split_monthly_liability(line12, raw_monthly),
        )

    return Form941Line16(
        deposit_schedule="semiweekly",
        hundred_k_rule_triggered=hundred_k_triggered,
        schedule_b_total=round_to_cents(line12),
    )


def _employee_fica_totals(records: List[FilingRecord], params: TaxYearParameters) -> Dict[str, Dict[str, float]]:
    """Per-employee quarter wages subject to each FICA line.

    Wage-base position comes from the employee's first paycheck in the quarter.
    """
    by_employee: Dict[str, List[FilingRecord]] = defaultdict(list)
    for record in sorted(records, key=lambda r: r.pay_date):
        if not record.exemptions.fica:
            by_employee[record.employee_id].append(record)

    federal = params.federal
    totals = {}
    for employee_id, employee_records in by_employee.items():
        wages = sum_cents(r.gross_pay for r in employee_records)
        prior = employee_records[0].prior_ytd_wages
        totals[employee_id] = {
            "medicare": wages,
            "social_security": round_to_cents(
                capped_taxable_wage(federal.social_security_wage_base, prior, wages)
            ),
            "additional_medicare": round_to_cents(
                additional_medicare_wages(wages, prior, federal.additional_medicare_threshold)
            ),
        }
    return totals


def calc_fractions_of_cents(
    records: Iterable[FilingRecord],
    social_security_wages: float,
    medicare_wages: float,
    params: TaxYearParameters,
) -> float:
    """Line 7: fractions of cents adjustment.

    Social Security and Medicare tax (both shares) on the quarter's summed
    wages, rounded once, less the sum of the amounts rounded on each
    paycheck. May be positive or negative.
    """
    federal = params.federal
    overall = round_to_cents(
        (social_security_wages * federal.social_security_rate + medicare_wages * federal.medicare_rate) * 2
    )
    per_paycheck = sum_cents(
        r.taxes.employee.social_security
        + r.taxes.employer.social_security
        + r.taxes.employee.medicare
        + r.taxes.employer.medicare
        for r in records
    )
    return round_to_cents(overall - per_paycheck)


def calc_form941(
    records: Iterable[FilingRecord],
    year: int,
    quarter: int,
    params: TaxYearParameters,
    lookback_total: float = 0,
    deposits: float = 0,
) -> Form941Figures:
    """Build Form 941 figures for one quarter.

    Args:
        records: FilingRecords paid in the quarter
        year: Tax year
        quarter: Quarter number (1-4)
        params: Year parameters (SS/Medicare rates and thresholds)
        lookback_total: Sum of line 12 over the lookback period (July 1 two
            years back through June 30 of last year)
        deposits: Deposits made for the quarter (line 13)

    Raises:
        ValueError: If any record is paid outside the quarter
    """
    records = check_records_in_quarter(records, year, quarter)
    lookback_total = require_amount("lookback_total", lookback_total)
    deposits = require_amount("deposits", deposits)
    federal = params.federal

    fica = _employee_fica_totals(records, params)
    ss_wages = sum_cents(t["social_security"] for t in fica.values())
    medicare_wages = sum_cents(t["medicare"] for t in fica.values())
    amt_wages = sum_cents(t["additional_medicare"] for t in fica.values())

    line2 = sum_cents(r.gross_pay for r in records)
    line3 = sum_cents(r.taxes.employee.federal_income_tax for r in records)
    line5a_tax = round_to_cents(ss_wages * federal.social_security_rate * 2)
    line5c_tax = round_to_cents(medicare_wages * federal.medicare_rate * 2)
    line5d_tax = round_to_cents(amt_wages * federal.additional_medicare_rate)
    line5e = sum_cents([line5a_tax, line5c_tax, line5d_tax])
    line6 = sum_cents([line3, line5e])
    line7 = calc_fractions_of_cents(records, ss_wages, medicare_wages, params)
    line10 = sum_cents([line6, line7])
    line12 = max(0.0, line10)

    hundred_k = check_hundred_k_rule(records)
    line16 = classify_deposit_schedule(line12, lookback_total, hundred_k, monthly_liabilities(records))
    logger.debug(f"941 {year} Q{quarter}: line12={line12:.2f} schedule={line16.deposit_schedule}")

    return Form941Figures(
        year=year,
        quarter=quarter,
        employee_count=len({r.employee_id for r in records}),
        line2_wages=line2,
        line3_federal_income_tax=line3,
        line5a_social_security_wages=ss_wages,
        line5a_social_security_tax=line5a_tax,
        line5c_medicare_wages=medicare_wages,
        line5c_medicare_tax=line5c_tax,
        line5d_additional_medicare_wages=amt_wages,
        line5d_additional_medicare_tax=line5d_tax,
        line5e_total_social_security_medicare=line5e,
        line6_total_before_adjustments=line6,
        line7_fractions_of_cents=line7,
        line10_total_after_adjustments=line10,
        line12_total_after_credits=line12,
        line13_deposits=round_to_cents(deposits),
        line14_balance_due=round_to_cents(max(0.0, line12 - deposits)),
        line15_overpayment=round_to_cents(max(0.0, deposits - line12)),
        line16=line16,
        due_date=quarterly_due_date(quarter_end(year, quarter)),
    )


def sum_lookback(line12_values: Iterable[float]) -> float:
    """Lookback total from the line 12 amounts of the four lookback quarters."""
    values = list(line12_values)
    if len(values) > 4:
        raise ValueError(f"Lookback period has 4 quarters, got {len(values)} values")
    return sum_cents(values)
