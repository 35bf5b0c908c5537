"""Form 940 - Employer's Annual Federal Unemployment (FUTA) Tax Return.

FUTA tax rate: 6.0% on the first $7,000 of wages paid to each employee.
Most employers can claim a credit up to 5.4% for state unemployment taxes,
resulting in a net FUTA rate of 0.6%. California is a credit reduction
state, so line 11 adds back part of that credit.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from ..rounding import require_amount, round_to_cents, sum_cents
from ..schemas import FilingRecord
from ..taxes.schemas import TaxYearParameters
from ..taxes.statutory import capped_taxable_wage
from .quarters import check_records_in_year, form940_due_date, quarter_end, quarter_of, quarterly_due_date
from .schemas import ExemptPayments, Form940Figures, FutaDepositRequirement, QuarterlyFutaLiability

logger = logging.getLogger(__name__)


def calc_payments_exceeding_limit(wages_by_employee: Dict[str, float], futa_limit: float) -> float:
    """Line 5: each employee's wages above the FUTA limit, summed."""
    return sum_cents(max(0.0, wages - futa_limit) for wages in wages_by_employee.values())


def calc_quarterly_futa_wages(records: Iterable[FilingRecord], futa_limit: float) -> Dict[int, float]:
    """FUTA-taxable wages by quarter, capped per employee for the year."""
    by_quarter: Dict[int, Dict[str, List[FilingRecord]]] = defaultdict(lambda: defaultdict(list))
    for record in sorted(records, key=lambda r: r.pay_date):
        if not record.exemptions.futa:
            by_quarter[quarter_of(record.pay_date)][record.employee_id].append(record)

    taxable = {}
    for quarter in (1, 2, 3, 4):
        amounts = []
        for employee_records in by_quarter[quarter].values():
            wages = sum(r.gross_pay for r in employee_records)
            amounts.append(capped_taxable_wage(futa_limit, employee_records[0].prior_ytd_wages, wages))
        taxable[quarter] = sum_cents(amounts)
    return taxable


def calc_quarterly_liability(
    quarterly_wages: Dict[int, float], net_rate: float, line12: float
) -> QuarterlyFutaLiability:
    """Part 5: FUTA on each quarter's taxable wages; Q4 takes the remainder of line 12.

    Line 9-11 adjustments are assessed at year end, so they land in Q4.
    Line 4 exempt payments are annual, so Q1-Q3 are each capped at what is
    left of line 12 and no quarter goes negative.
    """
    remaining = round_to_cents(line12)
    early = []
    for quarter in (1, 2, 3):
        liability = min(round_to_cents(quarterly_wages.get(quarter, 0) * net_rate), remaining)
        early.append(liability)
        remaining = round_to_cents(remaining - liability)
    q1, q2, q3 = early
    return QuarterlyFutaLiability(q1=q1, q2=q2, q3=q3, q4=remaining, total=round_to_cents(line12))


def futa_deposit_requirements(
    year: int,
    quarterly: QuarterlyFutaLiability,
    threshold: float,
) -> List[FutaDepositRequirement]:
    """Quarterly FUTA deposit rule.

    Undeposited FUTA above the threshold at a quarter end must be deposited by
    the last day of the following month; smaller amounts carry forward. A Q4
    balance at or below the threshold may be paid with the return.
    """
    requirements = []
    accumulated = 0.0
    for quarter in (1, 2, 3, 4):
        liability = quarterly.for_quarter(quarter)
        accumulated = round_to_cents(accumulated + liability)
        required = accumulated > threshold
        requirements.append(FutaDepositRequirement(
            quarter=quarter,
            liability=liability,
            accumulated=accumulated,
            deposit_required=required,
            due_date=quarterly_due_date(quarter_end(year, quarter)),
        ))
        if required:
            accumulated = 0.0
    return requirements


def calc_form940(
    records: Iterable[FilingRecord],
    year: int,
    params: TaxYearParameters,
    exempt_payments: Optional[ExemptPayments] = None,
    all_wages_excluded_from_suta: bool = False,
    suta_excluded_wages: float = 0,
    credit_reduction_wages: Optional[float] = None,
    credit_reduction_rate: Optional[float] = None,
    deposited: float = 0,
) -> Form940Figures:
    """Build Form 940 figures for a year.

    Args:
        records: The year's FilingRecords
        year: Tax year
        params: Year parameters (FUTA limit and rates, CA credit reduction)
        exempt_payments: Line 4 exempt payments. Wages of FUTA-exempt
            employees are added to 'other'.
        all_wages_excluded_from_suta: Line 9 applies (lines 10 and 11 are skipped)
        suta_excluded_wages: Line 10 wages excluded from state unemployment tax
        credit_reduction_wages: Line 11 wages paid in the credit reduction
            state (defaults to line 7)
        credit_reduction_rate: Line 11 rate (defaults to the year's CA rate)
        deposited: FUTA deposited for the year (line 13)

    Raises:
        ValueError: If any record is paid outside the year
    """
    records = check_records_in_year(records, year)
    federal = params.federal
    suta_excluded_wages = require_amount("suta_excluded_wages", suta_excluded_wages)
    deposited = require_amount("deposited", deposited)
    if credit_reduction_rate is None:
        credit_reduction_rate = params.california.futa_credit_reduction_rate

    futa_exempt_wages = sum_cents(r.gross_pay for r in records if r.exemptions.futa)
    exempt = exempt_payments or ExemptPayments()
    if futa_exempt_wages:
        exempt = exempt.model_copy(update={"other": round_to_cents(exempt.other + futa_exempt_wages)})

    wages_by_employee: Dict[str, float] = defaultdict(float)
    for record in records:
        if not record.exemptions.futa:
            wages_by_employee[record.employee_id] += record.gross_pay

    # Part 2
    line3 = sum_cents(r.gross_pay for r in records)
    line4 = sum_cents([exempt.fringe, exempt.retirement, exempt.dependent_care, exempt.other])
    line5 = calc_payments_exceeding_limit(wages_by_employee, federal.futa_limit)
    line6 = sum_cents([line4, line5])
    line7 = round_to_cents(max(0.0, line3 - line6))
    line8 = round_to_cents(line7 * federal.futa_net_rate)

    # Part 3
    line9 = line10 = line11 = 0.0
    if all_wages_excluded_from_suta:
        line9 = round_to_cents(line7 * federal.futa_credit_rate)
    else:
        if suta_excluded_wages > 0:
            line10 = round_to_cents(suta_excluded_wages * federal.futa_credit_rate)
        if credit_reduction_wages is None:
            credit_reduction_wages = line7
        line11 = round_to_cents(require_amount("credit_reduction_wages", credit_reduction_wages) * credit_reduction_rate)
    line12 = sum_cents([line8, line9, line10, line11])

    # Part 5
    quarterly = calc_quarterly_liability(
        calc_quarterly_futa_wages(records, federal.futa_limit), federal.futa_net_rate, line12
    )
    logger.debug(f"940 {year}: line7={line7:.2f} line12={line12:.2f}")

    return Form940Figures(
        year=year,
        line3_total_payments=line3,
        line4_exempt_payments=exempt,
        line4_total=line4,
        line5_payments_exceeding_limit=line5,
        line6_subtotal=line6,
        line7_taxable_futa_wages=line7,
        line8_futa_tax_before_adjustments=line8,
        line9_adjustment=line9,
        line10_adjustment=line10,
        line11_credit_reduction=line11,
        line12_total_futa_tax=line12,
        line13_deposited=round_to_cents(deposited),
        line14_balance_due=round_to_cents(max(0.0, line12 - deposited)),
        line15_overpayment=round_to_cents(max(0.0, deposited - line12)),
        part5_required=line12 > federal.futa_quarterly_deposit_threshold,
        quarterly_liability=quarterly,
        due_date=form940_due_date(year),
    )
