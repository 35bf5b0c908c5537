"""California DE 9 and DE 9C quarterly returns.

Only employees with a California election (a wage plan code on their
records) are reported.
"""

from collections import defaultdict
from typing import Dict, Iterable, List

from ..rounding import sum_cents
from ..schemas import FilingRecord
from ..taxes.schemas import TaxYearParameters
from ..taxes.statutory import WAGE_PLANS, capped_taxable_wage
from .quarters import check_records_in_quarter, de9_deadlines, month_in_quarter, quarter_dates
from .schemas import De9cEmployeeRow, De9cFigures, De9Figures


def _california_records(records: Iterable[FilingRecord]) -> List[FilingRecord]:
    return sorted((r for r in records if r.wage_plan_code is not None), key=lambda r: r.pay_date)


def calc_ui_taxable_wages(records: Iterable[FilingRecord], sui_wage_base: float) -> float:
    """UI taxable wages for the quarter, capped per employee by the annual wage base."""
    by_employee: Dict[str, List[FilingRecord]] = defaultdict(list)
    for record in records:
        if WAGE_PLANS[record.wage_plan_code].sui_ett and not record.exemptions.sui_ett:
            by_employee[record.employee_id].append(record)

    amounts = []
    for employee_records in by_employee.values():
        wages = sum(r.gross_pay for r in employee_records)
        amounts.append(capped_taxable_wage(sui_wage_base, employee_records[0].prior_ytd_wages, wages))
    return sum_cents(amounts)


def calc_de9(
    records: Iterable[FilingRecord],
    year: int,
    quarter: int,
    params: TaxYearParameters,
) -> De9Figures:
    """Build DE 9 figures for one quarter.

    Raises:
        ValueError: If any record is paid outside the quarter
    """
    records = _california_records(check_records_in_quarter(records, year, quarter))
    deadlines = de9_deadlines(year, quarter)

    pit = sum_cents(r.taxes.employee.state_income_tax for r in records)
    sdi = sum_cents(r.taxes.employee.sdi for r in records)
    ui = sum_cents(r.taxes.employer.sui for r in records)
    ett = sum_cents(r.taxes.employer.ett for r in records)

    return De9Figures(
        year=year,
        quarter=quarter,
        subject_wages=sum_cents(r.gross_pay for r in records),
        ui_taxable_wages=calc_ui_taxable_wages(records, params.california.sui_wage_base),
        sdi_taxable_wages=sum_cents(
            r.gross_pay for r in records
            if WAGE_PLANS[r.wage_plan_code].sdi and not r.exemptions.sdi
        ),
        pit_withheld=pit,
        sdi_withheld=sdi,
        ui_contributions=ui,
        ett_contributions=ett,
        subtotal=sum_cents([ui, ett, sdi, pit]),
        due_date=deadlines["due"],
        delinquent_date=deadlines["delinquent"],
    )


def calc_de9c(records: Iterable[FilingRecord], year: int, quarter: int) -> De9cFigures:
    """Build the DE 9C wage detail for one quarter.

    Monthly employee counts use the pay period end date; periods ending
    outside the quarter are not counted.
    """
    records = _california_records(check_records_in_quarter(records, year, quarter))
    start, end = quarter_dates(year, quarter)

    by_employee: Dict[str, List[FilingRecord]] = defaultdict(list)
    month_sets = [set(), set(), set()]
    for record in records:
        by_employee[record.employee_id].append(record)
        if start <= record.period_end <= end:
            month_sets[month_in_quarter(record.period_end)].add(record.employee_id)

    rows = []
    for employee_id, employee_records in by_employee.items():
        latest = employee_records[-1]
        wages = sum_cents(r.gross_pay for r in employee_records)
        rows.append(De9cEmployeeRow(
            employee_id=employee_id,
            first_name=latest.first_name,
            last_name=latest.last_name,
            subject_wages=wages,
            pit_wages=wages,
            pit_withheld=sum_cents(r.taxes.employee.state_income_tax for r in employee_records),
            wage_plan_code=latest.wage_plan_code,
        ))
    rows.sort(key=lambda row: (row.last_name, row.first_name))

    return De9cFigures(
        year=year,
        quarter=quarter,
        employees=rows,
        month1_count=len(month_sets[0]),
        month2_count=len(month_sets[1]),
        month3_count=len(month_sets[2]),
        total_subject_wages=sum_cents(row.subject_wages for row in rows),
        total_pit_wages=sum_cents(row.pit_wages for row in rows),
        total_pit_withheld=sum_cents(row.pit_withheld for row in rows),
    )
