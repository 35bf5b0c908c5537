"""filings - Quarterly and annual return figures.

Scope:
- Form 941 lines, fractions-of-cents adjustment, $100k rule, deposit schedule
- Form 940 lines, Part 5 quarterly liability, FUTA deposit requirements
- California DE 9 and DE 9C
- Quarter and due date utilities

Constraints:
- Derived, read-only views over FilingRecords
- Wage-base caps are annual; quarter figures use each employee's wages
  paid earlier in the year
"""

from .quarters import (
    de9_deadlines,
    fifteenth_due_date,
    form940_due_date,
    month_in_quarter,
    quarter_dates,
    quarter_end,
    quarter_of,
    quarter_start,
    quarterly_due_date,
    records_in_quarter,
)
from .form941 import (
    calc_form941,
    calc_fractions_of_cents,
    check_hundred_k_rule,
    classify_deposit_schedule,
    monthly_liabilities,
    split_monthly_liability,
    sum_lookback,
)
from .form940 import calc_form940, futa_deposit_requirements
from .de9 import calc_de9, calc_de9c
from .schemas import (
    De9cFigures,
    De9Figures,
    ExemptPayments,
    Form940Figures,
    Form941Figures,
    Form941Line16,
)

__all__ = [
    "de9_deadlines",
    "fifteenth_due_date",
    "form940_due_date",
    "month_in_quarter",
    "quarter_dates",
    "quarter_end",
    "quarter_of",
    "quarter_start",
    "quarterly_due_date",
    "records_in_quarter",
    "calc_form941",
    "calc_fractions_of_cents",
    "check_hundred_k_rule",
    "classify_deposit_schedule",
    "monthly_liabilities",
    "split_monthly_liability",
    "sum_lookback",
    "calc_form940",
    "futa_deposit_requirements",
    "calc_de9",
    "calc_de9c",
    "De9cFigures",
    "De9Figures",
    "ExemptPayments",
    "Form940Figures",
    "Form941Figures",
    "Form941Line16",
]
