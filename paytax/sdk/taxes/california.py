"""California income tax withholding.

Implements EDD DE 44 Method B (exact calculation method) from a DE 4
election:

1. Map filing status and allowances to an allowance category
2. Low-income exemption test (Table 1)
3. Subtract the estimated deduction (Table 2) and standard deduction (Table 3)
4. Tax from the bracket schedule (Table 5)
5. Subtract the exemption allowance credit (Table 4), floor at 0
6. Add additional withholding
"""

import logging
from typing import Optional

from ..rounding import require_amount, round_to_cents
from ..schemas import StateElection
from .schemas import AllowanceCategory, CaliforniaTables
from .withholding import UnsupportedPayFrequency

logger = logging.getLogger(__name__)

CA_PAY_FREQUENCIES = ("monthly", "biweekly")


def allowance_category(filing_status: str, regular_allowances: int) -> Optional[AllowanceCategory]:
    """Map a DE 4 filing status to a DE 44 allowance category.

    Returns:
        Allowance category, or None for 'do_not_withhold'
    """
    if filing_status == "single_or_married_multiple_incomes":
        return "single_or_dual_income"
    if filing_status == "married_one_income":
        return "married_2_plus" if regular_allowances >= 2 else "married_0_or_1"
    if filing_status == "head_of_household":
        return "head_of_household"
    if filing_status == "do_not_withhold":
        return None
    raise ValueError(f"Unknown California filing status: {filing_status}")


def calc_california_withholding(
    gross_pay: float,
    pay_frequency: str,
    election: StateElection,
    tables: CaliforniaTables,
) -> float:
    """Calculate California PIT withholding for one pay period.

    Args:
        gross_pay: Gross pay for the period
        pay_frequency: 'monthly' or 'biweekly'
        election: DE 4 snapshot for the period
        tables: Year's DE 44 tables

    Returns:
        Withholding for the period, rounded to the cent

    Raises:
        UnsupportedPayFrequency: For any frequency other than monthly/biweekly
    """
    gross_pay = require_amount("gross_pay", gross_pay)
    if pay_frequency not in CA_PAY_FREQUENCIES:
        raise UnsupportedPayFrequency(
            f"California withholding supports monthly and biweekly pay only, got '{pay_frequency}'"
        )

    if election.exempt:
        return 0.0
    category = allowance_category(election.filing_status, election.regular_allowances)
    if category is None:
        return 0.0

    if gross_pay <= tables.low_income_threshold(pay_frequency, category):
        logger.debug(f"CA: {gross_pay:.2f} at or below low-income exemption for {category}")
        return 0.0

    taxable = (
        gross_pay
        - tables.estimated_deduction_amount(pay_frequency, election.estimated_deduction_allowances)
        - tables.standard_deduction_amount(pay_frequency, category)
    )

    # Taxable income below zero carries no tentative tax
    tentative = tables.brackets(pay_frequency, category).tax_on(taxable) if taxable > 0 else 0.0

    credit = tables.exemption_allowance_amount(pay_frequency, election.regular_allowances)
    withholding = max(0.0, tentative - credit) + election.additional_withholding

    logger.debug(
        f"CA: category={category} taxable={taxable:.2f} "
        f"tentative={tentative:.4f} credit={credit:.2f}"
    )
    return round_to_cents(withholding)
