"""Federal income tax withholding calculations.

Implements the IRS Pub 15-T Percentage Method (Worksheet 1A) for computing
FIT withholding from a W-4 election and the period's gross pay.
"""

import logging
from typing import Dict

from ..rounding import require_amount, round_to_cents
from ..schemas import FederalElection
from .schemas import FederalTables, TaxYearParameters

logger = logging.getLogger(__name__)


class UnsupportedPayFrequency(ValueError):
    """Raised for a pay frequency the calculation does not support."""
    pass


# Pay periods by frequency
PAY_PERIODS: Dict[str, int] = {
    "weekly": 52,
    "biweekly": 26,
    "semimonthly": 24,
    "monthly": 12,
}

# Low-wage floor: a raw result at or below CUSHION_CAP becomes
# max(raw, min(gross * CUSHION_RATE, CUSHION_CAP)).
CUSHION_CAP = 10.0
CUSHION_RATE = 0.01


def get_pay_periods(frequency: str) -> int:
    """Get number of pay periods per year for a frequency."""
    try:
        return PAY_PERIODS[frequency]
    except KeyError:
        raise UnsupportedPayFrequency(
            f"Unsupported pay frequency '{frequency}' (expected one of: {', '.join(PAY_PERIODS)})"
        )


def low_wage_floor(raw: float, gross_pay: float) -> float:
    """Apply the low-wage withholding floor to a raw per-period amount."""
    if raw > CUSHION_CAP:
        return raw
    return max(raw, min(gross_pay * CUSHION_RATE, CUSHION_CAP))


def calc_federal_withholding(
    gross_pay: float,
    pay_frequency: str,
    election: FederalElection,
    params: TaxYearParameters,
    tables: FederalTables,
    apply_cushion: bool = True,
) -> float:
    """Calculate federal withholding for one pay period.

    Args:
        gross_pay: Gross pay for the period
        pay_frequency: 'weekly', 'biweekly', 'semimonthly' or 'monthly'
        election: W-4 snapshot for the period
        params: Year parameters (standard deduction by filing status)
        tables: Year's percentage method tables
        apply_cushion: Apply the low-wage floor (False gives the
            unmodified IRS result)

    Returns:
        Withholding for the period, rounded to the cent

    Example:
        2025, single, biweekly, gross 2000 -> 161.60
    """
    gross_pay = require_amount("gross_pay", gross_pay)
    periods = get_pay_periods(pay_frequency)

    if election.filing_status == "exempt":
        return 0.0

    # Step 1: Annualize wages, add Step 4(a)
    annual = gross_pay * periods + election.other_income

    # Step 2: Subtract Step 4(b) and, without Step 2, the standard deduction
    deduction = election.deductions
    if not election.multiple_jobs:
        deduction += params.federal.standard_deduction.get(election.filing_status, 0.0)
    adjusted_annual = max(0.0, annual - deduction)

    # Step 3: Tentative annual withholding from the (status, Step 2) table
    table = tables.select(election.filing_status, election.multiple_jobs)
    tentative_annual = table.tax_on(adjusted_annual)

    # Step 4: Per period, less prorated Step 3 credits
    tentative = tentative_annual / periods
    withholding = max(0.0, tentative - election.dependents_deduction / periods)

    # Step 5: Step 4(c) extra withholding
    withholding += election.extra_withholding

    logger.debug(
        f"FIT: annual={annual:.2f} adjusted={adjusted_annual:.2f} "
        f"tentative_annual={tentative_annual:.2f} per_period={withholding:.4f}"
    )

    if apply_cushion:
        withholding = low_wage_floor(withholding, gross_pay)

    return round_to_cents(withholding)
