"""Wage-base capped payroll taxes.

Social Security, Medicare (+ Additional Medicare), FUTA, CA SUI, ETT and SDI.
Each is a pure function of the current period's wages and the employee's
wages earlier in the same calendar year. Caps are annual, never quarterly.
"""

from typing import Dict, NamedTuple, Optional

from ..rounding import require_amount, round_to_cents
from .schemas import TaxYearParameters


class WagePlan(NamedTuple):
    """Which CA employment taxes a DE 4 wage plan code pays."""

    sui_ett: bool
    sdi: bool


WAGE_PLANS: Dict[str, WagePlan] = {
    "A": WagePlan(sui_ett=True, sdi=False),   # Agricultural
    "S": WagePlan(sui_ett=True, sdi=True),    # Standard
    "J": WagePlan(sui_ett=True, sdi=True),    # Household
    "P": WagePlan(sui_ett=False, sdi=True),   # Personal services
}


def capped_taxable_wage(wage_base: float, prior_ytd_wages: float, current_wage: float) -> float:
    """Portion of the current wage still under the annual wage base.

    clamp(wage_base - prior_ytd_wages, 0, current_wage)
    """
    return min(current_wage, max(0.0, wage_base - prior_ytd_wages))


def calc_capped_tax(current_wage: float, prior_ytd_wages: float, rate: float, wage_base: float) -> float:
    current_wage = require_amount("current_wage", current_wage)
    prior_ytd_wages = require_amount("prior_ytd_wages", prior_ytd_wages)
    return round_to_cents(capped_taxable_wage(wage_base, prior_ytd_wages, current_wage) * rate)


def calc_social_security(current_wage: float, prior_ytd_wages: float, params: TaxYearParameters) -> float:
    """Social Security tax for one share (employee or employer match).

    Example:
        10,000 current, 170,000 prior, 2025 base 176,100 -> 6,100 x 6.2% = 378.20
    """
    federal = params.federal
    return calc_capped_tax(
        current_wage, prior_ytd_wages, federal.social_security_rate, federal.social_security_wage_base
    )


def calc_medicare(current_wage: float, params: TaxYearParameters) -> float:
    """Medicare tax for one share. No wage base."""
    current_wage = require_amount("current_wage", current_wage)
    return round_to_cents(current_wage * params.federal.medicare_rate)


def additional_medicare_wages(current_wage: float, prior_ytd_wages: float, threshold: float) -> float:
    """Slice of the current wage above the Additional Medicare threshold."""
    return max(0.0, prior_ytd_wages + current_wage - threshold) - max(0.0, prior_ytd_wages - threshold)


def calc_additional_medicare(current_wage: float, prior_ytd_wages: float, params: TaxYearParameters) -> float:
    """Additional Medicare tax withheld from the employee (no employer match)."""
    current_wage = require_amount("current_wage", current_wage)
    prior_ytd_wages = require_amount("prior_ytd_wages", prior_ytd_wages)
    federal = params.federal
    wages = additional_medicare_wages(current_wage, prior_ytd_wages, federal.additional_medicare_threshold)
    return round_to_cents(wages * federal.additional_medicare_rate)


def calc_futa(current_wage: float, prior_ytd_wages: float, params: TaxYearParameters) -> float:
    """FUTA at the net rate (after the full state credit).

    Example:
        3,000 current, 6,000 prior, 7,000 limit -> 1,000 x 0.6% = 6.00
    """
    federal = params.federal
    return calc_capped_tax(current_wage, prior_ytd_wages, federal.futa_net_rate, federal.futa_limit)


def calc_sui(current_wage: float, prior_ytd_wages: float, ui_rate: float, params: TaxYearParameters) -> float:
    """CA unemployment insurance at the employer's assigned rate."""
    return calc_capped_tax(current_wage, prior_ytd_wages, ui_rate, params.california.sui_wage_base)


def calc_ett(current_wage: float, prior_ytd_wages: float, ett_rate: float, params: TaxYearParameters) -> float:
    """CA employment training tax at the employer's assigned rate."""
    return calc_capped_tax(current_wage, prior_ytd_wages, ett_rate, params.california.ett_wage_base)


def calc_sdi(current_wage: float, params: TaxYearParameters) -> float:
    """CA SDI. Uncapped: the flat rate applies to all wages."""
    current_wage = require_amount("current_wage", current_wage)
    return round_to_cents(current_wage * params.california.sdi_rate)


def calc_ca_state_taxes(
    wage_plan_code: Optional[str],
    current_wage: float,
    prior_ytd_wages: float,
    ui_rate: float,
    ett_rate: float,
    params: TaxYearParameters,
) -> Dict[str, float]:
    """SUI, ETT and SDI as gated by the wage plan code.

    Args:
        wage_plan_code: 'A', 'S', 'J' or 'P'; None (no CA election) pays nothing
        current_wage: Current period wages
        prior_ytd_wages: Wages earlier in the year
        ui_rate: Company UI rate
        ett_rate: Company ETT rate
        params: Year parameters

    Returns:
        Dict with sui, ett, sdi
    """
    if wage_plan_code is None:
        return {"sui": 0.0, "ett": 0.0, "sdi": 0.0}
    try:
        plan = WAGE_PLANS[wage_plan_code]
    except KeyError:
        raise ValueError(f"Unknown wage plan code: {wage_plan_code}")

    return {
        "sui": calc_sui(current_wage, prior_ytd_wages, ui_rate, params) if plan.sui_ett else 0.0,
        "ett": calc_ett(current_wage, prior_ytd_wages, ett_rate, params) if plan.sui_ett else 0.0,
        "sdi": calc_sdi(current_wage, params) if plan.sdi else 0.0,
    }
