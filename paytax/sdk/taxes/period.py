"""Per-period tax combiner.

Runs the federal and California withholding engines and the wage-base
calculators for one employee and one pay period, and combines them into a
PeriodTaxResult.
"""

import logging
from typing import Optional

from ..rounding import require_amount, round_to_cents, sum_cents
from ..schemas import (
    CompanyRates,
    EmployeeTaxes,
    EmployerTaxes,
    FederalElection,
    PeriodTaxResult,
    StateElection,
    TaxExemptions,
)
from .california import calc_california_withholding
from .registry import TaxRegistry, load_registry
from .statutory import (
    calc_additional_medicare,
    calc_ca_state_taxes,
    calc_futa,
    calc_medicare,
    calc_social_security,
)
from .withholding import calc_federal_withholding, get_pay_periods

logger = logging.getLogger(__name__)


def _withholds_california_pit(state: Optional[StateElection]) -> bool:
    return state is not None and not state.exempt and state.filing_status != "do_not_withhold"


def calc_period_taxes(
    gross_pay: float,
    pay_frequency: str,
    year: int,
    prior_ytd_wages: float = 0,
    federal: Optional[FederalElection] = None,
    state: Optional[StateElection] = None,
    exemptions: Optional[TaxExemptions] = None,
    company_rates: Optional[CompanyRates] = None,
    registry: Optional[TaxRegistry] = None,
    fallback_to_latest_year: bool = False,
    apply_cushion: bool = True,
) -> PeriodTaxResult:
    """Calculate all employee and employer taxes for one pay period.

    Args:
        gross_pay: Gross pay for the period
        pay_frequency: 'weekly', 'biweekly', 'semimonthly' or 'monthly'
        year: Tax year of the pay date
        prior_ytd_wages: Employee's gross wages earlier in the same year
        federal: W-4 election (None: no federal income tax withheld)
        state: DE 4 election (None: no CA withholding, SUI, ETT or SDI)
        exemptions: Per-employee FUTA/FICA/SUI+ETT/SDI exemptions
        company_rates: Employer UI/ETT rates (defaults to new-employer rates)
        registry: Rate registry (defaults to the packaged rules)
        fallback_to_latest_year: Use the latest earlier year's rates when the
            year is not published (logged as a warning)
        apply_cushion: Apply the low-wage federal withholding floor

    Returns:
        PeriodTaxResult

    Raises:
        UnsupportedTaxYear: If no rates apply to the year
        UnsupportedPayFrequency: For an unknown frequency, or a CA election
            on a frequency other than monthly/biweekly
        InvalidAmountError: For negative or non-finite amounts
    """
    gross_pay = require_amount("gross_pay", gross_pay)
    prior_ytd_wages = require_amount("prior_ytd_wages", prior_ytd_wages)
    get_pay_periods(pay_frequency)

    registry = registry or load_registry()
    exemptions = exemptions or TaxExemptions()
    company_rates = company_rates or CompanyRates()

    rules = registry.get_rules(year, fallback_to_latest_year)
    params = rules.parameters

    # ===== Employee taxes =====
    federal_tax = 0.0
    if federal is not None:
        federal_tax = calc_federal_withholding(
            gross_pay, pay_frequency, federal, params, rules.federal_tables, apply_cushion=apply_cushion
        )

    if exemptions.fica:
        social_security = medicare = additional_medicare = 0.0
    else:
        social_security = calc_social_security(gross_pay, prior_ytd_wages, params)
        medicare = calc_medicare(gross_pay, params)
        additional_medicare = calc_additional_medicare(gross_pay, prior_ytd_wages, params)

    state_income_tax = 0.0
    if _withholds_california_pit(state):
        ca_tables = registry.get_state_brackets(year, fallback_to_latest_year)
        state_income_tax = calc_california_withholding(gross_pay, pay_frequency, state, ca_tables)

    ca_taxes = calc_ca_state_taxes(
        state.wage_plan_code if state is not None else None,
        gross_pay,
        prior_ytd_wages,
        company_rates.ui_rate,
        company_rates.ett_rate,
        params,
    )
    sdi = 0.0 if exemptions.sdi else ca_taxes["sdi"]

    employee = EmployeeTaxes(
        federal_income_tax=federal_tax,
        social_security=social_security,
        medicare=round_to_cents(medicare + additional_medicare),
        additional_medicare=additional_medicare,
        state_income_tax=state_income_tax,
        sdi=sdi,
        total=sum_cents([federal_tax, social_security, medicare, additional_medicare, state_income_tax, sdi]),
    )

    # ===== Employer taxes =====
    employer_futa = 0.0 if exemptions.futa else calc_futa(gross_pay, prior_ytd_wages, params)
    employer_sui = 0.0 if exemptions.sui_ett else ca_taxes["sui"]
    employer_ett = 0.0 if exemptions.sui_ett else ca_taxes["ett"]

    employer = EmployerTaxes(
        social_security=social_security,
        medicare=medicare,
        futa=employer_futa,
        sui=employer_sui,
        ett=employer_ett,
        total=sum_cents([social_security, medicare, employer_futa, employer_sui, employer_ett]),
    )

    logger.debug(
        f"Period {year} ({rules.year} rates): gross={gross_pay:.2f} "
        f"employee_total={employee.total:.2f} employer_total={employer.total:.2f}"
    )

    return PeriodTaxResult(
        year=year,
        rates_year=rules.year,
        gross_pay=gross_pay,
        prior_ytd_wages=prior_ytd_wages,
        employee=employee,
        employer=employer,
        net_pay=round_to_cents(gross_pay - employee.total),
    )
