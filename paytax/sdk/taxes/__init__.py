"""taxes - Tax rates, withholding engines and per-period combination.

Scope:
- Year-keyed rate and bracket registry (tax_rules/{year}.yaml)
- Federal income tax withholding (IRS Pub 15-T percentage method)
- California income tax withholding (EDD DE 44 Method B)
- Wage-base capped taxes: SS, Medicare, Additional Medicare, FUTA, SUI, ETT, SDI
- Per-period combination into PeriodTaxResult

Constraints:
- Pure calculation - no I/O beyond loading rule files into a registry
- Calculators receive the registry or year parameters explicitly
- Every returned amount is rounded to the cent

Modules:
- schemas: Rule file schemas (brackets, year parameters, table sets)
- registry: TaxRegistry, load_registry, UnsupportedTaxYear
- withholding: Federal withholding, pay periods
- california: California withholding
- statutory: Wage-base capped taxes and wage plan gating
- period: calc_period_taxes

Usage:
    from paytax.sdk.taxes import calc_period_taxes, load_registry

    registry = load_registry()
    result = calc_period_taxes(2000, "biweekly", 2025, federal=election, registry=registry)
"""

from .schemas import (
    BracketRow,
    BracketTable,
    CaliforniaTables,
    FederalTables,
    NoMatchingBracket,
    TaxYearParameters,
    TaxYearRules,
)
from .registry import PACKAGED_RULES_DIR, TaxRegistry, UnsupportedTaxYear, load_registry, load_rules_file
from .withholding import PAY_PERIODS, UnsupportedPayFrequency, calc_federal_withholding, get_pay_periods
from .california import allowance_category, calc_california_withholding
from .statutory import (
    WAGE_PLANS,
    calc_additional_medicare,
    calc_ca_state_taxes,
    calc_ett,
    calc_futa,
    calc_medicare,
    calc_sdi,
    calc_social_security,
    calc_sui,
    capped_taxable_wage,
)
from .period import calc_period_taxes

__all__ = [
    # Rules
    "BracketRow",
    "BracketTable",
    "CaliforniaTables",
    "FederalTables",
    "NoMatchingBracket",
    "TaxYearParameters",
    "TaxYearRules",
    "PACKAGED_RULES_DIR",
    "TaxRegistry",
    "UnsupportedTaxYear",
    "load_registry",
    "load_rules_file",
    # Withholding
    "PAY_PERIODS",
    "UnsupportedPayFrequency",
    "calc_federal_withholding",
    "get_pay_periods",
    "allowance_category",
    "calc_california_withholding",
    # Wage-base taxes
    "WAGE_PLANS",
    "calc_additional_medicare",
    "calc_ca_state_taxes",
    "calc_ett",
    "calc_futa",
    "calc_medicare",
    "calc_sdi",
    "calc_social_security",
    "calc_sui",
    "capped_taxable_wage",
    # Period
    "calc_period_taxes",
]
