"""Pay Tax SDK - Payroll tax computation engine."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_company_rates,
    get_tax_rules_dir_override,
)

from .rounding import InvalidAmountError, require_amount, round_to_cents

from .schemas import (
    CompanyRates,
    EmployeeTaxes,
    EmployerTaxes,
    FederalElection,
    FilingRecord,
    PayrollRunEntry,
    PeriodTaxResult,
    StateElection,
    TaxExemptions,
    YtdTotals,
)

from .taxes import (
    NoMatchingBracket,
    TaxRegistry,
    UnsupportedPayFrequency,
    UnsupportedTaxYear,
    calc_california_withholding,
    calc_federal_withholding,
    calc_period_taxes,
    load_registry,
)

from .payroll import (
    DuplicatePayrollEntry,
    calc_gross_pay,
    calc_hourly_rate,
    calc_hours,
    calc_payroll_history,
    calc_payroll_run,
)

from . import filings

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_company_rates",
    "get_tax_rules_dir_override",
    # Rounding
    "InvalidAmountError",
    "require_amount",
    "round_to_cents",
    # Data model
    "CompanyRates",
    "EmployeeTaxes",
    "EmployerTaxes",
    "FederalElection",
    "FilingRecord",
    "PayrollRunEntry",
    "PeriodTaxResult",
    "StateElection",
    "TaxExemptions",
    "YtdTotals",
    # Taxes
    "NoMatchingBracket",
    "TaxRegistry",
    "UnsupportedPayFrequency",
    "UnsupportedTaxYear",
    "calc_california_withholding",
    "calc_federal_withholding",
    "calc_period_taxes",
    "load_registry",
    # Payroll
    "DuplicatePayrollEntry",
    "calc_gross_pay",
    "calc_hourly_rate",
    "calc_hours",
    "calc_payroll_history",
    "calc_payroll_run",
    # Filings
    "filings",
]
