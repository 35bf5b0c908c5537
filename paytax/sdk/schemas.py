"""Pydantic schemas for pay-tax inputs and results.

All schemas use extra='forbid' to reject unknown fields and reject NaN or
infinite amounts, so bad input fails at the boundary instead of inside a
calculator. Every model is frozen: elections are per-period snapshots and
results are never mutated after creation.
"""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .rounding import round_to_cents


FederalFilingStatus = Literal[
    "single_or_married_separately",
    "married_jointly",
    "head_of_household",
    "exempt",
]
StateFilingStatus = Literal[
    "single_or_married_multiple_incomes",
    "married_one_income",
    "head_of_household",
    "do_not_withhold",
]
PayFrequency = Literal["weekly", "biweekly", "semimonthly", "monthly"]
# A: agricultural, S: standard, J: household, P: personal services
WagePlanCode = Literal["A", "S", "J", "P"]


def _frozen_config() -> ConfigDict:
    return ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)


# =============================================================================
# Elections
# =============================================================================


class FederalElection(BaseModel):
    """Form W-4 (2020 and later) snapshot for one pay period."""

    model_config = _frozen_config()

    filing_status: FederalFilingStatus = Field(..., description="Step 1(c)")
    multiple_jobs: bool = Field(default=False, description="Step 2(c) checkbox")
    dependents_deduction: float = Field(default=0, ge=0, description="Step 3 annual credit")
    other_income: float = Field(default=0, ge=0, description="Step 4(a) annual other income")
    deductions: float = Field(default=0, ge=0, description="Step 4(b) annual deductions")
    extra_withholding: float = Field(default=0, ge=0, description="Step 4(c) per period")


class StateElection(BaseModel):
    """California DE 4 snapshot for one pay period."""

    model_config = _frozen_config()

    filing_status: StateFilingStatus
    regular_allowances: int = Field(default=0, ge=0, description="Worksheet A allowances")
    estimated_deduction_allowances: int = Field(default=0, ge=0, description="Worksheet B allowances")
    additional_withholding: float = Field(default=0, ge=0, description="Worksheet C, per period")
    wage_plan_code: WagePlanCode = Field(default="S", description="Determines which of SUI/ETT/SDI apply")
    exempt: bool = Field(default=False, description="Exempt from CA income tax withholding only")


class TaxExemptions(BaseModel):
    """Employee-level exemptions; each zeroes its calculator."""

    model_config = _frozen_config()

    futa: bool = False
    fica: bool = False
    sui_ett: bool = False
    sdi: bool = False


class CompanyRates(BaseModel):
    """Employer-specific CA rates assigned by the EDD."""

    model_config = _frozen_config()

    ui_rate: float = Field(default=0.034, ge=0, le=1)
    ett_rate: float = Field(default=0.001, ge=0, le=1)


# =============================================================================
# Period results
# =============================================================================


class EmployeeTaxes(BaseModel):
    """Taxes withheld from the employee for one period."""

    model_config = _frozen_config()

    federal_income_tax: float = 0
    social_security: float = 0
    medicare: float = Field(default=0, description="Includes additional Medicare")
    additional_medicare: float = Field(default=0, description="Additional Medicare part of medicare")
    state_income_tax: float = 0
    sdi: float = 0
    total: float = 0


class EmployerTaxes(BaseModel):
    """Employer-side taxes for one period."""

    model_config = _frozen_config()

    social_security: float = 0
    medicare: float = 0
    futa: float = 0
    sui: float = 0
    ett: float = 0
    total: float = 0


class PeriodTaxResult(BaseModel):
    """Computed taxes for one employee and one pay period."""

    model_config = _frozen_config()

    year: int = Field(..., description="Tax year of the pay period")
    rates_year: int = Field(..., description="Year whose published rates were applied")
    gross_pay: float = Field(..., ge=0)
    prior_ytd_wages: float = Field(default=0, ge=0)
    employee: EmployeeTaxes
    employer: EmployerTaxes
    net_pay: float


class YtdTotals(BaseModel):
    """Running totals for one employee and year.

    gross is the prior-wages input for the next period's wage-base caps.
    """

    model_config = _frozen_config()

    gross: float = Field(default=0, ge=0)
    federal_income_tax: float = 0
    social_security: float = 0
    medicare: float = 0
    state_income_tax: float = 0
    sdi: float = 0
    employee_total: float = 0
    net_pay: float = 0
    employer_social_security: float = 0
    employer_medicare: float = 0
    futa: float = 0
    sui: float = 0
    ett: float = 0
    employer_total: float = 0

    def plus(self, result: PeriodTaxResult) -> "YtdTotals":
        """Return the totals after folding in one approved period."""
        employee, employer = result.employee, result.employer
        additions = {
            "gross": result.gross_pay,
            "federal_income_tax": employee.federal_income_tax,
            "social_security": employee.social_security,
            "medicare": employee.medicare,
            "state_income_tax": employee.state_income_tax,
            "sdi": employee.sdi,
            "employee_total": employee.total,
            "net_pay": result.net_pay,
            "employer_social_security": employer.social_security,
            "employer_medicare": employer.medicare,
            "futa": employer.futa,
            "sui": employer.sui,
            "ett": employer.ett,
            "employer_total": employer.total,
        }
        return YtdTotals(**{
            key: round_to_cents(getattr(self, key) + amount)
            for key, amount in additions.items()
        })


# =============================================================================
# Payroll runs
# =============================================================================


class PayrollRunEntry(BaseModel):
    """One employee's pay for one period, as submitted to a payroll run."""

    model_config = _frozen_config()

    employee_id: str = Field(..., min_length=1)
    first_name: str = ""
    last_name: str = ""
    pay_date: date
    period_end: Optional[date] = Field(default=None, description="Defaults to pay_date")
    pay_frequency: PayFrequency
    gross_pay: float = Field(..., ge=0)
    federal: Optional[FederalElection] = None
    state: Optional[StateElection] = None
    exemptions: TaxExemptions = Field(default_factory=TaxExemptions)

    @property
    def year(self) -> int:
        return self.pay_date.year


class FilingRecord(BaseModel):
    """An approved period result with the context filing aggregators need."""

    model_config = _frozen_config()

    employee_id: str
    first_name: str = ""
    last_name: str = ""
    pay_date: date
    period_end: date
    wage_plan_code: Optional[WagePlanCode] = Field(
        default=None, description="None when the employee has no CA election"
    )
    exemptions: TaxExemptions = Field(default_factory=TaxExemptions)
    taxes: PeriodTaxResult

    @model_validator(mode="after")
    def check_year(self) -> "FilingRecord":
        if self.pay_date.year != self.taxes.year:
            raise ValueError(
                f"pay date {self.pay_date} is outside tax year {self.taxes.year}"
            )
        return self

    @property
    def gross_pay(self) -> float:
        return self.taxes.gross_pay

    @property
    def prior_ytd_wages(self) -> float:
        return self.taxes.prior_ytd_wages

