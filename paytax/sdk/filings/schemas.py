"""Pydantic schemas for filing figures (Form 941, Form 940, DE 9, DE 9C).

Figures are derived, read-only views over a set of FilingRecords.
"""

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

DepositSchedule = Literal["de_minimis", "monthly", "semiweekly"]


def _figures_config() -> ConfigDict:
    return ConfigDict(extra="forbid", frozen=True)


# =============================================================================
# Form 941
# =============================================================================


class MonthlyLiability(BaseModel):
    """Line 16 box 2: liability by month of the quarter."""

    model_config = _figures_config()

    month1: float
    month2: float
    month3: float
    total: float


class Form941Line16(BaseModel):
    """Line 16 deposit schedule and liability breakdown."""

    model_config = _figures_config()

    deposit_schedule: DepositSchedule
    hundred_k_rule_triggered: bool = False
    monthly_liability: Optional[MonthlyLiability] = Field(
        default=None, description="Monthly depositors only"
    )
    schedule_b_total: Optional[float] = Field(
        default=None, description="Semiweekly depositors only (Schedule B)"
    )

    @property
    def is_semiweekly_depositor(self) -> bool:
        return self.deposit_schedule == "semiweekly"


class Form941Figures(BaseModel):
    """Employer's Quarterly Federal Tax Return lines."""

    model_config = _figures_config()

    year: int
    quarter: int = Field(..., ge=1, le=4)
    employee_count: int = Field(..., ge=0, description="Line 1")
    line2_wages: float
    line3_federal_income_tax: float
    line5a_social_security_wages: float
    line5a_social_security_tax: float
    line5c_medicare_wages: float
    line5c_medicare_tax: float
    line5d_additional_medicare_wages: float
    line5d_additional_medicare_tax: float
    line5e_total_social_security_medicare: float
    line6_total_before_adjustments: float
    line7_fractions_of_cents: float
    line10_total_after_adjustments: float
    line12_total_after_credits: float
    line13_deposits: float
    line14_balance_due: float
    line15_overpayment: float
    line16: Form941Line16
    due_date: date


# =============================================================================
# Form 940
# =============================================================================


class ExemptPayments(BaseModel):
    """Line 4 payments exempt from FUTA."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    fringe: float = Field(default=0, ge=0)
    retirement: float = Field(default=0, ge=0)
    dependent_care: float = Field(default=0, ge=0)
    other: float = Field(default=0, ge=0)


class QuarterlyFutaLiability(BaseModel):
    """Part 5 liability by quarter; sums to line 12."""

    model_config = _figures_config()

    q1: float = 0
    q2: float = 0
    q3: float = 0
    q4: float = 0
    total: float = 0

    def for_quarter(self, quarter: int) -> float:
        return getattr(self, f"q{quarter}")


class FutaDepositRequirement(BaseModel):
    """Whether undeposited FUTA at a quarter end must be deposited."""

    model_config = _figures_config()

    quarter: int = Field(..., ge=1, le=4)
    liability: float
    accumulated: float = Field(..., description="Undeposited FUTA at quarter end")
    deposit_required: bool
    due_date: date


class Form940Figures(BaseModel):
    """Employer's Annual Federal Unemployment (FUTA) Tax Return lines."""

    model_config = _figures_config()

    year: int
    line3_total_payments: float
    line4_exempt_payments: ExemptPayments
    line4_total: float
    line5_payments_exceeding_limit: float
    line6_subtotal: float
    line7_taxable_futa_wages: float
    line8_futa_tax_before_adjustments: float
    line9_adjustment: float
    line10_adjustment: float
    line11_credit_reduction: float
    line12_total_futa_tax: float
    line13_deposited: float
    line14_balance_due: float
    line15_overpayment: float
    part5_required: bool
    quarterly_liability: QuarterlyFutaLiability
    due_date: date


# =============================================================================
# California DE 9 / DE 9C
# =============================================================================


class De9Figures(BaseModel):
    """Quarterly Contribution Return and Report of Wages."""

    model_config = _figures_config()

    year: int
    quarter: int = Field(..., ge=1, le=4)
    subject_wages: float
    ui_taxable_wages: float
    sdi_taxable_wages: float
    pit_withheld: float
    sdi_withheld: float
    ui_contributions: float
    ett_contributions: float
    subtotal: float
    due_date: date
    delinquent_date: date


class De9cEmployeeRow(BaseModel):
    model_config = _figures_config()

    employee_id: str
    first_name: str
    last_name: str
    subject_wages: float
    pit_wages: float
    pit_withheld: float
    wage_plan_code: str


class De9cFigures(BaseModel):
    """Quarterly Contribution Return and Report of Wages (Continuation)."""

    model_config = _figures_config()

    year: int
    quarter: int = Field(..., ge=1, le=4)
    employees: List[De9cEmployeeRow]
    month1_count: int = 0
    month2_count: int = 0
    month3_count: int = 0
    total_subject_wages: float = 0
    total_pit_wages: float = 0
    total_pit_withheld: float = 0

    @model_validator(mode="after")
    def check_sorted(self) -> "De9cFigures":
        keys = [(e.last_name, e.first_name) for e in self.employees]
        if keys != sorted(keys):
            raise ValueError("DE 9C employees must be sorted by last name, then first name")
        return self
