"""Pydantic schemas for tax rules validation.

These schemas validate the tax_rules/*.yaml files and provide typed access
to the year's scalar parameters (wage bases, rates, thresholds) and its
bracket tables (federal percentage method, California DE 44 Method B).
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, model_validator

from ..schemas import FederalFilingStatus


AllowanceCategory = Literal[
    "single_or_dual_income",
    "married_0_or_1",
    "married_2_plus",
    "head_of_household",
]
CaliforniaSchedule = Literal["single", "married", "head_of_household"]
CaliforniaPayPeriod = Literal["biweekly", "monthly"]
FederalTableVariant = Literal["standard", "step2"]

# W-4 Step 2 checkbox -> federal table variant
STEP2_VARIANT: Dict[bool, FederalTableVariant] = {False: "standard", True: "step2"}

# DE 44 Table 5 has one schedule per filing status; both married
# allowance categories share the married schedule.
CATEGORY_SCHEDULE: Dict[str, CaliforniaSchedule] = {
    "single_or_dual_income": "single",
    "married_0_or_1": "married",
    "married_2_plus": "married",
    "head_of_household": "head_of_household",
}


class NoMatchingBracket(Exception):
    """Raised when an amount falls outside every row of a bracket table."""
    pass


# =============================================================================
# Bracket tables
# =============================================================================


class BracketRow(BaseModel):
    """One bracket: tax = base_tax + (amount - min) * rate on [min, max)."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    min: float = Field(..., ge=0, description="Lower bound (inclusive)")
    max: Optional[float] = Field(default=None, description="Upper bound (exclusive), None if unbounded")
    base_tax: float = Field(..., ge=0, description="Tax at the lower bound")
    rate: float = Field(..., ge=0, le=1, description="Marginal rate as decimal")

    def contains(self, amount: float) -> bool:
        return amount >= self.min and (self.max is None or amount < self.max)

    def tax_on(self, amount: float) -> float:
        return self.base_tax + (amount - self.min) * self.rate


class BracketTable(RootModel[List[BracketRow]]):
    """Ordered, contiguous bracket rows; the last row is unbounded."""

    @model_validator(mode="after")
    def check_contiguous(self) -> "BracketTable":
        rows = self.root
        if not rows:
            raise ValueError("bracket table has no rows")
        if rows[0].min != 0:
            raise ValueError(f"first bracket must start at 0, got {rows[0].min}")
        for row, following in zip(rows, rows[1:]):
            if row.max is None:
                raise ValueError(f"only the last bracket may be unbounded (row starting at {row.min})")
            if row.max <= row.min:
                raise ValueError(f"bracket [{row.min}, {row.max}) is empty")
            if following.min != row.max:
                raise ValueError(f"gap or overlap between {row.max} and {following.min}")
        if rows[-1].max is not None:
            raise ValueError(f"last bracket must be unbounded, ends at {rows[-1].max}")
        return self

    @property
    def rows(self) -> List[BracketRow]:
        return self.root

    def find(self, amount: float) -> BracketRow:
        """Return the single row whose [min, max) contains amount."""
        for row in self.root:
            if row.contains(amount):
                return row
        raise NoMatchingBracket(f"No matching tax bracket found for amount {amount}")

    def tax_on(self, amount: float) -> float:
        return self.find(amount).tax_on(amount)


# =============================================================================
# Scalar parameters
# =============================================================================


class FederalRates(BaseModel):
    """Federal wage bases, rates and W-4 standard deductions."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    social_security_wage_base: float = Field(..., gt=0)
    social_security_rate: float = Field(..., ge=0, le=1, description="Employee (and employer) SS rate")
    medicare_rate: float = Field(..., ge=0, le=1)
    additional_medicare_rate: float = Field(..., ge=0, le=1)
    additional_medicare_threshold: float = Field(..., ge=0)
    futa_limit: float = Field(..., gt=0, description="FUTA wage base per employee")
    futa_gross_rate: float = Field(..., ge=0, le=1)
    futa_credit_rate: float = Field(..., ge=0, le=1, description="Maximum credit for state unemployment tax")
    futa_net_rate: float = Field(..., ge=0, le=1)
    futa_quarterly_deposit_threshold: float = Field(..., ge=0)
    standard_deduction: Dict[FederalFilingStatus, float] = Field(
        ..., description="Worksheet 1A line 1g amount by filing status (Step 2 not checked)"
    )


class CaliforniaRates(BaseModel):
    """California payroll tax rates and wage bases."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    sdi_rate: float = Field(..., ge=0, le=1)
    sui_wage_base: float = Field(..., gt=0)
    ett_wage_base: float = Field(..., gt=0)
    futa_credit_reduction_rate: float = Field(..., ge=0, le=1)


class TaxYearParameters(BaseModel):
    """Scalar constants for one tax year. Immutable once published."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int
    federal: FederalRates
    california: CaliforniaRates


# =============================================================================
# Bracket table sets
# =============================================================================


class FederalTables(RootModel[Dict[FederalFilingStatus, Dict[FederalTableVariant, BracketTable]]]):
    """Percentage method tables keyed by filing status x Step 2 variant."""

    def select(self, filing_status: str, step2_checked: bool) -> BracketTable:
        try:
            return self.root[filing_status][STEP2_VARIANT[bool(step2_checked)]]
        except KeyError:
            raise NoMatchingBracket(
                f"No federal table for filing status '{filing_status}' "
                f"({STEP2_VARIANT[bool(step2_checked)]})"
            )


class CategoryAmounts(BaseModel):
    """One amount per DE 4 allowance category (DE 44 Tables 1 and 3)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    single_or_dual_income: float = Field(..., ge=0)
    married_0_or_1: float = Field(..., ge=0)
    married_2_plus: float = Field(..., ge=0)
    head_of_household: float = Field(..., ge=0)

    def for_category(self, category: str) -> float:
        return getattr(self, category)


def _allowance_amount(table: Dict[int, float], allowances: int) -> float:
    """Look up a per-allowance-count amount (DE 44 Tables 2 and 4).

    Counts above the largest row use count x the one-allowance amount.
    Counts with no row otherwise contribute nothing.
    """
    if allowances in table:
        return table[allowances]
    if table and allowances > max(table) and 1 in table:
        return allowances * table[1]
    return 0.0


class CaliforniaTables(BaseModel):
    """EDD DE 44 Method B tables, keyed by pay period."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    low_income_exemption: Dict[CaliforniaPayPeriod, CategoryAmounts] = Field(..., description="Table 1")
    estimated_deduction: Dict[CaliforniaPayPeriod, Dict[int, float]] = Field(..., description="Table 2")
    standard_deduction: Dict[CaliforniaPayPeriod, CategoryAmounts] = Field(..., description="Table 3")
    exemption_allowance: Dict[CaliforniaPayPeriod, Dict[int, float]] = Field(..., description="Table 4")
    tax_brackets: Dict[CaliforniaPayPeriod, Dict[CaliforniaSchedule, BracketTable]] = Field(
        ..., description="Table 5"
    )

    def low_income_threshold(self, pay_period: str, category: str) -> float:
        return self.low_income_exemption[pay_period].for_category(category)

    def estimated_deduction_amount(self, pay_period: str, allowances: int) -> float:
        return _allowance_amount(self.estimated_deduction[pay_period], allowances)

    def standard_deduction_amount(self, pay_period: str, category: str) -> float:
        return self.standard_deduction[pay_period].for_category(category)

    def exemption_allowance_amount(self, pay_period: str, allowances: int) -> float:
        return _allowance_amount(self.exemption_allowance[pay_period], allowances)

    def brackets(self, pay_period: str, category: str) -> BracketTable:
        return self.tax_brackets[pay_period][CATEGORY_SCHEDULE[category]]


# =============================================================================
# Whole year
# =============================================================================


class TaxYearRules(BaseModel):
    """Complete rules for a year, as loaded from tax_rules/<year>.yaml."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int = Field(..., ge=1900)
    federal: FederalRates
    california: CaliforniaRates
    federal_tables: FederalTables
    california_tables: Optional[CaliforniaTables] = Field(
        default=None, description="None when the year's DE 44 tables are not published"
    )

    @property
    def parameters(self) -> TaxYearParameters:
        return TaxYearParameters(year=self.year, federal=self.federal, california=self.california)
