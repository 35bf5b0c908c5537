"""Tests for federal income tax withholding (percentage method)."""

import pytest

from paytax.sdk import FederalElection, InvalidAmountError, UnsupportedPayFrequency, calc_federal_withholding
from paytax.sdk.taxes import get_pay_periods

from conftest import make_synthetic_rules


def single(**kwargs) -> FederalElection:
    return FederalElection(filing_status="single_or_married_separately", **kwargs)


@pytest.fixture
def withhold(rules_2025):
    def _withhold(gross, frequency="biweekly", election=None, **kwargs):
        return calc_federal_withholding(
            gross, frequency, election or single(), rules_2025.parameters, rules_2025.federal_tables, **kwargs
        )
    return _withhold


class TestPayPeriods:
    @pytest.mark.parametrize("frequency,periods", [
        ("weekly", 52), ("biweekly", 26), ("semimonthly", 24), ("monthly", 12),
    ])
    def test_periods(self, frequency, periods):
        assert get_pay_periods(frequency) == periods

    def test_unknown_frequency(self):
        with pytest.raises(UnsupportedPayFrequency, match="daily"):
            get_pay_periods("daily")


class TestFederalWithholding2025:
    def test_single_biweekly(self, withhold):
        # (2000 x 26 - 8600) = 43400 -> 1192.50 + 25075 x 12% = 4201.50 / 26
        assert withhold(2000) == 161.60

    def test_married_jointly(self, withhold):
        election = FederalElection(filing_status="married_jointly")
        assert withhold(4000, election=election) == 323.19

    def test_head_of_household(self, withhold):
        election = FederalElection(filing_status="head_of_household")
        assert withhold(2000, election=election) == 123.08

    def test_step2_uses_step2_table_without_standard_deduction(self, withhold):
        # 52000 -> 2789.25 + 20262 x 22% = 7246.89 / 26
        assert withhold(2000, election=single(multiple_jobs=True)) == 278.73

    def test_dependents_credit(self, withhold):
        assert withhold(2000, election=single(dependents_deduction=2000)) == 84.67

    def test_dependents_credit_floors_at_zero(self, withhold):
        assert withhold(2000, election=single(dependents_deduction=50000), apply_cushion=False) == 0.0

    def test_other_income(self, withhold):
        assert withhold(2000, election=single(other_income=5200)) == 185.60

    def test_deductions(self, withhold):
        assert withhold(2000, election=single(deductions=5200)) == 137.60

    def test_extra_withholding(self, withhold):
        assert withhold(2000, election=single(extra_withholding=25)) == 186.60

    def test_exempt(self, withhold):
        assert withhold(2000, election=FederalElection(filing_status="exempt")) == 0.0

    def test_zero_gross(self, withhold):
        assert withhold(0) == 0.0

    def test_negative_gross_rejected(self, withhold):
        with pytest.raises(InvalidAmountError):
            withhold(-100)

    def test_unsupported_frequency(self, withhold):
        with pytest.raises(UnsupportedPayFrequency):
            withhold(2000, frequency="quarterly")


class TestLowWageFloor:
    def test_floor_is_one_percent_of_gross(self, withhold):
        # 300 x 26 is under the standard deduction, so the IRS amount is 0
        assert withhold(300) == 3.00
        assert withhold(300, apply_cushion=False) == 0.0

    def test_floor_caps_at_ten(self, withhold):
        assert withhold(1500, election=single(dependents_deduction=5000)) == 10.00

    def test_floor_not_applied_above_ten(self, withhold):
        assert withhold(2000) == withhold(2000, apply_cushion=False)


class TestProperties:
    def test_non_decreasing_in_gross(self, withhold):
        amounts = [withhold(gross, frequency="weekly") for gross in range(0, 6000, 50)]
        assert amounts == sorted(amounts)

    def test_results_are_whole_cents(self, withhold):
        for gross in (123.45, 987.65, 2345.67, 10000.01):
            amount = withhold(gross)
            assert round(amount, 2) == amount

    def test_synthetic_year_tables_are_used(self):
        rules = make_synthetic_rules(2099)
        # (1000 x 52 - 1000) x 10% / 52
        amount = calc_federal_withholding(1000, "weekly", single(), rules.parameters, rules.federal_tables)
        assert amount == 98.08
