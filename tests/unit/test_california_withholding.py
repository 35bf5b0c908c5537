"""Tests for California income tax withholding (DE 44 Method B)."""

import pytest

from paytax.sdk import StateElection, UnsupportedPayFrequency, calc_california_withholding
from paytax.sdk.taxes import allowance_category


@pytest.fixture
def ca_tables(registry):
    return registry.get_state_brackets(2025)


def de4(filing_status="single_or_married_multiple_incomes", **kwargs) -> StateElection:
    return StateElection(filing_status=filing_status, **kwargs)


class TestAllowanceCategory:
    @pytest.mark.parametrize("status,allowances,expected", [
        ("single_or_married_multiple_incomes", 0, "single_or_dual_income"),
        ("married_one_income", 0, "married_0_or_1"),
        ("married_one_income", 1, "married_0_or_1"),
        ("married_one_income", 2, "married_2_plus"),
        ("head_of_household", 3, "head_of_household"),
        ("do_not_withhold", 0, None),
    ])
    def test_category(self, status, allowances, expected):
        assert allowance_category(status, allowances) == expected

    def test_unknown_status(self):
        with pytest.raises(ValueError):
            allowance_category("widowed", 0)


class TestCaliforniaWithholding2025:
    def test_monthly_single_one_allowance(self, ca_tables):
        # 5000 - 462 = 4538 -> 93.67 + 1084 x 6.6% = 165.214, less 12.75 credit
        assert calc_california_withholding(5000, "monthly", de4(regular_allowances=1), ca_tables) == 152.46

    def test_biweekly_married_two_allowances(self, ca_tables):
        election = de4("married_one_income", regular_allowances=2)
        # 3000 - 426 = 2574 -> 35.07 + 554 x 4.4% = 59.446, less 11.77 credit
        assert calc_california_withholding(3000, "biweekly", election, ca_tables) == 47.68

    def test_low_income_exemption(self, ca_tables):
        election = de4("head_of_household")
        assert calc_california_withholding(1000, "monthly", election, ca_tables) == 0.0
        assert calc_california_withholding(2968, "monthly", election, ca_tables) == 0.0

    def test_estimated_deduction_allowances(self, ca_tables):
        # 5000 - 83 - 462 = 4455 -> 93.67 + 1001 x 6.6%
        election = de4(estimated_deduction_allowances=1)
        assert calc_california_withholding(5000, "monthly", election, ca_tables) == 159.74

    def test_additional_withholding(self, ca_tables):
        election = de4(regular_allowances=1, additional_withholding=10)
        assert calc_california_withholding(5000, "monthly", election, ca_tables) == 162.46

    def test_allowances_beyond_table_scale_per_allowance(self, ca_tables):
        # 12 x 12.75 = 153.00 credit
        election = de4(regular_allowances=12)
        assert calc_california_withholding(5000, "monthly", election, ca_tables) == 12.21

    def test_credit_larger_than_tax_gives_zero(self, ca_tables):
        election = de4(regular_allowances=10)
        assert calc_california_withholding(2000, "monthly", election, ca_tables) == 0.0

    def test_do_not_withhold(self, ca_tables):
        assert calc_california_withholding(5000, "monthly", de4("do_not_withhold"), ca_tables) == 0.0

    def test_exempt(self, ca_tables):
        assert calc_california_withholding(5000, "monthly", de4(exempt=True), ca_tables) == 0.0

    @pytest.mark.parametrize("frequency", ["weekly", "semimonthly"])
    def test_only_monthly_and_biweekly(self, ca_tables, frequency):
        with pytest.raises(UnsupportedPayFrequency):
            calc_california_withholding(2000, frequency, de4(), ca_tables)

    def test_non_decreasing_in_gross(self, ca_tables):
        election = de4(regular_allowances=1)
        amounts = [calc_california_withholding(g, "biweekly", election, ca_tables) for g in range(0, 8000, 25)]
        assert amounts == sorted(amounts)
