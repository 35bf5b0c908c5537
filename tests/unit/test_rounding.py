"""Tests for cent rounding and amount validation."""

import math

import pytest

from paytax.sdk.rounding import InvalidAmountError, require_amount, round_to_cents, sum_cents


class TestRoundToCents:
    def test_half_cent_rounds_up(self):
        assert round_to_cents(1.005) == 1.01
        assert round_to_cents(2.675) == 2.68

    def test_below_half_rounds_down(self):
        assert round_to_cents(161.594) == 161.59

    def test_federal_example_per_period(self):
        assert round_to_cents(4201.50 / 26) == 161.60

    def test_no_negative_zero(self):
        result = round_to_cents(-0.001)
        assert result == 0.0
        assert math.copysign(1.0, result) == 1.0

    def test_negative_half_rounds_away_from_zero(self):
        assert round_to_cents(-0.125) == -0.13


class TestSumCents:
    def test_rounds_once(self):
        assert sum_cents([0.1, 0.2, 0.3]) == 0.6

    def test_empty(self):
        assert sum_cents([]) == 0.0


class TestRequireAmount:
    def test_accepts_int_and_float(self):
        assert require_amount("gross_pay", 5) == 5.0
        assert require_amount("gross_pay", 0.0) == 0.0

    @pytest.mark.parametrize("value", [-0.01, float("nan"), float("inf"), True, "100", None])
    def test_rejects_bad_values(self, value):
        with pytest.raises(InvalidAmountError):
            require_amount("gross_pay", value)

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError, match="gross_pay"):
            require_amount("gross_pay", -1)
