"""Tests for wage-base capped taxes (SS, Medicare, FUTA, SUI, ETT, SDI)."""

import pytest

from paytax.sdk import InvalidAmountError
from paytax.sdk.taxes import (
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


class TestCappedTaxableWage:
    @pytest.mark.parametrize("prior,current,expected", [
        (0, 1000, 1000),
        (6500, 1000, 500),
        (7000, 1000, 0),
        (9000, 1000, 0),
    ])
    def test_clamp(self, prior, current, expected):
        assert capped_taxable_wage(7000, prior, current) == expected


class TestSocialSecurity:
    def test_under_wage_base(self, params_2025):
        assert calc_social_security(2000, 0, params_2025) == 124.00

    def test_crossing_wage_base(self, params_2025):
        # 176100 - 170000 = 6100 taxable
        assert calc_social_security(10000, 170000, params_2025) == 378.20

    def test_over_wage_base(self, params_2025):
        assert calc_social_security(10000, 176100, params_2025) == 0.0

    def test_year_total_never_exceeds_cap(self, params_2025):
        prior = 0.0
        total = 0.0
        for _ in range(26):
            total += calc_social_security(10000, prior, params_2025)
            prior += 10000
        assert total == pytest.approx(176100 * 0.062)

    def test_negative_prior_rejected(self, params_2025):
        with pytest.raises(InvalidAmountError):
            calc_social_security(1000, -1, params_2025)

    @pytest.mark.parametrize("prior", [0, 100000, 170000, 176100])
    def test_monotonic_in_current_wage(self, params_2025, prior):
        amounts = [calc_social_security(wage, prior, params_2025) for wage in range(0, 20001, 250)]
        assert amounts == sorted(amounts)


class TestMedicare:
    def test_no_wage_base(self, params_2025):
        assert calc_medicare(2000, params_2025) == 29.00
        assert calc_medicare(500000, params_2025) == 7250.00

    def test_additional_medicare_below_threshold(self, params_2025):
        assert calc_additional_medicare(1000, 0, params_2025) == 0.0

    def test_additional_medicare_crossing_threshold(self, params_2025):
        # 5000 of the 10000 is above 200000
        assert calc_additional_medicare(10000, 195000, params_2025) == 45.00

    def test_additional_medicare_above_threshold(self, params_2025):
        assert calc_additional_medicare(1000, 250000, params_2025) == 9.00


class TestFuta:
    def test_crossing_limit(self, params_2025):
        assert calc_futa(3000, 6000, params_2025) == 6.00

    def test_over_limit(self, params_2025):
        assert calc_futa(3000, 7000, params_2025) == 0.0

    @pytest.mark.parametrize("prior,first,second", [
        (0, 1000, 2500),
        (1000, 2000, 3000),
        (5000, 1500, 1500),
        (6000, 500, 2000),
    ])
    def test_split_payments_add_up(self, params_2025, prior, first, second):
        split = calc_futa(first, prior, params_2025) + calc_futa(second, prior + first, params_2025)
        assert split == pytest.approx(calc_futa(first + second, prior, params_2025))


class TestCaliforniaEmployerTaxes:
    def test_sui_capped(self, params_2025):
        assert calc_sui(3000, 5000, 0.034, params_2025) == 68.00

    def test_ett_capped(self, params_2025):
        assert calc_ett(3000, 5000, 0.001, params_2025) == 2.00

    def test_sdi_uncapped(self, params_2025):
        assert calc_sdi(2000, params_2025) == 24.00
        assert calc_sdi(500000, params_2025) == 6000.00


class TestWagePlanCodes:
    @pytest.mark.parametrize("code,sui,ett,sdi", [
        ("S", 68.00, 2.00, 24.00),
        ("J", 68.00, 2.00, 24.00),
        ("A", 68.00, 2.00, 0.0),
        ("P", 0.0, 0.0, 24.00),
        (None, 0.0, 0.0, 0.0),
    ])
    def test_gating(self, params_2025, code, sui, ett, sdi):
        taxes = calc_ca_state_taxes(code, 2000, 0, 0.034, 0.001, params_2025)
        assert taxes == {"sui": sui, "ett": ett, "sdi": sdi}

    def test_unknown_code(self, params_2025):
        with pytest.raises(ValueError, match="wage plan"):
            calc_ca_state_taxes("X", 2000, 0, 0.034, 0.001, params_2025)
