"""Tests for the year-keyed tax rules registry."""

import logging

import pytest
import yaml
from pydantic import ValidationError

from paytax.sdk import set_setting
from paytax.sdk.taxes import (
    PACKAGED_RULES_DIR,
    BracketTable,
    NoMatchingBracket,
    TaxRegistry,
    UnsupportedTaxYear,
    load_registry,
    load_rules_file,
)

from conftest import make_synthetic_rules


def _packaged_2025() -> dict:
    with open(PACKAGED_RULES_DIR / "2025.yaml") as f:
        return yaml.safe_load(f)


class TestPackagedRules:
    def test_available_years(self, registry):
        years = registry.available_years()
        assert 2025 in years
        assert 2026 in years
        assert years == sorted(years)

    def test_california_years_tracked_separately(self, registry):
        assert 2025 in registry.california_years()
        assert 2026 not in registry.california_years()
        assert registry.has_year(2026)

    def test_2025_parameters(self, registry):
        params = registry.get_parameters(2025)
        assert params.year == 2025
        assert params.federal.social_security_wage_base == 176100
        assert params.federal.futa_limit == 7000
        assert params.california.sdi_rate == 0.012
        assert params.federal.standard_deduction["married_jointly"] == 12900

    def test_2026_wage_base(self, registry):
        assert registry.get_parameters(2026).federal.social_security_wage_base == 184500

    def test_federal_table_selection(self, registry):
        standard = registry.get_federal_table(2025, "single_or_married_separately", False)
        step2 = registry.get_federal_table(2025, "single_or_married_separately", True)
        assert standard.rows[0].max == 6400
        assert step2.rows[0].max == 7500

    def test_state_brackets(self, registry):
        tables = registry.get_state_brackets(2025)
        assert tables.low_income_threshold("monthly", "single_or_dual_income") == 1484
        assert tables.low_income_threshold("monthly", "head_of_household") == 2968


class TestYearResolution:
    def test_missing_year_raises(self, registry):
        with pytest.raises(UnsupportedTaxYear, match="2030"):
            registry.get_rules(2030)

    def test_fallback_uses_latest_earlier_year(self, registry, caplog):
        with caplog.at_level(logging.WARNING):
            rules = registry.get_rules(2030, fallback_to_latest=True)
        assert rules.year == 2026
        assert "2030" in caplog.text

    def test_fallback_never_uses_a_later_year(self, registry):
        with pytest.raises(UnsupportedTaxYear):
            registry.get_rules(2020, fallback_to_latest=True)

    def test_state_tables_missing_for_2026(self, registry):
        with pytest.raises(UnsupportedTaxYear, match="California"):
            registry.get_state_brackets(2026)

    def test_state_tables_fallback(self, registry):
        tables = registry.get_state_brackets(2026, fallback_to_latest=True)
        assert tables == registry.get_state_brackets(2025)

    def test_unsupported_year_is_lookup_error(self, registry):
        with pytest.raises(LookupError):
            registry.resolve_year(1999)


class TestSyntheticRegistry:
    def test_in_memory_year(self):
        registry = TaxRegistry([make_synthetic_rules(2099)])
        assert registry.available_years() == [2099]
        assert registry.california_years() == []
        assert registry.get_parameters(2099).federal.social_security_rate == 0.05

    def test_missing_federal_table_raises(self):
        registry = TaxRegistry({2099: make_synthetic_rules(2099)})
        with pytest.raises(NoMatchingBracket):
            registry.get_federal_table(2099, "married_jointly", False)


class TestBracketTable:
    def test_boundary_belongs_to_upper_row(self, registry):
        table = registry.get_federal_table(2025, "single_or_married_separately", False)
        row = table.find(18325)
        assert row.min == 18325
        assert row.base_tax == 1192.50

    def test_every_amount_in_exactly_one_row(self, registry):
        rules = registry.get_rules(2025)
        tables = [t for variants in rules.federal_tables.root.values() for t in variants.values()]
        tables += [t for schedules in rules.california_tables.tax_brackets.values() for t in schedules.values()]
        for table in tables:
            edges = [row.min for row in table.rows]
            amounts = [x * 137.5 for x in range(0, 8000)] + edges + [e - 0.01 for e in edges if e > 0]
            for amount in amounts:
                assert sum(1 for row in table.rows if row.contains(amount)) == 1, amount

    def test_tax_on(self, registry):
        table = registry.get_federal_table(2025, "single_or_married_separately", False)
        assert table.tax_on(43400) == pytest.approx(4201.50)

    def test_gap_rejected(self):
        with pytest.raises(ValidationError, match="gap"):
            BracketTable.model_validate([
                {"min": 0, "max": 100, "base_tax": 0, "rate": 0.1},
                {"min": 150, "max": None, "base_tax": 10, "rate": 0.2},
            ])

    def test_first_row_must_start_at_zero(self):
        with pytest.raises(ValidationError):
            BracketTable.model_validate([{"min": 10, "max": None, "base_tax": 0, "rate": 0.1}])

    def test_last_row_must_be_unbounded(self):
        with pytest.raises(ValidationError):
            BracketTable.model_validate([{"min": 0, "max": 100, "base_tax": 0, "rate": 0.1}])

    def test_negative_amount_has_no_bracket(self):
        table = BracketTable.model_validate([{"min": 0, "max": None, "base_tax": 0, "rate": 0.1}])
        with pytest.raises(NoMatchingBracket):
            table.find(-1)


class TestRuleFiles:
    def test_file_name_must_match_year(self, tmp_path):
        path = tmp_path / "2024.yaml"
        path.write_text(yaml.safe_dump(_packaged_2025()))
        with pytest.raises(ValueError, match="declares year 2025"):
            load_rules_file(path)

    def test_unknown_field_rejected(self, tmp_path):
        data = _packaged_2025()
        data["federal"]["surprise"] = 1
        path = tmp_path / "2025.yaml"
        path.write_text(yaml.safe_dump(data))
        with pytest.raises(ValidationError):
            load_rules_file(path)

    def test_later_directory_overrides(self, tmp_path):
        data = _packaged_2025()
        data["federal"]["social_security_wage_base"] = 180000
        (tmp_path / "2025.yaml").write_text(yaml.safe_dump(data))

        registry = TaxRegistry.from_directories(PACKAGED_RULES_DIR, tmp_path)
        assert registry.get_parameters(2025).federal.social_security_wage_base == 180000
        assert registry.has_year(2026)

    def test_missing_directory_is_skipped(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            registry = TaxRegistry.from_directories(PACKAGED_RULES_DIR, tmp_path / "nope")
        assert registry.has_year(2025)
        assert "not found" in caplog.text

    def test_load_registry_uses_settings_override(self, tmp_path):
        rules_dir = tmp_path / "rules"
        rules_dir.mkdir()
        data = _packaged_2025()
        data["year"] = 2027
        (rules_dir / "2027.yaml").write_text(yaml.safe_dump(data))
        set_setting("tax_rules_dir", str(rules_dir))

        registry = load_registry()
        assert registry.has_year(2027)
        assert 2027 in registry.california_years()
