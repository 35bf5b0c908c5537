"""Shared fixtures for pay-tax unit tests."""

from datetime import date

import pytest

from paytax.sdk import FederalElection, PayrollRunEntry, StateElection
from paytax.sdk.taxes import PACKAGED_RULES_DIR, TaxRegistry, TaxYearRules


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point settings at an empty per-test config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("PAY_TAX_CONFIG_PATH", str(config_dir))
    return config_dir


@pytest.fixture(scope="session")
def registry():
    """Registry over the packaged tax_rules/*.yaml files."""
    return TaxRegistry.from_directories(PACKAGED_RULES_DIR)


@pytest.fixture
def params_2025(registry):
    return registry.get_parameters(2025)


@pytest.fixture
def rules_2025(registry):
    return registry.get_rules(2025)


def make_synthetic_rules(year: int = 2099) -> TaxYearRules:
    """A made-up year with one flat 10% federal bracket and no CA tables."""
    flat = [{"min": 0, "max": None, "base_tax": 0, "rate": 0.10}]
    return TaxYearRules.model_validate({
        "year": year,
        "federal": {
            "social_security_wage_base": 100000,
            "social_security_rate": 0.05,
            "medicare_rate": 0.01,
            "additional_medicare_rate": 0.01,
            "additional_medicare_threshold": 150000,
            "futa_limit": 5000,
            "futa_gross_rate": 0.06,
            "futa_credit_rate": 0.054,
            "futa_net_rate": 0.006,
            "futa_quarterly_deposit_threshold": 500,
            "standard_deduction": {"single_or_married_separately": 1000},
        },
        "california": {
            "sdi_rate": 0.01,
            "sui_wage_base": 5000,
            "ett_wage_base": 5000,
            "futa_credit_reduction_rate": 0.0,
        },
        "federal_tables": {
            "single_or_married_separately": {"standard": flat, "step2": flat},
        },
    })


def make_entry(employee_id, pay_date, gross_pay, pay_frequency="monthly", federal=None, state=None, **kwargs):
    """PayrollRunEntry with sensible defaults for tests."""
    return PayrollRunEntry(
        employee_id=employee_id,
        first_name=kwargs.pop("first_name", employee_id.title()),
        last_name=kwargs.pop("last_name", "Tester"),
        pay_date=pay_date,
        pay_frequency=pay_frequency,
        gross_pay=gross_pay,
        federal=federal,
        state=state,
        **kwargs,
    )


SINGLE_W4 = FederalElection(filing_status="single_or_married_separately")
SINGLE_DE4 = StateElection(filing_status="single_or_married_multiple_incomes")


def monthly_dates(year: int, months=range(1, 13), day: int = 25):
    return [date(year, month, day) for month in months]
