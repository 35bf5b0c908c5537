"""Tests for settings.json configuration."""

import json
from pathlib import Path

from paytax.sdk import (
    get_company_rates,
    get_config_dir,
    get_setting,
    get_settings_path,
    get_tax_rules_dir_override,
    load_settings,
    set_setting,
)
from paytax.sdk.config import DEFAULT_ETT_RATE, DEFAULT_UI_RATE


class TestConfigDir:
    def test_env_override(self, isolated_config):
        assert get_config_dir() == isolated_config
        assert get_settings_path() == isolated_config / "settings.json"

    def test_xdg_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv("PAY_TAX_CONFIG_PATH")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        assert get_config_dir() == tmp_path / "xdg" / "pay-tax"


class TestSettings:
    def test_missing_file(self):
        assert load_settings() == {}
        assert get_setting("tax_rules_dir", "default") == "default"

    def test_set_and_get(self, isolated_config):
        path = set_setting("fallback_to_latest_year", True)
        assert path == isolated_config / "settings.json"
        assert get_setting("fallback_to_latest_year") is True
        assert json.loads(path.read_text()) == {"fallback_to_latest_year": True}

    def test_set_keeps_other_keys(self):
        set_setting("a", 1)
        set_setting("b", 2)
        assert load_settings() == {"a": 1, "b": 2}


class TestCompanyRates:
    def test_defaults(self):
        assert get_company_rates() == {"ui_rate": DEFAULT_UI_RATE, "ett_rate": DEFAULT_ETT_RATE}

    def test_partial_override(self):
        set_setting("company_rates", {"ui_rate": 0.027})
        assert get_company_rates() == {"ui_rate": 0.027, "ett_rate": DEFAULT_ETT_RATE}


class TestTaxRulesDir:
    def test_unset(self):
        assert get_tax_rules_dir_override() is None

    def test_expands_user(self):
        set_setting("tax_rules_dir", "~/rules")
        assert get_tax_rules_dir_override() == Path("~/rules").expanduser()
