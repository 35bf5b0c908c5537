"""Configuration management for Pay Tax.

settings.json holds machine-specific preferences:
   - tax_rules_dir: extra directory of <year>.yaml rule files
   - fallback_to_latest_year: default for the year fallback opt-in
   - company_rates: {ui_rate, ett_rate} assigned to the employer by the EDD

Config directory resolution:
1. PAY_TAX_CONFIG_PATH environment variable (if set)
2. ~/.config/pay-tax/ (XDG_CONFIG_HOME fallback)
"""

import json
import os
from pathlib import Path
from typing import Any, Optional


APP_NAME = "pay-tax"
SETTINGS_FILENAME = "settings.json"

# EDD new-employer rates
DEFAULT_UI_RATE = 0.034
DEFAULT_ETT_RATE = 0.001


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. PAY_TAX_CONFIG_PATH environment variable
    2. ~/.config/pay-tax/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("PAY_TAX_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save settings to settings.json.

    Args:
        settings: Settings dictionary to save

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json.

    Args:
        key: Setting key (e.g., "tax_rules_dir")
        default: Default value if key not found

    Returns:
        Setting value or default
    """
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_tax_rules_dir_override() -> Optional[Path]:
    """Extra tax rules directory from settings, if configured."""
    value = get_setting("tax_rules_dir")
    return Path(value).expanduser() if value else None


def get_company_rates() -> dict:
    """Company CA UI/ETT rates from settings, with new-employer defaults."""
    configured = get_setting("company_rates") or {}
    return {
        "ui_rate": configured.get("ui_rate", DEFAULT_UI_RATE),
        "ett_rate": configured.get("ett_rate", DEFAULT_ETT_RATE),
    }
