"""Year-keyed registry of tax rates and bracket tables.

Rules live in tax_rules/<year>.yaml, one file per year. A registry is an
explicit object handed to the calculators; nothing reads module-level tables.
Tests build registries from in-memory TaxYearRules for synthetic years.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import yaml

from ..config import get_tax_rules_dir_override
from .schemas import (
    BracketTable,
    CaliforniaTables,
    FederalTables,
    TaxYearParameters,
    TaxYearRules,
)

logger = logging.getLogger(__name__)

PACKAGED_RULES_DIR = Path(__file__).parent.parent.parent / "tax_rules"


class UnsupportedTaxYear(LookupError):
    """Raised when no rules are published for the requested year."""
    pass


def load_rules_file(path: Union[str, Path]) -> TaxYearRules:
    """Load and validate a single tax_rules/<year>.yaml file.

    Raises:
        pydantic.ValidationError: If the file does not match the rule schema
        ValueError: If the file name does not match its year field
    """
    path = Path(path)
    logger.debug(f"Loading tax rules from {path}")
    with open(path, "r") as f:
        data = yaml.safe_load(f)

    rules = TaxYearRules.model_validate(data)
    if path.stem.isdigit() and int(path.stem) != rules.year:
        raise ValueError(f"{path.name} declares year {rules.year}")
    return rules


class TaxRegistry:
    """Lookup of TaxYearRules by year."""

    def __init__(self, rules_by_year: Union[Dict[int, TaxYearRules], Iterable[TaxYearRules]]):
        if isinstance(rules_by_year, dict):
            rules = list(rules_by_year.values())
        else:
            rules = list(rules_by_year)
        self._rules: Dict[int, TaxYearRules] = {r.year: r for r in rules}

    @classmethod
    def from_directories(cls, *dirs: Union[str, Path, None]) -> "TaxRegistry":
        """Build a registry from one or more rule directories.

        Later directories override earlier ones for the same year.
        """
        rules: Dict[int, TaxYearRules] = {}
        for rules_dir in dirs:
            if rules_dir is None:
                continue
            rules_dir = Path(rules_dir)
            if not rules_dir.is_dir():
                logger.warning(f"Tax rules directory not found: {rules_dir}")
                continue
            for path in sorted(rules_dir.glob("*.yaml")):
                if not path.stem.isdigit():
                    continue
                year_rules = load_rules_file(path)
                rules[year_rules.year] = year_rules
        return cls(rules)

    def available_years(self) -> List[int]:
        """Published years, ascending."""
        return sorted(self._rules)

    def california_years(self) -> List[int]:
        """Years that publish DE 44 tables, ascending."""
        return sorted(y for y, r in self._rules.items() if r.california_tables is not None)

    def has_year(self, year: int) -> bool:
        return year in self._rules

    def _resolve(self, year: int, years: List[int], fallback_to_latest: bool, what: str) -> int:
        if year in years:
            return year
        if fallback_to_latest:
            earlier = [y for y in years if y < year]
            if earlier:
                logger.warning(f"{what} for {year} not published, using {earlier[-1]}")
                return earlier[-1]
        available = ", ".join(str(y) for y in years) or "none"
        raise UnsupportedTaxYear(f"No {what} published for {year} (available: {available})")

    def resolve_year(self, year: int, fallback_to_latest: bool = False) -> int:
        """Return the year whose rules apply to the requested year.

        Args:
            year: Requested tax year
            fallback_to_latest: Use the most recent published year before
                the requested one when it is missing (logged as a warning)

        Raises:
            UnsupportedTaxYear: If the year is missing and no fallback applies
        """
        return self._resolve(year, self.available_years(), fallback_to_latest, "tax rates")

    def get_rules(self, year: int, fallback_to_latest: bool = False) -> TaxYearRules:
        return self._rules[self.resolve_year(year, fallback_to_latest)]

    def get_parameters(self, year: int, fallback_to_latest: bool = False) -> TaxYearParameters:
        return self.get_rules(year, fallback_to_latest).parameters

    def get_federal_brackets(self, year: int, fallback_to_latest: bool = False) -> FederalTables:
        return self.get_rules(year, fallback_to_latest).federal_tables

    def get_federal_table(
        self, year: int, filing_status: str, step2_checked: bool, fallback_to_latest: bool = False
    ) -> BracketTable:
        return self.get_federal_brackets(year, fallback_to_latest).select(filing_status, step2_checked)

    def get_state_brackets(self, year: int, fallback_to_latest: bool = False) -> CaliforniaTables:
        """California DE 44 tables for the year.

        California tables are tracked separately from federal data, so a
        year with federal rules may still have no state tables.
        """
        resolved = self._resolve(year, self.california_years(), fallback_to_latest, "California tables")
        return self._rules[resolved].california_tables


@lru_cache(maxsize=None)
def _load_cached(rules_dir: Optional[str]) -> TaxRegistry:
    return TaxRegistry.from_directories(PACKAGED_RULES_DIR, rules_dir)


def load_registry(rules_dir: Optional[Union[str, Path]] = None) -> TaxRegistry:
    """Load the packaged rules plus an optional override directory.

    Args:
        rules_dir: Extra directory of <year>.yaml files. Defaults to the
            tax_rules_dir setting, if any.

    Returns:
        TaxRegistry (cached per override directory)
    """
    if rules_dir is None:
        rules_dir = get_tax_rules_dir_override()
    return _load_cached(str(rules_dir) if rules_dir is not None else None)
