"""
Tariff Table - Negotiated delivery-count breakpoints per facility and zone.

Loaded once from tariffs.csv and frozen. Missing rows mean no contractual
rate applies, which callers see as a zero price.
"""
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

import pandas as pd
import structlog

from .models import TariffRule

logger = structlog.get_logger(__name__)

REQUIRED_COLUMNS = (
    'facility', 'zone', 'vehicle_class', 'threshold', 'price_low', 'price_high',
)


def _optional_number(value, cast):
    if pd.isna(value) or str(value).strip() == '':
        return None
    return cast(value)


def load_tariff_rules(path: Path) -> tuple[TariffRule, ...]:
    """Read tariff rows from CSV into frozen TariffRule objects."""
    if not path.exists():
        raise FileNotFoundError(f"Tariff table not found at {path}.")

    df = pd.read_csv(path, dtype=str)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Tariff table {path} is missing columns: {', '.join(missing)}")

    for col in df.columns:
        df[col] = df[col].str.strip()

    rules = []
    for row in df.to_dict(orient='records'):
        rules.append(TariffRule(
            facility=row['facility'],
            special=row['zone'].lower() == 'special',
            vehicle_class=row['vehicle_class'].upper(),
            threshold=int(row['threshold']),
            price_low=float(row['price_low']),
            price_high=float(row['price_high']),
            band_threshold=_optional_number(row.get('band_threshold'), int),
            band_price=_optional_number(row.get('band_price'), float),
        ))
    return tuple(rules)


class TariffTable:
    """Read-only lookup of tariff rules by (facility, special, vehicle class)."""

    def __init__(self, rules: tuple[TariffRule, ...]):
        self.rules = tuple(rules)
        self._index: Mapping[tuple[str, bool, str], TariffRule] = MappingProxyType(
            {rule.key: rule for rule in self.rules}
        )

    @classmethod
    def from_csv(cls, path: Path) -> 'TariffTable':
        table = cls(load_tariff_rules(path))
        logger.info("tariff_table_loaded", path=str(path), rules=len(table.rules))
        return table

    @property
    def facilities(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(rule.facility for rule in self.rules))

    def find_rule(self, facility: str, special: bool, vehicle_class: str) -> Optional[TariffRule]:
        return self._index.get((facility, bool(special), vehicle_class))

    def price(self, facility: str, special: bool, vehicle_class: str, count: int) -> float:
        """Price for a run, or 0 when no rule is negotiated."""
        rule = self.find_rule(facility, special, vehicle_class)
        if rule is None:
            return 0
        return rule.price_for(count)
