"""
Rate Resolver - Turns a delivery run description into a contractual price.

Resolution order:
1. Classify the vehicle text (VUC / TOCO / TRUCK / OTHER)
2. Check whether "city region" lands in a special zone of the facility
3. Look up the tariff rule for (facility, zone, vehicle class)
4. Apply the delivery-count breakpoint

Unknown facilities and unclassifiable vehicles resolve to 0, never to an error.
"""
from typing import Optional

import structlog

from ..config.settings import get_settings, Settings
from .models import RateQuote, OTHER
from .region_matcher import RegionMatcher
from .tariff_table import TariffTable
from .text import normalize_text
from .vehicle_classifier import classify_vehicle

logger = structlog.get_logger(__name__)


def _as_count(count) -> int:
    if isinstance(count, (int, float)):
        return count
    try:
        return int(str(count).strip())
    except ValueError:
        return 0


class RateResolver:
    """Composes the classifiers and the tariff table into one entry point."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        tariff_table: Optional[TariffTable] = None,
        region_matcher: Optional[RegionMatcher] = None,
    ):
        """Initialize the resolver with the tariff table and zone rules."""
        self.settings = settings or get_settings()
        self.tariff_table = tariff_table or TariffTable.from_csv(self.settings.tariffs_csv)
        self.region_matcher = region_matcher or RegionMatcher()

    def quote(
        self,
        facility: str,
        vehicle_text: str,
        count: int,
        city: str = "",
        region: str = "",
    ) -> RateQuote:
        """
        Resolve a price with full traceability.

        Args:
            facility: Origin CDD ("Santa Luzia" or "Contagem")
            vehicle_text: Free-text vehicle description
            count: Number of deliveries on the run
            city: Destination city
            region: Destination region / neighbourhood

        Returns:
            RateQuote with price, resolved class, zone flag and trace
        """
        count = _as_count(count)
        vehicle_class = classify_vehicle(normalize_text(vehicle_text))
        location = normalize_text(f"{city or ''} {region or ''}")
        zone = self.region_matcher.match_zone(facility, location)

        quote = RateQuote(
            facility=facility,
            vehicle_class=vehicle_class,
            special=zone is not None,
            count=count,
            price=0,
        )
        quote.add_trace("Vehicle", f"Classified '{vehicle_text or ''}'", vehicle_class)
        if zone:
            quote.add_trace("Zone", f"Special zone for {facility}", zone)
        else:
            quote.add_trace("Zone", f"Standard zone for '{location}'")

        if vehicle_class == OTHER:
            quote.add_trace("Tariff", "No rate for unclassified vehicle", "0")
            logger.debug("zero_rate", facility=facility, vehicle_class=vehicle_class)
            return quote

        rule = self.tariff_table.find_rule(facility, quote.special, vehicle_class)
        if rule is None:
            quote.add_trace("Tariff", f"No tariff negotiated for facility '{facility}'", "0")
            logger.debug("zero_rate", facility=facility, vehicle_class=vehicle_class)
            return quote

        quote.rule = rule
        quote.price = rule.price_for(count)
        quote.add_trace("Tariff", rule.describe())
        quote.add_trace("Price", f"{count} deliveries", f"{quote.price:g}")
        return quote

    def resolve_rate(
        self,
        facility: str,
        vehicle_text: str,
        count: int,
        city: str = "",
        region: str = "",
    ) -> float:
        """Price only (legacy-style shortcut for quote())."""
        return self.quote(facility, vehicle_text, count, city, region).price


# Default resolver instance
_resolver: Optional[RateResolver] = None


def get_resolver() -> RateResolver:
    """Get the global resolver built from the packaged tariff table."""
    global _resolver
    if _resolver is None:
        _resolver = RateResolver()
    return _resolver


def resolve_rate(facility: str, vehicle_text: str, count: int, city: str = "", region: str = "") -> float:
    return get_resolver().resolve_rate(facility, vehicle_text, count, city, region)
