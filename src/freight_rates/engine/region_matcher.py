"""
Region Matcher - Decides whether a destination falls in a premium zone.

Each facility negotiated its own set of special destinations. Patterns are
applied to the normalized "CITY REGION" text of a delivery run.
"""
import re
from dataclasses import dataclass
from typing import Optional

from .models import SANTA_LUZIA, CONTAGEM


@dataclass(frozen=True)
class ZoneRule:
    """A named special destination for one facility."""
    facility: str
    zone: str
    pattern: re.Pattern

    def matches(self, location_text: str) -> bool:
        return bool(self.pattern.search(location_text))


ZONE_RULES: tuple[ZoneRule, ...] = (
    ZoneRule(CONTAGEM, 'ESMERALDAS', re.compile(r'\bESMERALDAS\b', re.ASCII)),
    # "PEDRO LEOPOLDO", "P. LEOPOLDO", "P LEOPOLDO"
    ZoneRule(SANTA_LUZIA, 'PEDRO LEOPOLDO', re.compile(r'PEDRO\s+LEOPOLDO|P\.?\s*LEOPOLDO')),
    ZoneRule(SANTA_LUZIA, 'CONFINS', re.compile(r'CONFINS')),
    ZoneRule(SANTA_LUZIA, 'MATOZINHOS', re.compile(r'MATOZINHOS')),
    # "LAGOA SANTA", "L. SANTA", "L SANTA"
    ZoneRule(SANTA_LUZIA, 'LAGOA SANTA', re.compile(r'LAGOA\s+SANTA|L\.?\s*SANTA')),
)


class RegionMatcher:
    """
    Matches normalized location text against per-facility zone rules.

    Facilities without rules never have special zones.
    """

    def __init__(self, rules: tuple[ZoneRule, ...] = ZONE_RULES):
        self.rules_by_facility: dict[str, tuple[ZoneRule, ...]] = {}
        for rule in rules:
            self.rules_by_facility[rule.facility] = (
                self.rules_by_facility.get(rule.facility, ()) + (rule,)
            )

    def match_zone(self, facility: str, location_text: str) -> Optional[str]:
        """Return the first matching zone name, or None."""
        if not location_text:
            return None
        for rule in self.rules_by_facility.get(facility, ()):
            if rule.matches(location_text):
                return rule.zone
        return None

    def is_special_zone(self, facility: str, location_text: str) -> bool:
        return self.match_zone(facility, location_text) is not None


_default_matcher = RegionMatcher()


def is_special_zone(facility: str, normalized_location: str) -> bool:
    """Module-level shortcut using the negotiated zone list."""
    return _default_matcher.is_special_zone(facility, normalized_location)
