"""
Vehicle Classifier - Maps free-text vehicle descriptions to a vehicle class.

Rules are evaluated in order and the first match wins. Input is expected to
be already normalized (see ``normalize_text``).
"""
import re

from .models import VUC, TOCO, TRUCK, OTHER


# (vehicle class, pattern) in priority order
VEHICLE_RULES: tuple[tuple[str, re.Pattern], ...] = (
    # "VUC", "3/4", "3 / 4", "3-4", "HR", "VAN"
    (VUC, re.compile(r'\bVUC\b|3\s*[/\-]\s*4|\bHR\b|\bVAN\b', re.ASCII)),
    (TOCO, re.compile(r'\bTOCO\b', re.ASCII)),
    (TRUCK, re.compile(r'\bTRUCK\b|\bTRUCADO\b', re.ASCII)),
)


def classify_vehicle(normalized_text: str) -> str:
    """Return VUC, TOCO, TRUCK or OTHER for a normalized description."""
    if not normalized_text:
        return OTHER
    for vehicle_class, pattern in VEHICLE_RULES:
        if pattern.search(normalized_text):
            return vehicle_class
    return OTHER
