"""
Driver Directory - Fixed roster of plates assigned to known drivers.
"""
from pathlib import Path
from types import MappingProxyType
from typing import Optional

import pandas as pd
import structlog

from .models import DriverEntry
from .text import normalize_plate

logger = structlog.get_logger(__name__)


class DriverDirectory:
    """
    Read-only plate → driver lookup.

    Plates are compared after stripping punctuation and upper-casing,
    so "ABC-1234" and "abc1234" resolve to the same entry.
    """

    def __init__(self, entries: tuple[DriverEntry, ...]):
        self.entries = MappingProxyType(
            {normalize_plate(e.plate): e for e in entries}
        )

    @classmethod
    def from_csv(cls, path: Path) -> 'DriverDirectory':
        """Load the roster from drivers.csv."""
        if not path.exists():
            raise FileNotFoundError(f"Driver roster not found at {path}.")

        df = pd.read_csv(path, dtype=str)
        for col in df.columns:
            df[col] = df[col].astype(str).str.strip()

        entries = tuple(
            DriverEntry(
                plate=row['plate'],
                name=row['name'],
                vehicle_class=row['vehicle_class'].upper(),
                facility=row['facility'],
            )
            for row in df.to_dict(orient='records')
        )
        directory = cls(entries)
        logger.info("driver_directory_loaded", path=str(path), drivers=len(directory))
        return directory

    def __len__(self) -> int:
        return len(self.entries)

    def lookup(self, plate: str) -> Optional[DriverEntry]:
        """Find the driver for a plate; None when the plate is unknown."""
        key = normalize_plate(plate)
        if not key:
            return None
        return self.entries.get(key)

    def for_facility(self, facility: str) -> list[DriverEntry]:
        return [e for e in self.entries.values() if e.facility == facility]
