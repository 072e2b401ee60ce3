"""
CSV Row Parser - Extracts a priced FreightRecord from one export line.

Columns are read by fixed position, whatever the header says:
E=4 (date), G=6 (map), L=11 (vehicle), M=12 (plate), V=21 (count),
AK=36 (city), AL=37 (region).
"""
import re
from typing import Optional, Union

from ..config.settings import Settings
from ..engine.driver_directory import DriverDirectory
from ..engine.models import (
    FreightRecord, RowFailure,
    TOO_FEW_COLUMNS, MISSING_PLATE, MISSING_COUNT, INVALID_COUNT,
)
from ..engine.rate_resolver import RateResolver
from ..engine.text import normalize_plate, normalize_text
from ..engine.vehicle_classifier import classify_vehicle
from .dates import normalize_date

IDX_DATE = 4
IDX_MAP = 6
IDX_VEHICLE = 11
IDX_PLATE = 12
IDX_COUNT = 21
IDX_CITY = 36
IDX_REGION = 37

_LEADING_INT = re.compile(r'\s*([+-]?\d+)', re.ASCII)


def choose_delimiter(line: str) -> str:
    """Pick ';' only when it yields more fields than ','."""
    return ';' if len(line.split(';')) > len(line.split(',')) else ','


def _unquote(field: str) -> str:
    field = field.strip()
    if field.startswith('"'):
        field = field[1:]
    if field.endswith('"'):
        field = field[:-1]
    return field


def split_line(line: str) -> list[str]:
    """Split on the detected delimiter, trimming and unquoting each field."""
    return [_unquote(f) for f in line.split(choose_delimiter(line))]


def parse_count(raw: str) -> Optional[int]:
    """Leading integer of the field ("12", "12 entregas", "-3"); None when absent."""
    match = _LEADING_INT.match(raw)
    if not match:
        return None
    return int(match.group(1))


def _column(cols: list[str], idx: int) -> str:
    return cols[idx] if idx < len(cols) else ''


class CSVRowParser:
    """Parses single data lines for one import, priced for one facility."""

    def __init__(
        self,
        facility: str,
        directory: DriverDirectory,
        resolver: RateResolver,
        settings: Settings,
    ):
        self.facility = facility
        self.directory = directory
        self.resolver = resolver
        self.settings = settings

    def parse(self, line: str, line_number: int) -> Union[FreightRecord, RowFailure]:
        """
        Parse one trimmed, non-blank line.

        Returns a FreightRecord, or a RowFailure describing why the row was skipped.
        """
        cols = split_line(line)
        if len(cols) <= IDX_COUNT:
            return RowFailure(line_number, TOO_FEW_COLUMNS, line)

        plate_raw = cols[IDX_PLATE]
        count_raw = cols[IDX_COUNT]
        if not plate_raw:
            return RowFailure(line_number, MISSING_PLATE, line)
        if not count_raw:
            return RowFailure(line_number, MISSING_COUNT, line)

        count = parse_count(count_raw)
        if count is None:
            return RowFailure(line_number, INVALID_COUNT, line)

        map_ref = cols[IDX_MAP]
        city = _column(cols, IDX_CITY)
        region = _column(cols, IDX_REGION)

        driver = self.directory.lookup(plate_raw)
        if driver is not None:
            driver_name = driver.name
            vehicle_class = driver.vehicle_class
        else:
            driver_name = self.settings.placeholder_driver(map_ref)
            vehicle_class = classify_vehicle(normalize_text(cols[IDX_VEHICLE]))

        return FreightRecord(
            driver_name=driver_name,
            license_plate=normalize_plate(plate_raw),
            vehicle_class=vehicle_class,
            map_ref=map_ref,
            city=city,
            region=region,
            date=normalize_date(cols[IDX_DATE]),
            facility=self.facility,
            delivery_count=count,
            price=self.resolver.resolve_rate(self.facility, vehicle_class, count, city, region),
        )
