"""
Record Service - Manual entry, dashboard totals and list filtering.

Operates on plain FreightRecord lists owned by the caller; nothing here
persists or mutates the records it is given.
"""
from datetime import date, timedelta
from typing import Iterable, Optional

import pandas as pd

from ..config.settings import get_settings, Settings
from ..engine.driver_directory import DriverDirectory
from ..engine.models import FreightRecord, FACILITIES
from ..engine.rate_resolver import RateResolver, get_resolver
from ..engine.text import normalize_plate, normalize_text
from ..engine.vehicle_classifier import classify_vehicle
from ..ingest.dates import normalize_date

DATE_PRESETS = ('all', 'week', 'last-month', 'custom')


def build_manual_record(
    facility: str,
    plate: str,
    vehicle_text: str,
    count: int,
    city: str = "",
    region: str = "",
    run_date: str = "",
    map_ref: str = "",
    driver_name: str = "",
    resolver: Optional[RateResolver] = None,
    directory: Optional[DriverDirectory] = None,
    settings: Optional[Settings] = None,
) -> FreightRecord:
    """
    Price a hand-entered delivery run.

    The price is computed from the typed vehicle text; a blank driver
    name is filled from the roster or the placeholder labels.
    """
    settings = settings or get_settings()
    resolver = resolver or get_resolver()

    if not driver_name.strip():
        directory = directory or DriverDirectory.from_csv(settings.drivers_csv)
        entry = directory.lookup(plate)
        driver_name = entry.name if entry else settings.placeholder_driver(map_ref)

    return FreightRecord(
        driver_name=driver_name.strip(),
        license_plate=normalize_plate(plate),
        vehicle_class=classify_vehicle(normalize_text(vehicle_text)),
        map_ref=map_ref,
        city=city,
        region=region,
        date=normalize_date(run_date),
        facility=facility,
        delivery_count=count,
        price=resolver.resolve_rate(facility, vehicle_text, count, city, region),
    )


def records_to_frame(records: Iterable[FreightRecord]) -> pd.DataFrame:
    """Tabular view of records, one row per record, in list order."""
    rows = []
    for record in records:
        row = record.to_dict()
        row['route'] = record.route
        rows.append(row)
    columns = list(FreightRecord.__dataclass_fields__) + ['route']
    return pd.DataFrame(rows, columns=columns)


def summarize(records: Iterable[FreightRecord]) -> dict:
    """Dashboard totals: runs, value, deliveries and value per facility."""
    df = records_to_frame(records)
    by_facility = {facility: 0.0 for facility in FACILITIES}
    if not df.empty:
        for facility, value in df.groupby('facility')['price'].sum().items():
            if facility in by_facility:
                by_facility[facility] = float(value)

    return {
        "total_freights": int(len(df)),
        "total_value": float(df['price'].sum()) if not df.empty else 0.0,
        "total_deliveries": int(df['delivery_count'].sum()) if not df.empty else 0,
        "by_facility": by_facility,
    }


def date_range_for(preset: str, today: Optional[date] = None) -> tuple[Optional[str], Optional[str]]:
    """
    Resolve a named range to inclusive ISO bounds.

    'week' runs Sunday to Saturday around today; 'last-month' covers the
    previous calendar month. 'all' and 'custom' return (None, None).
    """
    today = today or date.today()
    if preset == 'week':
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        end = start + timedelta(days=6)
        return start.isoformat(), end.isoformat()
    if preset == 'last-month':
        end = today.replace(day=1) - timedelta(days=1)
        start = end.replace(day=1)
        return start.isoformat(), end.isoformat()
    return None, None


def filter_records(
    records: list[FreightRecord],
    search: str = "",
    facility: str = "all",
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> list[FreightRecord]:
    """
    Filter and sort records for display.

    Search matches driver, plate or route case-insensitively. Dates are
    compared as YYYY-MM-DD strings. Newest date first; on equal dates the
    later ``created_at`` comes first.
    """
    if not records:
        return []

    df = records_to_frame(records)
    mask = pd.Series(True, index=df.index)

    if search:
        mask &= (
            df['driver_name'].str.contains(search, case=False, regex=False, na=False) |
            df['license_plate'].str.contains(search, case=False, regex=False, na=False) |
            df['route'].str.contains(search, case=False, regex=False, na=False)
        )
    if facility and facility != 'all':
        mask &= df['facility'] == facility
    if start:
        mask &= df['date'] >= start
    if end:
        mask &= df['date'] <= end

    df = df[mask].copy()
    df['created_sort'] = df['created_at'].fillna(0)
    df = df.sort_values(['date', 'created_sort'], ascending=[False, False], kind='mergesort')
    return [records[i] for i in df.index]
