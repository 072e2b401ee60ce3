"""Manual entry, dashboard totals and history filtering."""
import pytest
import sys
import os
from datetime import date

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from freight_rates.config.settings import Settings
from freight_rates.engine import DriverDirectory, FreightRecord, RateResolver
from freight_rates.engine.models import TRUCK
from freight_rates.services.record_service import (
    build_manual_record, date_range_for, filter_records, summarize,
)


@pytest.fixture(scope="module")
def settings():
    return Settings.load()


@pytest.fixture(scope="module")
def resolver(settings):
    return RateResolver(settings)


@pytest.fixture(scope="module")
def directory(settings):
    return DriverDirectory.from_csv(settings.drivers_csv)


def record(driver, plate, facility, run_date, price, count=10, created_at=None, city="", region=""):
    return FreightRecord(
        driver_name=driver, license_plate=plate, vehicle_class="VUC", map_ref="",
        city=city, region=region, date=run_date, facility=facility,
        delivery_count=count, price=price, created_at=created_at,
    )


@pytest.fixture
def records():
    return [
        record("Ana", "AAA1111", "Contagem", "2024-03-05", 750, count=12, created_at=1.0, city="Esmeraldas"),
        record("Bruno", "BBB2222", "Santa Luzia", "2024-03-07", 1050, count=8, created_at=2.0),
        record("Carla", "CCC3333", "Contagem", "2024-03-05", 900, count=20, created_at=3.0),
        record("Davi", "DDD4444", "Santa Luzia", "2024-02-20", 820, count=22, created_at=4.0),
    ]


# ----------------------------------------------------------------------------
# Manual entry
# ----------------------------------------------------------------------------

def test_manual_record_priced_from_typed_vehicle(settings, resolver, directory):
    rec = build_manual_record(
        facility="Santa Luzia", plate="abc-1234", vehicle_text="Truck", count=11,
        city="Confins", run_date="10/04/2024", map_ref="77",
        resolver=resolver, directory=directory, settings=settings,
    )
    assert rec.price == 1125
    assert rec.vehicle_class == TRUCK
    assert rec.license_plate == "ABC1234"
    assert rec.date == "2024-04-10"
    assert rec.driver_name == "Motorista (Rota 77)"


def test_manual_record_fills_roster_name(settings, resolver, directory):
    rec = build_manual_record(
        facility="Contagem", plate="grv-6566", vehicle_text="TRUCK", count=5,
        resolver=resolver, directory=directory, settings=settings,
    )
    assert rec.driver_name == "Ronaldo Jose Da Silva"
    assert rec.price == 1000


def test_manual_record_keeps_typed_driver(settings, resolver, directory):
    rec = build_manual_record(
        facility="Contagem", plate="GRV6566", vehicle_text="VUC", count=5,
        driver_name="  Substituto ", resolver=resolver, directory=directory, settings=settings,
    )
    assert rec.driver_name == "Substituto"


# ----------------------------------------------------------------------------
# Dashboard totals
# ----------------------------------------------------------------------------

def test_summarize(records):
    stats = summarize(records)
    assert stats["total_freights"] == 4
    assert stats["total_value"] == 3520
    assert stats["total_deliveries"] == 62
    assert stats["by_facility"] == {"Santa Luzia": 1870.0, "Contagem": 1650.0}


def test_summarize_empty():
    stats = summarize([])
    assert stats["total_freights"] == 0
    assert stats["total_value"] == 0
    assert stats["by_facility"] == {"Santa Luzia": 0.0, "Contagem": 0.0}


# ----------------------------------------------------------------------------
# Filtering
# ----------------------------------------------------------------------------

def test_filter_sorts_newest_date_then_latest_arrival(records):
    plates = [r.license_plate for r in filter_records(records)]
    assert plates == ["BBB2222", "CCC3333", "AAA1111", "DDD4444"]


def test_filter_by_search(records):
    assert [r.driver_name for r in filter_records(records, search="esmeraldas")] == ["Ana"]
    assert [r.driver_name for r in filter_records(records, search="ddd")] == ["Davi"]


def test_filter_by_facility(records):
    result = filter_records(records, facility="Contagem")
    assert {r.facility for r in result} == {"Contagem"}
    assert len(result) == 2


def test_filter_by_date_range(records):
    result = filter_records(records, start="2024-03-01", end="2024-03-05")
    assert [r.license_plate for r in result] == ["CCC3333", "AAA1111"]


def test_filter_empty():
    assert filter_records([]) == []


def test_date_range_presets():
    wednesday = date(2024, 3, 6)
    assert date_range_for("week", wednesday) == ("2024-03-03", "2024-03-09")
    assert date_range_for("last-month", wednesday) == ("2024-02-01", "2024-02-29")
    assert date_range_for("all", wednesday) == (None, None)
