"""
CSV import tests.

Rows are built with the export's fixed column positions:
E=4 date, G=6 map, L=11 vehicle, M=12 plate, V=21 count, AK=36 city, AL=37 region.
"""
import pytest
import sys
import os

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from freight_rates.config.settings import Settings
from freight_rates.engine import DriverDirectory, RateResolver
from freight_rates.engine.models import (
    VUC, TOCO, OTHER, INVALID_COUNT, MISSING_COUNT, MISSING_PLATE, TOO_FEW_COLUMNS,
)
from freight_rates.ingest import ImportPipeline, import_batch, normalize_date
from freight_rates.ingest.csv_row_parser import choose_delimiter, parse_count, split_line

HEADER = ";".join(f"COL{i}" for i in range(38))


def make_row(date="05/03/2024", map_ref="M100", vehicle="Caminhão Toco", plate="XYZ9999",
             count="12", city="Contagem", region="Centro", sep=";", width=38):
    cols = [""] * width
    values = {4: date, 6: map_ref, 11: vehicle, 12: plate, 21: count, 36: city, 37: region}
    for idx, value in values.items():
        if idx < width:
            cols[idx] = value
    return sep.join(cols)


def payload(*rows):
    return "\n".join((HEADER,) + rows)


@pytest.fixture(scope="module")
def pipeline():
    settings = Settings.load()
    return ImportPipeline(
        settings=settings,
        directory=DriverDirectory.from_csv(settings.drivers_csv),
        resolver=RateResolver(settings),
    )


# ----------------------------------------------------------------------------
# Dates
# ----------------------------------------------------------------------------

@pytest.mark.parametrize("raw,expected", [
    ("05/03/2024", "2024-03-05"),
    ("5/3/2024", "2024-03-05"),
    ("2024-03-05", "2024-03-05"),
    ("32/13/2024", "2024-13-32"),
    ("", ""),
])
def test_normalize_date(raw, expected):
    assert normalize_date(raw) == expected


# ----------------------------------------------------------------------------
# Line splitting
# ----------------------------------------------------------------------------

def test_delimiter_detection():
    assert choose_delimiter("a;b;c") == ";"
    assert choose_delimiter("a,b,c") == ","
    assert choose_delimiter("a;b,c") == ","


def test_split_trims_and_unquotes():
    assert split_line(' "a" ; b ;"c"') == ["a", "b", "c"]
    assert split_line('"Belo Horizonte, MG";x;y') == ["Belo Horizonte, MG", "x", "y"]


@pytest.mark.parametrize("raw,expected", [
    ("12", 12),
    (" 7", 7),
    ("-3", -3),
    ("12 entregas", 12),
    ("abc", None),
    ("٣", None),
])
def test_parse_count(raw, expected):
    assert parse_count(raw) == expected


# ----------------------------------------------------------------------------
# Batches
# ----------------------------------------------------------------------------

def test_one_good_row_one_bad_count(pipeline):
    """A non-numeric count skips that row only."""
    text = payload(make_row(count="abc", plate="AAA1111"), make_row(plate="BBB2222"))
    result = pipeline.run(text, "Contagem")

    assert result.success_count == 1
    assert result.failure_count == 1
    assert result.records[0].license_plate == "BBB2222"
    assert result.failures[0].reason == INVALID_COUNT
    assert result.failures[0].line_number == 2
    assert not result.is_total_failure


def test_unknown_plate_uses_file_vehicle_and_route_placeholder(pipeline):
    result = pipeline.run(payload(make_row()), "Contagem")
    record = result.records[0]

    assert record.driver_name == "Motorista (Rota M100)"
    assert record.vehicle_class == TOCO
    assert record.date == "2024-03-05"
    assert record.facility == "Contagem"
    assert record.delivery_count == 12
    assert record.price == 900
    assert record.route == "M100 - Contagem - Centro"


def test_unknown_plate_without_map(pipeline):
    result = pipeline.run(payload(make_row(map_ref="")), "Contagem")
    assert result.records[0].driver_name == "Motorista Não Identificado"


def test_roster_overrides_file_vehicle(pipeline):
    """Known plates take name and vehicle class from the roster."""
    row = make_row(plate="ovf-5j11", vehicle="Carreta", count="18", city="Confins", region="")
    record = pipeline.run(payload(row), "Santa Luzia").records[0]

    assert record.driver_name == "Joel Gabriel Da Silva"
    assert record.license_plate == "OVF5J11"
    assert record.vehicle_class == VUC
    assert record.price == 750


def test_unclassified_vehicle_imports_with_zero_price(pipeline):
    record = pipeline.run(payload(make_row(vehicle="Carreta")), "Contagem").records[0]
    assert record.vehicle_class == OTHER
    assert record.price == 0


def test_special_zone_priced_for_selected_facility(pipeline):
    row = make_row(vehicle="VUC", count="21", city="Esmeraldas", region="Centro")
    assert pipeline.run(payload(row), "Contagem").records[0].price == 900
    assert pipeline.run(payload(row), "Santa Luzia").records[0].price == 820


def test_row_failures(pipeline):
    text = payload(
        make_row(width=21),
        make_row(plate=""),
        make_row(count=""),
        make_row(count="n/a"),
    )
    result = pipeline.run(text, "Contagem")

    assert result.success_count == 0
    assert [f.reason for f in result.failures] == [
        TOO_FEW_COLUMNS, MISSING_PLATE, MISSING_COUNT, INVALID_COUNT,
    ]
    assert result.is_total_failure
    assert result.summary() == {"imported": 0, "skipped": 4}


def test_short_row_without_city_columns_is_accepted(pipeline):
    record = pipeline.run(payload(make_row(width=22)), "Contagem").records[0]
    assert record.city == ""
    assert record.region == ""
    assert record.price == 900


def test_header_always_skipped(pipeline):
    """The first line is dropped even when it holds data."""
    text = "\n".join([make_row(plate="AAA1111"), make_row(plate="BBB2222")])
    result = pipeline.run(text, "Contagem")
    assert [r.license_plate for r in result.records] == ["BBB2222"]


def test_blank_lines_and_crlf(pipeline):
    text = HEADER + "\r\n" + make_row(plate="AAA1111") + "\r\n\r\n   \r\n" + make_row(plate="BBB2222") + "\r\n"
    result = pipeline.run(text, "Contagem")
    assert [r.license_plate for r in result.records] == ["AAA1111", "BBB2222"]
    assert result.failure_count == 0


def test_comma_separated_quoted_export(pipeline):
    row = make_row(sep=",", date='"07/11/2024"', plate='"JKL-4321"')
    record = pipeline.run(payload(row), "Contagem").records[0]
    assert record.date == "2024-11-07"
    assert record.license_plate == "JKL4321"


def test_order_preserved(pipeline):
    plates = ["AAA0001", "AAA0002", "AAA0003", "AAA0004"]
    result = pipeline.run(payload(*(make_row(plate=p) for p in plates)), "Contagem")
    assert [r.license_plate for r in result.records] == plates


def test_default_facility_from_settings(pipeline):
    record = pipeline.run(payload(make_row()), None).records[0]
    assert record.facility == "Santa Luzia"


def test_blank_facility_is_kept_and_unpriced(pipeline):
    """An empty facility is not replaced by the default; it has no tariff."""
    record = pipeline.run(payload(make_row(vehicle="VUC", count="5")), "").records[0]
    assert record.facility == ""
    assert record.price == 0


def test_import_batch_shortcut():
    result = import_batch(payload(make_row(vehicle="VUC", count="5", city="Esmeraldas")), "Contagem")
    assert result.summary() == {"imported": 1, "skipped": 0}
    assert result.records[0].price == 810


def test_empty_payload(pipeline):
    result = pipeline.run("", "Contagem")
    assert result.is_total_failure
    assert result.failure_count == 0
