"""
Streamlit UI for the CDD freight management screen.

Features:
- Dashboard totals per facility
- CSV import with default facility
- Manual entry with live price and resolution trace
- Filterable history with CSV export
- Tariff and roster reference tabs

Records live in the Streamlit session only.
"""
import streamlit as st
import pandas as pd
import sys
import time
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from freight_rates.config.settings import get_settings, configure_logging
from freight_rates.engine import DriverDirectory, RateResolver
from freight_rates.engine.models import FACILITIES
from freight_rates.ingest.import_pipeline import ImportPipeline
from freight_rates.services.record_service import (
    DATE_PRESETS, build_manual_record, date_range_for, filter_records,
    records_to_frame, summarize,
)


st.set_page_config(
    page_title="Freight Management",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_components():
    """Get cached engine components."""
    configure_logging()
    settings = get_settings()
    resolver = RateResolver(settings)
    directory = DriverDirectory.from_csv(settings.drivers_csv)
    pipeline = ImportPipeline(settings=settings, directory=directory, resolver=resolver)
    return settings, resolver, directory, pipeline


try:
    settings, resolver, directory, pipeline = get_components()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()

if 'records' not in st.session_state:
    st.session_state.records = []


def add_records(new_records):
    """Stamp arrival time and put the new records on top of the list."""
    now = time.time()
    for offset, record in enumerate(new_records):
        record.created_at = now + offset * 1e-6
    st.session_state.records = list(new_records) + st.session_state.records


def money(value: float) -> str:
    return f"R$ {value:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


# ============================================================================
# SIDEBAR: Dashboard
# ============================================================================
with st.sidebar:
    st.header("📊 Overview")
    stats = summarize(st.session_state.records)
    st.metric("Total Value", money(stats["total_value"]))
    st.metric("Runs", stats["total_freights"])
    st.metric("Deliveries", stats["total_deliveries"])
    st.divider()
    for facility, value in stats["by_facility"].items():
        st.metric(f"CDD {facility}", money(value))


st.title("Freight Management")
st.caption(f"Rate Engine Active | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2, tab3, tab4 = st.tabs(["🚚 New Entry", "📋 History", "💲 Tariffs", "⚙️ System"])


# ============================================================================
# TAB 1: IMPORT + MANUAL ENTRY
# ============================================================================
with tab1:
    with st.container(border=True):
        st.markdown("##### 📥 Import CSV")
        c1, c2 = st.columns([1, 2])
        with c1:
            import_facility = st.radio(
                "Default CDD for import",
                FACILITIES,
                index=FACILITIES.index(settings.default_facility),
                horizontal=True,
            )
        with c2:
            upload = st.file_uploader("Export file", type=["csv"], label_visibility="collapsed")

        if upload is not None and st.button("Import", type="primary"):
            text = upload.getvalue().decode("utf-8-sig", errors="replace")
            result = pipeline.run(text, import_facility)
            if result.is_total_failure:
                st.error("No valid records found in the file.")
            else:
                add_records(result.records)
                msg = f"{result.success_count} records imported."
                if result.failure_count:
                    msg += f" {result.failure_count} lines skipped."
                st.success(msg)

        st.caption("CSV columns: Date (E), Map (G), Vehicle (L), Plate (M), Count (V), City (AK), Region (AL).")

    st.markdown("#### Manual Entry")
    with st.form("manual_entry", clear_on_submit=False):
        c1, c2, c3 = st.columns(3)
        with c1:
            facility = st.selectbox("CDD", FACILITIES)
            plate = st.text_input("Plate")
            driver_name = st.text_input("Driver (blank = roster)")
        with c2:
            vehicle_text = st.selectbox("Vehicle", ["VUC", "TOCO", "TRUCK"])
            count = st.number_input("Deliveries", min_value=1, value=1, step=1)
            run_date = st.date_input("Date")
        with c3:
            map_ref = st.text_input("Map")
            city = st.text_input("City")
            region = st.text_input("Region")

        quote = resolver.quote(facility, vehicle_text, int(count), city, region)
        st.metric("Price", money(quote.price))
        with st.expander("🔍 Resolution Details"):
            st.text(quote.get_trace_text())

        if st.form_submit_button("➕ Add Record", type="primary"):
            if not plate.strip():
                st.warning("Plate is required")
            else:
                record = build_manual_record(
                    facility=facility,
                    plate=plate,
                    vehicle_text=vehicle_text,
                    count=int(count),
                    city=city,
                    region=region,
                    run_date=run_date.isoformat(),
                    map_ref=map_ref,
                    driver_name=driver_name,
                    resolver=resolver,
                    directory=directory,
                    settings=settings,
                )
                add_records([record])
                st.rerun()


# ============================================================================
# TAB 2: HISTORY
# ============================================================================
with tab2:
    c1, c2, c3 = st.columns([2, 1, 1])
    with c1:
        search = st.text_input("Search", placeholder="Driver, plate or route...", label_visibility="collapsed")
    with c2:
        facility_filter = st.selectbox("CDD", ("all",) + FACILITIES, label_visibility="collapsed")
    with c3:
        preset = st.selectbox("Period", DATE_PRESETS, label_visibility="collapsed")

    start, end = date_range_for(preset)
    if preset == 'custom':
        d1, d2 = st.columns(2)
        start = d1.date_input("From", value=None)
        end = d2.date_input("To", value=None)
        start = start.isoformat() if start else None
        end = end.isoformat() if end else None

    visible = filter_records(st.session_state.records, search, facility_filter, start, end)
    df = records_to_frame(visible)

    if df.empty:
        st.info("No records found.")
    else:
        st.dataframe(
            df[['date', 'facility', 'driver_name', 'license_plate', 'vehicle_class',
                'route', 'delivery_count', 'price']],
            use_container_width=True,
            hide_index=True,
        )
        st.download_button(
            "📥 CSV",
            data=df.drop(columns=['created_at']).to_csv(index=False),
            file_name=f"freights_{datetime.now().strftime('%Y%m%d')}.csv",
            mime="text/csv",
        )
    st.caption(f"Records: {len(st.session_state.records):,} | Visible: {len(visible):,}")

    if st.session_state.records and st.button("🗑️ Clear Session"):
        st.session_state.records = []
        st.rerun()


# ============================================================================
# TAB 3: TARIFFS + ROSTER
# ============================================================================
with tab3:
    st.subheader("💲 Negotiated Tariffs")
    st.dataframe(
        pd.DataFrame([{
            'CDD': r.facility,
            'Zone': 'special' if r.special else 'standard',
            'Vehicle': r.vehicle_class,
            'Rule': r.describe(),
        } for r in resolver.tariff_table.rules]),
        use_container_width=True,
        hide_index=True,
    )

    st.subheader("👤 Fixed Drivers")
    st.dataframe(
        pd.DataFrame([{
            'Plate': e.plate, 'Driver': e.name, 'Vehicle': e.vehicle_class, 'CDD': e.facility,
        } for e in directory.entries.values()]),
        use_container_width=True,
        hide_index=True,
    )


# ============================================================================
# TAB 4: SYSTEM INFO
# ============================================================================
with tab4:
    st.header("System Status")
    c1, c2, c3 = st.columns(3)
    c1.metric("Tariff Rules", len(resolver.tariff_table.rules))
    c2.metric("Drivers", len(directory))
    c3.metric("Default CDD", settings.default_facility)
    st.caption(f"Reference data: {settings.data_dir}")
