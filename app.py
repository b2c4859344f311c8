from __future__ import annotations

import streamlit as st

from ratiofin.config import RECORDS_CACHE_TTL_SECONDS, settings, setup_logger
from ratiofin.models import FinancialInput
from ratiofin.ratios import evaluate_input
from ratiofin.records import apply_filters, build_history_frame, input_from_mapping, validate_input
from ratiofin.store import RecordStoreError, get_record_store
from ratiofin.ui_components import (
    render_export,
    render_hero,
    render_history,
    render_history_filters,
    render_input_form,
    render_report,
)
from ratiofin.ui_theme import inject_theme

logger = setup_logger("ratiofin.app")

MENU_CALCULATOR = "Calculator"
MENU_HISTORY = "Saved Records"


@st.cache_resource(show_spinner=False)
def _record_store():
    return get_record_store()


@st.cache_data(show_spinner=False, ttl=RECORDS_CACHE_TTL_SECONDS)
def _load_records() -> list[dict]:
    return _record_store().list_records()


def _save(data: FinancialInput) -> None:
    try:
        _record_store().save(data)
    except RecordStoreError as exc:
        st.error(f"Could not save the record: {exc}")
        return
    _load_records.clear()
    st.success(f"Saved {data.company_name} ({data.period_year}).")


def _calculator_page() -> None:
    render_hero("Financial Ratio Analysis", "Current ratio, net profit margin and return on equity")

    raw = render_input_form()
    if raw is not None:
        data = input_from_mapping(raw)
        errors = validate_input(data)
        if errors:
            for message in errors:
                st.error(message)
        else:
            st.session_state["last_input"] = data
            logger.info("Evaluated ratios for %s (%s)", data.company_name, data.period_year)

    data = st.session_state.get("last_input")
    if data is None:
        st.info("Fill in the figures above and press Calculate Ratios.")
        return

    report = evaluate_input(data)
    render_report(report)

    c1, c2 = st.columns(2)
    with c1:
        render_export(report)
    with c2:
        if st.button("Save record", use_container_width=True):
            with st.spinner("Saving..."):
                _save(data)


def _history_page() -> None:
    source = "Supabase" if settings.supabase_enabled else "local file"
    render_hero("Saved Records", f"Ratios recomputed from stored figures ({source})")

    if st.sidebar.button("Reload records"):
        _load_records.clear()

    try:
        with st.spinner("Loading records..."):
            records = _load_records()
    except RecordStoreError as exc:
        st.error(f"Could not load records: {exc}")
        return

    df = build_history_frame(records)
    filters = render_history_filters(df)
    filtered = apply_filters(df, filters)
    render_history(filtered)

    if not filtered.empty:
        latest = filtered.sort_values(by=["period_year"]).iloc[-1]
        report = evaluate_input(input_from_mapping(latest.to_dict()))
        render_export(report, filtered)


def main() -> None:
    st.set_page_config(page_title="Financial Ratio Calculator", layout="wide")
    st.markdown(inject_theme(), unsafe_allow_html=True)

    st.sidebar.title("Menu")
    menu = st.sidebar.radio("Page", options=[MENU_CALCULATOR, MENU_HISTORY])
    if menu == MENU_HISTORY:
        _history_page()
        return
    _calculator_page()


if __name__ == "__main__":
    main()
