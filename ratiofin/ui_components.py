from __future__ import annotations

from html import escape

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from .config import (
    AMOUNT_FIELDS,
    CLASSIFICATION_RULES,
    DEFAULT_PERIOD_YEAR,
    MAX_PERIOD_YEAR,
    MIN_PERIOD_YEAR,
    RATIO_KINDS,
    RATIO_SUFFIXES,
    RATIO_TITLES,
)
from .models import RatioReport
from .ratios import format_amount, is_positive_label
from .report_pdf import build_report_pdf


def render_hero(title: str, subtitle: str) -> None:
    st.markdown(
        f"""
<div class="hero">
  <h2 style="margin:0">{escape(title)}</h2>
  <p style="margin:.3rem 0 0 0">{escape(subtitle)}</p>
</div>
""",
        unsafe_allow_html=True,
    )


def render_input_form() -> dict | None:
    """Draw the input form; return the raw field values once submitted."""
    with st.form("ratio_form"):
        company_name = st.text_input(
            "Company Name",
            value="",
            placeholder="e.g. PT Example Tbk",
            help="Name of the business entity.",
        )
        period_year = st.number_input(
            "Year",
            min_value=MIN_PERIOD_YEAR,
            max_value=MAX_PERIOD_YEAR,
            value=DEFAULT_PERIOD_YEAR,
            step=1,
            help="Reporting period of the financial statements.",
        )

        raw: dict = {"company_name": company_name, "period_year": int(period_year)}
        left, right = st.columns(2)
        for i, (name, (label, info)) in enumerate(AMOUNT_FIELDS.items()):
            col = left if i % 2 == 0 else right
            raw[name] = col.text_input(label, value="", placeholder="e.g. 1.250.000", help=info)

        submitted = st.form_submit_button("Calculate Ratios", use_container_width=True)

    return raw if submitted else None


def _ratio_card(title: str, value: float, suffix: str, label: str, insight: str) -> str:
    badge = "badge-good" if is_positive_label(label) else "badge-warn"
    return f"""
<div class="ratio-card">
  <div class="title">{escape(title)}</div>
  <div class="value">{value:.2f}{suffix} <span class="badge {badge}">{escape(label)}</span></div>
  <div class="insight">{escape(insight)}</div>
</div>
"""


def _health_gauge(score: int, grade: str) -> go.Figure:
    fig = go.Figure(
        go.Indicator(
            mode="gauge+number",
            value=score,
            number={"suffix": " / 100"},
            title={"text": f"Health Score ({grade})"},
            gauge={
                "axis": {"range": [0, 100]},
                "bar": {"color": "#1565c0"},
                "steps": [
                    {"range": [0, 50], "color": "#fee2e2"},
                    {"range": [50, 80], "color": "#fef3c7"},
                    {"range": [80, 100], "color": "#dcfce7"},
                ],
            },
        )
    )
    fig.update_layout(height=260, margin=dict(t=40, b=10, l=20, r=20))
    return fig


def _ratio_bar(report: RatioReport) -> go.Figure:
    titles = [RATIO_TITLES[item.kind] for item in report.classifications]
    values = [item.value for item in report.classifications]
    thresholds = [CLASSIFICATION_RULES[item.kind][0] for item in report.classifications]
    colors = ["#0d9488" if is_positive_label(item.label) else "#f59e0b" for item in report.classifications]

    fig = go.Figure()
    fig.add_trace(go.Bar(x=titles, y=values, name="Value", marker_color=colors))
    fig.add_trace(
        go.Scatter(
            x=titles,
            y=thresholds,
            mode="markers",
            name="Threshold",
            marker=dict(color="#7c3aed", size=12, symbol="line-ew-open"),
        )
    )
    fig.update_layout(
        height=300,
        margin=dict(t=16, b=12, l=12, r=12),
        legend=dict(orientation="h", yanchor="bottom", y=1.0, xanchor="left", x=0),
    )
    return fig


def render_report(report: RatioReport) -> None:
    data = report.data
    render_hero(f"Analysis Result: {data.company_name}", f"Period {data.period_year}")

    cols = st.columns(len(report.classifications))
    for col, item in zip(cols, report.classifications):
        col.markdown(
            _ratio_card(
                RATIO_TITLES.get(item.kind, item.kind),
                item.value,
                RATIO_SUFFIXES.get(item.kind, ""),
                item.label,
                item.insight,
            ),
            unsafe_allow_html=True,
        )

    c1, c2 = st.columns([2, 3])
    c1.plotly_chart(_health_gauge(report.health_score, report.health_grade), use_container_width=True)
    c2.plotly_chart(_ratio_bar(report), use_container_width=True)

    st.caption(
        " | ".join(f"{label}: {format_amount(getattr(data, name))}" for name, (label, _) in AMOUNT_FIELDS.items())
    )


def render_export(report: RatioReport, history: pd.DataFrame | None = None) -> None:
    safe_name = "".join(ch if ch.isalnum() else "_" for ch in report.data.company_name) or "report"
    st.download_button(
        "Download PDF",
        data=build_report_pdf(report, history),
        file_name=f"ratio_{safe_name}_{report.data.period_year}.pdf",
        mime="application/pdf",
    )


def render_history_filters(df: pd.DataFrame) -> dict:
    st.sidebar.subheader("Filters")
    companies = sorted([x for x in df.get("company_name", pd.Series(dtype=str)).dropna().unique().tolist() if x])
    selected = st.sidebar.multiselect("Company", companies)
    if df.empty:
        year_min, year_max = DEFAULT_PERIOD_YEAR, DEFAULT_PERIOD_YEAR
    else:
        year_min, year_max = int(df["period_year"].min()), int(df["period_year"].max())
    if year_min < year_max:
        year_min, year_max = st.sidebar.slider("Year range", year_min, year_max, (year_min, year_max), 1)
    min_score = st.sidebar.slider("Minimum health score", 0, 100, 0, 5)
    keyword = st.sidebar.text_input("Search company", value="")
    return {
        "companies": selected,
        "year_min": year_min,
        "year_max": year_max,
        "min_score": min_score,
        "keyword": keyword,
    }


def render_history(df: pd.DataFrame) -> None:
    st.subheader("Saved Records")
    if df.empty:
        st.info("No saved records yet.")
        return

    chart_df = df.copy()
    chart_df["record"] = chart_df["company_name"] + " (" + chart_df["period_year"].astype(int).astype(str) + ")"
    long_df = chart_df.melt(
        id_vars=["record"],
        value_vars=list(RATIO_KINDS),
        var_name="ratio",
        value_name="value",
    )
    long_df["ratio"] = long_df["ratio"].map(RATIO_TITLES)
    fig = px.bar(
        long_df,
        x="record",
        y="value",
        color="ratio",
        barmode="group",
        color_discrete_sequence=["#1565c0", "#0d9488", "#f59e0b"],
    )
    fig.update_layout(height=420, margin=dict(t=10, l=0, r=0, b=0), xaxis_title="", yaxis_title="Value")
    st.plotly_chart(fig, use_container_width=True)

    if chart_df["period_year"].nunique() > 1:
        trend = px.line(
            chart_df,
            x="period_year",
            y="health_score",
            color="company_name",
            markers=True,
        )
        trend.update_layout(height=320, margin=dict(t=10, l=0, r=0, b=0), xaxis_title="Year", yaxis_range=[0, 100])
        st.plotly_chart(trend, use_container_width=True)

    show = df.copy()
    for kind in RATIO_KINDS:
        show[f"{RATIO_TITLES[kind]} OK"] = np.where(show[f"{kind}_label"].map(is_positive_label), "Y", "N")
    cols = [
        "company_name",
        "period_year",
        *RATIO_KINDS,
        *[f"{RATIO_TITLES[kind]} OK" for kind in RATIO_KINDS],
        "health_score",
        "health_grade",
    ]
    st.dataframe(show[cols], use_container_width=True, hide_index=True)
    st.download_button(
        "Download CSV",
        data=show.to_csv(index=False).encode("utf-8-sig"),
        file_name="ratio_history.csv",
        mime="text/csv",
    )
