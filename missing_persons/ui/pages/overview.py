from __future__ import annotations

import pandas as pd
import streamlit as st

from missing_persons.config import EYE_COLOR_SWATCHES
from missing_persons.ui.components.charts import donut_chart, ratio_chart, render_plotly
from missing_persons.ui.components.kpi import KpiCard, render_kpi_cards
from missing_persons.ui.pages.context import PageContext
from missing_persons.ui.pages.helpers import (
    count_by_category,
    representation_ratios,
    safe_median,
    share,
)


def _category_frame(series: pd.Series, label: str) -> pd.DataFrame:
    counts = count_by_category(series.astype(str))
    return pd.DataFrame({label: list(counts.keys()), "Count": list(counts.values())})


def _kpis(context: PageContext, filtered: pd.DataFrame) -> None:
    store = context.store
    render_kpi_cards(
        [
            KpiCard("Records", store.total_count),
            KpiCard("Matching Filters", store.surviving_count),
            KpiCard("Share of Records", share(store.surviving_count, store.total_count), percent=True),
            KpiCard(
                "Median Age (matching)",
                safe_median(filtered["age"][filtered["age"] > 0]) if not filtered.empty else None,
                decimals=1,
            ),
        ]
    )


def _donut(filtered: pd.DataFrame, dimension: str, label: str, colors=None) -> None:
    data = _category_frame(filtered[dimension], label)
    if data.empty:
        st.info(f"No {label.lower()} data for the current filters.")
        return
    fig = donut_chart(data, names=label, values="Count", title=f"Missing Persons by {label}", colors=colors)
    render_plotly(fig, key=f"mp_donut_{dimension}")


def render(context: PageContext) -> None:
    st.subheader("Overview")
    filtered = context.store.filtered_frame()
    _kpis(context, filtered)

    if filtered.empty:
        st.info("No data for the current filters.")
        return

    col_gender, col_eye = st.columns(2)
    with col_gender:
        _donut(filtered, "gender", "Gender")
    with col_eye:
        _donut(filtered, "eye_color", "Eye Color", colors=EYE_COLOR_SWATCHES)
    st.caption("Use the Parallel Coordinates and Geography tabs to filter by clicking bars and map regions.")

    st.markdown("#### Eye Color Representation")
    ratios = representation_ratios(filtered["eye_color"])
    render_plotly(ratio_chart(ratios, title="Eye Color Representation Ratio"))
    st.caption(
        "Ratio of the observed share among matching records to the U.S. population share. "
        "Values above the reference line are over-represented."
    )
