from __future__ import annotations

from typing import List

import pandas as pd
import streamlit as st

from missing_persons.config import DIMENSIONS, HISTOGRAM_BUCKETS, PARALLEL_DIMENSIONS, Dimension
from missing_persons.data.filters import FilterStore, NumericRange
from missing_persons.ui.components.charts import (
    category_bars,
    histogram_bars,
    parallel_coordinates,
    render_plotly,
)
from missing_persons.ui.pages.context import PageContext
from missing_persons.ui.pages.helpers import (
    Bucket,
    bin_values,
    count_by_category,
    count_in_buckets,
    national_average,
    sample_indices,
)
from missing_persons.ui.selection import chart_key, handle_dimension_event

AXIS_COLUMNS = 3
# Gender has no parallel axis but is filterable from the grid
FILTER_DIMENSIONS = list(PARALLEL_DIMENSIONS) + [DIMENSIONS["gender"]]


def bucket_table(store: FilterStore, dim: Dimension, values: pd.Series) -> pd.DataFrame:
    """Counts of ``values`` over the dimension's full-dataset buckets, with selection flags."""
    buckets: List[Bucket] = bin_values(store.frame[dim.name], HISTOGRAM_BUCKETS)
    counts = count_in_buckets(values, buckets)
    return pd.DataFrame(
        {
            "low": [b.low for b in buckets],
            "high": [b.high for b in buckets],
            "count": counts,
            "selected": [store.is_selected(dim.name, NumericRange(b.low, b.high)) for b in buckets],
        }
    )


def category_table(store: FilterStore, dim: Dimension, values: pd.Series) -> pd.DataFrame:
    counts = count_by_category(values.astype(str))
    return pd.DataFrame(
        {
            dim.label: list(counts.keys()),
            "count": list(counts.values()),
            "selected": [store.is_selected(dim.name, name) for name in counts],
        }
    )


def _axis_filter_chart(context: PageContext, dim: Dimension) -> None:
    store = context.store
    base = f"mp_axis_{dim.name}"
    if dim.is_numerical:
        table = bucket_table(store, dim, store.frame[dim.name])
        fig = histogram_bars(table, title=dim.label, yaxis_title=None, height=220)
    else:
        table = category_table(store, dim, store.frame[dim.name])
        fig = category_bars(table, x=dim.label, y="count", title=dim.label, yaxis_title=None, height=220)
    fig.update_layout(margin=dict(l=30, r=10, t=40, b=30), showlegend=False)
    event = render_plotly(fig, key=chart_key(base), selectable=True)
    handle_dimension_event(store, base, dim.name, event)


def _distribution_chart(context: PageContext, dim: Dimension) -> None:
    store = context.store
    filtered = store.filtered_frame()
    st.markdown(f"#### Distribution of {dim.label}")
    base = f"mp_distribution_{dim.name}"
    if dim.is_numerical:
        values = pd.to_numeric(filtered[dim.name], errors="coerce")
        values = values[values > 0]
        if values.empty:
            st.info("No data available for the selected dimension.")
            return
        table = bucket_table(store, dim, values)
        average = national_average(store.frame[dim.name])
        fig = histogram_bars(table, average=average, xaxis_title=dim.label)
    else:
        table = category_table(store, dim, filtered[dim.name])
        if table.empty:
            st.info("No data available for the selected dimension.")
            return
        fig = category_bars(table, x=dim.label, y="count")
    event = render_plotly(fig, key=chart_key(base), selectable=True)
    handle_dimension_event(store, base, dim.name, event)
    if dim.is_numerical:
        st.caption("Bucket boundaries come from the full dataset; the dashed line is the national average.")


def render(context: PageContext) -> None:
    st.subheader("Parallel Coordinates")
    store = context.store
    if store.frame.empty:
        st.info("No data for the current filters.")
        return

    sampled = sample_indices(store.total_count, context.sample_size)
    sample_df = store.frame.iloc[sampled]
    highlighted = store.surviving_mask()[sampled]
    fig = parallel_coordinates(sample_df, PARALLEL_DIMENSIONS, store.frame, highlighted)
    render_plotly(fig, key="mp_parcoords")
    st.caption(
        f"{len(sampled):,} sampled records. Matching records are coloured by gender "
        "(pink female, blue male); the rest are grey."
    )
    if store.surviving_count == 0:
        st.warning("No data for the current filters.")

    st.markdown("#### Filter by Axis")
    st.caption("Click a bar to toggle it as a filter. Several bars on one axis combine with OR; axes combine with AND.")
    for idx in range(0, len(FILTER_DIMENSIONS), AXIS_COLUMNS):
        row = FILTER_DIMENSIONS[idx: idx + AXIS_COLUMNS]
        for col, dim in zip(st.columns(len(row)), row):
            with col:
                _axis_filter_chart(context, dim)

    if context.selected_dimension is None:
        st.info("Choose a dimension in the sidebar to see its filtered distribution.")
    else:
        _distribution_chart(context, context.selected_dimension)
