from __future__ import annotations

from typing import Any, Dict

import streamlit as st

from missing_persons.config import COUNTY_RATE_MAX
from missing_persons.data.geography import (
    Region,
    county_feature_key,
    county_rates,
    keyed_geojson,
    state_counts,
)
from missing_persons.ui.components.charts import choropleth_map, render_plotly
from missing_persons.ui.components.tables import render_table
from missing_persons.ui.pages.context import PageContext
from missing_persons.ui.selection import chart_key, handle_dimension_event, handle_region_event

COUNTY_HOVER = (
    "<b>%{customdata[0]}, %{customdata[1]}</b>"
    "<br>Missing Persons: %{customdata[2]:,}"
    "<br>Population: %{customdata[3]:,}"
    "<br>Rate per 100k: %{customdata[4]:.2f}<extra></extra>"
)
STATE_HOVER = "<b>%{customdata[0]}</b><br>Missing Persons: %{z:,}<extra></extra>"


@st.cache_data(show_spinner=False)
def _county_shapes(county_geojson: Dict[str, Any]) -> Dict[str, Any]:
    return keyed_geojson(county_geojson, county_feature_key)


def _county_map(context: PageContext) -> None:
    store = context.store
    rates = county_rates(
        store.frame,
        store.surviving_indices,
        context.sources.county_geojson,
        context.sources.population,
    )
    if rates.empty:
        st.info("County boundaries unavailable.")
        return

    selected = [store.is_region_selected(Region(name, state)) for name, state in zip(rates["full_name"], rates["state"])]
    fig = choropleth_map(
        rates,
        _county_shapes(context.sources.county_geojson),
        locations="key",
        z="rate",
        selected=selected,
        custom_columns=["full_name", "state", "count", "population", "rate"],
        hovertemplate=COUNTY_HOVER,
        zmax=COUNTY_RATE_MAX,
        colorbar_title="Rate",
        title="Missing Persons per 100k Residents by County",
    )
    base = "mp_county_map"
    event = render_plotly(fig, key=chart_key(base), selectable=True)
    handle_region_event(store, base, event)

    regions = store.state.regions
    if regions:
        st.caption("Showing cases in " + " and ".join(r.label for r in regions))
    else:
        st.caption("Click on counties to filter cases (click multiple for multi-select).")


def _state_map(context: PageContext) -> None:
    store = context.store
    counts = state_counts(store.frame, store.surviving_indices, context.sources.state_geojson)
    if counts.empty:
        st.info("State boundaries unavailable.")
        return
    selected = [store.is_selected("state", name) for name in counts["state"]]
    fig = choropleth_map(
        counts,
        context.sources.state_geojson,
        locations="state",
        z="count",
        featureidkey="properties.NAME",
        selected=selected,
        custom_columns=["state"],
        hovertemplate=STATE_HOVER,
        color_scale="Reds",
        colorbar_title="Cases",
        title="Missing Persons by State (contiguous U.S.)",
    )
    base = "mp_state_map"
    event = render_plotly(fig, key=chart_key(base), selectable=True)
    handle_dimension_event(store, base, "state", event)


def render(context: PageContext) -> None:
    st.subheader("Geography")
    if context.store.surviving_count == 0:
        st.info("No data for the current filters. Maps show zero counts.")

    _county_map(context)
    _state_map(context)

    st.markdown("#### Top Counties by Rate")
    rates = county_rates(
        context.store.frame,
        context.store.surviving_indices,
        context.sources.county_geojson,
        context.sources.population,
    )
    top = rates[rates["count"] > 0].sort_values("rate", ascending=False).head(15)
    render_table(
        top[["full_name", "state", "count", "population", "rate"]].rename(
            columns={
                "full_name": "County",
                "state": "State",
                "count": "Missing Persons",
                "population": "Population",
                "rate": "Rate per 100k",
            }
        ),
        column_config={
            "Population": {"type": "number"},
            "Rate per 100k": {"type": "number", "decimals": 2},
        },
        height=300,
        export_file_name="county_rates.csv",
    )
