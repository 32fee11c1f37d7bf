"""
Layout helpers for the Streamlit application (sidebar, header, filter banner).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import streamlit as st

from missing_persons.config import (
    DEFAULT_SAMPLE_SIZE,
    MIN_SAMPLE_SIZE,
    PARALLEL_DIMENSIONS,
    Dimension,
)
from missing_persons.data.filters import FilterStore, NumericRange
from missing_persons.ui.components.formatting import format_number


@dataclass
class SidebarState:
    selected_dimension: Optional[Dimension]
    sample_size: int
    refresh_requested: bool


def setup_page() -> None:
    """Set Streamlit page configuration and top-level styling."""
    st.set_page_config(
        page_title="Missing Persons Data Visualizations",
        layout="wide",
        page_icon=":mag:",
    )
    # Inject a small CSS override for PRIMARY buttons in the sidebar to appear as "danger" (red)
    _inject_sidebar_primary_button_red()


def _value_label(value) -> str:
    return str(value) if isinstance(value, NumericRange) else f"“{value}”"


def _active_filter_buttons(store: FilterStore) -> None:
    """One removable chip per active predicate value; clicking toggles it off."""
    state = store.state
    if state.is_empty:
        st.sidebar.caption("No filters active. Click bars, slices or map regions to filter.")
        return

    for predicate in state.dimensions:
        label = store.catalog[predicate.dimension].label
        for i, value in enumerate(predicate.values):
            if st.sidebar.button(
                f"✕ {label}: {_value_label(value)}",
                key=f"mp_remove_{predicate.dimension}_{i}_{value}",
            ):
                store.toggle_dimension_range(predicate.dimension, value)
                st.rerun()
    for i, region in enumerate(state.regions):
        if st.sidebar.button(f"✕ {region.label}", key=f"mp_remove_region_{i}_{region.label}"):
            store.toggle_geography(region)
            st.rerun()


def sidebar_controls(store: FilterStore) -> SidebarState:
    """
    Render the sidebar filter controls and return the selected view options.
    """
    st.sidebar.header("Cross Filters")
    refresh_requested = st.sidebar.button("🔄 Refresh Data", key="mp_refresh")

    st.sidebar.markdown(
        f"**{format_number(store.surviving_count)}** of {format_number(store.total_count)} records match"
    )
    _active_filter_buttons(store)

    if st.sidebar.button("Clear All Filters", key="mp_clear_all", type="primary", disabled=store.state.is_empty):
        store.clear_all()
        st.rerun()

    st.sidebar.divider()

    with st.sidebar.expander("Chart Options", expanded=True):
        options: List[Optional[Dimension]] = [None] + list(PARALLEL_DIMENSIONS)
        selected_dimension = st.selectbox(
            "Distribution dimension",
            options=options,
            index=0,
            key="mp_selected_dimension",
            format_func=lambda d: "Choose a dimension…" if d is None else d.label,
            help="Shows the filtered distribution of this dimension against the national average.",
        )
        total = max(store.total_count, MIN_SAMPLE_SIZE)
        sample_size = int(
            st.number_input(
                "Parallel coordinates sample size",
                min_value=MIN_SAMPLE_SIZE,
                max_value=total,
                value=min(DEFAULT_SAMPLE_SIZE, total),
                step=100,
                key="mp_sample_size",
            )
        )

    return SidebarState(
        selected_dimension=selected_dimension,
        sample_size=sample_size,
        refresh_requested=refresh_requested,
    )


def active_filter_summary(store: FilterStore) -> None:
    lines = store.describe()
    summary_text = "Active Filters: " + " | ".join(lines) if lines else "Active Filters: All data"
    st.markdown(f"**{summary_text}**")
    st.caption(f"Showing {format_number(store.surviving_count)} of {format_number(store.total_count)} missing persons after filters.")


def _inject_sidebar_primary_button_red() -> None:
    """Style PRIMARY buttons in the sidebar as red (danger-like) so reset actions stand out."""
    st.sidebar.markdown(
        """
        <style>
        div[data-testid="stSidebar"] button[kind="primary"],
        div[data-testid="stSidebar"] button[data-testid="baseButton-primary"] {
            background-color: #e53935 !important; /* red 600 */
            border-color: #e53935 !important;
            color: #ffffff !important;
        }
        div[data-testid="stSidebar"] button[kind="primary"]:hover,
        div[data-testid="stSidebar"] button[data-testid="baseButton-primary"]:hover {
            background-color: #c62828 !important; /* red 800 */
            border-color: #c62828 !important;
            color: #ffffff !important;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )
