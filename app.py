from missing_persons.bootstrap_env import ensure_env

ensure_env()  # must run before config is resolved

import logging

import streamlit as st

from missing_persons.config import TABS
from missing_persons.data.filters import FilterStore, serialize_filters
from missing_persons.data.loader import LoadError, LoadedSources, clear_cache, load_data
from missing_persons.data.projection import project
from missing_persons.logging_setup import configure_logging
from missing_persons.ui.layout import active_filter_summary, setup_page, sidebar_controls
from missing_persons.ui.pages import details, geography, overview, parallel
from missing_persons.ui.pages.context import PageContext

logger = logging.getLogger("missing_persons.app")

PAGE_RENDERERS = {
    "overview": overview.render,
    "parallel": parallel.render,
    "geography": geography.render,
    "details": details.render,
}


def _filter_store(sources: LoadedSources) -> FilterStore:
    """One store per session, rebuilt whenever a fresh load replaces the records."""
    token = sources.diagnostics.get("loaded_at")
    store = st.session_state.get("mp_store")
    if store is None or st.session_state.get("mp_store_token") != token:
        store = FilterStore(project(sources.records))
        st.session_state["mp_store"] = store
        st.session_state["mp_store_token"] = token
        logger.info("Built filter store over %d records", store.total_count)
    return store


def main() -> None:
    setup_page()
    configure_logging()
    st.title("Missing Persons Data Visualizations")

    try:
        sources = load_data()
    except LoadError as exc:
        logger.error("Data load failed: %s", exc)
        st.error(f"Could not load the {exc.source} source: {exc}")
        if st.button("Retry"):
            clear_cache()
            st.rerun()
        st.stop()

    store = _filter_store(sources)
    sidebar = sidebar_controls(store)
    if sidebar.refresh_requested:
        clear_cache()
        st.rerun()

    st.session_state["mp_active_filters"] = serialize_filters(store.state)

    prev_count = st.session_state.get("mp_prev_surviving_count")
    if prev_count is not None and prev_count != store.surviving_count:
        st.toast(f"Filters applied to {store.surviving_count:,} records", icon="🔎")
    st.session_state["mp_prev_surviving_count"] = store.surviving_count

    if store.total_count == 0:
        st.warning("The dataset is empty after validation. Check the data source configuration.")
        return

    active_filter_summary(store)

    context = PageContext(
        store=store,
        sources=sources,
        selected_dimension=sidebar.selected_dimension,
        sample_size=sidebar.sample_size,
    )

    streamlit_tabs = st.tabs([tab.label for tab in TABS])
    for streamlit_tab, tab_config in zip(streamlit_tabs, TABS):
        renderer = PAGE_RENDERERS.get(tab_config.key)
        if renderer is None:
            continue
        with streamlit_tab:
            renderer(context)


if __name__ == "__main__":
    main()
