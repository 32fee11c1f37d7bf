from __future__ import annotations

import pandas as pd
import streamlit as st

from missing_persons.data.projection import PlotRecord
from missing_persons.ui.components.formatting import format_date, format_measure, format_number
from missing_persons.ui.components.tables import render_table
from missing_persons.ui.pages.context import PageContext

MAX_PICKER_ROWS = 500

TABLE_COLUMNS = {
    "index": "Record",
    "first_name": "First Name",
    "last_name": "Last Name",
    "gender": "Gender",
    "age": "Age",
    "years_missing": "Years Missing",
    "race": "Race",
    "eye_color": "Eye Color",
    "height": "Height (in)",
    "weight": "Weight (lb)",
    "county": "County",
    "state": "State",
}


def _search(frame: pd.DataFrame, query: str) -> pd.DataFrame:
    query = query.strip().lower()
    if not query:
        return frame
    haystack = (
        frame["first_name"].str.lower()
        + " "
        + frame["last_name"].str.lower()
        + " "
        + frame["county"].str.lower()
        + " "
        + frame["state"].str.lower()
    )
    return frame[haystack.str.contains(query, regex=False)]


def _record_card(record: PlotRecord) -> None:
    col_photo, col_fields = st.columns([1, 2])
    with col_photo:
        if record.photo_url:
            st.image(record.photo_url, caption=record.full_name, use_container_width=True)
        else:
            st.caption("No photo on file.")
    with col_fields:
        st.markdown(f"### {record.full_name}")
        st.markdown(
            "\n".join(
                [
                    f"- **Gender:** {record.gender}",
                    f"- **Age when missing:** {format_measure(record.age, 'years')}",
                    f"- **Years missing:** {format_number(record.years_missing, decimals=1)}",
                    f"- **Race:** {record.race}",
                    f"- **Eye color:** {record.eye_color}",
                    f"- **Height:** {format_measure(record.height, 'in')}",
                    f"- **Weight:** {format_measure(record.weight, 'lb')}",
                    f"- **Last seen:** {record.county}, {record.state}",
                    f"- **Date of last contact:** {format_date(record.last_seen_date)}",
                ]
            )
        )
        if record.circumstances:
            st.markdown("**Circumstances**")
            st.write(record.circumstances)


def render(context: PageContext) -> None:
    st.subheader("Case Details")
    store = context.store
    filtered = store.filtered_frame()
    if filtered.empty:
        st.info("No data for the current filters.")
        return

    query = st.text_input("Search by name, county or state", key="mp_details_search")
    matches = _search(filtered, query)
    if matches.empty:
        st.info("No matching cases.")
    else:
        if len(matches) > MAX_PICKER_ROWS:
            st.caption(f"Showing the first {MAX_PICKER_ROWS:,} of {len(matches):,} matching cases. Narrow the search to see more.")
        options = matches["index"].head(MAX_PICKER_ROWS).tolist()
        labels = {
            int(idx): f"{row.first_name} {row.last_name} ({row.county}, {row.state})"
            for idx, row in zip(options, matches.head(MAX_PICKER_ROWS).itertuples())
        }
        chosen = st.selectbox(
            "Case",
            options=options,
            format_func=lambda idx: labels.get(int(idx), str(idx)),
            key="mp_details_case",
        )
        if chosen is not None:
            _record_card(store.record(int(chosen)))

    st.markdown("#### Matching Records")
    table = filtered[list(TABLE_COLUMNS)].rename(columns=TABLE_COLUMNS)
    render_table(
        table,
        column_config={"Years Missing": {"type": "number", "decimals": 1}},
        export_file_name="missing_persons_filtered.csv",
    )
