"""
Turn plotly selection events into filter-store toggles.

Streamlit keeps a chart's selection in widget state across reruns. Each time
a click is consumed the chart key is rotated, so the next render starts with an
empty selection and a second click on the same bar arrives as a new event.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import streamlit as st

from missing_persons.data.filters import FilterStore, NumericRange
from missing_persons.data.geography import Region

logger = logging.getLogger(__name__)

NONCE_PREFIX = "mp_chart_nonce_"


def extract_points(event: Any) -> List[Dict[str, Any]]:
    """Selected points of a ``st.plotly_chart`` event (dict or attribute access)."""
    if not event:
        return []
    selection = event.get("selection") if isinstance(event, dict) else getattr(event, "selection", None)
    if not selection:
        return []
    points = selection.get("points") if isinstance(selection, dict) else getattr(selection, "points", None)
    return [dict(p) for p in points or []]


def _payload(point: Dict[str, Any]) -> Optional[Any]:
    custom = point.get("customdata")
    if custom is None:
        return point.get("label", point.get("location"))
    if isinstance(custom, (list, tuple)) and len(custom) == 1:
        return custom[0]
    return custom


def apply_dimension_clicks(store: FilterStore, dimension: str, points: List[Dict[str, Any]]) -> int:
    """Toggle one predicate value per clicked bar. Returns the number of toggles."""
    dim = store.catalog[dimension]
    toggled = 0
    for point in points:
        payload = _payload(point)
        if payload is None:
            continue
        if dim.is_numerical:
            if not isinstance(payload, (list, tuple)) or len(payload) != 2:
                logger.warning("Ignoring malformed range payload %r for %s", payload, dimension)
                continue
            value = NumericRange(float(payload[0]), float(payload[1]))
        else:
            value = str(payload)
        store.toggle_dimension_range(dimension, value)
        toggled += 1
    return toggled


def apply_region_clicks(store: FilterStore, points: List[Dict[str, Any]]) -> int:
    toggled = 0
    for point in points:
        payload = _payload(point)
        if not isinstance(payload, (list, tuple)) or len(payload) < 2:
            continue
        store.toggle_geography(Region(str(payload[0]), str(payload[1])))
        toggled += 1
    return toggled


def chart_key(base: str) -> str:
    return f"{base}_{st.session_state.get(NONCE_PREFIX + base, 0)}"


def consume(base: str, event: Any) -> List[Dict[str, Any]]:
    """Return the clicked points and rotate the chart key when there are any."""
    points = extract_points(event)
    if points:
        nonce_key = NONCE_PREFIX + base
        st.session_state[nonce_key] = st.session_state.get(nonce_key, 0) + 1
    return points


def handle_dimension_event(store: FilterStore, base: str, dimension: str, event: Any) -> None:
    """Toggle clicked values of ``dimension`` and rerun so every chart redraws."""
    points = consume(base, event)
    if points and apply_dimension_clicks(store, dimension, points):
        st.rerun()


def handle_region_event(store: FilterStore, base: str, event: Any) -> None:
    points = consume(base, event)
    if points and apply_region_clicks(store, points):
        st.rerun()
