"""
Fetch the missing-persons dataset and its geographic reference data.

All four sources are requested concurrently; the combined stage only succeeds
once every fetch has settled without error. There is no partial-data mode.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import requests
import streamlit as st

from missing_persons.config import MAX_AGE, MAX_HEIGHT, MAX_WEIGHT, DataSources, resolve_sources
from missing_persons.data.geography import parse_population
from missing_persons.data.projection import dig

logger = logging.getLogger(__name__)

SOURCE_DATASET = "dataset"
SOURCE_COUNTY_GEOJSON = "county_geojson"
SOURCE_STATE_GEOJSON = "state_geojson"
SOURCE_POPULATION = "population"


class LoadError(RuntimeError):
    """A data source could not be loaded. ``source`` names the failing fetch."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


class FetchError(LoadError):
    """Network failure or non-2xx response."""


class ParseError(LoadError):
    """The response body was not valid JSON/CSV of the expected shape."""


@dataclass
class LoadedSources:
    records: List[Dict[str, Any]]
    county_geojson: Dict[str, Any]
    state_geojson: Dict[str, Any]
    population: Dict[str, int]
    diagnostics: Dict[str, Any] = field(default_factory=dict)


def _as_number(value) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def is_plausible(record: Dict[str, Any]) -> bool:
    age = _as_number(dig(record, "subjectIdentification", "computedMissingMinAge"))
    weight = _as_number(dig(record, "subjectDescription", "weightFrom"))
    height = _as_number(dig(record, "subjectDescription", "heightFrom"))
    return weight <= MAX_WEIGHT and height <= MAX_HEIGHT and age <= MAX_AGE


def filter_plausible(raw: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Drop records with implausible weight, height or age. Records are never modified."""
    return [record for record in raw if isinstance(record, dict) and is_plausible(record)]


def _get(session, source: str, url: str, timeout: float) -> requests.Response:
    logger.info("Fetching %s from %s", source, url)
    try:
        response = session.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise FetchError(source, f"request failed: {exc}") from exc
    if not 200 <= response.status_code < 300:
        raise FetchError(source, f"HTTP {response.status_code} for {url}")
    return response


def _fetch_json(session, source: str, url: str, timeout: float):
    response = _get(session, source, url, timeout)
    try:
        return response.json()
    except ValueError as exc:
        raise ParseError(source, f"invalid JSON: {exc}") from exc


def _fetch_dataset(session, url: str, timeout: float) -> List[Dict[str, Any]]:
    payload = _fetch_json(session, SOURCE_DATASET, url, timeout)
    if not isinstance(payload, list):
        raise ParseError(SOURCE_DATASET, f"expected a JSON array, got {type(payload).__name__}")
    return payload


def _fetch_geojson(session, source: str, url: str, timeout: float) -> Dict[str, Any]:
    payload = _fetch_json(session, source, url, timeout)
    if not isinstance(payload, dict) or not isinstance(payload.get("features"), list):
        raise ParseError(source, "expected a GeoJSON FeatureCollection")
    return payload


def _fetch_population(session, url: str, timeout: float) -> Dict[str, int]:
    response = _get(session, SOURCE_POPULATION, url, timeout)
    try:
        return parse_population(response.text)
    except ValueError as exc:
        raise ParseError(SOURCE_POPULATION, str(exc)) from exc


def load_sources(sources: DataSources, session=None) -> LoadedSources:
    """Fetch every source concurrently and return the validated bundle.

    Raises the first ``LoadError`` (in source order) once all fetches settled.
    A session opened here is closed before returning.
    """
    if session is None:
        with requests.Session() as owned:
            return _load_with_session(sources, owned)
    return _load_with_session(sources, session)


def _load_with_session(sources: DataSources, session) -> LoadedSources:
    jobs: Dict[str, Callable[[], Any]] = {
        SOURCE_DATASET: lambda: _fetch_dataset(session, sources.dataset_url, sources.timeout),
        SOURCE_COUNTY_GEOJSON: lambda: _fetch_geojson(
            session, SOURCE_COUNTY_GEOJSON, sources.county_geojson_url, sources.timeout
        ),
        SOURCE_STATE_GEOJSON: lambda: _fetch_geojson(
            session, SOURCE_STATE_GEOJSON, sources.state_geojson_url, sources.timeout
        ),
        SOURCE_POPULATION: lambda: _fetch_population(session, sources.population_url, sources.timeout),
    }
    with ThreadPoolExecutor(max_workers=len(jobs), thread_name_prefix="mp-fetch") as pool:
        futures = {name: pool.submit(job) for name, job in jobs.items()}
        wait(futures.values())

    results: Dict[str, Any] = {}
    for name, future in futures.items():
        exc = future.exception()
        if exc is not None:
            logger.error("Loading %s failed: %s", name, exc)
            raise exc
        results[name] = future.result()

    raw = results[SOURCE_DATASET]
    records = filter_plausible(raw)
    diagnostics = {
        "raw_row_count": len(raw),
        "kept_row_count": len(records),
        "dropped_implausible": len(raw) - len(records),
        "county_features": len(results[SOURCE_COUNTY_GEOJSON]["features"]),
        "state_features": len(results[SOURCE_STATE_GEOJSON]["features"]),
        "population_rows": len(results[SOURCE_POPULATION]),
        "loaded_at": datetime.now(timezone.utc).isoformat(),
    }
    logger.info(
        "Loaded %d records (%d dropped as implausible)",
        diagnostics["kept_row_count"],
        diagnostics["dropped_implausible"],
    )
    return LoadedSources(
        records=records,
        county_geojson=results[SOURCE_COUNTY_GEOJSON],
        state_geojson=results[SOURCE_STATE_GEOJSON],
        population=results[SOURCE_POPULATION],
        diagnostics=diagnostics,
    )


def load_data(sources: Optional[DataSources] = None) -> LoadedSources:
    """Wrapper that resolves config and calls the cached implementation."""
    from missing_persons.bootstrap_env import ensure_env

    ensure_env()
    sources = sources or resolve_sources()
    # Call cached impl with explicit params for proper cache keying
    return _load_data_impl(
        sources.dataset_url,
        sources.county_geojson_url,
        sources.state_geojson_url,
        sources.population_url,
        sources.timeout,
    )


@st.cache_data(show_spinner="Loading missing persons data…", ttl=3600)
def _load_data_impl(
    dataset_url: str,
    county_geojson_url: str,
    state_geojson_url: str,
    population_url: str,
    timeout: float,
) -> LoadedSources:
    """Cached by source URLs; failures are not cached and surface on every rerun."""
    return load_sources(
        DataSources(
            dataset_url=dataset_url,
            county_geojson_url=county_geojson_url,
            state_geojson_url=state_geojson_url,
            population_url=population_url,
            timeout=timeout,
        )
    )


def clear_cache() -> None:
    _load_data_impl.clear()  # type: ignore[attr-defined]
