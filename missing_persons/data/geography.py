"""
Geographic keys, the county population table and count/rate joins against
the boundary GeoJSON.
"""

from __future__ import annotations

import io
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from missing_persons.config import NON_CONTIGUOUS_STATES, RATE_PER, UNKNOWN

ADMIN_SUFFIX = re.compile(r"\s+(county|parish|borough|census area|municipality)$", re.IGNORECASE)
POPULATION_AREA_COLUMN = "Geographic Area"
POPULATION_VALUE_COLUMN = "2023"


@dataclass(frozen=True)
class Region:
    """A county (``name``) inside a state (``parent``)."""

    name: str
    parent: str

    @property
    def label(self) -> str:
        return f"{self.name}, {self.parent}"


def strip_admin_suffix(name: str) -> str:
    return ADMIN_SUFFIX.sub("", name.strip())


def normalize_region_name(name: str) -> str:
    return strip_admin_suffix(name).lower()


def join_key(name: str, parent: str) -> str:
    """Case-sensitive ``"<name>, <parent>"`` key used to join counts and population."""
    return f"{strip_admin_suffix(name)}, {parent.strip()}"


def rate(count: float, population: float) -> float:
    """Cases per 100k residents. Non-positive population is treated as 1."""
    if population is None or population <= 0:
        population = 1
    return count / population * RATE_PER


def parse_population(csv_text: str) -> Dict[str, int]:
    """Parse the county population estimates CSV into ``join_key -> population``.

    Rows whose area is not ``"<county>, <state>"`` or whose value is not an
    integer are skipped.
    """
    try:
        table = pd.read_csv(io.StringIO(csv_text), dtype=str)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise ValueError(f"unreadable population CSV: {exc}") from exc
    missing = {POPULATION_AREA_COLUMN, POPULATION_VALUE_COLUMN} - set(table.columns)
    if missing:
        raise ValueError(f"population CSV missing columns: {sorted(missing)}")

    population: Dict[str, int] = {}
    for area, raw_value in zip(table[POPULATION_AREA_COLUMN], table[POPULATION_VALUE_COLUMN]):
        if not isinstance(area, str) or not isinstance(raw_value, str):
            continue
        parts = area.lstrip(".").split(", ")
        if len(parts) != 2:
            continue
        try:
            value = int(raw_value.replace(",", "").strip())
        except ValueError:
            continue
        population[join_key(parts[0], parts[1])] = value
    return population


def _count_by_key(frame: pd.DataFrame, indices: Iterable[int]) -> Dict[str, int]:
    subset = frame.loc[list(indices), ["county", "state"]] if len(frame) else frame
    counts: Dict[str, int] = {}
    for county, state in zip(subset["county"], subset["state"]):
        if county == UNKNOWN or state == UNKNOWN:
            continue
        key = join_key(county, state)
        counts[key] = counts.get(key, 0) + 1
    return counts


def county_rates(
    frame: pd.DataFrame,
    indices: Iterable[int],
    county_geojson: Dict[str, Any],
    population: Dict[str, int],
) -> pd.DataFrame:
    """One row per county feature with filtered count, population and rate per 100k.

    Join misses default to count 0 and population 1.
    """
    counts = _count_by_key(frame, indices)
    rows: List[Dict[str, Any]] = []
    for feature in county_geojson.get("features", []):
        props = feature.get("properties") or {}
        full_name = props.get("NAMELSAD") or props.get("NAME") or ""
        state = props.get("STATE") or ""
        key = join_key(full_name, state)
        count = counts.get(key, 0)
        pop = population.get(key, 1)
        rows.append(
            {
                "key": key,
                "name": props.get("NAME") or strip_admin_suffix(full_name),
                "full_name": full_name,
                "state": state,
                "count": count,
                "population": pop,
                "rate": rate(count, pop),
            }
        )
    return pd.DataFrame(rows, columns=["key", "name", "full_name", "state", "count", "population", "rate"])


def state_counts(
    frame: pd.DataFrame,
    indices: Iterable[int],
    state_geojson: Dict[str, Any],
    exclude: Optional[set] = None,
) -> pd.DataFrame:
    """Filtered record count per state feature; non-contiguous states are left out."""
    exclude = NON_CONTIGUOUS_STATES if exclude is None else exclude
    subset = frame.loc[list(indices), "state"] if len(frame) else pd.Series(dtype=str)
    counts = subset.value_counts().to_dict()
    rows = []
    for feature in state_geojson.get("features", []):
        name = (feature.get("properties") or {}).get("NAME")
        if not name or name in exclude:
            continue
        rows.append({"state": name, "count": int(counts.get(name, 0))})
    return pd.DataFrame(rows, columns=["state", "count"])


def keyed_geojson(geojson: Dict[str, Any], key_func) -> Dict[str, Any]:
    """Copy of ``geojson`` with ``id`` set on every feature for plotly's ``locations``."""
    features = []
    for feature in geojson.get("features", []):
        props = feature.get("properties") or {}
        features.append({**feature, "id": key_func(props)})
    return {**geojson, "features": features}


def county_feature_key(props: Dict[str, Any]) -> str:
    return join_key(props.get("NAMELSAD") or props.get("NAME") or "", props.get("STATE") or "")
