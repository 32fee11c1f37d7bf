"""
Application-wide configuration constants and helper utilities.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class TabConfig:
    key: str
    label: str


@dataclass(frozen=True)
class Dimension:
    name: str
    kind: str  # numerical | categorical
    label: str

    @property
    def is_numerical(self) -> bool:
        return self.kind == "numerical"


@dataclass(frozen=True)
class DataSources:
    dataset_url: str
    county_geojson_url: str
    state_geojson_url: str
    population_url: str
    timeout: float = 30.0


# Ordered tab definitions for the dashboard
TABS: List[TabConfig] = [
    TabConfig("overview", "Overview"),
    TabConfig("parallel", "Parallel Coordinates"),
    TabConfig("geography", "Geography"),
    TabConfig("details", "Person Details"),
]

# Axes of the parallel coordinates plot, in display order
PARALLEL_DIMENSIONS: List[Dimension] = [
    Dimension("age", "numerical", "Age"),
    Dimension("years_missing", "numerical", "Years Missing"),
    Dimension("height", "numerical", "Height (in)"),
    Dimension("eye_color", "categorical", "Eye Color"),
    Dimension("weight", "numerical", "Weight (lbs)"),
    Dimension("race", "categorical", "Race"),
]

DIMENSIONS: Dict[str, Dimension] = {
    dim.name: dim
    for dim in PARALLEL_DIMENSIONS
    + [
        Dimension("gender", "categorical", "Gender"),
        Dimension("state", "categorical", "State"),
    ]
}

UNKNOWN = "Unknown"

# Load-time plausibility bounds; records above any bound are dropped
MAX_WEIGHT = 400
MAX_HEIGHT = 100
MAX_AGE = 115

HISTOGRAM_BUCKETS = 20
RANGE_TOLERANCE = 1e-4
RATE_PER = 100_000
COUNTY_RATE_MAX = 250
DEFAULT_SAMPLE_SIZE = 1000
MIN_SAMPLE_SIZE = 100

NAMUS_BASE_URL = "https://namus.gov"

RACE_LABELS: Dict[str, str] = {
    "Hawaiian / Pacific Islander": "Hawaiian / PI",
    "Black / African American": "African American",
    "American Indian / Alaska Native": "Native Amer",
    "Hispanic / Latino": "Hispanic",
    "White / Caucasian": "Caucasian",
}

# U.S. population eye colour frequencies (%)
EYE_COLOR_POPULATION: Dict[str, float] = {
    "Brown": 45.0,
    "Blue": 27.0,
    "Hazel": 18.0,
    "Green": 9.0,
    "Other": 1.0,
}

EYE_COLOR_SWATCHES: Dict[str, str] = {
    "Brown": "#8B4513",
    "Blue": "#4169E1",
    "Hazel": "#8E7618",
    "Green": "#228B22",
    "Other": "#808080",
}

NON_CONTIGUOUS_STATES = {"Alaska", "Hawaii"}

_BUCKET = "https://storage.googleapis.com/data-visualization-stelath"

DEFAULT_SOURCES = DataSources(
    dataset_url=f"{_BUCKET}/data/MissingPersons.json",
    county_geojson_url=f"{_BUCKET}/assets/us-counties.geojson",
    state_geojson_url=f"{_BUCKET}/assets/us-states.geojson",
    population_url=f"{_BUCKET}/data/co-est2023-pop.csv",
)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def resolve_sources(defaults: Optional[DataSources] = None) -> DataSources:
    """Apply MP_* environment overrides on top of the public source URLs."""
    base = defaults or DEFAULT_SOURCES
    return DataSources(
        dataset_url=os.getenv("MP_DATASET_URL") or base.dataset_url,
        county_geojson_url=os.getenv("MP_COUNTY_GEOJSON_URL") or base.county_geojson_url,
        state_geojson_url=os.getenv("MP_STATE_GEOJSON_URL") or base.state_geojson_url,
        population_url=os.getenv("MP_POPULATION_URL") or base.population_url,
        timeout=_env_float("MP_FETCH_TIMEOUT", base.timeout),
    )
