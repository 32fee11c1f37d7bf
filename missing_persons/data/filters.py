"""
Cross-filter state shared by every chart on the dashboard.

``FilterStore`` owns the only mutable ``FilterState``. Charts read the
surviving index set and change the state exclusively through the toggle and
clear operations; every mutation recomputes the surviving indices from
scratch before returning.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from missing_persons.config import DIMENSIONS, RANGE_TOLERANCE, Dimension
from missing_persons.data.geography import Region, normalize_region_name
from missing_persons.data.projection import PlotRecord, records_frame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NumericRange:
    low: float
    high: float

    def matches(self, other: "NumericRange", tolerance: float = RANGE_TOLERANCE) -> bool:
        return abs(self.low - other.low) < tolerance and abs(self.high - other.high) < tolerance

    def __str__(self) -> str:
        return f"{self.low:.1f}–{self.high:.1f}"


FilterValue = Union[NumericRange, str]


def same_value(a: FilterValue, b: FilterValue) -> bool:
    if isinstance(a, NumericRange) and isinstance(b, NumericRange):
        return a.matches(b)
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    return False


@dataclass(frozen=True)
class DimensionPredicate:
    dimension: str
    values: Tuple[FilterValue, ...]

    def contains(self, value: FilterValue) -> bool:
        return any(same_value(existing, value) for existing in self.values)

    def mask(self, frame: pd.DataFrame) -> pd.Series:
        column = frame[self.dimension]
        combined = pd.Series(False, index=frame.index)
        for value in self.values:
            if isinstance(value, NumericRange):
                numeric = pd.to_numeric(column, errors="coerce")
                combined |= (numeric >= value.low) & (numeric <= value.high)
            else:
                combined |= column == value
        return combined


@dataclass(frozen=True)
class FilterState:
    dimensions: Tuple[DimensionPredicate, ...] = ()
    regions: Tuple[Region, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.dimensions and not self.regions

    def predicate(self, dimension: str) -> Optional[DimensionPredicate]:
        return next((p for p in self.dimensions if p.dimension == dimension), None)


EMPTY_STATE = FilterState()


def _check_value(dim: Dimension, value: FilterValue) -> FilterValue:
    if dim.is_numerical:
        if isinstance(value, NumericRange):
            return value
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return NumericRange(float(value[0]), float(value[1]))
        raise TypeError(f"{dim.name} expects a numeric range, got {value!r}")
    if not isinstance(value, str):
        raise TypeError(f"{dim.name} expects a category string, got {value!r}")
    return value


def toggle_dimension(
    state: FilterState,
    dimension: str,
    value: FilterValue,
    catalog: Mapping[str, Dimension] = DIMENSIONS,
) -> FilterState:
    """Return ``state`` with ``value`` toggled inside the ``dimension`` predicate."""
    if dimension not in catalog:
        raise KeyError(f"Unknown dimension: {dimension}")
    value = _check_value(catalog[dimension], value)

    predicates: List[DimensionPredicate] = list(state.dimensions)
    position = next((i for i, p in enumerate(predicates) if p.dimension == dimension), None)
    if position is None:
        predicates.append(DimensionPredicate(dimension, (value,)))
        return FilterState(tuple(predicates), state.regions)

    existing = predicates[position]
    if existing.contains(value):
        remaining = tuple(v for v in existing.values if not same_value(v, value))
        if remaining:
            predicates[position] = DimensionPredicate(dimension, remaining)
        else:
            del predicates[position]
    else:
        predicates[position] = DimensionPredicate(dimension, existing.values + (value,))
    return FilterState(tuple(predicates), state.regions)


def toggle_region(state: FilterState, region: Region) -> FilterState:
    if region in state.regions:
        regions = tuple(r for r in state.regions if r != region)
    else:
        regions = state.regions + (region,)
    return FilterState(state.dimensions, regions)


def region_mask(frame: pd.DataFrame, regions: Sequence[Region]) -> pd.Series:
    counties = frame["county"].astype(str).map(normalize_region_name)
    combined = pd.Series(False, index=frame.index)
    for region in regions:
        combined |= (counties == normalize_region_name(region.name)) & (frame["state"] == region.parent)
    return combined


def evaluate(frame: pd.DataFrame, state: FilterState) -> List[int]:
    """Indices of ``frame`` rows satisfying every predicate of ``state``.

    Union within a dimension (or within the region list), intersection across.
    """
    if frame.empty:
        return []
    mask = pd.Series(True, index=frame.index)
    for predicate in state.dimensions:
        mask &= predicate.mask(frame)
    if state.regions:
        mask &= region_mask(frame, state.regions)
    return sorted(int(i) for i in frame.index[mask.to_numpy(dtype=bool)])


@dataclass(frozen=True)
class _Snapshot:
    state: FilterState
    surviving: Tuple[int, ...]


@dataclass(eq=False)
class FilterStore:
    """Single owner of the dashboard's filter state.

    ``state`` and ``surviving_indices`` always describe the same snapshot; both
    are swapped in one assignment.
    """

    records: Sequence[PlotRecord]
    catalog: Mapping[str, Dimension] = field(default_factory=lambda: dict(DIMENSIONS))
    frame: pd.DataFrame = field(init=False, repr=False)
    _snapshot: _Snapshot = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.records = tuple(self.records)
        self.frame = records_frame(list(self.records))
        self._commit(EMPTY_STATE)

    def _commit(self, state: FilterState) -> None:
        self._snapshot = _Snapshot(state, tuple(evaluate(self.frame, state)))

    @property
    def state(self) -> FilterState:
        return self._snapshot.state

    @property
    def surviving_indices(self) -> List[int]:
        return list(self._snapshot.surviving)

    def get_surviving_indices(self) -> List[int]:
        return self.surviving_indices

    @property
    def surviving_count(self) -> int:
        return len(self._snapshot.surviving)

    @property
    def total_count(self) -> int:
        return len(self.records)

    def toggle_dimension_range(self, dimension: str, value: FilterValue) -> None:
        self._commit(toggle_dimension(self.state, dimension, value, self.catalog))
        logger.debug("Toggled %s=%s -> %d surviving", dimension, value, self.surviving_count)

    def toggle_geography(self, region: Region) -> None:
        self._commit(toggle_region(self.state, region))
        logger.debug("Toggled region %s -> %d surviving", region.label, self.surviving_count)

    def clear_all(self) -> None:
        self._commit(EMPTY_STATE)

    def is_selected(self, dimension: str, value: FilterValue) -> bool:
        predicate = self.state.predicate(dimension)
        if predicate is None:
            return False
        return predicate.contains(_check_value(self.catalog[dimension], value))

    def is_region_selected(self, region: Region) -> bool:
        return region in self.state.regions

    def filtered_frame(self) -> pd.DataFrame:
        if self.frame.empty:
            return self.frame
        return self.frame.loc[list(self._snapshot.surviving)]

    def surviving_mask(self) -> np.ndarray:
        mask = np.zeros(len(self.records), dtype=bool)
        mask[list(self._snapshot.surviving)] = True
        return mask

    def record(self, index: int) -> PlotRecord:
        return self.records[index]

    def describe(self) -> List[str]:
        return describe_state(self.state, self.catalog)


def describe_state(state: FilterState, catalog: Mapping[str, Dimension] = DIMENSIONS) -> List[str]:
    lines = []
    for predicate in state.dimensions:
        dim = catalog.get(predicate.dimension)
        label = dim.label if dim else predicate.dimension
        lines.append(f"{label}: " + ", ".join(str(v) for v in predicate.values))
    if state.regions:
        lines.append("Showing cases in " + " and ".join(r.label for r in state.regions))
    return lines


def serialize_filters(state: FilterState) -> Dict[str, Any]:
    """
    Convert the FilterState to a JSON-serialisable dictionary to be stored in
    session_state or used for logging/debugging.
    """
    return {
        "dimensions": {
            predicate.dimension: [
                [value.low, value.high] if isinstance(value, NumericRange) else value
                for value in predicate.values
            ]
            for predicate in state.dimensions
        },
        "regions": [[region.name, region.parent] for region in state.regions],
    }
