from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from missing_persons.config import EYE_COLOR_POPULATION, EYE_COLOR_SWATCHES


@dataclass(frozen=True)
class Bucket:
    index: int
    low: float
    high: float

    @property
    def label(self) -> str:
        return f"{self.low:.1f}–{self.high:.1f}"

    @property
    def midpoint(self) -> float:
        return (self.low + self.high) / 2


def _finite(values: Iterable[float]) -> np.ndarray:
    array = pd.to_numeric(pd.Series(list(values), dtype="object"), errors="coerce").to_numpy(dtype=float)
    return array[np.isfinite(array)]


def bin_values(values: Iterable[float], bucket_count: int) -> List[Bucket]:
    """Equal-width contiguous buckets spanning ``[min(values), max(values)]``.

    Callers pass the full dataset so that boundaries do not move as filters
    change. A single distinct value yields one bucket.
    """
    array = _finite(values)
    if array.size == 0 or bucket_count < 1:
        return []
    low, high = float(array.min()), float(array.max())
    if low == high:
        return [Bucket(0, low, high)]
    edges = np.linspace(low, high, bucket_count + 1)
    edges[-1] = high
    return [Bucket(i, float(edges[i]), float(edges[i + 1])) for i in range(bucket_count)]


def count_in_buckets(values: Iterable[float], buckets: Sequence[Bucket]) -> List[int]:
    """Count ``values`` per bucket with the same closed ``[low, high]`` test a range filter applies.

    A value on an inner edge counts towards both neighbouring bars, so every
    bar shows exactly the number of records clicking it selects.
    """
    array = _finite(values)
    return [int(((array >= b.low) & (array <= b.high)).sum()) for b in buckets]


def count_by_category(values: Iterable[str]) -> Dict[str, int]:
    """Category counts, ordered by descending count then name."""
    counts: Dict[str, int] = {}
    for value in values:
        if value is None or value == "":
            continue
        counts[value] = counts.get(value, 0) + 1
    return dict(sorted(counts.items(), key=lambda item: (-item[1], item[0])))


def national_average(values: Iterable[float]) -> Optional[float]:
    array = _finite(values)
    array = array[array > 0]
    if array.size == 0:
        return None
    return float(array.mean())


def safe_median(series: pd.Series) -> Optional[float]:
    cleaned = pd.to_numeric(series, errors="coerce").dropna()
    if cleaned.empty:
        return None
    return float(cleaned.median())


def share(part: int, whole: int) -> Optional[float]:
    if whole <= 0:
        return None
    return part / whole * 100


def representation_ratios(eye_colors: Iterable[str]) -> pd.DataFrame:
    """Observed eye colour share over the U.S. population share, per reference colour."""
    counts = count_by_category(eye_colors)
    total = sum(counts.values())
    rows = []
    for color, expected in EYE_COLOR_POPULATION.items():
        observed = counts.get(color, 0) / total * 100 if total else 0.0
        rows.append(
            {
                "Eye Color": color,
                "Ratio": round(observed / expected, 2),
                "color": EYE_COLOR_SWATCHES.get(color, "#000000"),
            }
        )
    return pd.DataFrame(rows, columns=["Eye Color", "Ratio", "color"])


def sample_indices(total: int, sample_size: int) -> List[int]:
    """Every ``step``-th index so that roughly ``sample_size`` rows are drawn."""
    if total <= 0:
        return []
    step = max(1, total // max(sample_size, 1))
    return list(range(0, total, step))
