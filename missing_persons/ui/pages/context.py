from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from missing_persons.config import Dimension
from missing_persons.data.filters import FilterStore
from missing_persons.data.loader import LoadedSources


@dataclass
class PageContext:
    store: FilterStore
    sources: LoadedSources
    selected_dimension: Optional[Dimension]
    sample_size: int
