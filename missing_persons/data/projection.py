"""
Project raw NamUs-style records into flat, typed plot records.

Every optional nested field is resolved here, once, with a documented default,
so the rest of the dashboard only handles fully-typed ``PlotRecord`` values.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from missing_persons.config import NAMUS_BASE_URL, RACE_LABELS, UNKNOWN

SECONDS_PER_YEAR = 3600 * 24 * 365


@dataclass(frozen=True)
class PlotRecord:
    index: int
    age: float = 0.0
    years_missing: float = 0.0
    height: float = 0.0
    weight: float = 0.0
    eye_color: str = UNKNOWN
    race: str = UNKNOWN
    gender: str = UNKNOWN
    state: str = UNKNOWN
    county: str = UNKNOWN
    first_name: str = ""
    last_name: str = ""
    photo_url: str = ""
    last_seen_date: str = ""
    circumstances: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


RECORD_COLUMNS = [f.name for f in fields(PlotRecord)]


def dig(record: Any, *path: str, default=None):
    """Walk nested dicts, returning ``default`` on any missing or null step."""
    current = record
    for key in path:
        if not isinstance(current, dict):
            return default
        current = current.get(key)
        if current is None:
            return default
    return current


def _number(value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number:  # NaN
        return 0.0
    return number


def _text(value, default: str = UNKNOWN) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def _parse_date(value) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    parsed = pd.to_datetime(value, errors="coerce", utc=True)
    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def years_since(value, now: datetime) -> float:
    seen = _parse_date(value)
    if seen is None:
        return 0.0
    return max((now - seen).total_seconds() / SECONDS_PER_YEAR, 0.0)


def race_label(value) -> str:
    name = _text(value)
    return RACE_LABELS.get(name, name)


def photo_url(record: Dict[str, Any]) -> str:
    images = record.get("images")
    if not isinstance(images, list) or not images or not isinstance(images[0], dict):
        return ""
    href = dig(images[0], "files", "original", "href")
    return f"{NAMUS_BASE_URL}{href}" if href else ""


def project_record(index: int, record: Dict[str, Any], now: datetime) -> PlotRecord:
    return PlotRecord(
        index=index,
        age=_number(dig(record, "subjectIdentification", "computedMissingMinAge")),
        years_missing=years_since(dig(record, "sighting", "date"), now),
        height=_number(dig(record, "subjectDescription", "heightFrom")),
        weight=_number(dig(record, "subjectDescription", "weightFrom")),
        eye_color=_text(dig(record, "physicalDescription", "leftEyeColor", "localizedName")),
        race=race_label(dig(record, "subjectDescription", "primaryEthnicity", "localizedName")),
        gender=_text(dig(record, "subjectDescription", "sex", "localizedName")),
        state=_text(dig(record, "sighting", "address", "state", "name")),
        county=_text(dig(record, "sighting", "address", "county", "name")),
        first_name=_text(dig(record, "subjectIdentification", "firstName"), ""),
        last_name=_text(dig(record, "subjectIdentification", "lastName"), ""),
        photo_url=photo_url(record),
        last_seen_date=_text(dig(record, "sighting", "date"), ""),
        circumstances=_text(dig(record, "circumstances", "circumstancesOfDisappearance"), ""),
    )


def project(raw: Iterable[Dict[str, Any]], now: Optional[datetime] = None) -> List[PlotRecord]:
    """Map raw records to plot records; ``index`` is the output position."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return [project_record(i, record, now) for i, record in enumerate(raw)]


def records_frame(records: List[PlotRecord]) -> pd.DataFrame:
    """Shared tabular view, indexed by ``PlotRecord.index``."""
    if not records:
        return pd.DataFrame(columns=RECORD_COLUMNS)
    frame = pd.DataFrame([asdict(r) for r in records], columns=RECORD_COLUMNS)
    frame.index = frame["index"].to_numpy()
    return frame
