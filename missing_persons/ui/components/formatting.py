"""
Utility helpers for formatting counts, measurements and percentages.
"""

from __future__ import annotations

from typing import Optional

import pandas as pd


def format_number(value: Optional[float], decimals: int = 0) -> str:
    if value is None:
        return "–"
    try:
        return f"{value:,.{decimals}f}"
    except (TypeError, ValueError):
        return "–"


def format_percent(value: Optional[float], decimals: int = 1) -> str:
    if value is None:
        return "–"
    try:
        return f"{value:.{decimals}f}%"
    except (TypeError, ValueError):
        return "–"


def format_measure(value: Optional[float], unit: str, decimals: int = 0) -> str:
    # 0 is the projection's placeholder for an unknown measurement
    if not value:
        return "Unknown"
    return f"{format_number(value, decimals)} {unit}"


def format_date(value: Optional[str]) -> str:
    if not value:
        return "–"
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return str(value)
    return parsed.strftime("%b %d, %Y")
