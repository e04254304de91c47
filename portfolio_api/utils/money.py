from __future__ import annotations

import math
from typing import Any


def finite_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def parse_number(text: str | None) -> float | None:
    if text is None:
        return None
    raw = text.strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def round2(value: float) -> float:
    return round(value, 2)


def percent_change(current: float | None, base: float | None) -> float | None:
    """Percent move from base to current, rounded to 2 places.

    Returns None when either side is missing or the base is zero.
    """
    if current is None or base is None or base == 0:
        return None
    change = (current - base) / base * 100
    if not math.isfinite(change):
        return None
    return round2(change)
