from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any


def _iso(dt: datetime) -> str:
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    return _iso(datetime.now(timezone.utc))


def epoch_to_iso(value: Any) -> str | None:
    """Convert epoch seconds to ISO-8601, or None when unusable."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    try:
        return _iso(datetime.fromtimestamp(value, tz=timezone.utc))
    except (OverflowError, OSError, ValueError):
        return None
