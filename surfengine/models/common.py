"""Common types and helpers shared across models."""

import math
from datetime import UTC, date, datetime
from typing import Any


def utc_now() -> datetime:
    return datetime.now(UTC)


def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


def finite_or_none(value: Any) -> float | None:
    """Coerce a raw provider value to float, mapping absent/non-finite to None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        v = float(value)
    except (TypeError, ValueError):
        return None
    return v if math.isfinite(v) else None


def round_half_up(x: float) -> int:
    """Round .5 away from zero for positives, matching score rounding elsewhere."""
    return int(math.floor(x + 0.5))


def utc_day(ts: datetime) -> str:
    """UTC calendar day (YYYY-MM-DD) of an aware or naive-UTC timestamp."""
    if ts.tzinfo is not None:
        ts = ts.astimezone(UTC)
    return ts.date().isoformat()


def parse_day(day_iso: str) -> date:
    return date.fromisoformat(day_iso)
