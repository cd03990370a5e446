"""Angle helpers: normalization, angular distance, sector membership."""

import math

Sector = tuple[float, float]

_COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


def to360(deg: float) -> float:
    """Normalize an angle to [0, 360)."""
    return deg % 360.0


def to180(deg: float) -> float:
    """Normalize an angle to [-180, 180)."""
    return (deg + 540.0) % 360.0 - 180.0


def ang_diff(a: float, b: float) -> float:
    """Smallest absolute angular distance between two bearings, in [0, 180]."""
    return abs(to180(a - b))


def in_sector(direction: float | None, sector: Sector | None) -> bool:
    """Check whether a bearing lies inside [lo, hi], wrapping through north.

    An unknown direction or missing sector is never inside.
    """
    if direction is None or sector is None or not math.isfinite(direction):
        return False
    d, lo, hi = to360(direction), to360(sector[0]), to360(sector[1])
    if lo <= hi:
        return lo <= d <= hi
    return d >= lo or d <= hi


def distance_to_sector(direction: float, sector: Sector) -> float:
    """Angular distance from a bearing to the nearest edge of a sector (0 inside)."""
    if in_sector(direction, sector):
        return 0.0
    return min(ang_diff(direction, sector[0]), ang_diff(direction, sector[1]))


def direction_to_text(deg: float | None) -> str:
    """16-point compass abbreviation for a bearing, or 'N/A' when unknown."""
    if deg is None or not math.isfinite(deg):
        return "N/A"
    idx = int((to360(deg) + 11.25) // 22.5) % 16
    return _COMPASS_POINTS[idx]
