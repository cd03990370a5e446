"""Sparse-to-dense tide interpolation from high/low extremes.

Between two consecutive extremes the level follows a half-cosine ease,
h = h0 + (h1 - h0) * (1 - cos(pi * u)) / 2, which tracks a semidiurnal tide's
slow turn at slack water better than a straight line.
"""

import math
from bisect import bisect_left, bisect_right
from collections.abc import Sequence
from datetime import datetime

from surfengine.models.common import clamp01
from surfengine.models.tide import Interpolation, TideEvent


def cosine_ease(h0: float, h1: float, u: float) -> float:
    return h0 + (h1 - h0) * (1 - math.cos(math.pi * u)) / 2


def interpolate_heights_from_extremes(
    events: Sequence[TideEvent], times: Sequence[datetime]
) -> Interpolation:
    """Tide height at each requested time, plus min/max over the results.

    Needs at least two events. Times before the first or after the last event
    take the nearest event's height. A time equal to an event's own time gets
    that event's height exactly.
    """
    if len(events) < 2:
        return Interpolation(heights_by_time={}, min=None, max=None)

    ordered = sorted(events, key=lambda e: e.time)
    stamps = [e.time for e in ordered]
    heights: dict[datetime, float | None] = {}

    for t in times:
        i = bisect_right(stamps, t)
        j = bisect_left(stamps, t)
        prev = ordered[i - 1] if i > 0 else ordered[0]
        nxt = ordered[j] if j < len(ordered) else ordered[-1]
        heights[t] = _height_between(prev, nxt, t)

    known = [h for h in heights.values() if h is not None]
    return Interpolation(
        heights_by_time=heights,
        min=min(known) if known else None,
        max=max(known) if known else None,
    )


def _height_between(prev: TideEvent, nxt: TideEvent, t: datetime) -> float | None:
    h0, h1 = prev.height, nxt.height
    span = (nxt.time - prev.time).total_seconds()
    if h0 is None or h1 is None or span == 0:
        return h0 if h0 is not None else h1
    u = clamp01((t - prev.time).total_seconds() / span)
    return cosine_ease(h0, h1, u)
