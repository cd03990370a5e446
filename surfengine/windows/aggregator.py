"""Strict-threshold window aggregation over a scored hourly series."""

from collections import Counter
from collections.abc import Iterable

from surfengine.models.common import round_half_up
from surfengine.models.score import ScoredHour
from surfengine.models.window import Highlight, Window
from surfengine.scoring import constants as C


def group_good_windows(
    hours: Iterable[ScoredHour], threshold: int = C.GOOD_WINDOW_THRESHOLD
) -> list[Window]:
    """Run-length encode hours into windows of consecutive scores >= threshold.

    Hours must be in chronological order. Any hour below the threshold closes
    the current run; it never belongs to a window itself.
    """
    windows: list[Window] = []
    buf: list[ScoredHour] = []

    for hour in hours:
        if hour.score >= threshold:
            buf.append(hour)
        elif buf:
            windows.append(_flush(buf))
            buf = []
    if buf:
        windows.append(_flush(buf))
    return windows


def _flush(buf: list[ScoredHour]) -> Window:
    return Window(
        start=buf[0].time,
        end=buf[-1].time,
        score_avg=round_half_up(sum(h.score for h in buf) / len(buf)),
        highlights=summarize_reasons(buf),
        count=len(buf),
    )


def summarize_reasons(hours: list[ScoredHour], limit: int = C.HIGHLIGHT_LIMIT) -> list[Highlight]:
    """Most frequent reason tags, ties kept in first-seen order."""
    freq: Counter = Counter()
    for h in hours:
        freq.update(h.reasons)
    return [Highlight(reason, count) for reason, count in freq.most_common(limit)]
