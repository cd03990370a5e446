"""Tide service: per-day caching and in-flight deduplication of tide fetches.

A TideService is created once at startup and shared. It owns the day cache
store and the map of pending provider fetches, keyed ``spotId:first..last``.
While a fetch for a spot is pending, any caller that needs a day inside its
range awaits that same task instead of issuing another request. The pending
entry is removed when the task finishes, whether it succeeded or failed, so
later calls can fetch again.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta

from surfengine.ingest.stormglass_client import StormglassClient
from surfengine.models.common import parse_day, utc_day, utc_now
from surfengine.models.forecast import HourlySample
from surfengine.models.tide import TideDay, TideEvent, TideSeries, TideSource
from surfengine.tides.cache import TideCacheStore, day_key
from surfengine.tides.interpolation import interpolate_heights_from_extremes

logger = logging.getLogger(__name__)

FetchedDays = tuple[TideSource, dict[str, TideDay]]


@dataclass(frozen=True)
class _Pending:
    spot_id: str
    first: date
    last: date
    task: "asyncio.Task[FetchedDays]"

    def covers(self, day: str) -> bool:
        return self.first <= parse_day(day) <= self.last


class TideService:
    def __init__(
        self,
        client: StormglassClient,
        store: TideCacheStore,
        ttl_hours: float = 48.0,
    ):
        self.client = client
        self.store = store
        self.ttl_hours = ttl_hours
        self._in_flight: dict[str, _Pending] = {}

    @property
    def in_flight_keys(self) -> list[str]:
        return list(self._in_flight)

    async def fetch_tide_for_times(
        self,
        lat: float,
        lon: float,
        times: Sequence[datetime],
        days: int = 3,
        spot_id: str = "unknown",
        fresh: bool = False,
    ) -> TideSeries:
        """Tide heights interpolated at ``times``, using cached days where possible.

        Args:
            lat, lon: Spot coordinates.
            times: Tz-aware timestamps to interpolate at.
            days: Minimum span, in days, of any provider request.
            spot_id: Cache namespace.
            fresh: Skip cache reads (results are still written back).
        """
        wanted = sorted({utc_day(t) for t in times}) or [utc_day(utc_now())]
        payloads: dict[str, TideDay] = {}

        if not fresh:
            for day in wanted:
                cached = self._read_cache(spot_id, day)
                if cached is not None and cached.events:
                    payloads[day] = cached

        source = TideSource.CACHE
        missing = [d for d in wanted if d not in payloads]
        if missing:
            fetched_source, fetched = await self._fetch_missing(lat, lon, missing, days, spot_id)
            source = fetched_source
            payloads.update({d: fetched[d] for d in missing if d in fetched})

        merged = [payloads[day] for day in wanted if day in payloads]
        if any(entry.source == TideSource.MOCK for entry in merged):
            source = TideSource.MOCK

        events: list[TideEvent] = []
        for entry in merged:
            events.extend(entry.events)

        interp = interpolate_heights_from_extremes(events, times)
        logger.debug(
            "Tide for %s: source=%s events=%d days=%d", spot_id, source, len(events), len(wanted)
        )
        return TideSeries(
            source=source,
            events=events,
            heights_by_time=interp.heights_by_time,
            min=interp.min,
            max=interp.max,
        )

    async def _fetch_missing(
        self, lat: float, lon: float, missing: list[str], days: int, spot_id: str
    ) -> FetchedDays:
        source = TideSource.CACHE
        result: dict[str, TideDay] = {}

        # Join fetches already pending for any of these days
        joined = [
            p for p in list(self._in_flight.values())
            if p.spot_id == spot_id and any(p.covers(d) for d in missing)
        ]
        for pending in joined:
            src, fetched = await asyncio.shield(pending.task)
            source = src
            result.update(fetched)

        remaining = [d for d in missing if not any(p.covers(d) for p in joined)]
        if remaining:
            first = parse_day(remaining[0])
            span = max((parse_day(remaining[-1]) - first).days + 1, days, 1)
            last = first + timedelta(days=span - 1)
            key = f"{spot_id}:{first.isoformat()}..{last.isoformat()}"
            pending = self._in_flight.get(key)
            if pending is None:
                task = asyncio.ensure_future(self._run(key, lat, lon, first, span, spot_id))
                pending = _Pending(spot_id, first, last, task)
                self._in_flight[key] = pending
            src, fetched = await asyncio.shield(pending.task)
            source = src
            result.update(fetched)

        return source, result

    async def _run(
        self, key: str, lat: float, lon: float, first: date, span: int, spot_id: str
    ) -> FetchedDays:
        try:
            extremes = await self.client.fetch_tide_extremes(lat, lon, first, span)
            by_day: dict[str, list[TideEvent]] = {}
            for event in extremes.events:
                by_day.setdefault(utc_day(event.time), []).append(event)

            fetched: dict[str, TideDay] = {}
            for day, events in by_day.items():
                heights = [e.height for e in events if e.height is not None]
                entry = TideDay(
                    spot_id=spot_id,
                    day=day,
                    events=events,
                    min=min(heights) if heights else None,
                    max=max(heights) if heights else None,
                    source=extremes.source,
                    unit=extremes.unit,
                )
                self._write_cache(entry)
                fetched[day] = entry
            return extremes.source, fetched
        finally:
            self._in_flight.pop(key, None)

    def _read_cache(self, spot_id: str, day: str) -> TideDay | None:
        try:
            return self.store.get(day_key(spot_id, day))
        except Exception:
            logger.warning("Failed to read tide cache for %s on %s", spot_id, day, exc_info=True)
            return None

    def _write_cache(self, entry: TideDay) -> None:
        try:
            self.store.set(entry, self.ttl_hours)
        except Exception:
            logger.warning(
                "Failed to cache tide data for %s on %s", entry.spot_id, entry.day, exc_info=True
            )


def attach_tide(hours: Sequence[HourlySample], series: TideSeries | None) -> list[HourlySample]:
    """Copy of ``hours`` with tide height and series min/max filled in."""
    if series is None:
        return list(hours)
    return [
        replace(
            h,
            tide_height=series.heights_by_time.get(h.time),
            tide_min=series.min,
            tide_max=series.max,
        )
        for h in hours
    ]
