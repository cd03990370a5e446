"""Forecast fetcher: retrieves and caches merged hourly forecasts per spot."""

import logging
from collections import OrderedDict
from collections.abc import Callable
from datetime import datetime, timedelta

from surfengine.config.schema import CacheConfig, SpotConfig
from surfengine.ingest.open_meteo_client import OpenMeteoClient
from surfengine.models.common import utc_now
from surfengine.models.forecast import HourlySample

logger = logging.getLogger(__name__)


class ForecastFetcher:
    """Wraps the forecast client with an LRU cache whose entries expire by TTL.

    One instance is created at startup and shared by every analysis. A TTL of
    zero disables caching.
    """

    def __init__(
        self,
        client: OpenMeteoClient,
        cache_config: CacheConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        cfg = cache_config or CacheConfig()
        self.client = client
        self.ttl = timedelta(minutes=cfg.forecast_ttl_minutes)
        self.max_entries = cfg.forecast_max_entries
        self._clock = clock
        self._cache: OrderedDict[tuple[str, int], tuple[list[HourlySample], datetime]] = OrderedDict()

    async def fetch(
        self, spot: SpotConfig, days: int, fresh: bool = False
    ) -> list[HourlySample]:
        """Hourly samples for a spot. ``fresh`` skips the cache read but still stores."""
        key = (spot.id, days)
        if not fresh:
            cached = self._get(key)
            if cached is not None:
                logger.debug("Forecast cache hit for %s (%d days)", spot.id, days)
                return cached

        hours = await self.client.fetch_marine_forecast(spot.lat, spot.lon, days)
        if hours:
            self._put(key, hours)
        return hours

    def _get(self, key: tuple[str, int]) -> list[HourlySample] | None:
        item = self._cache.get(key)
        if item is None:
            return None
        hours, expires_at = item
        if expires_at <= self._clock():
            del self._cache[key]
            return None
        self._cache.move_to_end(key)
        return hours

    def _put(self, key: tuple[str, int], hours: list[HourlySample]) -> None:
        if self.ttl <= timedelta(0):
            return
        self._cache[key] = (hours, self._clock() + self.ttl)
        self._cache.move_to_end(key)
        while len(self._cache) > self.max_entries:
            self._cache.popitem(last=False)

    def clear_cache(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
