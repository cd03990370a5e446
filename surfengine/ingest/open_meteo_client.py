"""Open-Meteo marine + weather forecast client (async)."""

import asyncio
import logging
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import httpx

from surfengine.config.schema import ProviderConfig
from surfengine.ingest.errors import DataUnavailable
from surfengine.ingest.http import get_json
from surfengine.models.common import finite_or_none
from surfengine.models.forecast import HourlySample

logger = logging.getLogger(__name__)

MARINE_HOURLY = [
    "wave_height",
    "wave_direction",
    "wave_period",
    "swell_wave_height",
    "swell_wave_direction",
    "swell_wave_period",
    "swell_wave_peak_period",
    "wind_wave_height",
    "wind_wave_direction",
    "wind_wave_period",
]

WEATHER_HOURLY = [
    "wind_speed_10m",
    "wind_direction_10m",
]


class OpenMeteoClient:
    def __init__(
        self,
        config: ProviderConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.config = config or ProviderConfig()
        self._client = client

    async def fetch_marine_forecast(
        self, lat: float, lon: float, days: int = 3
    ) -> list[HourlySample]:
        """Fetch hourly marine + 10 m wind and merge them by timestamp."""
        if self._client is not None:
            return await self._fetch(self._client, lat, lon, days)
        async with httpx.AsyncClient() as client:
            return await self._fetch(client, lat, lon, days)

    async def _fetch(
        self, client: httpx.AsyncClient, lat: float, lon: float, days: int
    ) -> list[HourlySample]:
        cfg = self.config
        common = {
            "latitude": str(lat),
            "longitude": str(lon),
            "timezone": cfg.timezone,
            "forecast_days": str(days),
        }
        marine_params = {**common, "hourly": ",".join(MARINE_HOURLY)}
        weather_params = {**common, "hourly": ",".join(WEATHER_HOURLY), "wind_speed_unit": "kmh"}
        retry = {
            "timeout": cfg.timeout,
            "max_attempts": cfg.max_attempts,
            "retry_base_delay": cfg.retry_base_delay,
        }

        logger.info("Fetching Open-Meteo marine & weather lat=%s lon=%s days=%d", lat, lon, days)
        marine, weather = await asyncio.gather(
            get_json(client, cfg.marine_base_url, marine_params, provider="open-meteo marine", **retry),
            get_json(client, cfg.weather_base_url, weather_params, provider="open-meteo weather", **retry),
        )
        hours = merge_hourly(marine, weather, ZoneInfo(cfg.timezone))
        if not hours:
            raise DataUnavailable(f"open-meteo returned no hourly data for {lat},{lon}")
        logger.info("Merged %d forecast hours", len(hours))
        return hours


def merge_hourly(marine: dict, weather: dict, tz: ZoneInfo) -> list[HourlySample]:
    """Join marine and weather hourly arrays on their time strings."""
    mh = (marine or {}).get("hourly") or {}
    wh = (weather or {}).get("hourly") or {}
    weather_index = {t: i for i, t in enumerate(wh.get("time") or [])}

    out: list[HourlySample] = []
    for i, time_str in enumerate(mh.get("time") or []):
        wi = weather_index.get(time_str)
        peak = _at(mh, "swell_wave_peak_period", i)
        out.append(
            HourlySample(
                time=_parse_local(time_str, tz),
                wave_height=_at(mh, "wave_height", i),
                wave_direction=_at(mh, "wave_direction", i),
                wave_period=_at(mh, "wave_period", i),
                swell_height=_at(mh, "swell_wave_height", i),
                swell_direction=_at(mh, "swell_wave_direction", i),
                swell_period=peak if peak is not None else _at(mh, "swell_wave_period", i),
                wind_wave_height=_at(mh, "wind_wave_height", i),
                wind_wave_direction=_at(mh, "wind_wave_direction", i),
                wind_wave_period=_at(mh, "wind_wave_period", i),
                wind_speed=_at(wh, "wind_speed_10m", wi),
                wind_direction=_at(wh, "wind_direction_10m", wi),
            )
        )
    return out


def _at(hourly: dict[str, Any], key: str, index: int | None) -> float | None:
    if index is None:
        return None
    values = hourly.get(key)
    if not values or index >= len(values):
        return None
    return finite_or_none(values[index])


def _parse_local(time_str: str, tz: ZoneInfo) -> datetime:
    dt = datetime.fromisoformat(time_str)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return dt
