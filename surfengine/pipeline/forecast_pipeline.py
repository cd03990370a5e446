"""Forecast pipeline: fetch, tide, score, smooth and window one spot's forecast."""

import logging

from surfengine.config.schema import EngineConfig, SpotConfig
from surfengine.ingest.forecast_fetcher import ForecastFetcher
from surfengine.models.analysis import SpotForecast
from surfengine.models.tide import TideSeries
from surfengine.scoring.scorer import apply_consistency, score_series
from surfengine.tides.service import TideService, attach_tide
from surfengine.windows.aggregator import group_good_windows

logger = logging.getLogger(__name__)

MIN_DAYS = 1
MAX_DAYS = 8


def clamp_days(days: int) -> int:
    return min(MAX_DAYS, max(MIN_DAYS, int(days)))


class ForecastPipeline:
    def __init__(
        self,
        fetcher: ForecastFetcher,
        tide_service: TideService | None,
        config: EngineConfig,
    ):
        self.fetcher = fetcher
        self.tide_service = tide_service
        self.config = config

    async def run(
        self,
        spot: SpotConfig,
        days: int = 3,
        fresh: bool = False,
        tides_fresh: bool = False,
    ) -> SpotForecast:
        """Scored hourly forecast with consistency applied and strict windows.

        Provider errors from the forecast fetch propagate. A tide failure is
        logged and the forecast is returned without tide data.
        """
        days = clamp_days(days)
        logger.info("Forecast run: spot=%s days=%d fresh=%s", spot.id, days, fresh)
        raw = await self.fetcher.fetch(spot, days, fresh=fresh)

        tide: TideSeries | None = None
        if self.tide_service is not None and raw:
            try:
                tide = await self.tide_service.fetch_tide_for_times(
                    spot.lat, spot.lon, [h.time for h in raw],
                    days=days, spot_id=spot.id, fresh=tides_fresh,
                )
            except Exception as e:
                logger.warning("Tide fetch failed for %s, continuing without tide: %s", spot.id, e)

        scoring = self.config.scoring
        scored = apply_consistency(
            score_series(attach_tide(raw, tide), spot, scoring.energy_policy)
        )
        windows = group_good_windows(scored, scoring.good_window_threshold)
        logger.info(
            "Forecast %s: %d hours, %d windows, tide=%s",
            spot.id, len(scored), len(windows), tide.source if tide else None,
        )

        return SpotForecast(
            spot_id=spot.id,
            hours=scored,
            windows=windows,
            tide_events=tide.events if tide else [],
            days=days,
            timezone=self.config.providers.timezone,
            tide_source=tide.source if tide else None,
            tide_unit=tide.unit if tide else "m",
        )
