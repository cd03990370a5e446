"""Window analyzer: preference-driven filtering, gap-tolerant grouping, ranking.

The analyzer turns one spot's forecast into a short list of surf windows that
match a user's preferences. Fetching and scoring happen in ``analyze``; every
step after scoring is a pure function over the scored hours so it can be
tested without I/O.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from surfengine.config.schema import (
    EngineConfig,
    Preferences,
    SpotConfig,
    SurfStyle,
    TimeWindow,
    WindPreference,
)
from surfengine.ingest.errors import DataUnavailable
from surfengine.ingest.forecast_fetcher import ForecastFetcher
from surfengine.models.analysis import AnalysisResult, AnalysisStatus
from surfengine.models.common import round_half_up
from surfengine.models.score import ScoredHour
from surfengine.models.tide import TideSeries
from surfengine.models.window import AnalyzedWindow, Audience, BestHour, QualityRating
from surfengine.scoring import constants as C
from surfengine.scoring.scorer import score_series
from surfengine.tides.service import TideService, attach_tide

logger = logging.getLogger(__name__)

MAX_GAP = timedelta(hours=C.MAX_GAP_HOURS)


class WindowAnalyzer:
    def __init__(
        self,
        fetcher: ForecastFetcher,
        tide_service: TideService | None,
        config: EngineConfig,
    ):
        self.fetcher = fetcher
        self.tide_service = tide_service
        self.config = config

    async def analyze(self, spot: SpotConfig, preferences: Preferences) -> AnalysisResult:
        """Best windows for a spot. Never raises; failures become ``status=error``."""
        try:
            return await self._analyze(spot, preferences)
        except DataUnavailable as e:
            logger.info("No forecast data for %s: %s", spot.id, e)
            return AnalysisResult(
                spot_id=spot.id,
                preferences=preferences,
                status=AnalysisStatus.NO_DATA,
                message=str(e),
            )
        except Exception as e:
            logger.exception("Window analysis failed for %s", spot.id)
            return AnalysisResult(
                spot_id=spot.id,
                preferences=preferences,
                status=AnalysisStatus.ERROR,
                message=str(e),
            )

    async def _analyze(self, spot: SpotConfig, preferences: Preferences) -> AnalysisResult:
        days = preferences.days_ahead
        raw = await self.fetcher.fetch(spot, days)
        if not raw:
            return AnalysisResult(
                spot_id=spot.id, preferences=preferences, status=AnalysisStatus.NO_DATA
            )

        tide: TideSeries | None = None
        if self.tide_service is not None:
            try:
                tide = await self.tide_service.fetch_tide_for_times(
                    spot.lat, spot.lon, [h.time for h in raw], days=days, spot_id=spot.id
                )
            except Exception as e:
                logger.warning("Tide fetch failed for %s, continuing without tide: %s", spot.id, e)

        scored = score_series(
            attach_tide(raw, tide), spot, self.config.scoring.energy_policy
        )
        matching = filter_hours_by_preferences(scored, preferences)
        windows = group_into_windows(matching, preferences)
        best = select_best_windows(windows, self.config.analysis.window_limit)

        logger.info(
            "Analyzed %s: %d hours, %d matching, %d windows",
            spot.id, len(scored), len(matching), len(best),
        )
        return AnalysisResult(
            spot_id=spot.id,
            preferences=preferences,
            status=AnalysisStatus.SUCCESS,
            windows=best,
            next_good_windows=best[:C.NEXT_GOOD_WINDOWS],
            total_hours_analyzed=len(scored),
            hours_matching_criteria=len(matching),
        )


# --- Filters ---

def filter_hours_by_preferences(
    hours: Iterable[ScoredHour], preferences: Preferences
) -> list[ScoredHour]:
    out: list[ScoredHour] = []
    wanted = set(preferences.time_windows)
    for hour in hours:
        hod = hour.time.hour
        if hod < C.DAYLIGHT_FIRST_HOUR or hod > C.DAYLIGHT_LAST_HOUR:
            continue
        if hour.score < preferences.min_score:
            continue
        if preferences.min_energy > 0 and hour.power_kwm < preferences.min_energy:
            continue
        if wanted and time_window_for_hour(hod) not in wanted:
            continue
        if not matches_surf_style(hour, preferences.surf_style):
            continue
        if not matches_wind_preference(hour, preferences.wind_preference):
            continue
        out.append(hour)
    return out


def time_window_for_hour(hour_of_day: int) -> TimeWindow | None:
    """Morning/midday/afternoon bucket, or None outside all of them."""
    for name, first, end in C.TIME_BUCKETS:
        if first <= hour_of_day < end:
            return TimeWindow(name)
    return None


def matches_surf_style(hour: ScoredHour, style: SurfStyle) -> bool:
    height = hour.sample.surf_height
    if style == SurfStyle.LONGBOARD:
        return C.LONGBOARD_MIN_HEIGHT <= height <= C.LONGBOARD_MAX_HEIGHT
    if style == SurfStyle.SHORTBOARD:
        return height >= C.SHORTBOARD_MIN_HEIGHT and hour.power_kwm >= C.SHORTBOARD_MIN_POWER
    return True


def matches_wind_preference(hour: ScoredHour, preference: WindPreference) -> bool:
    speed = hour.sample.wind_speed or 0.0
    if preference == WindPreference.OFFSHORE:
        return hour.result.flags.is_offshore_sector and speed <= C.OFFSHORE_MAX_WIND
    if preference == WindPreference.LIGHT:
        return speed <= C.LIGHT_MAX_WIND
    return True


# --- Grouping ---

@dataclass
class _WindowBuilder:
    hours: list[ScoredHour] = field(default_factory=list)
    total: int = 0
    peak: int = 0

    @property
    def end(self) -> datetime:
        return self.hours[-1].time

    def add(self, hour: ScoredHour) -> None:
        self.peak = max(self.peak, hour.score) if self.hours else hour.score
        self.hours.append(hour)
        self.total += hour.score

    def finish(self, preferences: Preferences) -> AnalyzedWindow:
        return finalize_window(
            self.hours, preferences,
            avg_score=self.total / len(self.hours), peak_score=self.peak,
        )


def group_into_windows(
    hours: Sequence[ScoredHour], preferences: Preferences
) -> list[AnalyzedWindow]:
    """Group filtered hours, allowing gaps of up to two hours between members."""
    windows: list[AnalyzedWindow] = []
    current: _WindowBuilder | None = None

    for hour in hours:
        if current is not None and hour.time - current.end <= MAX_GAP:
            current.add(hour)
            continue
        if current is not None:
            windows.append(current.finish(preferences))
        current = _WindowBuilder()
        current.add(hour)

    if current is not None:
        windows.append(current.finish(preferences))
    return windows


def finalize_window(
    hours: Sequence[ScoredHour],
    preferences: Preferences,
    avg_score: float | None = None,
    peak_score: int | None = None,
) -> AnalyzedWindow:
    best = max(hours, key=lambda h: h.score)  # first of equal scores
    avg = avg_score if avg_score is not None else sum(h.score for h in hours) / len(hours)
    peak = peak_score if peak_score is not None else best.score
    return AnalyzedWindow(
        start=hours[0].time,
        end=hours[-1].time,
        hours=list(hours),
        avg_score=avg,
        peak_score=peak,
        duration_hours=len(hours),
        best_hour=BestHour.from_scored(best),
        description=describe_window(best, preferences.surf_style),
        quality_rating=quality_rating(avg),
        recommended_for=recommended_for(best),
    )


# --- Enrichment ---

def describe_window(best: ScoredHour, style: SurfStyle) -> str:
    """Short summary such as ``1.2m, 11s, offshore 8km/h, 5.4 kW/m``."""
    s = best.sample
    parts: list[str] = []
    if s.swell_height:
        parts.append(f"{s.swell_height:.1f}m")
    if s.swell_period:
        parts.append(f"{round_half_up(s.swell_period)}s")
    if s.wind_speed is not None:
        wind = "offshore" if best.result.flags.is_offshore_sector else "wind"
        parts.append(f"{wind} {round_half_up(s.wind_speed)}km/h")
    if best.power_kwm:
        parts.append(f"{best.power_kwm:.1f} kW/m")

    text = ", ".join(parts)
    if style == SurfStyle.LONGBOARD:
        text += " - ideal for longboard"
    elif style == SurfStyle.SHORTBOARD:
        text += " - good power for shortboard"
    return text


def quality_rating(avg_score: float) -> QualityRating:
    for threshold, rating in C.QUALITY_RATINGS:
        if avg_score >= threshold:
            return QualityRating(rating)
    return QualityRating(C.QUALITY_FLOOR)


def recommended_for(best: ScoredHour) -> list[Audience]:
    height = best.sample.surf_height
    power = best.power_kwm
    out: list[Audience] = []
    if height <= C.BEGINNER_MAX_HEIGHT and power <= C.BEGINNER_MAX_POWER:
        out.append(Audience.BEGINNER)
    lo, hi = C.INTERMEDIATE_HEIGHT
    if lo <= height <= hi:
        out.append(Audience.INTERMEDIATE)
    if height >= C.ADVANCED_MIN_HEIGHT or power >= C.ADVANCED_MIN_POWER:
        out.append(Audience.ADVANCED)
    return out or [Audience.ALL_LEVELS]


# --- Ranking ---

def select_best_windows(
    windows: Iterable[AnalyzedWindow], limit: int = C.WINDOW_LIMIT
) -> list[AnalyzedWindow]:
    """Top ``limit`` by (avg score, duration), returned in chronological order."""
    ranked = sorted(windows, key=lambda w: (-w.avg_score, -w.duration_hours))
    return sorted(ranked[:limit], key=lambda w: w.start)
