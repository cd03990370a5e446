"""Window analysis and region ranking result models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from surfengine.config.schema import Preferences
from surfengine.models.common import utc_now
from surfengine.models.score import ScoredHour
from surfengine.models.tide import TideEvent, TideSource
from surfengine.models.window import AnalyzedWindow, BestHour, QualityRating, Window


class AnalysisStatus(StrEnum):
    SUCCESS = "success"
    NO_DATA = "no_data"
    ERROR = "error"


class RegionStatus(StrEnum):
    SUCCESS = "success"
    NO_SPOTS = "no_spots"


@dataclass(frozen=True)
class AnalysisResult:
    spot_id: str
    preferences: Preferences
    status: AnalysisStatus
    windows: list[AnalyzedWindow] = field(default_factory=list)
    next_good_windows: list[AnalyzedWindow] = field(default_factory=list)
    analysis_time: datetime = field(default_factory=utc_now)
    message: str | None = None
    total_hours_analyzed: int = 0
    hours_matching_criteria: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "spot_id": self.spot_id,
            "preferences": self.preferences.model_dump(mode="json"),
            "status": str(self.status),
            "windows": [w.to_dict() for w in self.windows],
            "next_good_windows": [w.to_dict() for w in self.next_good_windows],
            "analysis_time": self.analysis_time.isoformat(),
            "message": self.message,
            "total_hours_analyzed": self.total_hours_analyzed,
            "hours_matching_criteria": self.hours_matching_criteria,
        }


@dataclass(frozen=True)
class WindowSummary:
    start: datetime
    end: datetime
    duration_hours: int
    description: str
    quality_rating: QualityRating

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "duration_hours": self.duration_hours,
            "description": self.description,
            "quality_rating": str(self.quality_rating),
        }


@dataclass(frozen=True)
class RankingEntry:
    spot_id: str
    spot_name: str
    avg_score: float
    peak_score: int
    best_hour: BestHour
    window: WindowSummary

    def to_dict(self) -> dict[str, Any]:
        return {
            "spot_id": self.spot_id,
            "spot_name": self.spot_name,
            "avg_score": self.avg_score,
            "peak_score": self.peak_score,
            "best_hour": self.best_hour.to_dict(),
            "window": self.window.to_dict(),
        }


@dataclass(frozen=True)
class RegionRanking:
    region: str
    status: RegionStatus
    ranking: list[RankingEntry] = field(default_factory=list)

    @property
    def best_spot(self) -> RankingEntry | None:
        return self.ranking[0] if self.ranking else None

    def to_dict(self) -> dict[str, Any]:
        best = self.best_spot
        return {
            "status": str(self.status),
            "region": self.region,
            "best_spot": (
                {"spot_id": best.spot_id, "spot_name": best.spot_name} if best else None
            ),
            "best_window": (
                {**best.best_hour.to_dict(), "window": best.window.to_dict()}
                if best else None
            ),
            "ranking": [r.to_dict() for r in self.ranking],
        }


@dataclass(frozen=True)
class SpotForecast:
    spot_id: str
    hours: list[ScoredHour]
    windows: list[Window]
    tide_events: list[TideEvent]
    days: int
    timezone: str
    tide_source: TideSource | None
    windspeed_unit: str = "kmh"
    tide_unit: str = "m"

    def to_dict(self) -> dict[str, Any]:
        return {
            "spot_id": self.spot_id,
            "hours": [h.to_dict() for h in self.hours],
            "windows": [w.to_dict() for w in self.windows],
            "tide_events": [e.to_dict() for e in self.tide_events],
            "params": {
                "days": self.days,
                "timezone": self.timezone,
                "windspeed_unit": self.windspeed_unit,
                "tide_source": str(self.tide_source) if self.tide_source else None,
                "tide_unit": self.tide_unit,
            },
        }
