"""Surf window models: strict-threshold and preference-filtered variants."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from surfengine.models.score import Label, ReasonTag, ScoredHour


class QualityRating(StrEnum):
    EPIC = "epic"
    EXCELLENT = "excellent"
    GOOD = "good"
    OK = "ok"
    REGULAR = "regular"


class Audience(StrEnum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    ALL_LEVELS = "all_levels"


@dataclass(frozen=True)
class Highlight:
    reason: ReasonTag
    count: int


@dataclass(frozen=True)
class Window:
    """Maximal run of consecutive hours at or above a score threshold."""

    start: datetime
    end: datetime
    score_avg: int
    highlights: list[Highlight]
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "score_avg": self.score_avg,
            "highlights": [
                {"reason": str(h.reason), "count": h.count} for h in self.highlights
            ],
            "count": self.count,
        }


@dataclass(frozen=True)
class BestHour:
    time: datetime
    score: int
    label: Label
    swell_height: float | None
    swell_period: float | None
    wind_speed: float | None
    wind_direction: float | None
    tide_height: float | None
    power_kwm: float

    @classmethod
    def from_scored(cls, hour: ScoredHour) -> "BestHour":
        s = hour.sample
        return cls(
            time=s.time,
            score=hour.score,
            label=hour.label,
            swell_height=s.swell_height,
            swell_period=s.swell_period,
            wind_speed=s.wind_speed,
            wind_direction=s.wind_direction,
            tide_height=s.tide_height,
            power_kwm=hour.power_kwm,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "time": self.time.isoformat(),
            "score": self.score,
            "label": str(self.label),
            "swell_height": self.swell_height,
            "swell_period": self.swell_period,
            "wind_speed": self.wind_speed,
            "wind_direction": self.wind_direction,
            "tide_height": self.tide_height,
            "power_kwm": self.power_kwm,
        }


@dataclass(frozen=True)
class AnalyzedWindow:
    """Gap-tolerant window of preference-matching hours, enriched for display."""

    start: datetime
    end: datetime
    hours: list[ScoredHour]
    avg_score: float
    peak_score: int
    duration_hours: int
    best_hour: BestHour
    description: str
    quality_rating: QualityRating
    recommended_for: list[Audience] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "avg_score": self.avg_score,
            "peak_score": self.peak_score,
            "duration_hours": self.duration_hours,
            "best_hour": self.best_hour.to_dict(),
            "description": self.description,
            "quality_rating": str(self.quality_rating),
            "recommended_for": [str(a) for a in self.recommended_for],
        }
