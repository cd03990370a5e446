"""Per-hour scoring result models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from surfengine.models.forecast import HourlySample


class Label(StrEnum):
    EPIC = "epic"
    GOOD = "good"
    OK = "ok"
    BAD = "bad"


class ReasonTag(StrEnum):
    CONDITION_EPIC = "condition_epic"
    CONDITION_GOOD = "condition_good"
    CONDITION_OK = "condition_ok"
    CONDITION_BAD = "condition_bad"
    SWELL_ANGLE_IDEAL = "swell_angle_ideal"
    SWELL_CLOSING_OUT = "swell_closing_out"
    OUTSIDE_WINDOW = "outside_window_or_shadowed"
    ENERGY_LOW = "energy_low"
    ENERGY_MEDIUM = "energy_medium"
    ENERGY_GOOD = "energy_good"
    ENERGY_VERY_STRONG = "energy_very_strong"
    TEXTURE_CHOPPY = "texture_choppy"
    TEXTURE_CLEAN = "texture_clean"
    WIND_OFFSHORE_MODERATE = "wind_offshore_moderate"
    WIND_ONSHORE_STRONG = "wind_onshore_or_cross_strong"
    STEEPNESS_FAVOURABLE = "steepness_favourable"
    STEEPNESS_UNFAVOURABLE = "steepness_unfavourable"


CONDITION_TAGS = frozenset({
    ReasonTag.CONDITION_EPIC,
    ReasonTag.CONDITION_GOOD,
    ReasonTag.CONDITION_OK,
    ReasonTag.CONDITION_BAD,
})


@dataclass(frozen=True)
class HourFlags:
    is_offshore_sector: bool = False
    is_bad_onshore_sector: bool = False
    within_window: bool = False


@dataclass(frozen=True)
class ScoreResult:
    scores: dict[str, float]
    score: int  # 0-100
    label: Label
    reasons: list[ReasonTag]
    power_kwm: float
    flags: HourFlags = field(default_factory=HourFlags)


@dataclass(frozen=True)
class ScoredHour:
    sample: HourlySample
    result: ScoreResult

    @property
    def time(self) -> datetime:
        return self.sample.time

    @property
    def score(self) -> int:
        return self.result.score

    @property
    def label(self) -> Label:
        return self.result.label

    @property
    def reasons(self) -> list[ReasonTag]:
        return self.result.reasons

    @property
    def power_kwm(self) -> float:
        return self.result.power_kwm

    def to_dict(self) -> dict[str, Any]:
        data = self.sample.to_dict()
        data.update(
            score=self.result.score,
            label=str(self.result.label),
            scores=dict(self.result.scores),
            reasons=[str(r) for r in self.result.reasons],
            power_kwm=self.result.power_kwm,
            flags={
                "is_offshore_sector": self.result.flags.is_offshore_sector,
                "is_bad_onshore_sector": self.result.flags.is_bad_onshore_sector,
                "within_window": self.result.flags.within_window,
            },
        )
        return data
