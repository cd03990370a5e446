"""Tide extreme and interpolated series models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class TideType(StrEnum):
    HIGH = "high"
    LOW = "low"


class TideSource(StrEnum):
    STORMGLASS = "stormglass"
    MOCK = "mock"
    CACHE = "cache"


@dataclass(frozen=True)
class TideEvent:
    time: datetime  # UTC
    type: TideType
    height: float | None

    def to_dict(self) -> dict[str, Any]:
        return {"time": self.time.isoformat(), "type": str(self.type), "height": self.height}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TideEvent":
        return cls(
            time=datetime.fromisoformat(data["time"]),
            type=TideType(data["type"]),
            height=data.get("height"),
        )


@dataclass(frozen=True)
class TideExtremes:
    source: TideSource
    events: list[TideEvent]
    unit: str = "m"


@dataclass(frozen=True)
class TideDay:
    """One cached day of tide extremes for a spot."""

    spot_id: str
    day: str  # YYYY-MM-DD (UTC)
    events: list[TideEvent]
    min: float | None
    max: float | None
    source: TideSource = TideSource.STORMGLASS
    unit: str = "m"

    @property
    def key(self) -> str:
        return f"{self.spot_id}:{self.day}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "spot_id": self.spot_id,
            "day": self.day,
            "events": [e.to_dict() for e in self.events],
            "min": self.min,
            "max": self.max,
            "source": str(self.source),
            "unit": self.unit,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TideDay":
        return cls(
            spot_id=data["spot_id"],
            day=data["day"],
            events=[TideEvent.from_dict(e) for e in data.get("events", [])],
            min=data.get("min"),
            max=data.get("max"),
            source=TideSource(data.get("source", TideSource.STORMGLASS)),
            unit=data.get("unit", "m"),
        )


@dataclass(frozen=True)
class Interpolation:
    heights_by_time: dict[datetime, float | None]
    min: float | None
    max: float | None


@dataclass(frozen=True)
class TideSeries:
    source: TideSource | None
    events: list[TideEvent] = field(default_factory=list)
    heights_by_time: dict[datetime, float | None] = field(default_factory=dict)
    min: float | None = None
    max: float | None = None
    unit: str = "m"
