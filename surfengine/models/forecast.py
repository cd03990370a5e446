"""Hourly marine/weather sample models."""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class HourlySample:
    time: datetime  # tz-aware, local to the feed timezone
    wave_height: float | None = None
    wave_direction: float | None = None
    wave_period: float | None = None
    swell_height: float | None = None
    swell_direction: float | None = None
    swell_period: float | None = None
    wind_wave_height: float | None = None
    wind_wave_direction: float | None = None
    wind_wave_period: float | None = None
    wind_speed: float | None = None  # km/h at 10 m
    wind_direction: float | None = None
    tide_height: float | None = None
    tide_min: float | None = None
    tide_max: float | None = None

    @property
    def surf_height(self) -> float:
        """Swell height, falling back to total wave height, else 0."""
        return self.swell_height or self.wave_height or 0.0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["time"] = self.time.isoformat()
        return data
