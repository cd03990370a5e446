"""Pydantic v2 configuration schema with strict validation."""

import os
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator

Sector = tuple[float, float]


class BottomType(StrEnum):
    BEACHBREAK = "beachbreak"
    POINT = "point"
    REEF = "reef"


class TidePhase(StrEnum):
    LOW = "low"
    MID = "mid"
    HIGH = "high"
    MID_HIGH = "mid-high"


class SurfStyle(StrEnum):
    ANY = "any"
    LONGBOARD = "longboard"
    SHORTBOARD = "shortboard"


class WindPreference(StrEnum):
    ANY = "any"
    OFFSHORE = "offshore"
    LIGHT = "light"


class TimeWindow(StrEnum):
    MORNING = "morning"
    MIDDAY = "midday"
    AFTERNOON = "afternoon"


class EnergyPolicy(StrEnum):
    POWER = "power"  # wave power piecewise anchors
    BAND = "band"    # legacy height/period bands


class TideStore(StrEnum):
    MEMORY = "memory"
    SQLITE = "sqlite"


class WindShelter(BaseModel):
    model_config = {"extra": "forbid", "frozen": True}

    offshore: Sector | None = None
    bad_onshore: Sector | None = None


class SpotConfig(BaseModel):
    model_config = {"extra": "forbid", "frozen": True}

    id: str
    name: str
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)
    region: str | None = None
    region_name: str | None = None
    beach_azimuth: float
    ideal_approach: Sector
    swell_window: Sector
    shadow_blocks: list[Sector] = []
    wind_shelter: WindShelter = WindShelter()
    bottom_type: BottomType = BottomType.BEACHBREAK
    tide_preference: list[TidePhase] = []
    tide_sensitivity: float = Field(default=0.5, ge=0.0, le=1.0)
    local_notes: str = ""


class Preferences(BaseModel):
    """User preferences for window analysis, fully defaulted at the boundary."""

    model_config = {"extra": "forbid", "frozen": True}

    days_ahead: int = Field(default=3, ge=1, le=16)
    time_windows: list[TimeWindow] = []
    min_score: int = Field(default=60, ge=0, le=100)
    min_energy: float = Field(default=0.0, ge=0.0)
    surf_style: SurfStyle = SurfStyle.ANY
    wind_preference: WindPreference = WindPreference.ANY

    @field_validator("time_windows")
    @classmethod
    def _dedupe_windows(cls, v: list[TimeWindow]) -> list[TimeWindow]:
        return list(dict.fromkeys(v))


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    marine_base_url: str = "https://marine-api.open-meteo.com/v1/marine"
    weather_base_url: str = "https://api.open-meteo.com/v1/forecast"
    stormglass_base_url: str = "https://api.stormglass.io/v2"
    stormglass_api_key: str = Field(default="", exclude=True, repr=False)
    timezone: str = "America/Sao_Paulo"
    timeout: float = Field(default=12.0, gt=0.0)
    max_attempts: int = Field(default=2, ge=1, le=5)
    retry_base_delay: float = Field(default=0.5, ge=0.0)

    @model_validator(mode="after")
    def _api_key_from_env(self) -> "ProviderConfig":
        if not self.stormglass_api_key:
            self.stormglass_api_key = os.environ.get("STORMGLASS_API_KEY", "")
        return self


class CacheConfig(BaseModel):
    model_config = {"extra": "forbid"}

    forecast_ttl_minutes: int = Field(default=20, ge=0)
    forecast_max_entries: int = Field(default=500, ge=1)
    tide_ttl_hours: float = Field(default=48.0, ge=1.0)
    tide_store: TideStore = TideStore.MEMORY
    db_path: str = "data/surfengine.db"


class ScoringConfig(BaseModel):
    model_config = {"extra": "forbid"}

    energy_policy: EnergyPolicy = EnergyPolicy.POWER
    good_window_threshold: int = Field(default=60, ge=0, le=100)


class AnalysisConfig(BaseModel):
    model_config = {"extra": "forbid"}

    window_limit: int = Field(default=5, ge=1)
    region_limit: int = Field(default=3, ge=1)
    forecast_days: int = Field(default=3, ge=1, le=8)


class EngineConfig(BaseModel):
    model_config = {"extra": "forbid"}

    providers: ProviderConfig = ProviderConfig()
    cache: CacheConfig = CacheConfig()
    scoring: ScoringConfig = ScoringConfig()
    analysis: AnalysisConfig = AnalysisConfig()
    spots: list[SpotConfig] = []

    def spot_by_id(self, spot_id: str) -> SpotConfig | None:
        for spot in self.spots:
            if spot.id == spot_id:
                return spot
        return None

    def spots_in_region(self, region_id: str) -> list[SpotConfig]:
        return [s for s in self.spots if s.region == region_id]

    def regions(self) -> list[tuple[str, str]]:
        """Distinct (region id, region name) pairs in catalogue order."""
        seen: dict[str, str] = {}
        for s in self.spots:
            if s.region and s.region not in seen:
                seen[s.region] = s.region_name or s.region
        return list(seen.items())
