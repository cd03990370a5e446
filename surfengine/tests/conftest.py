"""Shared test fixtures."""

import sqlite3
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import yaml

from surfengine.config.defaults import DEFAULT_SPOTS
from surfengine.config.schema import BottomType, EngineConfig, SpotConfig, TidePhase, WindShelter
from surfengine.models.forecast import HourlySample
from surfengine.models.score import HourFlags, Label, ReasonTag, ScoredHour, ScoreResult
from surfengine.storage.database import connect, run_migrations

# Local feed time for Brazilian spots
BRT = timezone(timedelta(hours=-3))


@pytest.fixture
def tmp_db(tmp_path: Path) -> sqlite3.Connection:
    """Migrated temporary SQLite database."""
    conn = connect(tmp_path / "test.db")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def default_config() -> EngineConfig:
    """Return default EngineConfig with the default spot catalogue."""
    return EngineConfig(spots=DEFAULT_SPOTS)


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "cache": {"forecast_ttl_minutes": 10, "tide_ttl_hours": 24},
        "scoring": {"energy_policy": "power"},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def spot() -> SpotConfig:
    """South-facing beachbreak: offshore wind from the north."""
    return SpotConfig(
        id="testbreak",
        name="Test Break",
        lat=-23.5,
        lon=-45.1,
        region="testregion",
        region_name="Test Region",
        beach_azimuth=180,
        ideal_approach=(160, 200),
        swell_window=(120, 240),
        shadow_blocks=[(120, 135)],
        wind_shelter=WindShelter(offshore=(315, 45), bad_onshore=(135, 225)),
        bottom_type=BottomType.BEACHBREAK,
        tide_preference=[TidePhase.MID],
        tide_sensitivity=0.5,
    )


@pytest.fixture
def clean_hour() -> HourlySample:
    """Clean mid-size groundswell with light offshore wind at 08:00 local."""
    return HourlySample(
        time=datetime(2026, 3, 10, 8, tzinfo=BRT),
        wave_height=1.3,
        wave_direction=180,
        wave_period=10,
        swell_height=1.2,
        swell_direction=180,
        swell_period=11,
        wind_wave_height=0.1,
        wind_wave_direction=0,
        wind_wave_period=3,
        wind_speed=8,
        wind_direction=0,
    )


@pytest.fixture
def make_scored() -> Callable[..., ScoredHour]:
    """Factory for a ScoredHour with a fixed score, bypassing the scorer."""

    def _make(
        time: datetime,
        score: int,
        swell_height: float | None = 1.0,
        power: float = 5.0,
        wind_speed: float | None = 8.0,
        offshore: bool = True,
        reasons: list[ReasonTag] | None = None,
        **sample_fields,
    ) -> ScoredHour:
        sample = HourlySample(
            time=time,
            swell_height=swell_height,
            swell_period=sample_fields.pop("swell_period", 10.0),
            wind_speed=wind_speed,
            wind_direction=sample_fields.pop("wind_direction", 0.0),
            **sample_fields,
        )
        result = ScoreResult(
            scores={},
            score=score,
            label=Label.GOOD if score >= 60 else Label.BAD,
            reasons=reasons or [ReasonTag.CONDITION_GOOD],
            power_kwm=power,
            flags=HourFlags(is_offshore_sector=offshore),
        )
        return ScoredHour(sample, result)

    return _make
