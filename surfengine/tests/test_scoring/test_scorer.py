"""Tests for the condition scorer."""

from dataclasses import replace

import pytest

from surfengine.config.schema import BottomType, EnergyPolicy, SpotConfig
from surfengine.models.forecast import HourlySample
from surfengine.models.score import Label, ReasonTag, ScoredHour
from surfengine.scoring import constants as C
from surfengine.scoring.scorer import (
    apply_consistency,
    combine,
    energy_score_from_bands,
    energy_score_from_power,
    moving_average,
    score_hour,
    score_series,
    score_steepness,
    score_swell_angle,
    score_texture,
    score_tide,
    score_wind,
    score_window,
    to_label,
    wave_power_kw_m,
)


class TestCombine:
    def test_all_max_is_100(self):
        assert combine({name: 1.0 for name in C.WEIGHTS}) == 100

    def test_active_weights_sum_to_one(self):
        active = sum(w for name, w in C.WEIGHTS.items() if name != "tide")
        assert active == pytest.approx(1.0)
        assert C.WEIGHTS["tide"] == 0.0

    def test_missing_scores_default(self):
        # Only consistency (and the inert tide) default to neutral
        assert combine({}) == 5

    def test_clamped(self):
        assert combine({name: 5.0 for name in C.WEIGHTS}) == 100
        assert combine({name: -1.0 for name in C.WEIGHTS}) == 0

    def test_partial_scores(self):
        assert combine({"swell_angle": 0.25}) == 10


class TestToLabel:
    @pytest.mark.parametrize(
        "score,label",
        [
            (100, Label.EPIC),
            (80, Label.EPIC),
            (79, Label.GOOD),
            (60, Label.GOOD),
            (59, Label.OK),
            (40, Label.OK),
            (39, Label.BAD),
            (0, Label.BAD),
        ],
    )
    def test_buckets(self, score, label):
        assert to_label(score) == label


class TestWavePower:
    def test_zero_for_non_positive_inputs(self):
        assert wave_power_kw_m(0, 12) == 0.0
        assert wave_power_kw_m(1.5, 0) == 0.0
        assert wave_power_kw_m(-1, 10) == 0.0
        assert wave_power_kw_m(float("nan"), 10) == 0.0

    def test_formula(self):
        assert wave_power_kw_m(1.0, 10.0) == pytest.approx(4.9)

    def test_strictly_increasing(self):
        assert wave_power_kw_m(1.1, 10) > wave_power_kw_m(1.0, 10)
        assert wave_power_kw_m(1.0, 11) > wave_power_kw_m(1.0, 10)


class TestSwellAngle:
    def test_inside_ideal_range(self, spot: SpotConfig, clean_hour: HourlySample):
        assert score_swell_angle(clean_hour, spot) == 1.0

    def test_independent_of_azimuth(self, spot: SpotConfig, clean_hour: HourlySample):
        north_facing = spot.model_copy(update={"beach_azimuth": 0})
        assert score_swell_angle(clean_hour, north_facing) == 1.0

    def test_linear_falloff_over_pad(self, spot: SpotConfig, clean_hour: HourlySample):
        half = replace(clean_hour, swell_direction=207.5)
        assert score_swell_angle(half, spot) == pytest.approx(0.5)
        beyond = replace(clean_hour, swell_direction=215)
        assert score_swell_angle(beyond, spot) == 0.0

    def test_unknown_direction(self, spot: SpotConfig, clean_hour: HourlySample):
        assert score_swell_angle(replace(clean_hour, swell_direction=None), spot) == 0.0


class TestWindow:
    def test_open_window(self, spot: SpotConfig, clean_hour: HourlySample):
        assert score_window(clean_hour, spot) == 1.0

    def test_shadowed(self, spot: SpotConfig, clean_hour: HourlySample):
        assert score_window(replace(clean_hour, swell_direction=125), spot) == pytest.approx(0.1)

    def test_outside_window(self, spot: SpotConfig, clean_hour: HourlySample):
        assert score_window(replace(clean_hour, swell_direction=300), spot) == 0.0
        assert score_window(replace(clean_hour, swell_direction=None), spot) == 0.0


class TestEnergy:
    @pytest.mark.parametrize(
        "power,expected",
        [(0.0, 0.0), (1.5, 0.1), (3.0, 0.2), (5.0, 0.35), (9.5, 0.65), (20.0, 0.95)],
    )
    def test_power_anchors_point(self, power, expected):
        assert energy_score_from_power(power, BottomType.POINT) == pytest.approx(expected)

    def test_heavy_beachbreak_penalty(self):
        assert energy_score_from_power(15.0, BottomType.BEACHBREAK) == pytest.approx(0.85)
        assert energy_score_from_power(15.0, BottomType.REEF) == pytest.approx(0.95)

    def test_band_policy(self):
        assert energy_score_from_bands(1.0, 12.0, BottomType.POINT) == 1.0
        assert energy_score_from_bands(0.0, 12.0, BottomType.POINT) == 0.0
        # Period 1s below a 5s-wide band padded by 0.75 * 5 = 3.75s
        assert energy_score_from_bands(1.0, 8.0, BottomType.BEACHBREAK) == pytest.approx(
            (1.0 + (1 - 1.0 / 3.75)) / 2
        )

    def test_band_policy_selectable(self, spot: SpotConfig, clean_hour: HourlySample):
        result = score_hour(clean_hour, spot, EnergyPolicy.BAND)
        assert result.scores["energy"] == 1.0


class TestTexture:
    def test_clean(self, clean_hour: HourlySample):
        assert score_texture(clean_hour) == pytest.approx(1 - 0.1 / 1.2)

    def test_flat_swell_scores_zero_texture_and_power(self, spot: SpotConfig, clean_hour: HourlySample):
        flat = replace(clean_hour, swell_height=0.0, swell_period=14)
        assert score_texture(flat) == 0.0
        assert score_hour(flat, spot).power_kwm == 0.0

    def test_all_chop(self, clean_hour: HourlySample):
        assert score_texture(replace(clean_hour, wind_wave_height=2.0)) == 0.0


class TestWind:
    def test_pure_offshore(self, spot: SpotConfig, clean_hour: HourlySample):
        assert score_wind(clean_hour, spot) == 1.0

    def test_direction_bands(self, spot: SpotConfig, clean_hour: HourlySample):
        assert score_wind(replace(clean_hour, wind_direction=45), spot) == pytest.approx(0.6)
        assert score_wind(replace(clean_hour, wind_direction=75), spot) == pytest.approx(0.3)
        assert score_wind(replace(clean_hour, wind_direction=180), spot) == pytest.approx(0.1)

    def test_speed_factor(self, spot: SpotConfig, clean_hour: HourlySample):
        assert score_wind(replace(clean_hour, wind_speed=2), spot) == pytest.approx(0.7)
        assert score_wind(replace(clean_hour, wind_speed=30), spot) == pytest.approx(0.3)

    def test_unknown_direction(self, spot: SpotConfig, clean_hour: HourlySample):
        assert score_wind(replace(clean_hour, wind_direction=None), spot) == 0.0


class TestSteepness:
    def test_ideal(self, spot: SpotConfig, clean_hour: HourlySample):
        steep = replace(clean_hour, swell_height=1.2, swell_period=6)
        assert score_steepness(steep, spot) == 1.0

    def test_between_hard_and_ideal(self, spot: SpotConfig, clean_hour: HourlySample):
        hour = replace(clean_hour, swell_height=1.0, swell_period=6)
        s = 1.0 / (1.56 * 36)
        assert score_steepness(hour, spot) == pytest.approx((s - 0.015) / (0.02 - 0.015))

    def test_long_period_groundswell_is_unfavourable(self, spot: SpotConfig, clean_hour: HourlySample):
        assert score_steepness(clean_hour, spot) == 0.0

    def test_missing_inputs(self, spot: SpotConfig, clean_hour: HourlySample):
        assert score_steepness(replace(clean_hour, swell_period=None), spot) == 0.0


class TestTide:
    def test_neutral_without_tide(self, spot: SpotConfig, clean_hour: HourlySample):
        assert score_tide(clean_hour, spot) == 1.0

    def test_phase_match(self, spot: SpotConfig, clean_hour: HourlySample):
        mid = replace(clean_hour, tide_height=0.0, tide_min=-0.3, tide_max=0.3)
        assert score_tide(mid, spot) == 1.0

    def test_phase_mismatch(self, spot: SpotConfig, clean_hour: HourlySample):
        high = replace(clean_hour, tide_height=0.25, tide_min=-0.3, tide_max=0.3)
        assert score_tide(high, spot) == pytest.approx(1 - 0.7 * 0.5)

    def test_inert_in_combined_score(self, spot: SpotConfig, clean_hour: HourlySample):
        high = replace(clean_hour, tide_height=0.25, tide_min=-0.3, tide_max=0.3)
        assert score_hour(high, spot).score == score_hour(clean_hour, spot).score


class TestScoreHour:
    def test_clean_hour(self, spot: SpotConfig, clean_hour: HourlySample):
        result = score_hour(clean_hour, spot)
        assert result.score == 80
        assert result.label == Label.EPIC
        assert result.power_kwm == pytest.approx(0.49 * 1.2 * 1.2 * 11)
        assert result.reasons == [
            ReasonTag.CONDITION_EPIC,
            ReasonTag.SWELL_ANGLE_IDEAL,
            ReasonTag.ENERGY_GOOD,
            ReasonTag.TEXTURE_CLEAN,
            ReasonTag.WIND_OFFSHORE_MODERATE,
            ReasonTag.STEEPNESS_UNFAVOURABLE,
        ]

    def test_flags(self, spot: SpotConfig, clean_hour: HourlySample):
        flags = score_hour(clean_hour, spot).flags
        assert flags.is_offshore_sector
        assert not flags.is_bad_onshore_sector
        assert flags.within_window

        onshore = score_hour(replace(clean_hour, wind_direction=180), spot).flags
        assert onshore.is_bad_onshore_sector
        assert not onshore.is_offshore_sector

    def test_period_falls_back_to_wave_period(self, spot: SpotConfig, clean_hour: HourlySample):
        result = score_hour(replace(clean_hour, swell_period=None), spot)
        assert result.power_kwm == pytest.approx(0.49 * 1.2 * 1.2 * 10)

    def test_missing_everything_never_raises(self, spot: SpotConfig, clean_hour: HourlySample):
        empty = HourlySample(time=clean_hour.time)
        result = score_hour(empty, spot)
        assert result.score == 5
        assert result.label == Label.BAD
        assert ReasonTag.ENERGY_LOW in result.reasons

    @pytest.mark.parametrize("direction", [0, 90, 180, 270])
    def test_score_in_range(self, spot: SpotConfig, clean_hour: HourlySample, direction):
        result = score_hour(replace(clean_hour, swell_direction=direction), spot)
        assert 0 <= result.score <= 100


class TestConsistency:
    def test_moving_average(self):
        assert moving_average([60, 90, 60]) == pytest.approx([60, 75, 70])

    def test_steady_series_unchanged(self, spot: SpotConfig, clean_hour: HourlySample):
        hours = score_series([clean_hour] * 3, spot)
        refined = apply_consistency(hours)
        assert [h.score for h in refined] == [80, 80, 80]
        assert all(h.result.scores["consistency"] == 1.0 for h in refined)

    def test_spike_is_penalized_and_relabelled(self, spot: SpotConfig, clean_hour: HourlySample):
        rough = replace(clean_hour, wind_direction=180, wind_speed=35)
        hours = score_series([rough, rough, clean_hour], spot)
        assert [h.score for h in hours] == [65, 65, 80]

        refined = apply_consistency(hours)
        spike = refined[2]
        assert spike.result.scores["consistency"] == pytest.approx(1 - 10 / 30)
        assert spike.score == 78
        assert spike.label == Label.GOOD
        assert spike.reasons[0] == ReasonTag.CONDITION_GOOD
        assert ReasonTag.CONDITION_EPIC not in spike.reasons

    def test_returns_new_objects(self, spot: SpotConfig, clean_hour: HourlySample):
        hours = score_series([clean_hour], spot)
        refined = apply_consistency(hours)
        assert isinstance(refined[0], ScoredHour)
        assert "consistency" not in hours[0].result.scores
