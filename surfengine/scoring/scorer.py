"""Condition scorer: one hourly sample + spot profile -> sub-scores and 0-100 score.

Each sub-score is an independent value in [0, 1]. Missing or non-finite inputs
never raise; they produce a neutral or zero sub-score instead.
"""

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import replace

from surfengine.config.schema import BottomType, EnergyPolicy, SpotConfig, TidePhase
from surfengine.models.common import clamp01, round_half_up
from surfengine.models.forecast import HourlySample
from surfengine.models.score import (
    CONDITION_TAGS,
    HourFlags,
    Label,
    ReasonTag,
    ScoredHour,
    ScoreResult,
)
from surfengine.scoring import constants as C
from surfengine.scoring.angles import ang_diff, distance_to_sector, in_sector, to360

logger = logging.getLogger(__name__)


def score_hour(
    hour: HourlySample,
    spot: SpotConfig,
    energy_policy: EnergyPolicy = EnergyPolicy.POWER,
) -> ScoreResult:
    """Score a single hour for a spot, with consistency held neutral."""
    height = hour.swell_height or 0.0
    period = hour.swell_period if hour.swell_period is not None else (hour.wave_period or 0.0)
    power = wave_power_kw_m(height, period)

    if energy_policy == EnergyPolicy.BAND:
        energy = energy_score_from_bands(height, period, spot.bottom_type)
    else:
        energy = energy_score_from_power(power, spot.bottom_type)

    scores = {
        "swell_angle": score_swell_angle(hour, spot),
        "window": score_window(hour, spot),
        "energy": energy,
        "texture": score_texture(hour),
        "wind": score_wind(hour, spot),
        "steepness": score_steepness(hour, spot),
        "tide": score_tide(hour, spot),
    }
    base = combine({**scores, "consistency": 1.0})
    label = to_label(base)
    reasons = build_reasons(scores, base, power)

    if hour.time.hour in C.SAMPLE_LOG_HOURS and hour.time.minute == 0:
        logger.debug(
            "scoring sample spot=%s time=%s H=%s T=%s P=%.2f wind=%s/%s label=%s score=%d",
            spot.id, hour.time.isoformat(), hour.swell_height, period, power,
            hour.wind_speed, hour.wind_direction, label, base,
        )

    return ScoreResult(
        scores=scores,
        score=base,
        label=label,
        reasons=reasons,
        power_kwm=power,
        flags=hour_flags(hour, spot),
    )


def score_series(
    hours: Sequence[HourlySample],
    spot: SpotConfig,
    energy_policy: EnergyPolicy = EnergyPolicy.POWER,
) -> list[ScoredHour]:
    return [ScoredHour(h, score_hour(h, spot, energy_policy)) for h in hours]


def combine(scores: Mapping[str, float]) -> int:
    """Fixed-weight blend of sub-scores, as an integer 0-100."""
    total = 0.0
    for name, weight in C.WEIGHTS.items():
        default = 1.0 if name in C.NEUTRAL_DEFAULTS else 0.0
        value = scores.get(name)
        total += weight * (default if value is None else value)
    return max(0, min(100, round_half_up(100 * total)))


def to_label(score: float) -> Label:
    if score >= C.LABEL_EPIC:
        return Label.EPIC
    if score >= C.LABEL_GOOD:
        return Label.GOOD
    if score >= C.LABEL_OK:
        return Label.OK
    return Label.BAD


# --- Sub-scores ---

def score_swell_angle(hour: HourlySample, spot: SpotConfig) -> float:
    if hour.swell_direction is None:
        return 0.0
    off = distance_to_sector(hour.swell_direction, spot.ideal_approach)
    return clamp01(1 - off / C.SWELL_ANGLE_PAD_DEG)


def score_window(hour: HourlySample, spot: SpotConfig) -> float:
    direction = hour.swell_direction
    if direction is None or not in_sector(direction, spot.swell_window):
        return 0.0
    if any(in_sector(direction, blk) for blk in spot.shadow_blocks):
        return C.SHADOW_BLOCK_SCORE
    return 1.0


def wave_power_kw_m(height: float, period: float) -> float:
    """Deep-water wave energy flux per metre of crest, 0.49 * H^2 * T."""
    if not (math.isfinite(height) and math.isfinite(period)) or height <= 0 or period <= 0:
        return 0.0
    return C.WAVE_POWER_COEFF * height * height * period


def energy_score_from_power(power: float, bottom_type: BottomType) -> float:
    if power <= 0:
        s = 0.0
    elif power < C.POWER_LOW:
        s = C.ENERGY_AT_LOW * (power / C.POWER_LOW)
    elif power < C.POWER_MEDIUM:
        s = C.ENERGY_AT_LOW + (C.ENERGY_AT_MEDIUM - C.ENERGY_AT_LOW) * (
            (power - C.POWER_LOW) / (C.POWER_MEDIUM - C.POWER_LOW)
        )
    elif power < C.POWER_HEAVY:
        s = C.ENERGY_AT_MEDIUM + (C.ENERGY_AT_HEAVY - C.ENERGY_AT_MEDIUM) * (
            (power - C.POWER_MEDIUM) / (C.POWER_HEAVY - C.POWER_MEDIUM)
        )
    else:
        s = C.ENERGY_HEAVY
    # Shallow beachbreaks get overwhelmed by heavy surf
    if bottom_type == BottomType.BEACHBREAK and power > C.POWER_HEAVY:
        s -= C.HEAVY_SHALLOW_PENALTY
    return clamp01(s)


def energy_score_from_bands(height: float, period: float, bottom_type: BottomType) -> float:
    """Legacy energy policy: mean of height and period band scores."""
    if height <= 0 or period <= 0:
        return 0.0
    h_band, t_band = C.ENERGY_BANDS[bottom_type]
    return (_band_score(height, *h_band) + _band_score(period, *t_band)) / 2


def _band_score(value: float, lo: float, hi: float) -> float:
    if lo <= value <= hi:
        return 1.0
    pad = (hi - lo) * C.BAND_PAD_RATIO
    if value < lo:
        return clamp01(1 - (lo - value) / pad)
    return clamp01(1 - (value - hi) / pad)


def score_texture(hour: HourlySample) -> float:
    swell = hour.swell_height or 0.0
    if swell <= 0:
        return 0.0
    chop = (hour.wind_wave_height or 0.0) / max(C.MIN_SWELL_FOR_CHOP, swell)
    return clamp01(1 - chop)


def score_wind(hour: HourlySample, spot: SpotConfig) -> float:
    if hour.wind_direction is None:
        return 0.0
    offshore = to360(spot.beach_azimuth + 180)
    off_by = ang_diff(hour.wind_direction, offshore)
    dir_score = C.WIND_DIR_FLOOR
    for limit, value in C.WIND_DIR_BANDS:
        if off_by < limit:
            dir_score = value
            break

    speed = hour.wind_speed or 0.0
    if speed < C.WIND_TOO_LIGHT:
        speed_score = C.WIND_LIGHT_SCORE
    elif speed > C.WIND_TOO_STRONG:
        speed_score = C.WIND_STRONG_SCORE
    else:
        speed_score = 1.0
    return dir_score * speed_score


def wave_steepness(height: float, period: float) -> float:
    wavelength = C.DEEP_WATER_WAVELENGTH_COEFF * period * period
    return height / max(C.MIN_SWELL_FOR_CHOP, wavelength)


def score_steepness(hour: HourlySample, spot: SpotConfig) -> float:
    height = hour.swell_height or 0.0
    period = hour.swell_period or 0.0
    if height <= 0 or period <= 0:
        return 0.0
    s = wave_steepness(height, period)
    ranges = C.STEEPNESS_RANGES[spot.bottom_type]
    ideal_lo, ideal_hi = ranges["ideal"]
    hard_lo, hard_hi = ranges["hard"]
    if ideal_lo <= s <= ideal_hi:
        return 1.0
    if s < ideal_lo:
        return clamp01((s - hard_lo) / (ideal_lo - hard_lo))
    return clamp01((hard_hi - s) / (hard_hi - ideal_hi))


def tide_phase(height: float, low: float, high: float) -> TidePhase:
    frac = (height - low) / (high - low)
    if frac < C.TIDE_LOW_FRACTION:
        return TidePhase.LOW
    if frac > C.TIDE_HIGH_FRACTION:
        return TidePhase.HIGH
    return TidePhase.MID


def score_tide(hour: HourlySample, spot: SpotConfig) -> float:
    """Tide phase match against the spot's preference; neutral when unknown."""
    h, lo, hi = hour.tide_height, hour.tide_min, hour.tide_max
    if not spot.tide_preference or h is None or lo is None or hi is None or hi <= lo:
        return C.TIDE_NEUTRAL
    phase = tide_phase(h, lo, hi)
    wanted = set(spot.tide_preference)
    if TidePhase.MID_HIGH in wanted:
        wanted |= {TidePhase.MID, TidePhase.HIGH}
    if phase in wanted:
        return 1.0
    return clamp01(1 - C.TIDE_MISMATCH_FACTOR * spot.tide_sensitivity)


def hour_flags(hour: HourlySample, spot: SpotConfig) -> HourFlags:
    return HourFlags(
        is_offshore_sector=in_sector(hour.wind_direction, spot.wind_shelter.offshore),
        is_bad_onshore_sector=in_sector(hour.wind_direction, spot.wind_shelter.bad_onshore),
        within_window=in_sector(hour.swell_direction, spot.swell_window),
    )


# --- Reasons ---

def condition_tag(score: int) -> ReasonTag:
    return {
        Label.EPIC: ReasonTag.CONDITION_EPIC,
        Label.GOOD: ReasonTag.CONDITION_GOOD,
        Label.OK: ReasonTag.CONDITION_OK,
        Label.BAD: ReasonTag.CONDITION_BAD,
    }[to_label(score)]


def build_reasons(scores: Mapping[str, float], final_score: int, power: float) -> list[ReasonTag]:
    """Ordered tags: bucket summary first, then per-factor threshold crossings."""
    r = [condition_tag(final_score)]

    if scores["swell_angle"] >= C.REASON_ANGLE_IDEAL:
        r.append(ReasonTag.SWELL_ANGLE_IDEAL)
    elif scores["swell_angle"] <= C.REASON_ANGLE_BAD:
        r.append(ReasonTag.SWELL_CLOSING_OUT)

    if scores["window"] <= C.REASON_WINDOW_BAD:
        r.append(ReasonTag.OUTSIDE_WINDOW)

    if power < C.POWER_LOW:
        r.append(ReasonTag.ENERGY_LOW)
    elif power < C.POWER_MEDIUM:
        r.append(ReasonTag.ENERGY_MEDIUM)
    elif power < C.POWER_HEAVY:
        r.append(ReasonTag.ENERGY_GOOD)
    else:
        r.append(ReasonTag.ENERGY_VERY_STRONG)

    if scores["texture"] <= C.REASON_TEXTURE_CHOPPY:
        r.append(ReasonTag.TEXTURE_CHOPPY)
    elif scores["texture"] >= C.REASON_TEXTURE_CLEAN:
        r.append(ReasonTag.TEXTURE_CLEAN)

    if scores["wind"] >= C.REASON_WIND_GOOD:
        r.append(ReasonTag.WIND_OFFSHORE_MODERATE)
    elif scores["wind"] <= C.REASON_WIND_BAD:
        r.append(ReasonTag.WIND_ONSHORE_STRONG)

    if scores["steepness"] >= C.REASON_STEEP_GOOD:
        r.append(ReasonTag.STEEPNESS_FAVOURABLE)
    elif scores["steepness"] <= C.REASON_STEEP_BAD:
        r.append(ReasonTag.STEEPNESS_UNFAVOURABLE)

    return r


# --- Consistency refinement ---

def moving_average(values: Sequence[float], window: int = C.CONSISTENCY_WINDOW) -> list[float]:
    """Trailing moving average; the first entries average what is available."""
    out: list[float] = []
    for i in range(len(values)):
        chunk = values[max(0, i - (window - 1)):i + 1]
        out.append(sum(chunk) / len(chunk))
    return out


def apply_consistency(hours: Sequence[ScoredHour]) -> list[ScoredHour]:
    """Re-score a series, penalizing hours that spike away from their 3h trend."""
    base = [h.score for h in hours]
    ma3 = moving_average(base)
    out: list[ScoredHour] = []
    for h, score, avg in zip(hours, base, ma3):
        consistency = clamp01(1 - abs(score - avg) / C.CONSISTENCY_TOLERANCE)
        scores = {**h.result.scores, "consistency": consistency}
        final = combine(scores)
        reasons = [condition_tag(final)] + [
            t for t in h.result.reasons if t not in CONDITION_TAGS
        ]
        result = replace(
            h.result, scores=scores, score=final, label=to_label(final), reasons=reasons
        )
        out.append(ScoredHour(h.sample, result))
    return out
