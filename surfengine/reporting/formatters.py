"""Output formatters for forecasts, window analyses and region rankings."""

import json

from surfengine.models.analysis import AnalysisResult, AnalysisStatus, RegionRanking, SpotForecast
from surfengine.models.score import ReasonTag
from surfengine.models.window import AnalyzedWindow, Window
from surfengine.scoring.angles import direction_to_text

REASON_TEXT = {
    ReasonTag.CONDITION_EPIC: "Epic conditions",
    ReasonTag.CONDITION_GOOD: "Good conditions",
    ReasonTag.CONDITION_OK: "Surfable conditions",
    ReasonTag.CONDITION_BAD: "Poor conditions",
    ReasonTag.SWELL_ANGLE_IDEAL: "Swell angle in the ideal range",
    ReasonTag.SWELL_CLOSING_OUT: "Swell angle likely to close out",
    ReasonTag.OUTSIDE_WINDOW: "Swell outside the window or shadowed",
    ReasonTag.ENERGY_LOW: "Low energy",
    ReasonTag.ENERGY_MEDIUM: "Medium energy",
    ReasonTag.ENERGY_GOOD: "Good energy",
    ReasonTag.ENERGY_VERY_STRONG: "Very strong energy",
    ReasonTag.TEXTURE_CHOPPY: "Choppy surface",
    ReasonTag.TEXTURE_CLEAN: "Clean surface",
    ReasonTag.WIND_OFFSHORE_MODERATE: "Offshore or light wind",
    ReasonTag.WIND_ONSHORE_STRONG: "Onshore or strong cross wind",
    ReasonTag.STEEPNESS_FAVOURABLE: "Favourable wave steepness",
    ReasonTag.STEEPNESS_UNFAVOURABLE: "Unfavourable wave steepness",
}


def render_reasons(reasons: list[ReasonTag]) -> list[str]:
    return [REASON_TEXT.get(r, str(r)) for r in reasons]


def format_window_text(w: Window | AnalyzedWindow) -> str:
    """One-line summary of either window kind."""
    span = f"{w.start:%a %d/%m %H:%M} - {w.end:%H:%M}"
    if isinstance(w, Window):
        top = ", ".join(REASON_TEXT.get(h.reason, str(h.reason)) for h in w.highlights[:3])
        return f"{span} | score {w.score_avg} | {w.count}h | {top}"
    audience = ", ".join(str(a) for a in w.recommended_for)
    return (
        f"{span} | avg {w.avg_score:.0f} peak {w.peak_score} | {w.duration_hours}h "
        f"| {w.quality_rating} | {w.description} | for {audience}"
    )


def format_analysis_text(result: AnalysisResult) -> str:
    lines = [f"=== Windows for {result.spot_id} ({result.status}) ==="]
    if result.status == AnalysisStatus.ERROR:
        lines.append(f"Error: {result.message}")
        return "\n".join(lines)
    if result.status == AnalysisStatus.NO_DATA:
        lines.append("No forecast data available")
        return "\n".join(lines)

    lines.append(
        f"Hours analyzed: {result.total_hours_analyzed} | "
        f"matching: {result.hours_matching_criteria}"
    )
    if not result.windows:
        lines.append("No good windows for these preferences")
    for w in result.windows:
        lines.append(f"  {format_window_text(w)}")
    return "\n".join(lines)


def format_region_text(ranking: RegionRanking) -> str:
    lines = [f"=== Region {ranking.region} ({ranking.status}) ==="]
    if not ranking.ranking:
        lines.append("No spot with a good window")
        return "\n".join(lines)
    for i, entry in enumerate(ranking.ranking, start=1):
        bh = entry.best_hour
        lines.append(
            f"{i}. {entry.spot_name} ({entry.spot_id}): avg {entry.avg_score:.0f}, "
            f"peak {entry.peak_score}"
        )
        lines.append(
            f"   {entry.window.start:%a %d/%m %H:%M} - {entry.window.end:%H:%M} "
            f"| {entry.window.quality_rating} | {entry.window.description}"
        )
        lines.append(
            f"   best {bh.time:%H:%M}: score {bh.score}, wind "
            f"{direction_to_text(bh.wind_direction)}"
        )
    return "\n".join(lines)


def format_forecast_text(f: SpotForecast) -> str:
    lines = [
        f"=== Forecast {f.spot_id} | {f.days}d | {f.timezone} "
        f"| tide: {f.tide_source or 'none'} ===",
    ]
    for h in f.hours:
        s = h.sample
        lines.append(
            f"{s.time:%d/%m %H:%M} {h.score:3d} {h.label:<4} "
            f"H={_num(s.swell_height)}m T={_num(s.swell_period, 0)}s "
            f"wind={_num(s.wind_speed, 0)}km/h {direction_to_text(s.wind_direction)} "
            f"P={h.power_kwm:.1f}kW/m"
        )
    if f.windows:
        lines.append("Good windows:")
        for w in f.windows:
            lines.append(f"  {format_window_text(w)}")
    return "\n".join(lines)


def format_forecast_json(f: SpotForecast) -> str:
    return json.dumps(f.to_dict(), indent=2)


def _num(value: float | None, digits: int = 1) -> str:
    return "-" if value is None else f"{value:.{digits}f}"
