"""Region comparator: rank a region's spots by their best surf window."""

import logging
from collections.abc import Sequence

from surfengine.config.schema import EngineConfig, Preferences
from surfengine.models.analysis import (
    AnalysisStatus,
    RankingEntry,
    RegionRanking,
    RegionStatus,
    WindowSummary,
)
from surfengine.models.window import AnalyzedWindow
from surfengine.scoring import constants as C
from surfengine.windows.analyzer import WindowAnalyzer

logger = logging.getLogger(__name__)


class RegionComparator:
    def __init__(self, analyzer: WindowAnalyzer, config: EngineConfig):
        self.analyzer = analyzer
        self.config = config

    async def analyze_region(
        self,
        region_id: str,
        preferences: Preferences,
        only_spots: Sequence[str] | None = None,
        limit: int = C.REGION_LIMIT,
    ) -> RegionRanking:
        """Top ``limit`` spots of a region by best-window average score.

        Spots are analyzed one after another with the same preferences. A spot
        with no window, or whose analysis failed, is left out of the ranking.
        """
        spots = self.config.spots_in_region(region_id)
        if not spots:
            logger.info("No spots configured for region %s", region_id)
            return RegionRanking(region=region_id, status=RegionStatus.NO_SPOTS)

        if only_spots:
            spots = [s for s in spots if s.id in only_spots]

        entries: list[RankingEntry] = []
        for spot in spots:
            analysis = await self.analyzer.analyze(spot, preferences)
            if analysis.status == AnalysisStatus.ERROR:
                logger.warning(
                    "Region %s: analysis failed for %s: %s",
                    region_id, spot.id, analysis.message,
                )
                continue
            win = best_window(analysis.windows)
            if win is None:
                continue
            entries.append(
                RankingEntry(
                    spot_id=spot.id,
                    spot_name=spot.name,
                    avg_score=win.avg_score,
                    peak_score=win.peak_score,
                    best_hour=win.best_hour,
                    window=WindowSummary(
                        start=win.start,
                        end=win.end,
                        duration_hours=win.duration_hours,
                        description=win.description,
                        quality_rating=win.quality_rating,
                    ),
                )
            )

        ranking = sorted(entries, key=lambda e: -e.avg_score)[:limit]
        logger.info(
            "Region %s: %d of %d spots ranked", region_id, len(ranking), len(spots)
        )
        return RegionRanking(region=region_id, status=RegionStatus.SUCCESS, ranking=ranking)


def best_window(windows: Sequence[AnalyzedWindow]) -> AnalyzedWindow | None:
    if not windows:
        return None
    return max(windows, key=lambda w: (w.avg_score, w.duration_hours))
