"""CLI entry point for the surf condition engine."""

import argparse
import asyncio
import json
import logging
import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from surfengine.config.loader import get_config_value, load_config, set_config_value
from surfengine.config.schema import (
    EngineConfig,
    Preferences,
    SurfStyle,
    TideStore,
    TimeWindow,
    WindPreference,
)
from surfengine.ingest.errors import ProviderError
from surfengine.ingest.forecast_fetcher import ForecastFetcher
from surfengine.ingest.open_meteo_client import OpenMeteoClient
from surfengine.ingest.stormglass_client import StormglassClient
from surfengine.models.analysis import AnalysisStatus
from surfengine.pipeline.forecast_pipeline import ForecastPipeline
from surfengine.reporting.formatters import (
    format_analysis_text,
    format_forecast_json,
    format_forecast_text,
    format_region_text,
)
from surfengine.storage.database import connect, run_migrations
from surfengine.tides.cache import MemoryTideCache, SqliteTideCache, TideCacheStore
from surfengine.tides.service import TideService
from surfengine.windows.analyzer import WindowAnalyzer
from surfengine.windows.region import RegionComparator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "config/surfengine.yaml"


@dataclass
class Services:
    fetcher: ForecastFetcher
    tide_service: TideService | None
    pipeline: ForecastPipeline
    analyzer: WindowAnalyzer
    comparator: RegionComparator


def open_tide_store(config: EngineConfig) -> tuple[TideCacheStore, sqlite3.Connection | None]:
    if config.cache.tide_store == TideStore.SQLITE:
        conn = connect(config.cache.db_path)
        run_migrations(conn)
        return SqliteTideCache(conn), conn
    return MemoryTideCache(), None


def build_services(
    config: EngineConfig, http: httpx.AsyncClient, store: TideCacheStore
) -> Services:
    """Wire clients, caches and analyzers for one process."""
    fetcher = ForecastFetcher(OpenMeteoClient(config.providers, http), config.cache)
    tide_service: TideService | None = None
    if config.providers.stormglass_api_key:
        tide_service = TideService(
            StormglassClient(config.providers, http), store, config.cache.tide_ttl_hours
        )
    else:
        logger.info("STORMGLASS_API_KEY not set, running without tide data")

    analyzer = WindowAnalyzer(fetcher, tide_service, config)
    return Services(
        fetcher=fetcher,
        tide_service=tide_service,
        pipeline=ForecastPipeline(fetcher, tide_service, config),
        analyzer=analyzer,
        comparator=RegionComparator(analyzer, config),
    )


@asynccontextmanager
async def services_for(config: EngineConfig) -> AsyncIterator[Services]:
    store, conn = open_tide_store(config)
    try:
        async with httpx.AsyncClient() as http:
            yield build_services(config, http, store)
    finally:
        if conn is not None:
            conn.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="surfengine",
        description="Surf condition scoring and window analysis",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=None, help="SQLite DB path (tide cache)")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # spots
    sub.add_parser("spots", help="List configured spots by region")

    # forecast
    fc_p = sub.add_parser("forecast", help="Scored hourly forecast for a spot")
    fc_p.add_argument("spot", help="Spot id")
    fc_p.add_argument("--days", type=int, default=None, help="Forecast days (1-8)")
    fc_p.add_argument("--fresh", action="store_true", help="Bypass forecast cache")
    fc_p.add_argument("--tides-fresh", action="store_true", help="Bypass tide cache")
    fc_p.add_argument("--json", action="store_true", help="JSON output")

    # windows
    win_p = sub.add_parser("windows", help="Best surf windows for a spot")
    win_p.add_argument("spot", help="Spot id")
    _add_preference_args(win_p)

    # region
    reg_p = sub.add_parser("region", help="Rank a region's spots")
    reg_p.add_argument("region", help="Region id")
    reg_p.add_argument(
        "--only", action="append", default=[], help="Restrict to spot id (repeatable)"
    )
    reg_p.add_argument("--limit", type=int, default=None, help="Spots to rank")
    _add_preference_args(reg_p)

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    # cache purge
    cache_p = sub.add_parser("cache", help="Tide cache operations")
    cache_sub = cache_p.add_subparsers(dest="cache_command")
    cache_sub.add_parser("purge", help="Delete expired tide cache entries")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.db:
        config = config.model_copy(
            update={"cache": config.cache.model_copy(update={"db_path": args.db})}
        )

    if args.command == "spots":
        return _cmd_spots(config)
    elif args.command == "forecast":
        return _cmd_forecast(config, args)
    elif args.command == "windows":
        return _cmd_windows(config, args)
    elif args.command == "region":
        return _cmd_region(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    elif args.command == "cache":
        return _cmd_cache(config, args)
    else:
        parser.print_help()
        return 1


def _add_preference_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--days", type=int, default=3, help="Days ahead (1-16)")
    p.add_argument(
        "--time-window", action="append", default=[],
        choices=[t.value for t in TimeWindow], help="Time bucket (repeatable)",
    )
    p.add_argument("--min-score", type=int, default=60, help="Minimum hourly score")
    p.add_argument("--min-energy", type=float, default=0.0, help="Minimum power, kW/m")
    p.add_argument(
        "--style", default=SurfStyle.ANY.value, choices=[s.value for s in SurfStyle]
    )
    p.add_argument(
        "--wind", default=WindPreference.ANY.value,
        choices=[w.value for w in WindPreference],
    )
    p.add_argument("--json", action="store_true", help="JSON output")


def _preferences(args) -> Preferences:
    return Preferences(
        days_ahead=args.days,
        time_windows=args.time_window,
        min_score=args.min_score,
        min_energy=args.min_energy,
        surf_style=args.style,
        wind_preference=args.wind,
    )


def _cmd_spots(config: EngineConfig) -> int:
    for region_id, region_name in config.regions():
        print(f"{region_name} ({region_id})")
        for spot in config.spots_in_region(region_id):
            print(
                f"  {spot.id:<16} {spot.name:<24} {spot.bottom_type:<10} "
                f"azimuth {spot.beach_azimuth:.0f}"
            )
    orphans = [s for s in config.spots if not s.region]
    if orphans:
        print("(no region)")
        for spot in orphans:
            print(f"  {spot.id:<16} {spot.name}")
    return 0


def _cmd_forecast(config: EngineConfig, args) -> int:
    spot = config.spot_by_id(args.spot)
    if spot is None:
        print(f"Error: unknown spot {args.spot}")
        return 1
    days = args.days if args.days is not None else config.analysis.forecast_days

    async def run():
        async with services_for(config) as services:
            return await services.pipeline.run(
                spot, days=days, fresh=args.fresh, tides_fresh=args.tides_fresh
            )

    try:
        forecast = asyncio.run(run())
    except ProviderError as e:
        print(f"Error: {e}")
        return 1
    print(format_forecast_json(forecast) if args.json else format_forecast_text(forecast))
    return 0


def _cmd_windows(config: EngineConfig, args) -> int:
    spot = config.spot_by_id(args.spot)
    if spot is None:
        print(f"Error: unknown spot {args.spot}")
        return 1
    try:
        prefs = _preferences(args)
    except ValidationError as e:
        print(f"Error: invalid preferences: {e}")
        return 1

    async def run():
        async with services_for(config) as services:
            return await services.analyzer.analyze(spot, prefs)

    result = asyncio.run(run())
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_analysis_text(result))
    return 0 if result.status != AnalysisStatus.ERROR else 1


def _cmd_region(config: EngineConfig, args) -> int:
    try:
        prefs = _preferences(args)
    except ValidationError as e:
        print(f"Error: invalid preferences: {e}")
        return 1
    limit = args.limit if args.limit is not None else config.analysis.region_limit

    async def run():
        async with services_for(config) as services:
            return await services.comparator.analyze_region(
                args.region, prefs, only_spots=args.only, limit=limit
            )

    ranking = asyncio.run(run())
    if args.json:
        print(json.dumps(ranking.to_dict(), indent=2))
    else:
        print(format_region_text(ranking))
    return 0


def _cmd_config(config: EngineConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
            print(f"Set {key} = {get_config_value(new_config, key.strip())}")
            return 0
        except (KeyError, ValueError, IndexError) as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config set key=value")
        return 1


def _cmd_cache(config: EngineConfig, args) -> int:
    if args.cache_command != "purge":
        print("Use: cache purge")
        return 1
    if config.cache.tide_store != TideStore.SQLITE:
        print("Tide cache is in memory, nothing to purge")
        return 0
    store, conn = open_tide_store(config)
    try:
        removed = store.purge_expired()
    finally:
        if conn is not None:
            conn.close()
    print(f"Purged {removed} expired tide cache entries")
    return 0
