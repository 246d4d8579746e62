"""Unified CLI for pasture and rainfall analytics.

Reads from the hosted store by default, or from a JSON snapshot with
--snapshot, and prints operator tables (or JSON with --json).
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from datetime import date

from pasturewatch.core import settings
from pasturewatch.core.client import RepositoryError
from pasturewatch.core.models import NoData, Result
from pasturewatch.core.thresholds import AnalyticsConfig
from pasturewatch.core.units import format_area, format_height, format_mass, format_rainfall, format_rate
from pasturewatch.data.snapshot import SnapshotStore
from pasturewatch.data.sources import Sources
from pasturewatch.data.store import store_sources
from pasturewatch.pasture.api import (
    compare_lots,
    get_lot_statistics,
    height_history,
    project_lot,
    stocking_for_lot,
    velocity_for_lot,
)
from pasturewatch.pasture.stocking import StockingRecommendation, adjust_stocking
from pasturewatch.satellite.api import correlate_lot
from pasturewatch.satellite.yield_model import CorrelationModel
from pasturewatch.weather.api import rainfall_summary
from pasturewatch.weather.rainfall import adjust_projected_yield

logger = logging.getLogger(__name__)


def _sources(args: argparse.Namespace) -> Sources:
    if args.snapshot:
        logger.info("Reading snapshot %s", args.snapshot)
        return SnapshotStore.load(args.snapshot).sources()
    return store_sources(settings.premise_id)


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive number of days, got {value}")
    return number


def _as_of(args: argparse.Namespace) -> date | None:
    return date.fromisoformat(args.as_of) if args.as_of else None


def _emit_json(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _print_no_data(result: NoData) -> None:
    print(f"No data: {result.reason}")
    if result.records_seen:
        print(f"  ({result.records_seen} records seen)")


def _summary(result: Result, describe) -> str:
    if isinstance(result, NoData):
        return f"no data ({result.reason})"
    return describe(result)


def _header(title: str) -> None:
    print("=" * 70)
    print(title)
    print("=" * 70)


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------


async def cmd_velocity(args: argparse.Namespace, config: AnalyticsConfig) -> None:
    if args.days is not None:
        config = replace(config, velocity_window_days=args.days)
    result = await velocity_for_lot(_sources(args), args.lot, config, _as_of(args))
    if args.json:
        return _emit_json(result.to_dict())
    if isinstance(result, NoData):
        return _print_no_data(result)

    _header(f"Growth Velocity - lot {args.lot} (last {config.velocity_window_days} days)")
    print(f"\n{'From':<12} {'To':<12} {'Days':>5} {'Change':>10} {'Rate':>16}")
    print("-" * 60)
    for pair in result.pairs:
        print(
            f"{pair.start.isoformat():<12} {pair.end.isoformat():<12} {pair.days:>5} "
            f"{format_height(pair.delta_cm):>10} {format_rate(pair.rate):>16}"
        )
    print(f"\nVelocity: {format_rate(result.velocity)} ({result.pairs_used} intervals)")
    print(f"Range:    {format_rate(result.min_rate)} to {format_rate(result.max_rate)}")
    print(f"Trend:    {result.label}")


async def cmd_project(args: argparse.Namespace, config: AnalyticsConfig) -> None:
    result = await project_lot(_sources(args), args.lot, config, args.remnant, _as_of(args))
    if args.json:
        return _emit_json(result.to_dict())
    if isinstance(result, NoData):
        return _print_no_data(result)

    _header(f"Depletion Projection - lot {args.lot}")
    print(f"\nCurrent height: {format_height(result.current_cm)}")
    print(f"Remnant:        {format_height(result.remnant_cm)}")
    print(f"Velocity:       {format_rate(result.velocity)}")
    days = "never" if result.never_depletes else str(result.days_until_critical)
    print(f"Days to remnant: {days}")
    if result.projected_date:
        print(f"Projected date:  {result.projected_date.isoformat()}")
    print(f"\n[{result.status.value.upper()}] {result.message}")
    print(f"Action: {result.recommendation}")


async def cmd_stocking(args: argparse.Namespace, config: AnalyticsConfig) -> None:
    result = await stocking_for_lot(
        _sources(args),
        args.lot,
        config,
        remnant_cm=args.remnant,
        area_ha=args.area,
        daily_intake_kg=args.intake,
        efficiency_pct=args.efficiency,
        target_days=args.days,
        as_of=_as_of(args),
    )
    adjustment = None
    if isinstance(result, StockingRecommendation) and args.current_head is not None:
        adjustment = adjust_stocking(args.current_head, result.recommended_head, f"Lot {args.lot}")

    if args.json:
        payload = result.to_dict()
        if adjustment:
            payload["adjustment"] = adjustment.to_dict()
        return _emit_json(payload)
    if isinstance(result, NoData):
        return _print_no_data(result)

    _header(f"Stocking Rate - lot {args.lot}")
    print(f"\nCurrent height:  {format_height(result.current_cm)}")
    print(f"Remnant:         {format_height(result.remnant_cm)}")
    print(f"Available:       {format_height(result.available_cm)}")
    print(f"Area:            {format_area(result.area_ha)}")
    print(f"Forage on offer: {format_mass(result.forage_kg)}")
    print(f"Usable ({result.efficiency_pct:.0f}%):    {format_mass(result.usable_forage_kg)}")
    print(f"\nRecommended: {result.recommended_head} head for {result.target_days} days")
    print(f"[{result.status.value.upper()}] {result.message}")
    if adjustment:
        print(f"\n[{adjustment.action.value.upper()} / {adjustment.priority.value}] {adjustment.message}")


async def cmd_compare(args: argparse.Namespace, config: AnalyticsConfig) -> None:
    rankings = await compare_lots(_sources(args), args.premise or settings.premise_id, config, _as_of(args))
    if args.json:
        return _emit_json([r.to_dict() for r in rankings])
    if not rankings:
        print("No lots with usable measurements.")
        return

    _header("Lot Comparison (by forage on offer)")
    print(f"\n{'Lot':<22} {'Height':>9} {'Remnant':>9} {'Area':>9} {'Forage':>16} {'Head':>5} {'Status':<9} Trend")
    print("-" * 100)
    for r in rankings:
        trend = r.trend.value if r.trend else "-"
        head = r.recommended_head if r.recommended_head is not None else "-"
        print(
            f"{r.lot_name[:22]:<22} {format_height(r.current_cm):>9} {format_height(r.remnant_cm):>9} "
            f"{format_area(r.area_ha):>9} {format_mass(r.forage_kg):>16} {head:>5} {r.status.value:<9} {trend}"
        )

    total = sum(r.forage_kg for r in rankings)
    print(f"\nLots ranked: {len(rankings)}")
    print(f"Total forage on offer: {format_mass(total)}")


async def cmd_stats(args: argparse.Namespace, config: AnalyticsConfig) -> None:
    sources = _sources(args)
    if args.start and args.end:
        history = await height_history(sources, args.lot, date.fromisoformat(args.start), date.fromisoformat(args.end))
        if args.json:
            return _emit_json(history.to_dict())
        if isinstance(history, NoData):
            return _print_no_data(history)
        _header(f"Height History - lot {args.lot} ({history.start} to {history.end})")
        print(f"\nMean: {format_height(history.mean_cm)}")
        print(f"Min:  {format_height(history.min_cm)}")
        print(f"Max:  {format_height(history.max_cm)}")
        print(f"Records: {history.records}")
        return

    result = await get_lot_statistics(sources, args.lot, config, _as_of(args))
    if args.json:
        return _emit_json(result.to_dict())
    if isinstance(result, NoData):
        return _print_no_data(result)

    _header(f"Lot Statistics - {result.lot_name or result.lot_id}")
    print(f"\nLast visit:     {result.measured_on.isoformat()}")
    print(f"Current height: {format_height(result.current_cm)}")
    print(f"Remnant:        {format_height(result.remnant_cm)}")
    print(f"Area:           {format_area(result.area_ha)}")
    if result.band:
        print(f"Height band:    {result.band.value}")
    print()
    print(f"Indicator:  {_summary(result.indicator, lambda r: f'[{r.status.value}] margin {format_height(r.margin_cm)}')}")
    print(f"Velocity:   {_summary(result.velocity, lambda r: format_rate(r.velocity))}")
    print(f"Trend:      {_summary(result.trend, lambda r: f'{r.label}, {r.confidence}% confidence')}")
    print(f"Projection: {_summary(result.projection, lambda r: r.message)}")
    print(f"Stocking:   {_summary(result.stocking, lambda r: r.message)}")


async def cmd_correlate(args: argparse.Namespace, config: AnalyticsConfig) -> None:
    result = await correlate_lot(_sources(args), args.lot, config, _as_of(args))
    adjusted = None
    if isinstance(result, CorrelationModel) and result.projected_yield is not None and args.rainfall_mm is not None:
        adjusted = adjust_projected_yield(result.projected_yield, args.rainfall_mm)

    if args.json:
        payload = result.to_dict()
        if adjusted:
            payload["rainfall_adjustment"] = adjusted.to_dict()
        return _emit_json(payload)
    if isinstance(result, NoData):
        return _print_no_data(result)

    _header(f"Yield vs Vegetation Index - lot {args.lot}")
    print(f"\n{'Harvest':<12} {'Crop':<15} {'Mean index':>11} {'Yield':>10}")
    print("-" * 52)
    for pair in result.pairs:
        print(f"{pair.harvested_on.isoformat():<12} {(pair.crop or '-')[:15]:<15} {pair.mean_index:>11.3f} {pair.actual_yield:>10.0f}")
    print(f"\n{result.formula}")
    print(f"r = {result.r:.3f}, r² = {result.r_squared:.3f} ({result.strength.value})")
    if result.current_index is not None:
        print(f"Current index: {result.current_index:.3f}")
        print(f"Projected yield: {result.projected_yield}")
    if adjusted:
        print(f"Rainfall-adjusted yield: {adjusted.adjusted_yield} (x{adjusted.rainfall.factor:.2f})")
        print(f"  {adjusted.rainfall.description}")


async def cmd_rainfall(args: argparse.Namespace, config: AnalyticsConfig) -> None:
    premise = args.premise or settings.premise_id
    if not premise:
        print("Error: no premise given (use --premise or set PREMISE_ID)")
        sys.exit(2)

    result = await rainfall_summary(_sources(args), premise, _as_of(args))
    if args.json:
        return _emit_json(result.to_dict())
    if isinstance(result, NoData):
        return _print_no_data(result)

    _header(f"Rainfall - premise {premise} (as of {result.as_of.isoformat()})")
    print(f"\nLast 30 days:      {format_rainfall(result.last_30_days_mm)}")
    print(f"Season {result.season_name}: {format_rainfall(result.season_to_date_mm)}")
    print(f"Days without rain: {result.days_without_rain}")
    print(f"\nDeficit: [{result.deficit.severity.value}] {result.deficit.message}")
    print(f"Excess:  [{result.excess.severity.value}] {result.excess.message}")
    if isinstance(result.season, NoData):
        print(f"Season:  {result.season.reason}")
    else:
        print(f"Season:  {result.season.description}, {result.season.pct_of_mean}% of {result.seasons_compared}-season mean")

    if result.months:
        print(f"\n{'Month':<10} {'Total':>10} {'Records':>8}")
        print("-" * 30)
        for m in result.months:
            print(f"{m.year}-{m.month:02d}    {format_rainfall(m.total_mm):>10} {m.records:>8}")


COMMANDS = {
    "velocity": cmd_velocity,
    "project": cmd_project,
    "stocking": cmd_stocking,
    "compare": cmd_compare,
    "stats": cmd_stats,
    "correlate": cmd_correlate,
    "rainfall": cmd_rainfall,
}


# -----------------------------------------------------------------------------
# Main
# -----------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--json", action="store_true", help="Output as JSON")
    common.add_argument("--snapshot", metavar="FILE", help="Read from a JSON snapshot instead of the store")
    common.add_argument("--as-of", metavar="YYYY-MM-DD", help="End date of the analysis window")

    parser = argparse.ArgumentParser(
        prog="pasturewatch",
        description="Pasture and rainfall decision support",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pasturewatch velocity L1                     Growth rate over the last 30 days
  pasturewatch project L1 --remnant 6          Days until the 6 cm remnant
  pasturewatch stocking L1 --current-head 40   Headcount and adjustment advice
  pasturewatch compare --premise P1            Rank lots by forage on offer
  pasturewatch stats L1 --start 2026-01-01 --end 2026-03-31
  pasturewatch correlate L1 --rainfall-mm 520  NDVI-yield model, rainfall adjusted
  pasturewatch rainfall --premise P1 --json    Rainfall summary as JSON
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log fetches and skipped records")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    velocity_parser = subparsers.add_parser("velocity", parents=[common], help="Pasture growth velocity")
    velocity_parser.add_argument("lot", help="Lot ID")
    velocity_parser.add_argument("--days", type=_positive_int, help="Lookback window in days (default: 30)")

    project_parser = subparsers.add_parser("project", parents=[common], help="Days until remnant height")
    project_parser.add_argument("lot", help="Lot ID")
    project_parser.add_argument("--remnant", type=float, help="Remnant height in cm (default: lot target)")

    stocking_parser = subparsers.add_parser("stocking", parents=[common], help="Recommended stocking rate")
    stocking_parser.add_argument("lot", help="Lot ID")
    stocking_parser.add_argument("--remnant", type=float, help="Remnant height in cm")
    stocking_parser.add_argument("--area", type=float, help="Area in hectares (default: lot area)")
    stocking_parser.add_argument("--intake", type=float, help="Daily intake per animal, kg DM")
    stocking_parser.add_argument("--efficiency", type=float, help="Utilization efficiency, percent")
    stocking_parser.add_argument("--days", type=_positive_int, help="Target grazing days")
    stocking_parser.add_argument("--current-head", type=int, help="Animals currently on the lot")

    compare_parser = subparsers.add_parser("compare", parents=[common], help="Rank lots by forage on offer")
    compare_parser.add_argument("--premise", help="Premise ID (default: PREMISE_ID setting)")

    stats_parser = subparsers.add_parser("stats", parents=[common], help="Lot statistics or height history")
    stats_parser.add_argument("lot", help="Lot ID")
    stats_parser.add_argument("--start", metavar="YYYY-MM-DD", help="History start (with --end)")
    stats_parser.add_argument("--end", metavar="YYYY-MM-DD", help="History end (with --start)")

    correlate_parser = subparsers.add_parser("correlate", parents=[common], help="Vegetation index to yield model")
    correlate_parser.add_argument("lot", help="Lot ID")
    correlate_parser.add_argument("--rainfall-mm", type=float, help="Crop-cycle rainfall for yield adjustment")

    rainfall_parser = subparsers.add_parser("rainfall", parents=[common], help="Premise rainfall summary")
    rainfall_parser.add_argument("--premise", help="Premise ID (default: PREMISE_ID setting)")

    return parser


async def cli_main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "stats" and bool(args.start) != bool(args.end):
        parser.error("stats: --start and --end must be given together")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return

    config = AnalyticsConfig.from_settings()
    try:
        await command(args, config)
    except RepositoryError as e:
        print(f"Error: {e}")
        sys.exit(1)


def cli() -> None:
    """CLI entry point."""
    asyncio.run(cli_main())


if __name__ == "__main__":
    cli()
