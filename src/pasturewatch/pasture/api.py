"""Fetch-and-compute entry points for pasture analytics.

Each function reads a snapshot through the collaborators in `Sources` and
hands it to the pure functions in this package. Transport errors surface as
`RepositoryError`, except in `compare_lots` which skips the failing lot.
"""

import logging
import time
from dataclasses import dataclass
from datetime import date, timedelta
from typing import ClassVar

from pasturewatch.core.cache import ResultCache, make_key
from pasturewatch.core.client import RepositoryError
from pasturewatch.core.models import Lot, Measurement, NoData, Result
from pasturewatch.core.thresholds import AnalyticsConfig
from pasturewatch.data.sources import Sources
from pasturewatch.pasture.comparison import (
    LotRanking,
    LotSnapshot,
    latest_measurement,
    rank_lots,
    resolve_area,
    resolve_remnant,
)
from pasturewatch.pasture.depletion import ProjectionResult, project_depletion
from pasturewatch.pasture.height import HeightBand, HeightIndicator, classify_height, height_status, resolve_height
from pasturewatch.pasture.history import HeightHistory, summarize_heights
from pasturewatch.pasture.stocking import StockingRecommendation, recommend_stocking
from pasturewatch.pasture.trend import TrendAssessment, assess_trend
from pasturewatch.pasture.velocity import VelocityResult, estimate_velocity

logger = logging.getLogger(__name__)


async def _latest(
    sources: Sources, lot_id: str, lookback_days: int, as_of: date | None
) -> tuple[list[Measurement], Measurement | None]:
    measurements = await sources.measurements.fetch(lot_id, lookback_days, as_of)
    return measurements, latest_measurement(measurements)


async def velocity_for_lot(
    sources: Sources,
    lot_id: str,
    config: AnalyticsConfig | None = None,
    as_of: date | None = None,
) -> VelocityResult | NoData:
    """Growth velocity over the configured window."""
    config = config or AnalyticsConfig()
    measurements = await sources.measurements.fetch(lot_id, config.velocity_window_days, as_of)
    return estimate_velocity(measurements, config.velocity_window_days, as_of)


async def trend_for_lot(
    sources: Sources,
    lot_id: str,
    config: AnalyticsConfig | None = None,
    as_of: date | None = None,
) -> TrendAssessment | NoData:
    velocity = await velocity_for_lot(sources, lot_id, config, as_of)
    return assess_trend(velocity)


async def project_lot(
    sources: Sources,
    lot_id: str,
    config: AnalyticsConfig | None = None,
    remnant_cm: float | None = None,
    as_of: date | None = None,
) -> ProjectionResult | NoData:
    """
    Days until a lot reaches its remnant.

    Reads the projection window (60 days by default) for the latest visit and
    estimates velocity over the shorter velocity window ending at that visit.
    """
    config = config or AnalyticsConfig()
    measurements, latest = await _latest(sources, lot_id, config.projection_window_days, as_of)
    if latest is None:
        return NoData("No pasture measurements for this lot", records_seen=len(measurements))

    velocity = estimate_velocity(measurements, config.velocity_window_days, latest.measured_on)
    return project_depletion(
        resolve_height(latest),
        resolve_remnant(latest, config, remnant_cm),
        velocity,
        as_of=latest.measured_on,
    )


async def stocking_for_lot(
    sources: Sources,
    lot_id: str,
    config: AnalyticsConfig | None = None,
    remnant_cm: float | None = None,
    area_ha: float | None = None,
    daily_intake_kg: float | None = None,
    efficiency_pct: float | None = None,
    target_days: int | None = None,
    as_of: date | None = None,
) -> StockingRecommendation | NoData:
    """Recommended headcount from the latest visit.

    Area precedence: explicit argument, then the visit's override, then the
    lot record.
    """
    config = config or AnalyticsConfig()
    measurements, latest = await _latest(sources, lot_id, config.projection_window_days, as_of)
    if latest is None:
        return NoData("No pasture measurements for this lot", records_seen=len(measurements))

    if area_ha is None:
        lot = None if latest.area_ha else await sources.lots.get(lot_id)
        area_ha = resolve_area(latest, lot)

    return recommend_stocking(
        resolve_height(latest),
        resolve_remnant(latest, config, remnant_cm),
        area_ha,
        config,
        daily_intake_kg=daily_intake_kg,
        efficiency_pct=efficiency_pct,
        target_days=target_days,
    )


async def compare_lots(
    sources: Sources,
    premise_id: str | None = None,
    config: AnalyticsConfig | None = None,
    as_of: date | None = None,
    cache: ResultCache | None = None,
    now: float | None = None,
) -> list[LotRanking]:
    """
    Rank every lot of a premise by forage on offer.

    Lots are fetched one at a time. A lot whose fetch fails is logged and left
    out; the remaining lots are still ranked.

    Args:
        sources: Data collaborators
        premise_id: Restrict to one premise (None = all lots)
        config: Analytics parameters
        as_of: End of the comparison window (default: latest visit per lot)
        cache: Optional caller-owned cache, keyed by as_of, premise and config
        now: Clock reading for the cache (default: time.monotonic())
    """
    config = config or AnalyticsConfig()
    key = make_key("compare", as_of, premise_id=premise_id, config=config)
    if cache is not None:
        now = time.monotonic() if now is None else now
        cached = cache.get(key, now)
        if cached is not None:
            return list(cached)

    lots = await sources.lots.list(premise_id)
    snapshots = []
    for lot in lots:
        try:
            measurements = await sources.measurements.fetch(lot.id, config.comparison_window_days, as_of)
        except RepositoryError as e:
            logger.warning("Skipping lot %s (%s): %s", lot.name, lot.id, e)
            continue
        snapshots.append(LotSnapshot(lot=lot, measurements=tuple(measurements)))

    rankings = rank_lots(snapshots, config)
    if cache is not None:
        cache.put(key, tuple(rankings), now)
    return rankings


async def height_history(
    sources: Sources,
    lot_id: str,
    start: date,
    end: date,
) -> HeightHistory | NoData:
    if end < start:
        raise ValueError("end must not be before start")
    measurements = await sources.measurements.fetch(lot_id, (end - start).days, end)
    return summarize_heights(measurements, start, end)


# =============================================================================
# Lot statistics bundle
# =============================================================================


@dataclass(frozen=True)
class LotStatistics(Result):
    """Everything the lot dashboard shows, computed from one fetch."""

    kind: ClassVar[str] = "lot_statistics"

    lot_id: str
    lot_name: str | None
    measured_on: date
    current_cm: float | None
    remnant_cm: float
    area_ha: float | None
    records: int
    indicator: HeightIndicator | NoData
    band: HeightBand | None
    velocity: VelocityResult | NoData
    trend: TrendAssessment | NoData
    projection: ProjectionResult | NoData
    stocking: StockingRecommendation | NoData

    @property
    def status(self) -> str:
        return self.indicator.status.value if isinstance(self.indicator, HeightIndicator) else "no_data"


async def get_lot_statistics(
    sources: Sources,
    lot_id: str,
    config: AnalyticsConfig | None = None,
    as_of: date | None = None,
) -> LotStatistics | NoData:
    """Latest visit, indicator, velocity, trend, projection and stocking for one lot."""
    config = config or AnalyticsConfig()
    lot: Lot | None = await sources.lots.get(lot_id)
    measurements, latest = await _latest(sources, lot_id, config.projection_window_days, as_of)
    if latest is None:
        return NoData("No pasture measurements for this lot", records_seen=len(measurements))

    current = resolve_height(latest)
    remnant = resolve_remnant(latest, config)
    area = resolve_area(latest, lot)
    velocity = estimate_velocity(measurements, config.velocity_window_days, latest.measured_on)
    window_start = latest.measured_on - timedelta(days=config.velocity_window_days)

    return LotStatistics(
        lot_id=lot_id,
        lot_name=lot.name if lot else None,
        measured_on=latest.measured_on,
        current_cm=current,
        remnant_cm=remnant,
        area_ha=area,
        records=sum(1 for m in measurements if m.measured_on >= window_start),
        indicator=height_status(current, remnant),
        band=classify_height(current, config.thresholds) if current is not None else None,
        velocity=velocity,
        trend=assess_trend(velocity),
        projection=project_depletion(current, remnant, velocity, as_of=latest.measured_on),
        stocking=recommend_stocking(current, remnant, area, config),
    )
