"""
Rank lots by forage on offer.

A coarse, at-a-glance view for deciding where to move animals next: each lot
is scored from its latest visit only and sorted by forage mass. The margin
status here is deliberately simpler than the depletion projection.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import ClassVar

from pasturewatch.core.models import Lot, Measurement, Result
from pasturewatch.core.thresholds import AnalyticsConfig
from pasturewatch.pasture.height import resolve_height
from pasturewatch.pasture.stocking import StockingRecommendation, forage_mass, recommend_stocking
from pasturewatch.pasture.trend import Trend
from pasturewatch.pasture.velocity import VelocityResult, estimate_velocity

logger = logging.getLogger(__name__)

# Margin above remnant (cm) for each band
LOW_MARGIN_CM = 3.0
MODERATE_MARGIN_CM = 7.0


class MarginStatus(Enum):
    CRITICAL = "critical"
    LOW = "low"
    MODERATE = "moderate"
    GOOD = "good"


def margin_status(current_cm: float, remnant_cm: float) -> MarginStatus:
    if current_cm <= remnant_cm:
        return MarginStatus.CRITICAL
    elif current_cm <= remnant_cm + LOW_MARGIN_CM:
        return MarginStatus.LOW
    elif current_cm <= remnant_cm + MODERATE_MARGIN_CM:
        return MarginStatus.MODERATE
    else:
        return MarginStatus.GOOD


@dataclass(frozen=True)
class LotSnapshot:
    """A lot together with its recent measurements (any order)."""

    lot: Lot
    measurements: tuple[Measurement, ...]


@dataclass(frozen=True)
class LotRanking(Result):
    """One row of the lot comparison."""

    kind: ClassVar[str] = "lot_ranking"

    lot_id: str
    lot_name: str
    current_cm: float
    remnant_cm: float
    available_cm: float
    forage_kg: float
    area_ha: float
    measured_on: date
    status: MarginStatus
    recommended_head: int | None = None
    trend: Trend | None = None
    velocity: float | None = None


def latest_measurement(measurements: list[Measurement] | tuple[Measurement, ...]) -> Measurement | None:
    """Most recent visit with a resolvable height."""
    usable = [m for m in measurements if resolve_height(m) is not None]
    if not usable:
        return None
    return max(usable, key=lambda m: m.measured_on)


def resolve_area(measurement: Measurement, lot: Lot | None) -> float | None:
    """Area for stocking math: the measurement's override, else the lot's."""
    if measurement.area_ha:
        return measurement.area_ha
    if lot is not None and lot.area_ha:
        return lot.area_ha
    return None


def resolve_remnant(
    measurement: Measurement,
    config: AnalyticsConfig,
    override_cm: float | None = None,
) -> float:
    """Remnant for a lot: explicit override, else the visit's target, else the critical threshold."""
    if override_cm is not None:
        return override_cm
    if measurement.remnant_cm:
        return measurement.remnant_cm
    return config.thresholds.critical_cm


def rank_lot(snapshot: LotSnapshot, config: AnalyticsConfig) -> LotRanking | None:
    """Score a single lot; None when it lacks a height or area."""
    lot = snapshot.lot
    latest = latest_measurement(snapshot.measurements)
    if latest is None:
        logger.debug("Lot %s has no usable measurements", lot.name)
        return None

    current = resolve_height(latest)
    remnant = resolve_remnant(latest, config)
    area = resolve_area(latest, lot)
    if area is None:
        logger.debug("Lot %s has no area", lot.name)
        return None

    available = max(0.0, current - remnant)
    stocking = recommend_stocking(current, remnant, area, config)
    velocity = estimate_velocity(list(snapshot.measurements), config.comparison_window_days)

    return LotRanking(
        lot_id=lot.id,
        lot_name=lot.name,
        current_cm=current,
        remnant_cm=remnant,
        available_cm=available,
        forage_kg=round(forage_mass(available, area, config.forage_kg_per_cm_ha), 1),
        area_ha=area,
        measured_on=latest.measured_on,
        status=margin_status(current, remnant),
        recommended_head=stocking.recommended_head if isinstance(stocking, StockingRecommendation) else None,
        trend=velocity.trend if isinstance(velocity, VelocityResult) else None,
        velocity=velocity.velocity if isinstance(velocity, VelocityResult) else None,
    )


def rank_lots(snapshots: list[LotSnapshot], config: AnalyticsConfig | None = None) -> list[LotRanking]:
    """
    Rank lots by forage mass, highest first.

    Each lot is scored independently; lots without a usable height or area
    are left out. Ties keep their input order.
    """
    config = config or AnalyticsConfig()
    rankings = [r for r in (rank_lot(s, config) for s in snapshots) if r is not None]
    rankings.sort(key=lambda r: r.forage_kg, reverse=True)
    return rankings
