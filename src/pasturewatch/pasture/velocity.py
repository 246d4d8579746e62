"""
Growth velocity of pasture height from periodic field measurements.

Velocity is the unweighted mean of the rates between consecutive visits,
not the slope between the first and last visit. Irregular sampling gaps are
common (a missed week, two visits close together) and averaging per-pair
rates keeps a single odd gap from dominating while still reflecting the
whole window. Downstream thresholds (trend bands, depletion tiers) are tuned
against this estimator.

Example:
    Visits on day 0 / 10 / 30 at 20 / 15 / 0 cm give pair rates of
    -0.5 and -0.75 cm/day, so velocity = -0.625 (the endpoint slope would
    be -0.667).
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import ClassVar

from pasturewatch.core.models import Measurement, NoData, Result
from pasturewatch.pasture.height import resolve_height
from pasturewatch.pasture.trend import Trend, classify_trend, describe_trend

DEFAULT_WINDOW_DAYS = 30


@dataclass(frozen=True)
class PairRate:
    """Rate of height change between two consecutive visits."""

    start: date
    end: date
    days: int
    delta_cm: float
    rate: float


@dataclass(frozen=True)
class VelocityResult(Result):
    """Growth velocity over a lookback window."""

    kind: ClassVar[str] = "velocity"

    velocity: float  # cm/day, rounded to 2 decimals
    trend: Trend
    label: str
    records_seen: int
    pairs_used: int
    min_rate: float
    max_rate: float
    pairs: tuple[PairRate, ...]

    @property
    def status(self) -> str:
        return self.trend.value


def within_window(
    measurements: list[Measurement],
    lookback_days: int,
    as_of: date | None = None,
) -> list[Measurement]:
    """Measurements dated within `lookback_days` before `as_of`.

    Without `as_of` the window ends at the most recent measurement.
    """
    if not measurements:
        return []
    end = as_of or max(m.measured_on for m in measurements)
    start = end - timedelta(days=lookback_days)
    return [m for m in measurements if start <= m.measured_on <= end]


def estimate_velocity(
    measurements: list[Measurement],
    lookback_days: int = DEFAULT_WINDOW_DAYS,
    as_of: date | None = None,
) -> VelocityResult | NoData:
    """
    Estimate growth velocity (cm/day) for one lot.

    Args:
        measurements: Visits for a single lot, in any order
        lookback_days: Window length in days
        as_of: End of the window (default: most recent visit)

    Returns:
        VelocityResult, or NoData when fewer than two visits have a
        resolvable height or no pair spans a positive number of days
    """
    window = within_window(measurements, lookback_days, as_of)
    records_seen = len(window)

    heights = [(m.measured_on, resolve_height(m)) for m in window]
    usable = sorted(((d, h) for d, h in heights if h is not None), key=lambda x: x[0])

    if len(usable) < 2:
        return NoData(
            "At least 2 measurements are needed to calculate velocity",
            records_seen=records_seen,
        )

    pairs: list[PairRate] = []
    for (prev_date, prev_height), (curr_date, curr_height) in zip(usable, usable[1:]):
        days = (curr_date - prev_date).days
        # Same-day duplicates carry no rate information
        if days <= 0:
            continue
        delta = curr_height - prev_height
        pairs.append(
            PairRate(start=prev_date, end=curr_date, days=days, delta_cm=delta, rate=delta / days)
        )

    if not pairs:
        return NoData(
            "Could not compute velocity from the available measurements",
            records_seen=records_seen,
        )

    rates = [p.rate for p in pairs]
    mean_rate = sum(rates) / len(rates)
    trend = classify_trend(mean_rate)

    return VelocityResult(
        velocity=round(mean_rate, 2),
        trend=trend,
        label=describe_trend(trend, mean_rate),
        records_seen=records_seen,
        pairs_used=len(pairs),
        min_rate=min(rates),
        max_rate=max(rates),
        pairs=tuple(pairs),
    )
