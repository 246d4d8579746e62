"""
Vegetation index to harvest yield regression.

Pairs each historical harvest with the mean vegetation index (NDVI) over a
pre-harvest window, fits ordinary least squares

    yield = slope * index + intercept

and projects the expected yield of the current crop from the latest index
reading.

The window defaults to 60-30 days before harvest: late enough that the
canopy reflects the crop, early enough to be before senescence drags NDVI
down.

IMPORTANT: With a handful of harvests per lot this is a rough local
calibration. Treat the strength label as a guide to how much weight the
projection deserves.
"""

import math
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import ClassVar

from pasturewatch.core.models import NoData, Result, VegetationSample, YieldEvent

WINDOW_START_DAYS = 60
WINDOW_END_DAYS = 30

# r² cutoffs for the strength label
STRONG_ABOVE = 0.7
MODERATE_ABOVE = 0.4


class CorrelationStrength(Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


@dataclass(frozen=True)
class YieldIndexPair:
    """A harvest with its pre-harvest mean index."""

    harvested_on: date
    crop: str | None
    mean_index: float
    actual_yield: float


@dataclass(frozen=True)
class CorrelationModel(Result):
    """Fitted index-to-yield model and its projection."""

    kind: ClassVar[str] = "correlation"

    samples: int
    r: float
    r_squared: float
    slope: float
    intercept: float
    strength: CorrelationStrength
    formula: str
    current_index: float | None
    projected_yield: int | None
    pairs: tuple[YieldIndexPair, ...]

    @property
    def status(self) -> str:
        return self.strength.value

    def predict(self, index: float) -> float:
        return self.slope * index + self.intercept


def pair_yields_with_index(
    samples: list[VegetationSample],
    yields: list[YieldEvent],
    window_start_days: int = WINDOW_START_DAYS,
    window_end_days: int = WINDOW_END_DAYS,
) -> list[YieldIndexPair]:
    """Match each harvest with the mean index over its pre-harvest window.

    Harvests with no index samples inside the window are skipped.
    """
    pairs = []
    for event in sorted(yields, key=lambda y: y.harvested_on):
        start = event.harvested_on - timedelta(days=window_start_days)
        end = event.harvested_on - timedelta(days=window_end_days)
        window = [s.value for s in samples if start <= s.sampled_on <= end]
        if not window:
            continue
        pairs.append(
            YieldIndexPair(
                harvested_on=event.harvested_on,
                crop=event.crop,
                mean_index=sum(window) / len(window),
                actual_yield=event.actual_yield,
            )
        )
    return pairs


def correlation_strength(r_squared: float) -> CorrelationStrength:
    if r_squared > STRONG_ABOVE:
        return CorrelationStrength.STRONG
    elif r_squared > MODERATE_ABOVE:
        return CorrelationStrength.MODERATE
    else:
        return CorrelationStrength.WEAK


def fit_linear(xs: list[float], ys: list[float]) -> tuple[float, float, float] | None:
    """OLS fit returning (slope, intercept, r), or None if x has no variance.

    When y has no variance the fit is a flat line and r is reported as 0.
    """
    n = len(xs)
    mean_x = sum(xs) / n
    mean_y = sum(ys) / n

    sxx = sum((x - mean_x) ** 2 for x in xs)
    syy = sum((y - mean_y) ** 2 for y in ys)
    sxy = sum((x - mean_x) * (y - mean_y) for x, y in zip(xs, ys))

    if sxx == 0:
        return None

    slope = sxy / sxx
    intercept = mean_y - slope * mean_x
    r = sxy / math.sqrt(sxx * syy) if syy > 0 else 0.0
    return slope, intercept, r


def correlate_yield(
    samples: list[VegetationSample],
    yields: list[YieldEvent],
    window_start_days: int = WINDOW_START_DAYS,
    window_end_days: int = WINDOW_END_DAYS,
) -> CorrelationModel | NoData:
    """
    Fit index-to-yield regression for a lot and project the current yield.

    Args:
        samples: Vegetation index history (any order)
        yields: Realized harvests with actual yield
        window_start_days: Start of the pre-harvest window (days before harvest)
        window_end_days: End of the pre-harvest window (days before harvest)

    Returns:
        CorrelationModel, or NoData with fewer than 2 pairs or constant index
    """
    if not yields:
        return NoData("No historical harvest data to correlate")

    pairs = pair_yields_with_index(samples, yields, window_start_days, window_end_days)
    if len(pairs) < 2:
        return NoData(
            "Insufficient data for correlation (need at least 2 harvests with index readings)",
            records_seen=len(pairs),
        )

    xs = [p.mean_index for p in pairs]
    ys = [p.actual_yield for p in pairs]
    fit = fit_linear(xs, ys)
    if fit is None:
        return NoData("Vegetation index shows no variation across harvests", records_seen=len(pairs))

    slope, intercept, r = fit
    r_squared = r**2

    latest = max(samples, key=lambda s: s.sampled_on) if samples else None
    current_index = latest.value if latest else None
    projected = round(slope * current_index + intercept) if current_index is not None else None

    return CorrelationModel(
        samples=len(pairs),
        r=r,
        r_squared=r_squared,
        slope=slope,
        intercept=intercept,
        strength=correlation_strength(r_squared),
        formula=f"Yield = {slope:.2f} × index + {intercept:.2f}",
        current_index=current_index,
        projected_yield=projected,
        pairs=tuple(pairs),
    )
