"""
Rainfall analytics for a premise.

Works on rain gauge records (date, mm). Covers:
- Accumulated totals, monthly distribution and dry-spell length
- Deficit and excess detection over a trailing window
- Production seasons (1 July - 30 June) and classification against the
  historical mean
- A simple water balance against evapotranspiration
- The rainfall adjustment factor applied to projected crop yield

Thresholds are agronomic rules of thumb for temperate grain and pasture
systems (50 mm per month minimum, 150 mm in a week as waterlogging risk,
800 mm per crop cycle optimal).
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import ClassVar

from pasturewatch.core.models import NoData, Priority, RainfallRecord, Result

# =============================================================================
# Defaults
# =============================================================================

DEFICIT_WINDOW_DAYS = 30
DEFICIT_THRESHOLD_MM = 50.0
EXCESS_WINDOW_DAYS = 7
EXCESS_THRESHOLD_MM = 150.0
SIGNIFICANT_RAIN_MM = 1.0

OPTIMAL_CYCLE_MM = 800.0
MINIMUM_CYCLE_MM = 400.0

SEASON_START_MONTH = 7  # July


class Severity(Enum):
    NONE = "none"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


# =============================================================================
# Totals
# =============================================================================


def accumulated_rainfall(records: list[RainfallRecord]) -> float:
    """Total mm over the records."""
    return sum(r.mm for r in records if r.mm)


def in_period(records: list[RainfallRecord], start: date, end: date) -> list[RainfallRecord]:
    return [r for r in records if start <= r.recorded_on <= end]


def days_without_rain(
    records: list[RainfallRecord],
    as_of: date | None = None,
    min_mm: float = SIGNIFICANT_RAIN_MM,
) -> int:
    """Days since the last reading of at least min_mm.

    With no significant rain on record, counts from the earliest reading.
    """
    if not records:
        return 0
    as_of = as_of or date.today()
    wet = [r.recorded_on for r in records if r.mm >= min_mm]
    since = max(wet) if wet else min(r.recorded_on for r in records)
    return (as_of - since).days


@dataclass(frozen=True)
class MonthlyRainfall:
    year: int
    month: int
    total_mm: float
    records: int

    @property
    def daily_mean_mm(self) -> float:
        return round(self.total_mm / self.records, 1) if self.records else 0.0


def monthly_totals(records: list[RainfallRecord]) -> list[MonthlyRainfall]:
    """Rainfall grouped by calendar month, oldest first."""
    totals: dict[tuple[int, int], list[float]] = defaultdict(list)
    for r in records:
        totals[(r.recorded_on.year, r.recorded_on.month)].append(r.mm)
    return [
        MonthlyRainfall(year=year, month=month, total_mm=round(sum(values), 1), records=len(values))
        for (year, month), values in sorted(totals.items())
    ]


# =============================================================================
# Deficit and excess
# =============================================================================


@dataclass(frozen=True)
class RainfallDeficit(Result):
    """Rain over the trailing window against a minimum expected amount."""

    kind: ClassVar[str] = "rainfall_deficit"

    accumulated_mm: float
    threshold_mm: float
    window_days: int
    pct_of_threshold: int
    severity: Severity
    message: str

    @property
    def in_deficit(self) -> bool:
        return self.accumulated_mm < self.threshold_mm

    @property
    def status(self) -> str:
        return self.severity.value


@dataclass(frozen=True)
class RainfallExcess(Result):
    """Rain over the trailing window against a waterlogging threshold."""

    kind: ClassVar[str] = "rainfall_excess"

    accumulated_mm: float
    threshold_mm: float
    window_days: int
    pct_over_threshold: int
    severity: Severity
    message: str

    @property
    def in_excess(self) -> bool:
        return self.accumulated_mm > self.threshold_mm

    @property
    def status(self) -> str:
        return self.severity.value


def _trailing(records: list[RainfallRecord], window_days: int, as_of: date | None) -> list[RainfallRecord]:
    end = as_of or date.today()
    return in_period(records, end - timedelta(days=window_days), end)


def detect_deficit(
    records: list[RainfallRecord],
    window_days: int = DEFICIT_WINDOW_DAYS,
    threshold_mm: float = DEFICIT_THRESHOLD_MM,
    as_of: date | None = None,
) -> RainfallDeficit:
    """
    Classify rainfall shortfall over the last window_days.

    Severity by share of the threshold received: >= 100 % none, >= 70 % mild,
    >= 40 % moderate, otherwise severe.
    """
    if threshold_mm <= 0:
        raise ValueError("threshold_mm must be positive")

    total = accumulated_rainfall(_trailing(records, window_days, as_of))
    pct = total / threshold_mm * 100
    shortfall = round(threshold_mm - total)

    if pct >= 100:
        severity = Severity.NONE
        message = "No water deficit"
    elif pct >= 70:
        severity = Severity.MILD
        message = f"Mild deficit: {shortfall}mm below threshold"
    elif pct >= 40:
        severity = Severity.MODERATE
        message = f"Moderate deficit: {shortfall}mm below threshold"
    else:
        severity = Severity.SEVERE
        message = f"Severe deficit: {shortfall}mm below threshold"

    return RainfallDeficit(
        accumulated_mm=round(total, 1),
        threshold_mm=threshold_mm,
        window_days=window_days,
        pct_of_threshold=round(pct),
        severity=severity,
        message=message,
    )


def detect_excess(
    records: list[RainfallRecord],
    window_days: int = EXCESS_WINDOW_DAYS,
    threshold_mm: float = EXCESS_THRESHOLD_MM,
    as_of: date | None = None,
) -> RainfallExcess:
    """
    Classify excess rain over the last window_days.

    Not above the threshold is none; excess <= 20 % mild, <= 50 % moderate,
    otherwise severe (waterlogging risk).
    """
    if threshold_mm <= 0:
        raise ValueError("threshold_mm must be positive")

    total = accumulated_rainfall(_trailing(records, window_days, as_of))
    over_pct = total / threshold_mm * 100 - 100
    excess = round(total - threshold_mm)

    if total <= threshold_mm:
        severity = Severity.NONE
        message = "No excess rainfall"
    elif over_pct <= 20:
        severity = Severity.MILD
        message = f"Mild excess: {excess}mm above threshold"
    elif over_pct <= 50:
        severity = Severity.MODERATE
        message = f"Moderate excess: {excess}mm above threshold"
    else:
        severity = Severity.SEVERE
        message = f"Severe excess: {excess}mm above threshold. Waterlogging risk"

    return RainfallExcess(
        accumulated_mm=round(total, 1),
        threshold_mm=threshold_mm,
        window_days=window_days,
        pct_over_threshold=round(over_pct),
        severity=severity,
        message=message,
    )


# =============================================================================
# Production seasons
# =============================================================================


@dataclass(frozen=True)
class SeasonRange:
    """A production season, 1 July to 30 June."""

    start_year: int
    start: date
    end: date

    @property
    def name(self) -> str:
        return f"{self.start_year}/{self.start_year + 1}"

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def season_range(start_year: int) -> SeasonRange:
    return SeasonRange(
        start_year=start_year,
        start=date(start_year, SEASON_START_MONTH, 1),
        end=date(start_year + 1, SEASON_START_MONTH, 1) - timedelta(days=1),
    )


def season_of(day: date) -> SeasonRange:
    """The season a date falls in (July-December starts a new one)."""
    start_year = day.year if day.month >= SEASON_START_MONTH else day.year - 1
    return season_range(start_year)


class SeasonClass(Enum):
    WET = "wet"
    NORMAL = "normal"
    DRY = "dry"
    VERY_DRY = "very_dry"


SEASON_DESCRIPTIONS = {
    SeasonClass.WET: "Wet season (>110% of mean)",
    SeasonClass.NORMAL: "Normal season (90-110% of mean)",
    SeasonClass.DRY: "Dry season (70-90% of mean)",
    SeasonClass.VERY_DRY: "Very dry season (<70% of mean)",
}


@dataclass(frozen=True)
class SeasonClassification(Result):
    kind: ClassVar[str] = "season_classification"

    total_mm: float
    historical_mean_mm: float
    pct_of_mean: int
    classification: SeasonClass
    description: str

    @property
    def status(self) -> str:
        return self.classification.value


def classify_season(total_mm: float | None, historical_mean_mm: float | None) -> SeasonClassification | NoData:
    """Season total against the historical mean: >= 110 % wet, >= 90 % normal, >= 70 % dry."""
    if not total_mm or not historical_mean_mm:
        return NoData("Not enough data to classify the season")

    pct = total_mm / historical_mean_mm * 100
    if pct >= 110:
        classification = SeasonClass.WET
    elif pct >= 90:
        classification = SeasonClass.NORMAL
    elif pct >= 70:
        classification = SeasonClass.DRY
    else:
        classification = SeasonClass.VERY_DRY

    return SeasonClassification(
        total_mm=round(total_mm, 1),
        historical_mean_mm=round(historical_mean_mm, 1),
        pct_of_mean=round(pct),
        classification=classification,
        description=SEASON_DESCRIPTIONS[classification],
    )


def season_totals(records: list[RainfallRecord]) -> dict[int, float]:
    """Total rainfall per season, keyed by start year."""
    totals: dict[int, float] = defaultdict(float)
    for r in records:
        totals[season_of(r.recorded_on).start_year] += r.mm
    return {year: round(total, 1) for year, total in sorted(totals.items())}


# =============================================================================
# Water balance
# =============================================================================


class WaterBalanceClass(Enum):
    EXCESS = "excess"
    BALANCED = "balanced"
    MILD_DEFICIT = "mild_deficit"
    SEVERE_DEFICIT = "severe_deficit"


@dataclass(frozen=True)
class WaterBalance(Result):
    kind: ClassVar[str] = "water_balance"

    rainfall_mm: float
    evapotranspiration_mm: float
    balance_mm: float
    classification: WaterBalanceClass

    @property
    def status(self) -> str:
        return self.classification.value


def water_balance(rainfall_mm: float, et_mm_per_day: float = 5.0, days: int = 30) -> WaterBalance:
    """Rainfall minus a flat daily evapotranspiration over the period."""
    et_total = et_mm_per_day * days
    balance = rainfall_mm - et_total

    if balance > 50:
        classification = WaterBalanceClass.EXCESS
    elif balance >= -20:
        classification = WaterBalanceClass.BALANCED
    elif balance >= -50:
        classification = WaterBalanceClass.MILD_DEFICIT
    else:
        classification = WaterBalanceClass.SEVERE_DEFICIT

    return WaterBalance(
        rainfall_mm=round(rainfall_mm, 1),
        evapotranspiration_mm=round(et_total, 1),
        balance_mm=round(balance, 1),
        classification=classification,
    )


# =============================================================================
# Yield adjustment
# =============================================================================


@dataclass(frozen=True)
class RainfallYieldFactor(Result):
    """Multiplier on projected yield from rainfall over the crop cycle."""

    kind: ClassVar[str] = "rainfall_yield_factor"

    total_mm: float
    factor: float
    priority: Priority
    description: str

    @property
    def requires_attention(self) -> bool:
        return self.factor < 0.8

    @property
    def status(self) -> str:
        return self.priority.value


def rainfall_yield_factor(
    total_mm: float,
    optimal_mm: float = OPTIMAL_CYCLE_MM,
    minimum_mm: float = MINIMUM_CYCLE_MM,
) -> RainfallYieldFactor:
    """
    Yield multiplier for the rain a crop received over its cycle.

    - Below minimum: 0.5 + total / minimum * 0.2 (severe deficit)
    - Below 80 % of optimal: 0.8 + total / optimal * 0.2 (moderate deficit)
    - Above 130 % of optimal: 0.9 (waterlogging)
    - Otherwise 1.0
    """
    if total_mm < minimum_mm:
        factor = 0.5 + total_mm / minimum_mm * 0.2
        priority = Priority.HIGH
        description = f"Severe water deficit ({total_mm:.0f}mm vs {optimal_mm:.0f}mm optimal)"
    elif total_mm < optimal_mm * 0.8:
        factor = 0.8 + total_mm / optimal_mm * 0.2
        priority = Priority.MEDIUM
        description = f"Moderate water deficit ({total_mm:.0f}mm vs {optimal_mm:.0f}mm optimal)"
    elif total_mm > optimal_mm * 1.3:
        factor = 0.9
        priority = Priority.MEDIUM
        description = f"Excess rainfall ({total_mm:.0f}mm vs {optimal_mm:.0f}mm optimal). Waterlogging risk"
    else:
        factor = 1.0
        priority = Priority.LOW
        description = f"Adequate rainfall ({total_mm:.0f}mm)"

    return RainfallYieldFactor(total_mm=total_mm, factor=factor, priority=priority, description=description)


@dataclass(frozen=True)
class AdjustedYield(Result):
    kind: ClassVar[str] = "adjusted_yield"

    original_yield: float
    adjusted_yield: int
    rainfall: RainfallYieldFactor

    @property
    def status(self) -> str:
        return self.rainfall.status


def adjust_projected_yield(
    projected_yield: float,
    total_mm: float,
    optimal_mm: float = OPTIMAL_CYCLE_MM,
    minimum_mm: float = MINIMUM_CYCLE_MM,
) -> AdjustedYield:
    """Scale a projected yield by the rainfall factor (rounded to an integer)."""
    rainfall = rainfall_yield_factor(total_mm, optimal_mm, minimum_mm)
    return AdjustedYield(
        original_yield=projected_yield,
        adjusted_yield=round(projected_yield * rainfall.factor),
        rainfall=rainfall,
    )
