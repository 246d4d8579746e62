"""Rainfall analytics for premises.

Pure calculations are in rainfall.py; the fetch-and-compute summary is in api.py.
"""

from pasturewatch.weather.api import RainfallSummary, rainfall_summary
from pasturewatch.weather.rainfall import (
    AdjustedYield,
    MonthlyRainfall,
    RainfallDeficit,
    RainfallExcess,
    RainfallYieldFactor,
    SeasonClass,
    SeasonClassification,
    SeasonRange,
    Severity,
    WaterBalance,
    accumulated_rainfall,
    adjust_projected_yield,
    classify_season,
    days_without_rain,
    detect_deficit,
    detect_excess,
    monthly_totals,
    rainfall_yield_factor,
    season_of,
    season_range,
    season_totals,
    water_balance,
)

__all__ = [
    "rainfall_summary",
    "RainfallSummary",
    # totals
    "accumulated_rainfall",
    "days_without_rain",
    "monthly_totals",
    "MonthlyRainfall",
    # deficit / excess
    "detect_deficit",
    "detect_excess",
    "RainfallDeficit",
    "RainfallExcess",
    "Severity",
    # seasons
    "season_range",
    "season_of",
    "season_totals",
    "classify_season",
    "SeasonRange",
    "SeasonClass",
    "SeasonClassification",
    # water balance
    "water_balance",
    "WaterBalance",
    # yield adjustment
    "rainfall_yield_factor",
    "adjust_projected_yield",
    "RainfallYieldFactor",
    "AdjustedYield",
]
