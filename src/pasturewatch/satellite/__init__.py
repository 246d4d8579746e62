"""Satellite vegetation index analytics - NDVI to yield correlation."""

from pasturewatch.satellite.api import correlate_lot
from pasturewatch.satellite.yield_model import (
    CorrelationModel,
    CorrelationStrength,
    YieldIndexPair,
    correlate_yield,
    correlation_strength,
    pair_yields_with_index,
)

__all__ = [
    "correlate_lot",
    "correlate_yield",
    "pair_yields_with_index",
    "correlation_strength",
    "CorrelationModel",
    "CorrelationStrength",
    "YieldIndexPair",
]
