"""Pasture and agronomic decision-support analytics.

This package turns sparse, periodically-sampled field measurements into
growth rates, depletion forecasts, stocking recommendations, lot rankings
and a vegetation-index to yield model.

Subpackages:
- pasturewatch.core: Configuration, value objects, thresholds, cache and store client
- pasturewatch.data: Collaborator protocols, hosted store and JSON snapshots
- pasturewatch.pasture: Height, velocity, trend, depletion, stocking and comparison
- pasturewatch.satellite: Vegetation index to yield correlation
- pasturewatch.weather: Rainfall analytics
"""

# Re-export common items for convenience
from pasturewatch.core import (
    AnalyticsConfig,
    NoData,
    PastureThresholds,
    settings,
)

__all__ = [
    "settings",
    "AnalyticsConfig",
    "PastureThresholds",
    "NoData",
]

__version__ = "0.1.0"
