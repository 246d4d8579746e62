"""Core module - configuration, value objects, cache and store client."""

from pasturewatch.core import client, units
from pasturewatch.core.cache import CacheEntry, ResultCache, make_key
from pasturewatch.core.client import (
    RepositoryError,
    RetryableError,
    rest_get,
    rest_get_with_retry,
)
from pasturewatch.core.config import Settings, settings
from pasturewatch.core.models import (
    Lot,
    Measurement,
    NoData,
    Priority,
    RainfallRecord,
    VegetationSample,
    YieldEvent,
    is_no_data,
)
from pasturewatch.core.thresholds import AnalyticsConfig, PastureThresholds

__all__ = [
    "client",
    "units",
    "settings",
    "Settings",
    "rest_get",
    "rest_get_with_retry",
    "RepositoryError",
    "RetryableError",
    # Value objects
    "Measurement",
    "Lot",
    "VegetationSample",
    "YieldEvent",
    "RainfallRecord",
    "Priority",
    "NoData",
    "is_no_data",
    # Parameters
    "AnalyticsConfig",
    "PastureThresholds",
    # Cache
    "ResultCache",
    "CacheEntry",
    "make_key",
]
