"""Data collaborators - protocols, hosted store and JSON snapshots."""

from pasturewatch.data.snapshot import SnapshotStore
from pasturewatch.data.sources import (
    LotRegistry,
    MeasurementRepository,
    RainfallSource,
    Sources,
    VegetationIndexSource,
    YieldSource,
)
from pasturewatch.data.store import (
    StoreLots,
    StoreMeasurements,
    StoreRainfall,
    StoreVegetationIndex,
    StoreYields,
    store_sources,
)

__all__ = [
    "Sources",
    "MeasurementRepository",
    "LotRegistry",
    "VegetationIndexSource",
    "YieldSource",
    "RainfallSource",
    "store_sources",
    "StoreMeasurements",
    "StoreLots",
    "StoreVegetationIndex",
    "StoreYields",
    "StoreRainfall",
    "SnapshotStore",
]
