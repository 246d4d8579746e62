"""Collaborator interfaces the analytics fetch snapshots through.

Implementations: `store_sources()` (hosted REST store) and
`SnapshotStore.sources()` (in-memory, loaded from a JSON file).
"""

from dataclasses import dataclass
from datetime import date
from typing import Protocol

from pasturewatch.core.models import Lot, Measurement, RainfallRecord, VegetationSample, YieldEvent


class MeasurementRepository(Protocol):
    async def fetch(self, lot_id: str, lookback_days: int, as_of: date | None = None) -> list[Measurement]:
        """Measurements for a lot over the lookback window, newest first."""
        ...


class LotRegistry(Protocol):
    async def get(self, lot_id: str) -> Lot | None: ...

    async def list(self, premise_id: str | None = None) -> list[Lot]: ...


class VegetationIndexSource(Protocol):
    async def fetch(self, lot_id: str, start: date, end: date) -> list[VegetationSample]: ...


class YieldSource(Protocol):
    async def fetch(self, lot_id: str) -> list[YieldEvent]:
        """Realized harvests (with actual yield) for a lot."""
        ...


class RainfallSource(Protocol):
    async def fetch(self, premise_id: str, start: date, end: date) -> list[RainfallRecord]: ...


@dataclass(frozen=True)
class Sources:
    """The set of collaborators one analytics run reads from."""

    measurements: MeasurementRepository
    lots: LotRegistry
    vegetation: VegetationIndexSource
    yields: YieldSource
    rainfall: RainfallSource
