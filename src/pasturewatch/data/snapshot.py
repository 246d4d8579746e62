"""
In-memory collaborators loaded from a JSON snapshot file.

Useful for offline analysis and tests. The file mirrors the value objects:

    {
      "lots": [{"id": "L1", "name": "North", "area_ha": 10, "premise_id": "P1"}],
      "measurements": [{"lot_id": "L1", "measured_on": "2026-03-01",
                        "sample_1_cm": 12, "sample_2_cm": 14, "remnant_cm": 5}],
      "vegetation": [{"lot_id": "L1", "sampled_on": "2026-01-10", "value": 0.62}],
      "yields": [{"lot_id": "L1", "harvested_on": "2026-03-15", "crop": "Soja",
                  "actual_yield": 3100}],
      "rainfall": [{"premise_id": "P1", "recorded_on": "2026-02-02", "mm": 23.5}]
    }

Every section is optional.
"""

import json
from collections import defaultdict
from datetime import date, timedelta
from pathlib import Path

from pasturewatch.core.models import Lot, Measurement, RainfallRecord, VegetationSample, YieldEvent
from pasturewatch.data.sources import Sources


def _date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


class SnapshotStore:
    """Immutable-by-convention snapshot of lots and their records."""

    def __init__(
        self,
        lots: list[Lot] | None = None,
        measurements: list[Measurement] | None = None,
        vegetation: dict[str, list[VegetationSample]] | None = None,
        yields: dict[str, list[YieldEvent]] | None = None,
        rainfall: dict[str, list[RainfallRecord]] | None = None,
    ):
        self.lots = {lot.id: lot for lot in lots or []}
        self.measurements: dict[str, list[Measurement]] = defaultdict(list)
        for m in measurements or []:
            self.measurements[m.lot_id].append(m)
        self.vegetation = vegetation or {}
        self.yields = yields or {}
        self.rainfall = rainfall or {}

    @classmethod
    def from_dict(cls, data: dict) -> "SnapshotStore":
        vegetation: dict[str, list[VegetationSample]] = defaultdict(list)
        for row in data.get("vegetation", []):
            vegetation[str(row["lot_id"])].append(
                VegetationSample(sampled_on=_date(row["sampled_on"]), value=float(row["value"]))
            )

        yields: dict[str, list[YieldEvent]] = defaultdict(list)
        for row in data.get("yields", []):
            yields[str(row["lot_id"])].append(
                YieldEvent(
                    harvested_on=_date(row["harvested_on"]),
                    crop=row.get("crop"),
                    actual_yield=float(row["actual_yield"]),
                )
            )

        rainfall: dict[str, list[RainfallRecord]] = defaultdict(list)
        for row in data.get("rainfall", []):
            rainfall[str(row["premise_id"])].append(
                RainfallRecord(recorded_on=_date(row["recorded_on"]), mm=float(row["mm"]))
            )

        return cls(
            lots=[
                Lot(
                    id=str(row["id"]),
                    name=row.get("name") or str(row["id"]),
                    area_ha=row.get("area_ha"),
                    premise_id=row.get("premise_id"),
                )
                for row in data.get("lots", [])
            ],
            measurements=[
                Measurement(
                    lot_id=str(row["lot_id"]),
                    measured_on=_date(row["measured_on"]),
                    sample_1_cm=row.get("sample_1_cm"),
                    sample_2_cm=row.get("sample_2_cm"),
                    sample_3_cm=row.get("sample_3_cm"),
                    average_cm=row.get("average_cm"),
                    remnant_cm=row.get("remnant_cm"),
                    area_ha=row.get("area_ha"),
                )
                for row in data.get("measurements", [])
            ],
            vegetation=dict(vegetation),
            yields=dict(yields),
            rainfall=dict(rainfall),
        )

    @classmethod
    def load(cls, path: Path | str) -> "SnapshotStore":
        with open(path) as f:
            return cls.from_dict(json.load(f))

    def sources(self) -> Sources:
        return Sources(
            measurements=_SnapshotMeasurements(self),
            lots=_SnapshotLots(self),
            vegetation=_SnapshotVegetationIndex(self),
            yields=_SnapshotYields(self),
            rainfall=_SnapshotRainfall(self),
        )


class _SnapshotMeasurements:
    def __init__(self, store: SnapshotStore):
        self.store = store

    async def fetch(self, lot_id: str, lookback_days: int, as_of: date | None = None) -> list[Measurement]:
        records = self.store.measurements.get(lot_id, [])
        if not records:
            return []
        # A snapshot has no "today"; the window ends at its latest visit
        end = as_of or max(m.measured_on for m in records)
        start = end - timedelta(days=lookback_days)
        in_window = [m for m in records if start <= m.measured_on <= end]
        return sorted(in_window, key=lambda m: m.measured_on, reverse=True)


class _SnapshotLots:
    def __init__(self, store: SnapshotStore):
        self.store = store

    async def get(self, lot_id: str) -> Lot | None:
        return self.store.lots.get(lot_id)

    async def list(self, premise_id: str | None = None) -> list[Lot]:
        lots = self.store.lots.values()
        if premise_id:
            return [lot for lot in lots if lot.premise_id == premise_id]
        return [*lots]


class _SnapshotVegetationIndex:
    def __init__(self, store: SnapshotStore):
        self.store = store

    async def fetch(self, lot_id: str, start: date, end: date) -> list[VegetationSample]:
        samples = self.store.vegetation.get(lot_id, [])
        return sorted((s for s in samples if start <= s.sampled_on <= end), key=lambda s: s.sampled_on)


class _SnapshotYields:
    def __init__(self, store: SnapshotStore):
        self.store = store

    async def fetch(self, lot_id: str) -> list[YieldEvent]:
        return sorted(self.store.yields.get(lot_id, []), key=lambda y: y.harvested_on)


class _SnapshotRainfall:
    def __init__(self, store: SnapshotStore):
        self.store = store

    async def fetch(self, premise_id: str, start: date, end: date) -> list[RainfallRecord]:
        records = self.store.rainfall.get(premise_id, [])
        return sorted((r for r in records if start <= r.recorded_on <= end), key=lambda r: r.recorded_on)
