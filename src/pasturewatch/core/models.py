"""Value objects shared by the analytics modules.

Every object here is immutable and carries no identity beyond the lot/date
key that produced it. Results are computed on demand and discarded by the
caller; `to_dict()` gives a JSON-serializable view for the UI, alerting and
audit collaborators.

Units: heights in cm, areas in hectares, forage mass in kg of dry matter.
"""

import dataclasses
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, ClassVar


def _serialize(value: Any) -> Any:
    if isinstance(value, Result):
        return value.to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _serialize(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


class Result:
    """Mixin for result value objects."""

    kind: ClassVar[str] = "result"

    def to_dict(self) -> dict[str, Any]:
        data = {f.name: _serialize(getattr(self, f.name)) for f in dataclasses.fields(self)}  # type: ignore[arg-type]
        data["kind"] = self.kind
        return data


# -----------------------------------------------------------------------------
# Input records (snapshots fetched from the store)
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Measurement:
    """One pasture-height visit to a lot."""

    lot_id: str
    measured_on: date
    sample_1_cm: float | None = None
    sample_2_cm: float | None = None
    sample_3_cm: float | None = None
    average_cm: float | None = None  # Stored average, if the store computed one
    remnant_cm: float | None = None  # Target remnant height for this lot
    area_ha: float | None = None  # Overrides Lot.area_ha when present

    def __post_init__(self):
        if self.average_cm is not None and self.average_cm < 0:
            raise ValueError(f"average height cannot be negative: {self.average_cm}")

    @property
    def samples(self) -> tuple[float | None, float | None, float | None]:
        return (self.sample_1_cm, self.sample_2_cm, self.sample_3_cm)


@dataclass(frozen=True)
class Lot:
    """A grazing parcel."""

    id: str
    name: str
    area_ha: float | None = None
    premise_id: str | None = None


@dataclass(frozen=True)
class VegetationSample:
    """A vegetation index (NDVI) reading for a lot."""

    sampled_on: date
    value: float


@dataclass(frozen=True)
class YieldEvent:
    """Realized yield of one harvest."""

    harvested_on: date
    crop: str | None
    actual_yield: float


@dataclass(frozen=True)
class RainfallRecord:
    """Rain gauge reading for a premise."""

    recorded_on: date
    mm: float


class Priority(Enum):
    """Urgency attached to a recommended action."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# -----------------------------------------------------------------------------
# No-data result
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class NoData(Result):
    """Returned instead of a value when inputs are missing or insufficient."""

    kind: ClassVar[str] = "no_data"

    reason: str
    records_seen: int = 0
    details: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def status(self) -> str:
        return "no_data"


def is_no_data(result: object) -> bool:
    """True if the result is the NoData variant."""
    return isinstance(result, NoData)
