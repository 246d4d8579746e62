"""
Read-only access to the hosted farm-management store.

Row parsing is kept separate from fetching so it can be tested without HTTP.

Tables and columns used:
    monitoreo_pasturas   lote_id, fecha, altura_lugar{1,2,3}_cm, altura_promedio_cm,
                         remanente_objetivo_cm, hectareas
    lots                 id, name, area_hectares, premise_id
    ndvi_history         lot_id, date, ndvi_value
    agricultural_works   lot_id, date, work_type, crop_type, yield_real
    lluvias              premise_id, fecha, mm
"""

import logging
from datetime import date, timedelta

from pasturewatch.core.client import RepositoryError, rest_get_with_retry
from pasturewatch.core.models import Lot, Measurement, RainfallRecord, VegetationSample, YieldEvent
from pasturewatch.data.sources import Sources

logger = logging.getLogger(__name__)

MEASUREMENTS_TABLE = "monitoreo_pasturas"
LOTS_TABLE = "lots"
NDVI_TABLE = "ndvi_history"
WORKS_TABLE = "agricultural_works"
RAINFALL_TABLE = "lluvias"

HARVEST_WORK_TYPE = "Cosecha"


# =============================================================================
# Row Parsing
# =============================================================================


def _float(value) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def _date(value: str) -> date:
    # Timestamps come back as ISO datetimes on some tables
    return date.fromisoformat(value[:10])


def parse_measurement(row: dict) -> Measurement:
    try:
        return Measurement(
            lot_id=str(row["lote_id"]),
            measured_on=_date(row["fecha"]),
            sample_1_cm=_float(row.get("altura_lugar1_cm")),
            sample_2_cm=_float(row.get("altura_lugar2_cm")),
            sample_3_cm=_float(row.get("altura_lugar3_cm")),
            average_cm=_float(row.get("altura_promedio_cm")),
            remnant_cm=_float(row.get("remanente_objetivo_cm")),
            area_ha=_float(row.get("hectareas")),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise RepositoryError(f"Malformed measurement row: {e}") from e


def parse_lot(row: dict) -> Lot:
    try:
        return Lot(
            id=str(row["id"]),
            name=row.get("name") or str(row["id"]),
            area_ha=_float(row.get("area_hectares")),
            premise_id=row.get("premise_id"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise RepositoryError(f"Malformed lot row: {e}") from e


def parse_vegetation_sample(row: dict) -> VegetationSample | None:
    value = _float(row.get("ndvi_value"))
    if value is None or not row.get("date"):
        return None
    return VegetationSample(sampled_on=_date(row["date"]), value=value)


def parse_yield_event(row: dict) -> YieldEvent | None:
    actual = _float(row.get("yield_real"))
    if actual is None or not row.get("date"):
        return None
    return YieldEvent(harvested_on=_date(row["date"]), crop=row.get("crop_type"), actual_yield=actual)


def parse_rainfall(row: dict) -> RainfallRecord | None:
    mm = _float(row.get("mm"))
    if mm is None or not row.get("fecha"):
        return None
    return RainfallRecord(recorded_on=_date(row["fecha"]), mm=mm)


def _parse_all(rows: list[dict], parser) -> list:
    parsed = []
    skipped = 0
    for row in rows:
        try:
            item = parser(row)
        except ValueError:
            item = None
        if item is None:
            skipped += 1
            continue
        parsed.append(item)
    if skipped:
        logger.debug("Skipped %d incomplete rows", skipped)
    return parsed


# =============================================================================
# Collaborators
# =============================================================================


def _period(field: str, start: date, end: date) -> list[tuple[str, str]]:
    return [(field, f"gte.{start.isoformat()}"), (field, f"lte.{end.isoformat()}")]


class StoreMeasurements:
    """Pasture monitoring visits."""

    async def fetch(self, lot_id: str, lookback_days: int, as_of: date | None = None) -> list[Measurement]:
        end = as_of or date.today()
        start = end - timedelta(days=lookback_days)
        rows = await rest_get_with_retry(
            MEASUREMENTS_TABLE,
            [("lote_id", f"eq.{lot_id}"), *_period("fecha", start, end), ("order", "fecha.desc")],
        )
        return [parse_measurement(row) for row in rows]


class StoreLots:
    """Lot registry, optionally scoped to one premise."""

    def __init__(self, premise_id: str | None = None):
        self.premise_id = premise_id

    async def get(self, lot_id: str) -> Lot | None:
        rows = await rest_get_with_retry(LOTS_TABLE, {"id": f"eq.{lot_id}"})
        return parse_lot(rows[0]) if rows else None

    async def list(self, premise_id: str | None = None) -> list[Lot]:
        premise_id = premise_id or self.premise_id
        params = {"order": "name.asc"}
        if premise_id:
            params["premise_id"] = f"eq.{premise_id}"
        rows = await rest_get_with_retry(LOTS_TABLE, params)
        return [parse_lot(row) for row in rows]


class StoreVegetationIndex:
    async def fetch(self, lot_id: str, start: date, end: date) -> list[VegetationSample]:
        rows = await rest_get_with_retry(
            NDVI_TABLE,
            [("lot_id", f"eq.{lot_id}"), *_period("date", start, end), ("order", "date.asc")],
        )
        return _parse_all(rows, parse_vegetation_sample)


class StoreYields:
    """Harvest works with a recorded actual yield."""

    async def fetch(self, lot_id: str) -> list[YieldEvent]:
        rows = await rest_get_with_retry(
            WORKS_TABLE,
            {
                "lot_id": f"eq.{lot_id}",
                "work_type": f"eq.{HARVEST_WORK_TYPE}",
                "yield_real": "not.is.null",
                "order": "date.asc",
            },
        )
        return _parse_all(rows, parse_yield_event)


class StoreRainfall:
    async def fetch(self, premise_id: str, start: date, end: date) -> list[RainfallRecord]:
        rows = await rest_get_with_retry(
            RAINFALL_TABLE,
            [("premise_id", f"eq.{premise_id}"), *_period("fecha", start, end), ("order", "fecha.asc")],
        )
        return _parse_all(rows, parse_rainfall)


def store_sources(premise_id: str | None = None) -> Sources:
    """All collaborators backed by the hosted store."""
    return Sources(
        measurements=StoreMeasurements(),
        lots=StoreLots(premise_id),
        vegetation=StoreVegetationIndex(),
        yields=StoreYields(),
        rainfall=StoreRainfall(),
    )
