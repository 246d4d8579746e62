"""Tests for the store-backed and snapshot collaborators."""

import json
from datetime import date

import httpx
import pytest

from pasturewatch.core.client import RepositoryError
from pasturewatch.data.snapshot import SnapshotStore
from pasturewatch.data.store import (
    StoreLots,
    StoreMeasurements,
    StoreRainfall,
    StoreYields,
    parse_lot,
    parse_measurement,
    parse_rainfall,
    parse_vegetation_sample,
    parse_yield_event,
    store_sources,
)


class TestParsing:
    """Tests for row parsing."""

    def test_parse_measurement(self, sample_measurement_rows):
        m = parse_measurement(sample_measurement_rows[1])

        assert m.lot_id == "L1"
        assert m.measured_on == date(2026, 3, 11)
        assert m.average_cm == 15.0
        assert m.remnant_cm == 5.0
        assert m.area_ha == 12.5

    def test_parse_measurement_datetime_and_zero(self, sample_measurement_rows):
        m = parse_measurement(sample_measurement_rows[2])

        assert m.measured_on == date(2026, 3, 1)
        assert m.samples == (20.0, 0.0, None)

    @pytest.mark.parametrize(
        "row",
        [
            {"fecha": "2026-03-01"},
            {"lote_id": "L1", "fecha": "yesterday"},
            {"lote_id": "L1", "fecha": "2026-03-01", "altura_promedio_cm": "tall"},
            {"lote_id": "L1", "fecha": "2026-03-01", "altura_promedio_cm": -3},
        ],
    )
    def test_malformed_measurement(self, row):
        with pytest.raises(RepositoryError):
            parse_measurement(row)

    def test_parse_lot(self):
        lot = parse_lot({"id": 7, "name": "Bajo", "area_hectares": "22.5", "premise_id": "P1"})

        assert lot.id == "7"
        assert lot.area_ha == 22.5
        assert lot.premise_id == "P1"

    def test_parse_lot_without_name_or_area(self):
        lot = parse_lot({"id": "L4"})

        assert lot.name == "L4"
        assert lot.area_ha is None

    def test_incomplete_rows_parse_to_none(self):
        assert parse_vegetation_sample({"date": "2026-01-01", "ndvi_value": None}) is None
        assert parse_yield_event({"date": None, "yield_real": 3000}) is None
        assert parse_rainfall({"fecha": "2026-01-01"}) is None


class TestStoreCollaborators:
    """Tests for the REST-backed collaborators."""

    async def test_measurements_query(self, mock_store, sample_measurement_rows):
        """Verify the lot filter, date window and ordering are sent."""
        route = mock_store.get("/monitoreo_pasturas").mock(
            return_value=httpx.Response(200, json=sample_measurement_rows)
        )

        records = await StoreMeasurements().fetch("L1", 30, as_of=date(2026, 3, 31))

        params = route.calls[0].request.url.params
        assert params["lote_id"] == "eq.L1"
        assert params.get_list("fecha") == ["gte.2026-03-01", "lte.2026-03-31"]
        assert params["order"] == "fecha.desc"
        assert [m.measured_on.day for m in records] == [31, 11, 1]

    async def test_measurements_malformed_row(self, mock_store):
        mock_store.get("/monitoreo_pasturas").mock(return_value=httpx.Response(200, json=[{"fecha": "2026-03-01"}]))

        with pytest.raises(RepositoryError):
            await StoreMeasurements().fetch("L1", 30)

    async def test_lot_not_found(self, mock_store):
        mock_store.get("/lots").mock(return_value=httpx.Response(200, json=[]))

        assert await StoreLots().get("missing") is None

    async def test_lots_scoped_to_premise(self, mock_store):
        route = mock_store.get("/lots").mock(
            return_value=httpx.Response(200, json=[{"id": "L1", "name": "North", "premise_id": "P1"}])
        )

        lots = await StoreLots("P1").list()

        assert [lot.id for lot in lots] == ["L1"]
        assert route.calls[0].request.url.params["premise_id"] == "eq.P1"

    async def test_yields_skip_incomplete_rows(self, mock_store):
        route = mock_store.get("/agricultural_works").mock(
            return_value=httpx.Response(
                200,
                json=[
                    {"date": "2025-03-10", "crop_type": "Soja", "yield_real": 3000},
                    {"date": "2024-03-10", "crop_type": "Soja", "yield_real": None},
                ],
            )
        )

        events = await StoreYields().fetch("L1")

        assert len(events) == 1
        assert route.calls[0].request.url.params["work_type"] == "eq.Cosecha"

    async def test_rainfall(self, mock_store):
        mock_store.get("/lluvias").mock(
            return_value=httpx.Response(200, json=[{"fecha": "2026-03-05T00:00:00", "mm": "12.5"}])
        )

        records = await StoreRainfall().fetch("P1", date(2026, 3, 1), date(2026, 3, 31))

        assert records[0].recorded_on == date(2026, 3, 5)
        assert records[0].mm == 12.5

    def test_store_sources_bundle(self):
        sources = store_sources("P1")

        assert isinstance(sources.measurements, StoreMeasurements)
        assert sources.lots.premise_id == "P1"


class TestSnapshotStore:
    """Tests for the in-memory snapshot collaborators."""

    async def test_measurements_window_ends_at_latest_visit(self, snapshot_data):
        sources = SnapshotStore.from_dict(snapshot_data).sources()

        records = await sources.measurements.fetch("L1", 20)

        assert [m.measured_on for m in records] == [date(2026, 3, 31), date(2026, 3, 11)]

    async def test_measurements_as_of(self, snapshot_data):
        sources = SnapshotStore.from_dict(snapshot_data).sources()

        records = await sources.measurements.fetch("L1", 60, as_of=date(2026, 3, 15))

        assert len(records) == 2
        assert records[0].measured_on == date(2026, 3, 11)

    async def test_unknown_lot(self, snapshot_data):
        sources = SnapshotStore.from_dict(snapshot_data).sources()

        assert await sources.measurements.fetch("nope", 30) == []
        assert await sources.lots.get("nope") is None

    async def test_lots_by_premise(self, snapshot_data):
        sources = SnapshotStore.from_dict(snapshot_data).sources()

        assert [lot.id for lot in await sources.lots.list("P1")] == ["L1", "L2", "L3"]
        assert len(await sources.lots.list()) == 4

    async def test_rainfall_period(self, snapshot_data):
        sources = SnapshotStore.from_dict(snapshot_data).sources()

        records = await sources.rainfall.fetch("P1", date(2026, 3, 1), date(2026, 3, 31))

        assert [r.mm for r in records] == [12.0, 8.0]

    def test_load(self, snapshot_data, tmp_path):
        path = tmp_path / "farm.json"
        path.write_text(json.dumps(snapshot_data))

        store = SnapshotStore.load(path)

        assert store.lots["L2"].name == "South"
        assert len(store.yields["L1"]) == 2
