"""Shared test fixtures."""

import sys
from datetime import date, timedelta
from pathlib import Path

import pytest
import respx

# Add src/ to path so tests can import pasturewatch
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pasturewatch.core.config import settings  # noqa: E402
from pasturewatch.core.models import Measurement  # noqa: E402


@pytest.fixture
def mock_store():
    """Mock the hosted store REST API."""
    with respx.mock(base_url=f"{settings.store_url.rstrip('/')}/rest/v1") as mock:
        yield mock


@pytest.fixture
def no_retry_wait(monkeypatch):
    """Remove tenacity backoff so retry tests run instantly."""
    from tenacity import wait_none

    from pasturewatch.core import client

    monkeypatch.setattr(client._rest_get_retrying.retry, "wait", wait_none())


@pytest.fixture
def day0():
    return date(2026, 3, 1)


@pytest.fixture
def declining_measurements(day0):
    """Lot L1: 20 cm on day 0, 15 cm on day 10, 10 cm on day 30 (remnant 5 cm)."""
    return [
        Measurement(lot_id="L1", measured_on=day0, average_cm=20.0, remnant_cm=5.0),
        Measurement(lot_id="L1", measured_on=day0 + timedelta(days=10), average_cm=15.0, remnant_cm=5.0),
        Measurement(lot_id="L1", measured_on=day0 + timedelta(days=30), average_cm=10.0, remnant_cm=5.0),
    ]


@pytest.fixture
def sample_measurement_rows():
    """Rows as returned by the monitoreo_pasturas table, newest first."""
    return [
        {
            "lote_id": "L1",
            "fecha": "2026-03-31",
            "altura_lugar1_cm": 9.0,
            "altura_lugar2_cm": 10.0,
            "altura_lugar3_cm": 11.0,
            "altura_promedio_cm": None,
            "remanente_objetivo_cm": 5.0,
            "hectareas": None,
        },
        {
            "lote_id": "L1",
            "fecha": "2026-03-11",
            "altura_lugar1_cm": None,
            "altura_lugar2_cm": None,
            "altura_lugar3_cm": None,
            "altura_promedio_cm": 15.0,
            "remanente_objetivo_cm": 5.0,
            "hectareas": 12.5,
        },
        {
            "lote_id": "L1",
            "fecha": "2026-03-01T08:30:00",
            "altura_lugar1_cm": 20.0,
            "altura_lugar2_cm": 0,
            "altura_lugar3_cm": None,
            "altura_promedio_cm": None,
            "remanente_objetivo_cm": 5.0,
            "hectareas": None,
        },
    ]


@pytest.fixture
def snapshot_data():
    """A small farm snapshot in the JSON layout read by SnapshotStore."""
    return {
        "lots": [
            {"id": "L1", "name": "North", "area_ha": 10.0, "premise_id": "P1"},
            {"id": "L2", "name": "South", "area_ha": 4.0, "premise_id": "P1"},
            {"id": "L3", "name": "Creek", "area_ha": None, "premise_id": "P1"},
            {"id": "L9", "name": "Other farm", "area_ha": 8.0, "premise_id": "P2"},
        ],
        "measurements": [
            {"lot_id": "L1", "measured_on": "2026-03-01", "average_cm": 20.0, "remnant_cm": 5.0},
            {"lot_id": "L1", "measured_on": "2026-03-11", "average_cm": 15.0, "remnant_cm": 5.0},
            {"lot_id": "L1", "measured_on": "2026-03-31", "average_cm": 10.0, "remnant_cm": 5.0},
            {"lot_id": "L2", "measured_on": "2026-03-30", "sample_1_cm": 14.0, "sample_2_cm": 16.0},
            {"lot_id": "L3", "measured_on": "2026-03-30", "average_cm": 18.0, "remnant_cm": 6.0},
        ],
        "vegetation": [
            {"lot_id": "L1", "sampled_on": "2024-01-20", "value": 0.50},
            {"lot_id": "L1", "sampled_on": "2025-01-20", "value": 0.70},
            {"lot_id": "L1", "sampled_on": "2026-03-20", "value": 0.60},
        ],
        "yields": [
            {"lot_id": "L1", "harvested_on": "2024-03-10", "crop": "Soja", "actual_yield": 2000},
            {"lot_id": "L1", "harvested_on": "2025-03-10", "crop": "Soja", "actual_yield": 3000},
        ],
        "rainfall": [
            {"premise_id": "P1", "recorded_on": "2026-03-05", "mm": 12.0},
            {"premise_id": "P1", "recorded_on": "2026-03-20", "mm": 8.0},
            {"premise_id": "P1", "recorded_on": "2025-08-10", "mm": 40.0},
            {"premise_id": "P1", "recorded_on": "2024-08-10", "mm": 60.0},
        ],
    }
