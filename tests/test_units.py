"""Tests for display unit formatting."""

import pytest

from pasturewatch.core import units


@pytest.fixture
def imperial(monkeypatch):
    monkeypatch.setattr(units.settings, "display_units", "imperial")


@pytest.fixture
def metric(monkeypatch):
    monkeypatch.setattr(units.settings, "display_units", "metric")


class TestMetric:
    def test_height(self, metric):
        assert units.format_height(12.5) == "12.5 cm"

    def test_rate(self, metric):
        assert units.format_rate(-0.5) == "-0.50 cm/day"

    def test_area_and_mass(self, metric):
        assert units.format_area(10) == "10.0 ha"
        assert units.format_mass(20000) == "20,000 kg DM"

    def test_rainfall(self, metric):
        assert units.format_rainfall(21) == "21.0 mm"

    def test_missing_values(self, metric):
        assert units.format_height(None) == "—"
        assert units.format_area(None) == "—"


class TestImperial:
    """Conversions go through the pint registry."""

    def test_height(self, imperial):
        assert units.format_height(10.0) == "3.9 in"

    def test_area(self, imperial):
        assert units.format_area(10.0) == "24.7 ac"

    def test_mass(self, imperial):
        assert units.format_mass(1000.0) == "2,205 lb DM"

    def test_rainfall(self, imperial):
        assert units.format_rainfall(25.4) == '1.00"'

    def test_registry_is_reused(self):
        assert units.get_ureg() is units.get_ureg()
