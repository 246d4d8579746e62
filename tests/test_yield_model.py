"""Tests for the vegetation index to yield regression."""

from datetime import date, timedelta

import pytest

from pasturewatch.core.models import NoData, VegetationSample, YieldEvent
from pasturewatch.satellite.yield_model import (
    CorrelationModel,
    CorrelationStrength,
    correlate_yield,
    correlation_strength,
    pair_yields_with_index,
)

HARVESTS = [date(2023, 4, 1), date(2024, 4, 1), date(2025, 4, 1)]


def linear_history(indexes=(0.3, 0.5, 0.7), yields=(30, 50, 70), current=0.6):
    """One sample 45 days before each harvest plus a current reading."""
    samples = [VegetationSample(h - timedelta(days=45), v) for h, v in zip(HARVESTS, indexes)]
    samples.append(VegetationSample(date(2026, 1, 15), current))
    events = [YieldEvent(h, "Maize", y) for h, y in zip(HARVESTS, yields)]
    return samples, events


class TestPairYieldsWithIndex:
    """Tests for pair_yields_with_index."""

    def test_mean_over_pre_harvest_window(self):
        harvest = date(2025, 4, 1)
        samples = [
            VegetationSample(harvest - timedelta(days=60), 0.4),
            VegetationSample(harvest - timedelta(days=30), 0.6),
            VegetationSample(harvest - timedelta(days=61), 0.9),
            VegetationSample(harvest - timedelta(days=29), 0.9),
        ]
        pairs = pair_yields_with_index(samples, [YieldEvent(harvest, "Soja", 3000)])

        assert len(pairs) == 1
        assert pairs[0].mean_index == pytest.approx(0.5)
        assert pairs[0].actual_yield == 3000

    def test_harvest_without_samples_is_skipped(self):
        samples, events = linear_history()
        events.append(YieldEvent(date(2021, 4, 1), "Maize", 10))

        assert len(pair_yields_with_index(samples, events)) == 3


class TestCorrelateYield:
    """Tests for correlate_yield."""

    def test_perfect_linear_relation(self):
        samples, events = linear_history()
        result = correlate_yield(samples, events)

        assert isinstance(result, CorrelationModel)
        assert result.samples == 3
        assert result.r_squared == pytest.approx(1.0)
        assert result.slope == pytest.approx(100.0)
        assert result.intercept == pytest.approx(0.0, abs=1e-9)
        assert result.strength == CorrelationStrength.STRONG
        assert result.current_index == 0.6
        assert result.projected_yield == 60

    def test_predict(self):
        result = correlate_yield(*linear_history())
        assert result.predict(0.4) == pytest.approx(40.0)

    def test_formula(self):
        result = correlate_yield(*linear_history())
        assert result.formula.startswith("Yield = 100.00")

    def test_negative_relation(self):
        result = correlate_yield(*linear_history(yields=(70, 50, 30)))

        assert result.r == pytest.approx(-1.0)
        assert result.slope == pytest.approx(-100.0)

    def test_fewer_than_two_pairs(self):
        samples, events = linear_history()
        result = correlate_yield(samples, events[:1])

        assert isinstance(result, NoData)
        assert result.records_seen == 1

    def test_no_yields(self):
        samples, _ = linear_history()
        assert isinstance(correlate_yield(samples, []), NoData)

    def test_constant_index_is_no_data(self):
        result = correlate_yield(*linear_history(indexes=(0.5, 0.5, 0.5)))
        assert isinstance(result, NoData)

    def test_constant_yield_has_no_correlation(self):
        result = correlate_yield(*linear_history(yields=(40, 40, 40)))

        assert result.r == 0.0
        assert result.slope == pytest.approx(0.0)
        assert result.strength == CorrelationStrength.WEAK
        assert result.projected_yield == 40

    def test_idempotent(self):
        samples, events = linear_history()
        assert correlate_yield(samples, events) == correlate_yield(samples, events)

    def test_to_dict(self):
        data = correlate_yield(*linear_history()).to_dict()

        assert data["kind"] == "correlation"
        assert data["strength"] == "strong"
        assert data["pairs"][0]["harvested_on"] == "2023-04-01"


class TestCorrelationStrength:
    @pytest.mark.parametrize(
        "r2,expected",
        [
            (0.71, CorrelationStrength.STRONG),
            (0.7, CorrelationStrength.MODERATE),
            (0.41, CorrelationStrength.MODERATE),
            (0.4, CorrelationStrength.WEAK),
            (0.0, CorrelationStrength.WEAK),
        ],
    )
    def test_bands(self, r2, expected):
        assert correlation_strength(r2) == expected
