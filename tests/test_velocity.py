"""Tests for growth velocity estimation."""

import json
from datetime import date, timedelta

import pytest

from pasturewatch.core.models import Measurement, NoData
from pasturewatch.pasture.trend import Trend
from pasturewatch.pasture.velocity import VelocityResult, estimate_velocity


def visit(day0: date, offset: int, height: float | None, **kwargs) -> Measurement:
    return Measurement(lot_id="L1", measured_on=day0 + timedelta(days=offset), average_cm=height, **kwargs)


class TestEstimateVelocity:
    """Tests for estimate_velocity."""

    def test_two_visits_ten_days_apart(self, day0):
        result = estimate_velocity([visit(day0, 0, 20.0), visit(day0, 10, 15.0)])

        assert isinstance(result, VelocityResult)
        assert result.velocity == -0.5
        assert result.trend == Trend.MILD_DEGRADATION
        assert result.pairs_used == 1
        assert result.records_seen == 2

    def test_mean_of_pair_rates_not_endpoint_slope(self, day0):
        result = estimate_velocity([visit(day0, 0, 20.0), visit(day0, 10, 15.0), visit(day0, 30, 0.0)])

        rates = [p.rate for p in result.pairs]
        assert rates == [-0.5, -0.75]
        assert sum(rates) / len(rates) == -0.625
        assert result.velocity == -0.62
        assert result.velocity != pytest.approx(-20 / 30, abs=0.01)
        assert result.min_rate == -0.75
        assert result.max_rate == -0.5
        assert result.trend == Trend.SEVERE_DEGRADATION

    def test_input_order_does_not_matter(self, declining_measurements):
        forward = estimate_velocity(declining_measurements)
        backward = estimate_velocity(list(reversed(declining_measurements)))
        assert forward == backward

    def test_idempotent(self, declining_measurements):
        assert estimate_velocity(declining_measurements) == estimate_velocity(declining_measurements)

    def test_fewer_than_two_measurements(self, day0):
        result = estimate_velocity([visit(day0, 0, 20.0)])

        assert isinstance(result, NoData)
        assert result.records_seen == 1
        assert result.status == "no_data"

    def test_empty_input(self):
        result = estimate_velocity([])
        assert isinstance(result, NoData)
        assert result.records_seen == 0

    def test_unresolvable_heights_are_not_usable(self, day0):
        result = estimate_velocity([visit(day0, 0, 20.0), visit(day0, 5, None)])

        assert isinstance(result, NoData)
        assert result.records_seen == 2

    def test_same_day_pairs_skipped(self, day0):
        result = estimate_velocity([visit(day0, 0, 20.0), visit(day0, 0, 18.0)])
        assert isinstance(result, NoData)

    def test_same_day_duplicate_among_others(self, day0):
        result = estimate_velocity([visit(day0, 0, 20.0), visit(day0, 0, 20.0), visit(day0, 10, 15.0)])

        assert result.pairs_used == 1
        assert result.velocity == -0.5

    def test_window_ends_at_latest_visit(self, day0):
        old = visit(day0, -40, 40.0)
        result = estimate_velocity([old, visit(day0, 0, 20.0), visit(day0, 10, 15.0)], lookback_days=30)

        assert result.records_seen == 2
        assert result.velocity == -0.5

    def test_explicit_as_of(self, day0):
        measurements = [visit(day0, 0, 20.0), visit(day0, 10, 15.0), visit(day0, 20, 30.0)]
        result = estimate_velocity(measurements, lookback_days=30, as_of=day0 + timedelta(days=10))

        assert result.records_seen == 2
        assert result.velocity == -0.5

    def test_uses_sample_average_when_no_stored_average(self, day0):
        measurements = [
            Measurement(lot_id="L1", measured_on=day0, sample_1_cm=18.0, sample_2_cm=22.0),
            Measurement(lot_id="L1", measured_on=day0 + timedelta(days=4), sample_1_cm=24.0),
        ]
        result = estimate_velocity(measurements)
        assert result.velocity == 1.0
        assert result.trend == Trend.RECOVERING


class TestVelocitySerialization:
    """Tests for VelocityResult.to_dict."""

    def test_to_dict_is_json_serializable(self, declining_measurements):
        data = estimate_velocity(declining_measurements).to_dict()

        assert data["kind"] == "velocity"
        assert data["trend"] == "mild_degradation"
        assert data["pairs"][0]["start"] == "2026-03-01"
        json.dumps(data)

    def test_no_data_to_dict(self):
        data = estimate_velocity([]).to_dict()
        assert data["kind"] == "no_data"
        assert data["records_seen"] == 0
