"""Tests for trend classification."""

import pytest

from pasturewatch.core.models import NoData
from pasturewatch.pasture.trend import (
    Trend,
    TrendAssessment,
    assess_trend,
    classify_trend,
    describe_trend,
    trend_confidence,
)
from pasturewatch.pasture.velocity import estimate_velocity


class TestClassifyTrend:
    """Band edges are inclusive on the lower side."""

    @pytest.mark.parametrize(
        "velocity,expected",
        [
            (1.2, Trend.RECOVERING),
            (0.51, Trend.RECOVERING),
            (0.5, Trend.STABLE),
            (0.0, Trend.STABLE),
            (-0.2, Trend.STABLE),
            (-0.21, Trend.MILD_DEGRADATION),
            (-0.5, Trend.MILD_DEGRADATION),
            (-0.51, Trend.SEVERE_DEGRADATION),
            (-3.0, Trend.SEVERE_DEGRADATION),
        ],
    )
    def test_bands(self, velocity, expected):
        assert classify_trend(velocity) == expected

    def test_describe(self):
        assert describe_trend(Trend.STABLE, 0.1) == "Pasture stable (0.10 cm/day)"


class TestConfidence:
    """Tests for trend_confidence."""

    @pytest.mark.parametrize("pairs,expected", [(0, 0.0), (1, 20.0), (3, 60.0), (5, 100.0), (9, 100.0)])
    def test_scales_with_pairs_and_caps(self, pairs, expected):
        assert trend_confidence(pairs) == pytest.approx(expected)


class TestAssessTrend:
    """Tests for assess_trend."""

    def test_from_velocity(self, declining_measurements):
        result = assess_trend(estimate_velocity(declining_measurements))

        assert isinstance(result, TrendAssessment)
        assert result.trend == Trend.MILD_DEGRADATION
        assert result.confidence == 40
        assert result.status == "mild_degradation"
        assert "Reduce stocking" in result.recommendation

    def test_no_data_passes_through(self):
        result = assess_trend(NoData("nothing", records_seen=1))

        assert isinstance(result, NoData)
        assert result.records_seen == 1
