"""Qualitative pasture trend from growth velocity."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from pasturewatch.core.models import NoData, Result

if TYPE_CHECKING:
    from pasturewatch.pasture.velocity import VelocityResult

# Velocity band edges (cm/day)
RECOVERING_ABOVE = 0.5
STABLE_FROM = -0.2
MILD_FROM = -0.5

# Pairs of measurements needed for full confidence
FULL_CONFIDENCE_PAIRS = 5


class Trend(Enum):
    RECOVERING = "recovering"
    STABLE = "stable"
    MILD_DEGRADATION = "mild_degradation"
    SEVERE_DEGRADATION = "severe_degradation"


TREND_LABELS = {
    Trend.RECOVERING: "Pasture recovering",
    Trend.STABLE: "Pasture stable",
    Trend.MILD_DEGRADATION: "Mild degradation",
    Trend.SEVERE_DEGRADATION: "Severe degradation",
}

TREND_RECOMMENDATIONS = {
    Trend.RECOVERING: "Pasture in good condition. Consider increasing stocking if above optimal height.",
    Trend.STABLE: "Keep current stocking and continue monitoring.",
    Trend.MILD_DEGRADATION: "Reduce stocking or rotate to another lot within 7-10 days.",
    Trend.SEVERE_DEGRADATION: "Urgent: move animals or supplement now to avoid overgrazing.",
}


def classify_trend(velocity: float) -> Trend:
    """Map a velocity (cm/day) to a trend.

    Bands are inclusive on their lower edge: -0.2 is stable, -0.5 is mild
    degradation.
    """
    if velocity > RECOVERING_ABOVE:
        return Trend.RECOVERING
    elif velocity >= STABLE_FROM:
        return Trend.STABLE
    elif velocity >= MILD_FROM:
        return Trend.MILD_DEGRADATION
    else:
        return Trend.SEVERE_DEGRADATION


def describe_trend(trend: Trend, velocity: float) -> str:
    """Human-readable label, e.g. "Pasture stable (0.10 cm/day)"."""
    return f"{TREND_LABELS[trend]} ({velocity:.2f} cm/day)"


def trend_confidence(pairs_used: int) -> float:
    """Confidence (0-100) from the number of measurement pairs behind a velocity."""
    return min(100.0, (pairs_used / FULL_CONFIDENCE_PAIRS) * 100)


@dataclass(frozen=True)
class TrendAssessment(Result):
    """Trend with confidence and management recommendation."""

    kind: ClassVar[str] = "trend"

    trend: Trend
    velocity: float
    confidence: int
    label: str
    recommendation: str
    records_seen: int

    @property
    def status(self) -> str:
        return self.trend.value


def assess_trend(velocity: "VelocityResult | NoData") -> TrendAssessment | NoData:
    """Summarize a velocity estimate as a trend assessment."""
    if isinstance(velocity, NoData):
        return NoData(
            "Not enough data to determine trend",
            records_seen=velocity.records_seen,
        )

    return TrendAssessment(
        trend=velocity.trend,
        velocity=velocity.velocity,
        confidence=round(trend_confidence(velocity.pairs_used)),
        label=velocity.label,
        recommendation=TREND_RECOMMENDATIONS[velocity.trend],
        records_seen=velocity.records_seen,
    )
