"""
Pasture height aggregation and status indicators.

Field staff record up to three point heights per visit (a rising-plate or
ruler reading at three spots in the lot). These functions reduce a visit to
one representative height and place it against the remnant floor and the
configured height bands.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from pasturewatch.core.models import Measurement, NoData, Result
from pasturewatch.core.thresholds import PastureThresholds

# Margin above remnant (cm) for the traffic-light indicator
URGENT_MARGIN_CM = 2.0
ATTENTION_MARGIN_CM = 5.0


def average_height(*samples: float | None) -> float | None:
    """Mean of the valid samples, or None if there are none.

    Missing and non-positive readings are ignored.
    """
    valid = [s for s in samples if s is not None and s > 0]
    if not valid:
        return None
    return sum(valid) / len(valid)


def resolve_height(measurement: Measurement) -> float | None:
    """Representative height for a visit.

    Uses the stored average when present (0 is a valid bare-ground reading),
    otherwise averages the raw samples.
    """
    if measurement.average_cm is not None:
        return measurement.average_cm
    return average_height(*measurement.samples)


# -----------------------------------------------------------------------------
# Traffic-light status against the remnant
# -----------------------------------------------------------------------------


class HeightStatus(Enum):
    CRITICAL = "critical"
    URGENT = "urgent"
    ATTENTION = "attention"
    NORMAL = "normal"


HEIGHT_STATUS_ACTIONS = {
    HeightStatus.CRITICAL: "Move animals to an alternate lot immediately or reduce stocking",
    HeightStatus.URGENT: "Plan to move animals within 2-3 days and monitor daily",
    HeightStatus.ATTENTION: "Be ready to move animals soon; check every 2-3 days",
    HeightStatus.NORMAL: "Adequate forage; continue routine monitoring",
}


@dataclass(frozen=True)
class HeightIndicator(Result):
    """Height status relative to the remnant."""

    kind: ClassVar[str] = "height_indicator"

    status: HeightStatus
    current_cm: float
    remnant_cm: float
    margin_cm: float
    recommendation: str


def height_status(current_cm: float | None, remnant_cm: float | None) -> HeightIndicator | NoData:
    """Classify the margin between current height and remnant.

    Margin < 0 is critical, < 2 cm urgent, < 5 cm attention, otherwise normal.
    """
    if current_cm is None or not remnant_cm:
        return NoData("No pasture height or remnant available")

    margin = current_cm - remnant_cm
    if margin < 0:
        status = HeightStatus.CRITICAL
    elif margin < URGENT_MARGIN_CM:
        status = HeightStatus.URGENT
    elif margin < ATTENTION_MARGIN_CM:
        status = HeightStatus.ATTENTION
    else:
        status = HeightStatus.NORMAL

    return HeightIndicator(
        status=status,
        current_cm=current_cm,
        remnant_cm=remnant_cm,
        margin_cm=round(margin, 1),
        recommendation=HEIGHT_STATUS_ACTIONS[status],
    )


# -----------------------------------------------------------------------------
# Band classification against configured thresholds
# -----------------------------------------------------------------------------


class HeightBand(Enum):
    BELOW_CRITICAL = "below_critical"
    WARNING = "warning"
    ADEQUATE = "adequate"
    OPTIMAL = "optimal"


def classify_height(current_cm: float, thresholds: PastureThresholds) -> HeightBand:
    """Place a height in the critical / warning / optimal bands."""
    if current_cm <= thresholds.critical_cm:
        return HeightBand.BELOW_CRITICAL
    elif current_cm < thresholds.warning_cm:
        return HeightBand.WARNING
    elif current_cm < thresholds.optimal_cm:
        return HeightBand.ADEQUATE
    else:
        return HeightBand.OPTIMAL
