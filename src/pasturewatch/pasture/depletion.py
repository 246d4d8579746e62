"""
Days until pasture height falls to the remnant floor.

Grazing below the remnant height damages regrowth, so the question a
manager needs answered is "how long until I have to move the mob?".
This projects the current velocity forward linearly and sorts the answer
into action tiers.
"""

import math
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import ClassVar

from pasturewatch.core.models import NoData, Result
from pasturewatch.pasture.velocity import VelocityResult

# Tier ceilings (days until remnant)
URGENT_DAYS = 7
ATTENTION_DAYS = 14
CAUTION_DAYS = 30


class DepletionStatus(Enum):
    CRITICAL = "critical"
    URGENT = "urgent"
    ATTENTION = "attention"
    CAUTION = "caution"
    NORMAL = "normal"
    SAFE = "safe"


DEPLETION_ACTIONS = {
    DepletionStatus.CRITICAL: "Move animals immediately or supplement with forage",
    DepletionStatus.URGENT: "Plan animal move or supplementation within 1 week",
    DepletionStatus.ATTENTION: "Prepare an alternate lot or supplementation plan",
    DepletionStatus.CAUTION: "Monitor weekly and plan ahead",
    DepletionStatus.NORMAL: "Continue routine monitoring",
    DepletionStatus.SAFE: "Routine monitoring. Consider increasing stocking if above optimal height",
}


@dataclass(frozen=True)
class ProjectionResult(Result):
    """Forecast of days until the remnant is reached."""

    kind: ClassVar[str] = "projection"

    days_until_critical: int | None  # None = never (flat or growing pasture)
    status: DepletionStatus
    message: str
    recommendation: str
    current_cm: float
    remnant_cm: float
    velocity: float | None = None
    projected_date: date | None = None

    @property
    def never_depletes(self) -> bool:
        return self.days_until_critical is None

    @property
    def days_or_inf(self) -> float:
        """Days as a number, with math.inf for pasture that never depletes."""
        return math.inf if self.days_until_critical is None else float(self.days_until_critical)


def depletion_tier(days: int) -> DepletionStatus:
    """Status tier for a finite number of days until remnant."""
    if days <= URGENT_DAYS:
        return DepletionStatus.URGENT
    elif days <= ATTENTION_DAYS:
        return DepletionStatus.ATTENTION
    elif days <= CAUTION_DAYS:
        return DepletionStatus.CAUTION
    else:
        return DepletionStatus.NORMAL


def _rate_of(velocity: VelocityResult | NoData | float) -> float | None:
    if isinstance(velocity, NoData):
        return None
    if isinstance(velocity, VelocityResult):
        return velocity.velocity
    return float(velocity)


def project_depletion(
    current_cm: float | None,
    remnant_cm: float | None,
    velocity: VelocityResult | NoData | float,
    as_of: date | None = None,
) -> ProjectionResult | NoData:
    """
    Project days until current height reaches the remnant.

    Rules, in order:
    1. Height at or below remnant: 0 days, critical, whatever the velocity.
    2. No velocity estimate: NoData (no guessing).
    3. Velocity >= 0: never reaches remnant, safe.
    4. Otherwise ceil((height - remnant) / |velocity|) days, tiered
       urgent (<= 7), attention (<= 14), caution (<= 30), normal.

    Args:
        current_cm: Latest representative height
        remnant_cm: Remnant floor for the lot
        velocity: Result of estimate_velocity over the recent window, or a
            velocity in cm/day
        as_of: Date of the latest measurement; enables projected_date

    Returns:
        ProjectionResult or NoData
    """
    if current_cm is None or not remnant_cm:
        return NoData("Missing pasture height or target remnant")

    if current_cm <= remnant_cm:
        return ProjectionResult(
            days_until_critical=0,
            status=DepletionStatus.CRITICAL,
            message=f"CRITICAL: current height ({current_cm:.1f} cm) is at or below the remnant ({remnant_cm:.1f} cm)",
            recommendation=DEPLETION_ACTIONS[DepletionStatus.CRITICAL],
            current_cm=current_cm,
            remnant_cm=remnant_cm,
            velocity=_rate_of(velocity),
            projected_date=as_of,
        )

    if isinstance(velocity, NoData):
        return NoData(
            "Cannot project without a growth velocity estimate",
            records_seen=velocity.records_seen,
            details={"current_cm": current_cm, "remnant_cm": remnant_cm},
        )

    rate = _rate_of(velocity)
    if rate >= 0:
        return ProjectionResult(
            days_until_critical=None,
            status=DepletionStatus.SAFE,
            message=f"Pasture growing ({rate:.2f} cm/day); it will not reach the remnant",
            recommendation=DEPLETION_ACTIONS[DepletionStatus.SAFE],
            current_cm=current_cm,
            remnant_cm=remnant_cm,
            velocity=rate,
        )

    days = math.ceil((current_cm - remnant_cm) / abs(rate))
    status = depletion_tier(days)

    return ProjectionResult(
        days_until_critical=days,
        status=status,
        message=f"{status.value.capitalize()}: {days} days until critical remnant",
        recommendation=DEPLETION_ACTIONS[status],
        current_cm=current_cm,
        remnant_cm=remnant_cm,
        velocity=rate,
        projected_date=as_of + timedelta(days=days) if as_of else None,
    )
