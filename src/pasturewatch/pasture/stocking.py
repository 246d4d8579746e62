"""
Stocking rate from available forage.

Converts the height of pasture above the remnant into dry matter, applies a
utilization efficiency (trampling, fouling and selective grazing mean not
all standing forage gets eaten) and divides by per-animal intake to get the
headcount a lot can carry for a target grazing period.

    available_cm  = max(0, height - remnant)
    forage_kg     = available_cm * area_ha * kg_per_cm_ha
    usable_kg     = forage_kg * efficiency_pct / 100
    animal_days   = usable_kg / daily_intake_kg
    headcount     = floor(animal_days / target_days)
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from pasturewatch.core.models import NoData, Priority, Result
from pasturewatch.core.thresholds import AnalyticsConfig


class StockingStatus(Enum):
    INSUFFICIENT = "insufficient"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


# Headcount tier ceilings (exclusive)
LOW_BELOW = 1
MODERATE_BELOW = 5
HIGH_FROM = 20


@dataclass(frozen=True)
class StockingRecommendation(Result):
    """Recommended headcount for a lot over the target grazing window."""

    kind: ClassVar[str] = "stocking"

    recommended_head: int
    available_cm: float
    forage_kg: float
    usable_forage_kg: float
    status: StockingStatus
    message: str
    current_cm: float
    remnant_cm: float
    area_ha: float
    target_days: int
    daily_intake_kg: float
    efficiency_pct: float


def forage_mass(available_cm: float, area_ha: float, kg_per_cm_ha: float) -> float:
    """Standing forage above the remnant (kg DM)."""
    return available_cm * area_ha * kg_per_cm_ha


def stocking_tier(head: float) -> StockingStatus:
    if head < LOW_BELOW:
        return StockingStatus.INSUFFICIENT
    elif head < MODERATE_BELOW:
        return StockingStatus.LOW
    elif head < HIGH_FROM:
        return StockingStatus.MODERATE
    else:
        return StockingStatus.HIGH


def _stocking_message(status: StockingStatus, head: int, days: int) -> str:
    if status == StockingStatus.INSUFFICIENT:
        return "Insufficient forage. Grazing not recommended."
    elif status == StockingStatus.LOW:
        return f"Low stocking: {head} animals for {days} days"
    elif status == StockingStatus.MODERATE:
        return f"Moderate stocking: {head} animals for {days} days"
    else:
        return f"High stocking available: {head} animals for {days} days"


def recommend_stocking(
    current_cm: float | None,
    remnant_cm: float | None,
    area_ha: float | None,
    config: AnalyticsConfig | None = None,
    daily_intake_kg: float | None = None,
    efficiency_pct: float | None = None,
    target_days: int | None = None,
) -> StockingRecommendation | NoData:
    """
    Recommend a headcount for a lot.

    Args:
        current_cm: Latest representative height
        remnant_cm: Remnant floor
        area_ha: Lot area (measurement override or lot area)
        config: Conversion factor and defaults
        daily_intake_kg: Override per-animal intake (kg DM/day)
        efficiency_pct: Override utilization efficiency (%)
        target_days: Override target grazing days

    Returns:
        StockingRecommendation, or NoData if height, remnant or area is missing
    """
    config = config or AnalyticsConfig()
    intake = daily_intake_kg if daily_intake_kg is not None else config.daily_intake_kg
    efficiency = efficiency_pct if efficiency_pct is not None else config.utilization_efficiency_pct
    days = target_days if target_days is not None else config.target_grazing_days

    if intake <= 0 or days <= 0 or not 0 < efficiency <= 100:
        raise ValueError("intake and target days must be positive and efficiency in (0, 100]")

    if current_cm is None or remnant_cm is None or not area_ha or area_ha <= 0:
        return NoData(
            "Missing pasture height, remnant or area",
            details={"current_cm": current_cm, "remnant_cm": remnant_cm, "area_ha": area_ha},
        )

    available = max(0.0, current_cm - remnant_cm)
    forage = forage_mass(available, area_ha, config.forage_kg_per_cm_ha)
    usable = forage * efficiency / 100
    animal_days = usable / intake
    head = math.floor(animal_days / days)
    status = stocking_tier(head)

    return StockingRecommendation(
        recommended_head=head,
        available_cm=available,
        forage_kg=round(forage, 1),
        usable_forage_kg=round(usable, 1),
        status=status,
        message=_stocking_message(status, head, days),
        current_cm=current_cm,
        remnant_cm=remnant_cm,
        area_ha=area_ha,
        target_days=days,
        daily_intake_kg=intake,
        efficiency_pct=efficiency,
    )


# -----------------------------------------------------------------------------
# Current vs recommended stocking
# -----------------------------------------------------------------------------


class StockingAction(Enum):
    REDUCE = "reduce"
    INCREASE = "increase"
    MAINTAIN = "maintain"


# Surplus above this share of the recommendation is high priority
OVERSTOCK_HIGH_PRIORITY_SHARE = 0.3
# Spare capacity (head) before suggesting more animals
UNDERSTOCK_MARGIN_HEAD = 5


@dataclass(frozen=True)
class StockingAdjustment(Result):
    """Comparison of the animals on a lot with its recommended headcount."""

    kind: ClassVar[str] = "stocking_adjustment"

    current_head: int
    recommended_head: int
    difference: int
    action: StockingAction
    priority: Priority
    message: str

    @property
    def status(self) -> str:
        return self.action.value


def adjust_stocking(current_head: int, recommended_head: int, lot_name: str = "Lot") -> StockingAdjustment:
    """Decide whether to reduce, increase or keep the animals on a lot."""
    difference = current_head - recommended_head

    if difference > 0:
        action = StockingAction.REDUCE
        if difference > recommended_head * OVERSTOCK_HIGH_PRIORITY_SHARE:
            priority = Priority.HIGH
        else:
            priority = Priority.MEDIUM
        message = (
            f"{lot_name}: overstocked. Has {current_head} animals, recommended {recommended_head}. "
            f"Move {difference} animals to another lot."
        )
    elif difference < -UNDERSTOCK_MARGIN_HEAD:
        action = StockingAction.INCREASE
        priority = Priority.LOW
        message = (
            f"{lot_name}: understocked. Has {current_head} animals, can carry {recommended_head}. "
            f"Room for {-difference} more."
        )
    else:
        action = StockingAction.MAINTAIN
        priority = Priority.LOW
        message = f"{lot_name}: stocking is adequate ({current_head} animals)."

    return StockingAdjustment(
        current_head=current_head,
        recommended_head=recommended_head,
        difference=difference,
        action=action,
        priority=priority,
        message=message,
    )
