"""Historical pasture height statistics for a lot."""

from dataclasses import dataclass
from datetime import date
from typing import ClassVar

from pasturewatch.core.models import Measurement, NoData, Result
from pasturewatch.pasture.height import resolve_height


@dataclass(frozen=True)
class HeightHistory(Result):
    """Summary of measured heights over a period."""

    kind: ClassVar[str] = "height_history"

    mean_cm: float
    min_cm: float
    max_cm: float
    records: int
    start: date
    end: date

    @property
    def status(self) -> str:
        return "computed"


def summarize_heights(
    measurements: list[Measurement],
    start: date,
    end: date,
) -> HeightHistory | NoData:
    """Mean, min and max resolvable height between start and end (inclusive)."""
    in_period = [m for m in measurements if start <= m.measured_on <= end]
    if not in_period:
        return NoData("No measurements in the requested period")

    heights = [h for h in (resolve_height(m) for m in in_period) if h is not None]
    if not heights:
        return NoData("Could not resolve heights for the period", records_seen=len(in_period))

    return HeightHistory(
        mean_cm=round(sum(heights) / len(heights), 1),
        min_cm=round(min(heights), 1),
        max_cm=round(max(heights), 1),
        records=len(heights),
        start=start,
        end=end,
    )
