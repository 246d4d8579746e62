"""Fetch-and-compute entry point for premise rainfall."""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import ClassVar

from pasturewatch.core.models import NoData, Result
from pasturewatch.data.sources import Sources
from pasturewatch.weather.rainfall import (
    MonthlyRainfall,
    RainfallDeficit,
    RainfallExcess,
    SeasonClassification,
    accumulated_rainfall,
    classify_season,
    days_without_rain,
    detect_deficit,
    detect_excess,
    in_period,
    monthly_totals,
    season_of,
    season_range,
)

logger = logging.getLogger(__name__)

HISTORY_SEASONS = 5


@dataclass(frozen=True)
class RainfallSummary(Result):
    """Rainfall overview for a premise as of a date."""

    kind: ClassVar[str] = "rainfall_summary"

    premise_id: str
    as_of: date
    last_30_days_mm: float
    season_name: str
    season_to_date_mm: float
    days_without_rain: int
    deficit: RainfallDeficit
    excess: RainfallExcess
    season: SeasonClassification | NoData
    seasons_compared: int
    months: tuple[MonthlyRainfall, ...]

    @property
    def status(self) -> str:
        return self.deficit.status


def same_period_mean(records, season_start_year: int, elapsed_days: int, seasons: int) -> tuple[float | None, int]:
    """Mean rainfall over the same part of earlier seasons.

    Seasons without any records are left out. Returns (mean, seasons used).
    """
    totals = []
    for back in range(1, seasons + 1):
        start = season_range(season_start_year - back).start
        window = in_period(records, start, start + timedelta(days=elapsed_days))
        if not window:
            logger.debug("No rainfall records for season starting %s", start.year)
            continue
        totals.append(accumulated_rainfall(window))
    if not totals:
        return None, 0
    return sum(totals) / len(totals), len(totals)


async def rainfall_summary(
    sources: Sources,
    premise_id: str,
    as_of: date | None = None,
    history_seasons: int = HISTORY_SEASONS,
) -> RainfallSummary | NoData:
    """
    Totals, dry spell, deficit/excess and season classification for a premise.

    The current season to date is compared with the same elapsed period of up
    to history_seasons earlier seasons.
    """
    as_of = as_of or date.today()
    season = season_of(as_of)
    start = season_range(season.start_year - history_seasons).start
    records = await sources.rainfall.fetch(premise_id, start, as_of)
    if not records:
        return NoData("No rainfall records for this premise")

    to_date = in_period(records, season.start, as_of)
    elapsed = (as_of - season.start).days
    mean, used = same_period_mean(records, season.start_year, elapsed, history_seasons)
    season_total = accumulated_rainfall(to_date)

    return RainfallSummary(
        premise_id=premise_id,
        as_of=as_of,
        last_30_days_mm=round(accumulated_rainfall(in_period(records, as_of - timedelta(days=30), as_of)), 1),
        season_name=season.name,
        season_to_date_mm=round(season_total, 1),
        days_without_rain=days_without_rain(records, as_of),
        deficit=detect_deficit(records, as_of=as_of),
        excess=detect_excess(records, as_of=as_of),
        season=classify_season(season_total, mean),
        seasons_compared=used,
        months=tuple(monthly_totals(to_date)),
    )
