"""Fetch-and-compute entry point for the yield correlation of a lot."""

from datetime import date, timedelta

from pasturewatch.core.models import NoData
from pasturewatch.core.thresholds import AnalyticsConfig
from pasturewatch.data.sources import Sources
from pasturewatch.satellite.yield_model import CorrelationModel, correlate_yield


async def correlate_lot(
    sources: Sources,
    lot_id: str,
    config: AnalyticsConfig | None = None,
    as_of: date | None = None,
) -> CorrelationModel | NoData:
    """
    Fit index-to-yield regression for a lot from its full harvest history.

    Index readings are fetched from the pre-harvest window of the earliest
    harvest up to as_of (default today); the latest one drives the projection.
    """
    config = config or AnalyticsConfig()
    yields = await sources.yields.fetch(lot_id)
    if not yields:
        return NoData("No historical harvest data to correlate")

    as_of = as_of or date.today()
    start = min(y.harvested_on for y in yields) - timedelta(days=config.index_window_start_days)
    samples = await sources.vegetation.fetch(lot_id, start, as_of)

    return correlate_yield(
        samples,
        yields,
        window_start_days=config.index_window_start_days,
        window_end_days=config.index_window_end_days,
    )
