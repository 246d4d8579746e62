"""Pasture height analytics.

This module provides:
- Height aggregation and status indicators (height.py)
- Growth velocity from dated measurements (velocity.py)
- Trend classification and confidence (trend.py)
- Days-to-remnant projection (depletion.py)
- Stocking rate and adjustment (stocking.py)
- Lot ranking by forage on offer (comparison.py)
- Historical height statistics (history.py)
- Fetch-and-compute entry points (api.py)
- Unified CLI (cli.py)
"""

from pasturewatch.pasture.api import (
    LotStatistics,
    compare_lots,
    get_lot_statistics,
    height_history,
    project_lot,
    stocking_for_lot,
    trend_for_lot,
    velocity_for_lot,
)
from pasturewatch.pasture.comparison import LotRanking, LotSnapshot, MarginStatus, margin_status, rank_lots
from pasturewatch.pasture.depletion import DepletionStatus, ProjectionResult, project_depletion
from pasturewatch.pasture.height import (
    HeightBand,
    HeightIndicator,
    HeightStatus,
    average_height,
    classify_height,
    height_status,
    resolve_height,
)
from pasturewatch.pasture.history import HeightHistory, summarize_heights
from pasturewatch.pasture.stocking import (
    Priority,
    StockingAction,
    StockingAdjustment,
    StockingRecommendation,
    StockingStatus,
    adjust_stocking,
    recommend_stocking,
)
from pasturewatch.pasture.trend import Trend, TrendAssessment, assess_trend, classify_trend, trend_confidence
from pasturewatch.pasture.velocity import PairRate, VelocityResult, estimate_velocity

__all__ = [
    # height
    "average_height",
    "resolve_height",
    "height_status",
    "classify_height",
    "HeightStatus",
    "HeightIndicator",
    "HeightBand",
    # velocity / trend
    "estimate_velocity",
    "VelocityResult",
    "PairRate",
    "classify_trend",
    "trend_confidence",
    "assess_trend",
    "Trend",
    "TrendAssessment",
    # depletion
    "project_depletion",
    "ProjectionResult",
    "DepletionStatus",
    # stocking
    "recommend_stocking",
    "adjust_stocking",
    "StockingRecommendation",
    "StockingAdjustment",
    "StockingStatus",
    "StockingAction",
    "Priority",
    # comparison
    "rank_lots",
    "margin_status",
    "LotSnapshot",
    "LotRanking",
    "MarginStatus",
    # history
    "summarize_heights",
    "HeightHistory",
    # api
    "velocity_for_lot",
    "trend_for_lot",
    "project_lot",
    "stocking_for_lot",
    "compare_lots",
    "height_history",
    "get_lot_statistics",
    "LotStatistics",
]
