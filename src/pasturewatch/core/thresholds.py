"""Threshold and conversion parameters injected into the analytics.

All unit-conversion constants and defaults live here rather than inline in
the formulas. Values come from `Settings` (environment / .env) by default
but callers may build their own.
"""

from dataclasses import dataclass, field

from pasturewatch.core.config import Settings, settings


@dataclass(frozen=True)
class PastureThresholds:
    """Pasture height bands in cm (critical < warning < optimal)."""

    critical_cm: float
    warning_cm: float
    optimal_cm: float

    def __post_init__(self):
        if self.critical_cm < 0:
            raise ValueError(f"critical_cm must be non-negative, got {self.critical_cm}")
        if not self.critical_cm < self.warning_cm < self.optimal_cm:
            raise ValueError(
                "thresholds must satisfy critical < warning < optimal, got "
                f"{self.critical_cm} / {self.warning_cm} / {self.optimal_cm}"
            )


@dataclass(frozen=True)
class AnalyticsConfig:
    """Parameters shared by the stocking, projection and comparison models."""

    forage_kg_per_cm_ha: float = 200.0  # 1 cm of pasture ~ 200 kg DM/ha
    daily_intake_kg: float = 10.0
    utilization_efficiency_pct: float = 70.0
    target_grazing_days: int = 7
    velocity_window_days: int = 30
    projection_window_days: int = 60
    comparison_window_days: int = 30
    # Pre-harvest window for pairing vegetation index with yield (days before harvest)
    index_window_start_days: int = 60
    index_window_end_days: int = 30
    thresholds: PastureThresholds = field(default_factory=lambda: PastureThresholds(5.0, 8.0, 15.0))

    def __post_init__(self):
        if self.forage_kg_per_cm_ha <= 0:
            raise ValueError("forage_kg_per_cm_ha must be positive")
        if self.daily_intake_kg <= 0:
            raise ValueError("daily_intake_kg must be positive")
        if not 0 < self.utilization_efficiency_pct <= 100:
            raise ValueError("utilization_efficiency_pct must be in (0, 100]")
        if self.target_grazing_days <= 0:
            raise ValueError("target_grazing_days must be positive")
        for name in ("velocity_window_days", "projection_window_days", "comparison_window_days"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if not 0 <= self.index_window_end_days < self.index_window_start_days:
            raise ValueError("index window must satisfy 0 <= end < start")

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "AnalyticsConfig":
        """Build the config from application settings."""
        source = source or settings
        return cls(
            forage_kg_per_cm_ha=source.forage_kg_per_cm_ha,
            daily_intake_kg=source.daily_intake_kg,
            utilization_efficiency_pct=source.utilization_efficiency_pct,
            target_grazing_days=source.target_grazing_days,
            velocity_window_days=source.velocity_window_days,
            projection_window_days=source.projection_window_days,
            comparison_window_days=source.comparison_window_days,
            thresholds=PastureThresholds(
                critical_cm=source.critical_height_cm,
                warning_cm=source.warning_height_cm,
                optimal_cm=source.optimal_height_cm,
            ),
        )
