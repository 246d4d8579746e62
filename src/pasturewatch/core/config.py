from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# .env file sits in the project root (parent of src/)
# Only use if it exists (CI uses environment variables directly)
# Path: core/config.py -> pasturewatch -> src -> project root -> .env
_ENV_FILE = Path(__file__).parent.parent.parent.parent / ".env"
_ENV_FILE = _ENV_FILE if _ENV_FILE.exists() else None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Hosted relational store (PostgREST-compatible REST endpoint)
    store_url: str = "http://localhost:54321"
    store_api_key: str | None = None
    premise_id: str | None = None  # Default premise for compare/rainfall commands

    # Forage conversion and intake defaults
    forage_kg_per_cm_ha: float = 200.0  # kg DM per cm of height per hectare
    daily_intake_kg: float = 10.0  # kg DM per animal per day
    utilization_efficiency_pct: float = 70.0
    target_grazing_days: int = 7

    # Lookback windows (days)
    velocity_window_days: int = 30
    projection_window_days: int = 60
    comparison_window_days: int = 30

    # Pasture height bands (cm); must satisfy critical < warning < optimal
    critical_height_cm: float = 5.0
    warning_height_cm: float = 8.0
    optimal_height_cm: float = 15.0

    # Caller-side result cache lifetime
    cache_ttl_seconds: float = 300.0

    # Display units for CLI output ("metric" = cm/ha/kg, "imperial" = in/ac/lb)
    display_units: Literal["imperial", "metric"] = "metric"


settings = Settings()
