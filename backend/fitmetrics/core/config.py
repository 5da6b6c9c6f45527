"""
Application configuration.
All values loaded from environment variables.
"""
from typing import List, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Record source
    # Optional JSON fixture used to seed the in-memory record source
    FIXTURE_PATH: Optional[str] = None

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or console

    # Strength metrics
    # Supported formulas: epley (weight * (1 + reps/30)), brzycki (weight * 36/(37 - reps))
    E1RM_FORMULA: str = "epley"
    # Sets above this rep count are excluded from max estimation
    E1RM_MAX_REPS: int = 12

    # Streaks: largest gap (in days) between activity days that keeps a run alive
    STREAK_GAP_DAYS: int = 1

    # Cost rollups are rounded to this many decimal places
    COST_DECIMALS: int = 6

    # Default periods and limits
    CONSISTENCY_DAYS: int = 90
    VOLUME_DAYS: int = 30
    COST_SUMMARY_DAYS: int = 30
    ACTIVITY_STATS_DAYS: int = 7
    RECENT_ACTIVITY_LIMIT: int = 20
    TOP_EXERCISES_LIMIT: int = 10
    RECENT_WORKOUTS_LIMIT: int = 5

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
