# src/wellcoach/config.py
"""
Application settings, loaded from the environment and an optional `.env` file.

Coaching goals live here as well so the aggregator and the dashboard read the
same numbers.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment / DB
    ENV: str = Field(default="dev")
    DATABASE_URL: str = Field(default="sqlite:///./dev.db")
    AUTO_CREATE_TABLES: bool = True

    # API / Security
    CORS_ORIGINS: str = "*"
    JWT_SECRET: str = "change-me-please"
    JWT_ALG: str = "HS256"

    # Billing webhooks
    BILLING_WEBHOOK_SECRET: str | None = None
    BILLING_WEBHOOK_TOLERANCE_SECONDS: int = 300

    # Recommendations
    RECOMMENDATIONS_INLINE: bool = True
    RECOMMENDATION_TIMEOUT_MS: int = 2000
    RECOMMENDATION_TTL_DAYS: int = 7
    DASHBOARD_TOP_RECOMMENDATIONS: int = 3

    # Module events
    EVENT_CLOCK_SKEW_SECONDS: int = 300

    # Coaching goals
    TRAINING_WEEKLY_GOAL_SESSIONS: int = 5
    NUTRITION_DAILY_GOAL_CALORIES: int = 2000
    MENTAL_WEEKLY_GOAL_SESSIONS: int = 7
    # Weekly goal, compared against the minutes summed over the trailing week.
    PRODUCTIVITY_WEEKLY_GOAL_MINUTES: int = 240

    # Observability
    METRICS_ENABLED: bool = True


settings = Settings()
