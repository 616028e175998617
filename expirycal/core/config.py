"""Application configuration settings."""

import typing as t
from datetime import date

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from expirycal.schemas.urgency import ColorScheme


class AggregationConfig(BaseModel):
    """Options passed explicitly to the calendar pipeline components."""

    model_config = ConfigDict(frozen=True)

    max_indicators_per_date: int = Field(3, ge=0)
    virtualization_threshold: int = Field(100, ge=0)
    debounce_ms: int = Field(300, ge=0)
    reference_date: date | None = None
    soon_days: int = Field(3, ge=0)
    window_size: int = Field(50, ge=1)
    color_scheme: ColorScheme = ColorScheme.DEFAULT


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "Expirycal"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./expirycal.db"

    # Calendar aggregation
    max_indicators_per_date: int = Field(3, ge=0)
    virtualization_threshold: int = Field(100, ge=0)
    debounce_ms: int = Field(300, ge=0)
    reference_date: date | None = None
    soon_days: int = Field(3, ge=0)
    window_size: int = Field(50, ge=1)
    color_scheme: ColorScheme = ColorScheme.DEFAULT

    # How often the calendar is rebuilt so the day cutover is picked up
    calendar_refresh_interval_minutes: int = Field(15, ge=1)

    # CORS
    cors_origins: t.List[str] = ["*"]

    def aggregation_config(self) -> AggregationConfig:
        """Build the aggregation options from these settings.

        Returns:
            AggregationConfig: The options for the calendar pipeline.
        """
        return AggregationConfig(
            max_indicators_per_date=self.max_indicators_per_date,
            virtualization_threshold=self.virtualization_threshold,
            debounce_ms=self.debounce_ms,
            reference_date=self.reference_date,
            soon_days=self.soon_days,
            window_size=self.window_size,
            color_scheme=self.color_scheme,
        )


SETTINGS = Settings()
