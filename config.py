"""Application configuration."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_env: str = "development"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./demurrage.db"
    redis_url: str = "redis://localhost:6379/0"

    # Free time and risk window
    default_free_days: int = 7
    at_risk_threshold_days: int = 3

    # Shipments whose destination carries this country code are imports
    domestic_country_code: str = "BR"
    business_timezone: str = "America/Sao_Paulo"

    # Invoicing
    invoice_currency: str = "USD"
    invoice_due_days: int = 30
    invoice_reference_prefix: str = "DEM"

    # Re-evaluation interval (minutes)
    evaluation_interval_minutes: int = 60

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.app_env == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.app_env == "testing"

    def validate_required_settings(self) -> list[str]:
        """
        Validate configured values.

        Returns:
            List of invalid settings
        """
        errors = []

        if not self.database_url:
            errors.append("DATABASE_URL is required")

        if self.default_free_days < 1:
            errors.append("default_free_days must be at least 1")

        if self.at_risk_threshold_days < 0:
            errors.append("at_risk_threshold_days must be non-negative")

        if not self.domestic_country_code:
            errors.append("domestic_country_code is required")

        if len(self.invoice_currency) != 3:
            errors.append("invoice_currency must be a 3-letter ISO code")

        if self.invoice_due_days < 0:
            errors.append("invoice_due_days must be non-negative")

        if self.evaluation_interval_minutes <= 0:
            errors.append("evaluation_interval_minutes must be positive")

        return errors


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
