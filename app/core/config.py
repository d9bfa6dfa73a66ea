"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"

    # Database
    DATABASE_URL: str

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"

    # Warranty analytics
    BUSINESS_TIMEZONE: str = "America/Los_Angeles"  # Aware timestamps are bucketed into dates here
    ACTIVE_HOMEOWNER_WINDOW_DAYS: int = 365
    CYCLE_TIME_EXCLUDE_HOLIDAYS: bool = False  # Skip US federal holidays when counting business days
    CYCLE_TIME_SERVICE_ORDERS_ONLY: bool = False  # Only "service order" subcontractor messages start the clock
    CYCLE_TIME_MAX_INTERVAL_DAYS: int = 3650  # Longer spans are excluded as data-entry errors

    # Bulk operations
    BULK_DELETE_MAX: int = 500

    # Rate limiting (slowapi; storage may be memory:// or a redis:// URL)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    RATE_LIMIT_BULK: str = "10/minute"  # Export and bulk delete

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
