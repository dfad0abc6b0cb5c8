"""Application configuration using pydantic-settings."""

import warnings
from decimal import Decimal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from studiorent.engine.policy import DEFAULT_DISCOUNT_TIERS, BookingPolicy, CleaningFeePolicy

_INSECURE_JWT_DEFAULT = "change-me-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Studio Rent"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"  # development, staging, production

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database (single-file SQLite by default; PostgreSQL via asyncpg also works)
    database_url: str = "sqlite+aiosqlite:///./studiorent.db"
    create_tables_on_startup: bool = True

    # JWT Auth (admin back office)
    jwt_secret_key: str = _INSECURE_JWT_DEFAULT
    jwt_algorithm: str = "HS256"
    jwt_admin_token_expire_hours: int = 24
    admin_cookie_name: str = "admin_session"
    # bcrypt hash of the admin password; empty disables admin login
    admin_password_hash: str = ""

    # Stripe
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    currency: str = "sar"

    # Frontend
    frontend_url: str = "http://localhost:3000"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Booking policy
    min_stay_days: int = 30
    min_gap_fill_days: int = 7
    max_stay_days: int = 1080
    cleaning_buffer_days: int = 2
    cleaning_weekly_rate: Decimal = Decimal("50")
    cleaning_monthly_rate: Decimal = Decimal("200")
    cleaning_monthly_threshold_days: int = 30
    currency_quantum: Decimal = Decimal("0.01")
    # Client-submitted totals may differ from the server price by at most this much
    max_price_difference: Decimal = Decimal("50")
    bank_transfer_expiry_minutes: int = 60

    @model_validator(mode="after")
    def _ensure_frontend_in_cors(self) -> "Settings":
        """Ensure the configured frontend_url is always in cors_origins."""
        if self.frontend_url and self.frontend_url not in self.cors_origins:
            self.cors_origins.append(self.frontend_url)
        return self

    @model_validator(mode="after")
    def _validate_secrets(self) -> "Settings":
        """Reject insecure JWT secret in production and warn in development."""
        if self.jwt_secret_key == _INSECURE_JWT_DEFAULT:
            if self.environment == "production":
                raise ValueError(
                    "JWT_SECRET_KEY must be set to a strong random value in production. "
                    'Generate one with: python -c "import secrets; print(secrets.token_urlsafe(64))"'
                )
            warnings.warn(
                "Using default JWT secret, which is only acceptable for local development. "
                "Set JWT_SECRET_KEY in your .env file.",
                UserWarning,
                stacklevel=1,
            )
        return self

    @model_validator(mode="after")
    def _validate_policy(self) -> "Settings":
        if self.min_gap_fill_days > self.min_stay_days:
            raise ValueError("MIN_GAP_FILL_DAYS cannot exceed MIN_STAY_DAYS")
        if self.cleaning_buffer_days < 0:
            raise ValueError("CLEANING_BUFFER_DAYS cannot be negative")
        return self

    @property
    def async_database_url(self) -> str:
        """Ensure a PostgreSQL URL uses the asyncpg driver."""
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    def booking_policy(self) -> BookingPolicy:
        """Engine policy built from the configured business constants."""
        return BookingPolicy(
            discount_tiers=DEFAULT_DISCOUNT_TIERS,
            cleaning=CleaningFeePolicy(
                weekly_rate=self.cleaning_weekly_rate,
                monthly_rate=self.cleaning_monthly_rate,
                monthly_threshold_days=self.cleaning_monthly_threshold_days,
            ),
            min_stay_days=self.min_stay_days,
            min_gap_fill_days=self.min_gap_fill_days,
            max_stay_days=self.max_stay_days,
            cleaning_buffer_days=self.cleaning_buffer_days,
            currency_quantum=self.currency_quantum,
        )


settings = Settings()
