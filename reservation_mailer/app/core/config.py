from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings sourced from environment variables."""

    RESTAURANT_EMAIL: str | None = None  # operator inbox, e.g. bookings@bistro.example

    # "smtp" (username/password transport) or "sendgrid" (API key)
    EMAIL_BACKEND: str = "smtp"

    # SMTP transport
    EMAIL_SERVICE: str = "gmail"
    EMAIL_USER: str | None = None  # falls back to RESTAURANT_EMAIL
    EMAIL_PASSWORD: str | None = None
    SMTP_HOST: str | None = None  # overrides EMAIL_SERVICE when set
    SMTP_PORT: int | None = None
    SMTP_USE_SSL: bool | None = None

    # SendGrid API
    SENDGRID_API_KEY: str | None = None
    SENDGRID_FROM_EMAIL: str = "reservations@example.com"  # must be a verified sender

    RESTAURANT_NAME: str = "Restaurant Name"
    RESTAURANT_PHONE: str = "(123) 456-7890"
    RESTAURANT_ADDRESS: str = "123 Main Street • City, State 12345"

    # None keeps the per-backend behaviour
    STRICT_EMAIL_VALIDATION: bool | None = None

    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("EMAIL_BACKEND", "EMAIL_SERVICE", "ENVIRONMENT")
    @classmethod
    def _lowercase(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        upper = value.upper()
        if upper not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(sorted(valid))}")
        return upper

    @property
    def expose_error_details(self) -> bool:
        return self.ENVIRONMENT == "development"


@lru_cache
def get_settings() -> Settings:
    """Build the settings once per process and reuse them for every request."""
    return Settings()
