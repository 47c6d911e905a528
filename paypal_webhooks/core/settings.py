"""Application settings with Pydantic validation."""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .enums import PayPalEnvironment

DEFAULT_CERT_ORIGINS = ",".join(env.cert_origin for env in PayPalEnvironment)


class WebhookSettings(BaseSettings):
    """Webhook verification settings, read from PAYPAL_* environment variables."""

    webhook_id: Optional[str] = Field(
        default=None,
        description=(
            "Webhook ID from the PayPal developer dashboard. "
            "Use the literal WEBHOOK_ID for Webhook Simulator deliveries."
        ),
    )

    # Certificate handling
    cert_cache_size: int = Field(
        default=10, ge=1, description="Number of signing keys kept in the LRU cache"
    )
    cert_fetch_timeout: float = Field(
        default=10.0, gt=0, description="Certificate download timeout in seconds"
    )
    allowed_cert_origins: str = Field(
        default=DEFAULT_CERT_ORIGINS,
        description="Comma-separated URL prefixes certificates may be fetched from",
    )

    # Logging
    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_json: bool = Field(default=False, description="Emit serialized JSON logs")

    model_config = SettingsConfigDict(
        env_prefix="PAYPAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("allowed_cert_origins")
    @classmethod
    def validate_cert_origins(cls, v: str) -> str:
        """Every origin must be an https prefix ending in a slash."""
        origins = [origin.strip() for origin in v.split(",") if origin.strip()]
        if not origins:
            raise ValueError("At least one certificate origin is required")
        for origin in origins:
            if not origin.startswith("https://") or not origin.endswith("/"):
                raise ValueError(
                    f"Certificate origin must start with https:// and end with '/': {origin}"
                )
        return ",".join(origins)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f'LOG_LEVEL must be one of: {", ".join(allowed)}')
        return v_upper

    def get_cert_origins(self) -> List[str]:
        """
        Get allowed certificate origins as a list.

        Returns:
            List of URL prefixes
        """
        return self.allowed_cert_origins.split(",")


# Singleton instance
_settings: Optional[WebhookSettings] = None


def get_settings() -> WebhookSettings:
    """
    Get application settings singleton.

    Returns:
        WebhookSettings instance

    Raises:
        ValidationError: If settings are invalid
    """
    global _settings
    if _settings is None:
        _settings = WebhookSettings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
