"""Configuration management using Pydantic Settings."""

from datetime import tzinfo
from typing import Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    # Ingestion
    crypto_directory_path: str = "data/prices"
    crypto_scan_interval_seconds: float = Field(default=60.0, gt=0)
    crypto_timezone: Optional[str] = None

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_requests: int = Field(default=100, gt=0)
    rate_limit_duration_minutes: int = Field(default=1, gt=0)
    rate_limit_trust_forwarded_for: bool = False

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "console"

    @field_validator("crypto_timezone")
    @classmethod
    def _known_zone(cls, value: Optional[str]) -> Optional[str]:
        if value:
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise ValueError(f"Unknown time zone: {value!r}") from exc
        return value or None

    def ingestion_tz(self) -> Optional[tzinfo]:
        """Zone used to convert epoch timestamps; None means the host's local zone."""
        return ZoneInfo(self.crypto_timezone) if self.crypto_timezone else None


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
