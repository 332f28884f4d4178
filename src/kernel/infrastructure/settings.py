"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class DomainEventsSettings(BaseSettings):
    """Domain events broker settings.

    The broker's registries are unbounded; these thresholds only control
    when growth is reported.

    Environment variables:
        DOMAIN_KERNEL_EVENTS_PENDING_AGGREGATES_WARNING_THRESHOLD: Warn when more
            aggregates than this await dispatch (default: 1000)
        DOMAIN_KERNEL_EVENTS_PENDING_EVENTS_WARNING_THRESHOLD: Warn when one
            aggregate buffers this many events (default: 1000)
    """

    model_config = SettingsConfigDict(
        env_prefix="DOMAIN_KERNEL_EVENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    pending_aggregates_warning_threshold: int = Field(
        default=1000,
        description="Pending aggregate count that triggers a warning",
        ge=1,
    )
    pending_events_warning_threshold: int = Field(
        default=1000,
        description="Per-aggregate pending event count that triggers a warning",
        ge=1,
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections.

    Environment variables:
        DOMAIN_KERNEL_APP_NAME: Application name (default: domain-kernel)
        DOMAIN_KERNEL_DEBUG: Debug mode (default: false)
        DOMAIN_KERNEL_LOG_LEVEL: Minimum log level (default: INFO)
    """

    model_config = SettingsConfigDict(
        env_prefix="DOMAIN_KERNEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="domain-kernel", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Minimum log level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalize and validate the log level name."""
        normalized = value.strip().upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {value!r}"
            )
        return normalized

    @property
    def events(self) -> DomainEventsSettings:
        """Get domain events settings."""
        return get_domain_events_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_domain_events_settings() -> DomainEventsSettings:
    """Get cached domain events settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DomainEventsSettings()
