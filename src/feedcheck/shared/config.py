"""
Shared Configuration - Settings and Environment Management
Centralized configuration management for feedcheck.

This module provides:
- Environment-based configuration (prefix FEEDCHECK_, optional .env file)
- Type-safe settings with validation
- HTTP fetcher settings (user agents, timeout)
- Validation and monitoring settings
"""
from typing import Optional
from enum import Enum

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class LogLevel(str, Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Console log output formats."""
    JSON = "json"
    COLORED = "colored"
    STANDARD = "standard"


class FetcherSettings(BaseSettings):
    """HTTP fetcher configuration settings."""

    model_config = SettingsConfigDict(env_prefix="FEEDCHECK_", env_file=".env", case_sensitive=False, extra="ignore")

    default_user_agent: str = Field("AI-Feed-Consolidator/1.0")
    fallback_user_agent: str = Field("Mozilla/5.0 (compatible)")
    timeout_millis: int = Field(10000)
    accept_header: str = Field("application/rss+xml, application/atom+xml, application/xml, text/xml")

    @field_validator("timeout_millis")
    @classmethod
    def validate_timeout(cls, v):
        if not 1 <= v <= 300000:
            raise ValueError("Timeout must be between 1 and 300000 milliseconds")
        return v

    @field_validator("default_user_agent", "fallback_user_agent")
    @classmethod
    def validate_user_agent(cls, v):
        if not v.strip():
            raise ValueError("User agent must not be empty")
        return v.strip()


class ValidationSettings(BaseSettings):
    """Batch validation and health tracking settings."""

    model_config = SettingsConfigDict(env_prefix="FEEDCHECK_", env_file=".env", case_sensitive=False, extra="ignore")

    # Unset means every URL of a batch is validated at once
    max_concurrency: Optional[int] = Field(None)
    permanent_failure_threshold: int = Field(3)

    @field_validator("max_concurrency")
    @classmethod
    def validate_max_concurrency(cls, v):
        if v is not None and v < 1:
            raise ValueError("Max concurrency must be at least 1")
        return v

    @field_validator("permanent_failure_threshold")
    @classmethod
    def validate_threshold(cls, v):
        if v < 1:
            raise ValueError("Permanent failure threshold must be at least 1")
        return v


class MonitoringSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="FEEDCHECK_", env_file=".env", case_sensitive=False, extra="ignore")

    log_level: LogLevel = Field(LogLevel.INFO)
    log_format: LogFormat = Field(LogFormat.COLORED)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(env_prefix="FEEDCHECK_", env_file=".env", case_sensitive=False, extra="ignore")

    fetcher: FetcherSettings = Field(default_factory=FetcherSettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings, loading them from the environment on first use.

    Raises:
        ConfigurationError: If any setting fails validation
    """
    global _settings
    if _settings is None:
        try:
            _settings = Settings()
        except ValidationError as e:
            raise ConfigurationError(f"Invalid feedcheck configuration: {e}") from e
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next access re-reads the environment."""
    global _settings
    _settings = None


def get_fetcher_settings() -> FetcherSettings:
    """Get HTTP fetcher settings."""
    return get_settings().fetcher


def get_validation_settings() -> ValidationSettings:
    """Get validation settings."""
    return get_settings().validation


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return get_settings().monitoring


def get_config_summary() -> dict:
    """
    Get a summary of the current configuration.

    Returns:
        Dictionary with configuration summary
    """
    settings = get_settings()
    return {
        "fetcher": {
            "default_user_agent": settings.fetcher.default_user_agent,
            "fallback_user_agent": settings.fetcher.fallback_user_agent,
            "timeout_millis": settings.fetcher.timeout_millis,
        },
        "validation": {
            "max_concurrency": settings.validation.max_concurrency,
            "permanent_failure_threshold": settings.validation.permanent_failure_threshold,
        },
        "monitoring": {
            "log_level": settings.monitoring.log_level.value,
            "log_format": settings.monitoring.log_format.value,
        },
    }
