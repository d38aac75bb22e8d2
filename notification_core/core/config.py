"""
Global notification settings — single source of truth for policy values.

Uses pydantic-settings for type-safe config with .env file support.
All values have sensible defaults for local development.

These values are ADVISORY: the core never sleeps, retries or enforces
the timeout. They are consumed as data by the external collaborators
(retry loop, transport layer, metrics exporter).

Usage:
    from notification_core.core.config import get_settings
    settings = get_settings()
    print(settings.MAX_RETRIES, settings.retry_delay)

Environment variables use the NOTIFY_ prefix:
    NOTIFY_MAX_RETRIES=5
    NOTIFY_RETRY_STRATEGY=fixed
"""

from __future__ import annotations

from datetime import timedelta
from enum import Enum
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetryStrategy(str, Enum):
    """How an external retry loop should space its attempts."""
    NONE        = "none"
    FIXED       = "fixed"
    EXPONENTIAL = "exponential"


class OperationMode(str, Enum):
    """Whether callers drive sends synchronously or hand them to a worker."""
    SYNC  = "sync"
    ASYNC = "async"


class NotificationSettings(BaseSettings):
    """
    Notification-wide settings loaded from environment variables or .env file.

    Precedence: env var > .env file > default value
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ──
    ENVIRONMENT: str = "development"  # development | staging | production
    LOG_LEVEL: str = "INFO"  # DEBUG | INFO | WARNING | ERROR | CRITICAL

    # ── Timeouts ──
    GLOBAL_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)

    # ── Retry policy (executed by the caller's retry loop) ──
    MAX_RETRIES: int = Field(default=3, ge=0)
    RETRY_STRATEGY: RetryStrategy = RetryStrategy.EXPONENTIAL
    RETRY_DELAY_SECONDS: float = Field(default=1.0, ge=0)
    MAX_RETRY_DELAY_SECONDS: float = Field(default=60.0, ge=0)

    # ── Feature toggles ──
    ENABLE_LOGGING: bool = True
    ENABLE_METRICS: bool = True
    ENABLE_VALIDATION: bool = True  # advisory; channels always validate
    OPERATION_MODE: OperationMode = OperationMode.SYNC

    @model_validator(mode="after")
    def _check_retry_window(self) -> "NotificationSettings":
        if self.MAX_RETRY_DELAY_SECONDS < self.RETRY_DELAY_SECONDS:
            raise ValueError(
                "MAX_RETRY_DELAY_SECONDS must be >= RETRY_DELAY_SECONDS"
            )
        return self

    @property
    def global_timeout(self) -> timedelta:
        return timedelta(seconds=self.GLOBAL_TIMEOUT_SECONDS)

    @property
    def retry_delay(self) -> timedelta:
        return timedelta(seconds=self.RETRY_DELAY_SECONDS)

    @property
    def max_retry_delay(self) -> timedelta:
        return timedelta(seconds=self.MAX_RETRY_DELAY_SECONDS)

    @property
    def retries_enabled(self) -> bool:
        return self.RETRY_STRATEGY != RetryStrategy.NONE and self.MAX_RETRIES > 0

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> NotificationSettings:
    """Cached settings singleton."""
    return NotificationSettings()
