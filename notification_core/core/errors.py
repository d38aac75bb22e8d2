"""
Centralised error handling — exception hierarchy + error categories.

Provides:
    • Notification-specific exception classes
    • A recoverability flag callers use to decide whether to resubmit
    • Consistent dict error body for logs and API layers

Usage:
    from notification_core.core.errors import (
        NotificationError,
        ValidationError,
        ConfigurationError,
        SendError,
        RateLimitError,
        AuthenticationError,
    )

    raise ValidationError("Invalid email address: nobody", field="recipients")

═══════════════════════════════════════════════════════════════════════════
ERROR TAXONOMY
═══════════════════════════════════════════════════════════════════════════

    Category          Raised when                              Recoverable
    ──────────        ─────────────────────────────────        ───────────
    VALIDATION        request fails a channel's checks         no
    CONFIGURATION     channel built with missing fields        no
    SEND_ERROR        transport failure after validation       yes
    RATE_LIMIT        transport reports throttling             yes
    AUTHENTICATION    transport rejects credentials            no
    GENERAL           uncategorized                            no

VALIDATION and CONFIGURATION surface as raised exceptions. The transport
categories are captured by the channels and turned into Result values;
RATE_LIMIT and AUTHENTICATION are only ever raised by real transports
plugged in underneath a channel.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """Failure categories of the notification core."""
    GENERAL        = "general"
    VALIDATION     = "validation"
    SEND_ERROR     = "send_error"
    RATE_LIMIT     = "rate_limit"
    AUTHENTICATION = "authentication"
    CONFIGURATION  = "configuration"


_RECOVERABLE_CATEGORIES = frozenset({ErrorCategory.SEND_ERROR, ErrorCategory.RATE_LIMIT})


# ═══════════════════════════════════════════════════════════════════════════
# Exception Hierarchy
# ═══════════════════════════════════════════════════════════════════════════

class NotificationError(Exception):
    """Base exception for all notification errors."""

    def __init__(
        self,
        message: str = "An unexpected notification error occurred",
        *,
        error_code: str = "NOTIFICATION_ERROR",
        category: ErrorCategory = ErrorCategory.GENERAL,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.category = category
        self.details = details or {}

    @property
    def is_recoverable(self) -> bool:
        return self.category in _RECOVERABLE_CATEGORIES

    @property
    def is_validation_error(self) -> bool:
        return self.category == ErrorCategory.VALIDATION

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "code": self.error_code,
            "message": self.message,
            "category": self.category.value,
            "recoverable": self.is_recoverable,
        }
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(NotificationError):
    """Request rejected by a channel's structural or grammar checks."""

    def __init__(self, message: str, *, field: Optional[str] = None, **details: Any):
        d = {**details}
        if field:
            d["field"] = field
            message = f"[{field}] {message}"
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            category=ErrorCategory.VALIDATION,
            details=d,
        )


class ConfigurationError(NotificationError):
    """Channel constructed without a required configuration field."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            category=ErrorCategory.CONFIGURATION,
            details={"field": field} if field else None,
        )


class SendError(NotificationError):
    """Transport-level failure after validation passed."""

    def __init__(
        self,
        message: str,
        *,
        channel_type: Optional[str] = None,
        provider_code: Optional[int] = None,
        error_code: str = "SEND_ERROR",
        category: ErrorCategory = ErrorCategory.SEND_ERROR,
        **details: Any,
    ):
        d = {**details}
        if channel_type:
            d["channel"] = channel_type
        if provider_code is not None:
            d["provider_code"] = provider_code
        super().__init__(
            message=message,
            error_code=error_code,
            category=category,
            details=d,
        )
        self.channel_type = channel_type
        self.provider_code = provider_code


class RateLimitError(SendError):
    """Transport reports throttling (429)."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        *,
        channel_type: Optional[str] = None,
        retry_after: int = 60,
        provider_code: Optional[int] = 429,
    ):
        super().__init__(
            message,
            channel_type=channel_type,
            provider_code=provider_code,
            error_code="RATE_LIMIT_EXCEEDED",
            category=ErrorCategory.RATE_LIMIT,
            retry_after_seconds=retry_after,
        )
        self.retry_after = retry_after


class AuthenticationError(SendError):
    """Transport rejected the channel's credentials."""

    def __init__(
        self,
        message: str = "Authentication failed",
        *,
        channel_type: Optional[str] = None,
        provider_code: Optional[int] = None,
    ):
        super().__init__(
            message,
            channel_type=channel_type,
            provider_code=provider_code,
            error_code="AUTHENTICATION_ERROR",
            category=ErrorCategory.AUTHENTICATION,
        )
