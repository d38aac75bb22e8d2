"""
Structured logging configuration.

Provides:
    • JSON-formatted logs for production (machine-parseable)
    • Pretty console logs for development (human-readable)
    • Send-scoped context (correlation_id) restored by token after each send
    • Channel / status / message id rendered by both formatters

Channels never configure logging themselves: they log through the
logger they were constructed with, and the package logger carries a
NullHandler. Applications that want output call setup_logging().

Usage:
    from notification_core.core.logging_config import setup_logging, push_log_context, reset_log_context

    setup_logging()
    token = push_log_context(correlation_id=request.correlation_id)
    try:
        ...
    finally:
        reset_log_context(token)
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from notification_core.core.config import NotificationSettings, get_settings

PACKAGE_LOGGER = "notification_core"

# Extra record attributes copied into JSON output when present
EXTRA_FIELDS = (
    "channel",
    "correlation_id",
    "message_id",
    "recipient_count",
    "status",
    "provider_code",
)

# ── Context variable for send-scoped data ──
_log_context: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> Token:
    """Replace the log context; the returned token restores the previous one."""
    return _log_context.set(kwargs)


def push_log_context(**kwargs: Any) -> Token:
    """Layer values over the current log context for the duration of a send."""
    return _log_context.set({**_log_context.get(), **kwargs})


def reset_log_context(token: Token) -> None:
    _log_context.reset(token)


def get_log_context() -> Dict[str, Any]:
    """Get current log context."""
    return _log_context.get()


def clear_log_context() -> None:
    _log_context.set({})


def notification_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """
    Notification attributes of a record.

    Values passed through ``extra=`` win; the correlation id falls back
    to the send-scoped context when the call site did not pass one.
    """
    fields = {key: getattr(record, key) for key in EXTRA_FIELDS if hasattr(record, key)}
    correlation_id = get_log_context().get("correlation_id")
    if correlation_id and "correlation_id" not in fields:
        fields["correlation_id"] = correlation_id
    return fields


# ── JSON Formatter (Production) ──

class JSONFormatter(logging.Formatter):
    """
    One JSON object per record for log aggregation.

    Notification attributes are grouped under "notification" so a
    pipeline can index channel / status / message_id without parsing
    the message text; any other context values land under "context".
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        fields = notification_fields(record)
        if fields:
            log_entry["notification"] = fields

        other_ctx = {k: v for k, v in get_log_context().items() if k != "correlation_id"}
        if other_ctx:
            log_entry["context"] = other_ctx

        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(log_entry, default=str)


# ── Pretty Formatter (Development) ──

class PrettyFormatter(logging.Formatter):
    """
    Console format for local development:

        14:02:11 INFO     [NTF-9F3A] email   Email sent successfully (status=success)
    """

    COLORS = {
        "DEBUG":    "\033[36m",  # Cyan
        "INFO":     "\033[32m",  # Green
        "WARNING":  "\033[33m",  # Yellow
        "ERROR":    "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        ts = self.formatTime(record, "%H:%M:%S")
        fields = notification_fields(record)

        parts = [f"{color}{ts} {record.levelname:8s}{self.RESET}"]
        if fields.get("correlation_id"):
            parts.append(f"[{str(fields['correlation_id'])[:8]}]")
        parts.append(f"{str(fields.get('channel', '-')):<7s}")
        parts.append(record.getMessage())

        tail = [
            f"{key}={fields[key]}"
            for key in ("status", "provider_code", "recipient_count")
            if fields.get(key) is not None
        ]
        formatted = " ".join(parts)
        if tail:
            formatted += f" ({', '.join(tail)})"

        if record.exc_info and record.exc_info[1]:
            formatted += f"\n  {type(record.exc_info[1]).__name__}: {record.exc_info[1]}"

        return formatted


# ── Setup ──

def setup_logging(settings: Optional[NotificationSettings] = None) -> None:
    """Configure logging based on environment."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    # Remove existing handlers
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)

    if settings.is_production:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(PrettyFormatter())

    root.addHandler(handler)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if settings.ENABLE_LOGGING:
        package_logger.setLevel(logging.NOTSET)
    else:
        package_logger.setLevel(logging.CRITICAL + 1)

