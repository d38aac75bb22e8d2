"""
test_core.py — Tests for the core package: errors, settings, logging.

Run with:
    pytest tests/test_core.py -v
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from notification_core.core.config import (
    NotificationSettings,
    OperationMode,
    RetryStrategy,
    get_settings,
)
from notification_core.core.errors import (
    AuthenticationError,
    ConfigurationError,
    ErrorCategory,
    NotificationError,
    RateLimitError,
    SendError,
    ValidationError,
)
from notification_core.core.logging_config import (
    PACKAGE_LOGGER,
    JSONFormatter,
    PrettyFormatter,
    clear_log_context,
    get_log_context,
    push_log_context,
    reset_log_context,
    set_log_context,
    setup_logging,
)


def _make_record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="notification_core.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def _reset_context():
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def fresh_settings(monkeypatch):
    """Isolate get_settings() from the process environment and cache."""
    for var in ("NOTIFY_MAX_RETRIES", "NOTIFY_RETRY_STRATEGY", "NOTIFY_ENVIRONMENT"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


# ═══════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════

class TestErrorHierarchy:
    """Test the notification exception hierarchy."""

    def test_all_inherit_from_base(self):
        for cls in (ValidationError, ConfigurationError, SendError, RateLimitError, AuthenticationError):
            assert issubclass(cls, NotificationError)

    def test_validation_error_field_prefix(self):
        exc = ValidationError("must not be blank", field="body")
        assert exc.message == "[body] must not be blank"
        assert exc.details == {"field": "body"}
        assert exc.is_validation_error
        assert not exc.is_recoverable

    def test_validation_error_without_field(self):
        exc = ValidationError("Invalid email address: nobody")
        assert str(exc) == "Invalid email address: nobody"
        assert exc.error_code == "VALIDATION_ERROR"

    def test_configuration_error(self):
        exc = ConfigurationError("Email host is required", field="host")
        assert exc.category == ErrorCategory.CONFIGURATION
        assert exc.details == {"field": "host"}
        assert not exc.is_recoverable

    def test_send_error_is_recoverable(self):
        exc = SendError("gateway down", channel_type="sms", provider_code=503)
        assert exc.is_recoverable
        assert exc.provider_code == 503
        assert exc.details == {"channel": "sms", "provider_code": 503}

    def test_rate_limit_defaults(self):
        exc = RateLimitError()
        assert exc.provider_code == 429
        assert exc.retry_after == 60
        assert exc.category == ErrorCategory.RATE_LIMIT
        assert exc.is_recoverable
        assert exc.details["retry_after_seconds"] == 60

    def test_authentication_not_recoverable(self):
        exc = AuthenticationError(provider_code=401)
        assert isinstance(exc, SendError)
        assert not exc.is_recoverable
        assert exc.error_code == "AUTHENTICATION_ERROR"

    def test_to_dict(self):
        body = RateLimitError("slow down", retry_after=5).to_dict()
        assert body["code"] == "RATE_LIMIT_EXCEEDED"
        assert body["message"] == "slow down"
        assert body["category"] == "rate_limit"
        assert body["recoverable"] is True
        assert body["details"]["retry_after_seconds"] == 5

    def test_to_dict_omits_empty_details(self):
        assert "details" not in NotificationError("x").to_dict()


# ═══════════════════════════════════════════════════════════════════════════
# Settings
# ═══════════════════════════════════════════════════════════════════════════

class TestSettings:
    """Test NotificationSettings defaults and environment loading."""

    def test_defaults(self, fresh_settings):
        settings = get_settings()
        assert settings.MAX_RETRIES == 3
        assert settings.RETRY_STRATEGY == RetryStrategy.EXPONENTIAL
        assert settings.OPERATION_MODE == OperationMode.SYNC
        assert settings.global_timeout == timedelta(seconds=30)
        assert settings.retry_delay == timedelta(seconds=1)
        assert settings.max_retry_delay == timedelta(seconds=60)
        assert settings.retries_enabled

    def test_env_override(self, fresh_settings):
        fresh_settings.setenv("NOTIFY_MAX_RETRIES", "5")
        fresh_settings.setenv("NOTIFY_RETRY_STRATEGY", "fixed")
        settings = get_settings()
        assert settings.MAX_RETRIES == 5
        assert settings.RETRY_STRATEGY == RetryStrategy.FIXED

    def test_cached(self, fresh_settings):
        assert get_settings() is get_settings()

    def test_retries_disabled_by_strategy(self):
        assert not NotificationSettings(RETRY_STRATEGY=RetryStrategy.NONE).retries_enabled

    def test_negative_retries_rejected(self):
        with pytest.raises(PydanticValidationError):
            NotificationSettings(MAX_RETRIES=-1)

    def test_retry_window_must_be_ordered(self):
        with pytest.raises(PydanticValidationError):
            NotificationSettings(RETRY_DELAY_SECONDS=10, MAX_RETRY_DELAY_SECONDS=5)

    def test_environment_flags(self):
        assert NotificationSettings(ENVIRONMENT="production").is_production
        assert NotificationSettings(ENVIRONMENT="development").is_development


# ═══════════════════════════════════════════════════════════════════════════
# Logging
# ═══════════════════════════════════════════════════════════════════════════

class TestLogContext:

    def test_set_and_clear(self):
        set_log_context(correlation_id="NTF-ABC")
        assert get_log_context() == {"correlation_id": "NTF-ABC"}
        clear_log_context()
        assert get_log_context() == {}

    def test_push_merges_over_current(self):
        set_log_context(job="nightly-digest")
        token = push_log_context(correlation_id="NTF-ABC")
        assert get_log_context() == {"job": "nightly-digest", "correlation_id": "NTF-ABC"}
        reset_log_context(token)

    def test_reset_restores_outer_context(self):
        set_log_context(job="nightly-digest", correlation_id="NTF-OUTER")
        token = push_log_context(correlation_id="NTF-INNER")
        assert get_log_context()["correlation_id"] == "NTF-INNER"
        reset_log_context(token)
        assert get_log_context() == {"job": "nightly-digest", "correlation_id": "NTF-OUTER"}

    def test_set_returns_restoring_token(self):
        set_log_context(job="a")
        token = set_log_context(job="b")
        reset_log_context(token)
        assert get_log_context() == {"job": "a"}


class TestFormatters:
    """Test JSON and pretty formatters."""

    def test_json_groups_notification_fields(self):
        record = _make_record("sent", channel="email", message_id="<x@y>", status="success")
        entry = json.loads(JSONFormatter().format(record))
        assert entry["message"] == "sent"
        assert entry["notification"] == {
            "channel": "email",
            "message_id": "<x@y>",
            "status": "success",
        }
        assert "channel" not in entry
        assert "context" not in entry

    def test_json_without_fields_omits_group(self):
        entry = json.loads(JSONFormatter().format(_make_record()))
        assert "notification" not in entry
        assert entry["logger"] == "notification_core.test"

    def test_json_correlation_id_from_context(self):
        set_log_context(correlation_id="NTF-123", job="nightly-digest")
        entry = json.loads(JSONFormatter().format(_make_record()))
        assert entry["notification"]["correlation_id"] == "NTF-123"
        assert entry["context"] == {"job": "nightly-digest"}

    def test_json_explicit_correlation_id_wins(self):
        set_log_context(correlation_id="NTF-CTX")
        entry = json.loads(JSONFormatter().format(_make_record(correlation_id="NTF-REC")))
        assert entry["notification"]["correlation_id"] == "NTF-REC"

    def test_json_exception(self):
        try:
            raise ValidationError("Email content is required")
        except ValidationError:
            record = _make_record("failed")
            record.exc_info = sys.exc_info()
        entry = json.loads(JSONFormatter().format(record))
        assert entry["exception"]["type"] == "ValidationError"

    def test_pretty_shows_short_correlation_id(self):
        set_log_context(correlation_id="NTF-ABCDEFGHIJ")
        line = PrettyFormatter().format(_make_record("hi"))
        assert "[NTF-ABCD]" in line
        assert "hi" in line

    def test_pretty_renders_channel_and_status(self):
        record = _make_record(
            "SMS send failed", channel="sms", status="retry", provider_code="429",
        )
        line = PrettyFormatter().format(record)
        assert " sms     SMS send failed" in line
        assert line.endswith("(status=retry, provider_code=429)")
        assert "notification_core.test" not in line

    def test_pretty_placeholder_without_channel(self):
        line = PrettyFormatter().format(_make_record("hi"))
        assert " -       hi" in line
        assert "(" not in line


class TestSetupLogging:
    """Test setup_logging() root / package logger configuration."""

    @pytest.fixture(autouse=True)
    def _restore_loggers(self):
        root = logging.getLogger()
        package = logging.getLogger(PACKAGE_LOGGER)
        saved_handlers, saved_level = root.handlers[:], root.level
        saved_package_level = package.level
        yield
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        package.setLevel(saved_package_level)

    def test_production_uses_json(self):
        setup_logging(NotificationSettings(ENVIRONMENT="production", LOG_LEVEL="WARNING"))
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_development_uses_pretty(self):
        setup_logging(NotificationSettings(ENVIRONMENT="development"))
        assert isinstance(logging.getLogger().handlers[0].formatter, PrettyFormatter)

    def test_disable_logging_silences_package(self):
        setup_logging(NotificationSettings(ENABLE_LOGGING=False))
        assert not logging.getLogger(PACKAGE_LOGGER).isEnabledFor(logging.CRITICAL)
