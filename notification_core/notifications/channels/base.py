"""
base.py — Abstract base class for notification channels.

Every channel (Email, SMS, Push) implements the same contract:

    send(request)     → Result       validate, then deliver via transport
    supports(request) → bool         non-throwing pre-filter for routers
    is_available()    → bool         configuration presence, no probing
    channel_type / channel_name      identity for registry and logs

═══════════════════════════════════════════════════════════════════════════
ERROR-SIGNALLING CONTRACT
═══════════════════════════════════════════════════════════════════════════

    Stage          Failure surfaces as
    ──────────     ─────────────────────────────────────────────
    construction   ConfigurationError (raised)
    validation     ValidationError    (raised, before any transport call)
    transport      Result.FAILURE     (any exception)
                   Result.RETRY       (RateLimitError, provider code kept)

Callers therefore guard send() against ValidationError AND inspect the
returned Result. Transport exceptions never escape send().

═══════════════════════════════════════════════════════════════════════════
TRANSPORTS
═══════════════════════════════════════════════════════════════════════════

The wire transport (SMTP client, carrier API, push gateway) is an
injected callable. It returns a provider message id, or None to let the
channel synthesise one, or raises. When no transport is injected the
channel uses its simulate step, which only logs what would be sent.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from notification_core.core.errors import (
    ConfigurationError,
    RateLimitError,
    SendError,
    ValidationError,
)
from notification_core.notifications.channel_config import ChannelConfig
from notification_core.notifications.models import (
    ChannelType,
    Content,
    Recipient,
    RecipientType,
    Request,
    Result,
)

# Transport signatures, one per channel
EmailTransport = Callable[[Request, Dict[RecipientType, List[Recipient]]], Optional[str]]
SmsTransport = Callable[[Request, Recipient], Optional[str]]
PushTransport = Callable[[Request, Recipient, Dict[str, Any]], Optional[str]]


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


class NotificationChannel(ABC):
    """
    Base for delivery channels.

    Subclasses declare:
        channel_type     — ChannelType handled
        label            — human name used in messages ("Email", "SMS")
        config_class     — accepted ChannelConfig model
        required_field   — config attribute that must be non-blank
        missing_config_message — ConfigurationError text when it is blank

    and implement validate(), supports(), _deliver() and channel_name.
    Instances hold only immutable configuration and may be shared.
    """

    channel_type: ChannelType
    label: str
    config_class: type
    required_field: str
    missing_config_message: str

    def __init__(
        self,
        config: Optional[ChannelConfig] = None,
        *,
        logger: Optional[logging.Logger] = None,
        transport: Optional[Callable[..., Optional[str]]] = None,
    ):
        if config is None:
            config = self.config_class()
        if not isinstance(config, self.config_class):
            raise ConfigurationError(
                f"{type(self).__name__} requires {self.config_class.__name__}, "
                f"got {type(config).__name__}"
            )
        self._config = config
        self._logger = logger or logging.getLogger(type(self).__module__)
        self._transport = transport or self._simulate_send
        self._validate_configuration()
        self._logger.info("%s initialized", self.channel_name)

    # ── Configuration ──

    @property
    def config(self) -> ChannelConfig:
        return self._config

    def _validate_configuration(self) -> None:
        if is_blank(getattr(self._config, self.required_field, None)):
            raise ConfigurationError(self.missing_config_message, field=self.required_field)

    def is_available(self) -> bool:
        """Readiness derived from configuration presence only."""
        return not is_blank(getattr(self._config, self.required_field, None))

    # ── Identity ──

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """Descriptive name including the key configuration facts."""

    def get_channel_type(self) -> ChannelType:
        return self.channel_type

    def get_channel_name(self) -> str:
        return self.channel_name

    def __repr__(self) -> str:
        return f"<{self.channel_name}>"

    # ── Contract ──

    @abstractmethod
    def validate(self, request: Request) -> None:
        """Raise ValidationError if this channel cannot accept the request."""

    @abstractmethod
    def supports(self, request: Request) -> bool:
        """Non-throwing pre-filter; agrees with validate() on recipients."""

    @abstractmethod
    def _deliver(self, request: Request) -> Result:
        """Hand a validated request to the transport and build the Result."""

    @abstractmethod
    def _simulate_send(self, request: Request, *args: Any) -> Optional[str]:
        """Default transport: log what would be sent."""

    def send(self, request: Request) -> Result:
        """
        Validate the request, then attempt delivery.

        Raises
        ------
        ValidationError
            The request does not satisfy this channel's rules. Raised
            before any transport attempt.

        Returns
        -------
        Result
            SUCCESS, FAILURE (transport error) or RETRY (rate limited).
        """
        extra = {
            "channel": self.channel_type.value,
            "correlation_id": request.correlation_id,
        }
        self._logger.info(
            "[%s] Send started for request %s",
            self.label.upper(), request.correlation_id, extra=extra,
        )

        self.validate(request)

        try:
            result = self._deliver(request)
        except RateLimitError as exc:
            self._logger.warning(
                "[%s] Rate limited for request %s: %s (retry after %ss)",
                self.label.upper(), request.correlation_id, exc, exc.retry_after,
                extra={**extra, "provider_code": exc.provider_code},
            )
            return Result.retry(
                str(exc),
                exc.provider_code if exc.provider_code is not None else 429,
                metadata={"retry_after": exc.retry_after},
            )
        except Exception as exc:
            self._logger.error(
                "[%s] Error sending request %s: %s",
                self.label.upper(), request.correlation_id, exc, extra=extra,
            )
            provider_code = exc.provider_code if isinstance(exc, SendError) else None
            return Result.failure(
                f"Error sending {self.label}: {exc}",
                provider_code=provider_code,
            )

        self._logger.info(
            "[%s] %s. MessageId: %s",
            self.label.upper(), result.message, result.message_id,
            extra={**extra, "message_id": result.message_id, "status": result.status.value},
        )
        return result

    # ── Shared validation steps ──

    def _require_content(self, request: Request) -> Content:
        content = request.content
        if content is None:
            raise ValidationError(f"{self.label} content is required")
        if not content.has_body:
            raise ValidationError(f"{self.label} body is required")
        return content
