"""
sms_channel.py — SMS delivery channel.

Delivery mechanism:
    • Carrier / HTTP SMS API (Twilio, AWS SNS, Nexmo) supplied as a transport
    • One transport call per TO recipient
    • CC / BCC recipients are accepted on the request but ignored here

═══════════════════════════════════════════════════════════════════════════
PHONE GRAMMAR
═══════════════════════════════════════════════════════════════════════════

Spaces, hyphens and parentheses are stripped, then the remainder must be
an optional leading "+" followed by 7–15 digits:

    "+57 (300) 123-4567"  → "+573001234567"   valid
    "555-1234"            → "5551234"         valid (7 digits)
    "12345"                                   invalid (too short)

═══════════════════════════════════════════════════════════════════════════
SEGMENTATION
═══════════════════════════════════════════════════════════════════════════

A body longer than max_characters_per_sms is split by the carrier into
ceil(len / max) segments. The count is logged and reported in the result
metadata; it never blocks the send.
"""

from __future__ import annotations

import logging
import math
import re
import uuid
from typing import List, Optional

from notification_core.core.errors import ValidationError
from notification_core.notifications.channel_config import SmsChannelConfig
from notification_core.notifications.channels.base import (
    NotificationChannel,
    SmsTransport,
)
from notification_core.notifications.models import (
    ChannelType,
    Recipient,
    RecipientType,
    Request,
    Result,
)

PHONE_PATTERN = re.compile(r"\+?[0-9]{7,15}")
_PHONE_SEPARATORS = re.compile(r"[\s\-()]")


def is_valid_phone(identifier: Optional[str]) -> bool:
    if not isinstance(identifier, str) or not identifier.strip():
        return False
    cleaned = _PHONE_SEPARATORS.sub("", identifier)
    return PHONE_PATTERN.fullmatch(cleaned) is not None


def format_phone_number(phone: str) -> str:
    """
    Display form of a phone number.

    Numbers already carrying "+" are returned unchanged; a bare 10-digit
    number is assumed North American and gets "+1"; anything else gets "+".
    """
    if phone.startswith("+"):
        return phone
    if len(phone) == 10:
        return "+1" + phone
    return "+" + phone


def segment_count(length: int, max_characters: int) -> int:
    return max(1, math.ceil(length / max_characters))


class SmsChannel(NotificationChannel):
    """SMS channel; sends to TO recipients only."""

    channel_type = ChannelType.SMS
    label = "SMS"
    config_class = SmsChannelConfig
    required_field = "from_number"
    missing_config_message = "From number is required for SMS channel"

    def __init__(
        self,
        config: Optional[SmsChannelConfig] = None,
        *,
        logger: Optional[logging.Logger] = None,
        transport: Optional[SmsTransport] = None,
    ):
        super().__init__(config, logger=logger, transport=transport)

    @property
    def channel_name(self) -> str:
        return f"SmsChannel[{self._config.provider.value}:{self._config.from_number}]"

    # ── Validation ──

    def validate(self, request: Request) -> None:
        self._require_content(request)

        to_recipients = request.recipients_of_type(RecipientType.TO)
        if not to_recipients:
            raise ValidationError("At least one TO recipient is required for SMS")

        for recipient in to_recipients:
            if not is_valid_phone(recipient.identifier):
                raise ValidationError(
                    f"Invalid phone number: {recipient.identifier}",
                    identifier=recipient.identifier,
                )

    def supports(self, request: Request) -> bool:
        return any(
            is_valid_phone(r.identifier)
            for r in request.recipients_of_type(RecipientType.TO)
        )

    # ── Delivery ──

    def _deliver(self, request: Request) -> Result:
        body = request.content.body
        segments = segment_count(len(body), self._config.max_characters_per_sms)
        if len(body) > self._config.max_characters_per_sms:
            self._logger.warning(
                "[SMS] Message length %d exceeds %d characters; will be sent as %d segments",
                len(body), self._config.max_characters_per_sms, segments,
                extra={"channel": self.channel_type.value, "correlation_id": request.correlation_id},
            )

        to_recipients: List[Recipient] = request.recipients_of_type(RecipientType.TO)
        message_id: Optional[str] = None
        for recipient in to_recipients:
            provider_id = self._transport(request, recipient)
            if message_id is None and provider_id:
                message_id = provider_id

        return Result.success(
            message_id or self._generate_message_id(),
            "SMS sent successfully",
            metadata={"segments": segments, "recipients": len(to_recipients)},
        )

    def _simulate_send(self, request: Request, recipient: Recipient) -> Optional[str]:
        cfg = self._config
        self._logger.info(
            "[SMS] Simulating send via %s: %s → %s (%d chars)",
            cfg.provider.value,
            cfg.from_number,
            format_phone_number(recipient.identifier),
            len(request.content.body),
        )
        self._logger.debug("[SMS] Body: %s", request.content.body)
        return None

    @staticmethod
    def _generate_message_id() -> str:
        return "SM" + uuid.uuid4().hex
