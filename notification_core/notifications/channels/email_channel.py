"""
email_channel.py — Email delivery channel.

Delivery mechanism:
    • SMTP-style transport (host, port, TLS) supplied by the caller
    • TO / CC / BCC recipients handed to the transport in a single call
    • Message id synthesised as <hex32@sender-domain> when the transport
      does not return one

═══════════════════════════════════════════════════════════════════════════
VALIDATION ORDER
═══════════════════════════════════════════════════════════════════════════

    1. content present                 "Email content is required"
    2. body present and non-blank      "Email body is required"
    3. at least one recipient          "At least one recipient is required for email"
    4. EVERY identifier is an address  "Invalid email address: <id>"

supports() applies rule 3 and rule 4 without raising, so a router that
pre-filters with supports() never hits a recipient ValidationError.
"""

from __future__ import annotations

import logging
import re
import uuid
from typing import Dict, List, Optional

from notification_core.core.errors import ValidationError
from notification_core.notifications.channel_config import EmailChannelConfig
from notification_core.notifications.channels.base import (
    EmailTransport,
    NotificationChannel,
)
from notification_core.notifications.models import (
    ChannelType,
    Recipient,
    RecipientType,
    Request,
    Result,
)

EMAIL_PATTERN = re.compile(r"[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")


def is_valid_email(identifier: Optional[str]) -> bool:
    """True if the identifier is a local-part@domain.tld address."""
    return isinstance(identifier, str) and EMAIL_PATTERN.fullmatch(identifier) is not None


def group_by_type(recipients) -> Dict[RecipientType, List[Recipient]]:
    groups: Dict[RecipientType, List[Recipient]] = {rt: [] for rt in RecipientType}
    for recipient in recipients:
        groups[recipient.type].append(recipient)
    return groups


class EmailChannel(NotificationChannel):
    """Email channel backed by an SMTP-style transport."""

    channel_type = ChannelType.EMAIL
    label = "Email"
    config_class = EmailChannelConfig
    required_field = "host"
    missing_config_message = "Email host is required"

    def __init__(
        self,
        config: Optional[EmailChannelConfig] = None,
        *,
        logger: Optional[logging.Logger] = None,
        transport: Optional[EmailTransport] = None,
    ):
        super().__init__(config, logger=logger, transport=transport)

    @property
    def channel_name(self) -> str:
        return f"EmailChannel[{self._config.host}]"

    # ── Validation ──

    def validate(self, request: Request) -> None:
        self._require_content(request)

        if not request.has_recipients:
            raise ValidationError("At least one recipient is required for email")

        for recipient in request.recipients:
            if not is_valid_email(recipient.identifier):
                raise ValidationError(
                    f"Invalid email address: {recipient.identifier}",
                    identifier=recipient.identifier,
                )

    def supports(self, request: Request) -> bool:
        return request.has_recipients and all(
            is_valid_email(r.identifier) for r in request.recipients
        )

    # ── Delivery ──

    def _deliver(self, request: Request) -> Result:
        groups = group_by_type(request.recipients)
        provider_id = self._transport(request, groups)
        message_id = provider_id or self._generate_message_id()
        return Result.success(
            message_id,
            "Email sent successfully",
            metadata={rt.value: len(groups[rt]) for rt in RecipientType},
        )

    def _simulate_send(
        self, request: Request, groups: Dict[RecipientType, List[Recipient]]
    ) -> Optional[str]:
        content = request.content
        cfg = self._config

        self._logger.info(
            "[EMAIL] Simulating send via %s:%s (TLS=%s)",
            cfg.host, cfg.port, cfg.use_tls,
        )
        self._logger.info("[EMAIL] From: %s <%s>", cfg.from_name or "", cfg.from_address or "")
        for recipient_type in RecipientType:
            addresses = [r.identifier for r in groups[recipient_type]]
            if addresses:
                self._logger.info("[EMAIL] %s: %s", recipient_type.name, ", ".join(addresses))
        self._logger.info("[EMAIL] Subject: %s", content.subject or "")
        self._logger.debug("[EMAIL] Body: %s", content.body)
        if content.html:
            self._logger.debug("[EMAIL] HTML: %d chars", len(content.html))
        for attachment in content.attachments:
            self._logger.debug("[EMAIL] Attachment: %s (%s)", attachment.filename, attachment.content_type)
        return None

    def _generate_message_id(self) -> str:
        from_address = self._config.from_address
        domain = from_address.rpartition("@")[2] if from_address and "@" in from_address else "local"
        return f"<{uuid.uuid4().hex}@{domain}>"
