"""
push_channel.py — Mobile push delivery channel (FCM / APNs / HMS).

Delivery mechanism:
    • Recipients address devices through a token kept in recipient metadata
    • One provider payload and one transport call per device
    • TO recipients without a token are skipped, not rejected

═══════════════════════════════════════════════════════════════════════════
DEVICE TOKEN LOOKUP
═══════════════════════════════════════════════════════════════════════════

Recipient metadata keys are checked in this order; the first non-null
value wins:

    deviceToken → device_token → fcmToken → apnsToken

═══════════════════════════════════════════════════════════════════════════
PRIORITY MAPPING
═══════════════════════════════════════════════════════════════════════════

    Request priority     Provider priority
    ────────────────     ─────────────────
    URGENT, HIGH         "high"
    NORMAL, LOW          "normal"
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Mapping, Optional

from notification_core.core.errors import ValidationError
from notification_core.notifications.channel_config import PushChannelConfig
from notification_core.notifications.channels.base import (
    NotificationChannel,
    PushTransport,
    is_blank,
)
from notification_core.notifications.models import (
    ChannelType,
    Priority,
    Recipient,
    RecipientType,
    Request,
    Result,
)

DEVICE_TOKEN_KEYS = ("deviceToken", "device_token", "fcmToken", "apnsToken")

_SENSITIVE_KEY_PARTS = ("token", "key", "secret")
REDACTED = "***REDACTED***"


def resolve_device_token(recipient: Recipient) -> Optional[str]:
    """First token found in the recipient's metadata, or None."""
    for key in DEVICE_TOKEN_KEYS:
        value = recipient.metadata.get(key)
        if value is not None:
            return str(value)
    return None


def map_priority(priority: Priority) -> str:
    if priority in (Priority.URGENT, Priority.HIGH):
        return "high"
    return "normal"


def sanitize_metadata(metadata: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of metadata with token / key / secret values redacted for logging."""
    return {
        key: REDACTED if any(part in str(key).lower() for part in _SENSITIVE_KEY_PARTS) else value
        for key, value in metadata.items()
    }


def mask_token(token: str) -> str:
    return token[:20] + "..." if len(token) > 20 else token


class PushChannel(NotificationChannel):
    """Push channel; one delivery per TO recipient device token."""

    channel_type = ChannelType.PUSH
    label = "Push"
    config_class = PushChannelConfig
    required_field = "project_id"
    missing_config_message = "Project ID is required for Push channel"

    def __init__(
        self,
        config: Optional[PushChannelConfig] = None,
        *,
        logger: Optional[logging.Logger] = None,
        transport: Optional[PushTransport] = None,
    ):
        super().__init__(config, logger=logger, transport=transport)

    @property
    def channel_name(self) -> str:
        return f"PushChannel[{self._config.provider.value}:{self._config.project_id}]"

    # ── Validation ──

    def validate(self, request: Request) -> None:
        self._require_content(request)
        if not self.supports(request):
            raise ValidationError(
                "At least one recipient with valid device token is required for Push"
            )

    def supports(self, request: Request) -> bool:
        return any(
            resolve_device_token(r) is not None
            for r in request.recipients_of_type(RecipientType.TO)
        )

    # ── Delivery ──

    def _deliver(self, request: Request) -> Result:
        devices = 0
        message_id: Optional[str] = None
        for recipient in request.recipients_of_type(RecipientType.TO):
            token = resolve_device_token(recipient)
            if token is None:
                self._logger.debug(
                    "[PUSH] Skipping %s: no device token", recipient.identifier
                )
                continue
            payload = self.build_payload(request, token)
            provider_id = self._transport(request, recipient, payload)
            if message_id is None and provider_id:
                message_id = provider_id
            devices += 1

        return Result.success(
            message_id or self._generate_message_id(),
            f"Push sent to {devices} device(s)",
            metadata={"devices": devices},
        )

    def build_payload(self, request: Request, token: str) -> Dict[str, Any]:
        """
        Provider message for one device, in FCM v1 shape.

        Parameters
        ----------
        request : Request
            Validated request; subject becomes the title, content metadata
            may carry imageUrl and badge.
        token : str
            Device token resolved for the recipient.

        Returns
        -------
        dict
            {"message": {...}} ready for the transport.
        """
        content = request.content
        cfg = self._config

        notification: Dict[str, Any] = {"body": content.body}
        if not is_blank(content.subject):
            notification["title"] = content.subject
        image_url = content.metadata.get("imageUrl")
        if image_url:
            notification["image"] = image_url

        android_notification: Dict[str, Any] = {"channel_id": cfg.default_android_channel_id}
        if cfg.default_icon:
            android_notification["icon"] = cfg.default_icon
        if cfg.default_color:
            android_notification["color"] = cfg.default_color

        android: Dict[str, Any] = {
            "priority": map_priority(request.priority),
            "notification": android_notification,
        }
        if request.delivery_options is not None:
            android["ttl"] = f"{request.delivery_options.time_to_live_seconds}s"

        message: Dict[str, Any] = {
            "token": token,
            "notification": notification,
            "android": android,
            "data": {str(k): str(v) for k, v in content.metadata.items()},
        }
        badge = content.metadata.get("badge")
        if badge is not None:
            message["apns"] = {"payload": {"aps": {"badge": badge}}}

        return {"message": message}

    def _simulate_send(
        self, request: Request, recipient: Recipient, payload: Dict[str, Any]
    ) -> Optional[str]:
        message = payload["message"]
        self._logger.info(
            "[PUSH] Simulating %s send to %s (token %s), priority=%s",
            self._config.provider.value,
            recipient.identifier,
            mask_token(message["token"]),
            message["android"]["priority"],
        )
        self._logger.info(
            "[PUSH] Title: %s | Body: %s",
            message["notification"].get("title", ""),
            message["notification"]["body"],
        )
        if request.content.metadata:
            self._logger.debug("[PUSH] Data: %s", sanitize_metadata(request.content.metadata))
        return None

    @staticmethod
    def _generate_message_id() -> str:
        return "push_" + uuid.uuid4().hex[:22]
