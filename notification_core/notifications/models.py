"""
models.py — Entity model shared by every notification channel.

Defines:
    • ChannelType    — channel identifiers known to the registry
    • RecipientType  — TO / CC / BCC visibility classes
    • Priority       — request urgency
    • ResultStatus   — terminal outcome of one send attempt
    • Attachment, Content, Recipient, DeliveryOptions, Request, Result

═══════════════════════════════════════════════════════════════════════════
IMMUTABILITY
═══════════════════════════════════════════════════════════════════════════

Every entity is a frozen dataclass. Sequences are normalised to tuples
and mappings to read-only MappingProxyType views at construction, so
nothing reachable from a built entity can be changed in place. Mapping
fields take no part in hashing, so entities can key dicts and sets.
"Mutating" helpers (Request.add_recipient, Result.with_attempts) return
a new instance:

    req2 = req.add_recipient(Recipient.cc("boss@example.com"))
    assert len(req.recipients) + 1 == len(req2.recipients)

Channels therefore never alter the request they are given, and one
request may be sent through several channels or several retry attempts.

═══════════════════════════════════════════════════════════════════════════
RESULT STATES
═══════════════════════════════════════════════════════════════════════════

    Status     Meaning                               Caller action
    ───────    ──────────────────────────────────    ──────────────────
    SUCCESS    transport accepted the notification   none
    FAILURE    permanent transport failure           give up / alert
    RETRY      transient failure (e.g. HTTP 429)     hand to retry loop

One Result per send attempt. No transitions, no composite states.
Validation problems never show up here: they are raised as
ValidationError before any transport attempt.
"""

from __future__ import annotations

import dataclasses
import uuid
from types import MappingProxyType
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple


# ═══════════════════════════════════════════════════════════════════════════
# Enums
# ═══════════════════════════════════════════════════════════════════════════

class ChannelType(str, Enum):
    """Channel identifiers. Only EMAIL, SMS and PUSH ship an implementation."""
    EMAIL    = "email"
    SMS      = "sms"
    PUSH     = "push"
    WHATSAPP = "whatsapp"
    TELEGRAM = "telegram"
    IN_APP   = "in_app"

    @property
    def identifier(self) -> str:
        return self.value

    @classmethod
    def from_identifier(cls, identifier: str) -> "ChannelType":
        """Case-insensitive lookup by textual identifier."""
        for channel_type in cls:
            if channel_type.value == str(identifier).strip().lower():
                return channel_type
        raise ValueError(f"Unknown channel type: {identifier}")


class RecipientType(str, Enum):
    """Recipient visibility, borrowed from email and reused by all channels."""
    TO  = "to"
    CC  = "cc"
    BCC = "bcc"


class Priority(str, Enum):
    LOW    = "low"
    NORMAL = "normal"
    HIGH   = "high"
    URGENT = "urgent"


class ResultStatus(str, Enum):
    """Terminal outcome of a single send attempt."""
    SUCCESS = "success"
    FAILURE = "failure"
    RETRY   = "retry"


DEFAULT_TIME_TO_LIVE_SECONDS = 86400  # 24 hours


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _generate_correlation_id() -> str:
    return f"NTF-{uuid.uuid4().hex[:12].upper()}"


def _freeze(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


# ═══════════════════════════════════════════════════════════════════════════
# Content
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Attachment:
    """
    A file attached to the content.

    Carries embedded bytes, a remote URL, or (not prevented) both.
    """
    filename: str
    content_type: str = "application/octet-stream"
    content: Optional[bytes] = None
    url: Optional[str] = None

    @classmethod
    def from_bytes(cls, filename: str, content_type: str, content: bytes) -> "Attachment":
        return cls(filename=filename, content_type=content_type, content=content)

    @classmethod
    def from_url(cls, filename: str, content_type: str, url: str) -> "Attachment":
        return cls(filename=filename, content_type=content_type, url=url)

    @property
    def has_content(self) -> bool:
        return self.content is not None

    @property
    def has_url(self) -> bool:
        return self.url is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "content_type": self.content_type,
            "size": len(self.content) if self.content is not None else None,
            "url": self.url,
        }


@dataclass(frozen=True)
class Content:
    """
    What is being said. Every channel requires a non-blank body.

    Attributes
    ----------
    subject : str | None
        Email subject / push title. Ignored by SMS.
    body : str | None
        Plain-text message.
    html : str | None
        Rich alternative for email.
    attachments : tuple of Attachment
    metadata : mapping
        Channel-specific free-form payload (e.g. push imageUrl / badge).
    template_id, template_variables
        Reserved for templating collaborators; unused by the channels.
    """
    subject: Optional[str] = None
    body: Optional[str] = None
    html: Optional[str] = None
    attachments: Tuple[Attachment, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)
    template_id: Optional[str] = None
    template_variables: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attachments", tuple(self.attachments or ()))
        object.__setattr__(self, "metadata", _freeze(self.metadata))
        object.__setattr__(self, "template_variables", _freeze(self.template_variables))

    @classmethod
    def plain_text(cls, body: str) -> "Content":
        return cls(body=body)

    @classmethod
    def with_subject(cls, subject: str, body: str) -> "Content":
        return cls(subject=subject, body=body)

    @property
    def has_body(self) -> bool:
        return self.body is not None and bool(self.body.strip())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject": self.subject,
            "body": self.body,
            "html": self.html,
            "attachments": [a.to_dict() for a in self.attachments],
            "metadata": dict(self.metadata),
            "template_id": self.template_id,
            "template_variables": dict(self.template_variables),
        }


# ═══════════════════════════════════════════════════════════════════════════
# Recipients
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Recipient:
    """
    A notification target.

    The identifier is interpreted by each channel: an email address, a
    phone number, or the owner id of a push device. Channel-specific
    addressing data (device tokens) lives in metadata.
    """
    identifier: str
    display_name: Optional[str] = None
    type: RecipientType = RecipientType.TO
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", _freeze(self.metadata))

    @classmethod
    def of(cls, identifier: str) -> "Recipient":
        return cls(identifier=identifier)

    @classmethod
    def to(
        cls,
        identifier: str,
        *,
        display_name: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "Recipient":
        return cls(
            identifier=identifier,
            display_name=display_name,
            type=RecipientType.TO,
            metadata=metadata or {},
        )

    @classmethod
    def cc(cls, identifier: str, *, display_name: Optional[str] = None) -> "Recipient":
        return cls(identifier=identifier, display_name=display_name, type=RecipientType.CC)

    @classmethod
    def bcc(cls, identifier: str, *, display_name: Optional[str] = None) -> "Recipient":
        return cls(identifier=identifier, display_name=display_name, type=RecipientType.BCC)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identifier": self.identifier,
            "display_name": self.display_name,
            "type": self.type.value,
            "metadata": dict(self.metadata),
        }


# ═══════════════════════════════════════════════════════════════════════════
# Request
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DeliveryOptions:
    """Advisory delivery hints. The core does not enforce any of them."""
    scheduled_at: Optional[datetime] = None
    time_to_live_seconds: int = DEFAULT_TIME_TO_LIVE_SECONDS
    dont_store: bool = False
    require_delivery_receipt: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scheduled_at": (
                self.scheduled_at.isoformat() if self.scheduled_at else None
            ),
            "time_to_live_seconds": self.time_to_live_seconds,
            "dont_store": self.dont_store,
            "require_delivery_receipt": self.require_delivery_receipt,
        }


@dataclass(frozen=True)
class Request:
    """
    A notification request: content plus an ordered list of recipients.

    Content may be None here; every channel rejects such a request with
    a ValidationError at send time.
    """
    content: Optional[Content] = None
    recipients: Tuple[Recipient, ...] = ()
    priority: Priority = Priority.NORMAL
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)
    correlation_id: str = field(default_factory=_generate_correlation_id)
    created_at: datetime = field(default_factory=_now)
    preferred_channel: Optional[ChannelType] = None
    delivery_options: Optional[DeliveryOptions] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "recipients", tuple(self.recipients or ()))
        object.__setattr__(self, "metadata", _freeze(self.metadata))

    def add_recipient(self, recipient: Recipient) -> "Request":
        """Return a copy of this request with one more recipient."""
        return dataclasses.replace(self, recipients=self.recipients + (recipient,))

    @property
    def primary_recipient(self) -> Optional[Recipient]:
        return self.recipients[0] if self.recipients else None

    @property
    def has_recipients(self) -> bool:
        return len(self.recipients) > 0

    def recipients_of_type(self, recipient_type: RecipientType) -> List[Recipient]:
        return [r for r in self.recipients if r.type == recipient_type]

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "correlation_id": self.correlation_id,
            "priority": self.priority.value,
            "content": self.content.to_dict() if self.content else None,
            "recipients": [r.to_dict() for r in self.recipients],
            "metadata": dict(self.metadata),
            "created_at": self.created_at.isoformat(),
            "preferred_channel": (
                self.preferred_channel.value if self.preferred_channel else None
            ),
            "delivery_options": (
                self.delivery_options.to_dict() if self.delivery_options else None
            ),
        }


# ═══════════════════════════════════════════════════════════════════════════
# Result
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Result:
    """Outcome of one send attempt."""
    status: ResultStatus
    message_id: Optional[str] = None
    message: Optional[str] = None
    provider_code: Optional[int] = None
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)
    attempts: int = 1
    timestamp: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", _freeze(self.metadata))

    @classmethod
    def success(
        cls,
        message_id: str,
        message: str = "Notification sent successfully",
        *,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "Result":
        return cls(
            status=ResultStatus.SUCCESS,
            message_id=message_id,
            message=message,
            metadata=metadata or {},
        )

    @classmethod
    def failure(
        cls,
        message: str,
        *,
        provider_code: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "Result":
        return cls(
            status=ResultStatus.FAILURE,
            message=message,
            provider_code=provider_code,
            metadata=metadata or {},
        )

    @classmethod
    def retry(
        cls,
        message: str,
        provider_code: Optional[int] = None,
        *,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "Result":
        return cls(
            status=ResultStatus.RETRY,
            message=message,
            provider_code=provider_code,
            metadata=metadata or {},
        )

    @property
    def is_success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        return self.status == ResultStatus.FAILURE

    @property
    def should_retry(self) -> bool:
        return self.status == ResultStatus.RETRY

    def with_attempts(self, attempts: int) -> "Result":
        """Copy of this result stamped with the caller's attempt count."""
        if attempts < 1:
            raise ValueError("attempts must be >= 1")
        return dataclasses.replace(self, attempts=attempts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "message_id": self.message_id,
            "message": self.message,
            "provider_code": self.provider_code,
            "metadata": dict(self.metadata),
            "attempts": self.attempts,
            "timestamp": self.timestamp.isoformat(),
        }
