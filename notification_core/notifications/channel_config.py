"""
Channel-specific configuration models.

Each model describes what one channel needs to talk to its provider.
Required provider fields (email host, SMS sender number, push project id)
are declared Optional: a missing value is reported by the channel
constructor as a ConfigurationError naming the field, never by pydantic
and never at send time.

Secrets are SecretStr so they never leak through repr() or logs.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from notification_core.notifications.models import ChannelType


class SmsProvider(str, Enum):
    TWILIO  = "twilio"
    AWS_SNS = "aws_sns"
    NEXMO   = "nexmo"
    CUSTOM  = "custom"


class PushProvider(str, Enum):
    FIREBASE = "firebase"
    APNS     = "apns"
    HUAWEI   = "huawei"


class ChannelConfig(BaseModel):
    """Base for per-channel configuration values; subclasses set channel_type."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    connection_timeout_ms: int = Field(default=5000, gt=0)
    read_timeout_ms: int = Field(default=10000, gt=0)

    channel_type: ClassVar[ChannelType]


class EmailChannelConfig(ChannelConfig):
    """SMTP-style email configuration."""

    host: Optional[str] = None
    port: int = Field(default=587, gt=0, le=65535)
    username: Optional[str] = None
    password: Optional[SecretStr] = None
    from_address: Optional[str] = None
    from_name: Optional[str] = None
    use_tls: bool = True
    additional_properties: Dict[str, Any] = Field(default_factory=dict)

    channel_type: ClassVar[ChannelType] = ChannelType.EMAIL

    def to_mail_properties(self) -> Dict[str, Any]:
        """SMTP session properties for a mail transport."""
        props: Dict[str, Any] = {
            "mail.smtp.host": self.host,
            "mail.smtp.port": str(self.port),
            "mail.smtp.auth": "true",
            "mail.smtp.connectiontimeout": self.connection_timeout_ms,
            "mail.smtp.timeout": self.read_timeout_ms,
        }
        if self.use_tls:
            props["mail.smtp.starttls.enable"] = "true"
        else:
            props["mail.smtp.auth.disable"] = "true"
        props.update(self.additional_properties)
        return props


class SmsChannelConfig(ChannelConfig):
    """Carrier / HTTP SMS API configuration."""

    from_number: Optional[str] = None
    account_sid: Optional[str] = None
    auth_token: Optional[SecretStr] = None
    api_url: str = "https://api.twilio.com/2010-04-01"
    max_characters_per_sms: int = Field(default=160, gt=0)
    provider: SmsProvider = SmsProvider.TWILIO

    channel_type: ClassVar[ChannelType] = ChannelType.SMS


class PushChannelConfig(ChannelConfig):
    """Push gateway (FCM / APNs / HMS) configuration."""

    project_id: Optional[str] = None
    client_email: Optional[str] = None
    private_key: Optional[SecretStr] = None
    api_url: str = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"
    provider: PushProvider = PushProvider.FIREBASE
    default_android_channel_id: str = "default"
    default_icon: Optional[str] = None
    default_color: Optional[str] = None

    channel_type: ClassVar[ChannelType] = ChannelType.PUSH

    @property
    def endpoint_url(self) -> str:
        return self.api_url.format(project_id=self.project_id or "")
