"""
channels — Per-channel delivery implementations.

Each channel class exposes:
    send(request)      → Result
    supports(request)  → bool
    is_available()     → bool

Validation problems are raised; transport problems come back as Results.
"""

from notification_core.notifications.channels.base import NotificationChannel
from notification_core.notifications.channels.email_channel import EmailChannel
from notification_core.notifications.channels.push_channel import PushChannel
from notification_core.notifications.channels.sms_channel import SmsChannel

__all__ = ["NotificationChannel", "EmailChannel", "SmsChannel", "PushChannel"]
