"""
dispatcher.py — Route a request to the first channel able to carry it.

    Request ──► candidate_channels()   preferred channel, then EMAIL, SMS, PUSH
           ──► supports() pre-filter  first candidate that accepts the request
           ──► channel.send()         ValidationError raised / Result returned

No retries, scheduling or batching happen here. A RETRY result is handed
back to the caller, which owns the retry loop (see NotificationSettings
for the advisory retry parameters).
"""

from __future__ import annotations

import logging
from typing import List, Optional

from notification_core.core.errors import ConfigurationError
from notification_core.core.logging_config import push_log_context, reset_log_context
from notification_core.notifications.channels.base import NotificationChannel
from notification_core.notifications.models import ChannelType, Request, Result
from notification_core.notifications.registry import (
    BUILTIN_CHANNEL_TYPES,
    ChannelRegistry,
)

logger = logging.getLogger(__name__)

NO_CHANNEL_MESSAGE = "No available channel supports the request"


class NotificationDispatcher:
    """Selects a channel for each request through a ChannelRegistry."""

    def __init__(self, registry: Optional[ChannelRegistry] = None):
        self._registry = registry or ChannelRegistry()

    @property
    def registry(self) -> ChannelRegistry:
        return self._registry

    def candidate_channels(self, request: Request) -> List[NotificationChannel]:
        """
        Channels to try for a request, in order.

        The preferred channel (when set and resolvable) comes first,
        followed by the remaining built-in types. Types whose construction
        fails with a ConfigurationError are logged and left out.
        """
        order: List[ChannelType] = []
        if request.preferred_channel is not None:
            order.append(request.preferred_channel)
        order.extend(t for t in BUILTIN_CHANNEL_TYPES if t not in order)

        channels: List[NotificationChannel] = []
        for channel_type in order:
            try:
                channel = self._registry.create_channel(channel_type)
            except ConfigurationError as exc:
                logger.error(
                    "Channel %s is misconfigured: %s", channel_type.value, exc,
                    extra={"channel": channel_type.value},
                )
                continue
            if channel is not None:
                channels.append(channel)
        return channels

    def select_channel(self, request: Request) -> Optional[NotificationChannel]:
        """First candidate whose supports() accepts the request, or None."""
        for channel in self.candidate_channels(request):
            if channel.is_available() and channel.supports(request):
                logger.debug(
                    "Selected %s for request %s",
                    channel.channel_name, request.correlation_id,
                    extra={
                        "channel": channel.channel_type.value,
                        "correlation_id": request.correlation_id,
                    },
                )
                return channel
        return None

    def send(self, request: Request) -> Result:
        """
        Send a request through the selected channel.

        Raises
        ------
        ValidationError
            The selected channel rejected the request (e.g. missing body).
        """
        token = push_log_context(correlation_id=request.correlation_id)
        try:
            channel = self.select_channel(request)
            if channel is None:
                logger.warning(
                    "%s: %s", NO_CHANNEL_MESSAGE, request.correlation_id,
                    extra={
                        "correlation_id": request.correlation_id,
                        "recipient_count": len(request.recipients),
                    },
                )
                return Result.failure(NO_CHANNEL_MESSAGE)
            return channel.send(request)
        finally:
            reset_log_context(token)
