"""
registry.py — Channel-type → channel instance resolution.

A ChannelRegistry maps each ChannelType to either:
    • an explicit provider (zero-arg callable returning a channel), or
    • a registered ChannelConfig, from which the built-in channel is built.

═══════════════════════════════════════════════════════════════════════════
RESOLUTION ORDER for create_channel(channel_type)
═══════════════════════════════════════════════════════════════════════════

    1. explicit provider registered       → provider()
    2. built-in type (EMAIL / SMS / PUSH) → build_channel(config), where
                                            config = registered config, or
                                            DEFAULT_CHANNEL_CONFIGS[type]
    3. anything else                      → None

The default configurations are plain data in this module, so falling
back to them is visible to readers and logged at WARNING level.
Every call builds a fresh instance; nothing is cached.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, FrozenSet, Optional, TypeVar

from notification_core.core.config import NotificationSettings, get_settings
from notification_core.core.errors import ConfigurationError
from notification_core.notifications.channel_config import (
    ChannelConfig,
    EmailChannelConfig,
    PushChannelConfig,
    SmsChannelConfig,
)
from notification_core.notifications.channels.base import NotificationChannel
from notification_core.notifications.channels.email_channel import EmailChannel
from notification_core.notifications.channels.push_channel import PushChannel
from notification_core.notifications.channels.sms_channel import SmsChannel
from notification_core.notifications.models import ChannelType

logger = logging.getLogger(__name__)

ChannelProvider = Callable[[], NotificationChannel]
C = TypeVar("C", bound=ChannelConfig)


# ═══════════════════════════════════════════════════════════════════════════
# Built-in channels
# ═══════════════════════════════════════════════════════════════════════════

DEFAULT_CHANNEL_CONFIGS: Dict[ChannelType, ChannelConfig] = {
    ChannelType.EMAIL: EmailChannelConfig(
        host="localhost",
        port=25,
        from_address="noreply@default.local",
        from_name="Notification Service",
    ),
    ChannelType.SMS: SmsChannelConfig(from_number="+0000000000"),
    ChannelType.PUSH: PushChannelConfig(project_id="default-project"),
}

# Maps each built-in channel type to its implementation
_CHANNEL_CLASSES: Dict[ChannelType, type] = {
    ChannelType.EMAIL: EmailChannel,
    ChannelType.SMS:   SmsChannel,
    ChannelType.PUSH:  PushChannel,
}

BUILTIN_CHANNEL_TYPES = tuple(_CHANNEL_CLASSES)


def resolve_or_default(configured: Optional[C], default: C) -> C:
    """The registered configuration when present, else the default."""
    return configured if configured is not None else default


def build_channel(
    config: ChannelConfig,
    *,
    logger: Optional[logging.Logger] = None,
    transport: Optional[Callable[..., Optional[str]]] = None,
) -> NotificationChannel:
    """
    Construct the built-in channel for a configuration.

    Raises
    ------
    ConfigurationError
        The configuration has no built-in channel, or lacks a required field.
    """
    channel_class = _CHANNEL_CLASSES.get(config.channel_type)
    if channel_class is None:
        raise ConfigurationError(
            f"No built-in channel for type: {config.channel_type.value}"
        )
    return channel_class(config, logger=logger, transport=transport)


# ═══════════════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════════════

class ChannelRegistry:
    """
    Resolves channel types to configured channel instances.

    Registration methods return the registry so calls can be chained:

        registry = (
            ChannelRegistry()
            .register_configuration(EmailChannelConfig(host="smtp.example.com"))
            .register_provider(ChannelType.SMS, lambda: SmsChannel(sms_config))
        )
    """

    def __init__(self, settings: Optional[NotificationSettings] = None):
        self._settings = settings or get_settings()
        self._providers: Dict[ChannelType, ChannelProvider] = {}
        self._configurations: Dict[ChannelType, ChannelConfig] = {}

    @property
    def settings(self) -> NotificationSettings:
        return self._settings

    # ── Registration ──

    def register_provider(
        self,
        channel_type: ChannelType,
        provider: ChannelProvider,
        config: Optional[ChannelConfig] = None,
    ) -> "ChannelRegistry":
        self._providers[channel_type] = provider
        if config is not None:
            self.register_configuration(config)
        logger.debug("Registered provider for %s", channel_type.value)
        return self

    def register_configuration(self, config: ChannelConfig) -> "ChannelRegistry":
        self._configurations[config.channel_type] = config
        logger.debug("Registered configuration for %s", config.channel_type.value)
        return self

    # ── Lookup ──

    def get_configuration(self, channel_type: ChannelType) -> Optional[ChannelConfig]:
        return self._configurations.get(channel_type)

    def is_supported(self, channel_type: ChannelType) -> bool:
        return channel_type in self._providers or channel_type in _CHANNEL_CLASSES

    def supported_channels(self) -> FrozenSet[ChannelType]:
        return frozenset(self._providers) | frozenset(_CHANNEL_CLASSES)

    # ── Construction ──

    def create_channel(self, channel_type: ChannelType) -> Optional[NotificationChannel]:
        """
        Build a channel for the given type.

        Returns None when the type has neither a provider nor a built-in
        implementation. ConfigurationError from the channel constructor
        propagates.
        """
        provider = self._providers.get(channel_type)
        if provider is not None:
            return provider()

        if channel_type not in _CHANNEL_CLASSES:
            logger.warning("No channel available for type: %s", channel_type.value)
            return None

        configured = self._configurations.get(channel_type)
        if configured is None:
            logger.warning(
                "No configuration registered for %s, using default configuration",
                channel_type.value,
            )
        config = resolve_or_default(configured, DEFAULT_CHANNEL_CONFIGS[channel_type])
        return build_channel(config)

    def create_channel_with_config(
        self, channel_type: ChannelType, config: ChannelConfig
    ) -> Optional[NotificationChannel]:
        """
        Build a channel from an explicit configuration, bypassing providers.

        Returns None for types without a built-in implementation.
        """
        if channel_type not in _CHANNEL_CLASSES:
            logger.warning("No channel available for type: %s", channel_type.value)
            return None
        if config.channel_type != channel_type:
            raise ConfigurationError(
                f"Configuration for {config.channel_type.value} cannot build "
                f"a {channel_type.value} channel"
            )
        return build_channel(config)
