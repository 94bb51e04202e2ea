"""Notification system for larder.

Delivers ChangeNotice instances (universe changes found by ``larder sync``)
to one or more notification channels.

Exports:
    NotificationChannel        -- Abstract base for all channel implementations.
    NotificationDispatcher     -- Sends a notice to all registered channels.
    WebhookNotificationChannel -- Generic JSON POST webhook channel.
    build_notification_dispatcher -- Factory used by the CLI.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import structlog

from larder.notifications.manager import NotificationChannel, NotificationDispatcher
from larder.notifications.webhook import WebhookNotificationChannel

if TYPE_CHECKING:
    from larder.models.config import NotificationConfig

_log = structlog.get_logger(component="notifications")

__all__ = [
    "NotificationChannel",
    "NotificationDispatcher",
    "WebhookNotificationChannel",
    "build_notification_dispatcher",
]


def build_notification_dispatcher(
    config: NotificationConfig,
) -> NotificationDispatcher:
    """Build a NotificationDispatcher from environment-resolved secrets.

    ``webhook_secret_ref`` is the *name* of an environment variable whose
    value is the webhook URL:

        LARDER_WEBHOOK_SECRET_REF=SUPERMARKET_HOOK
        SUPERMARKET_HOOK=https://hooks.example.com/larder
    """
    channels: list[NotificationChannel] = []

    webhook_ref = config.webhook_secret_ref
    if webhook_ref:
        webhook_url = os.environ.get(webhook_ref, "")
        if webhook_url:
            try:
                channels.append(WebhookNotificationChannel(url=webhook_url))
                _log.info("webhook_channel_enabled")
            except ValueError as exc:
                _log.warning("webhook_channel_disabled", reason=str(exc))
        else:
            _log.debug("webhook_channel_skipped", reason="secret ref env var is empty")

    if not channels:
        _log.info("no_notification_channels_configured")

    return NotificationDispatcher(channels=channels)
