"""Notification dispatcher for larder.

NotificationChannel    -- ABC every channel must implement.
NotificationDispatcher -- Fans out a change notice to all registered channels;
                          failures in one channel never block others or
                          the sync pipeline.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

import structlog

from larder.models.notice import ChangeNotice

_log = structlog.get_logger(component="notifications.manager")


class NotificationChannel(ABC):
    """Abstract base class for all notification channels.

    Every concrete channel must implement ``send``, which should be
    idempotent and not raise -- return ``False`` instead of raising.
    """

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """Human-readable channel identifier used in logs."""

    @abstractmethod
    async def send(self, notice: ChangeNotice) -> bool:
        """Deliver *notice* via this channel.

        Returns:
            True  -- message accepted by the remote endpoint.
            False -- delivery failed (already logged inside implementation).
        """


class NotificationDispatcher:
    """Fan-out dispatcher that sends a notice to every registered channel.

    ``dispatch`` never raises: exceptions from individual channels are
    caught and logged.  It is awaited by the caller, since a CLI run must
    not exit before delivery finishes.
    """

    def __init__(self, channels: list[NotificationChannel]) -> None:
        self._channels = channels

    @property
    def channels(self) -> list[NotificationChannel]:
        return list(self._channels)

    async def dispatch(self, notice: ChangeNotice) -> dict[str, bool]:
        """Deliver *notice* to every channel concurrently.

        Returns a ``{channel_name: delivered}`` map.
        """
        results = await asyncio.gather(*(self._send_one(channel, notice) for channel in self._channels))
        return {channel.channel_name: ok for channel, ok in zip(self._channels, results, strict=True)}

    async def _send_one(self, channel: NotificationChannel, notice: ChangeNotice) -> bool:
        try:
            success = await channel.send(notice)
        except Exception as exc:  # noqa: BLE001
            _log.error(
                "notification_channel_unexpected_error",
                channel=channel.channel_name,
                notice_id=notice.notice_id,
                error=str(exc),
            )
            success = False

        if success:
            _log.info(
                "notification_sent",
                channel=channel.channel_name,
                notice_id=notice.notice_id,
                added=len(notice.added),
                removed=len(notice.removed),
                changed=len(notice.changed),
            )
        else:
            _log.warning(
                "notification_failed",
                channel=channel.channel_name,
                notice_id=notice.notice_id,
            )
        return success
