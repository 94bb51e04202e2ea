"""Generic JSON webhook notification channel for larder.

Posts ChangeNotice data as a JSON body to any configured HTTP endpoint.
The payload schema mirrors the ChangeNotice dataclass fields so that
consumers can parse it without larder-specific knowledge.
"""

from __future__ import annotations

import httpx
import structlog

from larder.models.notice import ChangeNotice
from larder.notifications.manager import NotificationChannel

_log = structlog.get_logger(component="notifications.webhook")


class WebhookNotificationChannel(NotificationChannel):
    """Delivers notices by POSTing a JSON payload to a configurable URL.

    Args:
        url:       Full endpoint URL.
        headers:   Optional extra headers (e.g. Authorization).
        timeout:   HTTP request timeout in seconds. Defaults to 10.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not url:
            raise ValueError("Webhook url must not be empty")
        if not url.startswith(("http://", "https://")):
            raise ValueError(f"Webhook url must be http(s), got: {url!r}")
        self._url = url
        self._headers = headers or {}
        self._timeout = timeout
        self._transport = transport

    @property
    def channel_name(self) -> str:
        return "webhook"

    async def send(self, notice: ChangeNotice) -> bool:
        """POST *notice* as JSON to the configured endpoint.

        Returns True on 2xx response, False otherwise.
        """
        payload = build_payload(notice)
        request_headers = {
            "Content-Type": "application/json",
            **self._headers,
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    self._url,
                    json=payload,
                    headers=request_headers,
                )
                if response.is_success:
                    return True
                _log.warning(
                    "webhook_non_2xx_response",
                    status_code=response.status_code,
                    body=response.text[:200],
                    notice_id=notice.notice_id,
                )
                return False
        except httpx.TimeoutException:
            _log.warning("webhook_request_timeout", notice_id=notice.notice_id, url=self._url)
            return False
        except httpx.HTTPError as exc:
            _log.warning("webhook_http_error", error=str(exc), notice_id=notice.notice_id)
            return False


def build_payload(notice: ChangeNotice) -> dict[str, object]:
    """Serialise *notice* to a plain dict for JSON encoding."""
    return {
        "notice_id": notice.notice_id,
        "endpoint": notice.endpoint,
        "detected_at": notice.detected_at.isoformat(),
        "added": list(notice.added),
        "removed": list(notice.removed),
        "changed": list(notice.changed),
        "diff": notice.diff,
    }
