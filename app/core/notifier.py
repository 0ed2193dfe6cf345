"""Care circle notifications delivered through a single JSON webhook."""

from __future__ import annotations

from typing import Any, Protocol

import httpx
import structlog

from app.core.config import settings
from app.shared.schemas import CamelModel

logger = structlog.get_logger(__name__)


class NotifierError(Exception):
    pass


class NotifierNotConfiguredError(NotifierError):
    pass


class NotificationDeliveryError(NotifierError):
    pass


class ReportPayload(CamelModel):
    recipient: str
    subject: str
    body: str
    timestamp: str


class Notifier(Protocol):
    async def send_event(self, event_tag: str, payload: dict[str, Any]) -> bool: ...

    async def send_report(self, event_tag: str, payload: ReportPayload) -> bool: ...


class WebhookNotifier:
    """
    Posts ``{"event": tag, **payload}`` to the care circle webhook.

    Raises instead of returning False so callers can tell a missing
    configuration apart from a delivery failure. Nothing is retried here.
    """

    def __init__(
        self,
        webhook_url: str | None,
        client: httpx.AsyncClient | None = None,
        timeout: float = settings.HTTP_TIMEOUT_SECONDS,
    ) -> None:
        self._webhook_url = webhook_url
        self._client = client
        self._timeout = timeout

    async def send_event(self, event_tag: str, payload: dict[str, Any]) -> bool:
        return await self._post(event_tag, payload)

    async def send_report(self, event_tag: str, payload: ReportPayload) -> bool:
        return await self._post(
            event_tag,
            {
                "email": payload.recipient,
                "subject": payload.subject,
                "report": payload.body,
                "timestamp": payload.timestamp,
            },
        )

    async def _post(self, event_tag: str, payload: dict[str, Any]) -> bool:
        if not self._webhook_url:
            raise NotifierNotConfiguredError(
                "care circle webhook URL not configured; cannot send notification"
            )

        body = {"event": event_tag, **payload}
        try:
            if self._client is not None:
                response = await self._client.post(
                    self._webhook_url, json=body, timeout=self._timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self._webhook_url, json=body)
        except httpx.HTTPError as exc:
            raise NotificationDeliveryError(f"webhook unreachable: {exc}") from exc

        if response.is_error:
            raise NotificationDeliveryError(
                f"webhook returned {response.status_code} for {event_tag}"
            )

        logger.info("notification_sent", event_tag=event_tag)
        return True
