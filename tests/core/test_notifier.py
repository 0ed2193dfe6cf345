import json

import httpx
import pytest

from app.core.notifier import (
    NotificationDeliveryError,
    NotifierNotConfiguredError,
    ReportPayload,
    WebhookNotifier,
)

WEBHOOK_URL = "https://hooks.example.com/care-circle"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_event_posts_tag_and_payload() -> None:
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == WEBHOOK_URL
        seen.append(json.loads(request.content))
        return httpx.Response(200)

    async with _client(handler) as client:
        notifier = WebhookNotifier(WEBHOOK_URL, client=client)
        sent = await notifier.send_event("emergency_alert", {"userId": "u1", "level": "urgent"})

    assert sent is True
    assert seen == [{"event": "emergency_alert", "userId": "u1", "level": "urgent"}]


@pytest.mark.asyncio
async def test_report_maps_fields() -> None:
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(202)

    report = ReportPayload(
        recipient="care@example.com",
        subject="Emergency alert for u1",
        body="Level: EMERGENCY",
        timestamp="2024-05-01T09:30:00+00:00",
    )
    async with _client(handler) as client:
        await WebhookNotifier(WEBHOOK_URL, client=client).send_report(
            "weekly_report_email", report
        )

    assert seen == [
        {
            "event": "weekly_report_email",
            "email": "care@example.com",
            "subject": "Emergency alert for u1",
            "report": "Level: EMERGENCY",
            "timestamp": "2024-05-01T09:30:00+00:00",
        }
    ]


@pytest.mark.asyncio
async def test_missing_url_raises_not_configured() -> None:
    with pytest.raises(NotifierNotConfiguredError):
        await WebhookNotifier(None).send_event("safety_concern", {})


@pytest.mark.asyncio
async def test_error_status_raises_delivery_error() -> None:
    async with _client(lambda request: httpx.Response(503)) as client:
        notifier = WebhookNotifier(WEBHOOK_URL, client=client)
        with pytest.raises(NotificationDeliveryError, match="503"):
            await notifier.send_event("safety_concern", {"userId": "u1"})


@pytest.mark.asyncio
async def test_transport_error_raises_delivery_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        notifier = WebhookNotifier(WEBHOOK_URL, client=client)
        with pytest.raises(NotificationDeliveryError):
            await notifier.send_event("emergency_alert", {"userId": "u1"})
