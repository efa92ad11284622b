"""Tests for the order status notifiers."""

import json
from datetime import UTC, datetime

import httpx
import pytest
from ordering.notifier import (
    FakeNotifier,
    NotificationError,
    StatusChangeNotice,
    WebhookNotifier,
    configure_notifier,
    get_notifier,
)
from shared.settings import AdminSettings


def _notice():
    return StatusChangeNotice(
        order_id="ord-1",
        order_number="BL-6001",
        fulfillment_type="delivery",
        previous_status="paid",
        status="packed",
        buyer_name="Thandi",
        buyer_email="thandi@example.co.za",
        buyer_phone=None,
        total_cents=15000,
        changed_at=datetime(2024, 5, 1, 9, 30, tzinfo=UTC),
    )


class TestWebhookNotifier:
    def test_posts_status_change_payload(self):
        received = []

        def handler(request):
            received.append(json.loads(request.content))
            return httpx.Response(204)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        WebhookNotifier(url="https://hooks.example.com/orders", client=client).order_status_changed(_notice())

        assert received[0]["event"] == "order.status_changed"
        assert received[0]["order_number"] == "BL-6001"
        assert received[0]["previous_status"] == "paid"
        assert received[0]["changed_at"] == "2024-05-01T09:30:00+00:00"

    def test_error_response_raises_notification_error(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(503)))
        notifier = WebhookNotifier(url="https://hooks.example.com/orders", client=client)

        with pytest.raises(NotificationError):
            notifier.order_status_changed(_notice())


class TestConfigureNotifier:
    def test_webhook_url_installs_webhook_notifier(self):
        settings = AdminSettings(order_status_webhook_url="https://hooks.example.com/orders")
        notifier = configure_notifier(settings)

        assert isinstance(notifier, WebhookNotifier)
        assert get_notifier() is notifier

    def test_no_url_installs_fake_notifier(self):
        assert isinstance(configure_notifier(AdminSettings()), FakeNotifier)
