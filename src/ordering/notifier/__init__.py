"""Order notifier factory.

Provides get_notifier() / set_notifier() to swap implementations:
- FakeNotifier for development and testing
- WebhookNotifier when a webhook URL is configured
"""

from ordering.notifier.fake_adapter import FakeNotifier
from ordering.notifier.port import NotificationError, OrderNotifier, StatusChangeNotice
from ordering.notifier.webhook_adapter import WebhookNotifier

__all__ = [
    "FakeNotifier",
    "NotificationError",
    "OrderNotifier",
    "StatusChangeNotice",
    "configure_notifier",
    "get_notifier",
    "reset_notifier",
    "set_notifier",
]

_current_notifier: OrderNotifier | None = None


def get_notifier() -> OrderNotifier:
    """Return the current notifier. Defaults to FakeNotifier."""
    global _current_notifier
    if _current_notifier is None:
        _current_notifier = FakeNotifier()
    return _current_notifier


def set_notifier(notifier: OrderNotifier) -> None:
    """Override the active notifier (useful for tests)."""
    global _current_notifier
    _current_notifier = notifier


def reset_notifier() -> None:
    """Reset to default notifier."""
    global _current_notifier
    _current_notifier = None


def configure_notifier(settings) -> OrderNotifier:
    """Install the notifier described by ``AdminSettings``."""
    if settings.order_status_webhook_url:
        set_notifier(
            WebhookNotifier(
                url=str(settings.order_status_webhook_url),
                timeout=settings.order_status_webhook_timeout,
            )
        )
    else:
        set_notifier(FakeNotifier())
    return get_notifier()
