"""Fake notifier: records notices in memory for development and tests."""

from ordering.notifier.port import NotificationError, OrderNotifier, StatusChangeNotice


class FakeNotifier(OrderNotifier):
    """Configurable in-memory notifier."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Notification endpoint unavailable"
        self.notices: list[StatusChangeNotice] = []

    def configure(self, should_succeed: bool = True, failure_reason: str = "Notification endpoint unavailable") -> None:
        """Configure the fake notifier behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def order_status_changed(self, notice: StatusChangeNotice) -> None:
        if not self.should_succeed:
            raise NotificationError(self.failure_reason)
        self.notices.append(notice)
