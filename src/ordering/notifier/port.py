"""Order notifier port: tells the outside world an order changed status.

Notices go out only after the status write has committed. A failed
notification is reported to the caller and never undoes the change.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from datetime import datetime


class NotificationError(Exception):
    """The notification could not be delivered."""


@dataclass(frozen=True)
class StatusChangeNotice:
    order_id: str
    order_number: str
    fulfillment_type: str
    previous_status: str
    status: str
    buyer_name: str | None
    buyer_email: str | None
    buyer_phone: str | None
    total_cents: int
    changed_at: datetime

    def as_payload(self) -> dict:
        payload = asdict(self)
        payload["changed_at"] = self.changed_at.isoformat()
        return payload


class OrderNotifier(ABC):
    """Abstract interface for order status notifiers."""

    @abstractmethod
    def order_status_changed(self, notice: StatusChangeNotice) -> None:
        """Deliver the notice or raise NotificationError."""
        ...
