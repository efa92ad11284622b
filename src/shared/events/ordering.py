"""Cross-domain event contracts for Ordering domain events.

These classes define the event shape for consumption by other domains. The
Catalogue domain counts order references on products and deducts sold stock;
Finance books revenue and cost of goods; Courses marks course bookings paid.
They are registered as external events via domain.register_external_event()
with matching __type__ strings so Protean's stream deserialization works
correctly.

The source-of-truth events are in src/ordering/order/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, Integer, String, Text


class OrderRecorded(BaseEvent):
    """An order arrived from checkout and was recorded for fulfillment."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    status = String(required=True)
    items = Text(required=True)  # JSON list of {product_id, variant_index, quantity}
    total_cents = Integer(required=True)
    recorded_at = DateTime(required=True)


class OrderPaid(BaseEvent):
    """An order moved to paid; its stock can be committed."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    items = Text(required=True)  # JSON list of {product_id, variant_index, quantity}
    total_cents = Integer(required=True)
    paid_at = DateTime(required=True)


class OrderCancelled(BaseEvent):
    """The order was cancelled before reaching a terminal status."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)
