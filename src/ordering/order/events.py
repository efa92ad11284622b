"""Domain events for the Order aggregate.

OrderRecorded and OrderPaid are mirrored in
shared.events.ordering for consumption by the Catalogue domain.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderRecorded:
    """An order arrived from checkout and was recorded for fulfillment."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    status = String(required=True)
    items = Text(required=True)  # JSON: list of {product_id, variant_index, quantity}
    total_cents = Integer(required=True)
    recorded_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """The order moved one step along its fulfillment workflow."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    fulfillment_type = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaid:
    """Payment was confirmed; sold stock can be committed."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    items = Text(required=True)  # JSON: list of {product_id, variant_index, quantity}
    total_cents = Integer(required=True)
    paid_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled before reaching a terminal status."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderArchiveToggled:
    """The order was moved into or out of the archive."""

    __version__ = 1

    order_id = Identifier(required=True)
    archived = String(required=True)  # "True" / "False"
    toggled_at = DateTime(required=True)
