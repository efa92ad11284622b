"""Order recording: command and handler."""

import json

import structlog
from protean import handle
from protean.fields import Integer, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.address import OrderAddress
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class RecordOrder:
    order_number = String(required=True, max_length=50)
    fulfillment_type = String(required=True, max_length=20)
    status = String(max_length=20, default="unpaid")
    subtotal_cents = Integer(default=0)
    shipping_cents = Integer(default=0)
    discount_cents = Integer(default=0)
    total_cents = Integer(default=0)
    buyer_name = String(max_length=200)
    buyer_email = String(max_length=254)
    buyer_phone = String(max_length=50)
    address = Text()  # JSON: {"kind": "freeform"|"structured", ...}
    coupon_code = String(max_length=50)
    notes = Text()
    items = Text(required=True)  # JSON: list of line dicts


@ordering.command_handler(part_of=Order)
class RecordOrderHandler:
    @handle(RecordOrder)
    def record_order(self, command):
        address = None
        if command.address:
            address_data = json.loads(command.address)
            kind = address_data.pop("kind", "structured")
            if kind == "freeform":
                address = OrderAddress.freeform(address_data.get("text") or "")
            else:
                address = OrderAddress.structured(**address_data)

        order = Order.record(
            order_number=command.order_number,
            fulfillment_type=command.fulfillment_type,
            status=command.status,
            items_data=json.loads(command.items),
            subtotal_cents=command.subtotal_cents,
            shipping_cents=command.shipping_cents,
            discount_cents=command.discount_cents,
            total_cents=command.total_cents,
            buyer_name=command.buyer_name,
            buyer_email=command.buyer_email,
            buyer_phone=command.buyer_phone,
            address=address,
            coupon_code=command.coupon_code,
            notes=command.notes,
        )
        current_domain.repository_for(Order).add(order)
        logger.info(
            "Order recorded",
            order_id=str(order.id),
            order_number=order.order_number,
            status=order.status,
            total_cents=order.total_cents,
        )
        return str(order.id)


def record_command_from(normalized: dict) -> RecordOrder:
    """Build a RecordOrder command from ``normalize_order_payload`` output."""
    return RecordOrder(
        order_number=normalized["order_number"],
        fulfillment_type=normalized["fulfillment_type"],
        status=normalized["status"],
        subtotal_cents=normalized["subtotal_cents"],
        shipping_cents=normalized["shipping_cents"],
        discount_cents=normalized["discount_cents"],
        total_cents=normalized["total_cents"],
        buyer_name=normalized["buyer_name"],
        buyer_email=normalized["buyer_email"],
        buyer_phone=normalized["buyer_phone"],
        address=json.dumps(normalized["address"]) if normalized["address"] else None,
        coupon_code=normalized["coupon_code"],
        notes=normalized["notes"],
        items=json.dumps(normalized["items"]),
    )
