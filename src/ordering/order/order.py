"""Order aggregate (CQRS): a customer purchase being fulfilled.

Orders are created by the checkout system and recorded here in status
created, unpaid or paid. From then on the only mutations are single forward
steps along the workflow in ``ordering.order.workflow`` (or cancellation) and
toggling the archive flag. Money is held in integer cents.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.address import OrderAddress, render_address
from ordering.order.events import (
    OrderArchiveToggled,
    OrderCancelled,
    OrderPaid,
    OrderRecorded,
    OrderStatusChanged,
)
from ordering.order.workflow import (
    FLOWS,
    MILESTONE_FIELDS,
    RECORDABLE_STATUSES,
    FulfillmentType,
    OrderStatus,
    allowed_targets,
    build_timeline,
    coerce_fulfillment_type,
    coerce_status,
    next_step,
)

_DELIVERY_ONLY = {OrderStatus.OUT_FOR_DELIVERY.value, OrderStatus.DELIVERED.value}
_COLLECTION_ONLY = {OrderStatus.COLLECTED.value}


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A product (or variant) line on the order. Never changed after recording."""

    product_id = Identifier(required=True)
    variant_index = Integer(min_value=0)
    name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price_cents = Integer(required=True, min_value=0)
    position = Integer(default=0)

    @property
    def line_total_cents(self) -> int:
        return self.quantity * self.unit_price_cents


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=50)
    fulfillment_type = String(required=True, choices=FulfillmentType)
    status = String(choices=OrderStatus, default=OrderStatus.CREATED.value)

    subtotal_cents = Integer(default=0, min_value=0)
    shipping_cents = Integer(default=0, min_value=0)
    discount_cents = Integer(default=0, min_value=0)
    total_cents = Integer(default=0, min_value=0)
    coupon_code = String(max_length=50)

    buyer_name = String(max_length=200)
    buyer_email = String(max_length=254)
    buyer_phone = String(max_length=50)
    address = ValueObject(OrderAddress)
    notes = Text()

    items = HasMany(OrderItem)
    archived = Boolean(default=False)

    paid_at = DateTime()
    order_packed_at = DateTime()
    order_out_for_delivery_at = DateTime()
    order_delivered_at = DateTime()
    order_collected_at = DateTime()
    fulfilled_at = DateTime()
    cancelled_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def status_must_belong_to_fulfillment_type(self):
        if self.fulfillment_type == FulfillmentType.COLLECTION.value and self.status in _DELIVERY_ONLY:
            raise ValidationError({"status": ["Collection orders are never out for delivery or delivered"]})
        if self.fulfillment_type == FulfillmentType.DELIVERY.value and self.status in _COLLECTION_ONLY:
            raise ValidationError({"status": ["Delivery orders are never collected"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def record(
        cls,
        order_number: str,
        fulfillment_type: str,
        items_data: list[dict],
        status: str = OrderStatus.UNPAID.value,
        subtotal_cents: int = 0,
        shipping_cents: int = 0,
        discount_cents: int = 0,
        total_cents: int = 0,
        buyer_name: str | None = None,
        buyer_email: str | None = None,
        buyer_phone: str | None = None,
        address: OrderAddress | None = None,
        coupon_code: str | None = None,
        notes: str | None = None,
    ):
        """Record an order handed over by checkout."""
        initial = coerce_status(status)
        if initial not in RECORDABLE_STATUSES:
            raise ValidationError({"status": [f"Orders cannot be recorded in status {initial.value}"]})
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one line item"]})

        now = datetime.now(UTC)
        order = cls(
            order_number=order_number,
            fulfillment_type=coerce_fulfillment_type(fulfillment_type).value,
            status=initial.value,
            subtotal_cents=subtotal_cents,
            shipping_cents=shipping_cents,
            discount_cents=discount_cents,
            total_cents=total_cents,
            buyer_name=buyer_name,
            buyer_email=buyer_email,
            buyer_phone=buyer_phone,
            address=address,
            coupon_code=coupon_code,
            notes=notes,
            paid_at=now if initial is OrderStatus.PAID else None,
            created_at=now,
            updated_at=now,
        )
        for position, item_data in enumerate(items_data):
            order.add_items(OrderItem(position=position, **item_data))

        order.raise_(
            OrderRecorded(
                order_id=str(order.id),
                order_number=order.order_number,
                status=order.status,
                items=order.stock_lines_json(),
                total_cents=order.total_cents,
                recorded_at=now,
            )
        )
        if initial is OrderStatus.PAID:
            order._raise_paid(now)
        return order

    # -------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------
    @property
    def sorted_items(self) -> list:
        return sorted(self.items or [], key=lambda item: item.position or 0)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items or [])

    @property
    def rendered_address(self) -> str:
        return render_address(self.address)

    def stock_lines_json(self) -> str:
        return json.dumps(
            [
                {
                    "product_id": str(item.product_id),
                    "variant_index": item.variant_index,
                    "quantity": item.quantity,
                }
                for item in self.sorted_items
            ]
        )

    def milestones(self) -> dict:
        return {status: getattr(self, field) for status, field in MILESTONE_FIELDS.items()}

    def next_step(self):
        return next_step(self.fulfillment_type, self.status)

    def timeline(self):
        return build_timeline(self.fulfillment_type, self.status, self.milestones())

    def flow(self) -> tuple:
        return FLOWS[FulfillmentType(self.fulfillment_type)]

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def assert_can_transition(self, target: OrderStatus | str) -> None:
        current = OrderStatus(self.status)
        target = coerce_status(target)
        if target not in allowed_targets(self.fulfillment_type, current):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

    def change_status(self, target: OrderStatus | str) -> bool:
        """Move to ``target``. Returns False when the order is already there."""
        target = coerce_status(target)
        previous = OrderStatus(self.status)
        if target is previous:
            return False
        self.assert_can_transition(target)

        now = datetime.now(UTC)
        self.status = target.value
        milestone = MILESTONE_FIELDS.get(target)
        if milestone:
            setattr(self, milestone, now)
        if target in (OrderStatus.DELIVERED, OrderStatus.COLLECTED):
            self.fulfilled_at = now
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                fulfillment_type=self.fulfillment_type,
                previous_status=previous.value,
                new_status=target.value,
                changed_at=now,
            )
        )
        if target is OrderStatus.PAID:
            self._raise_paid(now)
        elif target is OrderStatus.CANCELLED:
            self.raise_(
                OrderCancelled(
                    order_id=str(self.id),
                    order_number=self.order_number,
                    previous_status=previous.value,
                    cancelled_at=now,
                )
            )
        return True

    def advance(self) -> OrderStatus:
        """Apply the single forward step currently offered."""
        step = self.next_step()
        if step is None:
            raise ValidationError({"status": [f"Order is {self.status}; there is no next step"]})
        self.change_status(step.status)
        return step.status

    def cancel(self) -> bool:
        return self.change_status(OrderStatus.CANCELLED)

    def set_archived(self, archived: bool) -> None:
        if bool(self.archived) == archived:
            return
        now = datetime.now(UTC)
        self.archived = archived
        self.updated_at = now
        self.raise_(
            OrderArchiveToggled(
                order_id=str(self.id),
                archived=str(archived),
                toggled_at=now,
            )
        )

    def _raise_paid(self, paid_at: datetime) -> None:
        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                order_number=self.order_number,
                items=self.stock_lines_json(),
                total_cents=self.total_cents,
                paid_at=paid_at,
            )
        )
