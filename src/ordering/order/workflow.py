"""Fulfillment workflow rules: pure lookups over (fulfillment type, status).

Delivery:   created/unpaid → paid → packed → out_for_delivery → delivered
Collection: created/unpaid → paid → packed → collected
Any non-terminal status may move to cancelled.

Nothing in this module touches persistence; the Order aggregate and the API
layer both consult it.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from protean.exceptions import ValidationError


class OrderStatus(Enum):
    CREATED = "created"
    UNPAID = "unpaid"
    PAID = "paid"
    PACKED = "packed"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    COLLECTED = "collected"
    CANCELLED = "cancelled"


class FulfillmentType(Enum):
    DELIVERY = "delivery"
    COLLECTION = "collection"


class StepState(Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class NextStep:
    label: str
    status: OrderStatus


@dataclass(frozen=True)
class TimelineStep:
    status: OrderStatus
    state: StepState
    reached_at: datetime | None = None


_MARK_PAID = NextStep("Mark as Paid", OrderStatus.PAID)
_MARK_PACKED = NextStep("Mark as Packed", OrderStatus.PACKED)

_NEXT_STEPS = {
    FulfillmentType.DELIVERY: {
        OrderStatus.CREATED: _MARK_PAID,
        OrderStatus.UNPAID: _MARK_PAID,
        OrderStatus.PAID: _MARK_PACKED,
        OrderStatus.PACKED: NextStep("Mark Out for Delivery", OrderStatus.OUT_FOR_DELIVERY),
        OrderStatus.OUT_FOR_DELIVERY: NextStep("Mark Delivered", OrderStatus.DELIVERED),
    },
    FulfillmentType.COLLECTION: {
        OrderStatus.CREATED: _MARK_PAID,
        OrderStatus.UNPAID: _MARK_PAID,
        OrderStatus.PAID: _MARK_PACKED,
        OrderStatus.PACKED: NextStep("Mark Collected", OrderStatus.COLLECTED),
    },
}

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.COLLECTED, OrderStatus.CANCELLED})

# Statuses an order may hold when it first arrives from checkout
RECORDABLE_STATUSES = frozenset({OrderStatus.CREATED, OrderStatus.UNPAID, OrderStatus.PAID})

FLOWS = {
    FulfillmentType.DELIVERY: (
        OrderStatus.PAID,
        OrderStatus.PACKED,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
    ),
    FulfillmentType.COLLECTION: (
        OrderStatus.PAID,
        OrderStatus.PACKED,
        OrderStatus.COLLECTED,
    ),
}

# Order attribute stamped when each milestone is reached
MILESTONE_FIELDS = {
    OrderStatus.PAID: "paid_at",
    OrderStatus.PACKED: "order_packed_at",
    OrderStatus.OUT_FOR_DELIVERY: "order_out_for_delivery_at",
    OrderStatus.DELIVERED: "order_delivered_at",
    OrderStatus.COLLECTED: "order_collected_at",
    OrderStatus.CANCELLED: "cancelled_at",
}


def coerce_status(value: OrderStatus | str) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError({"status": [f"Unknown order status '{value}'"]}) from None


def coerce_fulfillment_type(value: FulfillmentType | str) -> FulfillmentType:
    if isinstance(value, FulfillmentType):
        return value
    try:
        return FulfillmentType(str(value).strip().lower())
    except ValueError:
        raise ValidationError({"fulfillment_type": [f"Unknown fulfillment type '{value}'"]}) from None


def next_step(fulfillment_type: FulfillmentType | str, current_status: OrderStatus | str) -> NextStep | None:
    """Return the single forward action offered for an order, or None when terminal."""
    return _NEXT_STEPS[coerce_fulfillment_type(fulfillment_type)].get(coerce_status(current_status))


def allowed_targets(fulfillment_type: FulfillmentType | str, current_status: OrderStatus | str) -> frozenset:
    """Statuses an order may legally move to from ``current_status``."""
    current = coerce_status(current_status)
    if current in TERMINAL_STATUSES:
        return frozenset()

    targets = {OrderStatus.CANCELLED}
    step = next_step(fulfillment_type, current)
    if step is not None:
        targets.add(step.status)
    return frozenset(targets)


def step_status(flow, current_status: OrderStatus | str, step: OrderStatus | str) -> StepState:
    """Timeline state of ``step`` for an order currently at ``current_status``.

    Every step reads as cancelled once the order is cancelled. Otherwise a step
    is completed when it sits at or before the current status in the flow.
    Statuses that precede the flow (created, unpaid) leave every step pending.
    """
    current = coerce_status(current_status)
    if current is OrderStatus.CANCELLED:
        return StepState.CANCELLED

    step = coerce_status(step)
    flow = tuple(flow)
    if current not in flow or step not in flow:
        return StepState.PENDING
    return StepState.COMPLETED if flow.index(step) <= flow.index(current) else StepState.PENDING


def build_timeline(
    fulfillment_type: FulfillmentType | str,
    current_status: OrderStatus | str,
    milestones: dict | None = None,
) -> list[TimelineStep]:
    """Timeline rows for display; timestamps ride along but never decide state."""
    milestones = milestones or {}
    flow = FLOWS[coerce_fulfillment_type(fulfillment_type)]
    return [
        TimelineStep(
            status=step,
            state=step_status(flow, current_status, step),
            reached_at=milestones.get(step),
        )
        for step in flow
    ]
