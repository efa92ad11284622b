"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.order.events import OrderArchiveToggled, OrderCancelled, OrderPaid, OrderRecorded, OrderStatusChanged
from ordering.order.order import Order
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when

# Map event name strings to classes for dynamic lookup in Then steps
_ORDER_EVENT_CLASSES = {
    "OrderRecorded": OrderRecorded,
    "OrderStatusChanged": OrderStatusChanged,
    "OrderPaid": OrderPaid,
    "OrderCancelled": OrderCancelled,
    "OrderArchiveToggled": OrderArchiveToggled,
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


def _order(fulfillment_type, status):
    order = Order.record(
        order_number="BL-7001",
        fulfillment_type=fulfillment_type,
        status=status,
        items_data=[{"product_id": "prod-001", "name": "Lip Liner", "quantity": 1, "unit_price_cents": 9900}],
        total_cents=9900,
    )
    order._events.clear()
    return order


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('an unpaid {fulfillment_type} order'), target_fixture="order")
def unpaid_order(fulfillment_type):
    return _order(fulfillment_type, "unpaid")


@given(parsers.cfparse('a paid {fulfillment_type} order'), target_fixture="order")
def paid_order(fulfillment_type):
    return _order(fulfillment_type, "paid")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the order is advanced", target_fixture="order")
def advance(order, error):
    try:
        order.advance()
    except ValidationError as exc:
        error["exc"] = exc
    return order


@when(parsers.cfparse('the order is moved to "{status}"'), target_fixture="order")
def move_to(order, error, status):
    try:
        order.change_status(status)
    except ValidationError as exc:
        error["exc"] = exc
    return order


@when("the order is cancelled", target_fixture="order")
def cancel(order, error):
    try:
        order.cancel()
    except ValidationError as exc:
        error["exc"] = exc
    return order


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def status_is(order, status):
    assert order.status == status


@then("the action fails with a validation error")
def action_failed(error):
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("an {event_type} order event is raised"))
def event_raised(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert any(isinstance(event, event_cls) for event in order._events)


@then(parsers.cfparse('the "{milestone}" milestone is stamped'))
def milestone_stamped(order, milestone):
    assert getattr(order, milestone) is not None


@then("the order is fulfilled")
def fulfilled(order):
    assert order.fulfilled_at is not None
    assert order.next_step() is None
