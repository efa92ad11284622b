"""Application tests for recording orders from checkout payloads."""

from ordering.order.normalization import normalize_order_payload
from ordering.order.order import Order
from ordering.order.recording import record_command_from
from ordering.projections.daily_sales import DailySales
from protean import current_domain
from shared.utils.dates import store_date


def _record(payload):
    command = record_command_from(normalize_order_payload(payload))
    return current_domain.process(command, asynchronous=False)


def _payload(**overrides):
    payload = {
        "order_number": "BL-2001",
        "fulfillment_type": "delivery",
        "status": "unpaid",
        "buyer_name": "Lerato Dlamini",
        "buyer_email": "lerato@example.co.za",
        "shipping_address": {"street": "8 Oak Lane", "city": "Johannesburg", "zone": "Gauteng"},
        "items": [
            {"product_id": "prod-001", "name": "Velvet Lipstick", "quantity": 2, "unit_price": 189.99},
        ],
        "shipping": 99,
    }
    payload.update(overrides)
    return payload


class TestRecordOrder:
    def test_persists_order_with_cents_totals(self):
        order_id = _record(_payload())
        order = current_domain.repository_for(Order).get(order_id)

        assert order.order_number == "BL-2001"
        assert order.subtotal_cents == 37998
        assert order.shipping_cents == 9900
        assert order.total_cents == 47898
        assert order.address.city == "Johannesburg"
        assert order.rendered_address == "8 Oak Lane, Johannesburg, Gauteng"
        assert len(order.items) == 1

    def test_freeform_address_round_trips(self):
        order_id = _record(_payload(shipping_address=None, address="Unit 4, 2 Beach Rd, Umhlanga"))
        order = current_domain.repository_for(Order).get(order_id)
        assert order.address.kind == "freeform"
        assert order.rendered_address == "Unit 4, 2 Beach Rd, Umhlanga"

    def test_recorded_order_counts_in_daily_sales(self):
        order_id = _record(_payload(order_number="BL-2002"))
        order = current_domain.repository_for(Order).get(order_id)

        day = current_domain.repository_for(DailySales).get(store_date(order.created_at))
        assert day.orders_recorded >= 1

    def test_paid_order_adds_revenue(self):
        order_id = _record(_payload(order_number="BL-2003", status="paid", total_cents=50000))
        order = current_domain.repository_for(Order).get(order_id)

        day = current_domain.repository_for(DailySales).get(store_date(order.paid_at))
        assert day.orders_paid >= 1
        assert day.revenue_cents >= 50000
