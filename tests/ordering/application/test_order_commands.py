"""Application tests for the ChangeOrderStatus and SetOrderArchived commands."""

import json

from ordering.order.archiving import SetOrderArchived
from ordering.order.order import Order
from ordering.order.queries import list_orders
from ordering.order.recording import RecordOrder
from ordering.order.status import ChangeOrderStatus
from ordering.projections.daily_sales import DailySales
from protean import current_domain
from shared.utils.dates import store_today


def _record_order(order_number="BL-4001", fulfillment_type="delivery", status="unpaid", buyer_name="Naledi Khumalo"):
    command = RecordOrder(
        order_number=order_number,
        fulfillment_type=fulfillment_type,
        status=status,
        total_cents=12000,
        buyer_name=buyer_name,
        items=json.dumps([{"product_id": "prod-001", "name": "Mascara", "quantity": 1, "unit_price_cents": 12000}]),
    )
    return current_domain.process(command, asynchronous=False)


class TestChangeOrderStatus:
    def test_returns_new_status(self, notifier):
        order_id = _record_order()
        result = current_domain.process(ChangeOrderStatus(order_id=order_id, status="paid"), asynchronous=False)
        assert result == "paid"

    def test_command_changes_status_without_notifying(self, notifier):
        order_id = _record_order()

        current_domain.process(ChangeOrderStatus(order_id=order_id, status="paid"), asynchronous=False)

        assert current_domain.repository_for(Order).get(order_id).status == "paid"
        assert notifier.notices == []

    def test_cancellation_counts_in_daily_sales(self, notifier):
        order_id = _record_order(order_number="BL-4002")
        current_domain.process(ChangeOrderStatus(order_id=order_id, status="cancelled"), asynchronous=False)

        today = store_today()
        assert current_domain.repository_for(DailySales).get(today).orders_cancelled >= 1


class TestArchiving:
    def test_archived_orders_leave_the_default_listing(self):
        order_id = _record_order(order_number="BL-4003")
        current_domain.process(SetOrderArchived(order_id=order_id, archived=True), asynchronous=False)

        assert order_id not in [str(order.id) for order in list_orders()]
        assert order_id in [str(order.id) for order in list_orders(archived=True)]

    def test_unarchive(self):
        order_id = _record_order(order_number="BL-4004")
        current_domain.process(SetOrderArchived(order_id=order_id, archived=True), asynchronous=False)
        current_domain.process(SetOrderArchived(order_id=order_id, archived=False), asynchronous=False)

        assert current_domain.repository_for(Order).get(order_id).archived is False


class TestListing:
    def test_filters_by_status_and_search(self, notifier):
        paid_id = _record_order(order_number="BL-4010", status="paid", buyer_name="Zanele Mthembu")
        unpaid_id = _record_order(order_number="BL-4011", buyer_name="Zanele Mthembu")

        paid = [str(order.id) for order in list_orders(status="paid", search="zanele")]
        assert paid_id in paid
        assert unpaid_id not in paid

    def test_filters_by_fulfillment_type(self):
        collection_id = _record_order(order_number="BL-4012", fulfillment_type="collection")
        delivery_ids = [str(order.id) for order in list_orders(fulfillment_type="delivery")]
        assert collection_id not in delivery_ids
