"""Application tests for the finance ledger.

The Ordering and Catalogue handlers are called directly with the shared event
contracts, the way the engine would deliver them from their streams.
"""

import json
from datetime import UTC, date, datetime

import pytest
from finance.cost.management import DeleteOperatingCost, RecordOperatingCost
from finance.cost.operating_cost import OperatingCost
from finance.ledger.inbound_events import CatalogueFinanceEventHandler, OrderingFinanceEventHandler
from finance.ledger.projections import BookedOrder, DailyFinance
from finance.ledger.reports import daily_finance, finance_stats, list_costs
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from shared.events.catalogue import ProductCostChanged
from shared.events.ordering import OrderCancelled, OrderPaid
from shared.utils.dates import store_today

# 22:30 UTC on the 14th is already the 15th in Johannesburg
LATE_EVENING = datetime(2026, 3, 14, 22, 30, tzinfo=UTC)


def _set_cost(product_id, cost_cents):
    CatalogueFinanceEventHandler().on_product_cost_changed(
        ProductCostChanged(product_id=product_id, cost_price_cents=cost_cents, changed_at=datetime.now(UTC))
    )


def _pay(order_id, total_cents, lines, paid_at=LATE_EVENING):
    OrderingFinanceEventHandler().on_order_paid(
        OrderPaid(
            order_id=order_id,
            order_number="BL-6001",
            items=json.dumps(lines),
            total_cents=total_cents,
            paid_at=paid_at,
        )
    )


def _cancel(order_id):
    OrderingFinanceEventHandler().on_order_cancelled(
        OrderCancelled(
            order_id=order_id,
            order_number="BL-6001",
            previous_status="paid",
            cancelled_at=datetime.now(UTC),
        )
    )


def _record_cost(amount_cents, occurred_on=None, category="courier"):
    command = RecordOperatingCost(occurred_on=occurred_on, category=category, amount_cents=amount_cents)
    return current_domain.process(command, asynchronous=False)


class TestOrderRevenue:
    def test_paid_order_books_revenue_and_cost_of_goods_on_the_local_day(self):
        _set_cost("prod-001", 4000)
        _pay("ord-f-001", 25000, [{"product_id": "prod-001", "quantity": 3}, {"product_id": "prod-xyz", "quantity": 1}])

        row = current_domain.repository_for(DailyFinance).get("2026-03-15")
        assert row.orders_paid == 1
        assert row.revenue_cents == 25000
        assert row.cogs_cents == 12000

    def test_cost_changes_after_payment_do_not_rewrite_history(self):
        _set_cost("prod-001", 4000)
        _pay("ord-f-002", 10000, [{"product_id": "prod-001", "quantity": 1}])
        _set_cost("prod-001", 9000)

        assert current_domain.repository_for(DailyFinance).get("2026-03-15").cogs_cents == 4000

    def test_repeat_delivery_is_booked_once(self):
        _pay("ord-f-003", 10000, [])
        _pay("ord-f-003", 10000, [])

        assert current_domain.repository_for(DailyFinance).get("2026-03-15").revenue_cents == 10000

    def test_cancelled_order_is_reversed_on_its_booked_day(self):
        _set_cost("prod-001", 4000)
        _pay("ord-f-004", 10000, [{"product_id": "prod-001", "quantity": 1}])
        _pay("ord-f-005", 7000, [])

        _cancel("ord-f-004")
        _cancel("ord-f-004")

        row = current_domain.repository_for(DailyFinance).get("2026-03-15")
        assert (row.orders_paid, row.revenue_cents, row.cogs_cents) == (1, 7000, 0)
        assert current_domain.repository_for(BookedOrder).get("ord-f-004").reversed is True

    def test_unpaid_cancellation_is_ignored(self):
        _cancel("ord-never-paid")

        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(DailyFinance).get(store_today())


class TestOperatingCosts:
    def test_defaults_to_today(self):
        cost_id = _record_cost(5000)

        cost = current_domain.repository_for(OperatingCost).get(cost_id)
        assert cost.occurred_on.isoformat() == store_today()

    def test_blank_category_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _record_cost(5000, category="  ")
        assert "category" in exc.value.messages

    def test_list_filters_and_delete(self):
        keep = _record_cost(5000, occurred_on=date(2026, 3, 2), category="Rent")
        drop = _record_cost(1500, occurred_on=date(2026, 3, 9))

        assert [str(cost.id) for cost in list_costs(category="rent")] == [keep]
        assert [str(cost.id) for cost in list_costs(date_from="2026-03-05")] == [drop]

        current_domain.process(DeleteOperatingCost(cost_id=drop), asynchronous=False)
        assert [str(cost.id) for cost in list_costs()] == [keep]


class TestReports:
    def test_daily_finance(self):
        _set_cost("prod-001", 4000)
        _pay("ord-f-010", 30000, [{"product_id": "prod-001", "quantity": 2}])
        _record_cost(6000, occurred_on=date(2026, 3, 15))
        _record_cost(9999, occurred_on=date(2026, 3, 14))

        summary = daily_finance("2026-03-15")

        assert summary.revenue_cents == 30000
        assert summary.cogs_cents == 8000
        assert summary.expenses_cents == 6000
        assert summary.profit_cents == 16000

    def test_stats_cover_the_recent_window(self):
        _pay("ord-f-011", 20000, [], paid_at=datetime.now(UTC))
        for amount in (100, 200, 300, 400, 500, 600):
            _record_cost(amount)

        summary = finance_stats(days=30)

        assert summary.date_to == store_today()
        assert summary.revenue_cents == 20000
        assert summary.expenses_cents == 2100
        assert len(summary.recent_expenses) == 5

    def test_stats_need_a_positive_window(self):
        with pytest.raises(ValidationError):
            finance_stats(days=0)
