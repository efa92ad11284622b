"""DailySales rows are keyed by the store-local day of each event."""

from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

from ordering.order.events import OrderPaid, OrderRecorded
from ordering.projections.daily_sales import DailySalesProjector
from protean.exceptions import ObjectNotFoundError


def _empty_repo():
    repo = MagicMock()
    repo.get.side_effect = ObjectNotFoundError({"_entity": "DailySales not found"})
    return repo


class TestStoreLocalDays:
    def test_late_evening_order_lands_on_the_next_local_day(self):
        event = OrderRecorded(
            order_id="ord-late-001",
            order_number="BL-9001",
            status="unpaid",
            items="[]",
            total_cents=15000,
            recorded_at=datetime(2025, 3, 14, 22, 30, tzinfo=UTC),
        )
        repo = _empty_repo()

        with patch("ordering.projections.daily_sales.current_domain") as mock_domain:
            mock_domain.repository_for = MagicMock(return_value=repo)
            DailySalesProjector().on_order_recorded(event)

        record = repo.add.call_args.args[0]
        assert record.date == "2025-03-15"
        assert record.orders_recorded == 1

    def test_morning_payment_stays_on_the_same_day(self):
        event = OrderPaid(
            order_id="ord-early-001",
            order_number="BL-9002",
            items="[]",
            total_cents=15000,
            paid_at=datetime(2025, 3, 14, 6, 0, tzinfo=UTC),
        )
        repo = _empty_repo()

        with patch("ordering.projections.daily_sales.current_domain") as mock_domain:
            mock_domain.repository_for = MagicMock(return_value=repo)
            DailySalesProjector().on_order_paid(event)

        record = repo.add.call_args.args[0]
        assert record.date == "2025-03-14"
        assert record.revenue_cents == 15000
