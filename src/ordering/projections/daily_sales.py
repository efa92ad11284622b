"""Daily sales projection: the admin dashboard's sales summary.

One row per store-local calendar day (YYYY-MM-DD in the configured store
timezone): orders recorded, orders paid with their revenue in cents, and
orders cancelled.
"""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Integer, String
from protean.utils.globals import current_domain
from shared.utils.dates import store_date

from ordering.domain import ordering
from ordering.order.events import OrderCancelled, OrderPaid, OrderRecorded
from ordering.order.order import Order


@ordering.projection
class DailySales:
    date = String(identifier=True, required=True, max_length=10)  # YYYY-MM-DD
    orders_recorded = Integer(default=0)
    orders_paid = Integer(default=0)
    orders_cancelled = Integer(default=0)
    revenue_cents = Integer(default=0)


def _get_or_create(date_key):
    repo = current_domain.repository_for(DailySales)
    try:
        return repo.get(date_key)
    except ObjectNotFoundError:
        return DailySales(
            date=date_key,
            orders_recorded=0,
            orders_paid=0,
            orders_cancelled=0,
            revenue_cents=0,
        )


@ordering.projector(projector_for=DailySales, aggregates=[Order])
class DailySalesProjector:
    @on(OrderRecorded)
    def on_order_recorded(self, event):
        record = _get_or_create(store_date(event.recorded_at))
        record.orders_recorded = (record.orders_recorded or 0) + 1
        current_domain.repository_for(DailySales).add(record)

    @on(OrderPaid)
    def on_order_paid(self, event):
        record = _get_or_create(store_date(event.paid_at))
        record.orders_paid = (record.orders_paid or 0) + 1
        record.revenue_cents = (record.revenue_cents or 0) + (event.total_cents or 0)
        current_domain.repository_for(DailySales).add(record)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        record = _get_or_create(store_date(event.cancelled_at))
        record.orders_cancelled = (record.orders_cancelled or 0) + 1
        current_domain.repository_for(DailySales).add(record)
