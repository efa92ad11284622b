"""Inbound cross-domain event handlers: Finance books Ordering and Catalogue events.

OrderPaid books the order's revenue, and its cost of goods at the product
cost prices known at that moment, on the store-local day it was paid.
OrderCancelled reverses a booked order on the day it was booked.
ProductCostChanged keeps the cost price book current.
"""

import json

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.catalogue import ProductCostChanged
from shared.events.ordering import OrderCancelled, OrderPaid
from shared.utils.dates import store_date

from finance.cost.operating_cost import OperatingCost
from finance.domain import finance
from finance.ledger.projections import (
    BookedOrder,
    DailyFinance,
    ProductCost,
    cost_of,
    daily_row,
    find_booked_order,
)

logger = structlog.get_logger(__name__)

finance.register_external_event(OrderPaid, "Ordering.OrderPaid.v1")
finance.register_external_event(OrderCancelled, "Ordering.OrderCancelled.v1")
finance.register_external_event(ProductCostChanged, "Catalogue.ProductCostChanged.v1")


def cost_of_goods(items_json: str, order_id: str) -> int:
    """Cost of the order's lines at current cost prices; unknown costs count as zero."""
    total = 0
    for line in json.loads(items_json):
        product_id = str(line["product_id"])
        cost = cost_of(product_id)
        if cost is None:
            logger.info("No cost price for order line", order_id=order_id, product_id=product_id)
            continue
        total += cost * int(line["quantity"])
    return total


@finance.event_handler(part_of=OperatingCost, stream_category="ordering::order")
class OrderingFinanceEventHandler:
    @handle(OrderPaid)
    def on_order_paid(self, event: OrderPaid) -> None:
        order_id = str(event.order_id)
        if find_booked_order(order_id) is not None:
            logger.info("Order revenue already booked", order_id=order_id)
            return

        date_key = store_date(event.paid_at)
        cogs = cost_of_goods(event.items, order_id)
        current_domain.repository_for(BookedOrder).add(
            BookedOrder(
                order_id=order_id,
                order_number=event.order_number,
                date=date_key,
                revenue_cents=event.total_cents,
                cogs_cents=cogs,
                reversed=False,
            )
        )

        row = daily_row(date_key)
        row.orders_paid = (row.orders_paid or 0) + 1
        row.revenue_cents = (row.revenue_cents or 0) + event.total_cents
        row.cogs_cents = (row.cogs_cents or 0) + cogs
        current_domain.repository_for(DailyFinance).add(row)
        logger.info("Order revenue booked", order_id=order_id, date=date_key, revenue_cents=event.total_cents)

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        booked = find_booked_order(str(event.order_id))
        if booked is None or booked.reversed:
            return

        row = daily_row(booked.date)
        row.orders_paid = max(0, (row.orders_paid or 0) - 1)
        row.revenue_cents = (row.revenue_cents or 0) - (booked.revenue_cents or 0)
        row.cogs_cents = (row.cogs_cents or 0) - (booked.cogs_cents or 0)
        current_domain.repository_for(DailyFinance).add(row)

        booked.reversed = True
        current_domain.repository_for(BookedOrder).add(booked)
        logger.info("Order revenue reversed", order_id=str(event.order_id), date=booked.date)


@finance.event_handler(part_of=OperatingCost, stream_category="catalogue::product")
class CatalogueFinanceEventHandler:
    @handle(ProductCostChanged)
    def on_product_cost_changed(self, event: ProductCostChanged) -> None:
        current_domain.repository_for(ProductCost).add(
            ProductCost(product_id=str(event.product_id), cost_price_cents=event.cost_price_cents)
        )
