"""Finance read models fed by Ordering and Catalogue events.

DailyFinance holds one row per store-local day with the revenue and cost of
goods booked on that day. BookedOrder remembers what each paid order added
so a later cancellation can take exactly that back out. ProductCost is the
latest known cost price per product.
"""

from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain

from finance.domain import finance


@finance.projection
class DailyFinance:
    date = String(identifier=True, required=True, max_length=10)  # YYYY-MM-DD
    orders_paid = Integer(default=0)
    revenue_cents = Integer(default=0)
    cogs_cents = Integer(default=0)


@finance.projection
class BookedOrder:
    order_id = Identifier(identifier=True, required=True)
    order_number = String(max_length=50)
    date = String(required=True, max_length=10)
    revenue_cents = Integer(default=0)
    cogs_cents = Integer(default=0)
    reversed = Boolean(default=False)


@finance.projection
class ProductCost:
    product_id = Identifier(identifier=True, required=True)
    cost_price_cents = Integer()


def daily_row(date_key: str) -> DailyFinance:
    try:
        return current_domain.repository_for(DailyFinance).get(date_key)
    except ObjectNotFoundError:
        return DailyFinance(date=date_key, orders_paid=0, revenue_cents=0, cogs_cents=0)


def find_booked_order(order_id: str) -> BookedOrder | None:
    try:
        return current_domain.repository_for(BookedOrder).get(order_id)
    except ObjectNotFoundError:
        return None


def cost_of(product_id: str) -> int | None:
    try:
        return current_domain.repository_for(ProductCost).get(product_id).cost_price_cents
    except ObjectNotFoundError:
        return None
