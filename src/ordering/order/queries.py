"""Read-side helpers for order listings."""

from protean.utils.globals import current_domain

from ordering.order.order import Order
from ordering.order.workflow import coerce_fulfillment_type, coerce_status


def list_orders(
    status: str | None = None,
    fulfillment_type: str | None = None,
    archived: bool | None = False,
    search: str | None = None,
) -> list[Order]:
    """Orders newest first, filtered the way the admin order table filters them.

    ``search`` matches order number, buyer name or buyer email, case-insensitively.
    ``archived=None`` returns archived and live orders together.
    """
    filters = {}
    if status:
        filters["status"] = coerce_status(status).value
    if fulfillment_type:
        filters["fulfillment_type"] = coerce_fulfillment_type(fulfillment_type).value

    query = current_domain.repository_for(Order)._dao.query.limit(None)
    orders = query.filter(**filters).all().items if filters else query.all().items

    if archived is not None:
        orders = [order for order in orders if bool(order.archived) == archived]

    if search:
        needle = search.strip().lower()
        orders = [
            order
            for order in orders
            if needle in (order.order_number or "").lower()
            or needle in (order.buyer_name or "").lower()
            or needle in (order.buyer_email or "").lower()
        ]

    return sorted(orders, key=lambda order: order.created_at, reverse=True)
