"""Order status change: command, handler and the customer notice.

The handler only applies the transition. The customer is notified by
``update_order_status`` once the unit of work has committed, so a notice is
never sent for a change that was not saved.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.notifier import StatusChangeNotice
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=30)


@ordering.command_handler(part_of=Order)
class ChangeOrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status

        if not order.change_status(command.status):
            return order.status

        repo.add(order)
        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous,
            status=order.status,
        )
        return order.status


def status_change_notice(order: Order, previous_status: str) -> StatusChangeNotice:
    return StatusChangeNotice(
        order_id=str(order.id),
        order_number=order.order_number,
        fulfillment_type=order.fulfillment_type,
        previous_status=previous_status,
        status=order.status,
        buyer_name=order.buyer_name,
        buyer_email=order.buyer_email,
        buyer_phone=order.buyer_phone,
        total_cents=order.total_cents,
        changed_at=order.updated_at,
    )
