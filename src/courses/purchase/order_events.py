"""Inbound cross-domain event handler: Courses reacts to Ordering events.

When the order behind a booking is paid, the booking records the amount paid
and moves to ``paid`` or ``deposit_paid``. Orders with no booking are ignored.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.ordering import OrderPaid

from courses.domain import courses
from courses.purchase.purchase import CoursePurchase
from courses.purchase.queries import purchases_for_order

logger = structlog.get_logger(__name__)

courses.register_external_event(OrderPaid, "Ordering.OrderPaid.v1")


@courses.event_handler(part_of=CoursePurchase, stream_category="ordering::order")
class OrderingCoursesEventHandler:
    @handle(OrderPaid)
    def on_order_paid(self, event: OrderPaid) -> None:
        repo = current_domain.repository_for(CoursePurchase)
        for purchase in purchases_for_order(str(event.order_id)):
            if not purchase.mark_paid(event.total_cents, event.paid_at):
                logger.info("Course purchase already paid", purchase_id=str(purchase.id))
                continue
            repo.add(purchase)
            logger.info(
                "Course purchase paid",
                purchase_id=str(purchase.id),
                order_id=str(event.order_id),
                booking_status=purchase.booking_status,
            )
