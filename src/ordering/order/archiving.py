"""Order archiving: command and handler."""

from protean import handle
from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class SetOrderArchived:
    order_id = Identifier(required=True)
    archived = Boolean(default=True)


@ordering.command_handler(part_of=Order)
class SetOrderArchivedHandler:
    @handle(SetOrderArchived)
    def set_order_archived(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.set_archived(bool(command.archived))
        repo.add(order)
