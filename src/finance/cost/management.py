"""Operating cost entry: record and delete."""

from datetime import date

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Date, Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from shared.utils.dates import store_today

from finance.cost.operating_cost import OperatingCost
from finance.domain import finance

logger = structlog.get_logger(__name__)


@finance.command(part_of="OperatingCost")
class RecordOperatingCost:
    """Record an expense; ``occurred_on`` defaults to today in the store timezone."""

    occurred_on: Date()
    category: String(required=True, max_length=100)
    description: Text()
    amount_cents: Integer(required=True)


@finance.command(part_of="OperatingCost")
class DeleteOperatingCost:
    cost_id: Identifier(required=True)


@finance.command_handler(part_of=OperatingCost)
class ManageOperatingCostHandler:
    @handle(RecordOperatingCost)
    def record_operating_cost(self, command):
        category = command.category.strip()
        if not category:
            raise ValidationError({"category": ["Category is required"]})

        occurred_on = command.occurred_on or date.fromisoformat(store_today())
        cost = OperatingCost.record(
            occurred_on=occurred_on,
            category=category,
            amount_cents=command.amount_cents,
            description=(command.description or "").strip() or None,
        )
        current_domain.repository_for(OperatingCost).add(cost)
        logger.info(
            "Operating cost recorded",
            cost_id=str(cost.id),
            category=category,
            amount_cents=cost.amount_cents,
            occurred_on=occurred_on.isoformat(),
        )
        return str(cost.id)

    @handle(DeleteOperatingCost)
    def delete_operating_cost(self, command):
        repo = current_domain.repository_for(OperatingCost)
        cost = repo.get(command.cost_id)
        repo._dao.delete(cost)
        logger.info("Operating cost deleted", cost_id=str(cost.id))
