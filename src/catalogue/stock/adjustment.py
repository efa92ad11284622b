"""Stock adjustment: command, handler and the shared ledger write."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product
from catalogue.stock.movement import MovementReason, StockMovement, coerce_reason

logger = structlog.get_logger(__name__)


def apply_stock_change(
    product: Product,
    delta: int,
    reason: MovementReason,
    variant_index: int | None = None,
    order_id: str | None = None,
    note: str | None = None,
    allow_negative: bool = False,
) -> StockMovement:
    """Move stock on ``product`` and persist the matching ledger entry.

    Must run inside the caller's unit of work so the product and the
    movement are committed together.
    """
    before, after = product.adjust_stock(delta, variant_index=variant_index, allow_negative=allow_negative)
    movement = StockMovement.record(
        product,
        delta=delta,
        reason=reason,
        stock_before=before,
        stock_after=after,
        variant_index=variant_index,
        order_id=order_id,
        note=note,
    )
    current_domain.repository_for(Product).add(product)
    current_domain.repository_for(StockMovement).add(movement)
    return movement


@catalogue.command(part_of="StockMovement")
class AdjustStock:
    """Manually correct stock; ``delta`` is signed."""

    product_id: Identifier(required=True)
    delta: Integer(required=True)
    reason: String(required=True, max_length=30)
    variant_index: Integer()
    note: Text()
    cost_price_cents: Integer(min_value=0)
    allow_negative: Boolean(default=False)


@catalogue.command_handler(part_of=StockMovement)
class StockAdjustmentHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        reason = coerce_reason(command.reason, manual_only=True)
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        cost_changed = command.cost_price_cents is not None and command.cost_price_cents != product.cost_price_cents
        if command.delta == 0 and not cost_changed:
            raise ValidationError({"delta": ["Enter a non-zero stock change"]})

        if cost_changed:
            product.set_cost_price(command.cost_price_cents)

        if command.delta == 0:
            repo.add(product)
            logger.info("Cost price updated", product_id=str(product.id), cost_price_cents=command.cost_price_cents)
            return None

        movement = apply_stock_change(
            product,
            delta=command.delta,
            reason=reason,
            variant_index=command.variant_index,
            note=(command.note or "").strip() or None,
            allow_negative=command.allow_negative,
        )
        logger.info(
            "Stock adjusted",
            product_id=str(product.id),
            delta=command.delta,
            reason=reason.value,
            stock_after=movement.stock_after,
        )
        return str(movement.id)
