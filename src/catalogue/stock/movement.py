"""StockMovement aggregate: the append-only stock ledger.

A movement is written once, in the same unit of work as the stock change it
describes, and never edited or removed afterwards.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from catalogue.domain import catalogue


class MovementReason(Enum):
    MANUAL_RESTOCK = "manual_restock"
    MANUAL_CORRECTION = "manual_correction"
    MANUAL_DAMAGE = "manual_damage"
    MANUAL_RETURN = "manual_return"
    ORDER_SALE = "order_sale"


class MovementType(Enum):
    MANUAL = "manual"
    ORDER = "order"


MANUAL_REASONS = frozenset(reason for reason in MovementReason if reason is not MovementReason.ORDER_SALE)


def coerce_reason(value: str, manual_only: bool = False) -> MovementReason:
    try:
        reason = MovementReason((value or "").strip().lower())
    except ValueError:
        raise ValidationError({"reason": [f"Unknown stock movement reason: {value!r}"]}) from None
    if manual_only and reason not in MANUAL_REASONS:
        raise ValidationError({"reason": ["Order sales are recorded automatically"]})
    return reason


@catalogue.event(part_of="StockMovement")
class StockMovementRecorded:
    """Stock for a product (or one of its variants) changed."""

    __version__ = 1

    movement_id: Identifier(required=True)
    product_id: Identifier(required=True)
    variant_index: Integer()
    delta: Integer(required=True)
    reason: String(required=True)
    movement_type: String(required=True)
    order_id: Identifier()
    stock_before: Integer(required=True)
    stock_after: Integer(required=True)
    recorded_at: DateTime(required=True)


@catalogue.aggregate
class StockMovement:
    product_id: Identifier(required=True)
    product_name: String(required=True, max_length=255)
    variant_index: Integer()
    delta: Integer(required=True)
    reason: String(required=True, choices=MovementReason)
    movement_type: String(required=True, choices=MovementType)
    order_id: Identifier()
    note: Text()
    stock_before: Integer(required=True)
    stock_after: Integer(required=True)
    created_at: DateTime()

    @invariant.post
    def delta_must_not_be_zero(self):
        if self.delta == 0:
            raise ValidationError({"delta": ["Stock movements need a non-zero change"]})

    @invariant.post
    def levels_must_match_delta(self):
        if self.stock_after - self.stock_before != self.delta:
            raise ValidationError({"stock_after": ["Stock after must equal stock before plus the change"]})

    @classmethod
    def record(
        cls,
        product,
        delta: int,
        reason: MovementReason,
        stock_before: int,
        stock_after: int,
        variant_index: int | None = None,
        order_id: str | None = None,
        note: str | None = None,
    ) -> "StockMovement":
        now = datetime.now(UTC)
        movement_type = MovementType.ORDER if reason is MovementReason.ORDER_SALE else MovementType.MANUAL
        movement = cls(
            product_id=str(product.id),
            product_name=product.name,
            variant_index=variant_index,
            delta=delta,
            reason=reason.value,
            movement_type=movement_type.value,
            order_id=order_id,
            note=note,
            stock_before=stock_before,
            stock_after=stock_after,
            created_at=now,
        )
        movement.raise_(
            StockMovementRecorded(
                movement_id=str(movement.id),
                product_id=str(product.id),
                variant_index=variant_index,
                delta=delta,
                reason=reason.value,
                movement_type=movement_type.value,
                order_id=order_id,
                stock_before=stock_before,
                stock_after=stock_after,
                recorded_at=now,
            )
        )
        return movement
