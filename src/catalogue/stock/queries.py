"""Read-side helpers for the stock ledger."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from catalogue.stock.movement import MovementType, StockMovement

MOVEMENT_FILTERS = ("all", "manual", "order")
DEFAULT_LIMIT = 100


def list_movements(kind: str = "all", product_id: str | None = None, limit: int = DEFAULT_LIMIT) -> list:
    """Newest movements first, optionally narrowed to one type or product."""
    kind = (kind or "all").strip().lower()
    if kind not in MOVEMENT_FILTERS:
        raise ValidationError({"filter": [f"Filter must be one of {', '.join(MOVEMENT_FILTERS)}"]})
    if limit < 1:
        raise ValidationError({"limit": ["Limit must be at least 1"]})

    criteria = {}
    if kind != "all":
        criteria["movement_type"] = MovementType(kind).value
    if product_id:
        criteria["product_id"] = product_id

    query = current_domain.repository_for(StockMovement)._dao.query
    if criteria:
        query = query.filter(**criteria)
    return query.order_by("-created_at").limit(limit).all().items


def movements_for_order(order_id: str) -> list:
    return current_domain.repository_for(StockMovement)._dao.query.filter(order_id=order_id).limit(None).all().items


def product_has_order_movements(product_id: str) -> bool:
    return bool(
        current_domain.repository_for(StockMovement)
        ._dao.query.filter(product_id=product_id, movement_type=MovementType.ORDER.value)
        .all()
        .items
    )
