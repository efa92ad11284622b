"""Bulk price updates across many products.

``plan_price_updates`` computes the old/new pairs without touching anything;
the ``BulkUpdatePrices`` command runs the same plan and persists it unless
``preview`` is set.
"""

import json
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, String, Text
from protean.utils.globals import current_domain
from shared.money import parse_number, round_half_up, to_cents

from catalogue.domain import catalogue
from catalogue.product.product import Product

logger = structlog.get_logger(__name__)


class PriceAdjustment(Enum):
    PERCENT = "percent"
    INCREASE = "increase"
    DECREASE = "decrease"
    SET = "set"


@dataclass(frozen=True)
class PriceChange:
    product_id: str
    name: str
    old_price_cents: int
    new_price_cents: int

    @property
    def changed(self) -> bool:
        return self.old_price_cents != self.new_price_cents


def coerce_adjustment(value: str) -> PriceAdjustment:
    try:
        return PriceAdjustment((value or "").strip().lower())
    except ValueError:
        raise ValidationError({"adjustment_type": [f"Unknown price adjustment: {value!r}"]}) from None


def calc_bulk_price(old_price_cents: int, adjustment: PriceAdjustment, value) -> int:
    """New price in cents; never below one cent."""
    amount = parse_number(value, "value")
    if adjustment is PriceAdjustment.PERCENT:
        new_price = round_half_up(Decimal(old_price_cents) * (1 + Decimal(str(amount)) / 100))
    elif adjustment is PriceAdjustment.INCREASE:
        new_price = old_price_cents + to_cents(amount, "value")
    elif adjustment is PriceAdjustment.DECREASE:
        new_price = old_price_cents - to_cents(amount, "value")
    else:
        new_price = to_cents(amount, "value")
    return max(1, new_price)


def plan_price_updates(product_ids: list[str], adjustment: PriceAdjustment, value) -> list[PriceChange]:
    if not product_ids:
        raise ValidationError({"product_ids": ["Select at least one product"]})

    repo = current_domain.repository_for(Product)
    plan = []
    for product_id in dict.fromkeys(product_ids):
        product = repo.get(product_id)
        plan.append(
            PriceChange(
                product_id=str(product.id),
                name=product.name,
                old_price_cents=product.price_cents,
                new_price_cents=calc_bulk_price(product.price_cents, adjustment, value),
            )
        )
    return plan


@catalogue.command(part_of="Product")
class BulkUpdatePrices:
    product_ids: Text(required=True)  # JSON list
    adjustment_type: String(required=True, max_length=20)
    value: Float(required=True)
    preview: Boolean(default=False)


@catalogue.command_handler(part_of=Product)
class BulkPriceUpdateHandler:
    @handle(BulkUpdatePrices)
    def update_prices(self, command):
        adjustment = coerce_adjustment(command.adjustment_type)
        plan = plan_price_updates(json.loads(command.product_ids), adjustment, command.value)
        if command.preview:
            return plan

        repo = current_domain.repository_for(Product)
        for change in plan:
            if not change.changed:
                continue
            product = repo.get(change.product_id)
            product.set_price(change.new_price_cents, reason="bulk_update")
            repo.add(product)

        logger.info(
            "Bulk price update applied",
            adjustment=adjustment.value,
            value=command.value,
            changed=sum(1 for change in plan if change.changed),
        )
        return plan
