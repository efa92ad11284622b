"""Coupon management: save, deactivate and redeem."""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from promotions.coupon.coupon import Coupon, normalise_code
from promotions.domain import promotions

logger = structlog.get_logger(__name__)

DEFAULT_MAX_USES = 1


@promotions.command(part_of="Coupon")
class SaveCoupon:
    coupon_id = Identifier()
    code = String(required=True, max_length=50)
    type = String(required=True, max_length=20)
    value = Float(required=True)
    min_order_cents = Integer(default=0)
    max_discount_cents = Integer()
    max_uses = Integer()
    excluded_product_ids = Text()  # JSON list
    valid_from = DateTime()
    valid_until = DateTime()
    is_active = Boolean(default=True)
    notes = Text()


@promotions.command(part_of="Coupon")
class DeactivateCoupon:
    coupon_id = Identifier(required=True)


@promotions.command(part_of="Coupon")
class RedeemCoupon:
    coupon_id = Identifier(required=True)
    order_id = Identifier()


def find_by_code(code: str) -> Coupon | None:
    matches = current_domain.repository_for(Coupon)._dao.query.filter(code=normalise_code(code)).all().items
    return matches[0] if matches else None


@promotions.command_handler(part_of=Coupon)
class ManageCouponHandler:
    @handle(SaveCoupon)
    def save_coupon(self, command):
        repo = current_domain.repository_for(Coupon)

        existing = find_by_code(command.code)
        if existing is not None and str(existing.id) != str(command.coupon_id or ""):
            raise ValidationError({"code": [f"Coupon code {existing.code} already exists"]})

        details = {
            "code": command.code,
            "type": command.type,
            "value": command.value,
            "min_order_cents": command.min_order_cents or 0,
            "max_discount_cents": command.max_discount_cents,
            "max_uses": command.max_uses,
            "excluded_product_ids": command.excluded_product_ids or "[]",
            "valid_from": command.valid_from,
            "valid_until": command.valid_until,
            "is_active": command.is_active,
            "notes": command.notes,
        }

        if command.coupon_id:
            coupon = repo.get(command.coupon_id)
            coupon.revise(**details)
        else:
            if details["max_uses"] is None:
                details["max_uses"] = DEFAULT_MAX_USES
            if details["valid_from"] is None:
                details["valid_from"] = datetime.now(UTC)
            coupon = Coupon.create(**details)

        repo.add(coupon)
        logger.info("Coupon saved", coupon_id=str(coupon.id), code=coupon.code)
        return str(coupon.id)

    @handle(DeactivateCoupon)
    def deactivate_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        coupon = repo.get(command.coupon_id)
        coupon.deactivate()
        repo.add(coupon)
        logger.info("Coupon deactivated", coupon_id=str(coupon.id), code=coupon.code)

    @handle(RedeemCoupon)
    def redeem_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        coupon = repo.get(command.coupon_id)
        coupon.redeem(order_id=command.order_id)
        repo.add(coupon)
        return coupon.used_count
