"""Coupon aggregate: a code granting a discount under eligibility rules.

A coupon applies to a cart only when it is switched on, the cart falls inside
its validity window, it still has uses left, and the cart subtotal reaches the
minimum spend. The discount is computed against the discountable base: the
cart lines whose products are not excluded.
"""

import json
from dataclasses import dataclass
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text
from shared.money import format_zar

from promotions.coupon.events import CouponDeactivated, CouponRedeemed, CouponSaved
from promotions.domain import promotions
from promotions.pricing import CouponType, coupon_discount_cents, coupon_type, format_coupon_value
from promotions.special.special import as_utc


@dataclass(frozen=True)
class CartLine:
    product_id: str
    line_total_cents: int


@dataclass(frozen=True)
class CouponQuote:
    applicable: bool
    reason: str | None
    subtotal_cents: int
    discountable_cents: int
    discount_cents: int


@promotions.aggregate
class Coupon:
    code = String(required=True, max_length=50)
    type = String(required=True, choices=CouponType)
    value = Float(required=True, min_value=0.0)
    min_order_cents = Integer(default=0, min_value=0)
    max_discount_cents = Integer(min_value=0)
    max_uses = Integer(min_value=0)
    used_count = Integer(default=0, min_value=0)
    excluded_product_ids = Text()  # JSON list
    valid_from = DateTime()
    valid_until = DateTime()
    is_active = Boolean(default=True)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def value_must_suit_type(self):
        if self.type == CouponType.PERCENTAGE.value and not 0 < (self.value or 0) <= 100:
            raise ValidationError({"value": ["Percentage coupons must be between 0 and 100"]})
        if self.type == CouponType.FIXED.value and (self.value or 0) <= 0:
            raise ValidationError({"value": ["Fixed coupons must take off a positive amount"]})

    @invariant.post
    def max_discount_only_caps_percentages(self):
        if self.type == CouponType.FIXED.value and self.max_discount_cents is not None:
            raise ValidationError({"max_discount_cents": ["Maximum discount applies to percentage coupons only"]})

    @invariant.post
    def usage_cannot_exceed_limit(self):
        if self.max_uses is not None and (self.used_count or 0) > self.max_uses:
            raise ValidationError({"used_count": ["Coupon usage cannot exceed its limit"]})

    @invariant.post
    def window_must_be_ordered(self):
        if self.valid_from and self.valid_until and as_utc(self.valid_until) <= as_utc(self.valid_from):
            raise ValidationError({"valid_until": ["Coupon must expire after it becomes valid"]})

    @property
    def excluded(self) -> set[str]:
        return set(json.loads(self.excluded_product_ids)) if self.excluded_product_ids else set()

    @property
    def display_value(self) -> str:
        return format_coupon_value(self.type, self.value)

    @property
    def remaining_uses(self) -> int | None:
        if self.max_uses is None:
            return None
        return max(0, self.max_uses - (self.used_count or 0))

    # -------------------------------------------------------------------
    # Eligibility and discount
    # -------------------------------------------------------------------
    def ineligibility_reason(self, subtotal_cents: int, now: datetime | None = None) -> str | None:
        """Why the coupon cannot be used on a cart of ``subtotal_cents``, or None."""
        now = as_utc(now or datetime.now(UTC))
        if not self.is_active:
            return "Coupon is not active"
        if self.valid_from and now < as_utc(self.valid_from):
            return "Coupon is not valid yet"
        if self.valid_until and now > as_utc(self.valid_until):
            return "Coupon has expired"
        if self.max_uses is not None and (self.used_count or 0) >= self.max_uses:
            return "Coupon usage limit reached"
        if subtotal_cents < (self.min_order_cents or 0):
            return f"Minimum spend of {format_zar(self.min_order_cents)} required for this coupon"
        return None

    def is_applicable(self, subtotal_cents: int, now: datetime | None = None) -> bool:
        return self.ineligibility_reason(subtotal_cents, now) is None

    def quote(self, lines: list[CartLine], now: datetime | None = None) -> CouponQuote:
        subtotal = sum(line.line_total_cents for line in lines)
        excluded = self.excluded
        discountable = sum(line.line_total_cents for line in lines if str(line.product_id) not in excluded)

        reason = self.ineligibility_reason(subtotal, now)
        if reason is None and discountable <= 0:
            reason = "No items in the cart are eligible for this coupon"
        if reason is not None:
            return CouponQuote(False, reason, subtotal, discountable, 0)

        discount = coupon_discount_cents(self.type, self.value, discountable, self.max_discount_cents)
        return CouponQuote(True, None, subtotal, discountable, discount)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, **details):
        now = datetime.now(UTC)
        coupon = cls(**_normalised(details), used_count=0, created_at=now, updated_at=now)
        coupon._raise_saved(now)
        return coupon

    def revise(self, **details) -> None:
        now = datetime.now(UTC)
        with atomic_change(self):
            for field_name, value in _normalised(details).items():
                setattr(self, field_name, value)
            self.updated_at = now
        self._raise_saved(now)

    def deactivate(self) -> None:
        if not self.is_active:
            return
        now = datetime.now(UTC)
        self.is_active = False
        self.updated_at = now
        self.raise_(CouponDeactivated(coupon_id=str(self.id), code=self.code, deactivated_at=now))

    def redeem(self, order_id: str | None = None, now: datetime | None = None) -> None:
        now = now or datetime.now(UTC)
        if not self.is_active:
            raise ValidationError({"code": ["Coupon is not active"]})
        if self.max_uses is not None and (self.used_count or 0) >= self.max_uses:
            raise ValidationError({"code": ["Coupon usage limit reached"]})

        self.used_count = (self.used_count or 0) + 1
        self.updated_at = now
        self.raise_(
            CouponRedeemed(
                coupon_id=str(self.id),
                code=self.code,
                order_id=order_id,
                used_count=self.used_count,
                redeemed_at=now,
            )
        )

    def _raise_saved(self, now: datetime) -> None:
        self.raise_(
            CouponSaved(
                coupon_id=str(self.id),
                code=self.code,
                coupon_type=self.type,
                value=self.value,
                is_active=str(bool(self.is_active)),
                saved_at=now,
            )
        )


def normalise_code(code: str | None) -> str:
    return (code or "").strip().upper()


def _normalised(details: dict) -> dict:
    details = dict(details)
    if "code" in details:
        details["code"] = normalise_code(details["code"])
        if not details["code"]:
            raise ValidationError({"code": ["Coupon code is required"]})
    if "type" in details:
        details["type"] = coupon_type(details["type"]).value
    if "excluded_product_ids" in details and not isinstance(details["excluded_product_ids"], str):
        details["excluded_product_ids"] = json.dumps([str(pid) for pid in details["excluded_product_ids"] or []])
    return details
