"""Discount arithmetic shared by specials and coupons.

Everything here works in integer cents. Discount values are either a percent
or a Rand amount, exactly as typed into the admin forms.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from protean.exceptions import ValidationError
from shared.money import parse_number, round_half_up, to_cents

MIN_PRICE_CENTS = 1


class SpecialDiscountType(Enum):
    PERCENT = "percent"
    AMOUNT_OFF = "amount_off"
    FIXED_PRICE = "fixed_price"


class CouponType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


_SPECIAL_ALIASES = {
    "percent": SpecialDiscountType.PERCENT,
    "percentage": SpecialDiscountType.PERCENT,
    "%": SpecialDiscountType.PERCENT,
    "amount_off": SpecialDiscountType.AMOUNT_OFF,
    "amount": SpecialDiscountType.AMOUNT_OFF,
    "fixed_price": SpecialDiscountType.FIXED_PRICE,
    "fixed": SpecialDiscountType.FIXED_PRICE,
}

_COUPON_ALIASES = {
    "percentage": CouponType.PERCENTAGE,
    "percent": CouponType.PERCENTAGE,
    "%": CouponType.PERCENTAGE,
    "fixed": CouponType.FIXED,
    "r": CouponType.FIXED,
    "rand": CouponType.FIXED,
    "amount": CouponType.FIXED,
}


@dataclass(frozen=True)
class DiscountLabel:
    percent: int
    amount_cents: int


def special_discount_type(value: SpecialDiscountType | str) -> SpecialDiscountType:
    if isinstance(value, SpecialDiscountType):
        return value
    kind = _SPECIAL_ALIASES.get(str(value or "").strip().lower())
    if kind is None:
        raise ValidationError({"discount_type": [f"Invalid discount type '{value}'"]})
    return kind


def coupon_type(value: CouponType | str) -> CouponType:
    if isinstance(value, CouponType):
        return value
    kind = _COUPON_ALIASES.get(str(value or "").strip().lower())
    if kind is None:
        raise ValidationError({"type": ["Invalid coupon type"]})
    return kind


def calc_special_price(base_price_cents: int, discount_type: SpecialDiscountType | str, discount_value) -> int:
    """Sale price in cents for a base price under one special.

    Results are clamped to at least one cent, and percent and amount-off
    specials never raise a price. A free item (base 0) stays free.
    """
    kind = special_discount_type(discount_type)
    value = Decimal(str(parse_number(discount_value, "discount_value")))
    if value < 0:
        raise ValidationError({"discount_value": ["Discount value cannot be negative"]})

    base = int(base_price_cents or 0)
    if base <= 0:
        return 0

    if kind is SpecialDiscountType.PERCENT:
        price = math.floor(Decimal(base) * (Decimal(100) - value) / Decimal(100))
        return min(base, max(MIN_PRICE_CENTS, price))
    if kind is SpecialDiscountType.AMOUNT_OFF:
        price = base - math.floor(value * 100)
        return min(base, max(MIN_PRICE_CENTS, price))
    return max(MIN_PRICE_CENTS, math.floor(value * 100))


def discount_label(base_price_cents: int, final_price_cents: int) -> DiscountLabel | None:
    """Percent and cents saved, or None when nothing is saved."""
    if not base_price_cents or final_price_cents >= base_price_cents:
        return None
    saved = base_price_cents - final_price_cents
    return DiscountLabel(percent=round_half_up(Decimal(saved) * 100 / Decimal(base_price_cents)), amount_cents=saved)


def coupon_discount_cents(
    kind: CouponType | str,
    value,
    discountable_cents: int,
    max_discount_cents: int | None = None,
) -> int:
    """Discount a coupon grants against the non-excluded part of a cart."""
    kind = coupon_type(kind)
    base = max(0, int(discountable_cents or 0))
    if kind is CouponType.PERCENTAGE:
        discount = round_half_up(Decimal(base) * Decimal(str(parse_number(value, "value"))) / 100)
        if max_discount_cents is not None:
            discount = min(discount, max_discount_cents)
    else:
        discount = to_cents(value, field="value")
    return max(0, min(discount, base))


def format_coupon_value(kind: CouponType | str, value) -> str:
    """``10%`` for percentage coupons, ``R5.00`` for fixed ones."""
    if coupon_type(kind) is CouponType.PERCENTAGE:
        number = parse_number(value, "value")
        return f"{number:g}%"
    return f"R{to_cents(value, field='value') / 100:.2f}"
