"""FastAPI endpoints for the Promotions domain."""

import json
from datetime import UTC, datetime

from fastapi import APIRouter
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from shared.money import to_cents

from promotions.api.schemas import (
    CouponIdResponse,
    CouponQuoteResponse,
    CouponResponse,
    DiscountLabelResponse,
    RedeemCouponRequest,
    RedeemCouponResponse,
    SaveCouponRequest,
    SaveSpecialRequest,
    SpecialIdResponse,
    SpecialQuoteResponse,
    SpecialResponse,
    StatusResponse,
    ValidateCouponRequest,
)
from promotions.coupon.coupon import CartLine, Coupon
from promotions.coupon.management import DeactivateCoupon, RedeemCoupon, SaveCoupon, find_by_code
from promotions.special.management import DeleteSpecial, SaveSpecial
from promotions.special.special import Special, best_special

special_router = APIRouter(prefix="/specials", tags=["specials"])
coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])


def _special_response(special: Special, now: datetime) -> SpecialResponse:
    return SpecialResponse(
        special_id=str(special.id),
        title=special.title,
        description=special.description,
        scope=special.scope,
        target_ids=special.targets,
        discount_type=special.discount_type,
        discount_value=special.discount_value,
        starts_at=special.starts_at,
        ends_at=special.ends_at,
        is_active=bool(special.is_active),
        status=special.status_at(now).value,
    )


def _coupon_response(coupon: Coupon, now: datetime) -> CouponResponse:
    return CouponResponse(
        coupon_id=str(coupon.id),
        code=coupon.code,
        type=coupon.type,
        value=coupon.value,
        display_value=coupon.display_value,
        min_order_cents=coupon.min_order_cents or 0,
        max_discount_cents=coupon.max_discount_cents,
        max_uses=coupon.max_uses,
        used_count=coupon.used_count or 0,
        remaining_uses=coupon.remaining_uses,
        excluded_product_ids=sorted(coupon.excluded),
        valid_from=coupon.valid_from,
        valid_until=coupon.valid_until,
        is_active=bool(coupon.is_active),
        applicable_now=coupon.is_applicable(coupon.min_order_cents or 0, now),
        notes=coupon.notes,
    )


def _rand_or_cents(rand: float | None, cents: int | None, field: str) -> int | None:
    if rand is not None and cents is not None:
        raise ValidationError({field: ["Send either the Rand amount or the cents amount, not both"]})
    if rand is not None:
        return to_cents(rand, field=field)
    return cents


# --- Special endpoints ---


@special_router.get("", response_model=list[SpecialResponse])
async def list_specials(status: str | None = None) -> list[SpecialResponse]:
    now = datetime.now(UTC)
    specials = current_domain.repository_for(Special)._dao.query.limit(None).all().items
    rows = [_special_response(special, now) for special in sorted(specials, key=lambda s: s.starts_at, reverse=True)]
    if status:
        rows = [row for row in rows if row.status == status]
    return rows


@special_router.post("", status_code=201, response_model=SpecialIdResponse)
async def save_special(body: SaveSpecialRequest) -> SpecialIdResponse:
    command = SaveSpecial(
        special_id=body.special_id,
        title=body.title,
        description=body.description,
        scope=body.scope,
        target_ids=json.dumps(body.target_ids),
        discount_type=body.discount_type,
        discount_value=body.discount_value,
        starts_at=body.starts_at,
        ends_at=body.ends_at,
        is_active=body.is_active,
    )
    result = current_domain.process(command, asynchronous=False)
    return SpecialIdResponse(special_id=result)


@special_router.get("/quote", response_model=SpecialQuoteResponse)
async def quote_special_price(base_price_cents: int, target_id: str, kind: str = "product") -> SpecialQuoteResponse:
    """Lowest live special price for one product or bundle."""
    specials = current_domain.repository_for(Special)._dao.query.limit(None).all().items
    special = best_special(specials, kind, target_id, base_price_cents)
    if special is None:
        return SpecialQuoteResponse(base_price_cents=base_price_cents, price_cents=base_price_cents)

    label = special.label_for(base_price_cents)
    return SpecialQuoteResponse(
        base_price_cents=base_price_cents,
        price_cents=special.price_for(base_price_cents),
        special_id=str(special.id),
        label=DiscountLabelResponse(percent=label.percent, amount_cents=label.amount_cents) if label else None,
    )


@special_router.delete("/{special_id}", response_model=StatusResponse)
async def delete_special(special_id: str) -> StatusResponse:
    current_domain.process(DeleteSpecial(special_id=special_id), asynchronous=False)
    return StatusResponse()


# --- Coupon endpoints ---


@coupon_router.get("", response_model=list[CouponResponse])
async def list_coupons(active: bool | None = None) -> list[CouponResponse]:
    now = datetime.now(UTC)
    coupons = current_domain.repository_for(Coupon)._dao.query.limit(None).all().items
    if active is not None:
        coupons = [coupon for coupon in coupons if bool(coupon.is_active) == active]
    return [_coupon_response(coupon, now) for coupon in sorted(coupons, key=lambda c: c.code)]


@coupon_router.post("", status_code=201, response_model=CouponIdResponse)
async def save_coupon(body: SaveCouponRequest) -> CouponIdResponse:
    command = SaveCoupon(
        coupon_id=body.coupon_id,
        code=body.code,
        type=body.type,
        value=body.value,
        min_order_cents=_rand_or_cents(body.min_spend, body.min_order_cents, "min_order_cents") or 0,
        max_discount_cents=_rand_or_cents(body.max_discount, body.max_discount_cents, "max_discount_cents"),
        max_uses=body.max_uses,
        excluded_product_ids=json.dumps(body.excluded_product_ids),
        valid_from=body.valid_from,
        valid_until=body.valid_until,
        is_active=body.is_active,
        notes=body.notes,
    )
    result = current_domain.process(command, asynchronous=False)
    return CouponIdResponse(coupon_id=result)


@coupon_router.post("/validate", response_model=CouponQuoteResponse)
async def validate_coupon(body: ValidateCouponRequest) -> CouponQuoteResponse:
    coupon = find_by_code(body.code)
    lines = [CartLine(product_id=line.product_id, line_total_cents=line.line_total_cents) for line in body.lines]
    if coupon is None:
        subtotal = sum(line.line_total_cents for line in lines)
        return CouponQuoteResponse(
            code=body.code.strip().upper(),
            applicable=False,
            reason="Invalid or inactive coupon code",
            subtotal_cents=subtotal,
            discountable_cents=0,
            discount_cents=0,
        )

    quote = coupon.quote(lines)
    return CouponQuoteResponse(
        code=coupon.code,
        applicable=quote.applicable,
        reason=quote.reason,
        subtotal_cents=quote.subtotal_cents,
        discountable_cents=quote.discountable_cents,
        discount_cents=quote.discount_cents,
    )


@coupon_router.put("/{coupon_id}/deactivate", response_model=StatusResponse)
async def deactivate_coupon(coupon_id: str) -> StatusResponse:
    current_domain.process(DeactivateCoupon(coupon_id=coupon_id), asynchronous=False)
    return StatusResponse()


@coupon_router.post("/{coupon_id}/redeem", response_model=RedeemCouponResponse)
async def redeem_coupon(coupon_id: str, body: RedeemCouponRequest) -> RedeemCouponResponse:
    used_count = current_domain.process(RedeemCoupon(coupon_id=coupon_id, order_id=body.order_id), asynchronous=False)
    return RedeemCouponResponse(coupon_id=coupon_id, used_count=used_count)
