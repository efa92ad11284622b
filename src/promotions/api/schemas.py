"""Pydantic request/response schemas for the Promotions API."""

from datetime import datetime

from pydantic import BaseModel, Field


# --- Specials ---


class SaveSpecialRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Winter Glow Week",
                    "scope": "product",
                    "target_ids": ["prod-serum-001"],
                    "discount_type": "percent",
                    "discount_value": 15,
                    "starts_at": "2026-06-01T00:00:00+02:00",
                    "ends_at": "2026-06-08T00:00:00+02:00",
                }
            ]
        }
    }

    special_id: str | None = None
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    scope: str
    target_ids: list[str] = []
    discount_type: str
    discount_value: float = Field(..., ge=0)
    starts_at: datetime
    ends_at: datetime
    is_active: bool = True


class SpecialResponse(BaseModel):
    special_id: str
    title: str
    description: str | None = None
    scope: str
    target_ids: list[str]
    discount_type: str
    discount_value: float
    starts_at: datetime
    ends_at: datetime
    is_active: bool
    status: str


class SpecialIdResponse(BaseModel):
    special_id: str


class DiscountLabelResponse(BaseModel):
    percent: int
    amount_cents: int


class SpecialQuoteResponse(BaseModel):
    base_price_cents: int
    price_cents: int
    special_id: str | None = None
    label: DiscountLabelResponse | None = None


# --- Coupons ---


class SaveCouponRequest(BaseModel):
    """Rand fields (``min_spend``, ``max_discount``) are converted to cents on the way in."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "glow10",
                    "type": "percentage",
                    "value": 10,
                    "min_spend": 250.00,
                    "max_discount": 100.00,
                    "max_uses": 50,
                    "excluded_product_ids": ["prod-gift-card"],
                }
            ]
        }
    }

    coupon_id: str | None = None
    code: str = Field(..., min_length=1, max_length=50)
    type: str
    value: float = Field(..., ge=0)
    min_spend: float | None = Field(None, ge=0)
    min_order_cents: int | None = Field(None, ge=0)
    max_discount: float | None = Field(None, ge=0)
    max_discount_cents: int | None = Field(None, ge=0)
    max_uses: int | None = Field(None, ge=0)
    excluded_product_ids: list[str] = []
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    is_active: bool = True
    notes: str | None = None


class CouponResponse(BaseModel):
    coupon_id: str
    code: str
    type: str
    value: float
    display_value: str
    min_order_cents: int
    max_discount_cents: int | None = None
    max_uses: int | None = None
    used_count: int
    remaining_uses: int | None = None
    excluded_product_ids: list[str]
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    is_active: bool
    applicable_now: bool
    notes: str | None = None


class CouponIdResponse(BaseModel):
    coupon_id: str


class CartLineSchema(BaseModel):
    product_id: str
    line_total_cents: int = Field(..., ge=0)


class ValidateCouponRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "GLOW10",
                    "lines": [
                        {"product_id": "prod-a", "line_total_cents": 1000},
                        {"product_id": "prod-b", "line_total_cents": 2000},
                    ],
                }
            ]
        }
    }

    code: str
    lines: list[CartLineSchema]


class CouponQuoteResponse(BaseModel):
    code: str
    applicable: bool
    reason: str | None = None
    subtotal_cents: int
    discountable_cents: int
    discount_cents: int


class RedeemCouponRequest(BaseModel):
    order_id: str | None = None


class RedeemCouponResponse(BaseModel):
    coupon_id: str
    used_count: int


class StatusResponse(BaseModel):
    status: str = "ok"
