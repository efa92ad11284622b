"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer): separate from
internal Protean commands. Money is always integer cents.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class SetOrderStatusRequest(BaseModel):
    status: str = Field(..., max_length=30)

    model_config = {"json_schema_extra": {"examples": [{"status": "packed"}]}}


class SetArchivedRequest(BaseModel):
    archived: bool = True


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class OrderIdResponse(BaseModel):
    order_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class OrderItemResponse(BaseModel):
    product_id: str
    variant_index: int | None = None
    name: str
    quantity: int
    unit_price_cents: int
    line_total_cents: int


class AddressResponse(BaseModel):
    kind: str
    text: str | None = None
    street: str | None = None
    area: str | None = None
    city: str | None = None
    zone: str | None = None
    country: str | None = None
    display: str


class TimelineStepResponse(BaseModel):
    status: str
    state: str
    reached_at: datetime | None = None


class NextStepResponse(BaseModel):
    label: str
    status: str


class OrderSummaryResponse(BaseModel):
    order_id: str
    order_number: str
    fulfillment_type: str
    status: str
    buyer_name: str | None = None
    buyer_email: str | None = None
    total_cents: int
    item_count: int
    archived: bool
    created_at: datetime | None = None


class OrderDetailResponse(OrderSummaryResponse):
    subtotal_cents: int
    shipping_cents: int
    discount_cents: int
    coupon_code: str | None = None
    buyer_phone: str | None = None
    notes: str | None = None
    address: AddressResponse | None = None
    items: list[OrderItemResponse] = []
    timeline: list[TimelineStepResponse] = []
    next_step: NextStepResponse | None = None
    paid_at: datetime | None = None
    order_packed_at: datetime | None = None
    order_out_for_delivery_at: datetime | None = None
    order_delivered_at: datetime | None = None
    order_collected_at: datetime | None = None
    fulfilled_at: datetime | None = None
    cancelled_at: datetime | None = None
    updated_at: datetime | None = None


class StatusUpdateResponse(BaseModel):
    path: str
    fallback_reason: str | None = None
    notification_error: str | None = None
    order: OrderDetailResponse


class DailySalesResponse(BaseModel):
    date: str
    orders_recorded: int
    orders_paid: int
    orders_cancelled: int
    revenue_cents: int
