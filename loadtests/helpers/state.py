"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared across
users. State tracks IDs returned by creation endpoints so follow-up requests
can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ProductState:
    product_id: str | None = None
    stock_qty: int = 0


@dataclass
class OrderState:
    order_id: str | None = None
    fulfillment_type: str = "delivery"
    status: str = "created"
    product_ids: list[str] = field(default_factory=list)


@dataclass
class PromotionState:
    coupon_id: str | None = None
    coupon_code: str | None = None
    special_id: str | None = None
