"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Product Request Schemas ---


class VariantSchema(BaseModel):
    label: str = Field(..., max_length=120)
    sku: str | None = Field(None, max_length=50)
    price_cents: int | None = Field(None, ge=1)
    stock_qty: int = 0


class SaveProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Velvet Matte Lipstick",
                    "sku": "LIP-VLV-01",
                    "category": "lips",
                    "description": "Long-wear matte lipstick.",
                    "price_cents": 18999,
                    "compare_at_price_cents": 22999,
                    "cost_price_cents": 7500,
                    "variants": [
                        {"label": "Rosewood", "sku": "LIP-VLV-01-RW", "stock_qty": 12},
                        {"label": "Berry", "sku": "LIP-VLV-01-BE", "stock_qty": 4},
                    ],
                    "image_urls": ["https://cdn.example.com/lipstick.jpg"],
                }
            ]
        }
    }

    product_id: str | None = None
    name: str = Field(..., max_length=255)
    slug: str | None = Field(None, max_length=200)
    sku: str | None = Field(None, max_length=50)
    description: str | None = None
    category: str | None = Field(None, max_length=100)
    price_cents: int
    compare_at_price_cents: int | None = None
    cost_price_cents: int | None = None
    stock_qty: int | None = None
    variants: list[VariantSchema] | None = None
    image_urls: list[str] = Field(default_factory=list)


class AdjustStockRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {"delta": 24, "reason": "manual_restock", "note": "Supplier delivery"},
                {"delta": -2, "reason": "manual_damage", "variant_index": 1},
            ]
        }
    }

    delta: int
    reason: str
    variant_index: int | None = None
    note: str | None = None
    cost_price_cents: int | None = Field(None, ge=0)


class BulkPriceUpdateRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {"product_ids": ["prod-001", "prod-002"], "adjustment_type": "percent", "value": 10, "preview": True},
            ]
        }
    }

    product_ids: list[str] = Field(..., min_length=1)
    adjustment_type: str
    value: float
    preview: bool = False


# --- Bundle Request Schemas ---


class BundleItemSchema(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)


class SaveBundleRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Glow Kit",
                    "price_cents": 49900,
                    "items": [{"product_id": "prod-001", "quantity": 1}, {"product_id": "prod-002", "quantity": 2}],
                    "image_urls": ["https://cdn.example.com/glow-kit.jpg"],
                }
            ]
        }
    }

    bundle_id: str | None = None
    name: str = Field(..., max_length=255)
    slug: str | None = Field(None, max_length=200)
    description: str | None = None
    price_cents: int
    compare_at_price_cents: int | None = None
    items: list[BundleItemSchema] = Field(..., min_length=1)
    image_urls: list[str] = Field(default_factory=list)
    status: str | None = None


# --- Response Schemas ---


class ProductIdResponse(BaseModel):
    product_id: str


class BundleIdResponse(BaseModel):
    bundle_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class DeleteResponse(BaseModel):
    action: str  # deleted | archived


class VariantResponse(BaseModel):
    index: int
    label: str
    sku: str | None = None
    price_cents: int | None = None
    stock_qty: int


class ProductResponse(BaseModel):
    product_id: str
    name: str
    slug: str | None = None
    sku: str | None = None
    description: str | None = None
    category: str | None = None
    price_cents: int
    price_display: str
    compare_at_price_cents: int | None = None
    cost_price_cents: int | None = None
    stock_qty: int
    low_stock: bool
    variants: list[VariantResponse]
    image_urls: list[str]
    status: str
    order_reference_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BundleItemResponse(BaseModel):
    product_id: str
    quantity: int


class BundleResponse(BaseModel):
    bundle_id: str
    name: str
    slug: str | None = None
    description: str | None = None
    price_cents: int
    compare_at_price_cents: int | None = None
    items: list[BundleItemResponse]
    image_urls: list[str]
    status: str
    order_reference_count: int


class StockAdjustmentResponse(BaseModel):
    movement_id: str | None = None
    product: ProductResponse


class PriceChangeResponse(BaseModel):
    product_id: str
    name: str
    old_price_cents: int
    new_price_cents: int


class BulkPriceUpdateResponse(BaseModel):
    preview: bool
    changes: list[PriceChangeResponse]


class StockMovementResponse(BaseModel):
    movement_id: str
    product_id: str
    product_name: str
    variant_index: int | None = None
    delta: int
    reason: str
    movement_type: str
    order_id: str | None = None
    note: str | None = None
    stock_before: int
    stock_after: int
    created_at: datetime | None = None
