"""FastAPI endpoints for the Catalogue domain."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain
from shared.api.deps import get_settings
from shared.money import format_zar
from shared.settings import AdminSettings

from catalogue.api.schemas import (
    AdjustStockRequest,
    BulkPriceUpdateRequest,
    BulkPriceUpdateResponse,
    BundleIdResponse,
    BundleItemResponse,
    BundleResponse,
    DeleteResponse,
    PriceChangeResponse,
    ProductIdResponse,
    ProductResponse,
    SaveBundleRequest,
    SaveProductRequest,
    StatusResponse,
    StockAdjustmentResponse,
    StockMovementResponse,
    VariantResponse,
)
from catalogue.bundle.bundle import Bundle
from catalogue.bundle.management import DeleteBundle, SaveBundle
from catalogue.product.lifecycle import ActivateProduct, ArchiveProduct, DeleteProduct
from catalogue.product.price_updates import BulkUpdatePrices
from catalogue.product.product import Product
from catalogue.product.saving import SaveProduct
from catalogue.stock.adjustment import AdjustStock
from catalogue.stock.queries import DEFAULT_LIMIT, list_movements

product_router = APIRouter(prefix="/products", tags=["products"])
bundle_router = APIRouter(prefix="/bundles", tags=["bundles"])
movement_router = APIRouter(prefix="/stock-movements", tags=["stock"])


def product_response(product: Product, low_stock_threshold: int) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        name=product.name,
        slug=product.slug,
        sku=product.sku,
        description=product.description,
        category=product.category,
        price_cents=product.price_cents,
        price_display=format_zar(product.price_cents),
        compare_at_price_cents=product.compare_at_price_cents,
        cost_price_cents=product.cost_price_cents,
        stock_qty=product.stock_qty or 0,
        low_stock=(product.stock_qty or 0) <= low_stock_threshold,
        variants=[
            VariantResponse(
                index=index,
                label=variant.label,
                sku=variant.sku,
                price_cents=variant.price_cents,
                stock_qty=variant.stock_qty or 0,
            )
            for index, variant in enumerate(product.sorted_variants)
        ],
        image_urls=product.images,
        status=product.status,
        order_reference_count=product.order_reference_count or 0,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def bundle_response(bundle: Bundle) -> BundleResponse:
    return BundleResponse(
        bundle_id=str(bundle.id),
        name=bundle.name,
        slug=bundle.slug,
        description=bundle.description,
        price_cents=bundle.price_cents,
        compare_at_price_cents=bundle.compare_at_price_cents,
        items=[BundleItemResponse(product_id=pid, quantity=qty) for pid, qty in bundle.components],
        image_urls=bundle.images,
        status=bundle.status,
        order_reference_count=bundle.order_reference_count or 0,
    )


# --- Products ---


@product_router.get("", response_model=list[ProductResponse])
async def list_products(
    status: str | None = None,
    category: str | None = None,
    settings: AdminSettings = Depends(get_settings),
) -> list[ProductResponse]:
    filters = {key: value for key, value in {"status": status, "category": category}.items() if value}
    query = current_domain.repository_for(Product)._dao.query.limit(None)
    products = query.filter(**filters).all().items if filters else query.all().items
    products.sort(key=lambda product: (product.name or "").lower())
    return [product_response(product, settings.low_stock_threshold) for product in products]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, settings: AdminSettings = Depends(get_settings)) -> ProductResponse:
    product = current_domain.repository_for(Product).get(product_id)
    return product_response(product, settings.low_stock_threshold)


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def save_product(body: SaveProductRequest) -> ProductIdResponse:
    command = SaveProduct(
        product_id=body.product_id,
        name=body.name,
        slug=body.slug,
        sku=body.sku,
        description=body.description,
        category=body.category,
        price_cents=body.price_cents,
        compare_at_price_cents=body.compare_at_price_cents,
        cost_price_cents=body.cost_price_cents,
        stock_qty=body.stock_qty,
        variants=json.dumps([variant.model_dump() for variant in body.variants]) if body.variants is not None else None,
        image_urls=json.dumps(body.image_urls),
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}/activate", response_model=StatusResponse)
async def activate_product(product_id: str) -> StatusResponse:
    current_domain.process(ActivateProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/archive", response_model=StatusResponse)
async def archive_product(product_id: str) -> StatusResponse:
    current_domain.process(ArchiveProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}", response_model=DeleteResponse)
async def delete_product(product_id: str) -> DeleteResponse:
    action = current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return DeleteResponse(action=action)


@product_router.post("/{product_id}/stock", response_model=StockAdjustmentResponse)
async def adjust_stock(
    product_id: str,
    body: AdjustStockRequest,
    settings: AdminSettings = Depends(get_settings),
) -> StockAdjustmentResponse:
    command = AdjustStock(
        product_id=product_id,
        delta=body.delta,
        reason=body.reason,
        variant_index=body.variant_index,
        note=body.note,
        cost_price_cents=body.cost_price_cents,
        allow_negative=settings.allow_negative_stock,
    )
    movement_id = current_domain.process(command, asynchronous=False)
    product = current_domain.repository_for(Product).get(product_id)
    return StockAdjustmentResponse(
        movement_id=movement_id,
        product=product_response(product, settings.low_stock_threshold),
    )


@product_router.post("/price-updates", response_model=BulkPriceUpdateResponse)
async def bulk_update_prices(body: BulkPriceUpdateRequest) -> BulkPriceUpdateResponse:
    command = BulkUpdatePrices(
        product_ids=json.dumps(body.product_ids),
        adjustment_type=body.adjustment_type,
        value=body.value,
        preview=body.preview,
    )
    plan = current_domain.process(command, asynchronous=False)
    return BulkPriceUpdateResponse(
        preview=body.preview,
        changes=[
            PriceChangeResponse(
                product_id=change.product_id,
                name=change.name,
                old_price_cents=change.old_price_cents,
                new_price_cents=change.new_price_cents,
            )
            for change in plan
        ],
    )


# --- Bundles ---


@bundle_router.get("", response_model=list[BundleResponse])
async def list_bundles(status: str | None = None) -> list[BundleResponse]:
    query = current_domain.repository_for(Bundle)._dao.query.limit(None)
    bundles = query.filter(status=status).all().items if status else query.all().items
    bundles.sort(key=lambda bundle: (bundle.name or "").lower())
    return [bundle_response(bundle) for bundle in bundles]


@bundle_router.get("/{bundle_id}", response_model=BundleResponse)
async def get_bundle(bundle_id: str) -> BundleResponse:
    return bundle_response(current_domain.repository_for(Bundle).get(bundle_id))


@bundle_router.post("", status_code=201, response_model=BundleIdResponse)
async def save_bundle(body: SaveBundleRequest) -> BundleIdResponse:
    command = SaveBundle(
        bundle_id=body.bundle_id,
        name=body.name,
        slug=body.slug,
        description=body.description,
        price_cents=body.price_cents,
        compare_at_price_cents=body.compare_at_price_cents,
        items=json.dumps([item.model_dump() for item in body.items]),
        image_urls=json.dumps(body.image_urls),
        status=body.status,
    )
    result = current_domain.process(command, asynchronous=False)
    return BundleIdResponse(bundle_id=result)


@bundle_router.delete("/{bundle_id}", response_model=DeleteResponse)
async def delete_bundle(bundle_id: str) -> DeleteResponse:
    action = current_domain.process(DeleteBundle(bundle_id=bundle_id), asynchronous=False)
    return DeleteResponse(action=action)


# --- Stock ledger ---


@movement_router.get("", response_model=list[StockMovementResponse])
async def get_stock_movements(
    filter: str = "all",
    product_id: str | None = None,
    limit: int = DEFAULT_LIMIT,
) -> list[StockMovementResponse]:
    return [
        StockMovementResponse(
            movement_id=str(movement.id),
            product_id=str(movement.product_id),
            product_name=movement.product_name,
            variant_index=movement.variant_index,
            delta=movement.delta,
            reason=movement.reason,
            movement_type=movement.movement_type,
            order_id=str(movement.order_id) if movement.order_id else None,
            note=movement.note,
            stock_before=movement.stock_before,
            stock_after=movement.stock_after,
            created_at=movement.created_at,
        )
        for movement in list_movements(kind=filter, product_id=product_id, limit=limit)
    ]
