"""Product aggregate root with Variant entity.

Prices are integer cents. Stock is held either on the product itself or, when
the product has variants, on each variant; ``stock_qty`` on the product is
then kept as the sum of its variants.
"""

import json
import re
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Integer, String, Text

from catalogue.domain import catalogue

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class ProductStatus(Enum):
    """Enumeration of product lifecycle statuses."""

    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")
    return slug or "item"


def validate_slug(slug: str | None) -> None:
    if slug and not _SLUG_PATTERN.match(slug):
        raise ValidationError({"slug": ["Slug must contain only lowercase alphanumeric characters and single hyphens"]})


@catalogue.entity(part_of="Product")
class Variant:
    """A purchasable option (shade, size) with its own stock count."""

    label: String(required=True, max_length=120)
    sku: String(max_length=50)
    price_cents: Integer(min_value=1)
    stock_qty: Integer(default=0)
    position: Integer(default=0)


@catalogue.aggregate
class Product:
    """Product aggregate root."""

    name: String(required=True, max_length=255)
    slug: String(max_length=200)
    sku: String(max_length=50)
    description: Text()
    category: String(max_length=100)
    price_cents: Integer(required=True, min_value=1)
    compare_at_price_cents: Integer(min_value=0)
    cost_price_cents: Integer(min_value=0)
    stock_qty: Integer(default=0)
    variants: HasMany(Variant)
    image_urls: Text()  # JSON list of URLs
    status: String(choices=ProductStatus, default=ProductStatus.DRAFT.value)
    order_reference_count: Integer(default=0, min_value=0)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def slug_must_be_url_safe(self):
        validate_slug(self.slug)

    @invariant.post
    def compare_at_price_must_exceed_price(self):
        if self.compare_at_price_cents and self.compare_at_price_cents <= self.price_cents:
            raise ValidationError({"compare_at_price_cents": ["Compare-at price must be higher than the price"]})

    @invariant.post
    def active_products_need_an_image(self):
        if self.status == ProductStatus.ACTIVE.value and not self.images:
            raise ValidationError({"image_urls": ["Active products need at least one image"]})

    # -------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------
    @property
    def images(self) -> list[str]:
        return json.loads(self.image_urls) if self.image_urls else []

    @property
    def sorted_variants(self) -> list:
        return sorted(self.variants or [], key=lambda variant: variant.position or 0)

    def variant_at(self, index: int):
        variants = self.sorted_variants
        if index is None or index < 0 or index >= len(variants):
            raise ValidationError({"variant_index": [f"Product has no variant at index {index}"]})
        return variants[index]

    @property
    def is_referenced_by_orders(self) -> bool:
        return (self.order_reference_count or 0) > 0

    # -------------------------------------------------------------------
    # Factory and editing
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, name, price_cents, variants=None, **details):
        from catalogue.product.events import ProductSaved

        now = datetime.now(UTC)
        details = _normalised(details)
        details.setdefault("slug", slugify(name))
        product = cls(name=name, price_cents=price_cents, created_at=now, updated_at=now, **details)
        product.replace_variants(variants or [])

        product.raise_(ProductSaved(**product._saved_payload(created=True), saved_at=now))
        if product.cost_price_cents is not None:
            product._raise_cost_changed(None, now)
        return product

    def update_details(self, variants=None, **details) -> None:
        """Edit an existing product.

        Stock on an existing product only moves through the ledger, so any
        ``stock_qty`` in ``variants`` is ignored: each variant keeps the stock
        of the variant at the same position. A new layout that would change
        the product's total stock is rejected.
        """
        from catalogue.product.events import ProductPriceChanged, ProductSaved

        if variants is not None:
            variants = self._carry_variant_stock(variants)

        now = datetime.now(UTC)
        previous_price = self.price_cents
        previous_cost = self.cost_price_cents
        with atomic_change(self):
            for field_name, value in _normalised(details).items():
                setattr(self, field_name, value)
            if variants is not None:
                self.replace_variants(variants)
            self.updated_at = now

        self.raise_(ProductSaved(**self._saved_payload(created=False), saved_at=now))
        if previous_price != self.price_cents:
            self.raise_(
                ProductPriceChanged(
                    product_id=str(self.id),
                    previous_price_cents=previous_price,
                    new_price_cents=self.price_cents,
                    changed_at=now,
                )
            )
        if previous_cost != self.cost_price_cents:
            self._raise_cost_changed(previous_cost, now)

    def replace_variants(self, variants_data: list[dict]) -> None:
        """Swap in a fresh variant list; positions follow list order."""
        for variant in list(self.variants or []):
            self.remove_variants(variant)
        for position, data in enumerate(variants_data):
            self.add_variants(Variant(position=position, **data))
        if variants_data:
            self.stock_qty = sum(variant.stock_qty or 0 for variant in self.variants)

    def _carry_variant_stock(self, variants_data: list[dict]) -> list[dict]:
        existing = self.sorted_variants
        carried = []
        for position, data in enumerate(variants_data):
            data = {key: value for key, value in data.items() if key != "stock_qty"}
            data["stock_qty"] = existing[position].stock_qty if position < len(existing) else 0
            carried.append(data)

        current_total = self.stock_qty or 0
        new_total = sum(data["stock_qty"] or 0 for data in carried) if carried else current_total
        if new_total != current_total:
            raise ValidationError(
                {
                    "variants": [
                        f"Changing variants would move stock from {current_total} to {new_total}; "
                        "adjust the affected stock to zero first"
                    ]
                }
            )
        return carried

    def set_price(self, new_price_cents: int, reason: str = "manual") -> None:
        from catalogue.product.events import ProductPriceChanged

        if new_price_cents == self.price_cents:
            return
        now = datetime.now(UTC)
        previous = self.price_cents
        with atomic_change(self):
            self.price_cents = new_price_cents
            if self.compare_at_price_cents and self.compare_at_price_cents <= new_price_cents:
                self.compare_at_price_cents = None
            self.updated_at = now

        self.raise_(
            ProductPriceChanged(
                product_id=str(self.id),
                previous_price_cents=previous,
                new_price_cents=new_price_cents,
                reason=reason,
                changed_at=now,
            )
        )

    def set_cost_price(self, cost_price_cents: int) -> None:
        if cost_price_cents == self.cost_price_cents:
            return
        now = datetime.now(UTC)
        previous = self.cost_price_cents
        self.cost_price_cents = cost_price_cents
        self.updated_at = now
        self._raise_cost_changed(previous, now)

    def _raise_cost_changed(self, previous: int | None, now: datetime) -> None:
        from catalogue.product.events import ProductCostChanged

        self.raise_(
            ProductCostChanged(
                product_id=str(self.id),
                previous_cost_price_cents=previous,
                cost_price_cents=self.cost_price_cents,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def adjust_stock(self, delta: int, variant_index: int | None = None, allow_negative: bool = False):
        """Apply a signed stock change. Returns ``(stock_before, stock_after)``.

        With variants the change lands on the chosen variant and the product
        total follows. Nothing changes if the result would be negative and
        negative stock is not allowed.
        """
        if self.variants and variant_index is None:
            raise ValidationError({"variant_index": ["Choose a variant; this product tracks stock per variant"]})

        target = self.variant_at(variant_index) if variant_index is not None else self
        before = target.stock_qty or 0
        after = before + delta
        if after < 0 and not allow_negative:
            raise ValidationError({"delta": [f"Stock cannot go below zero (current {before}, change {delta})"]})

        target.stock_qty = after
        if target is not self:
            self.stock_qty = sum(variant.stock_qty or 0 for variant in self.variants)
        self.updated_at = datetime.now(UTC)
        return before, after

    def record_order_reference(self) -> None:
        self.order_reference_count = (self.order_reference_count or 0) + 1

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def change_status(self, target: ProductStatus) -> None:
        from catalogue.product.events import ProductStatusChanged

        previous = ProductStatus(self.status)
        if previous is target:
            return
        if target is ProductStatus.ACTIVE and not self.images:
            raise ValidationError({"image_urls": ["Active products need at least one image"]})

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(
            ProductStatusChanged(
                product_id=str(self.id),
                previous_status=previous.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    def activate(self) -> None:
        self.change_status(ProductStatus.ACTIVE)

    def archive(self) -> None:
        self.change_status(ProductStatus.ARCHIVED)

    def _saved_payload(self, created: bool) -> dict:
        return {
            "product_id": str(self.id),
            "name": self.name,
            "slug": self.slug,
            "price_cents": self.price_cents,
            "status": self.status,
            "created": str(created),
        }


def _normalised(details: dict) -> dict:
    details = dict(details)
    if "image_urls" in details and not isinstance(details["image_urls"], str | None):
        details["image_urls"] = json.dumps([url for url in details["image_urls"] if url])
    if details.get("slug"):
        details["slug"] = details["slug"].strip().lower()
    return details
