"""Bundle aggregate: a fixed set of products sold together at one price."""

import json
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from catalogue.domain import catalogue
from catalogue.product.product import ProductStatus, slugify, validate_slug


@catalogue.event(part_of="Bundle")
class BundleSaved:
    __version__ = 1

    bundle_id: Identifier(required=True)
    name: String(required=True)
    price_cents: Integer(required=True)
    item_count: Integer(required=True)
    status: String(required=True)
    saved_at: DateTime(required=True)


@catalogue.entity(part_of="Bundle")
class BundleItem:
    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)


@catalogue.aggregate
class Bundle:
    name: String(required=True, max_length=255)
    slug: String(max_length=200)
    description: Text()
    price_cents: Integer(required=True, min_value=1)
    compare_at_price_cents: Integer(min_value=0)
    items: HasMany(BundleItem)
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

    @property
    def images(self) -> list[str]:
        return json.loads(self.image_urls) if self.image_urls else []

    @property
    def components(self) -> list[tuple[str, int]]:
        return [(str(item.product_id), item.quantity) for item in self.items or []]

    @classmethod
    def create(cls, name, price_cents, items, **details):
        now = datetime.now(UTC)
        details.setdefault("slug", slugify(name))
        bundle = cls(name=name, price_cents=price_cents, created_at=now, updated_at=now, **details)
        bundle.replace_items(items)
        bundle._raise_saved(now)
        return bundle

    def revise(self, items=None, **details) -> None:
        now = datetime.now(UTC)
        with atomic_change(self):
            for field_name, value in details.items():
                setattr(self, field_name, value)
            if items is not None:
                self.replace_items(items)
            self.updated_at = now
        self._raise_saved(now)

    def replace_items(self, items: list[dict]) -> None:
        merged: dict[str, int] = {}
        for item in items:
            product_id = str(item.get("product_id") or "").strip()
            if not product_id:
                raise ValidationError({"items": ["Each bundle item needs a product"]})
            merged[product_id] = merged.get(product_id, 0) + int(item.get("quantity") or 1)
        if not merged:
            raise ValidationError({"items": ["A bundle needs at least one product"]})

        for existing in list(self.items or []):
            self.remove_items(existing)
        for product_id, quantity in merged.items():
            self.add_items(BundleItem(product_id=product_id, quantity=quantity))

    def change_status(self, target: ProductStatus) -> None:
        self.status = target.value
        self.updated_at = datetime.now(UTC)

    def record_order_reference(self) -> None:
        self.order_reference_count = (self.order_reference_count or 0) + 1

    def _raise_saved(self, now: datetime) -> None:
        self.raise_(
            BundleSaved(
                bundle_id=str(self.id),
                name=self.name,
                price_cents=self.price_cents,
                item_count=len(self.items or []),
                status=self.status,
                saved_at=now,
            )
        )
