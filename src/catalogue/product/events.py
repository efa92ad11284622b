"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from catalogue.domain import catalogue


@catalogue.event(part_of="Product")
class ProductSaved:
    """A product was created or its details were edited."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String()
    price_cents: Integer(required=True)
    status: String(required=True)
    created: String(required=True)  # "True" on first save
    saved_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductPriceChanged:
    """A product's selling price changed."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_price_cents: Integer(required=True)
    new_price_cents: Integer(required=True)
    reason: String(default="manual")  # manual, bulk_update
    changed_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductStatusChanged:
    """A product moved between draft, active and archived."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
    changed_at: DateTime(required=True)



@catalogue.event(part_of="Product")
class ProductCostChanged:
    """A product's cost price changed; a cleared cost is ``None``."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_cost_price_cents: Integer()
    cost_price_cents: Integer()
    changed_at: DateTime(required=True)
