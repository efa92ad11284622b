"""Product save: create or update in one command."""

import json

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Product")
class SaveProduct:
    product_id: Identifier()
    name: String(required=True, max_length=255)
    slug: String(max_length=200)
    sku: String(max_length=50)
    description: Text()
    category: String(max_length=100)
    price_cents: Integer(required=True)
    compare_at_price_cents: Integer()
    cost_price_cents: Integer()
    stock_qty: Integer()
    variants: Text()  # JSON list of {label, sku, price_cents, stock_qty}
    image_urls: Text()  # JSON list


@catalogue.command_handler(part_of=Product)
class SaveProductHandler:
    @handle(SaveProduct)
    def save_product(self, command):
        repo = current_domain.repository_for(Product)
        variants = json.loads(command.variants) if command.variants else None
        details = {
            "slug": command.slug or None,
            "sku": command.sku,
            "description": command.description,
            "category": command.category,
            "compare_at_price_cents": command.compare_at_price_cents,
            "cost_price_cents": command.cost_price_cents,
            "image_urls": command.image_urls or "[]",
        }
        if details["slug"] is None:
            details.pop("slug")

        if command.product_id:
            product = repo.get(command.product_id)
            product.update_details(
                name=command.name.strip(),
                price_cents=command.price_cents,
                variants=variants,
                **details,
            )
        else:
            product = Product.create(
                name=command.name.strip(),
                price_cents=command.price_cents,
                stock_qty=command.stock_qty or 0,
                variants=variants,
                **details,
            )

        repo.add(product)
        logger.info("Product saved", product_id=str(product.id), name=product.name)
        return str(product.id)
