"""Bundle management: save (create or update) and delete."""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.bundle.bundle import Bundle
from catalogue.domain import catalogue
from catalogue.product.product import Product, ProductStatus

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Bundle")
class SaveBundle:
    bundle_id: Identifier()
    name: String(required=True, max_length=255)
    slug: String(max_length=200)
    description: Text()
    price_cents: Integer(required=True)
    compare_at_price_cents: Integer()
    items: Text(required=True)  # JSON list of {product_id, quantity}
    image_urls: Text()  # JSON list
    status: String(max_length=20)


@catalogue.command(part_of="Bundle")
class DeleteBundle:
    bundle_id: Identifier(required=True)


@catalogue.command_handler(part_of=Bundle)
class ManageBundleHandler:
    @handle(SaveBundle)
    def save_bundle(self, command):
        items = json.loads(command.items)
        _ensure_products_exist(items)

        details = {
            "description": command.description,
            "compare_at_price_cents": command.compare_at_price_cents,
            "image_urls": command.image_urls or "[]",
        }
        if command.slug:
            details["slug"] = command.slug.strip().lower()
        if command.status:
            details["status"] = _bundle_status(command.status).value

        repo = current_domain.repository_for(Bundle)
        if command.bundle_id:
            bundle = repo.get(command.bundle_id)
            bundle.revise(items=items, name=command.name.strip(), price_cents=command.price_cents, **details)
        else:
            bundle = Bundle.create(name=command.name.strip(), price_cents=command.price_cents, items=items, **details)

        repo.add(bundle)
        logger.info("Bundle saved", bundle_id=str(bundle.id), items=len(bundle.items))
        return str(bundle.id)

    @handle(DeleteBundle)
    def delete_bundle(self, command):
        repo = current_domain.repository_for(Bundle)
        bundle = repo.get(command.bundle_id)

        if bundle.order_reference_count:
            bundle.change_status(ProductStatus.ARCHIVED)
            repo.add(bundle)
            logger.info("Bundle archived instead of deleted", bundle_id=str(bundle.id))
            return "archived"

        repo._dao.delete(bundle)
        logger.info("Bundle deleted", bundle_id=str(bundle.id))
        return "deleted"


def _bundle_status(value: str) -> ProductStatus:
    try:
        return ProductStatus(value.strip().lower())
    except ValueError:
        raise ValidationError({"status": [f"Unknown bundle status: {value!r}"]}) from None


def _ensure_products_exist(items: list[dict]) -> None:
    repo = current_domain.repository_for(Product)
    for item in items:
        product_id = item.get("product_id")
        if not product_id:
            continue
        try:
            repo.get(str(product_id))
        except ObjectNotFoundError:
            raise ValidationError({"items": [f"Product {product_id} does not exist"]}) from None
