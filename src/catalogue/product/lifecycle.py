"""Product lifecycle management: commands and handler."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from catalogue.bundle.queries import bundles_containing
from catalogue.domain import catalogue
from catalogue.product.product import Product
from catalogue.stock.queries import product_has_order_movements

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Product")
class ActivateProduct:
    product_id: Identifier(required=True)


@catalogue.command(part_of="Product")
class ArchiveProduct:
    product_id: Identifier(required=True)


@catalogue.command(part_of="Product")
class DeleteProduct:
    """Remove a product, or archive it while orders or bundles still point at it."""

    product_id: Identifier(required=True)


@catalogue.command_handler(part_of=Product)
class ManageLifecycleHandler:
    @handle(ActivateProduct)
    def activate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.activate()
        repo.add(product)

    @handle(ArchiveProduct)
    def archive_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.archive()
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        bundles = bundles_containing(str(product.id))
        if bundles or product.is_referenced_by_orders or product_has_order_movements(str(product.id)):
            product.archive()
            repo.add(product)
            logger.info(
                "Product archived instead of deleted",
                product_id=str(product.id),
                order_references=product.order_reference_count,
                bundles=[str(bundle.id) for bundle in bundles],
            )
            return "archived"

        repo._dao.delete(product)
        logger.info("Product deleted", product_id=str(product.id))
        return "deleted"
