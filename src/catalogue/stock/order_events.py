"""Inbound cross-domain event handler: Catalogue reacts to Ordering events.

OrderRecorded bumps the order reference count on every product or bundle the
order mentions, which is what later turns a delete into an archive.
OrderPaid deducts the sold quantities from stock through the ledger. A bundle
line deducts each of its component products.

Cross-domain events are imported from shared.events.ordering and registered
as external events via catalogue.register_external_event().
"""

import json

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.ordering import OrderPaid, OrderRecorded

from catalogue.bundle.bundle import Bundle
from catalogue.domain import catalogue
from catalogue.product.product import Product
from catalogue.stock.adjustment import apply_stock_change
from catalogue.stock.movement import MovementReason, StockMovement
from catalogue.stock.queries import movements_for_order

logger = structlog.get_logger(__name__)

# Register external events so Protean can deserialize them
catalogue.register_external_event(OrderRecorded, "Ordering.OrderRecorded.v1")
catalogue.register_external_event(OrderPaid, "Ordering.OrderPaid.v1")


def _find(aggregate_cls, identifier: str, loaded: dict | None = None):
    if loaded is not None and identifier in loaded:
        return loaded[identifier]
    try:
        item = current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError:
        return None
    if loaded is not None:
        loaded[identifier] = item
    return item


@catalogue.event_handler(part_of=StockMovement, stream_category="ordering::order")
class OrderingCatalogueEventHandler:
    """Keeps product references and stock in step with recorded and paid orders."""

    @handle(OrderRecorded)
    def on_order_recorded(self, event: OrderRecorded) -> None:
        referenced = {str(line["product_id"]) for line in json.loads(event.items)}
        for item_id in sorted(referenced):
            for aggregate_cls in (Product, Bundle):
                item = _find(aggregate_cls, item_id)
                if item is None:
                    continue
                item.record_order_reference()
                current_domain.repository_for(aggregate_cls).add(item)
                break
            else:
                logger.warning(
                    "Order references an unknown catalogue item",
                    order_id=str(event.order_id),
                    item_id=item_id,
                )

    @handle(OrderPaid)
    def on_order_paid(self, event: OrderPaid) -> None:
        order_id = str(event.order_id)
        if movements_for_order(order_id):
            logger.info("Stock already deducted for order", order_id=order_id)
            return

        loaded: dict = {}
        for line in json.loads(event.items):
            for product, variant_index, quantity in self._stock_lines(line, order_id, loaded):
                movement = apply_stock_change(
                    product,
                    delta=-quantity,
                    reason=MovementReason.ORDER_SALE,
                    variant_index=variant_index,
                    order_id=order_id,
                    note=f"Order {event.order_number}",
                    allow_negative=True,
                )
                if movement.stock_after < 0:
                    logger.warning(
                        "Order oversold stock",
                        order_id=order_id,
                        product_id=str(product.id),
                        variant_index=variant_index,
                        stock_after=movement.stock_after,
                    )

        logger.info("Deducted stock for paid order", order_id=order_id, order_number=event.order_number)

    def _stock_lines(self, line: dict, order_id: str, loaded: dict):
        item_id = str(line["product_id"])
        quantity = int(line["quantity"])

        product = _find(Product, item_id, loaded)
        if product is not None:
            variant_index = line.get("variant_index")
            if not product.variants:
                variant_index = None
            elif variant_index is None:
                logger.warning("Paid order line has no variant", order_id=order_id, product_id=item_id)
                return []
            return [(product, variant_index, quantity)]

        bundle = _find(Bundle, item_id)
        if bundle is None:
            logger.warning("Paid order line has no catalogue item", order_id=order_id, item_id=item_id)
            return []

        lines = []
        for component_id, component_quantity in bundle.components:
            component = _find(Product, component_id, loaded)
            if component is None:
                logger.warning("Bundle component is missing", bundle_id=item_id, product_id=component_id)
                continue
            # Per-variant stock cannot be resolved from a bundle line.
            if component.variants:
                logger.warning("Skipping variant product inside bundle", bundle_id=item_id, product_id=component_id)
                continue
            lines.append((component, None, quantity * component_quantity))
        return lines
