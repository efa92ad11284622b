"""Cross-domain event contracts for Catalogue domain events.

Finance keeps its own copy of product cost prices so it can value the goods
sold on each paid order. Registered in the consuming domain with
``register_external_event()`` under the matching ``__type__`` string.

The source-of-truth events are in src/catalogue/product/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, Integer


class ProductCostChanged(BaseEvent):
    """A product's cost price changed; a cleared cost is ``None``."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_cost_price_cents = Integer()
    cost_price_cents = Integer()
    changed_at = DateTime(required=True)
