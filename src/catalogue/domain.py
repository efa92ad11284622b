"""Catalogue bounded context: products, bundles and the stock ledger.

Stock levels live on products (or their variants) and every change to them
is written to the StockMovement ledger in the same unit of work.
"""

import structlog
from protean.domain import Domain

catalogue = Domain(name="catalogue")

logger = structlog.get_logger(__name__)
