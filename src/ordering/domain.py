"""Ordering bounded context: order recording and fulfillment tracking.

Orders arrive from the storefront checkout, are normalised once at the edge,
and then only move forward through the fulfillment workflow (or get
cancelled). Orders are never deleted, only archived.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
