"""Finance bounded context: operating costs and daily profit.

Revenue and cost of goods come from Ordering and Catalogue events; operating
costs are entered by the admin. Every figure is in integer cents and every
day is a store-local calendar day.
"""

import structlog
from protean.domain import Domain

finance = Domain(name="finance")

logger = structlog.get_logger(__name__)
