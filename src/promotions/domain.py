"""Promotions bounded context: time-windowed specials and coupon codes."""

import structlog
from protean.domain import Domain

promotions = Domain(name="promotions")

logger = structlog.get_logger(__name__)
