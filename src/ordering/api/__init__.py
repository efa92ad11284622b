"""Ordering domain API package."""

from ordering.api.routes import analytics_router, order_router

__all__ = ["order_router", "analytics_router"]
