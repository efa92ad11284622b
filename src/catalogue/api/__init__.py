"""Catalogue domain API package."""

from catalogue.api.routes import bundle_router, movement_router, product_router

__all__ = ["product_router", "bundle_router", "movement_router"]
