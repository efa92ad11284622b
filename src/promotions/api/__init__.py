"""Promotions domain API package."""

from promotions.api.routes import coupon_router, special_router

__all__ = ["special_router", "coupon_router"]
