"""Finance domain API package."""

from finance.api.routes import router

__all__ = ["router"]
