"""Contacts domain API package."""

from contacts.api.routes import router

__all__ = ["router"]
