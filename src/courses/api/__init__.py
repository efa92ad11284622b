"""Courses domain API package."""

from courses.api.routes import course_router, purchase_router

__all__ = ["course_router", "purchase_router"]
