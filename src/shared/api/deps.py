"""FastAPI dependencies shared by the domain routers."""

from fastapi import Request

from shared.settings import AdminSettings, load_settings


def get_settings(request: Request) -> AdminSettings:
    """Settings loaded at startup, or the environment's when no app state exists."""
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else load_settings()
