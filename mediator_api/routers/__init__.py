"""Routers package for the mediation API."""

from .invites import router as invites_router
from .partnerships import router as partnerships_router
from .sessions import router as sessions_router
from .settings import router as settings_router

__all__ = ["invites_router", "partnerships_router", "sessions_router", "settings_router"]
