"""JSON API for URL shortener."""

from .routes import root_router as api_root_router
from .routes import router as api_router

__all__ = ["api_router", "api_root_router"]
