"""Server route handlers."""

from __future__ import annotations

from .media_routes import MediaRoutes
from .route_routes import RouteRoutes
from .upload_routes import UploadRoutes

__all__ = [
    "MediaRoutes",
    "RouteRoutes",
    "UploadRoutes",
]
