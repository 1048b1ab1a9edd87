"""Persistent state owned by the gateway process."""

from .route_table import MediaRoute, RouteTable, normalize_route

__all__ = ["MediaRoute", "RouteTable", "normalize_route"]
