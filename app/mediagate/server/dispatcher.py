"""Path-based fallback dispatch -- index page, custom routes, media aliases.

API endpoints are registered on the router before this handler, so they
always take precedence.  Everything else resolves in a fixed order:

1. ``/`` -> index page
2. a key in the route table -> raw bytes or a viewer page
3. ``media/...`` -> media cache lookup by virtual path
4. any other path with a ``/`` -> best-effort media cache lookup
5. otherwise 404
"""

from __future__ import annotations

import logging
from pathlib import Path

from aiohttp import web

from ..media.cache import MEDIA_PREFIX, MediaCache
from ..media.classify import MediaKind, content_type_for
from ..state.route_table import MediaRoute, RouteTable, normalize_route
from ..util.async_helpers import run_sync
from .pages import NO_CACHE_HEADERS, render_index, render_viewer

logger = logging.getLogger(__name__)

RAW_CACHE_HEADERS = {"Cache-Control": "public, max-age=3600"}


def wants_raw_bytes(req: web.Request, kind: MediaKind) -> bool:
    """True when the client asked for the file itself rather than a viewer."""
    if req.query.get("file") == "1":
        return True
    accept = req.headers.get("Accept", "")
    if "text/html" in accept:
        return False
    if kind is MediaKind.VIDEO:
        return "video/" in accept
    return "image/" in accept


async def file_response(path: Path, kind: MediaKind | None = None) -> web.StreamResponse:
    if not await run_sync(path.is_file):
        return web.Response(status=404, text="File not found")
    return web.FileResponse(
        path,
        headers={"Content-Type": content_type_for(path.name, kind), **RAW_CACHE_HEADERS},
    )


class Dispatcher:
    """Catch-all handler combining the route table with the media cache."""

    def __init__(self, route_table: RouteTable, media_cache: MediaCache) -> None:
        self._routes = route_table
        self._media = media_cache

    def register(self, router: web.UrlDispatcher) -> None:
        router.add_get("/", self._index)
        router.add_get("/{tail:.*}", self.dispatch)

    async def _index(self, _req: web.Request) -> web.Response:
        return web.Response(
            text=render_index(),
            content_type="text/html",
            charset="utf-8",
            headers=NO_CACHE_HEADERS,
        )

    async def dispatch(self, req: web.Request) -> web.StreamResponse:
        path = normalize_route(req.path)
        if not path:
            return await self._index(req)

        route = await run_sync(self._routes.get, req.path)
        if route is not None:
            return await self.serve_route(req, route)

        if path.startswith(MEDIA_PREFIX) or "/" in path:
            return await self.serve_media(path)

        return web.Response(status=404, text="Not found")

    async def serve_route(self, req: web.Request, route: MediaRoute) -> web.StreamResponse:
        kind = route.serving_kind
        if kind is MediaKind.UNKNOWN:
            logger.warning(
                "Route /%s has no media kind and an unrecognised target; serving as image",
                route.route,
            )
            kind = MediaKind.IMAGE

        target = Path(route.target_path)
        if wants_raw_bytes(req, kind):
            return await file_response(target, kind)

        if not await run_sync(target.is_file):
            return web.Response(status=404, text="File not found")
        return web.Response(
            text=render_viewer(route.route, route.display_name, kind),
            content_type="text/html",
            charset="utf-8",
            headers=NO_CACHE_HEADERS,
        )

    async def serve_media(self, path: str) -> web.StreamResponse:
        found = await self._media.lookup(path)
        if found is None:
            return web.Response(status=404, text="File not found")
        return await file_response(found)
