"""Media listing API -- /api/media and /api/refresh."""

from __future__ import annotations

import logging

from aiohttp import web

from ...media.cache import MediaCache
from ...util.async_helpers import run_bounded

logger = logging.getLogger(__name__)

LIST_TIMEOUT = 15.0


class MediaRoutes:
    """Auto-discovered media listing backed by the media cache."""

    def __init__(self, media_cache: MediaCache, *, list_timeout: float = LIST_TIMEOUT) -> None:
        self._cache = media_cache
        self._list_timeout = list_timeout

    def register(self, router: web.UrlDispatcher) -> None:
        router.add_get("/api/media", self._list)
        router.add_post("/api/refresh", self._refresh)

    async def _list(self, req: web.Request) -> web.Response:
        refresh = req.query.get("refresh") == "true"
        try:
            files, in_time = await run_bounded(
                self._cache.list(force_refresh=refresh), self._list_timeout, [],
            )
        except Exception as exc:
            logger.warning("Media listing failed: %s", exc, exc_info=True)
            return web.json_response([])
        if not in_time:
            logger.warning(
                "Media listing exceeded %.0fs; returning empty list (%s)",
                self._list_timeout,
                "cached" if self._cache.is_populated else "discovery continues in background",
            )
        return web.json_response([f.to_dict() for f in files])

    async def _refresh(self, _req: web.Request) -> web.Response:
        self._cache.invalidate()
        return web.json_response({"success": True, "message": "Cache cleared"})
