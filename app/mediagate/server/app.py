"""Gateway server -- app factory, middleware and entry point."""

from __future__ import annotations

import logging

from aiohttp import web
from aiohttp.abc import AbstractAccessLogger

from .. import __version__
from ..config.settings import Settings, cfg
from ..media.cache import MediaCache
from ..media.library import AssetLibrary, DirectoryLibrary
from ..media.uploads import UploadStore
from ..state.route_table import RouteTable
from ..util.async_helpers import run_sync
from .dispatcher import Dispatcher
from .routes.media_routes import MediaRoutes
from .routes.route_routes import RouteRoutes
from .routes.upload_routes import UploadRoutes

logger = logging.getLogger(__name__)

_QUIET_PATHS = frozenset({"/api/media", "/api/routes", "/health"})

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "3600",
}


# ---------------------------------------------------------------------------
# Access logger
# ---------------------------------------------------------------------------


class QuietAccessLogger(AbstractAccessLogger):
    """Demotes polling-endpoint log entries to DEBUG."""

    def log(self, request: web.BaseRequest, response: web.StreamResponse, time: float) -> None:
        level = logging.DEBUG if request.path in _QUIET_PATHS else logging.INFO
        self.logger.log(
            level,
            "%s %s %s %s %.3fs",
            request.remote,
            request.method,
            request.path,
            response.status,
            time,
        )


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------


@web.middleware
async def cors_middleware(request: web.Request, handler):  # type: ignore[type-arg]
    if request.method == "OPTIONS":
        return web.Response(status=200, headers=CORS_HEADERS)
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        exc.headers.update(CORS_HEADERS)
        raise
    response.headers.update(CORS_HEADERS)
    return response


@web.middleware
async def error_middleware(request: web.Request, handler):  # type: ignore[type-arg]
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception as exc:
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return web.json_response(
            {"success": False, "message": f"Internal error: {exc}"},
            status=500,
        )


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


async def create_app() -> web.Application:
    factory = AppFactory()
    return await factory.build()


class AppFactory:
    """Builds the aiohttp application with the shared services wired in.

    The route table, upload store and media cache are created once here and
    handed to every handler that needs them; they live as long as the app.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        library: AssetLibrary | None = None,
    ) -> None:
        self._settings = settings or cfg
        self._library = library

    async def build(self) -> web.Application:
        s = self._settings
        s.ensure_dirs()

        self.route_table = RouteTable(s.routes_path)
        self.uploads = UploadStore(s.uploads_dir)
        self.media_cache = MediaCache(
            self._library or DirectoryLibrary(s.library_dirs), self.uploads,
        )

        app = web.Application(
            middlewares=[cors_middleware, error_middleware],
            client_max_size=s.max_upload_bytes,
        )
        self._register_routes(app)
        app.on_startup.append(self._on_startup)
        return app

    def _register_routes(self, app: web.Application) -> None:
        router = app.router
        router.add_get("/health", _health)

        RouteRoutes(self.route_table).register(router)
        MediaRoutes(self.media_cache).register(router)
        UploadRoutes(self.uploads, self.media_cache).register(router)

        # Must come last: its catch-all pattern would shadow the API paths.
        Dispatcher(self.route_table, self.media_cache).register(router)

    async def _on_startup(self, _app: web.Application) -> None:
        routes = await run_sync(self.route_table.list)
        logger.info(
            "Serving %d route(s) from %s; uploads in %s",
            len(routes), self.route_table.path, self.uploads.directory,
        )
        if not self._settings.library_dirs and self._library is None:
            logger.info("No MEDIAGATE_LIBRARY_DIRS configured; listing uploads only")


# ---------------------------------------------------------------------------
# Utility handlers
# ---------------------------------------------------------------------------


async def _health(_req: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "version": __version__})


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    cfg.reload()
    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(asctime)s  %(name)s  %(levelname)s  %(message)s",
    )
    logger.info("Starting media gateway on %s:%d ...", cfg.host, cfg.port)
    web.run_app(
        create_app(),
        host=cfg.host,
        port=cfg.port,
        access_log_class=QuietAccessLogger,
    )


if __name__ == "__main__":
    main()
