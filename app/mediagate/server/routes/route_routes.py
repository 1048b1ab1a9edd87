"""Custom route CRUD API -- /api/routes."""

from __future__ import annotations

import json
import logging
from pathlib import PurePath

from aiohttp import web
from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from ...media.classify import MediaKind
from ...state.route_table import RouteTable, normalize_route
from ...util.async_helpers import run_sync
from ..pages import NO_CACHE_HEADERS

logger = logging.getLogger(__name__)


class RouteBody(BaseModel):
    route: str
    media_path: str = Field(validation_alias=AliasChoices("mediaPath", "targetPath"))
    media_name: str | None = Field(
        default=None, validation_alias=AliasChoices("mediaName", "displayName"),
    )
    is_image: bool | None = Field(default=None, validation_alias="isImage")
    is_video: bool | None = Field(default=None, validation_alias="isVideo")

    @field_validator("route")
    @classmethod
    def _route_not_empty(cls, value: str) -> str:
        if not normalize_route(value).strip():
            raise ValueError("route must not be empty")
        return value

    @field_validator("media_path")
    @classmethod
    def _absolute_path(cls, value: str) -> str:
        if not PurePath(value).is_absolute():
            raise ValueError("mediaPath must be an absolute path")
        return value

    @property
    def kind(self) -> MediaKind:
        return MediaKind.from_flags(bool(self.is_image), bool(self.is_video))


def _error(message: str, status: int) -> web.Response:
    return web.json_response({"success": False, "message": message}, status=status)


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    where = ".".join(str(p) for p in first.get("loc", ())) or "body"
    return f"Invalid field '{where}': {first.get('msg', 'invalid value')}"


class RouteRoutes:
    """REST handler for the custom route table."""

    def __init__(self, route_table: RouteTable) -> None:
        self._table = route_table

    def register(self, router: web.UrlDispatcher) -> None:
        router.add_get("/api/routes", self._list)
        router.add_post("/api/routes", self._add)
        router.add_put("/api/routes", self._update)
        router.add_delete("/api/routes", self._delete)

    async def _list(self, _req: web.Request) -> web.Response:
        return web.json_response(
            [r.to_dict() for r in await run_sync(self._table.list)], headers=NO_CACHE_HEADERS,
        )

    async def _add(self, req: web.Request) -> web.Response:
        body = await self._parse(req)
        if isinstance(body, web.Response):
            return body
        result = await run_sync(
            self._table.add, body.route, body.media_path, body.media_name or "", body.kind,
        )
        return web.json_response(result.to_json(), status=200 if result else 400)

    async def _update(self, req: web.Request) -> web.Response:
        body = await self._parse(req)
        if isinstance(body, web.Response):
            return body
        result = await run_sync(
            self._table.update, body.route, body.media_path, body.media_name or "", body.kind,
        )
        return web.json_response(result.to_json(), status=200 if result else 404)

    async def _delete(self, req: web.Request) -> web.Response:
        route = req.query.get("route")
        if not route:
            return _error("Route parameter required", 400)
        result = await run_sync(self._table.delete, route)
        return web.json_response(result.to_json(), status=200 if result else 404)

    @staticmethod
    async def _parse(req: web.Request) -> RouteBody | web.Response:
        try:
            data = await req.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return _error("Invalid JSON body", 400)
        if not isinstance(data, dict):
            return _error("Expected a JSON object", 400)
        try:
            return RouteBody.model_validate(data)
        except ValidationError as exc:
            logger.info("Rejected route body: %s", exc.errors()[0].get("msg"))
            return _error(_describe(exc), 400)
