"""Raw file upload API -- /api/upload."""

from __future__ import annotations

import logging

from aiohttp import web

from ...media.cache import MediaCache
from ...media.multipart import MultipartError, extract_file_part
from ...media.uploads import InvalidFilenameError, UploadStore
from ...util.async_helpers import run_sync

logger = logging.getLogger(__name__)


class UploadRoutes:
    """Accepts one file per multipart request and stores it in the uploads area."""

    def __init__(self, uploads: UploadStore, media_cache: MediaCache) -> None:
        self._uploads = uploads
        self._cache = media_cache

    def register(self, router: web.UrlDispatcher) -> None:
        router.add_post("/api/upload", self._upload)

    async def _upload(self, req: web.Request) -> web.Response:
        content_type = req.headers.get("Content-Type", "")
        body = await req.read()
        try:
            part = extract_file_part(content_type, body)
            await run_sync(self._uploads.save, part.filename or "", part.payload)
            logger.info(
                "Upload field %r stored %s (%s)",
                part.name, part.filename, part.content_type or "no content type",
            )
        except (MultipartError, InvalidFilenameError) as exc:
            logger.info("Upload rejected: %s", exc)
            return web.json_response({"success": False, "message": str(exc)}, status=400)

        self._cache.invalidate()
        return web.json_response({
            "success": True,
            "message": "File uploaded successfully",
            "file": part.filename,
        })
