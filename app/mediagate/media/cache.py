"""Media discovery cache -- merges the asset library with uploaded files.

The cache is populated on first use and then served without I/O until it is
invalidated or a caller forces a refresh.  An empty population is a valid
result and is cached like any other.  Library calls are time-bounded; a slow
or unavailable library shrinks the listing instead of failing it, and one
shared population task keeps running when an impatient caller gives up.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..util.async_helpers import run_bounded, run_sync
from .classify import MediaKind, classify_name
from .library import MAX_ASSETS_PER_KIND, Asset, AssetLibrary
from .uploads import UPLOADS_SEGMENT, UploadStore

logger = logging.getLogger(__name__)

MEDIA_PREFIX = "media/"

ACCESS_TIMEOUT = 5.0
ENUMERATE_TIMEOUT = 10.0
RESOLVE_TIMEOUT = 2.0
LIBRARY_DEADLINE = 10.0
MAX_LIBRARY_FILES = 100



@dataclass(frozen=True)
class MediaFile:
    display_name: str
    virtual_path: str
    kind: MediaKind
    path: Path = field(repr=False)
    asset_id: str = ""

    @property
    def is_image(self) -> bool:
        return self.kind is MediaKind.IMAGE

    @property
    def is_video(self) -> bool:
        return self.kind is MediaKind.VIDEO

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.display_name,
            "path": self.virtual_path,
            "type": "video" if self.is_video else "image",
        }


@dataclass
class DiscoveryResult:
    files: list[MediaFile] = field(default_factory=list)
    degraded: bool = False


def strip_media_prefix(path: str) -> str:
    path = path.lstrip("/")
    return path[len(MEDIA_PREFIX):] if path.startswith(MEDIA_PREFIX) else path


class MediaCache:
    """In-memory snapshot of discoverable media, shared by all requests.

    Concurrent cold callers await the same population task.  The task is
    shielded, so a caller that times out does not abort discovery; the
    result is still cached for the next request.  An :meth:`invalidate`
    issued while discovery runs makes that result uncacheable.
    """

    def __init__(
        self,
        library: AssetLibrary,
        uploads: UploadStore,
        *,
        access_timeout: float = ACCESS_TIMEOUT,
        enumerate_timeout: float = ENUMERATE_TIMEOUT,
        resolve_timeout: float = RESOLVE_TIMEOUT,
        library_deadline: float = LIBRARY_DEADLINE,
    ) -> None:
        self._library = library
        self._uploads = uploads
        self._access_timeout = access_timeout
        self._enumerate_timeout = enumerate_timeout
        self._resolve_timeout = resolve_timeout
        self._library_deadline = library_deadline
        self._files: list[MediaFile] | None = None
        self._generation = 0
        self._task: asyncio.Task[list[MediaFile]] | None = None
        self._task_generation = -1

    @property
    def is_populated(self) -> bool:
        return self._files is not None

    async def list(self, force_refresh: bool = False) -> list[MediaFile]:
        if not force_refresh and self._files is not None:
            return list(self._files)
        files = await asyncio.shield(self._population())
        return list(files)

    async def lookup(self, virtual_path: str) -> Path | None:
        """Resolve a virtual path (``media/<id>/<name>`` or ``media/uploads/<name>``)."""
        rel = strip_media_prefix(virtual_path)
        head, _, rest = rel.partition("/")
        if head == UPLOADS_SEGMENT and rest:
            return await run_sync(self._uploads.resolve, rest)

        if not head:
            return None
        for media in await self.list():
            if media.asset_id and media.asset_id == head:
                return media.path
        return None

    def invalidate(self) -> None:
        self._files = None
        self._generation += 1

    # -- population --------------------------------------------------------

    def _population(self) -> asyncio.Task[list[MediaFile]]:
        """The running population task for the current generation, started on demand."""
        if self._task is None or self._task_generation != self._generation:
            self._task = asyncio.create_task(self._populate(self._generation))
            self._task_generation = self._generation
            self._task.add_done_callback(self._population_done)
        return self._task

    def _population_done(self, task: asyncio.Task[list[MediaFile]]) -> None:
        if self._task is task:
            self._task = None
        if not task.cancelled() and task.exception() is not None:
            logger.warning("Media discovery failed: %s", task.exception())

    async def _populate(self, generation: int) -> list[MediaFile]:
        result = await self._discover()
        if result.degraded:
            logger.warning("Media library degraded; listing %d file(s)", len(result.files))
        if generation == self._generation:
            self._files = result.files
        else:
            logger.debug("Media cache invalidated during discovery; result not cached")
        return result.files

    # -- discovery ---------------------------------------------------------

    async def _discover(self) -> DiscoveryResult:
        result = DiscoveryResult()
        try:
            _, in_time = await run_bounded(
                self._discover_library(result), self._library_deadline, None,
            )
            if not in_time:
                logger.warning(
                    "Media library exceeded %.0fs; keeping %d file(s)",
                    self._library_deadline, len(result.files),
                )
                result.degraded = True
        except Exception as exc:
            logger.warning("Media library unavailable: %s", exc)
            result.degraded = True
        try:
            result.files.extend(await run_sync(self._discover_uploads))
        except OSError as exc:
            logger.warning("Cannot list uploads in %s: %s", self._uploads.directory, exc)
            result.degraded = True
        return result

    async def _discover_library(self, result: DiscoveryResult) -> None:
        granted, in_time = await run_bounded(self._library.request_access(), self._access_timeout, False)
        if not granted:
            logger.info("Media library access %s", "denied" if in_time else "timed out")
            result.degraded = not in_time
            return

        assets: list[Asset] = []
        for kind in (MediaKind.IMAGE, MediaKind.VIDEO):
            found, in_time = await run_bounded(
                self._library.list_assets(kind, MAX_ASSETS_PER_KIND), self._enumerate_timeout, [],
            )
            if not in_time:
                logger.warning("Listing %s assets timed out", kind.value)
                result.degraded = True
            assets.extend(found)

        for asset in assets[:MAX_LIBRARY_FILES]:
            try:
                path, _ = await run_bounded(
                    self._library.resolve_file(asset), self._resolve_timeout, None,
                )
            except Exception as exc:
                logger.debug("Skipping asset %s: %s", asset.id, exc)
                continue
            if path is None:
                continue
            title = asset.title or f"unknown_{asset.id}"
            result.files.append(MediaFile(
                display_name=title,
                virtual_path=f"{MEDIA_PREFIX}{asset.id}/{title}",
                kind=asset.kind,
                path=path,
                asset_id=asset.id,
            ))

    def _discover_uploads(self) -> list[MediaFile]:
        files = []
        for path in self._uploads.list_files():
            kind = classify_name(path.name)
            if kind is MediaKind.UNKNOWN:
                continue
            files.append(MediaFile(
                display_name=path.name,
                virtual_path=UploadStore.virtual_path(path.name),
                kind=kind,
                path=path,
            ))
        return files
