"""Device-wide media library -- the asset store behind auto-discovery.

:class:`AssetLibrary` is the boundary the media cache talks to.  On a phone
it would wrap the platform photo store; :class:`DirectoryLibrary` stands in
for it on a regular host by indexing a set of configured directories.
"""

from __future__ import annotations

import hashlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ..util.async_helpers import run_sync
from .classify import MediaKind, classify_name

logger = logging.getLogger(__name__)

MAX_ASSETS_PER_KIND = 1000


@dataclass(frozen=True)
class Asset:
    id: str
    title: str
    kind: MediaKind


class AssetLibrary:
    """Interface of a media asset store.  All methods may be slow."""

    async def request_access(self) -> bool:
        raise NotImplementedError

    async def list_assets(self, kind: MediaKind, limit: int) -> list[Asset]:
        raise NotImplementedError

    async def resolve_file(self, asset: Asset) -> Path | None:
        raise NotImplementedError


class EmptyLibrary(AssetLibrary):
    async def request_access(self) -> bool:
        return False

    async def list_assets(self, kind: MediaKind, limit: int) -> list[Asset]:
        return []

    async def resolve_file(self, asset: Asset) -> Path | None:
        return None


def asset_id_for(path: Path) -> str:
    return hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:16]


class DirectoryLibrary(AssetLibrary):
    """Indexes image and video files below a list of root directories."""

    def __init__(self, roots: list[Path]) -> None:
        self._roots = [r.expanduser() for r in roots]
        self._index: dict[str, Path] = {}

    async def request_access(self) -> bool:
        return await run_sync(self._readable_roots_exist)

    async def list_assets(self, kind: MediaKind, limit: int) -> list[Asset]:
        found = await run_sync(self._scan, kind, limit)
        assets = []
        for path in found:
            asset = Asset(id=asset_id_for(path), title=path.name, kind=kind)
            self._index[asset.id] = path
            assets.append(asset)
        return assets

    async def resolve_file(self, asset: Asset) -> Path | None:
        path = self._index.get(asset.id)
        if path is None:
            return None
        return path if await run_sync(path.is_file) else None

    def _readable_roots_exist(self) -> bool:
        return any(r.is_dir() and os.access(r, os.R_OK | os.X_OK) for r in self._roots)

    def _scan(self, kind: MediaKind, limit: int) -> list[Path]:
        found: list[Path] = []
        for root in self._roots:
            if not root.is_dir():
                continue
            for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
                dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
                for name in sorted(filenames):
                    if name.startswith(".") or classify_name(name) is not kind:
                        continue
                    found.append(Path(dirpath, name).resolve())
                    if len(found) >= limit:
                        return found
        return found


def _log_walk_error(exc: OSError) -> None:
    logger.debug("Skipping unreadable library path: %s", exc)
