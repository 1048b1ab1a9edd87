"""Route table -- user-chosen short names mapped to media files.

The table is mirrored to a single JSON document (an array of route records)
that this class alone writes.  Records load lazily on first access and are
flushed after every mutation.  A missing or corrupt document is treated as
an empty table.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Any

from ..config.settings import cfg
from ..media.classify import MediaKind, classify_name
from ..util.result import Result
from ._json_store import JsonStore

logger = logging.getLogger(__name__)


def normalize_route(route: str) -> str:
    """Strip one leading slash; route keys are otherwise case-sensitive."""
    return route[1:] if route.startswith("/") else route


@dataclass(frozen=True)
class MediaRoute:
    route: str
    target_path: str
    display_name: str = ""
    kind: MediaKind = MediaKind.UNKNOWN

    @property
    def is_image(self) -> bool:
        return self.kind is MediaKind.IMAGE

    @property
    def is_video(self) -> bool:
        return self.kind is MediaKind.VIDEO

    @property
    def serving_kind(self) -> MediaKind:
        """Declared kind, or the target's extension family when undeclared."""
        if self.kind is not MediaKind.UNKNOWN:
            return self.kind
        return classify_name(self.target_path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "route": self.route,
            "mediaPath": self.target_path,
            "mediaName": self.display_name,
            "isImage": self.is_image,
            "isVideo": self.is_video,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MediaRoute:
        target = str(data.get("mediaPath") or data.get("targetPath") or "")
        name = data.get("mediaName") or data.get("displayName") or PurePath(target).name
        return cls(
            route=normalize_route(str(data["route"])),
            target_path=target,
            display_name=str(name),
            kind=MediaKind.from_flags(
                bool(data.get("isImage", False)), bool(data.get("isVideo", False)),
            ),
        )


class RouteTable:
    """Thread-safe, JSON-backed map of route name to :class:`MediaRoute`."""

    def __init__(self, path: Path | None = None) -> None:
        self._store = JsonStore(path or cfg.routes_path, default=[])
        self._routes: dict[str, MediaRoute] | None = None
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._store.path

    # -- queries -----------------------------------------------------------

    def list(self) -> list[MediaRoute]:
        with self._lock:
            return list(self._loaded().values())

    def get(self, route: str) -> MediaRoute | None:
        with self._lock:
            return self._loaded().get(normalize_route(route))

    # -- mutations ---------------------------------------------------------

    def add(
        self,
        route: str,
        target_path: str,
        display_name: str = "",
        kind: MediaKind = MediaKind.UNKNOWN,
    ) -> Result:
        key = normalize_route(route)
        if not key:
            return Result.fail("Route name required")
        with self._lock:
            routes = self._loaded()
            if key in routes:
                return Result.fail("Route already exists")
            entry = self._make(key, target_path, display_name, kind)
            self._commit({**routes, key: entry})
        logger.info("Route added: /%s -> %s", key, target_path)
        return Result.ok("Route added successfully", value=entry)

    def update(
        self,
        route: str,
        target_path: str,
        display_name: str = "",
        kind: MediaKind = MediaKind.UNKNOWN,
    ) -> Result:
        key = normalize_route(route)
        with self._lock:
            routes = self._loaded()
            if key not in routes:
                return Result.fail("Route not found")
            entry = self._make(key, target_path, display_name, kind)
            updated = dict(routes)
            updated[key] = entry
            self._commit(updated)
        logger.info("Route updated: /%s -> %s", key, target_path)
        return Result.ok("Route updated successfully", value=entry)

    def delete(self, route: str) -> Result:
        key = normalize_route(route)
        with self._lock:
            routes = self._loaded()
            if key not in routes:
                return Result.fail("Route not found")
            self._commit({k: v for k, v in routes.items() if k != key})
        logger.info("Route deleted: /%s", key)
        return Result.ok("Route deleted successfully")

    def invalidate(self) -> None:
        with self._lock:
            self._routes = None

    # -- persistence -------------------------------------------------------

    def _loaded(self) -> dict[str, MediaRoute]:
        if self._routes is None:
            self._routes = self._read()
        return self._routes

    def _read(self) -> dict[str, MediaRoute]:
        raw = self._store.load()
        if not isinstance(raw, list):
            logger.warning("Ignoring malformed route table in %s", self._store.path)
            return {}
        routes: dict[str, MediaRoute] = {}
        for item in raw:
            try:
                entry = MediaRoute.from_dict(item)
            except (KeyError, TypeError, AttributeError) as exc:
                logger.warning("Skipping bad route record %r: %s", item, exc)
                continue
            routes.setdefault(entry.route, entry)
        return routes

    def _commit(self, routes: dict[str, MediaRoute]) -> None:
        # Persist first so a failed write leaves memory and disk in step.
        self._store.save([r.to_dict() for r in routes.values()])
        self._routes = routes

    @staticmethod
    def _make(key: str, target_path: str, display_name: str, kind: MediaKind) -> MediaRoute:
        return MediaRoute(
            route=key,
            target_path=target_path,
            display_name=display_name or PurePath(target_path).name,
            kind=kind,
        )
