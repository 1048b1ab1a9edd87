"""HTML payloads served by the gateway -- index page and media viewers."""

from __future__ import annotations

import functools
import html
from pathlib import Path
from string import Template
from urllib.parse import quote

from ..media.classify import MediaKind

_STATIC_DIR = Path(__file__).resolve().parent / "static"

NO_CACHE_HEADERS: dict[str, str] = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@functools.lru_cache(maxsize=None)
def _template(name: str) -> Template:
    return Template((_STATIC_DIR / name).read_text(encoding="utf-8"))


def render_index() -> str:
    return _template("index.html").template


def raw_url(route: str) -> str:
    """URL a viewer page uses to fetch the raw bytes behind *route*."""
    return "/" + quote(route, safe="/") + "?file=1"


def render_viewer(route: str, title: str, kind: MediaKind) -> str:
    name = "viewer_video.html" if kind is MediaKind.VIDEO else "viewer_image.html"
    return _template(name).safe_substitute(
        src=html.escape(raw_url(route), quote=True),
        title=html.escape(title or route, quote=True),
    )
