"""Media type classification and MIME-type registry."""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    UNKNOWN = "unknown"

    @classmethod
    def from_flags(cls, is_image: bool, is_video: bool) -> MediaKind:
        # Video wins when both flags are set.
        if is_video:
            return cls.VIDEO
        if is_image:
            return cls.IMAGE
        return cls.UNKNOWN


EXTENSION_TO_MIME: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".svg": "image/svg+xml",
    ".mp4": "video/mp4",
    ".m4v": "video/mp4",
    ".mov": "video/quicktime",
    ".avi": "video/x-msvideo",
    ".webm": "video/webm",
    ".mkv": "video/x-matroska",
}

DEFAULT_MIME: dict[MediaKind, str] = {
    MediaKind.IMAGE: "image/jpeg",
    MediaKind.VIDEO: "video/mp4",
}


def _suffix(name: str) -> str:
    return PurePath(name.lower()).suffix


def classify_name(name: str) -> MediaKind:
    """Return the media family of *name* judged by its extension."""
    mime = EXTENSION_TO_MIME.get(_suffix(name), "")
    if mime.startswith("image/"):
        return MediaKind.IMAGE
    if mime.startswith("video/"):
        return MediaKind.VIDEO
    return MediaKind.UNKNOWN


def content_type_for(name: str, kind: MediaKind | None = None) -> str:
    """Best MIME type for *name* when served as *kind*.

    A known extension of the served family wins.  Otherwise the most common
    subtype of that family is used; with no family given the extension
    decides, and anything unrecognised is served as a JPEG image.
    """
    mime = EXTENSION_TO_MIME.get(_suffix(name), "")
    if kind is None or kind is MediaKind.UNKNOWN:
        return mime or DEFAULT_MIME[MediaKind.IMAGE]
    if mime.startswith(f"{kind.value}/"):
        return mime
    return DEFAULT_MIME[kind]
