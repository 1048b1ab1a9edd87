"""Uploads directory -- raw files stored under their original names."""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePosixPath, PureWindowsPath

logger = logging.getLogger(__name__)

UPLOADS_SEGMENT = "uploads"


class InvalidFilenameError(ValueError):
    """An uploaded file name would escape the uploads directory."""


def validate_filename(filename: str) -> str:
    """Return *filename* trimmed, or raise if it is not a plain file name."""
    name = filename.strip()
    if not name or name in (".", ".."):
        raise InvalidFilenameError("Missing or invalid file name")
    if "\x00" in name or "/" in name or "\\" in name:
        raise InvalidFilenameError(f"Invalid file name: {name!r}")
    if PurePosixPath(name).is_absolute() or PureWindowsPath(name).is_absolute():
        raise InvalidFilenameError(f"Invalid file name: {name!r}")
    return name


class UploadStore:
    """Flat directory of uploaded files.  Collisions overwrite (last write wins)."""

    def __init__(self, directory: Path) -> None:
        self._dir = directory

    @property
    def directory(self) -> Path:
        return self._dir

    def save(self, filename: str, payload: bytes) -> Path:
        name = validate_filename(filename)
        self._dir.mkdir(parents=True, exist_ok=True)
        target = self._dir / name
        tmp = self._dir / f".{name}.part"
        try:
            tmp.write_bytes(payload)
            os.replace(tmp, target)
        finally:
            tmp.unlink(missing_ok=True)
        logger.info("Stored upload %s (%d bytes)", name, len(payload))
        return target

    def resolve(self, filename: str) -> Path | None:
        """Path of an existing upload named *filename*, else ``None``."""
        try:
            name = validate_filename(filename)
        except InvalidFilenameError:
            return None
        path = self._dir / name
        return path if path.is_file() else None

    def list_files(self) -> list[Path]:
        if not self._dir.is_dir():
            return []
        files = []
        for entry in sorted(self._dir.iterdir(), key=lambda p: p.name.lower()):
            if entry.name.startswith(".") and entry.name.endswith(".part"):
                continue
            try:
                if entry.is_file():
                    files.append(entry)
            except OSError:
                continue
        return files

    @staticmethod
    def virtual_path(filename: str) -> str:
        return f"media/{UPLOADS_SEGMENT}/{filename}"
