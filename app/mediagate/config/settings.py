"""Application settings -- reads from environment and ``.env`` file.

Everything the gateway needs to know about its surroundings lives here:
where the private data directory is, which address to bind, and which
directories stand in for the device-wide media library.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import ClassVar

from ..util.env_file import EnvFile
from ..util.singletons import register_singleton

logger = logging.getLogger(__name__)

ROUTES_FILE_NAME = "media_routes.json"
UPLOADS_DIR_NAME = "uploads"


class Settings:
    """Runtime configuration sourced from environment variables and ``.env``."""

    _DATA_DIR_ENV: ClassVar[str] = "MEDIAGATE_DATA_DIR"

    def __init__(self) -> None:
        # .env lookup: explicit DOTENV_PATH > data_dir/.env > CWD/.env
        dotenv = os.getenv("DOTENV_PATH")
        if not dotenv:
            data_dir = os.getenv(self._DATA_DIR_ENV)
            dotenv = str(Path(data_dir) / ".env") if data_dir else ".env"
        self.env = EnvFile(dotenv)
        self.reload()

    def reload(self) -> None:
        """Re-read the ``.env`` file and environment variables."""
        e = self._read

        self.host: str = e("MEDIAGATE_HOST") or "0.0.0.0"
        self.port: int = self._int("MEDIAGATE_PORT", 8080)
        self.max_upload_bytes: int = self._int("MEDIAGATE_MAX_UPLOAD_MB", 512) * 1024 * 1024
        self.log_level: str = (e("MEDIAGATE_LOG_LEVEL") or "INFO").upper()

        raw_dirs = e("MEDIAGATE_LIBRARY_DIRS")
        self.library_dirs: list[Path] = [
            Path(p).expanduser() for p in raw_dirs.split(os.pathsep) if p.strip()
        ] if raw_dirs else []

    # -- derived paths -----------------------------------------------------

    @property
    def data_dir(self) -> Path:
        return Path(os.getenv(self._DATA_DIR_ENV, str(Path.home() / ".mediagate")))

    @property
    def routes_path(self) -> Path:
        return self.data_dir / ROUTES_FILE_NAME

    @property
    def uploads_dir(self) -> Path:
        return self.data_dir / UPLOADS_DIR_NAME

    # -- helpers -----------------------------------------------------------

    def _read(self, key: str) -> str:
        return os.getenv(key) or self.env.read(key)

    def _int(self, key: str, default: int) -> int:
        raw = self._read(key)
        if not raw:
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning("Ignoring non-integer %s=%r, using %d", key, raw, default)
            return default

    def ensure_dirs(self) -> None:
        for d in (self.data_dir, self.uploads_dir):
            d.mkdir(parents=True, exist_ok=True)


# Module-level singleton
cfg = Settings()


def _reset_cfg() -> None:
    global cfg
    cfg = Settings()


register_singleton(_reset_cfg)
