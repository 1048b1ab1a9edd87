"""Shared pytest fixtures for app.mediagate tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from app.mediagate.media.cache import MediaCache
from app.mediagate.media.library import EmptyLibrary
from app.mediagate.media.uploads import UploadStore
from app.mediagate.state.route_table import RouteTable


@pytest.fixture(autouse=True)
def _isolate_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setenv("MEDIAGATE_DATA_DIR", str(data_dir))
    monkeypatch.setenv("DOTENV_PATH", str(tmp_path / ".env"))
    monkeypatch.delenv("MEDIAGATE_LIBRARY_DIRS", raising=False)
    return data_dir


@pytest.fixture(autouse=True)
def _reset_singletons(_isolate_data_dir: Path):
    from app.mediagate.util.singletons import reset_all_singletons

    reset_all_singletons()
    yield
    reset_all_singletons()


@pytest.fixture()
def data_dir(_isolate_data_dir: Path) -> Path:
    return _isolate_data_dir


@pytest.fixture()
def route_table(data_dir: Path) -> RouteTable:
    return RouteTable(data_dir / "media_routes.json")


@pytest.fixture()
def uploads(data_dir: Path) -> UploadStore:
    return UploadStore(data_dir / "uploads")


@pytest.fixture()
def media_cache(uploads: UploadStore) -> MediaCache:
    return MediaCache(EmptyLibrary(), uploads)

