"""Tests for Settings."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from app.mediagate.config.settings import Settings


class TestSettings:
    def test_defaults(self, data_dir: Path) -> None:
        s = Settings()
        assert s.port == 8080
        assert s.host == "0.0.0.0"
        assert s.library_dirs == []
        assert s.data_dir == data_dir
        assert s.routes_path == data_dir / "media_routes.json"
        assert s.uploads_dir == data_dir / "uploads"

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("MEDIAGATE_PORT", "9001")
        monkeypatch.setenv("MEDIAGATE_MAX_UPLOAD_MB", "2")
        monkeypatch.setenv("MEDIAGATE_LIBRARY_DIRS", os.pathsep.join([str(tmp_path / "a"), str(tmp_path / "b")]))
        s = Settings()
        assert s.port == 9001
        assert s.max_upload_bytes == 2 * 1024 * 1024
        assert s.library_dirs == [tmp_path / "a", tmp_path / "b"]

    def test_dotenv_fallback(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("MEDIAGATE_HOST=127.0.0.1\n")
        assert Settings().host == "127.0.0.1"

    def test_bad_integer_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MEDIAGATE_PORT", "eighty")
        assert Settings().port == 8080

    def test_ensure_dirs(self, data_dir: Path) -> None:
        s = Settings()
        s.ensure_dirs()
        assert (data_dir / "uploads").is_dir()
