"""Tests for the project metadata in pyproject.toml."""

from __future__ import annotations

import tomllib
from pathlib import Path

PYPROJECT = Path(__file__).resolve().parents[3] / "pyproject.toml"


def _project() -> dict:
    return tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))["project"]


def test_requires_python_311() -> None:
    assert _project()["requires-python"] == ">=3.11"


def test_console_scripts() -> None:
    assert _project()["scripts"] == {
        "mediagate": "app.mediagate.server.app:main",
        "mediagate-console": "app.mediagate.cli:main",
    }
