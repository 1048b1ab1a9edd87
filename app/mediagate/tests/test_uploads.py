"""Tests for the uploads directory store."""

from __future__ import annotations

from pathlib import Path

import pytest

from app.mediagate.media.uploads import InvalidFilenameError, UploadStore, validate_filename


class TestValidateFilename:
    def test_plain_name(self) -> None:
        assert validate_filename(" holiday.jpg ") == "holiday.jpg"

    @pytest.mark.parametrize("name", [
        "", "   ", ".", "..", "../escape.jpg", "a/b.jpg", "..\\x.jpg", "/etc/passwd", "C:\\x.jpg", "a\x00.jpg",
    ])
    def test_rejected(self, name: str) -> None:
        with pytest.raises(InvalidFilenameError):
            validate_filename(name)


class TestUploadStore:
    def test_save_creates_directory(self, uploads: UploadStore) -> None:
        path = uploads.save("a.jpg", b"JPEG")
        assert path == uploads.directory / "a.jpg"
        assert path.read_bytes() == b"JPEG"

    def test_last_write_wins(self, uploads: UploadStore) -> None:
        uploads.save("a.jpg", b"first")
        uploads.save("a.jpg", b"second")
        assert (uploads.directory / "a.jpg").read_bytes() == b"second"

    def test_traversal_never_writes_outside(self, uploads: UploadStore, tmp_path: Path) -> None:
        with pytest.raises(InvalidFilenameError):
            uploads.save("../../outside.jpg", b"x")
        assert not (tmp_path / "outside.jpg").exists()

    def test_resolve(self, uploads: UploadStore) -> None:
        uploads.save("clip.mp4", b"MP4")
        assert uploads.resolve("clip.mp4") == uploads.directory / "clip.mp4"
        assert uploads.resolve("missing.mp4") is None
        assert uploads.resolve("../media_routes.json") is None

    def test_list_files_sorted_and_skips_partials(self, uploads: UploadStore) -> None:
        uploads.save("b.png", b"1")
        uploads.save("A.jpg", b"2")
        (uploads.directory / ".c.jpg.part").write_bytes(b"partial")
        (uploads.directory / "sub").mkdir()
        assert [p.name for p in uploads.list_files()] == ["A.jpg", "b.png"]

    def test_list_files_missing_directory(self, tmp_path: Path) -> None:
        assert UploadStore(tmp_path / "nope").list_files() == []

    def test_virtual_path(self) -> None:
        assert UploadStore.virtual_path("a b.jpg") == "media/uploads/a b.jpg"

    def test_failed_write_leaves_no_partial_file(
        self, uploads: UploadStore, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        uploads.save("keep.jpg", b"old")

        def boom(_src: object, _dst: object) -> None:
            raise OSError("disk full")

        monkeypatch.setattr("app.mediagate.media.uploads.os.replace", boom)
        with pytest.raises(OSError):
            uploads.save("keep.jpg", b"new")
        assert sorted(p.name for p in uploads.directory.iterdir()) == ["keep.jpg"]
        assert (uploads.directory / "keep.jpg").read_bytes() == b"old"
