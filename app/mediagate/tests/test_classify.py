"""Tests for the extension classifier."""

from __future__ import annotations

import pytest

from app.mediagate.media.classify import (
    EXTENSION_TO_MIME,
    MediaKind,
    classify_name,
    content_type_for,
)


class TestClassifyName:
    @pytest.mark.parametrize("name", ["a.jpg", "a.jpeg", "a.png", "a.gif", "a.webp", "a.bmp", "a.svg"])
    def test_images(self, name: str) -> None:
        assert classify_name(name) is MediaKind.IMAGE

    @pytest.mark.parametrize("name", ["a.mp4", "a.m4v", "a.mov", "a.avi", "a.webm", "a.mkv"])
    def test_videos(self, name: str) -> None:
        assert classify_name(name) is MediaKind.VIDEO

    def test_mixed_case(self) -> None:
        assert classify_name("photo.JPG") is MediaKind.IMAGE

    def test_unknown(self) -> None:
        assert classify_name("notes.txt") is MediaKind.UNKNOWN
        assert classify_name("README") is MediaKind.UNKNOWN

    def test_path_with_directories(self) -> None:
        assert classify_name("/sdcard/DCIM/clip.MOV") is MediaKind.VIDEO


class TestContentType:
    def test_mixed_case_jpeg(self) -> None:
        assert content_type_for("photo.JPG") == "image/jpeg"

    def test_specific_subtypes(self) -> None:
        assert content_type_for("a.svg") == "image/svg+xml"
        assert content_type_for("a.mov") == "video/quicktime"
        assert content_type_for("a.mkv") == "video/x-matroska"
        assert content_type_for("a.avi") == "video/x-msvideo"

    def test_unknown_extension_served_as_video(self) -> None:
        assert content_type_for("clip.xyz", MediaKind.VIDEO) == "video/mp4"

    def test_unknown_extension_served_as_image(self) -> None:
        assert content_type_for("still.xyz", MediaKind.IMAGE) == "image/jpeg"

    def test_unknown_extension_without_kind(self) -> None:
        assert content_type_for("blob.bin") == "image/jpeg"

    def test_extension_outside_served_family_uses_family_default(self) -> None:
        assert content_type_for("poster.png", MediaKind.VIDEO) == "video/mp4"

    def test_known_extension_of_served_family(self) -> None:
        assert content_type_for("clip.webm", MediaKind.VIDEO) == "video/webm"


class TestMediaKind:
    def test_from_flags(self) -> None:
        assert MediaKind.from_flags(True, False) is MediaKind.IMAGE
        assert MediaKind.from_flags(False, True) is MediaKind.VIDEO
        assert MediaKind.from_flags(False, False) is MediaKind.UNKNOWN

    def test_video_wins_when_both_set(self) -> None:
        assert MediaKind.from_flags(True, True) is MediaKind.VIDEO

    def test_extension_map_keys_are_dotted_lowercase(self) -> None:
        assert all(k.startswith(".") and k == k.lower() for k in EXTENSION_TO_MIME)
