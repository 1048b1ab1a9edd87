"""Byte-level ``multipart/form-data`` decoding for upload ingestion.

The body is scanned for every boundary delimiter and each region between two
delimiters is treated as one part.  Only a bounded prefix of each part is
decoded as text when looking for headers, so arbitrary binary payloads are
never pushed through a text codec.

Contract: bytes + content type in, first file part (name + payload) out.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

HEADER_SCAN_BYTES = 512

_CRLF = b"\r\n"
_HEADER_END = b"\r\n\r\n"
_BOUNDARY_RE = re.compile(r"boundary=([^;]+)", re.IGNORECASE)
_FILENAME_RE = re.compile(r'filename="?([^";\r\n]+)"?', re.IGNORECASE)
_NAME_RE = re.compile(r'(?:^|[;\s])name="?([^";\r\n]+)"?', re.IGNORECASE)


class MultipartError(ValueError):
    """The request is not a well-formed multipart/form-data upload."""


class NoFilePartError(MultipartError):
    """The body parsed but none of its parts carries a file."""

    def __init__(self, message: str = "No file found in upload") -> None:
        super().__init__(message)


@dataclass
class MultipartPart:
    name: str = ""
    filename: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    payload: bytes = field(default=b"", repr=False)

    @property
    def is_file(self) -> bool:
        return self.filename is not None

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")


def parse_boundary(content_type: str) -> str:
    """Return the boundary parameter of a multipart content type."""
    if "multipart/form-data" not in content_type.lower():
        raise MultipartError("Expected multipart/form-data")
    match = _BOUNDARY_RE.search(content_type)
    if not match:
        raise MultipartError("No boundary found")
    boundary = match.group(1).strip().strip('"')
    if not boundary:
        raise MultipartError("No boundary found")
    return boundary


def find_all(haystack: bytes, needle: bytes) -> list[int]:
    """Offsets of every non-overlapping occurrence of *needle*."""
    positions: list[int] = []
    pos = haystack.find(needle)
    while pos != -1:
        positions.append(pos)
        pos = haystack.find(needle, pos + len(needle))
    return positions


def _split_parts(body: bytes, boundary: str) -> list[bytes]:
    delimiter = b"--" + boundary.encode("utf-8")
    offsets = find_all(body, delimiter)
    if len(offsets) < 2:
        raise MultipartError("Invalid multipart data")

    regions: list[bytes] = []
    for start, end in zip(offsets, offsets[1:]):
        begin = start + len(delimiter)
        if body.startswith(_CRLF, begin):
            begin += len(_CRLF)
        regions.append(body[begin:end])
    return regions


def _strip_delimiter_newline(payload: bytes) -> bytes:
    # The line break before the next delimiter belongs to the delimiter.
    if payload.endswith(_CRLF):
        return payload[:-2]
    if payload.endswith(b"\n"):
        return payload[:-1]
    return payload


def _parse_headers(text: str) -> dict[str, str]:
    headers: dict[str, str] = {}
    for line in text.split("\r\n"):
        key, sep, value = line.partition(":")
        if sep:
            headers[key.strip().lower()] = value.strip()
    return headers


def _parse_part(region: bytes) -> MultipartPart | None:
    split = region.find(_HEADER_END, 0, HEADER_SCAN_BYTES)
    if split <= 0:
        return None
    header_text = region[:split].decode("utf-8", errors="replace")
    headers = _parse_headers(header_text)
    disposition = headers.get("content-disposition", "")

    filename = None
    if "filename=" in disposition:
        match = _FILENAME_RE.search(disposition)
        if match:
            filename = match.group(1).strip().strip('"').strip()
    name_match = _NAME_RE.search(disposition)

    return MultipartPart(
        name=name_match.group(1).strip() if name_match else "",
        filename=filename,
        headers=headers,
        payload=_strip_delimiter_newline(region[split + len(_HEADER_END):]),
    )


def parse_parts(body: bytes, boundary: str) -> list[MultipartPart]:
    """Decode *body* into its parts; parts without a header block are skipped."""
    parts = []
    for region in _split_parts(body, boundary):
        part = _parse_part(region)
        if part is not None:
            parts.append(part)
    return parts


def extract_file_part(content_type: str, body: bytes) -> MultipartPart:
    """Return the first part of *body* that carries a filename.

    Later file parts are ignored.  Raises :class:`MultipartError` for a
    malformed request and :class:`NoFilePartError` when no part qualifies.
    """
    for part in parse_parts(body, parse_boundary(content_type)):
        if part.filename:
            return part
    raise NoFilePartError()
