"""Request-building helpers and fakes shared by the test modules."""

from __future__ import annotations

import asyncio
from pathlib import Path

from app.mediagate.media.classify import MediaKind
from app.mediagate.media.library import Asset, AssetLibrary


class FakeLibrary(AssetLibrary):
    """In-memory library with configurable delays and call counting."""

    def __init__(
        self,
        files: dict[str, Path] | None = None,
        *,
        granted: bool = True,
        access_delay: float = 0.0,
        list_delay: float = 0.0,
        resolve_delay: float = 0.0,
    ) -> None:
        self.files = files or {}
        self.granted = granted
        self.access_delay = access_delay
        self.list_delay = list_delay
        self.resolve_delay = resolve_delay
        self.list_calls = 0

    async def request_access(self) -> bool:
        await asyncio.sleep(self.access_delay)
        return self.granted

    async def list_assets(self, kind: MediaKind, limit: int) -> list[Asset]:
        self.list_calls += 1
        await asyncio.sleep(self.list_delay)
        assets = [
            Asset(id=f"id{i}", title=name, kind=kind)
            for i, name in enumerate(sorted(self.files))
            if name.endswith(".mp4") == (kind is MediaKind.VIDEO)
        ]
        return assets[:limit]

    async def resolve_file(self, asset: Asset) -> Path | None:
        await asyncio.sleep(self.resolve_delay)
        return self.files.get(asset.title)


async def wait_until(predicate, timeout: float = 5.0) -> None:
    """Poll *predicate* on the running loop until it holds or *timeout* passes."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.01)


def multipart_body(boundary: str, *parts: tuple[dict[str, str], bytes]) -> bytes:
    """Assemble a multipart body from ``(headers, payload)`` pairs."""
    out = b""
    for headers, payload in parts:
        out += f"--{boundary}\r\n".encode()
        for key, value in headers.items():
            out += f"{key}: {value}\r\n".encode()
        out += b"\r\n" + payload + b"\r\n"
    return out + f"--{boundary}--\r\n".encode()


def file_part(filename: str, payload: bytes, field: str = "file") -> tuple[dict[str, str], bytes]:
    return (
        {
            "Content-Disposition": f'form-data; name="{field}"; filename="{filename}"',
            "Content-Type": "application/octet-stream",
        },
        payload,
    )


def field_part(name: str, value: str) -> tuple[dict[str, str], bytes]:
    return ({"Content-Disposition": f'form-data; name="{name}"'}, value.encode())
