"""Outcome type for operations that fail in expected ways."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Result:
    """Outcome of a route-table or ingestion operation.

    Truthy on success, unpacks to ``(success, message)`` and can carry a
    payload in *value*::

        r = table.add("intro", "/sdcard/intro.mp4")
        if not r:
            return web.json_response(r.to_json(), status=400)
    """

    success: bool
    message: str = ""
    value: Any = field(default=None, repr=False)

    @classmethod
    def ok(cls, message: str = "", *, value: Any = None) -> Result:
        return cls(success=True, message=message, value=value)

    @classmethod
    def fail(cls, message: str = "") -> Result:
        return cls(success=False, message=message)

    def to_json(self) -> dict[str, Any]:
        """Wire shape used by the HTTP API: ``{success, message}``."""
        return {"success": self.success, "message": self.message}

    def __bool__(self) -> bool:
        return self.success

    def __iter__(self):
        yield self.success
        yield self.message
