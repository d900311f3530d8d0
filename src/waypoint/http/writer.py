"""Per-request response writer.

``ResponseWriter`` wraps the engine's raw response sink. It starts out
carrying the route's default status and buffers the status, headers and
body a controller produces until ``flush()`` hands them to the sink in
one piece.

A writer belongs to exactly one dispatch and is never shared between
requests, so it needs no locking.
"""

from __future__ import annotations

import dataclasses
import json as json_module
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from waypoint.routing.adapter import RawResponse

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


def _json_default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    return str(obj)


def encode_json(data: Any) -> bytes:
    """Serialize *data* to compact UTF-8 JSON.

    Dataclass instances become objects; anything else json can't handle
    (UUIDs, datetimes, ...) is rendered with ``str()``.
    """
    return json_module.dumps(data, default=_json_default, separators=(",", ":")).encode("utf-8")


class ResponseWriter:
    """Buffering writer pre-seeded with a default status.

    Usage::

        writer = ResponseWriter(raw, default_status=201)
        writer.write_json({"id": "abc"})
        await writer.flush()   # sends 201 + body
    """

    __slots__ = ("_body", "_default_status", "_flushed", "_headers", "_raw", "_status")

    def __init__(self, raw: RawResponse, default_status: int) -> None:
        self._raw = raw
        self._default_status = default_status
        self._status: int | None = None
        self._headers: list[tuple[str, str]] = []
        self._body: list[bytes] = []
        self._flushed = False

    @property
    def default_status(self) -> int:
        """The status this dispatch started with."""
        return self._default_status

    @property
    def status(self) -> int:
        """The explicit status if one was set, else the default."""
        return self._default_status if self._status is None else self._status

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        return tuple(self._headers)

    @property
    def body(self) -> bytes:
        return b"".join(self._body)

    @property
    def written(self) -> bool:
        """True once the controller produced a body or an explicit status."""
        return bool(self._body) or self._status is not None

    @property
    def flushed(self) -> bool:
        return self._flushed

    def set_status(self, status: int) -> ResponseWriter:
        self._check_open()
        self._status = status
        return self

    def set_header(self, name: str, value: str) -> ResponseWriter:
        """Set *name*, replacing any earlier values."""
        self._check_open()
        wanted = name.lower()
        self._headers = [(k, v) for k, v in self._headers if k.lower() != wanted]
        self._headers.append((name, value))
        return self

    def add_header(self, name: str, value: str) -> ResponseWriter:
        """Append a value for *name*, keeping earlier ones."""
        self._check_open()
        self._headers.append((name, value))
        return self

    def header(self, name: str) -> str | None:
        wanted = name.lower()
        for key, value in self._headers:
            if key.lower() == wanted:
                return value
        return None

    def write(self, data: str | bytes) -> int:
        """Append *data* to the body. Returns the number of bytes buffered."""
        self._check_open()
        chunk = data.encode("utf-8") if isinstance(data, str) else data
        self._body.append(chunk)
        return len(chunk)

    def write_json(self, data: Any, status: int | None = None) -> int:
        """Replace the body with *data* encoded as JSON."""
        return self._replace_body(encode_json(data), JSON_CONTENT_TYPE, status)

    def write_text(self, text: str, status: int | None = None) -> int:
        """Replace the body with *text*."""
        return self._replace_body(text.encode("utf-8"), TEXT_CONTENT_TYPE, status)

    async def flush(self) -> None:
        """Send the buffered response. Later calls do nothing."""
        if self._flushed:
            return
        self._flushed = True
        headers = self._headers
        if self.header("content-type") is None:
            headers = [("content-type", TEXT_CONTENT_TYPE), *headers]
        await self._raw.send(self.status, headers, self.body)

    def _replace_body(self, body: bytes, content_type: str, status: int | None) -> int:
        self._check_open()
        if status is not None:
            self._status = status
        self._body = [body]
        self.set_header("content-type", content_type)
        return len(body)

    def _check_open(self) -> None:
        if self._flushed:
            msg = "Response already sent; the writer can no longer be modified."
            raise RuntimeError(msg)

    def __repr__(self) -> str:
        return f"<ResponseWriter status={self.status} bytes={sum(map(len, self._body))}>"
