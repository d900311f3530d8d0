"""Engine-level HTTP request.

Frozen metadata with async body access. This is the "raw request" the
engine hands to a route; controllers reach it through
``RequestContext.request``.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any
from urllib.parse import parse_qsl

from waypoint._internal.asgi import Receive, Scope
from waypoint.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path_params`` is filled in by the engine once the path has been
    matched; before matching it is empty.
    """

    method: str
    path: str
    headers: Headers
    query_string: bytes
    path_params: Mapping[str, str]
    http_version: str
    client: tuple[str, int] | None

    # ASGI receive channel, consumed by ``stream()``
    _receive: Receive

    # Private: body cache shared by copies made with ``with_path_params``
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def query(self) -> dict[str, str]:
        """Query parameters, first value wins."""
        params: dict[str, str] = {}
        for key, value in parse_qsl(self.query_string.decode("latin-1"), keep_blank_values=True):
            params.setdefault(key, value)
        return params

    @property
    def content_type(self) -> str | None:
        """Media type of the body, ``None`` when the header is absent."""
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """Declared body size, ``None`` when absent or not a number."""
        declared = self.headers.get("content-length", "").strip()
        return int(declared) if declared.isdigit() else None

    def with_path_params(self, params: Mapping[str, str]) -> Request:
        """Return a copy carrying the matched path variables."""
        return replace(self, path_params=MappingProxyType(dict(params)))

    async def body(self) -> bytes:
        """The whole request body.

        Reads the ASGI channel on first use; copies made with
        ``with_path_params`` share the cached bytes.
        """
        cached = self._cache.get("body")
        if cached is None:
            buffer = bytearray()
            async for chunk in self.stream():
                buffer += chunk
            cached = self._cache["body"] = bytes(buffer)
        return cached

    async def stream(self) -> AsyncGenerator[bytes, None]:
        """Yield body chunks as the server delivers them."""
        more_body = True
        while more_body:
            message = await self._receive()
            if message["type"] != "http.request":
                return
            if chunk := message.get("body", b""):
                yield chunk
            more_body = message.get("more_body", False)

    async def json(self) -> Any:
        """Body decoded as JSON. Raises ``json.JSONDecodeError`` on bad input."""
        return json_module.loads(await self.body())

    async def text(self) -> str:
        return (await self.body()).decode("utf-8")

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Build the pre-match request for an ASGI ``http`` scope."""
        peer = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Headers(scope.get("headers", ())),
            query_string=scope.get("query_string", b""),
            path_params=MappingProxyType({}),
            http_version=scope.get("http_version", "1.1"),
            client=(peer[0], peer[1]) if peer else None,
            _receive=receive,
        )
