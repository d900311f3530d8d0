"""Async test client for waypoint routers.

Drives the ASGI interface directly, without sockets, and returns
the same ``Response`` type controllers may return.
"""

from __future__ import annotations

import asyncio
import json as json_module
from typing import Any

from waypoint._internal.asgi import Message, Receive, Scope
from waypoint.http.response import Response


class TestClient:
    """Async test client for any ASGI app, usually a root ``Router``.

    Entering the client runs the ASGI lifespan startup, which freezes
    the route table exactly as a real server would.

    Usage::

        async with TestClient(router) as client:
            response = await client.get("/kittens/abc")
            assert response.status == 200
    """

    __test__ = False  # Tell pytest this is not a test class

    __slots__ = ("_lifespan_events", "_lifespan_replies", "_lifespan_task", "app")

    def __init__(self, app: Any) -> None:
        self.app = app
        self._lifespan_task: asyncio.Task[None] | None = None
        self._lifespan_events: asyncio.Queue[Message] = asyncio.Queue()
        self._lifespan_replies: asyncio.Queue[Message] = asyncio.Queue()

    async def __aenter__(self) -> TestClient:
        scope: Scope = {"type": "lifespan", "asgi": {"version": "3.0"}}
        self._lifespan_task = asyncio.create_task(
            self.app(scope, self._lifespan_events.get, self._lifespan_replies.put)
        )
        await self._lifespan_events.put({"type": "lifespan.startup"})
        reply = await self._lifespan_replies.get()
        if reply["type"] != "lifespan.startup.complete":
            msg = f"Lifespan startup failed: {reply.get('message', reply['type'])}"
            raise RuntimeError(msg)
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._lifespan_task is None:
            return
        await self._lifespan_events.put({"type": "lifespan.shutdown"})
        await self._lifespan_replies.get()
        await self._lifespan_task
        self._lifespan_task = None

    # -- Verb helpers; keyword arguments are those of ``request`` --

    async def get(self, path: str, **kwargs: Any) -> Response:
        return await self.request("GET", path, **kwargs)

    async def head(self, path: str, **kwargs: Any) -> Response:
        return await self.request("HEAD", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Response:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Response:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> Response:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Response:
        return await self.request("DELETE", path, **kwargs)

    async def options(self, path: str, **kwargs: Any) -> Response:
        return await self.request("OPTIONS", path, **kwargs)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        json: Any = None,
    ) -> Response:
        """Dispatch one request through the app and collect the reply.

        *json* is encoded as the body and sets ``content-type``;
        explicit *headers* win over the derived ones.
        """
        sent_headers: dict[str, str] = {}
        if json is not None:
            body = json_module.dumps(json).encode("utf-8")
            sent_headers["content-type"] = "application/json"
        if body:
            sent_headers["content-length"] = str(len(body))
        sent_headers.update({k.lower(): v for k, v in (headers or {}).items()})

        status = 500
        reply_headers: list[tuple[bytes, bytes]] = []
        chunks: list[bytes] = []

        async def send(message: Message) -> None:
            nonlocal status, reply_headers
            kind = message["type"]
            if kind == "http.response.start":
                status = message["status"]
                reply_headers = list(message.get("headers", []))
            elif kind == "http.response.body":
                chunks.append(message.get("body", b""))

        await self.app(_http_scope(method, path, sent_headers), _body_receiver(body), send)
        return _build_response(status, reply_headers, b"".join(chunks))


def _http_scope(method: str, target: str, headers: dict[str, str]) -> Scope:
    path, _, query = target.partition("?")
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "scheme": "http",
        "method": method.upper(),
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": query.encode("latin-1"),
        "root_path": "",
        "headers": [(k.encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()],
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 50000),
    }


def _body_receiver(body: bytes) -> Receive:
    delivered = False

    async def receive() -> Message:
        nonlocal delivered
        if delivered:
            return {"type": "http.disconnect"}
        delivered = True
        return {"type": "http.request", "body": body, "more_body": False}

    return receive


def _build_response(status: int, raw_headers: list[tuple[bytes, bytes]], body: bytes) -> Response:
    content_type = ""
    headers: list[tuple[str, str]] = []
    for name_b, value_b in raw_headers:
        name, value = name_b.decode("latin-1"), value_b.decode("latin-1")
        if name == "content-type":
            content_type = value
        else:
            headers.append((name, value))
    return Response(body=body, status=status, content_type=content_type, headers=tuple(headers))
