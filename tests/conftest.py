"""Shared fixtures: an in-memory adapter and a capturing raw response."""

from collections.abc import Sequence
from types import MappingProxyType
from typing import Any

import pytest

from waypoint.http.headers import Headers
from waypoint.http.request import Request


class RecordingRoute:
    """FrameworkRoute double that echoes the request's path params."""

    def __init__(self, method: str, path: str, handler: Any) -> None:
        self.method = method
        self.path = path
        self.handler = handler

    def route_vars(self, request: Request) -> dict[str, str]:
        return dict(request.path_params)


class RecordingEngine:
    """FrameworkRouter double that records every registration."""

    def __init__(self) -> None:
        self.registered: list[RecordingRoute] = []

    def new_route(self, method: str, path: str, handler: Any) -> RecordingRoute:
        route = RecordingRoute(method, path, handler)
        self.registered.append(route)
        return route

    async def __call__(self, scope: Any, receive: Any, send: Any) -> None:
        raise NotImplementedError


class CapturingResponse:
    """RawResponse double that keeps what was sent."""

    def __init__(self) -> None:
        self.calls: list[tuple[int, list[tuple[str, str]], bytes]] = []

    @property
    def started(self) -> bool:
        return bool(self.calls)

    async def send(self, status: int, headers: Sequence[tuple[str, str]], body: bytes) -> None:
        self.calls.append((status, list(headers), body))

    @property
    def status(self) -> int:
        return self.calls[-1][0]

    @property
    def body(self) -> bytes:
        return self.calls[-1][2]

    def header(self, name: str) -> str | None:
        for key, value in self.calls[-1][1]:
            if key.lower() == name.lower():
                return value
        return None


def make_request(
    method: str = "GET",
    path: str = "/",
    *,
    path_params: dict[str, str] | None = None,
    body: bytes = b"",
    headers: dict[str, str] | None = None,
    query_string: bytes = b"",
) -> Request:
    sent = False

    async def receive() -> dict[str, Any]:
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        return {"type": "http.disconnect"}

    return Request(
        method=method,
        path=path,
        headers=Headers.from_dict(headers or {}),
        query_string=query_string,
        path_params=MappingProxyType(dict(path_params or {})),
        http_version="1.1",
        client=None,
        _receive=receive,
    )


@pytest.fixture
def engine() -> RecordingEngine:
    return RecordingEngine()


@pytest.fixture
def raw() -> CapturingResponse:
    return CapturingResponse()


@pytest.fixture
def request_factory():
    return make_request
