"""Trie engine: the bundled ``FrameworkRouter`` implementation.

Routes are registered during setup and stored in a segment trie. The
first request (or ASGI lifespan startup) freezes the table; after that
``new_route`` refuses further registrations.

The engine owns everything below the adapter boundary: path parsing and
validation, matching, path-variable extraction, 404/405/413 responses,
and per-request crash isolation.
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass

from waypoint._internal.asgi import Receive, Scope, Send
from waypoint.config import AppConfig
from waypoint.errors import (
    ConfigurationError,
    HTTPError,
    MethodNotAllowed,
    NotFound,
    PayloadTooLarge,
)
from waypoint.http import METHODS
from waypoint.http.request import Request
from waypoint.routing.adapter import RawHandler
from waypoint.routing.params import CONVERTERS, is_valid_param_name
from waypoint.server.errors import send_http_error, send_internal_error
from waypoint.server.sender import ASGIResponse

logger = logging.getLogger("waypoint.routing")


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


def parse_path(path: str) -> list[PathSegment]:
    """Parse and validate a route path.

    Examples::

        "/users"             -> [PathSegment("users")]
        "/users/{id}"        -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
        "/files/{rest:path}" -> [..., PathSegment("{rest:path}", param_type="path")]

    Raises:
        ConfigurationError: If the pattern is malformed.
    """
    if not path.startswith("/"):
        msg = f"Route path {path!r} must start with '/'."
        raise ConfigurationError(msg)

    segments: list[PathSegment] = []
    seen: set[str] = set()
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("<") and part.endswith(">"):
            msg = (
                f"Route path {path!r} uses <param> syntax. "
                f"Use {{param}} placeholders instead, e.g. '/{{{part[1:-1]}}}'."
            )
            raise ConfigurationError(msg)
        if part.startswith("{") and part.endswith("}"):
            segments.append(_parse_placeholder(path, part, seen))
        elif "{" in part or "}" in part:
            msg = (
                f"Malformed segment {part!r} in route path {path!r}: "
                "a placeholder must span the whole segment."
            )
            raise ConfigurationError(msg)
        else:
            segments.append(PathSegment(value=part))

    for seg in segments[:-1]:
        if seg.param_type == "path":
            msg = f"Catch-all placeholder {seg.value!r} must be the last segment of {path!r}."
            raise ConfigurationError(msg)
    return segments


def _parse_placeholder(path: str, part: str, seen: set[str]) -> PathSegment:
    inner = part[1:-1]
    if "{" in inner or "}" in inner:
        msg = f"Unbalanced braces in segment {part!r} of route path {path!r}."
        raise ConfigurationError(msg)
    name, _, param_type = inner.partition(":")
    param_type = param_type or "str"
    if not is_valid_param_name(name):
        msg = f"Invalid placeholder name {name!r} in route path {path!r}."
        raise ConfigurationError(msg)
    if param_type not in CONVERTERS:
        known = ", ".join(sorted(CONVERTERS))
        msg = f"Unknown converter {param_type!r} in route path {path!r} (known: {known})."
        raise ConfigurationError(msg)
    if name in seen:
        msg = f"Placeholder {name!r} appears more than once in route path {path!r}."
        raise ConfigurationError(msg)
    seen.add(name)
    return PathSegment(value=part, is_param=True, param_name=name, param_type=param_type)


class TrieRoute:
    """The ``FrameworkRoute`` handle returned by ``TrieRouter.new_route``."""

    __slots__ = ("handler", "method", "param_names", "path", "segments")

    def __init__(self, method: str, path: str, handler: RawHandler) -> None:
        self.method = method
        self.path = path
        self.handler = handler
        self.segments = tuple(parse_path(path))
        self.param_names = tuple(s.param_name for s in self.segments if s.param_name)

    def route_vars(self, request: Request) -> dict[str, str]:
        """Path variables of *request* declared by this route's pattern."""
        params = request.path_params
        return {name: params[name] for name in self.param_names if name in params}

    def __repr__(self) -> str:
        return f"<TrieRoute {self.method} {self.path}>"


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: TrieRoute
    path_params: dict[str, str]


class _TrieNode:
    """A node in the route trie. Mutable during setup only."""

    __slots__ = ("catch_all", "children", "param_child", "routes_by_method")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single placeholder child (one placeholder shape per level)
        self.param_child: _ParamEdge | None = None
        # Catch-all edge ({name:path}), consumes the rest of the path
        self.catch_all: _ParamEdge | None = None
        # Routes at this node, keyed by HTTP method
        self.routes_by_method: dict[str, TrieRoute] = {}


@dataclass(slots=True)
class _ParamEdge:
    param_name: str
    param_type: str
    regex: re.Pattern[str]
    node: _TrieNode


class TrieRouter:
    """Trie-based HTTP engine and ASGI application.

    Usage::

        engine = TrieRouter()
        engine.new_route("GET", "/users/{id}", raw_handler)
        match = engine.match("GET", "/users/42")
        match.path_params  # {"id": "42"}

    Thread safety:
        Registration is single-threaded setup work. The freeze transition
        uses a lock with a double check so exactly one caller performs
        it, after which the trie is only read.
    """

    __slots__ = ("_freeze_lock", "_frozen", "_root", "_routes", "config")

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._root = _TrieNode()
        self._routes: list[TrieRoute] = []
        self._frozen = False
        self._freeze_lock = threading.Lock()

    # -- Registration --

    def new_route(self, method: str, path: str, handler: RawHandler) -> TrieRoute:
        """Register *handler* under *method* + *path*.

        Raises:
            ConfigurationError: For unknown methods, malformed patterns,
                duplicates, conflicting placeholders, or registration
                after the engine has started serving.
        """
        if self._frozen:
            msg = (
                f"Cannot register {method} {path}: the engine is already serving requests. "
                "Register every route before starting the server."
            )
            raise ConfigurationError(msg)
        method = method.upper()
        if method not in METHODS:
            msg = f"Unsupported HTTP method {method!r} for route {path!r}."
            raise ConfigurationError(msg)

        route = TrieRoute(method, path, handler)
        node = self._insert(route)
        if method in node.routes_by_method:
            msg = f"Duplicate route: {method} {path} is already registered."
            raise ConfigurationError(msg)
        node.routes_by_method[method] = route
        self._routes.append(route)
        logger.debug("Registered %s %s", method, path)
        return route

    def _insert(self, route: TrieRoute) -> _TrieNode:
        node = self._root
        for seg in route.segments:
            if not seg.is_param:
                node = node.children.setdefault(seg.value, _TrieNode())
                continue
            catch_all = seg.param_type == "path"
            edge = node.catch_all if catch_all else node.param_child
            if edge is None:
                edge = _ParamEdge(
                    param_name=seg.param_name or "",
                    param_type=seg.param_type,
                    regex=re.compile(f"^{CONVERTERS[seg.param_type]}$"),
                    node=_TrieNode(),
                )
                if catch_all:
                    node.catch_all = edge
                else:
                    node.param_child = edge
            elif (edge.param_name, edge.param_type) != (seg.param_name, seg.param_type):
                msg = (
                    f"Placeholder {seg.value!r} in {route.path!r} conflicts with "
                    f"'{{{edge.param_name}:{edge.param_type}}}' registered at the same position."
                )
                raise ConfigurationError(msg)
            node = edge.node
        return node

    @property
    def routes(self) -> list[TrieRoute]:
        """Registered handles in registration order."""
        return list(self._routes)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Close the route table. Safe to call more than once."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._frozen = True
            logger.info("Route table frozen with %d routes", len(self._routes))

    # -- Matching --

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method.

        Raises ``NotFound`` if no pattern matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, {})
        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")

        node, params = result
        route = node.routes_by_method.get(method.upper())
        if route is None:
            raise MethodNotAllowed(frozenset(node.routes_by_method))
        return RouteMatch(route=route, path_params=params)

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[_TrieNode, dict[str, str]] | None:
        """Depth-first match: static, then placeholder, then catch-all."""
        if index == len(parts):
            if node.routes_by_method:
                return node, params
            return None

        part = parts[index]

        child = node.children.get(part)
        if child is not None:
            result = self._match_node(child, parts, index + 1, params)
            if result is not None:
                return result

        edge = node.param_child
        if edge is not None and edge.regex.match(part):
            result = self._match_node(
                edge.node, parts, index + 1, {**params, edge.param_name: part}
            )
            if result is not None:
                return result

        edge = node.catch_all
        if edge is not None and edge.node.routes_by_method:
            remaining = "/".join(parts[index:])
            return edge.node, {**params, edge.param_name: remaining}

        return None

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        self.freeze()
        request = Request.from_asgi(scope, receive)
        raw = ASGIResponse(send, request.method)
        try:
            limit = self.config.max_content_length
            if request.content_length is not None and request.content_length > limit:
                raise PayloadTooLarge(limit)
            match = self.match(request.method, request.path)
            request = request.with_path_params(match.path_params)
            await match.route.handler(raw, request)
            if not raw.started:
                msg = f"Handler for {match.route.method} {match.route.path} returned without responding"
                raise RuntimeError(msg)
        except HTTPError as exc:
            await send_http_error(exc, request, raw)
        except Exception as exc:
            await send_internal_error(exc, request, raw, debug=self.config.debug)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Acknowledge ASGI lifespan events; startup freezes the table."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                self.freeze()
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
