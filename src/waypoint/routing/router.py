"""Router: registration-time builder for routes.

A root ``Router`` owns the engine (any ``FrameworkRouter``). Sub-routers
created with ``sub_router_for_path`` share that same engine instance and
extend the path prefix, so every route in the tree ends up in a single
route table.

Usage::

    router = Router()
    router.post("/kittens", controller.add_kitten)

    kittens = router.sub_router_for_path("/kittens")
    kittens.get("/{id}", controller.get_kitten)      # GET /kittens/{id}

    router.get("/health", health).set_default_status(204)

The verb methods register immediately and return the ``Route``. A status
passed as ``status=`` is applied before registration; calling
``set_default_status`` on the returned route afterwards works as well,
because the route reads its status on every dispatch.
"""

from __future__ import annotations

from collections.abc import Iterator

from waypoint._internal.asgi import Receive, Scope, Send
from waypoint._internal.types import ControllerFn
from waypoint.config import AppConfig
from waypoint.errors import ConfigurationError
from waypoint.http import METHODS
from waypoint.routing.adapter import FrameworkRouter
from waypoint.routing.route import Route


class Router:
    """Builds routes under a path prefix on a shared engine."""

    __slots__ = ("_children", "_config", "_fw_router", "_prefix", "_routes")

    def __init__(
        self,
        fw_router: FrameworkRouter | None = None,
        *,
        prefix: str = "",
        config: AppConfig | None = None,
    ) -> None:
        if fw_router is None:
            from waypoint.routing.trie import TrieRouter

            fw_router = TrieRouter(config)
        self._fw_router = fw_router
        self._prefix = prefix
        self._config = config or getattr(fw_router, "config", None) or AppConfig()
        self._routes: list[Route] = []
        self._children: list[Router] = []

    @property
    def fw_router(self) -> FrameworkRouter:
        """The engine shared by this router and all of its sub-routers."""
        return self._fw_router

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def routes(self) -> list[Route]:
        """Routes created directly on this router, in creation order."""
        return list(self._routes)

    def walk_routes(self) -> Iterator[Route]:
        """Yield this router's routes, then each sub-router's, depth first."""
        yield from self._routes
        for child in self._children:
            yield from child.walk_routes()

    # -- Registration --

    def route(
        self,
        method: str,
        path: str,
        fn: ControllerFn,
        *,
        status: int | None = None,
    ) -> Route:
        """Create, configure and register a route.

        Raises:
            ConfigurationError: For an unknown method, an invalid status,
                or a pattern the engine rejects.
        """
        method = method.upper()
        if method not in METHODS:
            msg = f"Unsupported HTTP method {method!r} for route {self._prefix + path!r}."
            raise ConfigurationError(msg)
        route = Route(self, method, path, self._prefix + path)
        if status is not None:
            route.set_default_status(status)
        route.register(fn)
        self._routes.append(route)
        return route

    def get(self, path: str, fn: ControllerFn, *, status: int | None = None) -> Route:
        return self.route("GET", path, fn, status=status)

    def head(self, path: str, fn: ControllerFn, *, status: int | None = None) -> Route:
        return self.route("HEAD", path, fn, status=status)

    def post(self, path: str, fn: ControllerFn, *, status: int | None = None) -> Route:
        return self.route("POST", path, fn, status=status)

    def put(self, path: str, fn: ControllerFn, *, status: int | None = None) -> Route:
        return self.route("PUT", path, fn, status=status)

    def patch(self, path: str, fn: ControllerFn, *, status: int | None = None) -> Route:
        return self.route("PATCH", path, fn, status=status)

    def delete(self, path: str, fn: ControllerFn, *, status: int | None = None) -> Route:
        return self.route("DELETE", path, fn, status=status)

    def options(self, path: str, fn: ControllerFn, *, status: int | None = None) -> Route:
        return self.route("OPTIONS", path, fn, status=status)

    def sub_router_for_path(self, prefix: str) -> Router:
        """Return a router on the same engine whose prefix extends this one."""
        child = Router(self._fw_router, prefix=self._prefix + prefix, config=self._config)
        self._children.append(child)
        return child

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Serve the shared engine; lets the root router be the ASGI app."""
        await self._fw_router(scope, receive, send)

    def __repr__(self) -> str:
        return f"<Router prefix={self._prefix!r} routes={len(self._routes)}>"
