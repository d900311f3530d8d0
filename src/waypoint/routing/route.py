"""Route: one registered endpoint.

A ``Route`` is created by a ``Router`` verb method, configured through
chainable setters, and wired into the engine by ``register()``. From
then on the engine calls ``handle_request`` for every matching request.

Default status policy: a route that was never given an explicit status
answers 201 for POST and 200 for every other method. The status is read
inside ``handle_request`` on each dispatch, so ``set_default_status``
still takes effect after ``register()`` as long as it runs before the
server starts taking traffic.

Thread safety:
    Every field is written during setup only. Dispatch reads them and
    builds per-request objects, so concurrent requests on one route
    share no mutable state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from waypoint._internal.invoke import invoke
from waypoint._internal.types import ControllerFn
from waypoint.context import new_context_for_request, request_context_var
from waypoint.errors import ConfigurationError, MissingControllerError, UnregisteredRouteError
from waypoint.http.request import Request
from waypoint.http.writer import ResponseWriter
from waypoint.routing.adapter import FrameworkRoute, RawResponse

if TYPE_CHECKING:
    from waypoint.routing.router import Router


def default_status_for(method: str) -> int:
    """201 for POST, 200 for everything else."""
    return 201 if method == "POST" else 200


class Route:
    """A (method, path) endpoint with its controller and default status."""

    __slots__ = (
        "_controller_fn",
        "_default_status",
        "_full_path",
        "_fw_route",
        "_method",
        "_path",
        "_router",
    )

    def __init__(
        self,
        router: Router,
        method: str,
        path: str,
        full_path: str,
        controller_fn: ControllerFn | None = None,
    ) -> None:
        self._router = router
        self._method = method.upper()
        self._path = path
        self._full_path = full_path
        self._controller_fn = controller_fn
        self._default_status: int | None = None
        self._fw_route: FrameworkRoute | None = None

    # -- Accessors --

    @property
    def method(self) -> str:
        return self._method

    @property
    def path(self) -> str:
        """Pattern relative to the owning router."""
        return self._path

    @property
    def full_path(self) -> str:
        """Pattern including every ancestor router prefix."""
        return self._full_path

    @property
    def controller_fn(self) -> ControllerFn | None:
        return self._controller_fn

    @property
    def default_status(self) -> int | None:
        """Resolved default status, ``None`` until set or registered."""
        return self._default_status

    @property
    def router(self) -> Router:
        return self._router

    @property
    def fw_route(self) -> FrameworkRoute | None:
        return self._fw_route

    @property
    def registered(self) -> bool:
        return self._fw_route is not None

    # -- Builder --

    def set_controller_fn(self, fn: ControllerFn) -> Route:
        """Replace the controller. Returns the route for chaining."""
        self._controller_fn = fn
        return self

    def set_default_status(self, status: int) -> Route:
        """Override the default status. Returns the route for chaining.

        Raises:
            ConfigurationError: If *status* is not a valid HTTP status code.
        """
        if not isinstance(status, int) or isinstance(status, bool) or not 100 <= status <= 599:
            msg = f"Invalid default status {status!r} for {self._method} {self._full_path}."
            raise ConfigurationError(msg)
        self._default_status = status
        return self

    def register(self, fn: ControllerFn) -> Route:
        """Attach *fn* and wire this route into the engine.

        Must be called exactly once per route.

        Raises:
            ConfigurationError: If the route is already registered, or
                the engine rejects the pattern.
        """
        if self._fw_route is not None:
            msg = f"Route {self._method} {self._full_path} is already registered."
            raise ConfigurationError(msg)
        fw_route = self._router.fw_router.new_route(
            self._method,
            self._full_path,
            self.handle_request,
        )
        # Only touch the route once the engine accepted the pattern
        if self._default_status is None:
            self._default_status = default_status_for(self._method)
        self._controller_fn = fn
        self._fw_route = fw_route
        return self

    # -- Dispatch --

    def route_vars(self, request: Request) -> dict[str, str]:
        """Path variables of *request*, extracted by the engine handle.

        Raises:
            UnregisteredRouteError: If called before ``register()``.
        """
        if self._fw_route is None:
            msg = f"Route {self._method} {self._full_path} has not been registered."
            raise UnregisteredRouteError(msg)
        return self._fw_route.route_vars(request)

    async def handle_request(self, raw: RawResponse, request: Request) -> None:
        """Engine dispatch target: build the context and run the controller.

        Raises:
            MissingControllerError: If no controller is attached.
        """
        fn = self._controller_fn
        if fn is None:
            msg = f"Route {self._method} {self._full_path} has no controller function."
            raise MissingControllerError(msg)

        writer = ResponseWriter(raw, self._default_status or default_status_for(self._method))
        ctx = new_context_for_request(writer, request, self)
        token = request_context_var.set(ctx)
        try:
            result = await invoke(fn, ctx)
        finally:
            request_context_var.reset(token)

        if result is not None and not writer.written and not writer.flushed:
            ctx.write_response(result)
        await writer.flush()

    def __repr__(self) -> str:
        state = "registered" if self.registered else "pending"
        return f"<Route {self._method} {self._full_path} ({state})>"
