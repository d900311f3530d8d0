"""Waypoint: route registration and dispatch for HTTP APIs.

Application code registers (method, path, controller) triples on a
``Router``; the router wires them into a pluggable HTTP engine and every
matched request reaches the controller as a ``RequestContext``.

Basic usage::

    from waypoint import RequestContext, Router

    router = Router()

    def get_kitten(ctx: RequestContext) -> None:
        ctx.write_response({"id": ctx.route_var("id")})

    kittens = router.sub_router_for_path("/kittens")
    kittens.get("/{id}", get_kitten)

Serve it with ``waypoint run myservice:router``.
"""

__version__ = "0.1.0"
__all__ = [
    "AppConfig",
    "ConfigurationError",
    "ControllerFn",
    "DispatchError",
    "FrameworkRoute",
    "FrameworkRouter",
    "HTTPError",
    "MethodNotAllowed",
    "NotFound",
    "RequestContext",
    "Response",
    "Route",
    "Router",
    "WaypointError",
    "get_request_context",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import waypoint`` cheap while providing a flat top-level API.
    """
    if name == "Router":
        from waypoint.routing.router import Router

        return Router

    if name == "Route":
        from waypoint.routing.route import Route

        return Route

    if name in ("FrameworkRoute", "FrameworkRouter"):
        from waypoint.routing import adapter as _adapter

        return getattr(_adapter, name)

    if name in ("RequestContext", "get_request_context"):
        from waypoint import context as _ctx

        return getattr(_ctx, name)

    if name == "ControllerFn":
        from waypoint._internal.types import ControllerFn

        return ControllerFn

    if name == "AppConfig":
        from waypoint.config import AppConfig

        return AppConfig

    if name == "Response":
        from waypoint.http.response import Response

        return Response

    if name in (
        "ConfigurationError",
        "DispatchError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "WaypointError",
    ):
        from waypoint import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
