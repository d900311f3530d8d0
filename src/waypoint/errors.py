"""Waypoint exception hierarchy.

Shared by the routing core, the bundled engine, and the CLI so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class WaypointError(Exception):
    """Base for all waypoint-specific errors."""


class ConfigurationError(WaypointError):
    """Raised during setup when a route table cannot be built.

    Malformed path patterns, duplicate registrations, a second
    ``register()`` on the same route, and registration after the engine
    has started serving all end up here. Startup must abort.
    """


class DispatchError(WaypointError):
    """A programming error detected while dispatching a request."""


class UnregisteredRouteError(DispatchError):
    """Route variables were requested from a route that was never registered."""


class MissingControllerError(DispatchError):
    """A request reached a route that has no controller function."""


@dataclass(frozen=True, slots=True)
class HTTPError(WaypointError):
    """An error that maps directly to an HTTP status code.

    Raised by the engine or by controllers. The engine catches these and
    renders them as a JSON error body.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: a route exists for the path but not for this HTTP method.

    Carries an ``Allow`` header listing the registered methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )


class PayloadTooLarge(HTTPError):  # noqa: N818
    """413: the declared request body exceeds the configured limit."""

    def __init__(self, limit: int) -> None:
        super().__init__(status=413, detail=f"Request body exceeds {limit} bytes")
