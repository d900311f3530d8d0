"""Per-request context handed to controllers.

``Route.handle_request`` builds one ``RequestContext`` per dispatch via
``new_context_for_request``. It is the only object controllers see: the
engine's raw request and response sink stay behind it.

The context of the dispatch in progress is also published through a
``ContextVar`` so helpers deep in application code can reach it with
``get_request_context()``. ``ContextVar`` is task-local under asyncio,
so concurrent dispatches never observe each other's context.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.http.writer import ResponseWriter

if TYPE_CHECKING:
    from waypoint.routing.route import Route

_log = logging.getLogger("waypoint.request")

request_context_var: ContextVar[RequestContext] = ContextVar("waypoint_request_context")
"""The context of the current dispatch. Set by ``Route.handle_request``."""


def get_request_context() -> RequestContext:
    """Return the context of the dispatch in progress.

    Raises ``LookupError`` if called outside a dispatch.
    """
    return request_context_var.get()


class RequestContext:
    """Application-facing view of one matched request.

    Usage::

        def get_kitten(ctx: RequestContext) -> None:
            kitten_id = ctx.route_var("id")
            ctx.logger.info("looking up %s", kitten_id)
            ctx.write_response({"id": kitten_id})
    """

    __slots__ = ("_logger", "request", "route", "writer")

    def __init__(self, writer: ResponseWriter, request: Request, route: Route) -> None:
        self.writer = writer
        self.request = request
        self.route = route
        self._logger: logging.LoggerAdapter[logging.Logger] | None = None

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.path

    @property
    def default_status(self) -> int:
        """Status the response carries unless the controller overrides it."""
        return self.writer.default_status

    @property
    def route_vars(self) -> dict[str, str]:
        """Path variables of this request, as extracted by the route."""
        return self.route.route_vars(self.request)

    def route_var(self, name: str, default: str | None = None) -> str | None:
        """One path variable, or *default* when the pattern doesn't declare it."""
        return self.route_vars.get(name, default)

    @property
    def logger(self) -> logging.LoggerAdapter[logging.Logger]:
        """Logger whose records carry the method, path and route pattern."""
        if self._logger is None:
            self._logger = logging.LoggerAdapter(
                _log,
                {
                    "method": self.request.method,
                    "path": self.request.path,
                    "route": self.route.full_path,
                },
            )
        return self._logger

    async def json(self) -> Any:
        """Request body parsed as JSON."""
        return await self.request.json()

    def write_response(self, data: Any, status: int | None = None) -> None:
        """Write *data* as the response body.

        ``Response`` values are copied over (status, headers, body),
        ``str`` and ``bytes`` go out as text, anything else as JSON.
        *status* overrides the default status.
        """
        writer = self.writer
        if isinstance(data, Response):
            chosen = data.status if status is None else status
            if chosen is not None:
                writer.set_status(chosen)
            writer.set_header("content-type", data.content_type)
            for name, value in data.headers:
                if name.lower() == "content-type":
                    writer.set_header(name, value)
                else:
                    writer.add_header(name, value)
            writer.write(data.body_bytes)
        elif isinstance(data, str):
            writer.write_text(data, status)
        elif isinstance(data, bytes):
            if status is not None:
                writer.set_status(status)
            writer.write(data)
        else:
            writer.write_json(data, status)

    def __repr__(self) -> str:
        return f"<RequestContext {self.request.method} {self.request.path} route={self.route.full_path!r}>"


def new_context_for_request(writer: ResponseWriter, request: Request, route: Route) -> RequestContext:
    """Build the context for one dispatch. Never fails for a matched request."""
    return RequestContext(writer, request, route)
