"""Framework adapter protocols.

The contract any HTTP engine must satisfy for ``Route`` and ``Router``
to drive it. ``Route``/``Router`` only ever talk to these protocols, so
the bundled trie engine can be swapped for another without touching
them or the application's controllers.

A conforming engine:

- accepts ``new_route(method, path, handler)`` during setup, raising
  ``ConfigurationError`` for malformed patterns instead of degrading;
- on a matching request, attaches the path variables to the
  ``Request`` and awaits ``handler(raw_response, request)``;
- is an ASGI application, so the root router can be served directly.

``new_route`` mutates the engine's route table. It is only called
during setup, never concurrently with dispatch.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol, TypeAlias, runtime_checkable

from waypoint._internal.asgi import Receive, Scope, Send
from waypoint.http.request import Request


@runtime_checkable
class RawResponse(Protocol):
    """Single-shot response sink handed to a route by the engine."""

    @property
    def started(self) -> bool:
        """True once ``send`` has been called."""
        ...

    async def send(
        self,
        status: int,
        headers: Sequence[tuple[str, str]],
        body: bytes,
    ) -> None: ...


# Low-level dispatch target registered with the engine
RawHandler: TypeAlias = Callable[[RawResponse, Request], Awaitable[None]]


@runtime_checkable
class FrameworkRoute(Protocol):
    """Handle returned by ``FrameworkRouter.new_route``."""

    def route_vars(self, request: Request) -> dict[str, str]:
        """Named path-variable bindings of a request matched to this route.

        Returns an empty dict when the pattern has no placeholders.
        Never raises.
        """
        ...


@runtime_checkable
class FrameworkRouter(Protocol):
    """The engine side of the adapter boundary."""

    def new_route(self, method: str, path: str, handler: RawHandler) -> FrameworkRoute:
        """Register *handler* for *method* + *path* and return its handle."""
        ...

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI entry point."""
        ...
