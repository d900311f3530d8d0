"""Shared type aliases used across waypoint modules."""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from waypoint.context import RequestContext

# Application handler: receives the request context, may be sync or async.
# A non-None return value is written as the response body if the
# controller did not write one itself.
ControllerFn: TypeAlias = Callable[["RequestContext"], Any]
