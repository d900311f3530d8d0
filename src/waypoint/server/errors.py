"""Error responses produced by the engine.

Maps ``HTTPError`` exceptions and unexpected failures to JSON error
bodies. Controllers own their own error responses; these only cover
what reaches the engine uncaught.
"""

import logging

from waypoint.errors import HTTPError
from waypoint.http.request import Request
from waypoint.http.writer import JSON_CONTENT_TYPE, encode_json
from waypoint.routing.adapter import RawResponse

logger = logging.getLogger("waypoint.server")


def error_body(status: int, detail: str) -> bytes:
    return encode_json({"error": {"status": status, "detail": detail}})


async def send_http_error(exc: HTTPError, request: Request, raw: RawResponse) -> None:
    """Render an ``HTTPError`` unless a response already went out."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    if raw.started:
        return
    headers = [("content-type", JSON_CONTENT_TYPE), *exc.headers]
    await raw.send(exc.status, headers, error_body(exc.status, exc.detail or str(exc.status)))


async def send_internal_error(
    exc: Exception,
    request: Request,
    raw: RawResponse,
    *,
    debug: bool,
) -> None:
    """Log an unexpected exception and answer 500 if nothing was sent yet."""
    logger.exception("500 %s %s", request.method, request.path)
    if raw.started:
        return
    detail = f"{type(exc).__name__}: {exc}" if debug else "Internal Server Error"
    await raw.send(500, [("content-type", JSON_CONTENT_TYPE)], error_body(500, detail))
