"""Serve a router with uvicorn.

The router is handed to uvicorn as a live ASGI object. uvicorn sends
the lifespan startup event before accepting connections, which freezes
the route table.
"""

import logging

from waypoint.config import AppConfig
from waypoint.routing.router import Router
from waypoint.server.logs import configure_logging

logger = logging.getLogger("waypoint.server")


def run_server(
    router: Router,
    config: AppConfig | None = None,
    *,
    host: str | None = None,
    port: int | None = None,
) -> None:
    """Configure logging and serve *router* until interrupted.

    Args:
        router: Root router. Its engine is the ASGI application.
        config: Server settings. Defaults to the router's config.
        host: Override ``config.host``.
        port: Override ``config.port``.
    """
    import uvicorn

    config = config or router.config
    configure_logging(config.log_level, config.log_format)

    _host = host or config.host
    _port = port or config.port
    routes = list(router.walk_routes())
    logger.info("Serving %d routes on http://%s:%d", len(routes), _host, _port)

    uvicorn.run(
        router,
        host=_host,
        port=_port,
        log_level=config.log_level.lower(),
        lifespan="on",
    )
