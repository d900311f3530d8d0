"""``waypoint run``: serve a router with uvicorn.

Setup errors raised while building the route table end the process
with a diagnostic and exit status 1 before anything binds a port.
"""

import argparse
import sys
from dataclasses import replace

from waypoint.cli._resolve import resolve_router
from waypoint.errors import ConfigurationError


def run_command(args: argparse.Namespace) -> None:
    """Resolve ``args.router`` and start serving it."""
    try:
        router = resolve_router(args.router)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    config = router.config
    if args.log_level:
        config = replace(config, log_level=args.log_level)

    from waypoint.server.run import run_server

    run_server(router, config, host=args.host, port=args.port)
