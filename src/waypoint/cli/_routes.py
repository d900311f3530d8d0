"""``waypoint routes``: list registered routes.

Prints METHOD, PATH, STATUS and HANDLER for every route reachable from
the resolved router, sub-routers included.
"""

import argparse
import sys

from waypoint.cli._resolve import resolve_router
from waypoint.errors import ConfigurationError


def _handler_name(fn: object) -> str:
    if fn is None:
        return "-"
    return getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or repr(fn)


def run_routes(args: argparse.Namespace) -> None:
    """Resolve ``args.router`` and print its route table."""
    try:
        router = resolve_router(args.router)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = list(router.walk_routes())
    if not routes:
        print("No routes registered.")
        return

    rows = [
        (route.method, route.full_path, str(route.default_status), _handler_name(route.controller_fn))
        for route in routes
    ]
    headers = ("METHOD", "PATH", "STATUS", "HANDLER")
    widths = [max(len(h), *(len(r[i]) for r in rows)) for i, h in enumerate(headers[:3])]

    fmt = f"{{:<{widths[0]}}}  {{:<{widths[1]}}}  {{:<{widths[2]}}}  {{}}"
    print(fmt.format(*headers))
    print("-" * min(sum(widths) + 6 + max(len(r[3]) for r in rows), 80))
    for row in rows:
        print(fmt.format(*row))
