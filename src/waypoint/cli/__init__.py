"""Waypoint CLI: route listing and serving.

Entry point registered as ``waypoint`` in ``pyproject.toml``::

    [project.scripts]
    waypoint = "waypoint.cli:main"
"""

import argparse
import os
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``waypoint`` command."""
    parser = argparse.ArgumentParser(
        prog="waypoint",
        description="Waypoint: route registration and dispatch for HTTP APIs.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- waypoint routes --------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument("router", help="Import string (e.g. myservice:router)")

    # -- waypoint run -----------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Serve a router with uvicorn")
    run_parser.add_argument("router", help="Import string (e.g. myservice:router)")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--log-level",
        default=None,
        choices=("debug", "info", "warning", "error"),
        help="Override the configured log level",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    # Import strings resolve relative to the working directory, as with uvicorn
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())

    if args.command == "routes":
        from waypoint.cli._routes import run_routes

        run_routes(args)
    elif args.command == "run":
        from waypoint.cli._run import run_command

        run_command(args)
