"""Serving: the engine's raw response sink, error rendering, logging
setup, and the uvicorn bootstrap.
"""

__all__ = ["configure_logging", "run_server"]


def __getattr__(name: str) -> object:
    if name == "configure_logging":
        from waypoint.server.logs import configure_logging

        return configure_logging

    if name == "run_server":
        from waypoint.server.run import run_server

        return run_server

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
