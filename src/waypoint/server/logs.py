"""Logging setup for waypoint services.

Everything logs through stdlib loggers under the ``waypoint``
namespace (``waypoint.server``, ``waypoint.routing``,
``waypoint.request``). ``configure_logging`` installs one stderr handler
in either a human-readable or a JSON-lines format.
"""

import json
import logging
import sys
import time

_TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# Attributes every LogRecord has; anything else came in through ``extra``
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, including ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str = "info", fmt: str = "text") -> logging.Handler:
    """Route ``waypoint.*`` records to stderr at *level*.

    Replaces a handler installed by an earlier call, so calling this
    twice doesn't duplicate output. Returns the installed handler.
    """
    root = logging.getLogger("waypoint")
    for handler in list(root.handlers):
        if getattr(handler, "_waypoint_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT))
    handler._waypoint_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level.upper())
    root.propagate = False
    return handler
