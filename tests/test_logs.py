"""Tests for waypoint.server.logs."""

import json
import logging
import sys
from collections.abc import Iterator

import pytest

from waypoint.server.logs import JSONFormatter, configure_logging


@pytest.fixture
def waypoint_logger() -> Iterator[logging.Logger]:
    """Restore the ``waypoint`` logger after each test."""
    logger = logging.getLogger("waypoint")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def _record(msg: str = "hello %s", args: tuple = ("world",), **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("waypoint.request", logging.INFO, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_fields(self) -> None:
        payload = json.loads(JSONFormatter().format(_record()))
        assert payload["level"] == "info"
        assert payload["logger"] == "waypoint.request"
        assert payload["message"] == "hello world"
        assert "ts" in payload

    def test_extra_fields(self) -> None:
        payload = json.loads(JSONFormatter().format(_record(method="GET", route="/kittens/{id}")))
        assert payload["method"] == "GET"
        assert payload["route"] == "/kittens/{id}"
        assert "args" not in payload
        assert "msg" not in payload

    def test_exception(self) -> None:
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord(
                "waypoint.server", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )
        payload = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in payload["exc_info"]


class TestConfigureLogging:
    def test_installs_handler(self, waypoint_logger: logging.Logger) -> None:
        handler = configure_logging("debug", "json")
        assert handler in waypoint_logger.handlers
        assert isinstance(handler.formatter, JSONFormatter)
        assert waypoint_logger.level == logging.DEBUG
        assert waypoint_logger.propagate is False

    def test_text_format(self, waypoint_logger: logging.Logger) -> None:
        handler = configure_logging("warning")
        assert not isinstance(handler.formatter, JSONFormatter)
        assert waypoint_logger.level == logging.WARNING

    def test_second_call_replaces_handler(self, waypoint_logger: logging.Logger) -> None:
        first = configure_logging()
        second = configure_logging()
        assert first not in waypoint_logger.handlers
        assert second in waypoint_logger.handlers
