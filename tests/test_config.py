"""Tests for AppConfig defaults and environment loading."""

import dataclasses

import pytest

from waypoint.config import AppConfig
from waypoint.errors import ConfigurationError


class TestDefaults:
    def test_values(self) -> None:
        config = AppConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 8000
        assert config.debug is False
        assert config.log_level == "info"
        assert config.log_format == "text"
        assert config.max_content_length == 16 * 1024 * 1024

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            AppConfig().port = 1  # type: ignore[misc]

    def test_external_url(self) -> None:
        assert AppConfig(port=31337).external_url == "http://localhost:31337"
        assert AppConfig(base_url="https://kittens.example").external_url == "https://kittens.example"


class TestFromEnv:
    def test_empty_environment(self) -> None:
        assert AppConfig.from_env(environ={}) == AppConfig()

    def test_typed_fields(self) -> None:
        config = AppConfig.from_env(
            environ={
                "WAYPOINT_PORT": "31337",
                "WAYPOINT_DEBUG": "yes",
                "WAYPOINT_HOST": "0.0.0.0",
                "WAYPOINT_LOG_FORMAT": "json",
                "WAYPOINT_MAX_CONTENT_LENGTH": " 1024 ",
            }
        )
        assert config.port == 31337
        assert config.debug is True
        assert config.host == "0.0.0.0"
        assert config.log_format == "json"
        assert config.max_content_length == 1024

    @pytest.mark.parametrize("value", ["0", "false", "OFF", "no", ""])
    def test_false_values(self, value: str) -> None:
        assert AppConfig.from_env(environ={"WAYPOINT_DEBUG": value}).debug is False

    def test_custom_prefix(self) -> None:
        config = AppConfig.from_env(prefix="KITTENS_", environ={"KITTENS_PORT": "9000", "WAYPOINT_PORT": "1"})
        assert config.port == 9000

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WAYPOINT_LOG_LEVEL", "debug")
        assert AppConfig.from_env().log_level == "debug"

    def test_bad_integer(self) -> None:
        with pytest.raises(ConfigurationError, match="WAYPOINT_PORT must be an integer"):
            AppConfig.from_env(environ={"WAYPOINT_PORT": "eighty"})

    def test_bad_boolean(self) -> None:
        with pytest.raises(ConfigurationError, match="WAYPOINT_DEBUG must be a boolean"):
            AppConfig.from_env(environ={"WAYPOINT_DEBUG": "maybe"})

    def test_bad_log_format(self) -> None:
        with pytest.raises(ConfigurationError, match="LOG_FORMAT"):
            AppConfig.from_env(environ={"WAYPOINT_LOG_FORMAT": "xml"})
