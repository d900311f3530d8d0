"""Application configuration.

``AppConfig`` is a frozen dataclass built once at startup. ``from_env``
reads it from ``WAYPOINT_*`` environment variables for container
deployments.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields

from waypoint.errors import ConfigurationError

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=31337, log_level="debug")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Externally reachable URL, used when building links to this service.
    # Empty means http://localhost:{port}.
    base_url: str = ""

    # Logging
    log_level: str = "info"
    log_format: str = "text"  # "text" or "json"

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB

    @property
    def external_url(self) -> str:
        """``base_url`` or the local address derived from ``port``."""
        return self.base_url or f"http://localhost:{self.port}"

    @classmethod
    def from_env(
        cls,
        prefix: str = "WAYPOINT_",
        environ: Mapping[str, str] | None = None,
    ) -> AppConfig:
        """Build a config from environment variables.

        Each field maps to ``{prefix}{FIELD_NAME}`` (``WAYPOINT_PORT``,
        ``WAYPOINT_LOG_LEVEL``, ...). Unset variables keep their defaults.

        Raises:
            ConfigurationError: If a value cannot be converted to the
                field's type.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for f in fields(cls):
            key = f"{prefix}{f.name.upper()}"
            if key not in env:
                continue
            raw = env[key].strip()
            if f.type in (bool, "bool"):
                values[f.name] = _parse_bool(key, raw)
            elif f.type in (int, "int"):
                try:
                    values[f.name] = int(raw)
                except ValueError:
                    msg = f"{key} must be an integer, got {raw!r}"
                    raise ConfigurationError(msg) from None
            else:
                values[f.name] = raw

        config = cls(**values)
        if config.log_format not in ("text", "json"):
            msg = f"{prefix}LOG_FORMAT must be 'text' or 'json', got {config.log_format!r}"
            raise ConfigurationError(msg)
        return config


def _parse_bool(key: str, raw: str) -> bool:
    value = raw.lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    msg = f"{key} must be a boolean, got {raw!r}"
    raise ConfigurationError(msg)
