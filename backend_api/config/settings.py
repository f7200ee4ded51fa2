"""
Application settings from environment variables.

- PORT: listening port (default: 8080; empty value falls back to default)
- LOG_LEVEL: log level name (default: INFO)

Timeouts are fixed and not read from the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_PORT = "8080"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_LOG_LEVEL = "INFO"

READ_TIMEOUT_SEC = 15.0
WRITE_TIMEOUT_SEC = 15.0
IDLE_TIMEOUT_SEC = 60.0
# Upper bound on draining in-flight requests after a shutdown signal
SHUTDOWN_TIMEOUT_SEC = 30.0


def get_env(key: str, default: str) -> str:
    """Return env value for key, or default when unset or blank."""
    value = (os.getenv(key) or "").strip()
    return value or default


@dataclass(frozen=True)
class Settings:
    """
    Server settings, immutable after construction.

    port is kept as a string; it is validated when the listener is bound.
    """

    port: str = DEFAULT_PORT
    host: str = DEFAULT_HOST
    read_timeout: float = READ_TIMEOUT_SEC
    write_timeout: float = WRITE_TIMEOUT_SEC
    idle_timeout: float = IDLE_TIMEOUT_SEC
    shutdown_timeout: float = SHUTDOWN_TIMEOUT_SEC
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


def get_settings() -> Settings:
    """
    Return settings loaded from the environment.

    Returns:
        Settings with port and log_level from env; timeouts at their fixed values.
    """
    return Settings(
        port=get_env("PORT", DEFAULT_PORT),
        log_level=get_env("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )
