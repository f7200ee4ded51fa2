"""
Structured JSON logging: timestamp, level, logger name, event_type.

structlog with ISO timestamps and consistent keys for aggregation. Request
log lines carry method, path, status and duration_ms.

Uses only Python stdlib logging and structlog; no backend_api imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

# JSON output for production (LOG_FORMAT=json); human-readable otherwise
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601)."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type; keep message if present."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def configure_structlog(level: str = "INFO", fmt: str = LOG_FORMAT) -> None:
    """
    Configure structlog: JSON (or console), timestamp, level filter, stdout.

    level is a level name (Settings.log_level); unknown names fall back to INFO.
    Called with the default at import and again by run_server once settings
    are loaded.
    """
    level_value = logging.getLevelName(level.strip().upper())
    if not isinstance(level_value, int):
        level_value = logging.INFO
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
    ]
    if fmt == "json":
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
        )
    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


# One-time configuration on first import
if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given name.

        logger = get_logger("http")
        logger.info("http_request", method="GET", path="/health", status=200, duration_ms=0.4)
    Output (JSON): {"method": "GET", "path": "/health", "status": 200, "duration_ms": 0.4,
    "logger": "http", "level": "info", "timestamp": "...", "event_type": "http_request", ...}
    """
    return structlog.get_logger(name).bind(logger=name)
