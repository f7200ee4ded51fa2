"""
Structured logging for Backend API.

JSON logs with timestamp, level, logger and event_type. Use get_logger() in
every module; the server passes its logger explicitly to the app and middleware.
"""

from backend_api.api_logging.logger import configure_structlog, get_logger

__all__ = ["configure_structlog", "get_logger"]
