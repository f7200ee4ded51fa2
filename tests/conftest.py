"""
Pytest fixtures for Backend API tests. Loggers write to a LogCapture so tests
can assert on structured log entries.
"""

from __future__ import annotations

import logging

import pytest
import structlog
from structlog.testing import LogCapture

from backend_api.config import Settings


@pytest.fixture
def log_capture():
    return LogCapture()


@pytest.fixture
def capture_logger(log_capture):
    """Logger whose entries land in log_capture.entries instead of stdout."""
    return structlog.wrap_logger(
        None,
        processors=[log_capture],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
    )


@pytest.fixture
def settings():
    """Settings bound to loopback on an ephemeral port with a short drain window."""
    return Settings(host="127.0.0.1", port="0", shutdown_timeout=5.0)


@pytest.fixture
def app(settings, capture_logger):
    from backend_api.api_server.server import create_app

    return create_app(settings, capture_logger)


@pytest.fixture
def client(app):
    """FastAPI TestClient over the app built with the capturing logger."""
    from fastapi.testclient import TestClient

    return TestClient(app)
