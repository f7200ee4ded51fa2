"""
HTTP middleware — fault recovery and request logging.

Pure ASGI middleware; order matters. The app factory installs
RecoveryMiddleware outermost, then RequestLoggingMiddleware, so a request
whose handler raises is logged by the recovery line, not the request line.
"""

from __future__ import annotations

import time
from typing import Any

from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from backend_api.api_logging import get_logger
from backend_api.api_server.interceptor import StatusRecorder

INTERNAL_ERROR_STATUS = 500
INTERNAL_ERROR_BODY = "Internal Server Error"


class RecoveryMiddleware:
    """
    Convert an unhandled exception during request handling into a 500.

    The exception is logged and never propagates to the server. If the
    response had already started, nothing more is sent.
    """

    def __init__(self, app: ASGIApp, logger: Any = None) -> None:
        self.app = app
        self.logger = logger or get_logger("http")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        recorder = StatusRecorder(send)
        try:
            await self.app(scope, receive, recorder)
        except Exception as e:
            self.logger.error(
                "panic_recovered",
                method=scope.get("method"),
                path=scope.get("path"),
                status=recorder.status_code if recorder.started else INTERNAL_ERROR_STATUS,
                response_started=recorder.started,
                error=repr(e),
                exc_info=True,
            )
            if recorder.started:
                return
            response = PlainTextResponse(INTERNAL_ERROR_BODY, status_code=INTERNAL_ERROR_STATUS)
            await response(scope, receive, send)


class RequestLoggingMiddleware:
    """Log method, path, status and duration once the inner app returns."""

    def __init__(self, app: ASGIApp, logger: Any = None) -> None:
        self.app = app
        self.logger = logger or get_logger("http")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        recorder = StatusRecorder(send)
        # Exceptions propagate to RecoveryMiddleware; no log line on that path
        await self.app(scope, receive, recorder)
        self.logger.info(
            "http_request",
            method=scope["method"],
            path=scope["path"],
            status=recorder.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 3),
        )
